"""
领取管理路由模块
学生预留和取消，员工核验领取码并完成领取
"""

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from ...core.error_handler import create_success_response
from ...core.exceptions import InvalidClaimCodeError
from ...core.security import get_current_identity, require_staff, require_student
from ...models.claim import FoodClaimWithDetails
from ...models.user import RequestIdentity
from ...schemas.claim import ClaimCreateRequest, ClaimVerifyRequest, ClaimVerifyResponse
from ...services import ClaimService
from ...utils.qr import render_qr_png
from ..deps import get_claim_service

router = APIRouter()


def _visible_claim(claims: ClaimService, code: str, identity: RequestIdentity) -> FoodClaimWithDetails:
    """员工可查看任意领取码，学生只能查看自己的"""
    claim = claims.get_by_code(code)
    if not identity.is_staff and claim.user_id != identity.user_id:
        raise InvalidClaimCodeError()
    return claim


@router.post("")
def reserve_food_item(req: ClaimCreateRequest,
                      identity: RequestIdentity = Depends(require_student),
                      claims: ClaimService = Depends(get_claim_service)):
    """预留餐品，返回领取码"""
    claim = claims.reserve(identity.user_id, req.food_item_id, req.quantity_claimed)
    return create_success_response(claim, "预留成功")


@router.get("/my")
def list_my_claims(identity: RequestIdentity = Depends(get_current_identity),
                   claims: ClaimService = Depends(get_claim_service)):
    """获取当前用户的领取记录"""
    return create_success_response(claims.list_by_user(identity.user_id), "获取领取记录成功")


@router.get("/active")
def list_active_reservations(identity: RequestIdentity = Depends(require_staff),
                             claims: ClaimService = Depends(get_claim_service)):
    """获取所有未过期的预留"""
    return create_success_response(claims.list_active_reservations(), "获取预留列表成功")


@router.get("/code/{code}")
def get_claim_by_code(code: str,
                      identity: RequestIdentity = Depends(get_current_identity),
                      claims: ClaimService = Depends(get_claim_service)):
    """按领取码查询领取记录"""
    return create_success_response(_visible_claim(claims, code, identity), "获取领取记录成功")


@router.get("/code/{code}/qr")
def get_claim_qr(code: str,
                 identity: RequestIdentity = Depends(get_current_identity),
                 claims: ClaimService = Depends(get_claim_service)):
    """领取码二维码（PNG）"""
    claim = _visible_claim(claims, code, identity)
    return Response(content=render_qr_png(claim.claim_code), media_type="image/png")


@router.post("/verify")
def verify_claim(req: ClaimVerifyRequest,
                 identity: RequestIdentity = Depends(require_staff),
                 claims: ClaimService = Depends(get_claim_service)):
    """员工核验领取码"""
    claim = claims.verify(req.claim_code)
    return create_success_response(ClaimVerifyResponse(valid=True, claim=claim), "领取码有效")


@router.post("/{claim_id}/complete")
def complete_claim(claim_id: int,
                   identity: RequestIdentity = Depends(require_staff),
                   claims: ClaimService = Depends(get_claim_service)):
    """员工完成领取"""
    claim = claims.complete(claim_id, actor_id=identity.user_id)
    return create_success_response(claim, "领取完成")


@router.put("/code/{code}/claim")
def complete_claim_by_code(code: str,
                           identity: RequestIdentity = Depends(require_staff),
                           claims: ClaimService = Depends(get_claim_service)):
    """员工按领取码完成领取"""
    claim = claims.complete_by_code(code, actor_id=identity.user_id)
    return create_success_response(claim, "领取完成")


@router.post("/{claim_id}/cancel")
def cancel_claim(claim_id: int,
                 identity: RequestIdentity = Depends(require_student),
                 claims: ClaimService = Depends(get_claim_service)):
    """学生取消自己的预留"""
    claim = claims.cancel(claim_id, identity.user_id)
    return create_success_response(claim, "预留已取消")
