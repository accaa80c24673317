"""
捐赠管理路由模块
"""

from fastapi import APIRouter, Depends, Query

from ...core.error_handler import create_success_response
from ...core.security import require_staff
from ...models.user import RequestIdentity
from ...schemas.donation import DonationReserveRequest, TransferResult
from ...services import DonationService
from ..deps import get_donation_service

router = APIRouter()


@router.get("")
def list_donations(show_all: bool = Query(False, alias="all"),
                   identity: RequestIdentity = Depends(require_staff),
                   donations: DonationService = Depends(get_donation_service)):
    """获取捐赠记录，默认只看自己发布的餐品"""
    if show_all:
        data = donations.list_all()
    else:
        data = donations.list_by_creator(identity.user_id)
    return create_success_response(data, "获取捐赠记录成功")


@router.post("/transfer-expired")
def transfer_expired(identity: RequestIdentity = Depends(require_staff),
                     donations: DonationService = Depends(get_donation_service)):
    """把过期未领完的餐品转入捐赠"""
    count = donations.transfer_expired(actor_id=identity.user_id)
    return create_success_response(TransferResult(transferred_count=count), "转入捐赠完成")


@router.put("/{donation_id}/reserve")
def reserve_donation(donation_id: int, req: DonationReserveRequest,
                     identity: RequestIdentity = Depends(require_staff),
                     donations: DonationService = Depends(get_donation_service)):
    """登记公益组织预约"""
    donation = donations.reserve_for_ngo(donation_id, req, actor_id=identity.user_id)
    return create_success_response(donation, "捐赠已预约")


@router.put("/{donation_id}/collect")
def collect_donation(donation_id: int,
                     identity: RequestIdentity = Depends(require_staff),
                     donations: DonationService = Depends(get_donation_service)):
    """标记捐赠已取走"""
    donation = donations.mark_collected(donation_id, actor_id=identity.user_id)
    return create_success_response(donation, "捐赠已取走")
