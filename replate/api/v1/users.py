"""
用户资料路由模块
"""

from fastapi import APIRouter, Depends

from ...core.error_handler import create_success_response
from ...core.security import get_current_identity
from ...models.user import RequestIdentity
from ...schemas.user import UserUpdateRequest
from ...services import UserService
from ..deps import get_user_service

router = APIRouter()


@router.get("/me")
def get_my_profile(identity: RequestIdentity = Depends(get_current_identity),
                   users: UserService = Depends(get_user_service)):
    """获取当前用户资料"""
    return create_success_response(users.get_by_id(identity.user_id), "获取用户资料成功")


@router.put("/me")
def update_my_profile(req: UserUpdateRequest,
                      identity: RequestIdentity = Depends(get_current_identity),
                      users: UserService = Depends(get_user_service)):
    """更新当前用户资料，角色不可修改"""
    user = users.update_profile(identity.user_id, req)
    return create_success_response(user, "用户资料更新成功")
