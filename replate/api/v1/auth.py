"""
认证路由模块
由可信身份信息登录并签发JWT，提供演示账号登录
"""

from fastapi import APIRouter, Depends

from ...config.settings import settings
from ...core.error_handler import create_success_response
from ...core.exceptions import PermissionDeniedError
from ...core.security import get_current_identity, security_manager
from ...models.user import RequestIdentity
from ...schemas.user import LoginRequest, LoginResponse
from ...services import DemoService, UserService
from ..deps import get_demo_service, get_user_service

router = APIRouter()


@router.post("/login")
def login(req: LoginRequest, users: UserService = Depends(get_user_service)):
    """用户登录：写入或更新用户并返回访问令牌"""
    user = users.upsert(req)
    token = security_manager.create_jwt_token(user)
    return create_success_response(LoginResponse(token=token, user=user), "登录成功")


@router.post("/demo-login/{role}")
def demo_login(role: str, demo: DemoService = Depends(get_demo_service)):
    """演示账号登录（student 或 staff）"""
    if not settings.demo_login_enabled:
        raise PermissionDeniedError("演示登录未开启")
    user = demo.demo_user(role)
    token = security_manager.create_jwt_token(user)
    return create_success_response(LoginResponse(token=token, user=user), "登录成功")


@router.get("/me")
def get_me(identity: RequestIdentity = Depends(get_current_identity),
           users: UserService = Depends(get_user_service)):
    """获取当前登录用户"""
    return create_success_response(users.get_by_id(identity.user_id), "获取用户信息成功")
