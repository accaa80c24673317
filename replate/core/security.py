"""
安全相关功能
JWT 令牌的签发与解析，以及按角色划分的请求身份依赖
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..config.settings import settings
from ..models.user import RequestIdentity, User, UserRole
from ..services.user_service import UserService
from .database import DatabaseManager, db_manager
from .exceptions import AuthenticationError, PermissionDeniedError


class SecurityManager:
    """安全管理器"""

    def __init__(self, secret_key: Optional[str] = None, algorithm: Optional[str] = None,
                 expire_hours: Optional[int] = None):
        self.secret_key = secret_key or settings.jwt_secret_key
        self.algorithm = algorithm or settings.jwt_algorithm
        self.expire_hours = expire_hours or settings.jwt_expire_hours

    def create_jwt_token(self, user: User, additional_claims: Dict[str, Any] = None) -> str:
        """为用户签发JWT token，sub 为外部身份ID"""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": user.external_id,
            "role": user.role,
            "exp": now + timedelta(hours=self.expire_hours),
            "iat": now,
        }
        if additional_claims:
            payload.update(additional_claims)

        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def decode_jwt_token(self, token: str) -> Dict[str, Any]:
        """解码JWT token"""
        try:
            return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Token has expired")
        except jwt.InvalidTokenError as e:
            raise AuthenticationError(f"Invalid token: {e}")

    def get_external_id_from_token(self, token: str) -> str:
        """从token中提取外部身份ID"""
        payload = self.decode_jwt_token(token)
        external_id = payload.get("sub")
        if not external_id:
            raise AuthenticationError("Token missing subject")
        return external_id


# 全局安全管理器实例
security_manager = SecurityManager()

# 缺少 Authorization 头时不由 HTTPBearer 直接报错，统一抛出 AuthenticationError
bearer_scheme = HTTPBearer(auto_error=False)


def get_request_db(request: Request) -> DatabaseManager:
    """当前应用绑定的数据库管理器"""
    return getattr(request.app.state, "db", None) or db_manager


def resolve_identity(db: DatabaseManager, token: str) -> RequestIdentity:
    """根据token解析请求身份，用户必须已通过登录写入"""
    external_id = security_manager.get_external_id_from_token(token)
    user = UserService(db).get_by_external_id(external_id)
    if user is None:
        raise AuthenticationError("用户不存在，请重新登录")
    return RequestIdentity(user_id=user.id, external_id=user.external_id, role=user.role)


def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: DatabaseManager = Depends(get_request_db),
) -> RequestIdentity:
    """从Authorization header中解析当前请求身份"""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError()
    return resolve_identity(db, credentials.credentials)


def require_staff(identity: RequestIdentity = Depends(get_current_identity)) -> RequestIdentity:
    """食堂员工权限（管理员同样满足）"""
    if not identity.is_staff:
        raise PermissionDeniedError("需要食堂员工权限")
    return identity


def require_admin(identity: RequestIdentity = Depends(get_current_identity)) -> RequestIdentity:
    """管理员权限"""
    if not identity.is_admin:
        raise PermissionDeniedError("需要管理员权限")
    return identity


def require_student(identity: RequestIdentity = Depends(get_current_identity)) -> RequestIdentity:
    """学生权限"""
    if identity.role != UserRole.STUDENT.value:
        raise PermissionDeniedError("只有学生可以预留餐品")
    return identity
