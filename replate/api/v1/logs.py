"""
日志管理路由模块
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ...core.error_handler import create_success_response
from ...core.security import get_current_identity, require_admin
from ...models.user import RequestIdentity
from ...services import AuditLogService
from ..deps import get_audit_service

router = APIRouter()


@router.get("/my")
def get_my_logs(page: int = Query(1, ge=1), size: int = Query(10, ge=1, le=100),
                identity: RequestIdentity = Depends(get_current_identity),
                audit: AuditLogService = Depends(get_audit_service)):
    """获取当前用户相关的日志"""
    return create_success_response(audit.list_for_user(identity.user_id, page, size), "获取日志成功")


@router.get("/all")
def get_all_logs(page: int = Query(1, ge=1), size: int = Query(10, ge=1, le=100),
                 action: Optional[str] = None,
                 identity: RequestIdentity = Depends(require_admin),
                 audit: AuditLogService = Depends(get_audit_service)):
    """获取系统所有日志（管理员）"""
    return create_success_response(audit.list_all(page, size, action), "获取日志成功")
