"""
统计路由模块
"""

from fastapi import APIRouter, Depends

from ...core.error_handler import create_success_response
from ...core.security import require_staff
from ...models.user import RequestIdentity
from ...services import StatsService
from ..deps import get_stats_service

router = APIRouter()


@router.get("")
def get_campus_stats(stats: StatsService = Depends(get_stats_service)):
    """校园总体统计（公开）"""
    return create_success_response(stats.get_campus_stats(), "获取统计成功")


@router.get("/staff")
def get_staff_stats(identity: RequestIdentity = Depends(require_staff),
                    stats: StatsService = Depends(get_stats_service)):
    """当前员工的统计看板"""
    return create_success_response(stats.get_staff_stats(identity.user_id), "获取统计成功")
