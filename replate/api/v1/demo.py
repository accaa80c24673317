"""
演示数据路由模块
"""

from fastapi import APIRouter, Depends

from ...config.settings import settings
from ...core.error_handler import create_success_response
from ...core.exceptions import PermissionDeniedError
from ...services import DemoService
from ..deps import get_demo_service

router = APIRouter()


@router.post("/seed")
def seed_demo_data(demo: DemoService = Depends(get_demo_service)):
    """为演示员工创建示例餐品"""
    if not settings.demo_login_enabled:
        raise PermissionDeniedError("演示数据未开启")
    created = demo.seed()
    return create_success_response({"created": created}, "演示数据已就绪")
