"""
餐品管理路由模块
学生浏览当前可领取的餐品，员工发布和维护自己的餐品
"""

from fastapi import APIRouter, Depends

from ...core.error_handler import create_success_response
from ...core.exceptions import FoodItemNotFoundError
from ...core.security import require_staff
from ...models.user import RequestIdentity
from ...schemas.food_item import FoodItemCreateRequest, FoodItemUpdateRequest
from ...services import CatalogService
from ..deps import get_catalog_service

router = APIRouter()


def _get_owned_item(catalog: CatalogService, item_id: int, identity: RequestIdentity):
    """只有发布者可以修改或删除，其他人一律视为不存在"""
    item = catalog.get_by_id(item_id)
    if item.created_by != identity.user_id:
        raise FoodItemNotFoundError("餐品不存在或无权操作", details={"food_item_id": item_id})
    return item


@router.get("")
def list_food_items(catalog: CatalogService = Depends(get_catalog_service)):
    """获取当前可领取的餐品"""
    return create_success_response(catalog.list_active(), "获取餐品列表成功")


@router.get("/my")
def list_my_food_items(identity: RequestIdentity = Depends(require_staff),
                       catalog: CatalogService = Depends(get_catalog_service)):
    """获取当前员工发布的全部餐品"""
    return create_success_response(catalog.list_by_creator(identity.user_id), "获取餐品列表成功")


@router.get("/{item_id}")
def get_food_item(item_id: int, catalog: CatalogService = Depends(get_catalog_service)):
    """获取餐品详情"""
    return create_success_response(catalog.get_by_id(item_id), "获取餐品成功")


@router.post("")
def create_food_item(req: FoodItemCreateRequest,
                     identity: RequestIdentity = Depends(require_staff),
                     catalog: CatalogService = Depends(get_catalog_service)):
    """发布餐品"""
    item = catalog.create(req, staff_id=identity.user_id)
    return create_success_response(item, "餐品发布成功")


@router.put("/{item_id}")
def update_food_item(item_id: int, req: FoodItemUpdateRequest,
                     identity: RequestIdentity = Depends(require_staff),
                     catalog: CatalogService = Depends(get_catalog_service)):
    """修改餐品"""
    _get_owned_item(catalog, item_id, identity)
    item = catalog.update(item_id, req, actor_id=identity.user_id)
    return create_success_response(item, "餐品更新成功")


@router.delete("/{item_id}")
def delete_food_item(item_id: int,
                     identity: RequestIdentity = Depends(require_staff),
                     catalog: CatalogService = Depends(get_catalog_service)):
    """删除餐品及其领取和捐赠记录"""
    _get_owned_item(catalog, item_id, identity)
    catalog.delete(item_id, actor_id=identity.user_id)
    return create_success_response({"food_item_id": item_id}, "餐品已删除")
