"""
餐品目录服务
处理食堂员工发布的剩余折扣餐品的增删改查
"""

from typing import List, Optional

from ..config.settings import settings
from ..core.database import DatabaseManager, db_manager
from ..core.exceptions import FoodItemNotFoundError, ValidationError
from ..models.food_item import FoodItem, FoodItemWithCreator
from ..schemas.food_item import FoodItemCreateRequest, FoodItemUpdateRequest
from ..utils.clock import Clock, local_now
from .audit import write_log
from .queries import (
    FOOD_ITEM_COLUMNS,
    USER_COLUMNS,
    select_columns,
    to_item_with_creator,
)
from .sweeper_service import SweeperService


class CatalogService:
    """餐品目录服务"""

    def __init__(self, db: Optional[DatabaseManager] = None, clock: Optional[Clock] = None,
                 sweeper: Optional[SweeperService] = None, min_item_quantity: Optional[int] = None):
        self.db = db or db_manager
        self.clock = clock or local_now
        self.sweeper = sweeper or SweeperService(self.db, self.clock)
        self.min_item_quantity = (
            settings.min_item_quantity if min_item_quantity is None else min_item_quantity
        )

    def list_active(self) -> List[FoodItemWithCreator]:
        """获取当前可领取的餐品（附带发布者），最新发布的在前"""
        self.sweeper.reconcile_before_read()
        now = self.clock()
        rows = self.db.fetch_dicts(
            f"""
            SELECT {select_columns('f', FOOD_ITEM_COLUMNS)},
                   {select_columns('u', USER_COLUMNS, 'u')}
            FROM food_items f
            LEFT JOIN users u ON f.created_by = u.id
            WHERE f.is_active AND f.available_until > ? AND f.quantity_available >= 1
            ORDER BY f.created_at DESC, f.id DESC
            """,
            [now]
        )
        return [to_item_with_creator(row) for row in rows]

    def list_by_creator(self, staff_id: int) -> List[FoodItem]:
        """获取某员工发布的全部餐品（任意状态），最新发布的在前"""
        self.sweeper.reconcile_before_read()
        rows = self.db.fetch_dicts(
            "SELECT * FROM food_items WHERE created_by = ? ORDER BY created_at DESC, id DESC",
            [staff_id]
        )
        return [FoodItem(**row) for row in rows]

    def get_by_id(self, item_id: int) -> FoodItem:
        row = self.db.fetch_dict("SELECT * FROM food_items WHERE id = ?", [item_id])
        if not row:
            raise FoodItemNotFoundError(details={"food_item_id": item_id})
        return FoodItem(**row)

    def create(self, data: FoodItemCreateRequest, staff_id: int) -> FoodItem:
        """
        发布餐品

        Args:
            data: 已通过模式校验的餐品字段
            staff_id: 发布员工ID

        Raises:
            ValidationError: 名称/食堂为空或数量低于最小发布数量时
        """
        self._validate_quantity(data.quantity_available)
        if not data.name or not data.canteen_name:
            raise ValidationError("餐品名称和食堂名称不能为空")

        now = self.clock()
        fields = data.model_dump()
        fields["created_by"] = staff_id
        fields["created_at"] = now
        fields["updated_at"] = now

        columns = list(fields)
        placeholders = ",".join("?" * len(columns))
        with self.db.transaction():
            item_id = self.db.execute_one(
                f"INSERT INTO food_items({', '.join(columns)}) VALUES ({placeholders}) RETURNING id",
                list(fields.values())
            )[0]
            write_log(self.db, "food_item_create", actor_id=staff_id,
                      detail={"food_item_id": item_id, "name": data.name,
                              "quantity": data.quantity_available}, now=now)

        return self.get_by_id(item_id)

    def update(self, item_id: int, data: FoodItemUpdateRequest, actor_id: Optional[int] = None) -> FoodItem:
        """
        合并更新餐品字段

        权限（仅发布者可修改）由调用方负责校验
        """
        fields = data.model_dump(exclude_unset=True)
        if fields.get("quantity_available") is not None:
            self._validate_quantity(fields["quantity_available"], allow_zero=True)
        for required in ("name", "canteen_name", "available_until", "original_price",
                         "discounted_price", "quantity_available", "is_active"):
            if required in fields and fields[required] is None:
                raise ValidationError(f"{required} 不能为空")

        now = self.clock()
        with self.db.transaction():
            self.get_by_id(item_id)
            assignments = "".join(f"{k} = ?, " for k in fields)
            self.db.execute_query(
                f"UPDATE food_items SET {assignments}updated_at = ? WHERE id = ?",
                list(fields.values()) + [now, item_id]
            )
            write_log(self.db, "food_item_update", actor_id=actor_id,
                      detail={"food_item_id": item_id, "fields": sorted(fields)}, now=now)

        return self.get_by_id(item_id)

    def delete(self, item_id: int, actor_id: Optional[int] = None):
        """删除餐品，并级联删除其捐赠记录和全部领取记录（不可恢复）"""
        with self.db.transaction():
            item = self.get_by_id(item_id)
            self.db.execute_query("DELETE FROM food_donations WHERE food_item_id = ?", [item_id])
            removed_claims = self.db.execute_query(
                "DELETE FROM food_claims WHERE food_item_id = ? RETURNING id", [item_id]
            )
            self.db.execute_query("DELETE FROM food_items WHERE id = ?", [item_id])
            write_log(self.db, "food_item_delete", actor_id=actor_id,
                      detail={"food_item_id": item_id, "name": item.name,
                              "claims_removed": len(removed_claims)}, now=self.clock())

    def _validate_quantity(self, quantity: int, allow_zero: bool = False):
        if quantity < 0:
            raise ValidationError("数量不能为负数")
        if not allow_zero and quantity < self.min_item_quantity:
            raise ValidationError(
                f"发布数量至少为 {self.min_item_quantity}",
                details={"min_item_quantity": self.min_item_quantity}
            )
