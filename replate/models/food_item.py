"""
餐品相关数据模型
"""

from pydantic import Field
from datetime import datetime
from decimal import Decimal
from typing import Optional
from .base import BaseEntity, TimestampMixin
from .user import User


class FoodItem(BaseEntity, TimestampMixin):
    """餐品完整模型"""
    id: int = Field(..., description="餐品ID")
    name: str = Field(..., description="名称")
    description: Optional[str] = Field(None, description="描述")
    canteen_name: str = Field(..., description="食堂名称")
    canteen_location: Optional[str] = Field(None, description="食堂位置")
    quantity_available: int = Field(..., ge=0, description="剩余数量")
    original_price: Decimal = Field(..., description="原价")
    discounted_price: Decimal = Field(..., description="折扣价")
    image_url: Optional[str] = Field(None, description="图片URL")
    available_until: datetime = Field(..., description="可领取截止时间")
    is_active: bool = Field(True, description="是否上架")
    created_by: int = Field(..., description="发布员工ID")

    @property
    def savings_per_unit(self) -> Decimal:
        return self.original_price - self.discounted_price

    def is_available_at(self, now: datetime) -> bool:
        """是否可领取：上架、未过截止时间且至少剩余一份"""
        return self.is_active and self.available_until > now and self.quantity_available >= 1


class FoodItemWithCreator(FoodItem):
    """附带发布者信息的餐品"""
    creator: Optional[User] = Field(None, description="发布员工")
