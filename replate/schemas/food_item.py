"""
餐品相关的请求模式
"""

from pydantic import Field, field_validator
from datetime import datetime
from decimal import Decimal
from typing import Optional
from .common import StrictRequest
from ..utils.clock import to_local_naive


class FoodItemCreateRequest(StrictRequest):
    """餐品发布请求"""
    name: str = Field(..., min_length=1, max_length=255, description="名称")
    description: Optional[str] = Field(None, max_length=2000, description="描述")
    canteen_name: str = Field(..., min_length=1, max_length=255, description="食堂名称")
    canteen_location: Optional[str] = Field(None, max_length=255, description="食堂位置")
    quantity_available: int = Field(..., ge=0, description="数量")
    original_price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2, description="原价")
    discounted_price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2, description="折扣价")
    image_url: Optional[str] = Field(None, description="图片URL")
    available_until: datetime = Field(..., description="可领取截止时间")
    is_active: bool = Field(True, description="是否上架")

    @field_validator("available_until")
    @classmethod
    def normalize_available_until(cls, v: datetime) -> datetime:
        return to_local_naive(v)


class FoodItemUpdateRequest(StrictRequest):
    """餐品更新请求，只更新提供的字段"""
    name: Optional[str] = Field(None, min_length=1, max_length=255, description="名称")
    description: Optional[str] = Field(None, max_length=2000, description="描述")
    canteen_name: Optional[str] = Field(None, min_length=1, max_length=255, description="食堂名称")
    canteen_location: Optional[str] = Field(None, max_length=255, description="食堂位置")
    quantity_available: Optional[int] = Field(None, ge=0, description="数量")
    original_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2, description="原价")
    discounted_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2, description="折扣价")
    image_url: Optional[str] = Field(None, description="图片URL")
    available_until: Optional[datetime] = Field(None, description="可领取截止时间")
    is_active: Optional[bool] = Field(None, description="是否上架")

    @field_validator("available_until")
    @classmethod
    def normalize_available_until(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_local_naive(v) if v is not None else v
