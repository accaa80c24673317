"""
捐赠相关数据模型
"""

from pydantic import Field
from datetime import datetime
from typing import Optional
from enum import Enum
from .base import BaseEntity, TimestampMixin
from .food_item import FoodItem


class DonationStatus(str, Enum):
    """捐赠状态枚举，按 available → reserved_for_ngo → collected 顺序推进"""
    AVAILABLE = "available"
    RESERVED_FOR_NGO = "reserved_for_ngo"
    COLLECTED = "collected"


class FoodDonation(BaseEntity, TimestampMixin):
    """捐赠记录完整模型"""
    id: int = Field(..., description="捐赠记录ID")
    food_item_id: int = Field(..., description="餐品ID")
    quantity_donated: int = Field(..., description="捐赠数量")
    status: DonationStatus = Field(..., description="状态")
    ngo_name: Optional[str] = Field(None, description="公益组织名称")
    ngo_contact_person: Optional[str] = Field(None, description="联系人")
    ngo_phone_number: Optional[str] = Field(None, description="联系电话")
    donated_at: Optional[datetime] = Field(None, description="转入捐赠时间")
    reserved_at: Optional[datetime] = Field(None, description="公益组织预约时间")
    collected_at: Optional[datetime] = Field(None, description="取走时间")


class FoodDonationWithItem(FoodDonation):
    """附带餐品信息的捐赠记录"""
    food_item: Optional[FoodItem] = Field(None, description="餐品")
