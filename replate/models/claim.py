"""
领取记录相关数据模型
"""

from pydantic import Field
from datetime import datetime
from typing import Optional
from enum import Enum
from .base import BaseEntity
from .user import User
from .food_item import FoodItem


class ClaimStatus(str, Enum):
    """领取状态枚举

    reserved 为唯一的非终态，只能转换一次到其余任一状态
    """
    RESERVED = "reserved"     # 已预留
    CLAIMED = "claimed"       # 已领取
    EXPIRED = "expired"       # 已过期
    CANCELLED = "cancelled"   # 已取消


TERMINAL_CLAIM_STATUSES = frozenset({
    ClaimStatus.CLAIMED.value,
    ClaimStatus.EXPIRED.value,
    ClaimStatus.CANCELLED.value,
})


class FoodClaim(BaseEntity):
    """领取记录完整模型"""
    id: int = Field(..., description="领取记录ID")
    user_id: int = Field(..., description="学生用户ID")
    food_item_id: int = Field(..., description="餐品ID")
    quantity_claimed: int = Field(..., ge=1, description="领取数量")
    claim_code: str = Field(..., description="领取码")
    status: ClaimStatus = Field(..., description="状态")
    expires_at: datetime = Field(..., description="预留过期时间")
    claimed_at: Optional[datetime] = Field(None, description="领取时间")
    created_at: Optional[datetime] = Field(None, description="创建时间")

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_CLAIM_STATUSES


class FoodClaimWithDetails(FoodClaim):
    """附带学生和餐品信息的领取记录"""
    user: Optional[User] = Field(None, description="学生")
    food_item: Optional[FoodItem] = Field(None, description="餐品")
