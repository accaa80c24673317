"""
领取相关的请求/响应模式
"""

from pydantic import BaseModel, Field
from .common import StrictRequest
from ..models.claim import FoodClaimWithDetails


class ClaimCreateRequest(StrictRequest):
    """预留请求"""
    food_item_id: int = Field(..., description="餐品ID")
    quantity_claimed: int = Field(1, ge=1, le=20, description="数量")


class ClaimVerifyRequest(StrictRequest):
    """员工核验领取码请求"""
    claim_code: str = Field(..., min_length=1, max_length=64, description="领取码")


class ClaimVerifyResponse(BaseModel):
    """核验结果，附带学生和餐品信息供员工核对"""
    valid: bool = Field(True, description="领取码是否有效")
    claim: FoodClaimWithDetails = Field(..., description="领取记录")
