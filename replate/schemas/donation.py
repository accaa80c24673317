"""
捐赠相关的请求模式
"""

from pydantic import BaseModel, Field
from typing import Optional
from .common import StrictRequest


class DonationReserveRequest(StrictRequest):
    """公益组织预约请求

    三项信息在服务层校验非空，缺失时返回 VALIDATION_ERROR
    """
    ngo_name: Optional[str] = Field(None, max_length=255, description="公益组织名称")
    ngo_contact_person: Optional[str] = Field(None, max_length=255, description="联系人")
    ngo_phone_number: Optional[str] = Field(None, max_length=64, description="联系电话")


class TransferResult(BaseModel):
    transferred_count: int = Field(..., description="本次新转入捐赠的餐品数")
