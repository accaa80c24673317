"""
统计相关的响应模式
"""

from pydantic import BaseModel, Field, PlainSerializer
from decimal import Decimal
from typing import Annotated

# 服务内部保持 Decimal 精度，输出 JSON 时为数值
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class CampusStats(BaseModel):
    """校园总体统计"""
    total_meals_saved: int = Field(0, description="已领取的领取记录数")
    active_students: int = Field(0, description="近30天有领取记录的学生数")
    partner_canteens: int = Field(0, description="有上架餐品的食堂数")
    total_savings: Money = Field(Decimal("0"), description="累计节省金额")


class StaffStats(CampusStats):
    """单个员工名下餐品的统计"""
    items_listed: int = Field(0, description="发布餐品数")
    active_items: int = Field(0, description="当前上架餐品数")
    reserved_claims: int = Field(0, description="待领取的预留数")
    donations_available: int = Field(0, description="待预约的捐赠数")
    donations_reserved: int = Field(0, description="已预约的捐赠数")
    donations_collected: int = Field(0, description="已取走的捐赠数")
