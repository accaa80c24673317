"""
用户相关数据模型
"""

from pydantic import BaseModel, Field
from typing import Optional
from enum import Enum
from .base import BaseEntity, TimestampMixin


class UserRole(str, Enum):
    """用户角色枚举"""
    STUDENT = "student"
    STAFF = "staff"      # 食堂员工
    ADMIN = "admin"


class User(BaseEntity, TimestampMixin):
    """用户完整模型"""
    id: int = Field(..., description="用户ID")
    external_id: str = Field(..., description="外部身份ID")
    role: UserRole = Field(UserRole.STUDENT, description="角色")
    email: Optional[str] = Field(None, description="邮箱")
    first_name: Optional[str] = Field(None, description="名")
    last_name: Optional[str] = Field(None, description="姓")
    profile_image_url: Optional[str] = Field(None, description="头像URL")
    student_id: Optional[str] = Field(None, description="学号")
    phone_number: Optional[str] = Field(None, description="手机号")

    @property
    def display_name(self) -> str:
        parts = [p for p in (self.first_name, self.last_name) if p]
        return " ".join(parts) or self.external_id

    @property
    def is_staff(self) -> bool:
        """员工权限（管理员同样具备）"""
        return self.role in (UserRole.STAFF.value, UserRole.ADMIN.value)


class RequestIdentity(BaseModel):
    """单次请求的身份上下文，由认证层解析后显式传入各服务"""
    user_id: int
    external_id: str
    role: UserRole

    model_config = {"use_enum_values": True}

    @property
    def is_staff(self) -> bool:
        return self.role in (UserRole.STAFF.value, UserRole.ADMIN.value)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value
