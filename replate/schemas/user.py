"""
用户与认证相关的请求/响应模式
"""

from pydantic import BaseModel, Field
from typing import Optional
from .common import StrictRequest
from ..models.user import User, UserRole


class LoginRequest(StrictRequest):
    """登录请求：由上游身份提供方给出的可信身份信息"""
    external_id: str = Field(..., min_length=1, max_length=255, description="外部身份ID")
    role: UserRole = Field(UserRole.STUDENT, description="角色")
    email: Optional[str] = Field(None, max_length=255, description="邮箱")
    first_name: Optional[str] = Field(None, max_length=100, description="名")
    last_name: Optional[str] = Field(None, max_length=100, description="姓")
    profile_image_url: Optional[str] = Field(None, description="头像URL")
    student_id: Optional[str] = Field(None, max_length=64, description="学号")
    phone_number: Optional[str] = Field(None, max_length=64, description="手机号")


class LoginResponse(BaseModel):
    """登录响应"""
    token: str = Field(description="JWT访问令牌")
    token_type: str = Field("Bearer", description="令牌类型")
    user: User = Field(description="当前用户")


class UserUpdateRequest(StrictRequest):
    """用户资料更新请求，角色不可自行修改"""
    first_name: Optional[str] = Field(None, max_length=100, description="名")
    last_name: Optional[str] = Field(None, max_length=100, description="姓")
    profile_image_url: Optional[str] = Field(None, description="头像URL")
    student_id: Optional[str] = Field(None, max_length=64, description="学号")
    phone_number: Optional[str] = Field(None, max_length=64, description="手机号")
