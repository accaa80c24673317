from pydantic import BaseModel, ConfigDict


class StrictRequest(BaseModel):
    """请求体基类：拒绝未声明的字段，去除字符串首尾空白"""
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)
