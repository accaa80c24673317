"""
时间工具
数据库中统一保存本地时区的 naive 时间
"""

from datetime import datetime
from typing import Callable

Clock = Callable[[], datetime]


def local_now() -> datetime:
    return datetime.now()


def to_local_naive(value: datetime) -> datetime:
    """带时区的时间转换为本地 naive 时间，naive 时间原样返回"""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)
