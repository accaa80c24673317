from pydantic_settings import BaseSettings
from typing import Literal


class Settings(BaseSettings):
    # 数据库配置
    database_url: str = "duckdb://./data/replate.duckdb"

    # JWT配置
    jwt_secret_key: str = "your-secret-key"
    jwt_algorithm: str = "HS256"
    jwt_expire_hours: int = 24 * 7  # 7天

    # API配置
    api_title: str = "Replate API"
    api_version: str = "1.0.0"
    api_prefix: str = "/api/v1"

    # 领取流程配置
    reservation_window_minutes: int = 120  # 预留有效期2小时
    min_item_quantity: int = 1
    claim_code_length: int = 7
    claim_code_max_attempts: int = 5

    # 统计配置
    active_student_window_days: int = 30

    # 过期巡检：inline 为读取前同步执行，timer 为后台定时执行
    sweep_mode: Literal["inline", "timer"] = "inline"
    sweep_interval_seconds: int = 60

    # 演示登录与演示数据
    demo_login_enabled: bool = True

    # 开发模式
    debug: bool = False

    class Config:
        env_file = ".env"
        env_prefix = "REPLATE_"
        case_sensitive = False


# 全局设置实例
settings = Settings()
