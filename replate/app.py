"""
Replate 后端服务 - 主应用入口
校园食堂剩余餐品的折扣领取与捐赠系统

主要功能模块：
- 餐品发布和浏览
- 学生预留与领取码核验
- 过期餐品转入公益捐赠
- 校园与员工统计
- 操作日志记录

技术栈：FastAPI + DuckDB + JWT认证
"""

import asyncio
from contextlib import asynccontextmanager, suppress
from typing import Optional

import duckdb
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from .api import api_router
from .config.settings import settings
from .core.database import DatabaseManager, db_manager
from .core.error_handler import (
    application_error_handler,
    general_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from .core.exceptions import BaseApplicationError
from .services.sweeper_service import SweeperService
from .utils.clock import Clock, local_now


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    db: DatabaseManager = app.state.db
    db.init_database()
    print("Database initialized successfully")

    sweeper_task = None
    if app.state.sweep_mode == "timer":
        sweeper = SweeperService(db, app.state.clock, mode="timer")
        sweeper_task = asyncio.create_task(sweeper.run_periodically())
        print(f"Expiry sweeper started, interval {settings.sweep_interval_seconds}s")

    yield

    if sweeper_task is not None:
        sweeper_task.cancel()
        with suppress(asyncio.CancelledError):
            await sweeper_task
        print("Expiry sweeper stopped")


def create_app(db: Optional[DatabaseManager] = None, clock: Optional[Clock] = None,
               sweep_mode: Optional[str] = None) -> FastAPI:
    """创建FastAPI应用

    Args:
        db: 数据库管理器，默认使用全局实例
        clock: 当前时间来源，默认本地时间
        sweep_mode: 过期巡检模式，默认读取配置
    """
    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description="Replate 校园剩余餐品领取系统API",
        debug=settings.debug,
        lifespan=lifespan
    )
    app.state.db = db or db_manager
    app.state.clock = clock or local_now
    app.state.sweep_mode = sweep_mode or settings.sweep_mode

    # 添加中间件
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 注册异常处理器
    app.add_exception_handler(BaseApplicationError, application_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    # 注册路由
    app.include_router(api_router, prefix=settings.api_prefix)

    # 健康检查
    @app.get("/health")
    def health_check():
        try:
            app.state.db.execute_one("SELECT 1")
            return {
                "status": "healthy",
                "version": settings.api_version,
                "database": "connected"
            }
        except (BaseApplicationError, duckdb.Error) as e:
            return {
                "status": "unhealthy",
                "version": settings.api_version,
                "database": f"error: {str(e)}"
            }

    @app.get("/")
    def root():
        return {
            "name": settings.api_title,
            "version": settings.api_version,
            "description": "Replate 校园剩余餐品领取系统API"
        }

    return app


# 应用实例
app = create_app()
