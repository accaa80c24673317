"""
API routes and endpoints.
"""

from fastapi import APIRouter
from .v1 import auth, claims, demo, donations, food_items, logs, stats, users

api_router = APIRouter()

# 包含所有v1路由
api_router.include_router(auth.router, prefix="/auth", tags=["认证"])
api_router.include_router(food_items.router, prefix="/food-items", tags=["餐品"])
api_router.include_router(claims.router, prefix="/food-claims", tags=["领取"])
api_router.include_router(donations.router, prefix="/donations", tags=["捐赠"])
api_router.include_router(stats.router, prefix="/stats", tags=["统计"])
api_router.include_router(users.router, prefix="/users", tags=["用户"])
api_router.include_router(logs.router, prefix="/logs", tags=["日志"])
api_router.include_router(demo.router, prefix="/demo", tags=["演示"])
