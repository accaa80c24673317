"""
路由依赖
按当前应用绑定的数据库和时钟构造服务实例，测试中通过 app.state 注入
"""

from fastapi import Depends, Request

from ..core.database import DatabaseManager
from ..core.security import get_request_db
from ..services import (
    AuditLogService,
    CatalogService,
    ClaimService,
    DemoService,
    DonationService,
    StatsService,
    SweeperService,
    UserService,
)
from ..utils.clock import Clock, local_now


def get_clock(request: Request) -> Clock:
    return getattr(request.app.state, "clock", None) or local_now


def get_sweeper(request: Request, db: DatabaseManager = Depends(get_request_db),
                clock: Clock = Depends(get_clock)) -> SweeperService:
    return SweeperService(db, clock, mode=getattr(request.app.state, "sweep_mode", None))


def get_user_service(db: DatabaseManager = Depends(get_request_db),
                     clock: Clock = Depends(get_clock)) -> UserService:
    return UserService(db, clock)


def get_catalog_service(db: DatabaseManager = Depends(get_request_db),
                        clock: Clock = Depends(get_clock),
                        sweeper: SweeperService = Depends(get_sweeper)) -> CatalogService:
    return CatalogService(db, clock, sweeper=sweeper)


def get_claim_service(db: DatabaseManager = Depends(get_request_db),
                      clock: Clock = Depends(get_clock)) -> ClaimService:
    return ClaimService(db, clock)


def get_donation_service(db: DatabaseManager = Depends(get_request_db),
                         clock: Clock = Depends(get_clock),
                         sweeper: SweeperService = Depends(get_sweeper)) -> DonationService:
    return DonationService(db, clock, sweeper=sweeper)


def get_stats_service(db: DatabaseManager = Depends(get_request_db),
                      clock: Clock = Depends(get_clock)) -> StatsService:
    return StatsService(db, clock)


def get_audit_service(db: DatabaseManager = Depends(get_request_db)) -> AuditLogService:
    return AuditLogService(db)


def get_demo_service(db: DatabaseManager = Depends(get_request_db),
                     clock: Clock = Depends(get_clock)) -> DemoService:
    return DemoService(db, clock)
