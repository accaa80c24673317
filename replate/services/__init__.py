"""
Business logic services.
Contains service layer implementations for core business operations.
"""

from .audit import AuditLogService, write_log
from .catalog_service import CatalogService
from .claim_service import ClaimService
from .demo_service import DemoService
from .donation_service import DonationService
from .stats_service import StatsService
from .sweeper_service import SweeperService
from .user_service import UserService

__all__ = [
    "AuditLogService",
    "CatalogService",
    "ClaimService",
    "DemoService",
    "DonationService",
    "StatsService",
    "SweeperService",
    "UserService",
    "write_log",
]
