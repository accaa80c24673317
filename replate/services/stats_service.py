"""
统计服务
只读汇总领取记录和餐品数据，供首页和员工看板展示
"""

from datetime import timedelta
from decimal import Decimal
from typing import Optional

from ..config.settings import settings
from ..core.database import DatabaseManager, db_manager
from ..models.claim import ClaimStatus
from ..models.donation import DonationStatus
from ..schemas.stats import CampusStats, StaffStats
from ..utils.clock import Clock, local_now


class StatsService:
    """统计服务"""

    def __init__(self, db: Optional[DatabaseManager] = None, clock: Optional[Clock] = None):
        self.db = db or db_manager
        self.clock = clock or local_now

    def get_campus_stats(self) -> CampusStats:
        """校园总体统计，无数据时各项为0"""
        return CampusStats(**self._collect(creator_id=None))

    def get_staff_stats(self, staff_id: int) -> StaffStats:
        """某员工名下餐品的统计，附带餐品和捐赠状态计数"""
        stats = self._collect(creator_id=staff_id)

        items_row = self.db.execute_one(
            """
            SELECT COUNT(*), COUNT(CASE WHEN is_active THEN 1 END)
            FROM food_items WHERE created_by = ?
            """,
            [staff_id]
        )
        reserved_row = self.db.execute_one(
            """
            SELECT COUNT(*)
            FROM food_claims c JOIN food_items f ON c.food_item_id = f.id
            WHERE f.created_by = ? AND c.status = ? AND c.expires_at >= ?
            """,
            [staff_id, ClaimStatus.RESERVED.value, self.clock()]
        )
        donation_rows = self.db.execute_query(
            """
            SELECT d.status, COUNT(*)
            FROM food_donations d JOIN food_items f ON d.food_item_id = f.id
            WHERE f.created_by = ?
            GROUP BY d.status
            """,
            [staff_id]
        )
        by_status = {status: count for status, count in donation_rows}

        return StaffStats(
            **stats,
            items_listed=items_row[0] or 0,
            active_items=items_row[1] or 0,
            reserved_claims=reserved_row[0] or 0,
            donations_available=by_status.get(DonationStatus.AVAILABLE.value, 0),
            donations_reserved=by_status.get(DonationStatus.RESERVED_FOR_NGO.value, 0),
            donations_collected=by_status.get(DonationStatus.COLLECTED.value, 0),
        )

    def _collect(self, creator_id: Optional[int]) -> dict:
        creator_filter = ""
        creator_params = []
        if creator_id is not None:
            creator_filter = " AND f.created_by = ?"
            creator_params = [creator_id]

        claimed = ClaimStatus.CLAIMED.value
        since = self.clock() - timedelta(days=settings.active_student_window_days)

        meals_saved = self.db.execute_one(
            f"""
            SELECT COUNT(*)
            FROM food_claims c LEFT JOIN food_items f ON c.food_item_id = f.id
            WHERE c.status = ?{creator_filter}
            """,
            [claimed] + creator_params
        )[0]

        active_students = self.db.execute_one(
            f"""
            SELECT COUNT(DISTINCT c.user_id)
            FROM food_claims c LEFT JOIN food_items f ON c.food_item_id = f.id
            WHERE c.created_at >= ?{creator_filter}
            """,
            [since] + creator_params
        )[0]

        partner_canteens = self.db.execute_one(
            f"SELECT COUNT(DISTINCT f.canteen_name) FROM food_items f WHERE f.is_active{creator_filter}",
            creator_params
        )[0]

        savings = self.db.execute_one(
            f"""
            SELECT SUM((f.original_price - f.discounted_price) * c.quantity_claimed)
            FROM food_claims c LEFT JOIN food_items f ON c.food_item_id = f.id
            WHERE c.status = ?{creator_filter}
            """,
            [claimed] + creator_params
        )[0]

        return {
            "total_meals_saved": meals_saved or 0,
            "active_students": active_students or 0,
            "partner_canteens": partner_canteens or 0,
            "total_savings": Decimal(savings) if savings is not None else Decimal("0"),
        }
