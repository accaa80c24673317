"""
捐赠服务
把过期未领完的餐品转入捐赠流程，并跟踪公益组织的预约和取走

状态流转：available → reserved_for_ngo → collected
"""

from typing import List, Optional

from ..core.database import DatabaseManager, db_manager
from ..core.exceptions import DonationNotFoundError, DonationWrongStateError, ValidationError
from ..models.donation import DonationStatus, FoodDonationWithItem
from ..schemas.donation import DonationReserveRequest
from ..utils.clock import Clock, local_now
from .audit import write_log
from .queries import DONATION_DETAIL_SELECT, to_donation_with_item
from .sweeper_service import SweeperService


class DonationService:
    """捐赠服务"""

    def __init__(self, db: Optional[DatabaseManager] = None, clock: Optional[Clock] = None,
                 sweeper: Optional[SweeperService] = None):
        self.db = db or db_manager
        self.clock = clock or local_now
        self.sweeper = sweeper or SweeperService(self.db, self.clock)

    def transfer_expired(self, actor_id: Optional[int] = None) -> int:
        """
        把已过期且仍有剩余的餐品转入捐赠

        先执行一次巡检，再为每个尚无捐赠记录的过期餐品创建一条 available 记录。
        重复执行不会重复创建。

        Returns:
            int: 本次新建的捐赠记录数
        """
        now = self.clock()
        with self.db.transaction():
            self.sweeper.reconcile()
            created = self.db.execute_query(
                """
                INSERT INTO food_donations(food_item_id, quantity_donated, status,
                                           donated_at, created_at, updated_at)
                SELECT f.id, f.quantity_available, ?, ?, ?, ?
                FROM food_items f
                WHERE NOT f.is_active
                  AND f.available_until < ?
                  AND f.quantity_available > 0
                  AND NOT EXISTS (SELECT 1 FROM food_donations d WHERE d.food_item_id = f.id)
                RETURNING food_item_id, quantity_donated
                """,
                [DonationStatus.AVAILABLE.value, now, now, now, now]
            )
            if created:
                write_log(self.db, "donation_transfer", actor_id=actor_id,
                          detail={"items": [{"food_item_id": r[0], "quantity": r[1]} for r in created]},
                          now=now)
        return len(created)

    def reserve_for_ngo(self, donation_id: int, data: DonationReserveRequest,
                        actor_id: Optional[int] = None) -> FoodDonationWithItem:
        """
        公益组织预约捐赠

        Raises:
            ValidationError: 组织名称、联系人、电话任一为空时
            DonationNotFoundError: 捐赠记录不存在时
            DonationWrongStateError: 状态不是 available 时
        """
        missing = [
            name for name in ("ngo_name", "ngo_contact_person", "ngo_phone_number")
            if not (getattr(data, name) or "").strip()
        ]
        if missing:
            raise ValidationError("公益组织信息不完整", details={"missing_fields": missing})

        now = self.clock()
        with self.db.transaction():
            donation = self.get_by_id(donation_id)
            if donation.status != DonationStatus.AVAILABLE.value:
                raise DonationWrongStateError(donation.status, DonationStatus.AVAILABLE.value)

            self.db.execute_query(
                """
                UPDATE food_donations
                SET status = ?, ngo_name = ?, ngo_contact_person = ?, ngo_phone_number = ?,
                    reserved_at = ?, updated_at = ?
                WHERE id = ?
                """,
                [DonationStatus.RESERVED_FOR_NGO.value, data.ngo_name.strip(),
                 data.ngo_contact_person.strip(), data.ngo_phone_number.strip(),
                 now, now, donation_id]
            )
            write_log(self.db, "donation_reserve", actor_id=actor_id,
                      detail={"donation_id": donation_id, "ngo_name": data.ngo_name}, now=now)

        return self.get_by_id(donation_id)

    def mark_collected(self, donation_id: int, actor_id: Optional[int] = None) -> FoodDonationWithItem:
        """
        标记捐赠已被公益组织取走，只能从 reserved_for_ngo 状态转换

        Raises:
            DonationNotFoundError: 捐赠记录不存在时
            DonationWrongStateError: 状态不是 reserved_for_ngo 时
        """
        now = self.clock()
        with self.db.transaction():
            donation = self.get_by_id(donation_id)
            if donation.status != DonationStatus.RESERVED_FOR_NGO.value:
                raise DonationWrongStateError(donation.status, DonationStatus.RESERVED_FOR_NGO.value)

            self.db.execute_query(
                "UPDATE food_donations SET status = ?, collected_at = ?, updated_at = ? WHERE id = ?",
                [DonationStatus.COLLECTED.value, now, now, donation_id]
            )
            write_log(self.db, "donation_collect", actor_id=actor_id,
                      detail={"donation_id": donation_id}, now=now)

        return self.get_by_id(donation_id)

    def list_all(self) -> List[FoodDonationWithItem]:
        self.sweeper.reconcile_before_read()
        rows = self.db.fetch_dicts(
            DONATION_DETAIL_SELECT + " ORDER BY d.created_at DESC, d.id DESC"
        )
        return [to_donation_with_item(row) for row in rows]

    def list_by_creator(self, staff_id: int) -> List[FoodDonationWithItem]:
        """获取某员工发布的餐品所产生的捐赠记录"""
        self.sweeper.reconcile_before_read()
        rows = self.db.fetch_dicts(
            DONATION_DETAIL_SELECT + " WHERE f.created_by = ? ORDER BY d.created_at DESC, d.id DESC",
            [staff_id]
        )
        return [to_donation_with_item(row) for row in rows]

    def get_by_id(self, donation_id: int) -> FoodDonationWithItem:
        row = self.db.fetch_dict(DONATION_DETAIL_SELECT + " WHERE d.id = ?", [donation_id])
        if not row:
            raise DonationNotFoundError(details={"donation_id": donation_id})
        return to_donation_with_item(row)
