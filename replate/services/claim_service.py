"""
领取服务模块
提供餐品预留、领取码核验和领取完成的核心业务逻辑

主要功能：
- 预留餐品（原子扣减剩余数量并生成领取码）
- 员工核验领取码
- 完成领取
- 学生取消预留（归还数量）
- 领取记录查询

状态流转：
- reserved → claimed   员工完成领取
- reserved → expired   超过预留有效期后在核验或查询时惰性判定
- reserved → cancelled 学生主动取消
终态之间不再转换。

业务规则：
- 剩余数量只通过单条条件 UPDATE 扣减，永不为负
- 完成领取时再次原子校验状态和有效期，重复完成会失败
"""

from datetime import timedelta
from typing import List, Optional

from ..config.settings import settings
from ..core.database import DatabaseManager, db_manager
from ..core.exceptions import (
    ClaimExpiredError,
    ClaimNotFoundError,
    ClaimWrongStateError,
    ConcurrencyError,
    FoodItemNotFoundError,
    InvalidClaimCodeError,
    NotAvailableError,
    PermissionDeniedError,
    ValidationError,
)
from ..models.claim import ClaimStatus, FoodClaimWithDetails
from ..utils.claim_code import generate_claim_code, normalize_claim_code
from ..utils.clock import Clock, local_now
from .audit import write_log
from .queries import CLAIM_DETAIL_SELECT, to_claim_with_details


class ClaimService:
    """领取服务类，封装领取记录的完整生命周期"""

    def __init__(self, db: Optional[DatabaseManager] = None, clock: Optional[Clock] = None,
                 reservation_window_minutes: Optional[int] = None):
        self.db = db or db_manager
        self.clock = clock or local_now
        self.reservation_window = timedelta(
            minutes=reservation_window_minutes or settings.reservation_window_minutes
        )

    def reserve(self, student_id: int, food_item_id: int, quantity: int = 1) -> FoodClaimWithDetails:
        """
        预留餐品

        Args:
            student_id: 学生用户ID
            food_item_id: 餐品ID
            quantity: 预留数量

        Returns:
            FoodClaimWithDetails: 新建的领取记录（状态 reserved）

        Raises:
            ValidationError: 数量小于1时
            FoodItemNotFoundError: 餐品不存在时
            NotAvailableError: 餐品已下架、已过截止时间或剩余数量不足时
        """
        if quantity < 1:
            raise ValidationError("预留数量至少为1")

        now = self.clock()
        with self.db.transaction():
            # 条件扣减：检查与扣减在同一条语句中完成
            decremented = self.db.execute_one(
                """
                UPDATE food_items
                SET quantity_available = quantity_available - ?, updated_at = ?
                WHERE id = ? AND is_active AND available_until > ? AND quantity_available >= ?
                RETURNING quantity_available
                """,
                [quantity, now, food_item_id, now, quantity]
            )
            if decremented is None:
                self._raise_not_available(food_item_id, quantity)

            claim_code = self._allocate_claim_code()
            expires_at = now + self.reservation_window
            claim_id = self.db.execute_one(
                """
                INSERT INTO food_claims(user_id, food_item_id, quantity_claimed, claim_code,
                                        status, expires_at, created_at)
                VALUES (?,?,?,?,?,?,?) RETURNING id
                """,
                [student_id, food_item_id, quantity, claim_code,
                 ClaimStatus.RESERVED.value, expires_at, now]
            )[0]

            write_log(self.db, "claim_reserve", user_id=student_id, actor_id=student_id,
                      detail={"claim_id": claim_id, "food_item_id": food_item_id,
                              "quantity": quantity, "remaining": decremented[0],
                              "expires_at": expires_at}, now=now)

        return self.get_by_id(claim_id)

    def verify(self, claim_code: str) -> FoodClaimWithDetails:
        """
        员工核验领取码

        Raises:
            InvalidClaimCodeError: 领取码不存在时
            ClaimWrongStateError: 领取记录不是 reserved 状态时
            ClaimExpiredError: 已超过预留有效期时（同时把状态置为 expired）
        """
        claim = self.get_by_code(claim_code)
        if claim.is_terminal:
            raise ClaimWrongStateError(claim.status)

        now = self.clock()
        if now > claim.expires_at:
            self._expire(claim.id, now)
            raise ClaimExpiredError(details={"claim_id": claim.id, "expires_at": claim.expires_at.isoformat()})

        return claim

    def complete(self, claim_id: int, actor_id: Optional[int] = None) -> FoodClaimWithDetails:
        """
        完成领取

        在同一条条件 UPDATE 中再次校验 reserved 状态和有效期，
        避免核验与完成之间的竞争；重复调用第二次会失败。

        Raises:
            ClaimNotFoundError: 领取记录不存在时
            ClaimWrongStateError: 状态不是 reserved 时
            ClaimExpiredError: 已超过预留有效期时
        """
        now = self.clock()
        with self.db.transaction():
            updated = self.db.execute_one(
                """
                UPDATE food_claims
                SET status = ?, claimed_at = ?
                WHERE id = ? AND status = ? AND expires_at >= ?
                RETURNING user_id, food_item_id, quantity_claimed
                """,
                [ClaimStatus.CLAIMED.value, now, claim_id, ClaimStatus.RESERVED.value, now]
            )
            if updated is not None:
                write_log(self.db, "claim_complete", user_id=updated[0], actor_id=actor_id,
                          detail={"claim_id": claim_id, "food_item_id": updated[1],
                                  "quantity": updated[2]}, now=now)

        if updated is not None:
            return self.get_by_id(claim_id)

        claim = self.get_by_id(claim_id)
        if claim.status != ClaimStatus.RESERVED.value:
            raise ClaimWrongStateError(claim.status)
        self._expire(claim_id, now)
        raise ClaimExpiredError(details={"claim_id": claim_id, "expires_at": claim.expires_at.isoformat()})

    def complete_by_code(self, claim_code: str, actor_id: Optional[int] = None) -> FoodClaimWithDetails:
        """按领取码完成领取"""
        claim = self.get_by_code(claim_code)
        return self.complete(claim.id, actor_id=actor_id)

    def cancel(self, claim_id: int, student_id: int) -> FoodClaimWithDetails:
        """
        学生取消自己的预留，预留数量归还给餐品

        Raises:
            ClaimNotFoundError: 领取记录不存在时
            PermissionDeniedError: 不是本人的领取记录时
            ClaimWrongStateError: 状态不是 reserved 时
        """
        now = self.clock()
        with self.db.transaction():
            cancelled = self.db.execute_one(
                """
                UPDATE food_claims
                SET status = ?
                WHERE id = ? AND user_id = ? AND status = ?
                RETURNING food_item_id, quantity_claimed
                """,
                [ClaimStatus.CANCELLED.value, claim_id, student_id, ClaimStatus.RESERVED.value]
            )
            if cancelled is None:
                claim = self.get_by_id(claim_id)
                if claim.user_id != student_id:
                    raise PermissionDeniedError("只能取消自己的预留")
                raise ClaimWrongStateError(claim.status)

            food_item_id, quantity = cancelled
            self.db.execute_query(
                "UPDATE food_items SET quantity_available = quantity_available + ?, updated_at = ? WHERE id = ?",
                [quantity, now, food_item_id]
            )
            write_log(self.db, "claim_cancel", user_id=student_id, actor_id=student_id,
                      detail={"claim_id": claim_id, "food_item_id": food_item_id,
                              "quantity": quantity}, now=now)

        return self.get_by_id(claim_id)

    def list_by_user(self, student_id: int) -> List[FoodClaimWithDetails]:
        """获取学生的全部领取记录（附带餐品），最新的在前"""
        self.expire_stale()
        rows = self.db.fetch_dicts(
            CLAIM_DETAIL_SELECT + " WHERE c.user_id = ? ORDER BY c.created_at DESC, c.id DESC",
            [student_id]
        )
        return [to_claim_with_details(row) for row in rows]

    def list_active_reservations(self) -> List[FoodClaimWithDetails]:
        """获取所有未过期的预留记录，最新的在前"""
        rows = self.db.fetch_dicts(
            CLAIM_DETAIL_SELECT + " WHERE c.status = ? AND c.expires_at >= ? ORDER BY c.created_at DESC, c.id DESC",
            [ClaimStatus.RESERVED.value, self.clock()]
        )
        return [to_claim_with_details(row) for row in rows]

    def expire_stale(self) -> int:
        """把所有已超过有效期的预留记录置为 expired，返回处理条数"""
        now = self.clock()
        with self.db.transaction():
            expired = self.db.execute_query(
                "UPDATE food_claims SET status = ? WHERE status = ? AND expires_at < ? RETURNING id",
                [ClaimStatus.EXPIRED.value, ClaimStatus.RESERVED.value, now]
            )
            if expired:
                write_log(self.db, "claim_expire",
                          detail={"claim_ids": [row[0] for row in expired]}, now=now)
        return len(expired)

    def get_by_id(self, claim_id: int) -> FoodClaimWithDetails:
        row = self.db.fetch_dict(CLAIM_DETAIL_SELECT + " WHERE c.id = ?", [claim_id])
        if not row:
            raise ClaimNotFoundError(details={"claim_id": claim_id})
        return to_claim_with_details(row)

    def get_by_code(self, claim_code: str) -> FoodClaimWithDetails:
        code = normalize_claim_code(claim_code or "")
        if not code:
            raise ValidationError("领取码不能为空")
        row = self.db.fetch_dict(CLAIM_DETAIL_SELECT + " WHERE c.claim_code = ?", [code])
        if not row:
            raise InvalidClaimCodeError()
        return to_claim_with_details(row)

    def _expire(self, claim_id: int, now):
        """单条预留惰性过期"""
        with self.db.transaction():
            expired = self.db.execute_one(
                "UPDATE food_claims SET status = ? WHERE id = ? AND status = ? RETURNING user_id",
                [ClaimStatus.EXPIRED.value, claim_id, ClaimStatus.RESERVED.value]
            )
            if expired is not None:
                write_log(self.db, "claim_expire", user_id=expired[0],
                          detail={"claim_ids": [claim_id]}, now=now)

    def _allocate_claim_code(self) -> str:
        """生成未被占用的领取码，冲突时重新生成"""
        for _ in range(settings.claim_code_max_attempts):
            code = generate_claim_code(settings.claim_code_length)
            taken = self.db.execute_one("SELECT 1 FROM food_claims WHERE claim_code = ?", [code])
            if taken is None:
                return code
        raise ConcurrencyError("无法生成唯一的领取码，请稍后重试")

    def _raise_not_available(self, food_item_id: int, quantity: int):
        row = self.db.fetch_dict(
            "SELECT quantity_available, is_active, available_until FROM food_items WHERE id = ?",
            [food_item_id]
        )
        if row is None:
            raise FoodItemNotFoundError(details={"food_item_id": food_item_id})
        raise NotAvailableError(details={
            "food_item_id": food_item_id,
            "requested": quantity,
            "quantity_available": row["quantity_available"],
            "is_active": row["is_active"],
            "available_until": row["available_until"].isoformat(),
        })
