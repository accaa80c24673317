"""
过期巡检服务
根据当前时间重新计算餐品的上架状态

- 已上架但截止时间已过的餐品下架
- 已下架但截止时间被延后且仍有剩余的餐品重新上架

巡检是幂等的，可以在每次读取餐品前同步调用（inline 模式），
也可以由后台定时任务周期调用（timer 模式）。
领取记录的过期不在这里处理，而是在核验时惰性判定。
"""

import asyncio
from typing import Optional

from ..config.settings import settings
from ..core.database import DatabaseManager, db_manager
from ..core.exceptions import BaseApplicationError
from ..utils.clock import Clock, local_now


class SweeperService:
    """过期巡检服务"""

    def __init__(self, db: Optional[DatabaseManager] = None, clock: Optional[Clock] = None,
                 mode: Optional[str] = None):
        self.db = db or db_manager
        self.clock = clock or local_now
        self.mode = mode or settings.sweep_mode

    def reconcile(self) -> int:
        """
        执行一次巡检

        Returns:
            int: 本次新下架的餐品数量
        """
        now = self.clock()
        with self.db.transaction():
            deactivated = self.db.execute_query(
                """
                UPDATE food_items
                SET is_active = FALSE, updated_at = ?
                WHERE is_active AND available_until < ?
                RETURNING id
                """,
                [now, now]
            )
            self.db.execute_query(
                """
                UPDATE food_items
                SET is_active = TRUE, updated_at = ?
                WHERE NOT is_active AND available_until >= ? AND quantity_available >= 1
                """,
                [now, now]
            )
        return len(deactivated)

    def reconcile_before_read(self) -> int:
        """读取前的巡检钩子，timer 模式下由后台任务负责，这里不做处理"""
        if self.mode != "inline":
            return 0
        return self.reconcile()

    async def run_periodically(self, interval_seconds: Optional[float] = None):
        """后台定时巡检循环，随应用生命周期启动和取消"""
        interval = interval_seconds or settings.sweep_interval_seconds
        while True:
            try:
                await asyncio.to_thread(self.reconcile)
            except BaseApplicationError as e:
                # 单次失败不终止巡检，下个周期重试
                print(f"Expiry sweep failed: {e.error_code} {e.message}")
            await asyncio.sleep(interval)
