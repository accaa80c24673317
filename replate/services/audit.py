"""
操作日志服务
所有业务写操作都在 logs 表中留下一条结构化记录
"""

import json
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..core.database import DatabaseManager


def write_log(db: DatabaseManager, action: str, user_id: Optional[int] = None,
              actor_id: Optional[int] = None, detail: Optional[Dict[str, Any]] = None,
              now: Optional[datetime] = None):
    """写入一条操作日志（在事务内调用时随事务一起提交）"""
    db.execute_query(
        "INSERT INTO logs(user_id, actor_id, action, detail_json, created_at) VALUES (?,?,?,?,?)",
        [user_id, actor_id, action,
         json.dumps(detail or {}, ensure_ascii=False, default=str),
         now or datetime.now()]
    )


class AuditLogService:
    """操作日志查询"""

    def __init__(self, db: DatabaseManager):
        self.db = db

    def list_for_user(self, user_id: int, page: int = 1, size: int = 10) -> Dict[str, Any]:
        """获取与某用户相关的日志（作为对象或执行者）"""
        return self._page(
            "WHERE user_id=? OR actor_id=?", [user_id, user_id], page, size
        )

    def list_all(self, page: int = 1, size: int = 10, action: Optional[str] = None) -> Dict[str, Any]:
        """获取系统所有日志，可按操作类型过滤"""
        if action:
            return self._page("WHERE action=?", [action], page, size)
        return self._page("", [], page, size)

    def _page(self, where: str, params: List[Any], page: int, size: int) -> Dict[str, Any]:
        offset = (page - 1) * size
        total = self.db.execute_one(f"SELECT COUNT(*) FROM logs {where}", params)[0]
        rows = self.db.fetch_dicts(
            f"""
            SELECT log_id, user_id, actor_id, action, detail_json, created_at
            FROM logs
            {where}
            ORDER BY created_at DESC, log_id DESC
            LIMIT ? OFFSET ?
            """,
            params + [size, offset]
        )
        for row in rows:
            if isinstance(row["detail_json"], str):
                row["detail"] = json.loads(row.pop("detail_json"))
            else:
                row["detail"] = row.pop("detail_json")

        return {
            "logs": rows,
            "total": total,
            "page": page,
            "size": size,
            "pages": (total + size - 1) // size
        }
