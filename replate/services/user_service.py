"""
用户服务
处理用户身份的登录写入和资料维护
"""

from typing import Optional

from ..core.database import DatabaseManager, db_manager
from ..core.exceptions import UserNotFoundError
from ..models.user import User, UserRole
from ..schemas.user import LoginRequest, UserUpdateRequest
from ..utils.clock import Clock, local_now
from .audit import write_log


class UserService:
    """用户服务"""

    def __init__(self, db: Optional[DatabaseManager] = None, clock: Optional[Clock] = None):
        self.db = db or db_manager
        self.clock = clock or local_now

    def upsert(self, data: LoginRequest) -> User:
        """
        按外部身份ID写入用户，已存在则更新资料和角色

        Args:
            data: 来自身份提供方的可信身份信息

        Returns:
            User: 写入后的用户
        """
        now = self.clock()
        # 只覆盖本次提供的字段；未提供角色时保留原角色
        fields = data.model_dump(exclude={"external_id"}, exclude_unset=True)
        if "role" in fields:
            fields["role"] = UserRole(fields["role"]).value

        with self.db.transaction():
            existing = self.db.execute_one(
                "SELECT id FROM users WHERE external_id=?", [data.external_id]
            )
            if existing:
                user_id = existing[0]
                assignments = "".join(f"{k} = ?, " for k in fields)
                self.db.execute_query(
                    f"UPDATE users SET {assignments}updated_at = ? WHERE id = ?",
                    list(fields.values()) + [now, user_id]
                )
            else:
                fields.setdefault("role", UserRole(data.role).value)
                columns = ["external_id"] + list(fields) + ["created_at", "updated_at"]
                placeholders = ",".join("?" * len(columns))
                user_id = self.db.execute_one(
                    f"INSERT INTO users({', '.join(columns)}) VALUES ({placeholders}) RETURNING id",
                    [data.external_id] + list(fields.values()) + [now, now]
                )[0]

            write_log(self.db, "user_upsert", user_id=user_id, actor_id=user_id,
                      detail={"external_id": data.external_id, "role": fields.get("role"),
                              "created": existing is None}, now=now)

        return self.get_by_id(user_id)

    def get_by_id(self, user_id: int) -> User:
        row = self.db.fetch_dict("SELECT * FROM users WHERE id = ?", [user_id])
        if not row:
            raise UserNotFoundError()
        return User(**row)

    def get_by_external_id(self, external_id: str) -> Optional[User]:
        row = self.db.fetch_dict("SELECT * FROM users WHERE external_id = ?", [external_id])
        return User(**row) if row else None

    def update_profile(self, user_id: int, data: UserUpdateRequest) -> User:
        """更新用户资料"""
        fields = data.model_dump(exclude_unset=True)
        if not fields:
            return self.get_by_id(user_id)

        with self.db.transaction():
            self.get_by_id(user_id)
            assignments = ", ".join(f"{k} = ?" for k in fields)
            self.db.execute_query(
                f"UPDATE users SET {assignments}, updated_at = ? WHERE id = ?",
                list(fields.values()) + [self.clock(), user_id]
            )
        return self.get_by_id(user_id)
