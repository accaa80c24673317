"""
数据库连接和管理模块
封装 DuckDB 连接、表结构初始化和事务管理

数据库表说明：
- users: 用户身份信息（学生/食堂员工/管理员）
- food_items: 食堂发布的剩余折扣餐品
- food_claims: 学生的餐品预留与领取记录
- food_donations: 过期未领餐品的捐赠跟踪
- logs: 系统操作日志
"""

import duckdb
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional
from contextlib import contextmanager
import threading

from .exceptions import BaseApplicationError, ConcurrencyError, DatabaseError
from ..config.settings import settings

# 完整的表结构定义
# 外键关系由服务层维护（DuckDB 不支持级联删除）
SCHEMA_SQL = r"""
CREATE SEQUENCE IF NOT EXISTS users_id_seq;
CREATE TABLE IF NOT EXISTS users (
  id INTEGER DEFAULT nextval('users_id_seq') PRIMARY KEY,
  external_id TEXT UNIQUE NOT NULL,
  email TEXT,
  first_name TEXT,
  last_name TEXT,
  profile_image_url TEXT,
  role TEXT CHECK(role IN ('student','staff','admin')) NOT NULL DEFAULT 'student',
  student_id TEXT,
  phone_number TEXT,
  created_at TIMESTAMP,
  updated_at TIMESTAMP
);

CREATE SEQUENCE IF NOT EXISTS food_items_id_seq;
CREATE TABLE IF NOT EXISTS food_items (
  id INTEGER DEFAULT nextval('food_items_id_seq') PRIMARY KEY,
  name TEXT NOT NULL,
  description TEXT,
  canteen_name TEXT NOT NULL,
  canteen_location TEXT,
  quantity_available INTEGER NOT NULL DEFAULT 0 CHECK(quantity_available >= 0),
  original_price DECIMAL(10,2) NOT NULL,
  discounted_price DECIMAL(10,2) NOT NULL,
  image_url TEXT,
  available_until TIMESTAMP NOT NULL,
  is_active BOOLEAN NOT NULL DEFAULT TRUE,
  created_by INTEGER NOT NULL,
  created_at TIMESTAMP,
  updated_at TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_food_items_creator ON food_items(created_by);

CREATE SEQUENCE IF NOT EXISTS food_claims_id_seq;
CREATE TABLE IF NOT EXISTS food_claims (
  id INTEGER DEFAULT nextval('food_claims_id_seq') PRIMARY KEY,
  user_id INTEGER NOT NULL,
  food_item_id INTEGER NOT NULL,
  quantity_claimed INTEGER NOT NULL DEFAULT 1 CHECK(quantity_claimed >= 1),
  claim_code TEXT UNIQUE NOT NULL,  -- 学生出示给员工的领取码
  status TEXT CHECK(status IN ('reserved','claimed','expired','cancelled')) NOT NULL DEFAULT 'reserved',
  expires_at TIMESTAMP NOT NULL,
  claimed_at TIMESTAMP,
  created_at TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_food_claims_user ON food_claims(user_id);
CREATE INDEX IF NOT EXISTS idx_food_claims_item ON food_claims(food_item_id);

CREATE SEQUENCE IF NOT EXISTS food_donations_id_seq;
CREATE TABLE IF NOT EXISTS food_donations (
  id INTEGER DEFAULT nextval('food_donations_id_seq') PRIMARY KEY,
  food_item_id INTEGER UNIQUE NOT NULL,  -- 每个餐品最多一条捐赠记录
  quantity_donated INTEGER NOT NULL,
  status TEXT CHECK(status IN ('available','reserved_for_ngo','collected')) NOT NULL DEFAULT 'available',
  ngo_name TEXT,
  ngo_contact_person TEXT,
  ngo_phone_number TEXT,
  donated_at TIMESTAMP,
  reserved_at TIMESTAMP,
  collected_at TIMESTAMP,
  created_at TIMESTAMP,
  updated_at TIMESTAMP
);

CREATE SEQUENCE IF NOT EXISTS logs_id_seq;
CREATE TABLE IF NOT EXISTS logs (
  log_id INTEGER DEFAULT nextval('logs_id_seq') PRIMARY KEY,
  user_id INTEGER,  -- 操作涉及的用户
  actor_id INTEGER,  -- 实际执行操作的用户
  action TEXT,
  detail_json JSON,
  created_at TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_logs_user ON logs(user_id);
CREATE INDEX IF NOT EXISTS idx_logs_actor ON logs(actor_id);
CREATE INDEX IF NOT EXISTS idx_logs_action ON logs(action);
"""


def rows_to_dicts(cursor, rows: List[tuple]) -> List[Dict[str, Any]]:
    """按游标列名把查询结果转换为字典列表"""
    columns = [col[0] for col in cursor.description]
    return [dict(zip(columns, row)) for row in rows]


def translate_error(error: duckdb.Error) -> BaseApplicationError:
    """DuckDB 异常转换为应用异常，事务写冲突对应 ConcurrencyError"""
    if "conflict" in str(error).lower():
        return ConcurrencyError(details={"reason": str(error)})
    return DatabaseError(f"Query execution failed: {error}")


class DatabaseManager:
    """数据库管理器，封装所有数据库操作

    单连接 + 可重入锁：所有读写串行执行，transaction() 可嵌套，
    内层调用直接加入外层事务。
    """

    def __init__(self, db_path: Optional[str] = None):
        self._connection: Optional[duckdb.DuckDBPyConnection] = None
        self._lock = threading.RLock()
        self._tx_depth = 0
        self.db_path = db_path or self._get_db_path_from_settings()

    def _get_db_path_from_settings(self) -> str:
        """从设置中获取数据库路径"""
        db_url = settings.database_url
        if db_url.startswith("duckdb://"):
            return db_url.replace("duckdb://", "", 1)
        return db_url

    @property
    def connection(self) -> duckdb.DuckDBPyConnection:
        """获取数据库连接"""
        with self._lock:
            if self._connection is None:
                if self.db_path != ":memory:":
                    Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
                self._connection = duckdb.connect(self.db_path)
                self._init_schema()
            return self._connection

    def _init_schema(self):
        """初始化数据库表结构"""
        try:
            self._connection.execute(SCHEMA_SQL)
        except duckdb.Error as e:
            raise DatabaseError(f"Failed to initialize schema: {e}")

    def init_database(self):
        """初始化数据库（应用启动时调用）"""
        with self._lock:
            self.connection.execute(SCHEMA_SQL)

    def close(self):
        with self._lock:
            if self._connection is not None:
                self._connection.close()
                self._connection = None

    @contextmanager
    def transaction(self) -> Generator[duckdb.DuckDBPyConnection, None, None]:
        """
        数据库事务上下文管理器

        业务异常（BaseApplicationError）回滚后原样抛出；
        DuckDB 异常回滚后转换为 DatabaseError / ConcurrencyError。
        """
        with self._lock:
            conn = self.connection
            if self._tx_depth > 0:
                # 嵌套调用：加入外层事务
                self._tx_depth += 1
                try:
                    yield conn
                finally:
                    self._tx_depth -= 1
                return

            conn.execute("BEGIN")
            self._tx_depth = 1
            try:
                yield conn
                conn.execute("COMMIT")
            except BaseApplicationError:
                self._rollback(conn)
                raise
            except duckdb.Error as e:
                # 写冲突在 COMMIT 时才报告
                self._rollback(conn)
                raise translate_error(e) from e
            except Exception:
                self._rollback(conn)
                raise
            finally:
                self._tx_depth = 0

    def _rollback(self, conn: duckdb.DuckDBPyConnection):
        try:
            conn.execute("ROLLBACK")
        except duckdb.Error:
            pass  # 事务可能已被 DuckDB 中止

    def execute_query(self, query: str, params: list = None) -> list:
        """执行查询并返回结果"""
        with self._lock:
            try:
                return self.connection.execute(query, params or []).fetchall()
            except duckdb.Error as e:
                raise translate_error(e) from e

    def execute_one(self, query: str, params: list = None) -> Optional[tuple]:
        """执行查询并返回单条结果"""
        with self._lock:
            try:
                return self.connection.execute(query, params or []).fetchone()
            except duckdb.Error as e:
                raise translate_error(e) from e

    def fetch_dicts(self, query: str, params: list = None) -> List[Dict[str, Any]]:
        """执行查询并以字典列表返回"""
        with self._lock:
            try:
                cursor = self.connection.execute(query, params or [])
                return rows_to_dicts(cursor, cursor.fetchall())
            except duckdb.Error as e:
                raise translate_error(e) from e

    def fetch_dict(self, query: str, params: list = None) -> Optional[Dict[str, Any]]:
        """执行查询并返回单条字典结果"""
        rows = self.fetch_dicts(query, params)
        return rows[0] if rows else None


# 全局数据库管理器实例
db_manager = DatabaseManager()


