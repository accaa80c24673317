"""
测试配置文件
提供测试所需的fixtures和配置
"""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from ..app import create_app
from ..core.database import DatabaseManager
from ..core.security import security_manager
from ..schemas.food_item import FoodItemCreateRequest
from ..schemas.user import LoginRequest
from ..services import (
    CatalogService,
    ClaimService,
    DonationService,
    StatsService,
    SweeperService,
    UserService,
)


class FakeClock:
    """可手动推进的时钟"""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 3, 1, 12, 0, 0))


@pytest.fixture
def test_db():
    """测试数据库（内存）"""
    db = DatabaseManager(":memory:")
    db.init_database()
    yield db
    db.close()


@pytest.fixture
def sweeper(test_db, clock):
    return SweeperService(test_db, clock, mode="inline")


@pytest.fixture
def user_service(test_db, clock):
    return UserService(test_db, clock)


@pytest.fixture
def catalog(test_db, clock, sweeper):
    return CatalogService(test_db, clock, sweeper=sweeper, min_item_quantity=1)


@pytest.fixture
def claims(test_db, clock):
    return ClaimService(test_db, clock, reservation_window_minutes=120)


@pytest.fixture
def donations(test_db, clock, sweeper):
    return DonationService(test_db, clock, sweeper=sweeper)


@pytest.fixture
def stats(test_db, clock):
    return StatsService(test_db, clock)


@pytest.fixture
def staff_user(user_service):
    """食堂员工"""
    return user_service.upsert(LoginRequest(
        external_id="staff-001", role="staff", first_name="Canteen", last_name="Staff"
    ))


@pytest.fixture
def other_staff(user_service):
    """另一位食堂员工"""
    return user_service.upsert(LoginRequest(external_id="staff-002", role="staff"))


@pytest.fixture
def student_user(user_service):
    """学生"""
    return user_service.upsert(LoginRequest(
        external_id="student-001", role="student", first_name="Alice", student_id="S1001"
    ))


@pytest.fixture
def other_student(user_service):
    """另一位学生"""
    return user_service.upsert(LoginRequest(external_id="student-002", role="student"))


@pytest.fixture
def admin_user(user_service):
    """管理员"""
    return user_service.upsert(LoginRequest(external_id="admin-001", role="admin"))


@pytest.fixture
def make_item(catalog, staff_user, clock):
    """发布餐品的工厂函数，默认2小时后截止"""

    def _make(quantity=5, hours=2, name="Veg Curry", canteen="North Canteen",
              original="10.00", discounted="6.00", staff=None):
        return catalog.create(FoodItemCreateRequest(
            name=name,
            canteen_name=canteen,
            quantity_available=quantity,
            original_price=Decimal(original),
            discounted_price=Decimal(discounted),
            available_until=clock.now + timedelta(hours=hours),
        ), staff_id=(staff or staff_user).id)

    return _make


@pytest.fixture
def app_instance(test_db, clock):
    """测试应用"""
    return create_app(db=test_db, clock=clock, sweep_mode="inline")


@pytest.fixture
def client(app_instance):
    """测试客户端"""
    return TestClient(app_instance)


def bearer(user) -> dict:
    return {"Authorization": f"Bearer {security_manager.create_jwt_token(user)}"}


@pytest.fixture
def staff_headers(staff_user):
    return bearer(staff_user)


@pytest.fixture
def student_headers(student_user):
    return bearer(student_user)


@pytest.fixture
def admin_headers(admin_user):
    return bearer(admin_user)
