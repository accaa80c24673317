"""
演示数据服务
提供演示账号和示例餐品，方便本地体验完整的领取流程
"""

from datetime import timedelta
from decimal import Decimal
from typing import Optional

from ..core.database import DatabaseManager, db_manager
from ..core.exceptions import ValidationError
from ..models.user import User, UserRole
from ..schemas.food_item import FoodItemCreateRequest
from ..schemas.user import LoginRequest
from ..utils.clock import Clock, local_now
from .catalog_service import CatalogService
from .user_service import UserService

DEMO_ITEMS = [
    {
        "name": "Margherita Pizza",
        "description": "Fresh mozzarella, basil, and tomato sauce on a crispy crust",
        "canteen_name": "Main Campus Cafeteria",
        "canteen_location": "Building A, Ground Floor",
        "quantity_available": 3,
        "original_price": Decimal("250.00"),
        "discounted_price": Decimal("180.00"),
    },
    {
        "name": "Chicken Caesar Salad",
        "description": "Grilled chicken breast with romaine lettuce, parmesan, and caesar dressing",
        "canteen_name": "Student Union Food Court",
        "canteen_location": "Building B, 2nd Floor",
        "quantity_available": 5,
        "original_price": Decimal("195.00"),
        "discounted_price": Decimal("130.00"),
    },
    {
        "name": "Vegetarian Wrap",
        "description": "Mixed vegetables, hummus, and fresh herbs in a whole wheat wrap",
        "canteen_name": "Green Campus Cafe",
        "canteen_location": "Library Building, 1st Floor",
        "quantity_available": 4,
        "original_price": Decimal("165.00"),
        "discounted_price": Decimal("115.00"),
    },
]

DEMO_ITEM_HOURS = 6


def demo_external_id(role: str) -> str:
    return f"demo-{role}-main"


class DemoService:
    """演示账号与示例数据"""

    def __init__(self, db: Optional[DatabaseManager] = None, clock: Optional[Clock] = None):
        self.db = db or db_manager
        self.clock = clock or local_now
        self.users = UserService(self.db, self.clock)
        self.catalog = CatalogService(self.db, self.clock)

    def demo_user(self, role: str) -> User:
        """创建或复用演示账号，仅支持学生和员工"""
        if role not in (UserRole.STUDENT.value, UserRole.STAFF.value):
            raise ValidationError("演示角色只能是 student 或 staff", details={"role": role})

        is_staff = role == UserRole.STAFF.value
        return self.users.upsert(LoginRequest(
            external_id=demo_external_id(role),
            role=role,
            email=f"{role}-main@demo.edu",
            first_name="Demo" if is_staff else "Student",
            last_name="Staff" if is_staff else "Demo",
            student_id=None if is_staff else "STU123456",
            phone_number="+1234567890",
        ))

    def seed(self) -> int:
        """
        为演示员工创建示例餐品

        Returns:
            int: 新建的餐品数量；演示员工已有餐品时不重复创建，返回0
        """
        staff = self.demo_user(UserRole.STAFF.value)
        if self.catalog.list_by_creator(staff.id):
            return 0

        available_until = self.clock() + timedelta(hours=DEMO_ITEM_HOURS)
        for item in DEMO_ITEMS:
            self.catalog.create(
                FoodItemCreateRequest(**item, available_until=available_until),
                staff_id=staff.id,
            )
        return len(DEMO_ITEMS)
