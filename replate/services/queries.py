"""
共享的查询片段和行映射辅助函数
联表查询时关联表的列使用前缀区分，例如 u__external_id、f__name
"""

from typing import Any, Dict, Optional

from ..models.user import User
from ..models.food_item import FoodItem, FoodItemWithCreator
from ..models.claim import FoodClaimWithDetails
from ..models.donation import FoodDonationWithItem

USER_COLUMNS = [
    "id", "external_id", "email", "first_name", "last_name", "profile_image_url",
    "role", "student_id", "phone_number", "created_at", "updated_at",
]

FOOD_ITEM_COLUMNS = [
    "id", "name", "description", "canteen_name", "canteen_location",
    "quantity_available", "original_price", "discounted_price", "image_url",
    "available_until", "is_active", "created_by", "created_at", "updated_at",
]

CLAIM_COLUMNS = [
    "id", "user_id", "food_item_id", "quantity_claimed", "claim_code", "status",
    "expires_at", "claimed_at", "created_at",
]

DONATION_COLUMNS = [
    "id", "food_item_id", "quantity_donated", "status", "ngo_name",
    "ngo_contact_person", "ngo_phone_number", "donated_at", "reserved_at",
    "collected_at", "created_at", "updated_at",
]


def select_columns(alias: str, columns: list, prefix: Optional[str] = None) -> str:
    """生成 SELECT 列表；给定 prefix 时列名加前缀别名"""
    if prefix is None:
        return ", ".join(f"{alias}.{c}" for c in columns)
    return ", ".join(f"{alias}.{c} AS {prefix}__{c}" for c in columns)


def extract_prefixed(row: Dict[str, Any], prefix: str) -> Optional[Dict[str, Any]]:
    """取出带前缀的列；左连接未匹配（id 为空）时返回 None"""
    marker = f"{prefix}__"
    data = {k[len(marker):]: v for k, v in row.items() if k.startswith(marker)}
    if not data or data.get("id") is None:
        return None
    return data


def strip_prefixed(row: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in row.items() if "__" not in k}


def to_item_with_creator(row: Dict[str, Any]) -> FoodItemWithCreator:
    creator = extract_prefixed(row, "u")
    return FoodItemWithCreator(
        **strip_prefixed(row),
        creator=User(**creator) if creator else None
    )


def to_claim_with_details(row: Dict[str, Any]) -> FoodClaimWithDetails:
    user = extract_prefixed(row, "u")
    item = extract_prefixed(row, "f")
    return FoodClaimWithDetails(
        **strip_prefixed(row),
        user=User(**user) if user else None,
        food_item=FoodItem(**item) if item else None
    )


def to_donation_with_item(row: Dict[str, Any]) -> FoodDonationWithItem:
    item = extract_prefixed(row, "f")
    return FoodDonationWithItem(
        **strip_prefixed(row),
        food_item=FoodItem(**item) if item else None
    )


CLAIM_DETAIL_SELECT = f"""
    SELECT {select_columns('c', CLAIM_COLUMNS)},
           {select_columns('u', USER_COLUMNS, 'u')},
           {select_columns('f', FOOD_ITEM_COLUMNS, 'f')}
    FROM food_claims c
    LEFT JOIN users u ON c.user_id = u.id
    LEFT JOIN food_items f ON c.food_item_id = f.id
"""

DONATION_DETAIL_SELECT = f"""
    SELECT {select_columns('d', DONATION_COLUMNS)},
           {select_columns('f', FOOD_ITEM_COLUMNS, 'f')}
    FROM food_donations d
    LEFT JOIN food_items f ON d.food_item_id = f.id
"""
