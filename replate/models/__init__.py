from .user import User, UserRole, RequestIdentity
from .food_item import FoodItem, FoodItemWithCreator
from .claim import ClaimStatus, FoodClaim, FoodClaimWithDetails, TERMINAL_CLAIM_STATUSES
from .donation import DonationStatus, FoodDonation, FoodDonationWithItem

__all__ = [
    "User",
    "UserRole",
    "RequestIdentity",
    "FoodItem",
    "FoodItemWithCreator",
    "ClaimStatus",
    "FoodClaim",
    "FoodClaimWithDetails",
    "TERMINAL_CLAIM_STATUSES",
    "DonationStatus",
    "FoodDonation",
    "FoodDonationWithItem",
]
