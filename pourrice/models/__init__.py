"""Data models for the Pour Rice client."""

from pourrice.models.bilingual import BilingualText
from pourrice.models.menu import (
    DietaryTag,
    MenuCategory,
    MenuItem,
    MenuItemListResponse,
)
from pourrice.models.restaurant import (
    Location,
    OpeningHour,
    Restaurant,
    RestaurantListResponse,
)
from pourrice.models.review import Review, ReviewListResponse, ReviewRequest
from pourrice.models.user import (
    CreateUserRequest,
    UpdateUserRequest,
    User,
    UserType,
)

__all__ = [
    "BilingualText",
    "CreateUserRequest",
    "DietaryTag",
    "Location",
    "MenuCategory",
    "MenuItem",
    "MenuItemListResponse",
    "OpeningHour",
    "Restaurant",
    "RestaurantListResponse",
    "Review",
    "ReviewListResponse",
    "ReviewRequest",
    "UpdateUserRequest",
    "User",
    "UserType",
]
