"""Domain services for restaurants, menus, reviews, search and location."""

from pourrice.services.cache import RestaurantCache
from pourrice.services.location_service import (
    AuthorizationStatus,
    LocationFix,
    LocationProvider,
    LocationService,
)
from pourrice.services.menu_service import MenuService
from pourrice.services.restaurant_service import RestaurantService
from pourrice.services.review_service import ReviewService
from pourrice.services.search_service import (
    DebouncedSearch,
    SearchFilters,
    SearchService,
)

__all__ = [
    "AuthorizationStatus",
    "DebouncedSearch",
    "LocationFix",
    "LocationProvider",
    "LocationService",
    "MenuService",
    "RestaurantCache",
    "RestaurantService",
    "ReviewService",
    "SearchFilters",
    "SearchService",
]
