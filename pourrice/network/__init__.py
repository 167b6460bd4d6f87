"""Network layer: endpoint catalogue and HTTP client."""

from pourrice.network.client import APIClient, DefaultAPIClient, TokenProvider
from pourrice.network.endpoints import (
    APIEndpoint,
    CreateUserProfile,
    FetchFeaturedRestaurants,
    FetchMenuItems,
    FetchNearbyRestaurants,
    FetchRestaurant,
    FetchReviews,
    FetchUserProfile,
    HTTPMethod,
    SubmitReview,
    UpdateUserProfile,
)

__all__ = [
    "APIClient",
    "APIEndpoint",
    "CreateUserProfile",
    "DefaultAPIClient",
    "FetchFeaturedRestaurants",
    "FetchMenuItems",
    "FetchNearbyRestaurants",
    "FetchRestaurant",
    "FetchReviews",
    "FetchUserProfile",
    "HTTPMethod",
    "SubmitReview",
    "TokenProvider",
    "UpdateUserProfile",
]
