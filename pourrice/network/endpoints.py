"""Pour Rice backend endpoints.

Each operation is one class. Together the classes form the complete
catalogue of backend calls. Every endpoint resolves to a path, an HTTP
method, optional query items and an optional JSON body.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict

from pourrice.models.review import ReviewRequest
from pourrice.models.user import CreateUserRequest, UpdateUserRequest

RESTAURANTS_PATH = "/API/Restaurants"
NEARBY_RESTAURANTS_PATH = f"{RESTAURANTS_PATH}/nearby"
FEATURED_RESTAURANTS_PATH = f"{RESTAURANTS_PATH}/featured"
RESTAURANT_MENU_SUFFIX = "/menu"
REVIEWS_PATH = "/API/Reviews"
USERS_PATH = "/API/Users"


class HTTPMethod(str, Enum):
    """HTTP methods used by the backend."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"


class APIEndpoint(BaseModel):
    """Base class for a backend operation."""

    model_config = ConfigDict(frozen=True)

    @property
    def path(self) -> str:
        raise NotImplementedError

    @property
    def method(self) -> HTTPMethod:
        return HTTPMethod.GET

    @property
    def query_items(self) -> list[tuple[str, str]] | None:
        return None

    @property
    def body(self) -> BaseModel | None:
        return None


# ==================== RESTAURANTS ====================


class FetchNearbyRestaurants(APIEndpoint):
    lat: float
    lng: float
    radius: float

    @property
    def path(self) -> str:
        return NEARBY_RESTAURANTS_PATH

    @property
    def query_items(self) -> list[tuple[str, str]]:
        return [
            ("lat", str(self.lat)),
            ("lng", str(self.lng)),
            ("radius", str(self.radius)),
        ]


class FetchRestaurant(APIEndpoint):
    id: str

    @property
    def path(self) -> str:
        return f"{RESTAURANTS_PATH}/{self.id}"


class FetchFeaturedRestaurants(APIEndpoint):
    @property
    def path(self) -> str:
        return FEATURED_RESTAURANTS_PATH


# ==================== MENU ====================


class FetchMenuItems(APIEndpoint):
    restaurant_id: str
    limit: int | None = None

    @property
    def path(self) -> str:
        return f"{RESTAURANTS_PATH}/{self.restaurant_id}{RESTAURANT_MENU_SUFFIX}"

    @property
    def query_items(self) -> list[tuple[str, str]] | None:
        if self.limit is None:
            return None
        return [("limit", str(self.limit))]


# ==================== REVIEWS ====================


class FetchReviews(APIEndpoint):
    restaurant_id: str
    limit: int | None = None

    @property
    def path(self) -> str:
        return REVIEWS_PATH

    @property
    def query_items(self) -> list[tuple[str, str]]:
        items = [("restaurantId", self.restaurant_id)]
        if self.limit is not None:
            items.append(("limit", str(self.limit)))
        return items


class SubmitReview(APIEndpoint):
    request: ReviewRequest

    @property
    def path(self) -> str:
        return REVIEWS_PATH

    @property
    def method(self) -> HTTPMethod:
        return HTTPMethod.POST

    @property
    def body(self) -> ReviewRequest:
        return self.request


# ==================== USERS ====================


class FetchUserProfile(APIEndpoint):
    user_id: str

    @property
    def path(self) -> str:
        return f"{USERS_PATH}/{self.user_id}"


class CreateUserProfile(APIEndpoint):
    request: CreateUserRequest

    @property
    def path(self) -> str:
        return USERS_PATH

    @property
    def method(self) -> HTTPMethod:
        return HTTPMethod.POST

    @property
    def body(self) -> CreateUserRequest:
        return self.request


class UpdateUserProfile(APIEndpoint):
    user_id: str
    request: UpdateUserRequest

    @property
    def path(self) -> str:
        return f"{USERS_PATH}/{self.user_id}"

    @property
    def method(self) -> HTTPMethod:
        return HTTPMethod.PUT

    @property
    def body(self) -> UpdateUserRequest:
        return self.request
