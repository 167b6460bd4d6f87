"""Shared fixtures and test doubles."""

import itertools

import httpx
import pytest

import pourrice.config
from pourrice.config import Config
from pourrice.main_context import MainContext
from pourrice.network.client import DefaultAPIClient

BASE_URL = "https://api.test"


def restaurant_payload(restaurant_id: str = "r1", **overrides) -> dict:
    """Wire-format restaurant as the backend sends it."""
    payload = {
        "restaurantId": restaurant_id,
        "name": {"EN": "Golden Wok", "TC": "金鑊"},
        "description": {"EN": "Cantonese classics", "TC": "粵菜經典"},
        "address": {"EN": "1 Queen's Road", "TC": "皇后大道1號"},
        "district": {"EN": "Central", "TC": "中環"},
        "cuisine": {"EN": "Cantonese", "TC": "粵菜"},
        "keywords": [{"EN": "dim sum", "TC": "點心"}],
        "priceRange": "$$",
        "rating": 4.3,
        "reviewCount": 120,
        "imageUrls": ["https://img.test/1.jpg"],
        "location": {"Latitude": 22.2819, "Longitude": 114.1581},
        "openingHours": [
            {"day": "Monday", "open": "09:00", "close": "22:00", "isClosed": False},
            {"day": "Sunday", "open": "00:00", "close": "00:00", "isClosed": True},
        ],
        "phoneNumber": "+852 2123 4567",
        "seats": 80,
    }
    payload.update(overrides)
    return payload


def menu_item_payload(item_id: str = "m1", **overrides) -> dict:
    payload = {
        "menuItemId": item_id,
        "restaurantId": "r1",
        "name": {"EN": "Char Siu", "TC": "叉燒"},
        "description": {"EN": "Barbecued pork", "TC": "燒烤豬肉"},
        "price": 88.0,
        "category": "Main Course",
        "dietaryInfo": [],
        "isAvailable": True,
    }
    payload.update(overrides)
    return payload


def review_payload(review_id: str = "v1", rating: int = 5, **overrides) -> dict:
    payload = {
        "reviewId": review_id,
        "restaurantId": "r1",
        "userId": "u1",
        "userName": "Mei",
        "rating": rating,
        "comment": "Wonderful dim sum and friendly staff.",
        "createdAt": "2025-01-01T12:00:00Z",
    }
    payload.update(overrides)
    return payload


def user_payload(uid: str = "u1", **overrides) -> dict:
    payload = {
        "uid": uid,
        "email": "mei@example.com",
        "displayName": "Mei",
        "userType": "customer",
        "preferredLanguage": "en",
        "createdAt": "2025-01-01T00:00:00Z",
        "updatedAt": "2025-01-01T00:00:00Z",
    }
    payload.update(overrides)
    return payload


class RecordingHandler:
    """MockTransport handler that records requests and replays responses.

    ``responder`` is either a fixed ``httpx.Response`` or a callable taking
    the request.
    """

    def __init__(self, responder=None):
        self.requests: list[httpx.Request] = []
        self.responder = responder or httpx.Response(200, json={})

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if callable(self.responder):
            return self.responder(request)
        return self.responder

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]


class FakeIdentityProvider:
    """In-memory identity provider."""

    def __init__(self, uid: str = "u1"):
        self.uid = uid
        self.subject: str | None = None
        self.token = "id-token-123"
        self.token_error: Exception | None = None
        self.sign_in_error: Exception | None = None
        self.sign_out_error: Exception | None = None
        self.calls: list[tuple] = []
        self.listeners: dict = {}
        self._handles = itertools.count(1)

    @property
    def current_subject(self) -> str | None:
        return self.subject

    def add_state_listener(self, listener) -> int:
        handle = next(self._handles)
        self.listeners[handle] = listener
        listener(self.subject)
        return handle

    def remove_state_listener(self, handle: int) -> None:
        self.listeners.pop(handle, None)

    def set_subject(self, subject: str | None) -> None:
        self.subject = subject
        for listener in list(self.listeners.values()):
            listener(subject)

    async def sign_in(self, email: str, password: str) -> str:
        self.calls.append(("sign_in", email))
        if self.sign_in_error is not None:
            raise self.sign_in_error
        self.set_subject(self.uid)
        return self.uid

    async def sign_up(self, email: str, password: str) -> str:
        self.calls.append(("sign_up", email))
        self.set_subject(self.uid)
        return self.uid

    def sign_out(self) -> None:
        self.calls.append(("sign_out",))
        if self.sign_out_error is not None:
            raise self.sign_out_error
        self.set_subject(None)

    async def send_password_reset(self, email: str) -> None:
        self.calls.append(("send_password_reset", email))

    async def get_id_token(self, force_refresh: bool = False) -> str:
        self.calls.append(("get_id_token", force_refresh))
        if self.token_error is not None:
            raise self.token_error
        return self.token


class StaticTokenProvider:
    def __init__(self, token: str = "token-abc", error: Exception | None = None):
        self.token = token
        self.error = error

    async def get_id_token(self) -> str:
        if self.error is not None:
            raise self.error
        return self.token


@pytest.fixture
def config():
    """Test configuration isolated from the environment's .env file."""
    return Config(
        _env_file=None,
        api_base_url=BASE_URL,
        firebase_api_key="firebase-key",
        algolia_search_api_key="algolia-key",
        preferred_language="en",
        search_debounce_ms=10,
    )


@pytest.fixture(autouse=True)
def global_config(monkeypatch, config):
    """Install the test configuration as the global instance."""
    monkeypatch.setattr(pourrice.config, "config", config)
    return config


@pytest.fixture
def main_context():
    return MainContext()


@pytest.fixture
def identity_provider():
    return FakeIdentityProvider()


def make_api_client(config, handler, token_provider=None) -> DefaultAPIClient:
    """Build an API client whose HTTP traffic goes to ``handler``."""
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return DefaultAPIClient(config, token_provider=token_provider, http_client=http_client)
