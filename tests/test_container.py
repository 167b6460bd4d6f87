"""Tests for service wiring."""

import httpx
import pytest

from conftest import RecordingHandler, restaurant_payload, user_payload
from pourrice.container import Services


def backend(request: httpx.Request) -> httpx.Response:
    if request.url.path.startswith("/API/Users/"):
        return httpx.Response(200, json=user_payload())
    return httpx.Response(200, json=restaurant_payload())


@pytest.fixture
def handler():
    return RecordingHandler(backend)


@pytest.fixture
def services(config, identity_provider, main_context, handler):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return Services.create(
        config,
        identity_provider,
        http_client=http_client,
        main_context=main_context,
    )


class TestServices:
    """Tests for the Services container."""

    def test_two_phase_wiring(self, services):
        """Test that only the domain client asks the session manager for tokens."""
        assert services.bootstrap_client.token_provider is None
        assert services.auth.api_client is services.bootstrap_client
        assert services.api_client.token_provider is services.auth
        assert services.restaurants.api_client is services.api_client
        assert services.menus.api_client is services.api_client
        assert services.reviews.api_client is services.api_client
        assert services.location is None

    @pytest.mark.asyncio
    async def test_signed_in_requests_carry_token(self, services, handler):
        """Test that domain calls attach the bearer token after sign-in."""
        await services.auth.sign_in("mei@example.com", "secret1")
        profile_request = handler.last_request

        await services.restaurants.fetch_restaurant("r1")

        assert "authorization" not in profile_request.headers
        assert handler.last_request.headers["authorization"] == "Bearer id-token-123"

    @pytest.mark.asyncio
    async def test_signed_out_requests_are_public(self, services, handler):
        """Test that public calls still work without a session."""
        await services.restaurants.fetch_restaurant("r1")

        assert "authorization" not in handler.last_request.headers
        assert handler.last_request.headers["x-api-passcode"] == "PourRice"

    @pytest.mark.asyncio
    async def test_aclose_removes_listener(self, services, identity_provider):
        """Test that closing deregisters the auth listener."""
        await services.aclose()

        assert identity_provider.listeners == {}
