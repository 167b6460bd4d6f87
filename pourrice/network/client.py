"""HTTP client for the Pour Rice backend.

The client builds each request from an endpoint, injects the passcode and
bearer headers, sends it once and maps the status code onto the error
taxonomy. Successful bodies are decoded with pydantic.
"""

import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from functools import lru_cache
from typing import Any, Protocol, TypeVar

import httpx
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from pourrice.config import Config, get_config
from pourrice.errors import (
    ClientError,
    DecodingError,
    InvalidResponse,
    InvalidURL,
    NetworkError,
    NoConnection,
    ServerError,
    Timeout,
    Unauthorized,
)
from pourrice.network.endpoints import APIEndpoint

logger = logging.getLogger(__name__)

T = TypeVar("T")

CONTENT_TYPE_HEADER = "Content-Type"
AUTHORIZATION_HEADER = "Authorization"


class TokenProvider(Protocol):
    """Source of bearer tokens for authenticated calls."""

    async def get_id_token(self) -> str: ...


class APIClient(Protocol):
    """Interface the domain services depend on."""

    async def request(self, endpoint: APIEndpoint, response_type: type[T]) -> T: ...


@lru_cache(maxsize=None)
def _adapter(response_type: Any) -> TypeAdapter:
    return TypeAdapter(response_type)


@contextmanager
def translate_transport_errors() -> Iterator[None]:
    """Map httpx transport failures onto the API error taxonomy."""
    try:
        yield
    except httpx.TimeoutException as e:
        logger.exception("Request timed out")
        raise Timeout() from e
    except httpx.ConnectError as e:
        logger.exception("Cannot connect to server")
        raise NoConnection() from e
    except httpx.TransportError as e:
        logger.exception("Network request failed")
        raise NetworkError(e) from e


def check_status(response: Any) -> None:
    """Raise the API error matching a response's status code.

    Raises:
        Unauthorized: 401
        ClientError: Other 4xx codes
        ServerError: 5xx codes
        InvalidResponse: Anything else that is not 2xx, or a non-HTTP response
    """
    if not isinstance(response, httpx.Response):
        raise InvalidResponse()

    status = response.status_code
    if 200 <= status <= 299:
        return
    if status == 401:
        raise Unauthorized()
    if 400 <= status <= 499:
        raise ClientError(status)
    if 500 <= status <= 599:
        raise ServerError(status)
    raise InvalidResponse()


class DefaultAPIClient:
    """httpx-backed implementation of ``APIClient``.

    Every request carries the static passcode header. When a token
    provider is set, the client also tries to attach
    ``Authorization: Bearer <token>``. If that fails, the request is sent
    without the header and the failure is only logged. Public endpoints
    keep working, and protected ones answer 401.
    """

    def __init__(
        self,
        config: Config | None = None,
        token_provider: TokenProvider | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the API client.

        Args:
            config: Client configuration (defaults to the global config)
            token_provider: Bearer token source, usually the AuthService
            http_client: Shared httpx client; one is created if omitted
        """
        self.config = config or get_config()
        self.token_provider = token_provider
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=self.config.request_timeout
        )

    async def __aenter__(self) -> "DefaultAPIClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying httpx client if this instance created it."""
        if self._owns_http_client:
            await self._http.aclose()

    async def request(self, endpoint: APIEndpoint, response_type: type[T]) -> T:
        """Execute an endpoint and decode the response.

        Args:
            endpoint: The backend operation to call
            response_type: Type the JSON body is decoded into

        Returns:
            Decoded response object

        Raises:
            APIError: For URL, transport, status or decoding failures
        """
        request = self.build_request(endpoint)
        await self._inject_headers(request)

        logger.debug(f"{request.method} {request.url}")
        response = await self._send(request)

        check_status(response)
        return self._decode_response(response.content, response_type)

    def build_request(self, endpoint: APIEndpoint) -> httpx.Request:
        """Build the httpx request for an endpoint (headers not yet injected)."""
        url = self._build_url(endpoint)

        headers: dict[str, str] = {}
        content: bytes | None = None
        body = endpoint.body
        if body is not None:
            payload = body.model_dump(mode="json", by_alias=True, exclude_none=True)
            content = json.dumps(payload).encode("utf-8")
            headers[CONTENT_TYPE_HEADER] = "application/json"

        return self._http.build_request(
            endpoint.method.value,
            url,
            content=content,
            headers=headers,
            timeout=self.config.request_timeout,
        )

    def _build_url(self, endpoint: APIEndpoint) -> httpx.URL:
        raw = self.config.api_base_url + endpoint.path
        try:
            url = httpx.URL(raw)
        except (httpx.InvalidURL, TypeError, ValueError) as e:
            raise InvalidURL() from e
        if url.scheme not in ("http", "https") or not url.host:
            raise InvalidURL()

        query_items = endpoint.query_items
        if query_items:
            try:
                url = url.copy_merge_params(query_items)
            except (httpx.InvalidURL, TypeError, ValueError) as e:
                raise InvalidURL() from e
        return url

    async def _inject_headers(self, request: httpx.Request) -> None:
        request.headers[self.config.api_passcode_header] = self.config.api_passcode

        if self.token_provider is None:
            return

        try:
            id_token = await self.token_provider.get_id_token()
        except Exception as e:
            # Public endpoints must not be blocked by a missing session
            logger.warning(f"Could not retrieve ID token, sending without it: {e}")
            return
        request.headers[AUTHORIZATION_HEADER] = f"Bearer {id_token}"

    async def _send(self, request: httpx.Request) -> Any:
        with translate_transport_errors():
            return await self._http.send(request)

    @staticmethod
    def _decode_response(content: bytes, response_type: type[T]) -> T:
        try:
            return _adapter(response_type).validate_json(content)
        except PydanticValidationError as e:
            logger.error(f"Decoding error: {e}")
            logger.error(f"Response JSON: {content.decode('utf-8', errors='replace')}")
            raise DecodingError() from e
