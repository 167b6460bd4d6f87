"""Identity provider integration.

``IdentityProvider`` is the narrow surface the session manager consumes.
``FirebaseIdentityProvider`` implements it over the Firebase
Authentication REST API.
"""

import itertools
import logging
import time
from collections.abc import Callable
from typing import Protocol

import httpx
from pydantic import BaseModel, Field

from pourrice.errors import AuthError
from pourrice.network.client import translate_transport_errors

logger = logging.getLogger(__name__)

IDENTITY_TOOLKIT_URL = "https://identitytoolkit.googleapis.com/v1"
SECURE_TOKEN_URL = "https://securetoken.googleapis.com/v1/token"

# Refresh a little before the provider's expiry to avoid sending stale tokens
TOKEN_EXPIRY_MARGIN_SECONDS = 60

# Refresh failures after which the provider ends the session
SESSION_ENDING_CODES = frozenset(
    {"TOKEN_EXPIRED", "USER_DISABLED", "USER_NOT_FOUND", "INVALID_REFRESH_TOKEN"}
)

AuthStateListener = Callable[[str | None], None]


class IdentityProvider(Protocol):
    """Operations consumed from the identity provider."""

    @property
    def current_subject(self) -> str | None:
        """Subject id of the signed-in principal, or None."""
        ...

    async def sign_in(self, email: str, password: str) -> str: ...

    async def sign_up(self, email: str, password: str) -> str: ...

    def sign_out(self) -> None: ...

    async def send_password_reset(self, email: str) -> None: ...

    async def get_id_token(self, force_refresh: bool = False) -> str: ...

    def add_state_listener(self, listener: AuthStateListener) -> int: ...

    def remove_state_listener(self, handle: int) -> None: ...


class FirebaseSession(BaseModel):
    """Tokens for the signed-in Firebase user."""

    uid: str
    id_token: str
    refresh_token: str
    expires_at: float = Field(description="time.monotonic() deadline")

    def is_expired(self, now: float | None = None) -> bool:
        if now is None:
            now = time.monotonic()
        return now >= self.expires_at - TOKEN_EXPIRY_MARGIN_SECONDS


class FirebaseIdentityProvider:
    """Firebase Authentication over its REST API.

    The session is kept in memory only. Listeners are called once when
    they register, with the current state. After that they are called on
    every sign-in or sign-out transition.
    """

    def __init__(
        self,
        api_key: str,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        """Initialize the provider.

        Args:
            api_key: Firebase Web API key
            http_client: Shared httpx client; one is created if omitted
            timeout: Request timeout in seconds
        """
        self.api_key = api_key
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout)
        self._session: FirebaseSession | None = None
        self._listeners: dict[int, AuthStateListener] = {}
        self._handles = itertools.count(1)
        logger.info("Firebase identity provider initialized")

    @property
    def current_subject(self) -> str | None:
        return self._session.uid if self._session else None

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self._http.aclose()

    # ==================== LISTENERS ====================

    def add_state_listener(self, listener: AuthStateListener) -> int:
        handle = next(self._handles)
        self._listeners[handle] = listener
        listener(self.current_subject)
        return handle

    def remove_state_listener(self, handle: int) -> None:
        self._listeners.pop(handle, None)

    def _notify(self) -> None:
        subject = self.current_subject
        for listener in list(self._listeners.values()):
            listener(subject)

    # ==================== ACCOUNT OPERATIONS ====================

    async def sign_in(self, email: str, password: str) -> str:
        data = await self._post(
            f"{IDENTITY_TOOLKIT_URL}/accounts:signInWithPassword",
            json={"email": email, "password": password, "returnSecureToken": True},
        )
        return self._start_session(data)

    async def sign_up(self, email: str, password: str) -> str:
        data = await self._post(
            f"{IDENTITY_TOOLKIT_URL}/accounts:signUp",
            json={"email": email, "password": password, "returnSecureToken": True},
        )
        return self._start_session(data)

    def sign_out(self) -> None:
        if self._session is None:
            return
        uid = self._session.uid
        self._session = None
        logger.info(f"Firebase session ended for {uid}")
        self._notify()

    async def send_password_reset(self, email: str) -> None:
        await self._post(
            f"{IDENTITY_TOOLKIT_URL}/accounts:sendOobCode",
            json={"requestType": "PASSWORD_RESET", "email": email},
        )

    async def get_id_token(self, force_refresh: bool = False) -> str:
        if self._session is None:
            raise AuthError("NO_CURRENT_USER", "No user is signed in")

        if force_refresh or self._session.is_expired():
            await self._refresh()
        return self._session.id_token

    # ==================== INTERNALS ====================

    def _start_session(self, data: dict) -> str:
        self._session = FirebaseSession(
            uid=data["localId"],
            id_token=data["idToken"],
            refresh_token=data["refreshToken"],
            expires_at=time.monotonic() + float(data.get("expiresIn", 3600)),
        )
        logger.info(f"Firebase session started for {self._session.uid}")
        self._notify()
        return self._session.uid

    async def _refresh(self) -> None:
        session = self._session
        try:
            data = await self._post(
                SECURE_TOKEN_URL,
                data={
                    "grant_type": "refresh_token",
                    "refresh_token": session.refresh_token,
                },
            )
        except AuthError as e:
            if e.code in SESSION_ENDING_CODES and self._session is session:
                logger.warning(f"Refresh rejected ({e.code}), signing out")
                self._session = None
                self._notify()
            raise

        # The user may have signed out while the refresh was in flight
        if self._session is not session:
            raise AuthError("NO_CURRENT_USER", "Session ended during refresh")

        self._session = session.model_copy(
            update={
                "id_token": data["id_token"],
                "refresh_token": data.get("refresh_token", session.refresh_token),
                "expires_at": time.monotonic() + float(data.get("expires_in", 3600)),
            }
        )

    async def _post(
        self, url: str, json: dict | None = None, data: dict | None = None
    ) -> dict:
        with translate_transport_errors():
            response = await self._http.post(
                url, params={"key": self.api_key}, json=json, data=data
            )

        if response.is_success:
            return response.json()

        raise _auth_error_from(response)


def _auth_error_from(response: httpx.Response) -> AuthError:
    """Build an AuthError from a Firebase error body.

    Firebase reports ``{"error": {"message": "CODE"}}``, and sometimes
    ``"CODE : detail"``.
    """
    try:
        message = response.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return AuthError(f"HTTP_{response.status_code}", response.text)
    code, _, detail = message.partition(" : ")
    return AuthError(code.strip(), detail.strip() or code.strip())
