"""Authentication session management."""

import logging
import weakref

from pourrice.auth.provider import IdentityProvider
from pourrice.errors import InvalidCredentials, Unauthorized
from pourrice.localization import language_code
from pourrice.main_context import MainContext
from pourrice.models.bilingual import BilingualText
from pourrice.models.user import (
    CreateUserRequest,
    UpdateUserRequest,
    User,
    UserType,
)
from pourrice.network.client import APIClient
from pourrice.network.endpoints import (
    CreateUserProfile,
    FetchUserProfile,
    UpdateUserProfile,
)

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6

INVALID_EMAIL_MESSAGE = BilingualText(
    en="Please enter a valid email address.", tc="請輸入有效的電郵地址。"
)
PASSWORD_TOO_SHORT_MESSAGE = BilingualText(
    en=f"Password must be at least {MIN_PASSWORD_LENGTH} characters.",
    tc=f"密碼最少需要 {MIN_PASSWORD_LENGTH} 個字元。",
)
PASSWORDS_DO_NOT_MATCH_MESSAGE = BilingualText(
    en="Passwords do not match.", tc="兩次輸入的密碼不一致。"
)
DISPLAY_NAME_REQUIRED_MESSAGE = BilingualText(
    en="Please enter a display name.", tc="請輸入顯示名稱。"
)


def validate_credentials(
    email: str, password: str, confirm_password: str | None = None
) -> None:
    """Check sign-in or sign-up input before contacting the provider.

    Raises:
        InvalidCredentials: If the email, password or confirmation is invalid
    """
    if not email.strip() or "@" not in email:
        raise InvalidCredentials(INVALID_EMAIL_MESSAGE)
    if len(password) < MIN_PASSWORD_LENGTH:
        raise InvalidCredentials(PASSWORD_TOO_SHORT_MESSAGE)
    if confirm_password is not None and password != confirm_password:
        raise InvalidCredentials(PASSWORDS_DO_NOT_MATCH_MESSAGE)


def _state_listener(service: "AuthService"):
    # Hold the service weakly so a discarded manager never receives callbacks
    ref = weakref.ref(service)

    def listener(subject: str | None) -> None:
        svc = ref()
        if svc is None:
            return
        svc.main_context.call_soon(svc._handle_auth_state_change, subject)

    return listener


class AuthService:
    """Owns the signed-in/signed-out state and the current user profile.

    State transitions are driven only by the identity provider's
    notifications. A signed-in notification loads the backend profile. A
    signed-out notification clears it immediately. Every operation that
    sets ``is_loading`` clears it again on every exit path.
    """

    def __init__(
        self,
        api_client: APIClient,
        identity_provider: IdentityProvider,
        main_context: MainContext | None = None,
    ) -> None:
        """Initialize the session manager and register the state listener.

        Args:
            api_client: Client used for profile calls (no token provider needed)
            identity_provider: Provider for sign-in and token issuance
            main_context: Context owning user-facing state
        """
        self.api_client = api_client
        self.identity_provider = identity_provider
        self.main_context = main_context or MainContext()

        self.current_user: User | None = None
        self.is_authenticated = False
        self.is_loading = False
        self.error: Exception | None = None

        self._listener_handle: int | None = identity_provider.add_state_listener(
            _state_listener(self)
        )
        self._finalizer = weakref.finalize(
            self,
            identity_provider.remove_state_listener,
            self._listener_handle,
        )

    def close(self) -> None:
        """Deregister the provider listener. Safe to call more than once."""
        if self._listener_handle is None:
            return
        self._finalizer()
        self._listener_handle = None
        logger.debug("Auth state listener removed")

    # ==================== AUTH STATE ====================

    def _handle_auth_state_change(self, subject: str | None) -> None:
        self.main_context.check()
        self.is_authenticated = subject is not None

        if subject is None:
            self.current_user = None
            return

        # sign_in/sign_up load (or create) the profile themselves
        if self.is_loading:
            return

        if self.current_user is None or self.current_user.id != subject:
            self.main_context.spawn(self._load_profile_for_notification(subject))

    async def _load_profile_for_notification(self, uid: str) -> None:
        try:
            user = await self._fetch_user_profile(uid)
        except Exception as e:
            logger.warning(f"Failed to load user profile: {e}")
            self.error = e
            return

        # Drop the result if the session changed while loading
        if self.identity_provider.current_subject == uid:
            self.current_user = user

    # ==================== SIGN IN / SIGN UP / SIGN OUT ====================

    async def sign_in(self, email: str, password: str) -> None:
        """Sign in with email and password, then load the user's profile."""
        self.main_context.check()
        self.is_loading = True
        self.error = None

        try:
            validate_credentials(email, password)
            uid = await self.identity_provider.sign_in(email, password)
            self.current_user = await self._fetch_user_profile(uid)
            logger.info(f"User signed in successfully: {uid}")
        except Exception as e:
            self.error = e
            logger.error(f"Sign in failed: {e}")
            raise
        finally:
            self.is_loading = False

    async def sign_up(
        self,
        email: str,
        password: str,
        display_name: str,
        confirm_password: str | None = None,
    ) -> None:
        """Create an account and its backend customer profile."""
        self.main_context.check()
        self.is_loading = True
        self.error = None

        try:
            validate_credentials(email, password, confirm_password)
            if not display_name.strip():
                raise InvalidCredentials(DISPLAY_NAME_REQUIRED_MESSAGE)

            uid = await self.identity_provider.sign_up(email, password)
            request = CreateUserRequest(
                uid=uid,
                email=email,
                display_name=display_name,
                user_type=UserType.CUSTOMER.value,
                preferred_language=language_code(),
            )
            self.current_user = await self.api_client.request(
                CreateUserProfile(request=request), User
            )
            logger.info(f"User account created successfully: {uid}")
        except Exception as e:
            self.error = e
            logger.error(f"Sign up failed: {e}")
            raise
        finally:
            self.is_loading = False

    def sign_out(self) -> None:
        """Sign out of the provider, then clear local session state.

        Local state is cleared only after the provider call succeeds. If
        the provider raises, the error is recorded and re-raised, and the
        session is left as it was.
        """
        self.main_context.check()
        self.is_loading = True

        try:
            self.identity_provider.sign_out()
        except Exception as e:
            self.error = e
            logger.error(f"Sign out failed: {e}")
            raise
        else:
            self.current_user = None
            self.is_authenticated = False
            self.error = None
            logger.info("User signed out successfully")
        finally:
            self.is_loading = False

    async def send_password_reset(self, email: str) -> None:
        """Ask the provider to email a password-reset link."""
        self.main_context.check()
        self.is_loading = True
        self.error = None

        try:
            await self.identity_provider.send_password_reset(email)
            logger.info(f"Password reset email sent to: {email}")
        except Exception as e:
            self.error = e
            logger.error(f"Failed to send password reset email: {e}")
            raise
        finally:
            self.is_loading = False

    # ==================== TOKENS ====================

    async def get_id_token(self) -> str:
        """Return a freshly issued ID token for the signed-in user.

        Raises:
            Unauthorized: If nobody is signed in or the refresh fails
        """
        if self.identity_provider.current_subject is None:
            raise Unauthorized()

        try:
            return await self.identity_provider.get_id_token(force_refresh=True)
        except Exception as e:
            logger.error(f"Failed to get ID token: {e}")
            raise Unauthorized() from e

    # ==================== PROFILE ====================

    async def _fetch_user_profile(self, uid: str) -> User:
        return await self.api_client.request(FetchUserProfile(user_id=uid), User)

    async def update_user_profile(self, request: UpdateUserRequest) -> None:
        """Update the signed-in user's profile on the backend.

        Raises:
            Unauthorized: If no profile is loaded
        """
        self.main_context.check()
        if self.current_user is None:
            raise Unauthorized()

        self.is_loading = True
        self.error = None

        try:
            endpoint = UpdateUserProfile(user_id=self.current_user.id, request=request)
            self.current_user = await self.api_client.request(endpoint, User)
            logger.info("User profile updated successfully")
        except Exception as e:
            self.error = e
            logger.error(f"Profile update failed: {e}")
            raise
        finally:
            self.is_loading = False
