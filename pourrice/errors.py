"""Error types for the Pour Rice client.

Every error carries two descriptions:

- ``message``: a bilingual, user-facing text. Show it with
  ``localized_message()``.
- ``failure_reason``: a terse English diagnostic for logs. It is never
  shown to users.
"""

import logging

from pourrice.models.bilingual import BilingualText

logger = logging.getLogger(__name__)

RECOVERY_DEFAULT = BilingualText(en="Please try again.", tc="請再試一次。")
RECOVERY_NETWORK = BilingualText(
    en="Check your Wi-Fi or mobile data connection and try again.",
    tc="請檢查 Wi-Fi 或流動數據連線，然後再試一次。",
)
RECOVERY_UNAUTHORISED = BilingualText(
    en="Please sign in again.", tc="請重新登入。"
)
RECOVERY_SERVER = BilingualText(
    en="Our servers are having trouble. Please try again later.",
    tc="伺服器出現問題，請稍後再試。",
)
RECOVERY_TIMEOUT = BilingualText(
    en="The request took too long. Please try again.",
    tc="請求逾時，請再試一次。",
)


class PourRiceError(Exception):
    """Base class for all client errors."""

    message = BilingualText(en="Something went wrong.", tc="發生錯誤。")
    failure_reason = "Unknown error"
    recovery_suggestion: BilingualText | None = RECOVERY_DEFAULT

    def __init__(self) -> None:
        super().__init__(self.failure_reason)

    def localized_message(self, language: str | None = None) -> str:
        """Return the user-facing message in the active language."""
        return self.message.localized(language)

    def log(self, context: str = "") -> None:
        """Log the error with its diagnostic details."""
        logger.error(
            "\n".join(
                [
                    "API error occurred",
                    f"  Error: {self.failure_reason}",
                    f"  Description: {self.message.en}",
                    f"  Context: {context}",
                ]
            )
        )


# ==================== NETWORK / AUTH TAXONOMY ====================


class APIError(PourRiceError):
    """Failure raised by the HTTP client or the session manager."""


class NetworkError(APIError):
    """Transport failure (DNS, connection reset, TLS, ...)."""

    failure_reason = "Network connection failed"
    recovery_suggestion = RECOVERY_NETWORK

    def __init__(self, cause: BaseException | None = None) -> None:
        self.cause = cause
        detail = f": {cause}" if cause else ""
        self.message = BilingualText(
            en=f"A network error occurred{detail}",
            tc=f"網絡發生錯誤{detail}",
        )
        super().__init__()


class DecodingError(APIError):
    """The response body did not match the expected shape."""

    message = BilingualText(
        en="We couldn't read the server's response.",
        tc="無法讀取伺服器的回應。",
    )
    failure_reason = "Failed to decode API response"


class Unauthorized(APIError):
    """Missing, expired or rejected credentials (HTTP 401)."""

    message = BilingualText(
        en="You are not authorised. Please sign in.",
        tc="你未獲授權，請登入。",
    )
    failure_reason = "Authentication required or token expired"
    recovery_suggestion = RECOVERY_UNAUTHORISED


_CLIENT_MESSAGES = {
    400: BilingualText(en="The request was invalid.", tc="請求無效。"),
    403: BilingualText(
        en="You don't have permission to do that.", tc="你沒有執行此操作的權限。"
    ),
    404: BilingualText(
        en="The requested item could not be found.", tc="找不到所要求的項目。"
    ),
    409: BilingualText(
        en="This conflicts with existing data.", tc="與現有資料發生衝突。"
    ),
    429: BilingualText(
        en="Too many requests. Please slow down.", tc="請求過於頻繁，請稍後再試。"
    ),
}

_SERVER_MESSAGES = {
    500: BilingualText(
        en="The server encountered an error.", tc="伺服器發生錯誤。"
    ),
    502: BilingualText(en="Bad gateway.", tc="閘道錯誤。"),
    503: BilingualText(
        en="The service is temporarily unavailable.", tc="服務暫時無法使用。"
    ),
    504: BilingualText(en="The server timed out.", tc="伺服器逾時。"),
}


class ClientError(APIError):
    """4xx response other than 401."""

    def __init__(self, status_code: int) -> None:
        self.status_code = status_code
        self.failure_reason = f"Client error with status code {status_code}"
        self.message = _CLIENT_MESSAGES.get(
            status_code,
            BilingualText(
                en=f"The request could not be completed ({status_code}).",
                tc=f"無法完成請求（{status_code}）。",
            ),
        )
        super().__init__()


class ServerError(APIError):
    """5xx response."""

    recovery_suggestion = RECOVERY_SERVER

    def __init__(self, status_code: int) -> None:
        self.status_code = status_code
        self.failure_reason = f"Server error with status code {status_code}"
        self.message = _SERVER_MESSAGES.get(
            status_code,
            BilingualText(
                en=f"The server returned an error ({status_code}).",
                tc=f"伺服器回傳錯誤（{status_code}）。",
            ),
        )
        super().__init__()


class InvalidResponse(APIError):
    """Non-HTTP response or a status code outside the mapped ranges."""

    message = BilingualText(
        en="The server sent an unexpected response.",
        tc="伺服器回傳了無法預期的回應。",
    )
    failure_reason = "Received invalid response from server"


class InvalidURL(APIError):
    """Request URL could not be constructed."""

    message = BilingualText(en="The request address is invalid.", tc="請求地址無效。")
    failure_reason = "Failed to construct valid URL"


class Timeout(APIError):
    """Request exceeded the fixed timeout."""

    message = BilingualText(en="The request timed out.", tc="請求逾時。")
    failure_reason = "Request timed out"
    recovery_suggestion = RECOVERY_TIMEOUT


class NoConnection(APIError):
    """Host unreachable; the device is probably offline."""

    message = BilingualText(
        en="No internet connection.", tc="沒有互聯網連線。"
    )
    failure_reason = "No internet connection available"
    recovery_suggestion = RECOVERY_NETWORK


# ==================== LOCAL VALIDATION ====================


class ValidationError(PourRiceError):
    """Locally detected input violation; never reaches the network layer."""

    failure_reason = "Validation failed"

    def __init__(self, reason: BilingualText | str) -> None:
        if isinstance(reason, str):
            reason = BilingualText.uniform(reason)
        self.message = reason
        self.failure_reason = f"{type(self).failure_reason}: {reason.en}"
        super().__init__()


class InvalidReview(ValidationError):
    """Review rating or comment violates submission rules."""

    failure_reason = "Invalid review"


class InvalidCredentials(ValidationError):
    """Email or password rejected before contacting the identity provider."""

    failure_reason = "Invalid credentials"


# ==================== IDENTITY PROVIDER ====================

_AUTH_MESSAGES = {
    "EMAIL_EXISTS": BilingualText(
        en="An account with this email already exists.",
        tc="此電郵地址已被註冊。",
    ),
    "EMAIL_NOT_FOUND": BilingualText(
        en="No account found with this email.", tc="找不到此電郵地址的帳戶。"
    ),
    "INVALID_PASSWORD": BilingualText(
        en="The password is incorrect.", tc="密碼不正確。"
    ),
    "INVALID_LOGIN_CREDENTIALS": BilingualText(
        en="The email or password is incorrect.", tc="電郵地址或密碼不正確。"
    ),
    "INVALID_EMAIL": BilingualText(
        en="The email address is badly formatted.", tc="電郵地址格式不正確。"
    ),
    "WEAK_PASSWORD": BilingualText(
        en="The password must be at least 6 characters.", tc="密碼最少需要 6 個字元。"
    ),
    "USER_DISABLED": BilingualText(
        en="This account has been disabled.", tc="此帳戶已被停用。"
    ),
    "TOO_MANY_ATTEMPTS_TRY_LATER": BilingualText(
        en="Too many attempts. Please try again later.", tc="嘗試次數過多，請稍後再試。"
    ),
    "TOKEN_EXPIRED": BilingualText(
        en="Your session has expired. Please sign in again.",
        tc="登入狀態已過期，請重新登入。",
    ),
}


class AuthError(PourRiceError):
    """Failure reported by the identity provider."""

    recovery_suggestion = RECOVERY_UNAUTHORISED

    def __init__(self, code: str, detail: str | None = None) -> None:
        self.code = code
        self.failure_reason = f"Identity provider error: {detail or code}"
        self.message = _AUTH_MESSAGES.get(
            code,
            BilingualText(
                en="Authentication failed. Please try again.",
                tc="驗證失敗，請再試一次。",
            ),
        )
        super().__init__()


# ==================== LOCATION ====================


class LocationError(PourRiceError):
    """Failure obtaining the device location."""


class PermissionDenied(LocationError):
    message = BilingualText(
        en="Location access was denied.", tc="位置存取權限被拒絕。"
    )
    failure_reason = "Location permission denied or restricted"
    recovery_suggestion = BilingualText(
        en="Enable location access for Pour Rice in Settings.",
        tc="請在「設定」中允許 Pour Rice 存取位置。",
    )


class ServicesDisabled(LocationError):
    message = BilingualText(
        en="Location services are turned off.", tc="定位服務已關閉。"
    )
    failure_reason = "Location services disabled"
    recovery_suggestion = BilingualText(
        en="Turn on Location Services in Settings.",
        tc="請在「設定」中開啟定位服務。",
    )


class LocationUnavailable(LocationError):
    message = BilingualText(
        en="Your location is currently unavailable.", tc="暫時無法取得你的位置。"
    )
    failure_reason = "Location unavailable"
    recovery_suggestion = BilingualText(
        en="Move to an area with a clearer signal and try again.",
        tc="請移至訊號較佳的地方再試。",
    )
