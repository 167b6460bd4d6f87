"""Authentication: identity provider integration and session management."""

from pourrice.auth.provider import (
    FirebaseIdentityProvider,
    IdentityProvider,
)
from pourrice.auth.service import AuthService, validate_credentials

__all__ = [
    "AuthService",
    "FirebaseIdentityProvider",
    "IdentityProvider",
    "validate_credentials",
]
