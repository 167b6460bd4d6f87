"""User profile data models."""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserType(str, Enum):
    """Account type."""

    CUSTOMER = "customer"
    OWNER = "owner"


class User(BaseModel):
    """A user profile linked to an identity-provider account.

    ``id``, ``email``, ``user_type`` and ``created_at`` never change after
    creation; use ``with_updates`` to derive a profile with new mutable
    fields.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., alias="uid")
    email: str
    display_name: str = Field(..., alias="displayName")
    user_type: UserType = Field(UserType.CUSTOMER, alias="userType")
    photo_url: str | None = Field(None, alias="photoURL")
    preferred_language: str = Field("en", alias="preferredLanguage")
    created_at: datetime = Field(default_factory=_utcnow, alias="createdAt")
    updated_at: datetime = Field(default_factory=_utcnow, alias="updatedAt")

    def with_updates(
        self,
        display_name: str | None = None,
        photo_url: str | None = None,
        preferred_language: str | None = None,
    ) -> "User":
        """Return a copy with the given mutable fields replaced."""
        changes: dict = {"updated_at": _utcnow()}
        if display_name is not None:
            changes["display_name"] = display_name
        if photo_url is not None:
            changes["photo_url"] = photo_url
        if preferred_language is not None:
            changes["preferred_language"] = preferred_language
        return self.model_copy(update=changes)


class CreateUserRequest(BaseModel):
    """Payload for creating a backend user profile."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    uid: str
    email: str
    display_name: str = Field(..., alias="displayName")
    user_type: str = Field(UserType.CUSTOMER.value, alias="userType")
    preferred_language: str = Field("en", alias="preferredLanguage")


class UpdateUserRequest(BaseModel):
    """Partial profile update; ``None`` fields are left unchanged."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    display_name: str | None = Field(None, alias="displayName")
    photo_url: str | None = Field(None, alias="photoURL")
    preferred_language: str | None = Field(None, alias="preferredLanguage")
