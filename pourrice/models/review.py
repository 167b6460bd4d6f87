"""Review data models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from pourrice.models.bilingual import BilingualText

MIN_RATING = 1
MAX_RATING = 5
MIN_COMMENT_LENGTH = 10

INVALID_RATING_MESSAGE = BilingualText(
    en="Please choose a rating between 1 and 5 stars.",
    tc="請選擇 1 至 5 星的評分。",
)
REVIEW_TOO_SHORT_MESSAGE = BilingualText(
    en=f"Your review must be at least {MIN_COMMENT_LENGTH} characters long.",
    tc=f"評論最少需要 {MIN_COMMENT_LENGTH} 個字。",
)


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'} ago"


class Review(BaseModel):
    """A customer review of a restaurant."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., alias="reviewId")
    restaurant_id: str = Field(..., alias="restaurantId")
    user_id: str = Field(..., alias="userId")
    user_name: str = Field(..., alias="userName")
    user_photo_url: str | None = Field(None, alias="userPhotoURL")
    rating: int
    comment: str
    photo_urls: list[str] = Field(default_factory=list, alias="photoURLs")
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime | None = Field(None, alias="updatedAt")

    @property
    def star_rating(self) -> str:
        return "⭐" * max(self.rating, 0)

    @property
    def is_valid_rating(self) -> bool:
        return MIN_RATING <= self.rating <= MAX_RATING

    @property
    def is_valid_comment(self) -> bool:
        return len(self.comment) >= MIN_COMMENT_LENGTH

    def relative_date(self, now: datetime | None = None) -> str:
        """Describe ``created_at`` relative to ``now``, e.g. "2 days ago"."""
        if now is None:
            now = datetime.now(self.created_at.tzinfo)
        seconds = int((now - self.created_at).total_seconds())
        if seconds < 60:
            return "just now"
        for unit, size in (
            ("year", 365 * 86400),
            ("month", 30 * 86400),
            ("week", 7 * 86400),
            ("day", 86400),
            ("hour", 3600),
            ("minute", 60),
        ):
            if seconds >= size:
                return _plural(seconds // size, unit)
        return "just now"


class ReviewRequest(BaseModel):
    """Payload for submitting a new review.

    No constraints are enforced on construction; call ``is_valid`` or
    ``validation_error`` before sending.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    restaurant_id: str = Field(..., alias="restaurantId")
    rating: int
    comment: str
    photo_urls: list[str] | None = Field(None, alias="photoURLs")

    def is_valid(self) -> bool:
        return self.validation_error() is None

    def validation_error(self) -> BilingualText | None:
        """Return the first failed rule, checking the rating before the comment."""
        if self.rating < MIN_RATING or self.rating > MAX_RATING:
            return INVALID_RATING_MESSAGE
        if len(self.comment) < MIN_COMMENT_LENGTH:
            return REVIEW_TOO_SHORT_MESSAGE
        return None


class ReviewListResponse(BaseModel):
    """Envelope for the review list endpoint."""

    reviews: list[Review]
    total_count: int = Field(0, alias="totalCount")
