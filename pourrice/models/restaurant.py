"""Restaurant data models."""

from datetime import datetime, time

from pydantic import BaseModel, ConfigDict, Field

from pourrice.geo import haversine_distance
from pourrice.models.bilingual import BilingualText

DAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)


def _parse_time_of_day(value: str) -> time | None:
    try:
        return datetime.strptime(value, "%H:%M").time()
    except ValueError:
        return None


class Location(BaseModel):
    """Geographic coordinates of a restaurant."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    latitude: float = Field(..., alias="Latitude")
    longitude: float = Field(..., alias="Longitude")

    def distance_to(self, latitude: float, longitude: float) -> float:
        """Distance in metres to another coordinate."""
        return haversine_distance(self.latitude, self.longitude, latitude, longitude)


class OpeningHour(BaseModel):
    """Opening hours for one weekday."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    day: str = Field(..., description="Weekday name, e.g. Monday")
    open: str = Field(..., description="Opening time as HH:mm")
    close: str = Field(..., description="Closing time as HH:mm")
    is_closed: bool = Field(False, alias="isClosed")

    @property
    def display_text(self) -> str:
        if self.is_closed:
            return "closed"
        return f"{self.open} - {self.close}"


class Restaurant(BaseModel):
    """Restaurant information as returned by the backend."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., alias="restaurantId")
    name: BilingualText
    description: BilingualText
    address: BilingualText
    district: BilingualText
    cuisine: BilingualText
    keywords: list[BilingualText] = Field(default_factory=list)
    price_range: str = Field(..., alias="priceRange", description="$ to $$$$")
    rating: float = Field(..., ge=0.0, le=5.0)
    review_count: int = Field(..., ge=0, alias="reviewCount")
    image_urls: list[str] = Field(default_factory=list, alias="imageUrls")
    location: Location
    opening_hours: list[OpeningHour] = Field(
        default_factory=list, alias="openingHours"
    )
    phone_number: str = Field(..., alias="phoneNumber")
    email: str | None = None
    website: str | None = None
    seats: int = Field(..., ge=0)

    @property
    def price_range_display(self) -> str:
        return self.price_range

    @property
    def rating_display(self) -> str:
        return f"{self.rating:.1f}"

    def hours_for(self, day: str) -> OpeningHour | None:
        """Return the first opening-hours entry for a weekday name."""
        return next((h for h in self.opening_hours if h.day == day), None)

    def is_open_now(self, now: datetime | None = None) -> bool:
        """Check whether the restaurant is open at ``now`` (local time).

        Open means the time of day falls in ``[open, close)`` for today's
        entry. Ranges that cross midnight (close before open) never match.
        """
        if now is None:
            now = datetime.now()

        today = self.hours_for(DAY_NAMES[now.weekday()])
        if today is None or today.is_closed:
            return False

        open_time = _parse_time_of_day(today.open)
        close_time = _parse_time_of_day(today.close)
        if open_time is None or close_time is None:
            return False

        current = now.time().replace(second=0, microsecond=0)
        return open_time <= current < close_time

    def distance_from(self, latitude: float, longitude: float) -> float:
        """Distance in metres from the given coordinate."""
        return self.location.distance_to(latitude, longitude)


class RestaurantListResponse(BaseModel):
    """Envelope for restaurant list endpoints."""

    restaurants: list[Restaurant]
