"""In-memory restaurant detail cache with time-based expiry."""

import logging
import time
from collections.abc import Callable

from pydantic import BaseModel

from pourrice.models.restaurant import Restaurant

logger = logging.getLogger(__name__)


class CacheEntry(BaseModel):
    """A cached restaurant and the instant it stops being valid."""

    restaurant: Restaurant
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class RestaurantCache:
    """Bounded, advisory TTL cache keyed by restaurant id.

    Expired entries are evicted lazily, on the next lookup. When an
    insert exceeds ``limit``, the oldest-inserted entry is dropped. The
    cache is best effort: it only saves network calls and never decides
    correctness.
    """

    def __init__(
        self,
        limit: int = 50,
        ttl: float = 3600.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache.

        Args:
            limit: Maximum number of entries held
            ttl: Seconds an entry stays valid after it is stored
            clock: Monotonic time source, injectable for tests
        """
        self.limit = limit
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, restaurant_id: str) -> bool:
        return restaurant_id in self._entries

    def get(self, restaurant_id: str) -> Restaurant | None:
        """Return a valid cached restaurant, evicting it if expired."""
        entry = self._entries.get(restaurant_id)
        if entry is None:
            return None

        if entry.is_expired(self._clock()):
            del self._entries[restaurant_id]
            logger.debug(f"Evicted expired restaurant from cache: {restaurant_id}")
            return None

        return entry.restaurant

    def set(self, restaurant_id: str, restaurant: Restaurant) -> None:
        """Store a restaurant under the id it was requested by, with a fresh expiry."""
        self._entries.pop(restaurant_id, None)
        self._entries[restaurant_id] = CacheEntry(
            restaurant=restaurant, expires_at=self._clock() + self.ttl
        )

        while len(self._entries) > self.limit:
            oldest = next(iter(self._entries))
            del self._entries[oldest]
            logger.debug(f"Cache full, dropped restaurant: {oldest}")

    def remove(self, restaurant_id: str) -> None:
        self._entries.pop(restaurant_id, None)

    def clear(self) -> None:
        self._entries.clear()
