"""Menu service: fetching plus client-side filtering, sorting and stats."""

import logging
import unicodedata
from collections.abc import Iterable

from pourrice.models.menu import DietaryTag, MenuCategory, MenuItem, MenuItemListResponse
from pourrice.network.client import APIClient
from pourrice.network.endpoints import FetchMenuItems

logger = logging.getLogger(__name__)


def _collation_key(text: str) -> tuple[str, str]:
    """Case- and accent-insensitive ordering, with accents breaking ties."""
    folded = text.casefold()
    decomposed = unicodedata.normalize("NFKD", folded)
    base = "".join(char for char in decomposed if not unicodedata.combining(char))
    return base, folded


class MenuService:
    """Service for restaurant menus.

    Only ``fetch_menu_items`` does I/O. The other methods are pure helpers
    over a list that was already fetched.
    """

    def __init__(self, api_client: APIClient) -> None:
        self.api_client = api_client

    async def fetch_menu_items(
        self, restaurant_id: str, limit: int | None = None
    ) -> list[MenuItem]:
        """Fetch the menu of a restaurant."""
        logger.info(f"Fetching menu items for restaurant: {restaurant_id}")

        endpoint = FetchMenuItems(restaurant_id=restaurant_id, limit=limit)
        response = await self.api_client.request(endpoint, MenuItemListResponse)

        logger.info(f"Fetched {len(response.menu_items)} menu items")
        return response.menu_items

    # ==================== FILTERING ====================

    @staticmethod
    def filter_by_category(
        items: list[MenuItem], category: MenuCategory
    ) -> list[MenuItem]:
        return [item for item in items if item.category == category]

    @staticmethod
    def group_by_category(items: list[MenuItem]) -> dict[MenuCategory, list[MenuItem]]:
        """Group items by category.

        Categories appear in first-seen order. Items keep their input order
        within each group.
        """
        grouped: dict[MenuCategory, list[MenuItem]] = {}
        for item in items:
            grouped.setdefault(item.category, []).append(item)
        return grouped

    @staticmethod
    def filter_by_availability(
        items: list[MenuItem], available_only: bool = True
    ) -> list[MenuItem]:
        if not available_only:
            return list(items)
        return [item for item in items if item.is_available]

    @staticmethod
    def filter_by_dietary_info(
        items: list[MenuItem], dietary_tags: Iterable[DietaryTag]
    ) -> list[MenuItem]:
        """Keep items carrying every requested tag."""
        required = set(dietary_tags)
        if not required:
            return list(items)
        return [item for item in items if required.issubset(item.dietary_info)]

    @staticmethod
    def search(items: list[MenuItem], query: str) -> list[MenuItem]:
        """Substring search over names and descriptions.

        English text is matched case-insensitively. Chinese text is matched
        exactly as typed.
        """
        if not query:
            return list(items)

        folded = query.casefold()
        return [
            item
            for item in items
            if folded in item.name.en.casefold()
            or query in item.name.tc
            or folded in item.description.en.casefold()
            or query in item.description.tc
        ]

    # ==================== SORTING ====================

    @staticmethod
    def sort_by_price(items: list[MenuItem], ascending: bool = True) -> list[MenuItem]:
        # sorted() is stable in both directions
        return sorted(items, key=lambda item: item.price, reverse=not ascending)

    @staticmethod
    def sort_by_name(items: list[MenuItem]) -> list[MenuItem]:
        return sorted(items, key=lambda item: _collation_key(item.name.en))

    # ==================== STATISTICS ====================

    @staticmethod
    def price_range(items: list[MenuItem]) -> tuple[float, float] | None:
        """(min, max) price, or None for an empty list."""
        if not items:
            return None
        prices = [item.price for item in items]
        return min(prices), max(prices)

    @staticmethod
    def average_price(items: list[MenuItem]) -> float | None:
        if not items:
            return None
        return sum(item.price for item in items) / len(items)
