"""Full-text restaurant search backed by Algolia.

Queries go to the Algolia REST API through httpx. Filters are encoded as
an Algolia filter expression. ``DebouncedSearch`` implements the
search-as-you-type flow on top of ``SearchService``.
"""

import asyncio
import json
import logging
from urllib.parse import urlencode

import httpx
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from pourrice.config import Config, get_config
from pourrice.errors import DecodingError, PourRiceError
from pourrice.main_context import MainContext
from pourrice.models.bilingual import BilingualText
from pourrice.models.menu import DietaryTag
from pourrice.models.restaurant import Restaurant
from pourrice.network.client import check_status, translate_transport_errors

logger = logging.getLogger(__name__)

ALGOLIA_QUERY_URL = "https://{app_id}-dsn.algolia.net/1/indexes/{index}/query"
APPLICATION_ID_HEADER = "X-Algolia-Application-Id"
API_KEY_HEADER = "X-Algolia-API-Key"

AROUND_PRECISION_METRES = 100
DEFAULT_MAX_SUGGESTIONS = 5

Coordinate = tuple[float, float]


class SearchFilters(BaseModel):
    """User-selected search refinements."""

    cuisines: list[str] = Field(default_factory=list)
    price_ranges: list[str] = Field(default_factory=list)
    min_rating: float | None = None
    # Not encoded into the filter expression
    dietary_restrictions: list[DietaryTag] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return (
            not self.cuisines
            and not self.price_ranges
            and self.min_rating is None
            and not self.dietary_restrictions
        )

    def clear(self) -> None:
        self.cuisines = []
        self.price_ranges = []
        self.min_rating = None
        self.dietary_restrictions = []

    def to_filter_expression(self) -> str | None:
        """Build the Algolia ``filters`` string, or None when nothing applies.

        Example:
            ``(cuisine:Thai OR cuisine:Japanese) AND (priceRange:$$) AND rating >= 4.0``
        """
        components: list[str] = []

        if self.cuisines:
            joined = " OR ".join(f"cuisine:{cuisine}" for cuisine in self.cuisines)
            components.append(f"({joined})")

        if self.price_ranges:
            joined = " OR ".join(f"priceRange:{price}" for price in self.price_ranges)
            components.append(f"({joined})")

        if self.min_rating is not None:
            components.append(f"rating >= {self.min_rating}")

        if not components:
            return None
        return " AND ".join(components)


def _encode_params(params: dict) -> str:
    # Algolia expects list parameters as JSON arrays inside the params string
    return urlencode(
        {
            key: json.dumps(value) if isinstance(value, list) else value
            for key, value in params.items()
        }
    )


def _suggestion_text(value) -> str | None:
    if isinstance(value, str):
        return value or None
    if isinstance(value, dict):
        text = BilingualText.model_validate(value).localized()
        return text or None
    return None


class SearchService:
    """Restaurant search against the Algolia index."""

    def __init__(
        self,
        config: Config | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the search service.

        Args:
            config: Client configuration (defaults to the global config)
            http_client: Shared httpx client; one is created if omitted
        """
        self.config = config or get_config()
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=self.config.request_timeout
        )
        self.url = ALGOLIA_QUERY_URL.format(
            app_id=self.config.algolia_application_id.lower(),
            index=self.config.algolia_index_name,
        )
        logger.info("Algolia search client initialised")

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self._http.aclose()

    async def search(
        self,
        query: str,
        filters: SearchFilters | None = None,
        location: Coordinate | None = None,
    ) -> list[Restaurant]:
        """Search restaurants by text, filters and optional proximity.

        Args:
            query: Free-text query; empty browses the whole index
            filters: Refinements applied server-side
            location: (latitude, longitude) used to rank nearby results first

        Returns:
            Decoded restaurants; hits that fail to decode are skipped

        Raises:
            APIError: If the request fails or the response is not JSON
        """
        filters = filters or SearchFilters()
        logger.info(f"Algolia search: '{query}' with filters: {filters}")

        params: dict = {"query": query, "hitsPerPage": self.config.search_max_results}
        if location is not None:
            lat, lng = location
            params["aroundLatLng"] = f"{lat},{lng}"
            params["aroundRadius"] = self.config.algolia_search_radius
            params["aroundPrecision"] = AROUND_PRECISION_METRES

        expression = filters.to_filter_expression()
        if expression:
            params["filters"] = expression

        restaurants: list[Restaurant] = []
        for hit in await self._query(params):
            try:
                restaurants.append(Restaurant.model_validate(hit))
            except PydanticValidationError as e:
                logger.warning(
                    f"Skipping undecodable search hit {hit.get('objectID')}: {e}"
                )

        logger.info(f"Algolia returned {len(restaurants)} results")
        return restaurants

    async def browse_all(
        self,
        filters: SearchFilters | None = None,
        location: Coordinate | None = None,
    ) -> list[Restaurant]:
        """List every restaurant matching the filters."""
        return await self.search("", filters, location)

    async def autocomplete(
        self, partial_query: str, max_suggestions: int = DEFAULT_MAX_SUGGESTIONS
    ) -> list[str]:
        """Suggest restaurant names and cuisines for a partial query.

        Suggestions are advisory: any failure is logged and yields an
        empty list.
        """
        if not partial_query:
            return []

        params = {
            "query": partial_query,
            "hitsPerPage": max_suggestions,
            "attributesToRetrieve": ["name", "cuisine"],
        }

        try:
            hits = await self._query(params)
        except PourRiceError as e:
            logger.warning(f"Autocomplete failed: {e}")
            return []

        suggestions: list[str] = []
        for hit in hits:
            for attribute in ("name", "cuisine"):
                text = _suggestion_text(hit.get(attribute))
                if text and text not in suggestions:
                    suggestions.append(text)
            if len(suggestions) >= max_suggestions:
                break

        return suggestions[:max_suggestions]

    async def _query(self, params: dict) -> list[dict]:
        headers = {
            APPLICATION_ID_HEADER: self.config.algolia_application_id,
            API_KEY_HEADER: self.config.algolia_search_api_key or "",
        }

        with translate_transport_errors():
            response = await self._http.post(
                self.url,
                json={"params": _encode_params(params)},
                headers=headers,
            )

        check_status(response)

        try:
            hits = response.json()["hits"]
        except (ValueError, KeyError, TypeError) as e:
            logger.error(f"Unexpected Algolia response: {response.text}")
            raise DecodingError() from e
        return [hit for hit in hits if isinstance(hit, dict)]


class DebouncedSearch:
    """Search-as-you-type.

    Each keystroke calls ``schedule``. The previous pending search is
    cancelled, and the new one waits for the debounce interval before it
    hits the network. ``results``, ``error`` and ``is_searching`` change
    only on the main context.
    """

    def __init__(
        self,
        search_service: SearchService,
        main_context: MainContext,
        config: Config | None = None,
    ) -> None:
        self.search_service = search_service
        self.main_context = main_context
        self.config = config or get_config()

        self.filters = SearchFilters()
        self.location: Coordinate | None = None

        self.results: list[Restaurant] = []
        self.error: PourRiceError | None = None
        self.is_searching = False
        self._pending: asyncio.Task | None = None

    @property
    def debounce_seconds(self) -> float:
        return self.config.search_debounce_ms / 1000

    def schedule(self, query: str) -> asyncio.Task | None:
        """Replace any pending search with one for ``query``.

        Returns the new task, or None when the query is too short to send
        (the results are cleared instead).
        """
        self.main_context.check()
        self.cancel()

        if len(query.strip()) < self.config.search_min_query_length:
            self.results = []
            self.error = None
            return None

        self._pending = self.main_context.spawn(self._run(query))
        return self._pending

    def cancel(self) -> None:
        """Cancel the pending search, if any."""
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    async def _run(self, query: str) -> None:
        await asyncio.sleep(self.debounce_seconds)

        self.is_searching = True
        self.error = None
        try:
            self.results = await self.search_service.search(
                query, self.filters, self.location
            )
        except PourRiceError as e:
            # Surfaced to the UI through ``error``
            logger.error(f"Search failed: {e}")
            self.error = e
        finally:
            self.is_searching = False
