"""Restaurant lookup service backed by the Pour Rice API."""

import logging

from pourrice.config import Config, get_config
from pourrice.models.restaurant import Restaurant, RestaurantListResponse
from pourrice.network.client import APIClient
from pourrice.network.endpoints import (
    FetchFeaturedRestaurants,
    FetchNearbyRestaurants,
    FetchRestaurant,
)
from pourrice.services.cache import RestaurantCache

logger = logging.getLogger(__name__)


class RestaurantService:
    """Service for fetching restaurants.

    Restaurant details are cached per id for a fixed TTL. Lists are always
    fetched from the network. API errors propagate unchanged.
    """

    def __init__(
        self,
        api_client: APIClient,
        config: Config | None = None,
        cache: RestaurantCache | None = None,
    ) -> None:
        """Initialize the restaurant service.

        Args:
            api_client: Client used for backend calls
            config: Client configuration (defaults to the global config)
            cache: Detail cache; one sized from config is created if omitted
        """
        self.api_client = api_client
        self.config = config or get_config()
        self.cache = cache or RestaurantCache(
            limit=self.config.restaurant_cache_limit,
            ttl=self.config.restaurant_cache_ttl,
        )

    async def fetch_nearby_restaurants(
        self,
        latitude: float,
        longitude: float,
        radius: float | None = None,
    ) -> list[Restaurant]:
        """Fetch restaurants within ``radius`` metres of a coordinate."""
        if radius is None:
            radius = self.config.default_search_radius

        logger.info(
            f"Fetching nearby restaurants (lat: {latitude}, lng: {longitude}, "
            f"radius: {radius}m)"
        )

        endpoint = FetchNearbyRestaurants(lat=latitude, lng=longitude, radius=radius)
        response = await self.api_client.request(endpoint, RestaurantListResponse)

        logger.info(f"Fetched {len(response.restaurants)} nearby restaurants")
        return response.restaurants

    async def fetch_featured_restaurants(self) -> list[Restaurant]:
        """Fetch the featured restaurants shown on the home screen."""
        logger.info("Fetching featured restaurants")

        response = await self.api_client.request(
            FetchFeaturedRestaurants(), RestaurantListResponse
        )

        logger.info(f"Fetched {len(response.restaurants)} featured restaurants")
        return response.restaurants

    async def fetch_restaurant(self, restaurant_id: str) -> Restaurant:
        """Fetch restaurant details, serving from cache while valid."""
        cached = self.cache.get(restaurant_id)
        if cached is not None:
            logger.info(f"Returning cached restaurant: {restaurant_id}")
            return cached

        logger.info(f"Fetching restaurant details: {restaurant_id}")

        restaurant = await self.api_client.request(
            FetchRestaurant(id=restaurant_id), Restaurant
        )
        self.cache.set(restaurant_id, restaurant)

        logger.info(f"Fetched and cached restaurant: {restaurant.name.en}")
        return restaurant

    def remove_cached_restaurant(self, restaurant_id: str) -> None:
        self.cache.remove(restaurant_id)
        logger.info(f"Removed restaurant from cache: {restaurant_id}")

    def clear_cache(self) -> None:
        self.cache.clear()
        logger.info("Restaurant cache cleared")
