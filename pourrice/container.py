"""Explicit construction and wiring of the client services."""

import logging

import httpx

from pourrice.auth.provider import FirebaseIdentityProvider, IdentityProvider
from pourrice.auth.service import AuthService
from pourrice.config import Config, get_config
from pourrice.main_context import MainContext
from pourrice.network.client import DefaultAPIClient
from pourrice.services.location_service import LocationProvider, LocationService
from pourrice.services.menu_service import MenuService
from pourrice.services.restaurant_service import RestaurantService
from pourrice.services.review_service import ReviewService
from pourrice.services.search_service import SearchService

logger = logging.getLogger(__name__)


class Services:
    """Holds one instance of every service, wired together.

    The session manager needs an HTTP client to load profiles, and the
    authenticated HTTP client needs the session manager for tokens. The
    cycle is broken in two phases: the session manager gets a bootstrap
    client without a token provider, and the client used by the domain
    services is built afterwards with the session manager as its token
    provider.
    """

    def __init__(
        self,
        config: Config,
        main_context: MainContext,
        bootstrap_client: DefaultAPIClient,
        auth: AuthService,
        api_client: DefaultAPIClient,
        restaurants: RestaurantService,
        menus: MenuService,
        reviews: ReviewService,
        search: SearchService,
        location: LocationService | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config
        self.main_context = main_context
        self.bootstrap_client = bootstrap_client
        self.auth = auth
        self.api_client = api_client
        self.restaurants = restaurants
        self.menus = menus
        self.reviews = reviews
        self.search = search
        self.location = location
        self._http_client = http_client

    @classmethod
    def create(
        cls,
        config: Config | None = None,
        identity_provider: IdentityProvider | None = None,
        location_provider: LocationProvider | None = None,
        http_client: httpx.AsyncClient | None = None,
        main_context: MainContext | None = None,
    ) -> "Services":
        """Build the full service graph.

        Args:
            config: Client configuration (defaults to the global config)
            identity_provider: Identity provider; a Firebase provider is
                created from ``config.firebase_api_key`` if omitted
            location_provider: Device location source; no location service
                is built without one
            http_client: httpx client shared by every component; if omitted
                one is created and closed by ``aclose``
            main_context: Context owning user-facing state; defaults to the
                calling thread

        Returns:
            The wired services
        """
        config = config or get_config()
        main_context = main_context or MainContext()

        owned_http_client = None
        if http_client is None:
            http_client = owned_http_client = httpx.AsyncClient(
                timeout=config.request_timeout
            )

        if identity_provider is None:
            identity_provider = FirebaseIdentityProvider(
                config.firebase_api_key or "",
                http_client=http_client,
                timeout=config.request_timeout,
            )

        # Phase 1: session manager on a client that never asks for tokens
        bootstrap_client = DefaultAPIClient(config, http_client=http_client)
        auth = AuthService(bootstrap_client, identity_provider, main_context)

        # Phase 2: authenticated client for the domain services
        api_client = DefaultAPIClient(
            config, token_provider=auth, http_client=http_client
        )

        location = None
        if location_provider is not None:
            location = LocationService(location_provider, main_context)

        logger.info("Services initialised")
        return cls(
            config=config,
            main_context=main_context,
            bootstrap_client=bootstrap_client,
            auth=auth,
            api_client=api_client,
            restaurants=RestaurantService(api_client, config),
            menus=MenuService(api_client),
            reviews=ReviewService(api_client),
            search=SearchService(config, http_client=http_client),
            location=location,
            http_client=owned_http_client,
        )

    async def aclose(self) -> None:
        """Deregister the auth listener and close the shared HTTP client."""
        self.auth.close()
        await self.main_context.drain()
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
