"""Configuration management for the Pour Rice client using Pydantic."""

import logging

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Config(BaseSettings):
    """Client configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Backend API Configuration
    api_base_url: str = Field(
        default="https://vercel-express-api-alpha.vercel.app",
        description="Base URL of the Pour Rice REST API",
    )
    api_passcode: str = Field(
        default="PourRice", description="Pre-shared passcode required on every call"
    )
    api_passcode_header: str = Field(
        default="x-api-passcode", description="Header carrying the passcode"
    )
    request_timeout: float = Field(
        default=30.0, description="Timeout in seconds applied to every request"
    )

    # Firebase Configuration
    firebase_api_key: str | None = Field(None, description="Firebase Web API key")

    # Algolia Configuration
    algolia_application_id: str = Field(
        default="V9HMGL1VIZ", description="Algolia application ID"
    )
    algolia_search_api_key: str | None = Field(
        None, description="Algolia search-only API key"
    )
    algolia_index_name: str = Field(
        default="Restaurants", description="Algolia index holding restaurants"
    )
    algolia_search_radius: int = Field(
        default=5000, description="Geo-bias radius in metres for located searches"
    )

    # Search Configuration
    search_max_results: int = Field(default=50, description="Hits per search page")
    search_min_query_length: int = Field(
        default=2, description="Shortest query sent by search-as-you-type"
    )
    search_debounce_ms: int = Field(
        default=300, description="Quiet period before a typed query is sent"
    )

    # Cache Configuration
    restaurant_cache_limit: int = Field(
        default=50, description="Maximum number of cached restaurant details"
    )
    restaurant_cache_ttl: float = Field(
        default=3600.0, description="Lifetime of a cached restaurant in seconds"
    )

    # Location Configuration
    default_search_radius: float = Field(
        default=5000.0, description="Default nearby-search radius in metres"
    )

    # Localisation
    preferred_language: str | None = Field(
        None, description="Language tag overriding the system locale (en, zh-Hant)"
    )

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")

    def has_firebase_config(self) -> bool:
        """Check if Firebase Authentication is configured."""
        return bool(self.firebase_api_key)

    def has_algolia_config(self) -> bool:
        """Check if Algolia search is configured."""
        return bool(self.algolia_application_id and self.algolia_search_api_key)

    def model_post_init(self, __context) -> None:
        """Validate configuration after initialization."""
        if not self.firebase_api_key:
            logger.warning("FIREBASE_API_KEY not set - sign-in features disabled")

        if not self.algolia_search_api_key:
            logger.warning("ALGOLIA_SEARCH_API_KEY not set - search disabled")


# Global config instance
config: Config | None = None


def get_config() -> Config:
    """Get or create the global configuration instance."""
    global config
    if config is None:
        config = Config()
    return config


def setup_logging(cfg: Config | None = None) -> None:
    """Configure logging for the client."""
    if cfg is None:
        cfg = get_config()

    log_level = getattr(logging, cfg.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Reduce noise from external libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
