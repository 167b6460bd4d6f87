"""Device location tracking.

The operating-system location service is reached through a
``LocationProvider``. The provider reports back by calling the three
``on_*`` methods of its ``delegate``, from any thread. ``LocationService``
marshals them onto the main context before it touches its state.
"""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field

from pourrice.errors import PermissionDenied
from pourrice.geo import haversine_distance
from pourrice.main_context import MainContext

logger = logging.getLogger(__name__)


class AuthorizationStatus(str, Enum):
    NOT_DETERMINED = "not_determined"
    RESTRICTED = "restricted"
    DENIED = "denied"
    AUTHORIZED_WHEN_IN_USE = "authorized_when_in_use"
    AUTHORIZED_ALWAYS = "authorized_always"

    @property
    def is_authorized(self) -> bool:
        return self in (
            AuthorizationStatus.AUTHORIZED_WHEN_IN_USE,
            AuthorizationStatus.AUTHORIZED_ALWAYS,
        )

    @property
    def is_refused(self) -> bool:
        return self in (AuthorizationStatus.DENIED, AuthorizationStatus.RESTRICTED)


class LocationFailureCode(str, Enum):
    """Failure kinds a provider reports through ``on_location_failed``."""

    DENIED = "denied"
    LOCATION_UNKNOWN = "location_unknown"
    OTHER = "other"


class LocationFix(BaseModel):
    """A single position report."""

    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float
    horizontal_accuracy: float | None = Field(None, description="Metres, 1 sigma")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def distance_to(self, latitude: float, longitude: float) -> float:
        return haversine_distance(self.latitude, self.longitude, latitude, longitude)


class LocationDelegate(Protocol):
    def on_authorization_changed(self, status: AuthorizationStatus) -> None: ...

    def on_locations_updated(self, locations: list[LocationFix]) -> None: ...

    def on_location_failed(
        self, error: BaseException, code: LocationFailureCode = LocationFailureCode.OTHER
    ) -> None: ...


class LocationProvider(Protocol):
    """Operating-system location service."""

    delegate: LocationDelegate | None

    @property
    def authorization_status(self) -> AuthorizationStatus: ...

    def request_when_in_use_authorization(self) -> None: ...

    def start_updating_location(self) -> None: ...

    def stop_updating_location(self) -> None: ...

    def request_location(self) -> None: ...


class LocationService:
    """Tracks the device location and the permission to read it.

    Attributes:
        current_location: Most recent fix, or None before the first one
        authorization_status: Last status reported by the provider
        error: Last failure, for display
        is_loading: True while waiting for a fix
    """

    def __init__(
        self,
        provider: LocationProvider,
        main_context: MainContext | None = None,
    ) -> None:
        self.provider = provider
        self.main_context = main_context or MainContext()

        self.current_location: LocationFix | None = None
        self.authorization_status = provider.authorization_status
        self.error: BaseException | None = None
        self.is_loading = False
        self._is_updating = False

        provider.delegate = self
        logger.info("Location service initialised")

    # ==================== PERMISSION ====================

    @property
    def is_authorized(self) -> bool:
        return self.authorization_status.is_authorized

    @property
    def can_request_permission(self) -> bool:
        return self.authorization_status == AuthorizationStatus.NOT_DETERMINED

    def request_permission(self) -> None:
        """Prompt for permission, or start updates if already granted."""
        self.main_context.check()
        logger.info("Requesting location permission")

        status = self.authorization_status
        if status == AuthorizationStatus.NOT_DETERMINED:
            self.provider.request_when_in_use_authorization()
        elif status.is_refused:
            self.error = PermissionDenied()
            logger.warning("Location permission denied or restricted")
        elif status.is_authorized:
            self.start_location_updates()

    # ==================== UPDATES ====================

    def start_location_updates(self) -> None:
        self.main_context.check()
        if self._is_updating:
            return

        logger.info("Starting location updates")
        self.is_loading = True
        self._is_updating = True
        self.provider.start_updating_location()

    def stop_location_updates(self) -> None:
        self.main_context.check()
        if not self._is_updating:
            return

        logger.info("Stopping location updates")
        self.is_loading = False
        self._is_updating = False
        self.provider.stop_updating_location()

    def request_location(self) -> None:
        """Ask the provider for a single fix."""
        self.main_context.check()
        logger.info("Requesting single location update")
        self.is_loading = True
        self.provider.request_location()

    # ==================== DISTANCE ====================

    @staticmethod
    def distance(a: LocationFix, b: LocationFix) -> float:
        """Great-circle distance between two fixes in metres."""
        return a.distance_to(b.latitude, b.longitude)

    def distance_from_current_location(
        self, latitude: float, longitude: float
    ) -> float | None:
        if self.current_location is None:
            return None
        return self.current_location.distance_to(latitude, longitude)

    # ==================== PROVIDER CALLBACKS ====================

    def on_authorization_changed(self, status: AuthorizationStatus) -> None:
        self.main_context.call_soon(self._handle_authorization_changed, status)

    def on_locations_updated(self, locations: list[LocationFix]) -> None:
        self.main_context.call_soon(self._handle_locations_updated, list(locations))

    def on_location_failed(
        self, error: BaseException, code: LocationFailureCode = LocationFailureCode.OTHER
    ) -> None:
        self.main_context.call_soon(self._handle_location_failed, error, code)

    def _handle_authorization_changed(self, status: AuthorizationStatus) -> None:
        self.authorization_status = status
        logger.info(f"Location authorisation changed: {status.value}")

        if status.is_authorized:
            self.start_location_updates()
        elif status.is_refused:
            self.error = PermissionDenied()
            self.stop_location_updates()

    def _handle_locations_updated(self, locations: list[LocationFix]) -> None:
        if not locations:
            return
        location = locations[-1]
        self.current_location = location
        self.is_loading = False
        logger.info(f"Location updated: {location.latitude}, {location.longitude}")

    def _handle_location_failed(
        self, error: BaseException, code: LocationFailureCode
    ) -> None:
        self.error = error
        self.is_loading = False
        logger.error(f"Location update failed: {error}")

        if code == LocationFailureCode.DENIED:
            self.error = PermissionDenied()
            self.stop_location_updates()
        elif code == LocationFailureCode.LOCATION_UNKNOWN:
            # Transient; the provider keeps updating
            logger.warning("Location temporarily unknown, will retry")
