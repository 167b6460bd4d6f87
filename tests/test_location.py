"""Tests for the location service."""

import pytest

from pourrice.errors import PermissionDenied
from pourrice.geo import haversine_distance
from pourrice.services.location_service import (
    AuthorizationStatus,
    LocationFailureCode,
    LocationFix,
    LocationService,
)


class FakeLocationProvider:
    """In-memory stand-in for the OS location service."""

    def __init__(self, status=AuthorizationStatus.NOT_DETERMINED):
        self.delegate = None
        self._status = status
        self.calls: list[str] = []

    @property
    def authorization_status(self):
        return self._status

    def request_when_in_use_authorization(self):
        self.calls.append("request_authorization")

    def start_updating_location(self):
        self.calls.append("start")

    def stop_updating_location(self):
        self.calls.append("stop")

    def request_location(self):
        self.calls.append("request_location")

    def change_authorization(self, status):
        self._status = status
        self.delegate.on_authorization_changed(status)


CENTRAL = LocationFix(latitude=22.2819, longitude=114.1581)
TSIM_SHA_TSUI = LocationFix(latitude=22.2988, longitude=114.1722)


class TestLocationService:
    """Tests for the permission state machine and updates."""

    @pytest.fixture
    def provider(self):
        return FakeLocationProvider()

    @pytest.fixture
    def service(self, provider, main_context):
        return LocationService(provider, main_context)

    def test_registers_as_delegate(self, service, provider):
        """Test that the service receives provider callbacks."""
        assert provider.delegate is service
        assert service.can_request_permission
        assert not service.is_authorized

    def test_request_permission_prompts_when_undetermined(self, service, provider):
        """Test that an undetermined status triggers the prompt."""
        service.request_permission()

        assert provider.calls == ["request_authorization"]

    def test_grant_starts_updates(self, service, provider):
        """Test that granting permission starts location updates."""
        provider.change_authorization(AuthorizationStatus.AUTHORIZED_WHEN_IN_USE)

        assert service.is_authorized
        assert service.is_loading
        assert provider.calls == ["start"]

    def test_request_permission_when_authorized(self, main_context):
        """Test that an authorized service starts updates directly."""
        provider = FakeLocationProvider(AuthorizationStatus.AUTHORIZED_ALWAYS)
        service = LocationService(provider, main_context)

        service.request_permission()
        service.request_permission()

        assert provider.calls == ["start"]

    @pytest.mark.parametrize(
        "status", [AuthorizationStatus.DENIED, AuthorizationStatus.RESTRICTED]
    )
    def test_request_permission_when_refused(self, main_context, status):
        """Test that a refused status sets PermissionDenied."""
        provider = FakeLocationProvider(status)
        service = LocationService(provider, main_context)

        service.request_permission()

        assert isinstance(service.error, PermissionDenied)
        assert provider.calls == []

    def test_revoked_permission_stops_updates(self, service, provider):
        """Test that a denial after granting stops updates."""
        provider.change_authorization(AuthorizationStatus.AUTHORIZED_WHEN_IN_USE)
        provider.change_authorization(AuthorizationStatus.DENIED)

        assert provider.calls == ["start", "stop"]
        assert isinstance(service.error, PermissionDenied)
        assert not service.is_loading

    def test_location_update_takes_last_fix(self, service):
        """Test that the newest fix becomes the current location."""
        service.request_location()

        service.on_locations_updated([CENTRAL, TSIM_SHA_TSUI])

        assert service.current_location == TSIM_SHA_TSUI
        assert not service.is_loading

    def test_empty_update_ignored(self, service):
        """Test that an empty batch changes nothing."""
        service.on_locations_updated([])

        assert service.current_location is None

    def test_denied_failure_stops_updates(self, service, provider):
        """Test that a denied failure stops updates."""
        provider.change_authorization(AuthorizationStatus.AUTHORIZED_WHEN_IN_USE)

        service.on_location_failed(OSError("denied"), LocationFailureCode.DENIED)

        assert isinstance(service.error, PermissionDenied)
        assert provider.calls == ["start", "stop"]

    def test_unknown_location_keeps_updating(self, service, provider):
        """Test that a transient failure does not stop updates."""
        provider.change_authorization(AuthorizationStatus.AUTHORIZED_WHEN_IN_USE)
        error = OSError("no fix yet")

        service.on_location_failed(error, LocationFailureCode.LOCATION_UNKNOWN)

        assert service.error is error
        assert provider.calls == ["start"]

    def test_distance_from_current_location(self, service):
        """Test distance from the current fix."""
        assert service.distance_from_current_location(22.3, 114.2) is None

        service.on_locations_updated([CENTRAL])

        assert service.distance_from_current_location(
            CENTRAL.latitude, CENTRAL.longitude
        ) == pytest.approx(0.0)

    def test_static_distance(self):
        """Test the great-circle distance between two fixes."""
        distance = LocationService.distance(CENTRAL, TSIM_SHA_TSUI)

        assert distance == pytest.approx(2350, rel=0.05)
        assert distance == pytest.approx(LocationService.distance(TSIM_SHA_TSUI, CENTRAL))


class TestHaversine:
    """Tests for the distance helper."""

    def test_one_degree_of_latitude(self):
        """Test a known distance along a meridian."""
        assert haversine_distance(0, 0, 1, 0) == pytest.approx(111_195, rel=0.001)

    def test_same_point(self):
        """Test that identical points are zero metres apart."""
        assert haversine_distance(22.3, 114.2, 22.3, 114.2) == 0.0
