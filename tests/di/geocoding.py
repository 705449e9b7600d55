"""Mock geocoding providers for testing."""

from dishka import Scope, provide

from rally.adapter.maptiler import MockMapTilerGeocodingClient
from rally.domain.service import GeocodingClient
from rally.util.di.infrastructure.geocoding import GeocodingProvider


class MockGeocodingProvider(GeocodingProvider):
    """Mock geocoding provider returning canned places."""

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def get_geocoding_client(self) -> GeocodingClient:
        """Provide mock MapTiler client."""
        return MockMapTilerGeocodingClient()
