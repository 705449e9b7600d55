"""Geocoding infrastructure providers."""

from dishka import Scope, provide

from rally.adapter.maptiler import RealMapTilerGeocodingClient
from rally.config import GeocodingSettings
from rally.domain.service import GeocodingClient
from rally.util.di.base import ProviderBase


class GeocodingProvider(ProviderBase):
    """Geocoding component base."""

    __mock_component__ = "geocoding"


class ProdGeocodingProvider(GeocodingProvider):
    """Production geocoding provider (MapTiler)."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_geocoding_client(self, settings: GeocodingSettings) -> GeocodingClient:
        """Provide MapTiler geocoding client.

        Raises:
            ValueError: If the MapTiler API key is not configured
        """
        if not settings.api_key:
            raise ValueError("MapTiler API key must be configured")

        return RealMapTilerGeocodingClient(settings=settings)
