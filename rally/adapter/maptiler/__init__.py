"""MapTiler geocoding adapter."""

from .client import (
    GeocodingError,
    MapTilerGeocodingClient,
    MockMapTilerGeocodingClient,
    RealMapTilerGeocodingClient,
)

__all__ = [
    "GeocodingError",
    "MapTilerGeocodingClient",
    "MockMapTilerGeocodingClient",
    "RealMapTilerGeocodingClient",
]
