"""MapTiler geocoding client.

Forward geocoding for place search while the user types a location.
"""

from typing import Any
from urllib.parse import quote

import httpx
import logfire

from rally.adapter.error import ProviderError
from rally.config import GeocodingSettings
from rally.domain.service.place_service import GeocodingClient
from rally.domain.value.types import PlaceCandidate


class GeocodingError(ProviderError):
    """Geocoding provider error."""

    def __init__(self, message: str) -> None:
        super().__init__("maptiler", message)


class MapTilerGeocodingClient(GeocodingClient):
    """Base class for MapTiler geocoding clients.

    Provides type distinction for dependency injection.
    """

    pass


def parse_feature(feature: dict[str, Any]) -> PlaceCandidate | None:
    """Convert a GeoJSON feature into a place candidate.

    Features without a usable ``[lng, lat]`` center are skipped.

    Args:
        feature: One entry of the response's ``features`` list

    Returns:
        The candidate, or None if the feature cannot be used
    """
    center = feature.get("center") or (feature.get("geometry") or {}).get(
        "coordinates"
    )
    if not center or len(center) < 2:
        return None

    place_name = feature.get("place_name") or feature.get("text")
    if not place_name:
        return None

    place_types = feature.get("place_type") or []
    return PlaceCandidate(
        id=str(feature.get("id", place_name)),
        place_name=place_name,
        lng=float(center[0]),
        lat=float(center[1]),
        place_type=place_types[0] if place_types else None,
    )


class RealMapTilerGeocodingClient(MapTilerGeocodingClient):
    """MapTiler forward geocoding over HTTP."""

    def __init__(
        self,
        settings: GeocodingSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize MapTiler client.

        Args:
            settings: Geocoding settings with API key and endpoint
            transport: Optional httpx transport (used by tests)
        """
        self.settings = settings
        self._transport = transport

    async def search(
        self, query: str, limit: int, language: str
    ) -> list[PlaceCandidate]:
        """Look up places matching free text.

        Args:
            query: Free-text place query
            limit: Maximum number of candidates
            language: Preferred result language

        Returns:
            Candidates in provider ranking order

        Raises:
            GeocodingError: If the request fails or the response is malformed
        """
        url = f"{self.settings.base_url.rstrip('/')}/{quote(query, safe='')}.json"
        params = {"key": self.settings.api_key, "limit": limit, "language": language}

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.get(
                    url, params=params, timeout=self.settings.timeout_seconds
                )
        except httpx.HTTPError as e:
            logfire.error("MapTiler geocoding HTTP error", query=query, error=str(e))
            raise GeocodingError(f"HTTP error during place search: {e}") from e

        if response.status_code != 200:
            logfire.error(
                "MapTiler geocoding request failed",
                query=query,
                status_code=response.status_code,
                error=response.text,
            )
            raise GeocodingError(f"Place search failed: {response.status_code}")

        try:
            features = response.json().get("features", [])
        except ValueError as e:
            logfire.error("MapTiler geocoding returned invalid JSON", query=query)
            raise GeocodingError("Invalid response from place search") from e

        candidates = [c for c in map(parse_feature, features) if c is not None]
        logfire.info("MapTiler geocoding completed", query=query, results=len(candidates))
        return candidates[:limit]


class MockMapTilerGeocodingClient(MapTilerGeocodingClient):
    """Mock geocoding client for testing.

    Returns deterministic candidates derived from the query and records
    every call so tests can assert on caching.
    """

    def __init__(self) -> None:
        self.calls: list[str] = []
        self.fail_with: Exception | None = None

    async def search(
        self, query: str, limit: int, language: str
    ) -> list[PlaceCandidate]:
        """Return fake candidates for the query."""
        self.calls.append(query)
        if self.fail_with is not None:
            raise self.fail_with

        return [
            PlaceCandidate(
                id=f"mock.{i}",
                place_name=f"{query} {i}",
                lat=52.37 + i * 0.01,
                lng=4.89 + i * 0.01,
                place_type="place",
            )
            for i in range(min(limit, 3))
        ]
