"""Unit tests for the MapTiler geocoding client."""

import httpx
import pytest

from rally.adapter.maptiler import GeocodingError, RealMapTilerGeocodingClient
from rally.adapter.maptiler.client import parse_feature
from rally.config import GeocodingSettings

SETTINGS = GeocodingSettings(api_key="test-key", base_url="https://geo.test/geocoding")

FEATURES = {
    "features": [
        {
            "id": "municipality.1",
            "place_name": "Amsterdam, Netherlands",
            "center": [4.9041, 52.3676],
            "place_type": ["municipality"],
        },
        {
            "id": "poi.2",
            "text": "Amstel",
            "geometry": {"type": "Point", "coordinates": [4.90, 52.35]},
        },
        {"id": "broken", "place_name": "No center"},
    ]
}


def make_client(handler) -> RealMapTilerGeocodingClient:
    return RealMapTilerGeocodingClient(SETTINGS, transport=httpx.MockTransport(handler))


class TestParseFeature:
    """Tests for turning GeoJSON features into candidates."""

    def test_center_is_lng_lat(self):
        candidate = parse_feature(FEATURES["features"][0])

        assert candidate.lat == 52.3676
        assert candidate.lng == 4.9041
        assert candidate.place_type == "municipality"

    def test_geometry_and_text_fallbacks(self):
        candidate = parse_feature(FEATURES["features"][1])

        assert candidate.place_name == "Amstel"
        assert candidate.place_type is None

    def test_feature_without_coordinates_is_skipped(self):
        assert parse_feature(FEATURES["features"][2]) is None


class TestSearch:
    """Tests for RealMapTilerGeocodingClient.search."""

    @pytest.mark.asyncio
    async def test_search_sends_key_and_parses_features(self):
        """Query is path-encoded and usable features are returned."""
        # Arrange
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=FEATURES)

        client = make_client(handler)

        # Act
        results = await client.search("Amsterdam centrum", limit=5, language="en")

        # Assert
        assert [c.place_name for c in results] == ["Amsterdam, Netherlands", "Amstel"]
        request = seen[0]
        assert request.url.path == "/geocoding/Amsterdam centrum.json"
        assert request.url.params["key"] == "test-key"
        assert request.url.params["limit"] == "5"
        assert request.url.params["language"] == "en"

    @pytest.mark.asyncio
    async def test_search_truncates_to_limit(self):
        client = make_client(lambda request: httpx.Response(200, json=FEATURES))

        results = await client.search("Ams", limit=1, language="en")

        assert len(results) == 1

    @pytest.mark.asyncio
    async def test_error_status_raises_geocoding_error(self):
        client = make_client(lambda request: httpx.Response(403, text="bad key"))

        with pytest.raises(GeocodingError, match="403"):
            await client.search("Amsterdam", limit=5, language="en")

    @pytest.mark.asyncio
    async def test_transport_failure_raises_geocoding_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(handler)

        with pytest.raises(GeocodingError, match="HTTP error"):
            await client.search("Amsterdam", limit=5, language="en")

    @pytest.mark.asyncio
    async def test_invalid_json_raises_geocoding_error(self):
        client = make_client(lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(GeocodingError, match="Invalid response"):
            await client.search("Amsterdam", limit=5, language="en")
