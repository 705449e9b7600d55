"""Place search domain service.

Backs incremental location entry: clients search as the user types, so a
newer search from the same user supersedes any search still in flight.
"""

import itertools

import logfire
from pydantic import BaseModel

from rally.config import GeocodingSettings
from rally.domain.value import UserId
from rally.domain.value.types import PlaceCandidate
from rally.util.cache import TTLCache

from .base import Service


class GeocodingClient:
    """Geocoding provider interface."""

    async def search(
        self, query: str, limit: int, language: str
    ) -> list[PlaceCandidate]:
        """Look up places matching free text.

        Args:
            query: Free-text place query
            limit: Maximum number of candidates
            language: Preferred result language

        Returns:
            Candidates ranked by the provider
        """
        raise NotImplementedError


class PlaceSearchResult(BaseModel):
    """Outcome of one place search."""

    query: str
    results: list[PlaceCandidate]

    # True when a newer search from the same user started while this one was
    # in flight; its results are dropped
    stale: bool = False


class PlaceService(Service):
    """Domain service for place lookup.

    Application-scoped: it owns the short-lived result cache and the token
    of each user's latest search still in flight.
    """

    def __init__(
        self, geocoding_client: GeocodingClient, settings: GeocodingSettings
    ) -> None:
        """Initialize place service.

        Args:
            geocoding_client: Geocoding provider client
            settings: Geocoding settings
        """
        self.geocoding_client = geocoding_client
        self.settings = settings
        self._cache: TTLCache[list[PlaceCandidate]] = TTLCache(
            ttl_seconds=settings.cache_ttl_seconds
        )
        self._tokens = itertools.count(1)
        # Entries are dropped once the latest search of a user completes
        self._latest: dict[UserId, int] = {}

    async def search(self, user_id: UserId, query: str) -> PlaceSearchResult:
        """Search places for a user, last request wins.

        Args:
            user_id: Searching user
            query: Free-text query

        Returns:
            Candidates, or an empty stale result if superseded

        Raises:
            ProviderError: If the geocoding provider fails
        """
        normalized = " ".join(query.split())
        if len(normalized) < self.settings.min_query_length:
            return PlaceSearchResult(query=normalized, results=[])

        token = next(self._tokens)
        self._latest[user_id] = token
        try:
            key = normalized.lower()
            hit, cached = self._cache.get(key)
            if hit:
                return PlaceSearchResult(query=normalized, results=cached)

            with logfire.span(
                "place_service.search", user_id=user_id, query=normalized
            ):
                results = await self.geocoding_client.search(
                    normalized, self.settings.limit, self.settings.language
                )
                self._cache.set(key, results)

                if self._latest.get(user_id) != token:
                    logfire.info(
                        "Place search superseded", user_id=user_id, query=normalized
                    )
                    return PlaceSearchResult(query=normalized, results=[], stale=True)

                return PlaceSearchResult(query=normalized, results=results)
        finally:
            if self._latest.get(user_id) == token:
                del self._latest[user_id]
