"""Place use cases."""

from .search_places import SearchPlacesUseCase

__all__ = ["SearchPlacesUseCase"]
