"""Dependency injection wiring.

``PROVIDERS`` lists one entry per concern. Component entries are bases whose
concrete class is chosen when the container is built, see
``rally.util.di.container.build_container``.
"""

from rally.util.di.application import ProdApplicationProvider
from rally.util.di.base import Component, ProviderBase
from rally.util.di.core import ProdConfigProvider
from rally.util.di.domain import ProdDomainProvider
from rally.util.di.infrastructure import (
    GeocodingProvider,
    PersistenceProvider,
    StorageProvider,
)

PROVIDERS: list[type[ProviderBase]] = [
    ProdConfigProvider,
    ProdDomainProvider,
    ProdApplicationProvider,
    PersistenceProvider,
    GeocodingProvider,
    StorageProvider,
]

# Names accepted by build_container(mock=...)
MOCKABLE: frozenset[Component] = frozenset(
    base.__mock_component__ for base in PROVIDERS if base.__mock_component__
)

__all__ = ["Component", "MOCKABLE", "PROVIDERS", "ProviderBase"]
