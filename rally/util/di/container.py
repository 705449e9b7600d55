"""Container construction and FastAPI integration."""

from collections.abc import Collection

from dishka import AsyncContainer, make_async_container
from dishka.integrations.fastapi import FastapiProvider, setup_dishka
from fastapi import FastAPI

from rally.util.di import MOCKABLE, PROVIDERS, Component


def build_container(mock: Collection[Component] = ()) -> AsyncContainer:
    """Build a container, using mock implementations for ``mock`` components.

    Args:
        mock: Components to serve from their mock providers

    Raises:
        ValueError: If an unknown component is named
    """
    unknown = set(mock) - MOCKABLE
    if unknown:
        raise ValueError(f"Unknown components: {sorted(unknown)}")

    providers = [
        base.implementation(mock=base.__mock_component__ in mock)()
        for base in PROVIDERS
    ]
    return make_async_container(*providers, FastapiProvider())


def create_container() -> AsyncContainer:
    """Production container; settings come from the environment."""
    return build_container()


def setup_di(app: FastAPI, container: AsyncContainer) -> None:
    """Serve the app's ``FromDishka`` dependencies from ``container``."""
    setup_dishka(container, app)
