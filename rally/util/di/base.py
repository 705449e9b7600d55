"""Provider metadata shared by the production and mock containers."""

from typing import ClassVar, Literal

from dishka import Provider

# Infrastructure that tests can swap for an in-memory or fake implementation
Component = Literal["persistence", "geocoding", "storage"]


class ProviderBase(Provider):
    """dishka provider that knows which swappable component it serves.

    Component bases (persistence, geocoding, storage) set
    ``__mock_component__``; their production and mock subclasses differ only
    in ``__is_mock__``. Config, domain and application providers leave both
    unset and are always used as they are.
    """

    __mock_component__: ClassVar[Component | None] = None
    __is_mock__: ClassVar[bool] = False

    @classmethod
    def implementation(cls, mock: bool) -> type["ProviderBase"]:
        """Pick the production or mock subclass of a component base.

        Mock subclasses live under ``tests.di`` and are only found once that
        package has been imported.

        Raises:
            ValueError: If no subclass of the requested kind is registered
        """
        subclasses = cls.__subclasses__()
        if not subclasses:
            return cls

        for subclass in subclasses:
            if subclass.__is_mock__ == mock:
                return subclass

        kind = "mock" if mock else "production"
        raise ValueError(f"No {kind} implementation for {cls.__mock_component__}")
