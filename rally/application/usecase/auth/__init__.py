"""Auth use cases."""

from .get_session import GetSessionUseCase

__all__ = ["GetSessionUseCase"]
