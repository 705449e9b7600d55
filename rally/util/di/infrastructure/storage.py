"""File storage infrastructure providers."""

from dishka import Scope, provide

from rally.adapter.storage import RealSupabaseStorageClient
from rally.config import StorageSettings
from rally.domain.service import AvatarStorage
from rally.util.di.base import ProviderBase


class StorageProvider(ProviderBase):
    """Storage component base."""

    __mock_component__ = "storage"


class ProdStorageProvider(StorageProvider):
    """Production storage provider (Supabase storage)."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_avatar_storage(self, settings: StorageSettings) -> AvatarStorage:
        """Provide avatar storage client.

        Raises:
            ValueError: If the storage service key is not configured
        """
        if not settings.service_key:
            raise ValueError("Storage service key must be configured")

        return RealSupabaseStorageClient(settings=settings)
