"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from rally.config import (
    ActivitySettings,
    AuthSettings,
    FriendSettings,
    GeocodingSettings,
    NotificationSettings,
    Settings,
    StorageSettings,
)
from rally.domain.service import SignedUrlCache
from rally.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    Each settings section is also provided on its own so services depend on
    only the section they use.
    """

    scope = Scope.APP

    @provide
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        return Settings()

    @provide
    def provide_auth_settings(self, settings: Settings) -> AuthSettings:
        """Provide auth settings."""
        return settings.auth

    @provide
    def provide_activity_settings(self, settings: Settings) -> ActivitySettings:
        """Provide activity settings."""
        return settings.activities

    @provide
    def provide_friend_settings(self, settings: Settings) -> FriendSettings:
        """Provide friends and discovery settings."""
        return settings.friends

    @provide
    def provide_notification_settings(self, settings: Settings) -> NotificationSettings:
        """Provide notification settings."""
        return settings.notifications

    @provide
    def provide_geocoding_settings(self, settings: Settings) -> GeocodingSettings:
        """Provide geocoding settings."""
        return settings.geocoding

    @provide
    def provide_storage_settings(self, settings: Settings) -> StorageSettings:
        """Provide storage settings."""
        return settings.storage

    @provide
    def provide_signed_url_cache(self, settings: StorageSettings) -> SignedUrlCache:
        """Provide the process-wide signed avatar URL cache.

        Entries expire a minute before the URLs themselves do.
        """
        return SignedUrlCache(ttl_seconds=max(settings.signed_url_ttl_seconds - 60, 1))
