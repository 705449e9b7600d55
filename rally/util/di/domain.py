"""Domain layer DI providers."""

from dishka import Scope, provide

from rally.config import (
    ActivitySettings,
    AuthSettings,
    FriendSettings,
    GeocodingSettings,
    NotificationSettings,
    StorageSettings,
)
from rally.domain.repository import (
    ActivityRepository,
    FriendshipRepository,
    InvitationRepository,
    NotificationRepository,
    NotificationSink,
    ParticipationRepository,
    ProfileRepository,
)
from rally.domain.service import (
    ActivityService,
    AvatarStorage,
    FriendshipService,
    GeocodingClient,
    InvitationService,
    JWTService,
    NotificationService,
    PlaceService,
    ProfileService,
    SignedUrlCache,
)
from rally.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Each HTTP request gets fresh service instances with their own transaction.
    ``PlaceService`` is the exception: it owns a process-wide cache.
    """

    scope = Scope.REQUEST

    @provide
    def get_jwt_service(self, auth_settings: AuthSettings) -> JWTService:
        """Provide JWT token domain service."""
        return JWTService(auth_settings=auth_settings)

    @provide
    def get_notification_service(
        self,
        notification_repository: NotificationRepository,
        notification_sink: NotificationSink,
        settings: NotificationSettings,
    ) -> NotificationService:
        """Provide notification domain service."""
        return NotificationService(
            notification_repository=notification_repository,
            notification_sink=notification_sink,
            settings=settings,
        )

    @provide
    def get_profile_service(
        self,
        profile_repository: ProfileRepository,
        avatar_storage: AvatarStorage,
        signed_url_cache: SignedUrlCache,
        storage_settings: StorageSettings,
        friend_settings: FriendSettings,
    ) -> ProfileService:
        """Provide profile domain service."""
        return ProfileService(
            profile_repository=profile_repository,
            avatar_storage=avatar_storage,
            signed_url_cache=signed_url_cache,
            storage_settings=storage_settings,
            friend_settings=friend_settings,
        )

    @provide
    def get_friendship_service(
        self,
        friendship_repository: FriendshipRepository,
        profile_repository: ProfileRepository,
        notification_service: NotificationService,
    ) -> FriendshipService:
        """Provide friendship domain service."""
        return FriendshipService(
            friendship_repository=friendship_repository,
            profile_repository=profile_repository,
            notification_service=notification_service,
        )

    @provide
    def get_activity_service(
        self,
        activity_repository: ActivityRepository,
        participation_repository: ParticipationRepository,
        settings: ActivitySettings,
    ) -> ActivityService:
        """Provide activity domain service."""
        return ActivityService(
            activity_repository=activity_repository,
            participation_repository=participation_repository,
            settings=settings,
        )

    @provide
    def get_invitation_service(
        self,
        invitation_repository: InvitationRepository,
        profile_repository: ProfileRepository,
        activity_service: ActivityService,
        friendship_service: FriendshipService,
        notification_service: NotificationService,
    ) -> InvitationService:
        """Provide invitation domain service."""
        return InvitationService(
            invitation_repository=invitation_repository,
            profile_repository=profile_repository,
            activity_service=activity_service,
            friendship_service=friendship_service,
            notification_service=notification_service,
        )

    @provide(scope=Scope.APP)
    def get_place_service(
        self, geocoding_client: GeocodingClient, settings: GeocodingSettings
    ) -> PlaceService:
        """Provide place search domain service (application-wide)."""
        return PlaceService(geocoding_client=geocoding_client, settings=settings)
