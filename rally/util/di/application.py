"""Application layer DI providers."""

from dishka import Scope, provide

from rally.application.usecase.activity import (
    CancelActivityUseCase,
    ChangeParticipationUseCase,
    CreateActivityUseCase,
    GetActivityUseCase,
    GetFeedUseCase,
    ListMyActivitiesUseCase,
    TransferOwnershipUseCase,
    UpdateActivityUseCase,
)
from rally.application.usecase.auth import GetSessionUseCase
from rally.application.usecase.friend import (
    DiscoverPeopleUseCase,
    GetFriendsUseCase,
    ManageFriendshipUseCase,
)
from rally.application.usecase.invitation import (
    CancelInvitationUseCase,
    ListReceivedInvitationsUseCase,
    ListSentInvitationsUseCase,
    RespondInvitationUseCase,
    SendInvitationsUseCase,
)
from rally.application.usecase.notification import (
    ListNotificationsUseCase,
    MarkReadUseCase,
)
from rally.application.usecase.place import SearchPlacesUseCase
from rally.application.usecase.profile import (
    GetProfileUseCase,
    UpdateProfileUseCase,
    UploadAvatarUseCase,
)
from rally.domain.service import (
    ActivityService,
    FriendshipService,
    InvitationService,
    NotificationService,
    PlaceService,
    ProfileService,
)
from rally.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Auth use cases
    @provide(scope=Scope.REQUEST)
    def get_session_use_case(self, profile_service: ProfileService) -> GetSessionUseCase:
        """Provide get session use case."""
        return GetSessionUseCase(profile_service=profile_service)

    # Profile use cases
    @provide(scope=Scope.REQUEST)
    def get_profile_use_case(
        self, profile_service: ProfileService, friendship_service: FriendshipService
    ) -> GetProfileUseCase:
        """Provide get profile use case."""
        return GetProfileUseCase(
            profile_service=profile_service, friendship_service=friendship_service
        )

    @provide(scope=Scope.REQUEST)
    def get_update_profile_use_case(
        self, profile_service: ProfileService
    ) -> UpdateProfileUseCase:
        """Provide update profile use case."""
        return UpdateProfileUseCase(profile_service=profile_service)

    @provide(scope=Scope.REQUEST)
    def get_upload_avatar_use_case(
        self, profile_service: ProfileService
    ) -> UploadAvatarUseCase:
        """Provide upload avatar use case."""
        return UploadAvatarUseCase(profile_service=profile_service)

    # Friend use cases
    @provide(scope=Scope.REQUEST)
    def get_friends_use_case(
        self, friendship_service: FriendshipService, profile_service: ProfileService
    ) -> GetFriendsUseCase:
        """Provide get friends use case."""
        return GetFriendsUseCase(
            friendship_service=friendship_service, profile_service=profile_service
        )

    @provide(scope=Scope.REQUEST)
    def get_manage_friendship_use_case(
        self, friendship_service: FriendshipService
    ) -> ManageFriendshipUseCase:
        """Provide manage friendship use case."""
        return ManageFriendshipUseCase(friendship_service=friendship_service)

    @provide(scope=Scope.REQUEST)
    def get_discover_people_use_case(
        self, friendship_service: FriendshipService, profile_service: ProfileService
    ) -> DiscoverPeopleUseCase:
        """Provide discover people use case."""
        return DiscoverPeopleUseCase(
            friendship_service=friendship_service, profile_service=profile_service
        )

    # Activity use cases
    @provide(scope=Scope.REQUEST)
    def get_create_activity_use_case(
        self,
        activity_service: ActivityService,
        invitation_service: InvitationService,
        profile_service: ProfileService,
    ) -> CreateActivityUseCase:
        """Provide create activity use case."""
        return CreateActivityUseCase(
            activity_service=activity_service,
            invitation_service=invitation_service,
            profile_service=profile_service,
        )

    @provide(scope=Scope.REQUEST)
    def get_update_activity_use_case(
        self, activity_service: ActivityService, profile_service: ProfileService
    ) -> UpdateActivityUseCase:
        """Provide update activity use case."""
        return UpdateActivityUseCase(
            activity_service=activity_service, profile_service=profile_service
        )

    @provide(scope=Scope.REQUEST)
    def get_cancel_activity_use_case(
        self, activity_service: ActivityService
    ) -> CancelActivityUseCase:
        """Provide cancel activity use case."""
        return CancelActivityUseCase(activity_service=activity_service)

    @provide(scope=Scope.REQUEST)
    def get_transfer_ownership_use_case(
        self, activity_service: ActivityService, profile_service: ProfileService
    ) -> TransferOwnershipUseCase:
        """Provide transfer ownership use case."""
        return TransferOwnershipUseCase(
            activity_service=activity_service, profile_service=profile_service
        )

    @provide(scope=Scope.REQUEST)
    def get_activity_use_case(
        self,
        activity_service: ActivityService,
        friendship_service: FriendshipService,
        invitation_service: InvitationService,
        profile_service: ProfileService,
    ) -> GetActivityUseCase:
        """Provide get activity use case."""
        return GetActivityUseCase(
            activity_service=activity_service,
            friendship_service=friendship_service,
            invitation_service=invitation_service,
            profile_service=profile_service,
        )

    @provide(scope=Scope.REQUEST)
    def get_feed_use_case(
        self,
        activity_service: ActivityService,
        friendship_service: FriendshipService,
        invitation_service: InvitationService,
        profile_service: ProfileService,
    ) -> GetFeedUseCase:
        """Provide get feed use case."""
        return GetFeedUseCase(
            activity_service=activity_service,
            friendship_service=friendship_service,
            invitation_service=invitation_service,
            profile_service=profile_service,
        )

    @provide(scope=Scope.REQUEST)
    def get_list_my_activities_use_case(
        self, activity_service: ActivityService, profile_service: ProfileService
    ) -> ListMyActivitiesUseCase:
        """Provide list my activities use case."""
        return ListMyActivitiesUseCase(
            activity_service=activity_service, profile_service=profile_service
        )

    @provide(scope=Scope.REQUEST)
    def get_change_participation_use_case(
        self,
        activity_service: ActivityService,
        friendship_service: FriendshipService,
        invitation_service: InvitationService,
        profile_service: ProfileService,
    ) -> ChangeParticipationUseCase:
        """Provide join/leave use case."""
        return ChangeParticipationUseCase(
            activity_service=activity_service,
            friendship_service=friendship_service,
            invitation_service=invitation_service,
            profile_service=profile_service,
        )

    # Invitation use cases
    @provide(scope=Scope.REQUEST)
    def get_send_invitations_use_case(
        self, invitation_service: InvitationService
    ) -> SendInvitationsUseCase:
        """Provide send invitations use case."""
        return SendInvitationsUseCase(invitation_service=invitation_service)

    @provide(scope=Scope.REQUEST)
    def get_list_received_invitations_use_case(
        self,
        invitation_service: InvitationService,
        activity_service: ActivityService,
        profile_service: ProfileService,
    ) -> ListReceivedInvitationsUseCase:
        """Provide list received invitations use case."""
        return ListReceivedInvitationsUseCase(
            invitation_service=invitation_service,
            activity_service=activity_service,
            profile_service=profile_service,
        )

    @provide(scope=Scope.REQUEST)
    def get_list_sent_invitations_use_case(
        self, invitation_service: InvitationService, profile_service: ProfileService
    ) -> ListSentInvitationsUseCase:
        """Provide list sent invitations use case."""
        return ListSentInvitationsUseCase(
            invitation_service=invitation_service, profile_service=profile_service
        )

    @provide(scope=Scope.REQUEST)
    def get_respond_invitation_use_case(
        self, invitation_service: InvitationService
    ) -> RespondInvitationUseCase:
        """Provide respond invitation use case."""
        return RespondInvitationUseCase(invitation_service=invitation_service)

    @provide(scope=Scope.REQUEST)
    def get_cancel_invitation_use_case(
        self, invitation_service: InvitationService
    ) -> CancelInvitationUseCase:
        """Provide cancel invitation use case."""
        return CancelInvitationUseCase(invitation_service=invitation_service)

    # Notification use cases
    @provide(scope=Scope.REQUEST)
    def get_list_notifications_use_case(
        self, notification_service: NotificationService
    ) -> ListNotificationsUseCase:
        """Provide list notifications use case."""
        return ListNotificationsUseCase(notification_service=notification_service)

    @provide(scope=Scope.REQUEST)
    def get_mark_read_use_case(
        self, notification_service: NotificationService
    ) -> MarkReadUseCase:
        """Provide mark notifications read use case."""
        return MarkReadUseCase(notification_service=notification_service)

    # Place use cases
    @provide(scope=Scope.REQUEST)
    def get_search_places_use_case(
        self, place_service: PlaceService
    ) -> SearchPlacesUseCase:
        """Provide search places use case."""
        return SearchPlacesUseCase(place_service=place_service)
