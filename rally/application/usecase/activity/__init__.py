"""Activity use cases."""

from .cancel_activity import CancelActivityUseCase
from .change_participation import ChangeParticipationUseCase, ParticipationAction
from .create_activity import CreateActivityUseCase
from .get_activity import GetActivityUseCase
from .get_feed import GetFeedUseCase
from .list_my_activities import ListMyActivitiesUseCase
from .transfer_ownership import TransferOwnershipUseCase
from .update_activity import UpdateActivityUseCase

__all__ = [
    "CancelActivityUseCase",
    "ChangeParticipationUseCase",
    "CreateActivityUseCase",
    "GetActivityUseCase",
    "GetFeedUseCase",
    "ListMyActivitiesUseCase",
    "ParticipationAction",
    "TransferOwnershipUseCase",
    "UpdateActivityUseCase",
]
