"""Friend use cases."""

from .discover_people import DiscoverPeopleUseCase
from .get_friends import GetFriendsUseCase
from .manage_friendship import FriendshipAction, ManageFriendshipUseCase

__all__ = [
    "DiscoverPeopleUseCase",
    "FriendshipAction",
    "GetFriendsUseCase",
    "ManageFriendshipUseCase",
]
