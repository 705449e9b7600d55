"""Invitation use cases."""

from .cancel_invitation import CancelInvitationUseCase
from .list_invitations import (
    ListReceivedInvitationsUseCase,
    ListSentInvitationsUseCase,
)
from .respond_invitation import InvitationResponse, RespondInvitationUseCase
from .send_invitations import SendInvitationsUseCase

__all__ = [
    "CancelInvitationUseCase",
    "InvitationResponse",
    "ListReceivedInvitationsUseCase",
    "ListSentInvitationsUseCase",
    "RespondInvitationUseCase",
    "SendInvitationsUseCase",
]
