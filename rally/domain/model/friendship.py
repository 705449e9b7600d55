"""Friendship edge and the pure views derived from a user's edges.

A friendship is an undirected edge stored once per unordered pair of users.
The pair is kept in canonical order (lexicographically smaller id first),
so the primary key on ``(user_a, user_b)`` guarantees a single edge no
matter who sent the request.

Lifecycle:
    (none) --request--> pending --accept (non-initiator)--> accepted
    pending --decline--> (deleted, can be requested again)
    any state --block--> blocked (replaces the prior edge)
    blocked --unblock (blocker)--> (deleted)
"""

from datetime import datetime

from pydantic import Field, model_validator

from rally.domain.error import ValidationError
from rally.domain.model.common import DomainModel
from rally.domain.value import FriendshipStatus, RelationshipStatus, UserId
from rally.util.time import utcnow


def canonical_pair(a: UserId, b: UserId) -> tuple[UserId, UserId]:
    """Order two user ids so the smaller one comes first.

    Args:
        a: One user id
        b: The other user id

    Returns:
        ``(lo, hi)``; the same result for ``(a, b)`` and ``(b, a)``

    Raises:
        ValidationError: If both ids are the same user
    """
    if a == b:
        raise ValidationError("A user cannot have a friendship with themselves")
    return (a, b) if a < b else (b, a)


class Friendship(DomainModel):
    """Friendship edge between two users.

    Business rules:
    - ``user_a < user_b`` (canonical order)
    - ``requested_by`` is one of the two users; for blocked edges it is the
      blocker
    """

    user_a: UserId
    user_b: UserId
    status: FriendshipStatus = FriendshipStatus.PENDING
    requested_by: UserId
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @model_validator(mode="after")
    def validate_pair(self) -> "Friendship":
        """Enforce canonical order and a requester from the pair."""
        if not self.user_a < self.user_b:
            raise ValueError("Friendship pair must be stored in canonical order")
        if self.requested_by not in (self.user_a, self.user_b):
            raise ValueError("requested_by must be one of the pair")
        return self

    @classmethod
    def request(
        cls, requester: UserId, addressee: UserId, now: datetime | None = None
    ) -> "Friendship":
        """Build a new pending edge from ``requester`` to ``addressee``."""
        user_a, user_b = canonical_pair(requester, addressee)
        now = now or utcnow()
        return cls(
            user_a=user_a,
            user_b=user_b,
            status=FriendshipStatus.PENDING,
            requested_by=requester,
            created_at=now,
            updated_at=now,
        )

    @classmethod
    def block(
        cls, blocker: UserId, blocked: UserId, now: datetime | None = None
    ) -> "Friendship":
        """Build a blocked edge owned by ``blocker``."""
        user_a, user_b = canonical_pair(blocker, blocked)
        now = now or utcnow()
        return cls(
            user_a=user_a,
            user_b=user_b,
            status=FriendshipStatus.BLOCKED,
            requested_by=blocker,
            created_at=now,
            updated_at=now,
        )

    @property
    def pair(self) -> tuple[UserId, UserId]:
        return (self.user_a, self.user_b)

    def involves(self, user_id: UserId) -> bool:
        return user_id in (self.user_a, self.user_b)

    def other(self, user_id: UserId) -> UserId:
        """The counterpart of ``user_id`` on this edge."""
        if user_id == self.user_a:
            return self.user_b
        if user_id == self.user_b:
            return self.user_a
        raise ValueError(f"User {user_id} is not part of this friendship")

    def is_incoming_for(self, user_id: UserId) -> bool:
        """Pending request that ``user_id`` received."""
        return (
            self.status == FriendshipStatus.PENDING
            and self.involves(user_id)
            and self.requested_by != user_id
        )

    def is_outgoing_for(self, user_id: UserId) -> bool:
        """Pending request that ``user_id`` sent."""
        return self.status == FriendshipStatus.PENDING and self.requested_by == user_id


class FriendGraph:
    """Read-only views over the edges touching one user.

    Built from ``list_edges(me)``; computing a view never touches storage.
    """

    def __init__(self, me: UserId, edges: list[Friendship]) -> None:
        self.me = me
        self.edges = [edge for edge in edges if edge.involves(me)]

    @property
    def friend_ids(self) -> set[UserId]:
        """Ids of accepted friends."""
        return {
            edge.other(self.me)
            for edge in self.edges
            if edge.status == FriendshipStatus.ACCEPTED
        }

    @property
    def incoming(self) -> list[Friendship]:
        """Pending requests other users sent to me."""
        return [edge for edge in self.edges if edge.is_incoming_for(self.me)]

    @property
    def outgoing(self) -> list[Friendship]:
        """Pending requests I sent."""
        return [edge for edge in self.edges if edge.is_outgoing_for(self.me)]

    @property
    def blocked_ids(self) -> set[UserId]:
        """Users on a blocked edge with me, whichever side blocked."""
        return {
            edge.other(self.me)
            for edge in self.edges
            if edge.status == FriendshipStatus.BLOCKED
        }

    @property
    def discovery_exclusions(self) -> set[UserId]:
        """Users hidden from people discovery.

        Myself, accepted friends, senders of pending requests to me and
        blocked users. Users I already sent a request to stay discoverable so
        they can be shown as "request sent".
        """
        excluded = {self.me} | self.friend_ids | self.blocked_ids
        excluded |= {edge.other(self.me) for edge in self.incoming}
        return excluded

    @property
    def outgoing_ids(self) -> set[UserId]:
        return {edge.other(self.me) for edge in self.outgoing}

    def edge_with(self, other: UserId) -> Friendship | None:
        """The edge between me and ``other``, if any."""
        for edge in self.edges:
            if edge.involves(other):
                return edge
        return None

    def status_with(self, other: UserId) -> RelationshipStatus:
        """Relationship to ``other`` from my point of view."""
        edge = self.edge_with(other)
        if edge is None:
            return RelationshipStatus.NONE
        if edge.status == FriendshipStatus.ACCEPTED:
            return RelationshipStatus.FRIENDS
        if edge.status == FriendshipStatus.BLOCKED:
            return RelationshipStatus.BLOCKED
        if edge.requested_by == self.me:
            return RelationshipStatus.PENDING_SENT
        return RelationshipStatus.PENDING_RECEIVED
