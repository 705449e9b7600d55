"""End-to-end tests for creating and joining activities."""

from datetime import timedelta

from rally.domain.validation import ACTIVITY_FULL
from rally.util.time import utcnow
from tests.harness import auth_headers, create_client_fixture

# E2E test client - mock container behind the real app
client = create_client_fixture()

HOST = auth_headers("host", name="Hanna Host")
RUNNERS = [auth_headers(f"runner-{i}", name=f"Runner {i}") for i in range(3)]


def create_public_activity(client, max_participants: int) -> str:
    response = client.post(
        "/activities",
        headers=HOST,
        json={
            "title": "Track session",
            "starts_at": (utcnow() + timedelta(days=1)).isoformat(),
            "max_participants": max_participants,
            "visibility": "public",
            "activity_type": "running",
        },
    )
    assert response.status_code == 201
    return response.json()["activity"]["activity_id"]


class TestActivityFlow:
    """Create, join until full, then inspect eligibility."""

    def test_join_until_full(self, client):
        """The join after the last free spot is refused with reasons."""
        # Arrange
        for headers in [HOST, *RUNNERS]:
            client.get("/auth/session", headers=headers)
        activity_id = create_public_activity(client, max_participants=2)

        # Act
        first = client.post(f"/activities/{activity_id}/join", headers=RUNNERS[0])
        second = client.post(f"/activities/{activity_id}/join", headers=RUNNERS[1])
        third = client.post(f"/activities/{activity_id}/join", headers=RUNNERS[2])

        # Assert
        assert first.status_code == 200
        assert second.json()["activity"]["spots_left"] == 0
        assert third.status_code == 409
        assert ACTIVITY_FULL in third.json()["errors"]

        detail = client.get(f"/activities/{activity_id}", headers=RUNNERS[2])
        assert detail.status_code == 200
        assert detail.json()["activity"]["can_join"] is False
        assert detail.json()["activity"]["participant_count"] == 2

    def test_invalid_activity_reports_every_problem(self, client):
        client.get("/auth/session", headers=HOST)

        response = client.post(
            "/activities",
            headers=HOST,
            json={
                "title": "x",
                "starts_at": (utcnow() - timedelta(hours=1)).isoformat(),
                "max_participants": 1,
                "visibility": "public",
            },
        )

        assert response.status_code == 422
        assert len(response.json()["errors"]) == 3

    def test_unknown_activity(self, client):
        client.get("/auth/session", headers=HOST)

        response = client.get(
            "/activities/00000000-0000-0000-0000-000000000000", headers=HOST
        )

        assert response.status_code == 404

    def test_organizer_cancels(self, client):
        client.get("/auth/session", headers=HOST)
        activity_id = create_public_activity(client, max_participants=4)

        cancelled = client.post(f"/activities/{activity_id}/cancel", headers=HOST)
        join = client.post(f"/activities/{activity_id}/join", headers=RUNNERS[0])

        assert cancelled.status_code == 200
        assert join.status_code == 409


class TestHiddenActivity:
    """Specific-friends activities stay invisible to everyone not invited."""

    def test_stranger_cannot_see_or_join(self, client):
        # Arrange
        friend = auth_headers("friend", name="Fiona Friend")
        stranger = auth_headers("stranger", name="Sam Stranger")
        for headers in [HOST, friend, stranger]:
            client.get("/auth/session", headers=headers)
        client.post("/friends/friend/request", headers=HOST)
        client.post("/friends/host/accept", headers=friend)
        created = client.post(
            "/activities",
            headers=HOST,
            json={
                "title": "Secret ride",
                "starts_at": (utcnow() + timedelta(days=1)).isoformat(),
                "max_participants": 4,
                "visibility": "specific-friends",
                "activity_type": "cycling",
                "invitee_ids": ["friend"],
            },
        )
        assert created.status_code == 201
        activity_id = created.json()["activity"]["activity_id"]

        # Act
        detail = client.get(f"/activities/{activity_id}", headers=stranger)
        join = client.post(f"/activities/{activity_id}/join", headers=stranger)

        # Assert
        assert detail.status_code == 404
        assert join.status_code == 404
        assert "Secret ride" not in join.text
        host_view = client.get(f"/activities/{activity_id}", headers=HOST)
        assert host_view.json()["activity"]["participant_count"] == 0

    def test_invitee_accepts_and_joins(self, client):
        friend = auth_headers("friend", name="Fiona Friend")
        for headers in [HOST, friend]:
            client.get("/auth/session", headers=headers)
        client.post("/friends/friend/request", headers=HOST)
        client.post("/friends/host/accept", headers=friend)
        client.post(
            "/activities",
            headers=HOST,
            json={
                "title": "Secret ride",
                "starts_at": (utcnow() + timedelta(days=1)).isoformat(),
                "max_participants": 4,
                "visibility": "specific-friends",
                "invitee_ids": ["friend"],
            },
        )
        [invitation] = client.get("/invitations", headers=friend).json()["invitations"]

        accepted = client.post(
            f"/invitations/{invitation['invitation_id']}/respond",
            headers=friend,
            json={"response": "accept"},
        )

        assert accepted.status_code == 200
        activity_id = invitation["activity"]["activity_id"]
        detail = client.get(f"/activities/{activity_id}", headers=friend)
        assert detail.status_code == 200
        assert detail.json()["activity"]["is_participant"] is True
