"""End-to-end tests for the friendship flow."""

from tests.harness import auth_headers, create_client_fixture, drain

# E2E test client - mock container behind the real app
client = create_client_fixture()

ALICE = auth_headers("u1", name="Alice")
BOB = auth_headers("u2", name="Bob")


class TestFriendshipFlow:
    """Request, accept and the notifications they produce."""

    def test_request_and_accept(self, client):
        """Should become friends and notify both sides."""
        # Arrange - profiles are created on first session fetch
        assert client.get("/auth/session", headers=ALICE).status_code == 200
        assert client.get("/auth/session", headers=BOB).status_code == 200

        # Act
        requested = client.post("/friends/u2/request", headers=ALICE)
        accepted = client.post("/friends/u1/accept", headers=BOB)
        drain(client)

        # Assert
        assert requested.status_code == 200
        assert requested.json()["status"] == "pending_sent"
        assert accepted.status_code == 200
        assert accepted.json()["status"] == "friends"

        friends = client.get("/friends", headers=ALICE).json()
        assert [f["display_name"] for f in friends["friends"]] == ["Bob"]
        assert friends["incoming_requests"] == []

        bob_inbox = client.get("/notifications", headers=BOB).json()
        alice_inbox = client.get("/notifications", headers=ALICE).json()
        assert [n["type"] for n in bob_inbox["notifications"]] == ["friend_request"]
        assert [n["type"] for n in alice_inbox["notifications"]] == [
            "friend_request_accepted"
        ]
        assert alice_inbox["unread_count"] == 1

    def test_requester_cannot_accept_own_request(self, client):
        client.get("/auth/session", headers=ALICE)
        client.get("/auth/session", headers=BOB)
        client.post("/friends/u2/request", headers=ALICE)

        response = client.post("/friends/u2/accept", headers=ALICE)

        assert response.status_code == 403

    def test_unknown_action(self, client):
        client.get("/auth/session", headers=ALICE)

        response = client.post("/friends/u2/poke", headers=ALICE)

        assert response.status_code == 422

    def test_mark_notifications_read(self, client):
        client.get("/auth/session", headers=ALICE)
        client.get("/auth/session", headers=BOB)
        client.post("/friends/u2/request", headers=ALICE)
        drain(client)

        response = client.post("/notifications/read-all", headers=BOB)

        assert response.status_code == 200
        assert response.json() == {"updated": 1, "unread_count": 0}
