"""Unit tests for NotificationService."""

from uuid import uuid4

import pytest

from rally.domain.error import NotFoundError
from rally.domain.repository import NotificationSink
from rally.domain.service import NotificationService, drain_notifications
from rally.domain.value import NotificationId, NotificationType, UserId
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked
unit_env = create_env_fixture()

USER = UserId("user")


class TestNotify:
    """Tests for scheduling and delivering notifications."""

    @pytest.mark.asyncio
    async def test_notify_returns_before_delivery(self, unit_env):
        """notify schedules delivery; the inbox fills once it has run."""
        # Arrange
        service = await unit_env.get(NotificationService)

        # Act
        notification = service.notify(
            USER, NotificationType.FRIEND_REQUEST, "Hi", "Someone waved"
        )

        # Assert
        assert notification.read is False
        assert await service.list_notifications(USER) == []
        await drain_notifications()
        assert await service.list_notifications(USER) == [notification]
        assert await service.unread_count(USER) == 1

    @pytest.mark.asyncio
    async def test_failed_delivery_is_swallowed(self, unit_env):
        """A broken delivery channel never reaches the caller."""
        # Arrange
        service = await unit_env.get(NotificationService)
        sink = await unit_env.get(NotificationSink)
        sink.fail_with = RuntimeError("inbox offline")

        # Act
        service.notify_friend_request(USER, UserId("sender"), "Sender")
        await drain_notifications()

        # Assert
        assert await service.list_notifications(USER) == []


class TestReadState:
    """Tests for listing and marking notifications read."""

    @pytest.mark.asyncio
    async def test_list_is_newest_first_and_limited(self, unit_env):
        service = await unit_env.get(NotificationService)
        for i in range(3):
            service.notify(USER, NotificationType.FRIEND_REQUEST, f"n{i}", "msg")
            await drain_notifications()

        latest = await service.list_notifications(USER, limit=2)

        assert [n.title for n in latest] == ["n2", "n1"]

    @pytest.mark.asyncio
    async def test_mark_read_and_mark_all_read(self, unit_env):
        """Read flags update the unread count."""
        # Arrange
        service = await unit_env.get(NotificationService)
        first = service.notify(USER, NotificationType.FRIEND_REQUEST, "a", "msg")
        service.notify(USER, NotificationType.FRIEND_REQUEST, "b", "msg")
        service.notify(USER, NotificationType.FRIEND_REQUEST, "c", "msg")
        await drain_notifications()

        # Act
        await service.mark_read(first.id, USER)
        after_one = await service.unread_count(USER)
        updated = await service.mark_all_read(USER)

        # Assert
        assert after_one == 2
        assert updated == 2
        assert await service.unread_count(USER) == 0

    @pytest.mark.asyncio
    async def test_mark_read_of_someone_elses_notification(self, unit_env):
        """Users can only mark their own notifications."""
        service = await unit_env.get(NotificationService)
        notification = service.notify(
            USER, NotificationType.FRIEND_REQUEST, "a", "msg"
        )
        await drain_notifications()

        with pytest.raises(NotFoundError):
            await service.mark_read(notification.id, UserId("intruder"))
        with pytest.raises(NotFoundError):
            await service.mark_read(NotificationId(uuid4()), USER)
        assert await service.unread_count(USER) == 1
