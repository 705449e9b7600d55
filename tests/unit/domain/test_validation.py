"""Unit tests for validation and eligibility rules."""

from datetime import timedelta

import pytest

from rally.config import ActivitySettings
from rally.domain.error import ValidationError
from rally.domain.validation import (
    ACTIVITY_CANCELLED,
    ACTIVITY_FULL,
    ACTIVITY_PASSED,
    ALREADY_JOINED,
    IS_CREATOR_JOIN,
    IS_CREATOR_LEAVE,
    NOT_AUTHENTICATED,
    NOT_AUTHENTICATED_JOIN,
    NOT_JOINED,
    can_join,
    can_leave,
    is_visible,
    map_visibility,
    sanitize_input,
    validate_activity,
    validate_profile,
)
from rally.domain.value import ActivityStatus, ActivityVisibility, UserId
from rally.util.time import utcnow
from tests.conftest import make_activity

LIMITS = ActivitySettings()
HOST = UserId("host")
RUNNER = UserId("runner")


class TestSanitizeInput:
    def test_strips_angle_brackets_and_whitespace(self):
        assert sanitize_input("  <script>hi</script> ") == "scripthi/script"

    def test_caps_length(self):
        assert len(sanitize_input("x" * 1500)) == 1000

    def test_none_passes_through(self):
        assert sanitize_input(None) is None


class TestMapVisibility:
    @pytest.mark.parametrize(
        "choice, stored",
        [
            ("all-friends", ActivityVisibility.FRIENDS),
            ("specific-friends", ActivityVisibility.PRIVATE),
            ("public", ActivityVisibility.PUBLIC),
        ],
    )
    def test_known_choices(self, choice, stored):
        assert map_visibility(choice) == stored

    def test_unknown_choice(self):
        with pytest.raises(ValidationError):
            map_visibility("friends-of-friends")


class TestValidateActivity:
    """Tests for activity field validation."""

    def test_valid_draft(self):
        now = utcnow()

        errors = validate_activity(
            title="Track session",
            starts_at=now + timedelta(hours=2),
            max_participants=8,
            now=now,
            limits=LIMITS,
        )

        assert errors == []

    def test_missing_fields(self):
        errors = validate_activity(
            title="  ",
            starts_at=None,
            max_participants=None,
            now=utcnow(),
            limits=LIMITS,
        )

        assert errors == [
            "Title is required",
            "Date is required",
            "Maximum participants is required",
        ]

    def test_length_and_type_limits(self):
        now = utcnow()

        errors = validate_activity(
            title="x" * 101,
            starts_at=now + timedelta(days=1),
            max_participants=1,
            now=now,
            limits=LIMITS,
            description="d" * 501,
            location_name="l" * 101,
            activity_type="curling",
        )

        assert errors == [
            "Title must be less than 100 characters",
            "Must allow at least 2 participants",
            "Location must be less than 100 characters",
            "Description must be less than 500 characters",
            "Invalid activity type",
        ]

    def test_past_start_allowed_when_not_required(self):
        now = utcnow()

        errors = validate_activity(
            title="Yesterday's ride",
            starts_at=now - timedelta(days=1),
            max_participants=4,
            now=now,
            limits=LIMITS,
            require_future_start=False,
        )

        assert errors == []


class TestValidateProfile:
    def test_valid(self):
        assert validate_profile("Jo", "jo@example.com") == []

    def test_invalid_name_and_email(self):
        assert validate_profile("J", "not-an-email") == [
            "Display name must be at least 2 characters",
            "Please enter a valid email address",
        ]

    def test_too_long_name(self):
        assert validate_profile("n" * 51) == [
            "Display name must be less than 50 characters"
        ]


class TestIsVisible:
    """Tests for who may see an activity."""

    @pytest.mark.parametrize(
        "visibility, friends, expected",
        [
            (ActivityVisibility.PUBLIC, set(), True),
            (ActivityVisibility.FRIENDS, {HOST}, True),
            (ActivityVisibility.FRIENDS, set(), False),
            (ActivityVisibility.PRIVATE, {HOST}, False),
        ],
    )
    def test_outsider(self, visibility, friends, expected):
        activity = make_activity(HOST, visibility=visibility)

        assert is_visible(activity, RUNNER, set(), friends, set()) is expected

    def test_private_activity_for_insiders(self):
        """Organizer, participants and invitees see a private activity."""
        activity = make_activity(HOST, visibility=ActivityVisibility.PRIVATE)

        assert is_visible(activity, HOST, set(), set(), set())
        assert is_visible(activity, RUNNER, {RUNNER}, set(), set())
        assert is_visible(activity, RUNNER, set(), set(), {activity.id})


class TestCanJoin:
    """Tests for join eligibility."""

    def test_open_activity(self):
        activity = make_activity(HOST)

        result = can_join(activity, set(), RUNNER, utcnow())

        assert result.allowed
        assert result.reasons == []

    def test_all_failures_are_collected(self):
        """A past, cancelled, full activity reports every reason."""
        activity = make_activity(
            HOST, starts_in=timedelta(hours=-1), max_participants=2
        ).evolve(status=ActivityStatus.CANCELLED)

        result = can_join(activity, {RUNNER, UserId("p2")}, RUNNER, utcnow())

        assert not result.allowed
        assert result.reasons == [
            ALREADY_JOINED,
            ACTIVITY_FULL,
            ACTIVITY_PASSED,
            ACTIVITY_CANCELLED,
        ]

    def test_organizer_cannot_join(self):
        result = can_join(make_activity(HOST), set(), HOST, utcnow())

        assert result.reasons == [IS_CREATOR_JOIN]

    def test_anonymous_viewer(self):
        result = can_join(make_activity(HOST), set(), None, utcnow())

        assert result.reasons == [NOT_AUTHENTICATED_JOIN]


class TestCanLeave:
    def test_participant_can_leave(self):
        assert can_leave(make_activity(HOST), {RUNNER}, RUNNER).allowed

    def test_organizer_and_outsider(self):
        activity = make_activity(HOST)

        assert can_leave(activity, set(), HOST).reasons == [IS_CREATOR_LEAVE, NOT_JOINED]
        assert can_leave(activity, set(), RUNNER).reasons == [NOT_JOINED]
        assert can_leave(activity, set(), None).reasons == [NOT_AUTHENTICATED]
