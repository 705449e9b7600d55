"""Time helpers.

All timestamps in the system are timezone-aware UTC.
"""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_time_ago(value: datetime | None, now: datetime | None = None) -> str:
    """Render a short relative time label such as ``5m ago``.

    Args:
        value: Past timestamp
        now: Reference time (defaults to current UTC time)

    Returns:
        Human-readable label, ``"never"`` when no timestamp is known
    """
    if value is None:
        return "never"

    now = now or utcnow()
    seconds = int((ensure_utc(now) - ensure_utc(value)).total_seconds())

    if seconds < 60:
        return "just now"
    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes}m ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours}h ago"
    days = hours // 24
    if days < 7:
        return f"{days}d ago"
    return ensure_utc(value).strftime("%b %d")
