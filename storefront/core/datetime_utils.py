from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return timezone-aware UTC timestamp."""
    return datetime.now(timezone.utc)


def epoch_millis(moment: datetime | None = None) -> int:
    """Milliseconds since the Unix epoch for ``moment`` (defaults to now)."""
    moment = moment or utc_now()
    return int(moment.timestamp() * 1000)
