from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def iso_timestamp(dt: datetime | None = None) -> str:
    """ISO-8601 in UTC met milliseconden en 'Z', bv. '2025-11-01T10:00:00.123Z'."""
    dt = dt or utcnow()
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
