from datetime import datetime, timezone


def utcnow() -> "datetime":
    return datetime.now(timezone.utc)


def parse_instant(value: "str") -> "datetime":
    """
    parses an ISO 8601 instant, assuming UTC when no offset is given.
    Raises ValueError on malformed input.
    """
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_instant(value: "datetime") -> "str":
    """
    renders a UTC instant as 2025-01-01T15:05:00.000Z.
    """
    utc = value.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"
