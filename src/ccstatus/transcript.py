import json
from datetime import datetime
from pathlib import Path

import structlog

from ccstatus.timeutil import parse_instant

logger = structlog.get_logger()


def usage_tokens(usage: "dict") -> "int":
    """
    tokens occupying the context: fresh input plus both cache buckets.
    """
    return (
        int(usage.get("input_tokens") or 0)
        + int(usage.get("cache_read_input_tokens") or 0)
        + int(usage.get("cache_creation_input_tokens") or 0)
    )


def read_context_tokens(path: "str | Path") -> "int":
    """
    scans a transcript (one JSON event per line) and returns the context
    size reported by the most recent main-chain usage snapshot, or 0.
    """
    if not path:
        return 0

    try:
        fh = Path(path).open(encoding="utf-8", errors="replace")
    except OSError:
        return 0

    tokens = 0
    latest: "datetime | None" = None
    skipped = 0
    with fh:
        for line in fh:
            if not line.strip():
                continue
            try:
                event = json.loads(line)
                message = event.get("message")
                usage = message.get("usage") if isinstance(message, dict) else None
                if (
                    not isinstance(usage, dict)
                    or event.get("isSidechain")
                    or event.get("isApiErrorMessage")
                    or not event.get("timestamp")
                ):
                    continue
                timestamp = parse_instant(str(event["timestamp"]))
                if latest is None or timestamp > latest:
                    tokens = usage_tokens(usage)
                    latest = timestamp
            except (ValueError, TypeError, AttributeError):
                skipped += 1

    if skipped:
        logger.debug("transcript_lines_skipped", path=str(path), count=skipped)
    return tokens
