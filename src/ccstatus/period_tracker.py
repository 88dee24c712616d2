import json
from datetime import datetime, timedelta
from pathlib import Path

import structlog

from ccstatus.models import PeriodCostRecord
from ccstatus.spend_store import write_json_atomic
from ccstatus.timeutil import format_instant, parse_instant, utcnow

logger = structlog.get_logger()

# reset timestamps from the usage API jitter by a few seconds
# between calls; bucket them so one window keeps one key
_RESET_BUCKET_MINUTES = 5


def normalize_reset(resets_at: "str") -> "str":
    """
    rounds a reset instant to the nearest 5-minute boundary (half up on
    the minute value) and drops seconds. Raises ValueError when the
    instant cannot be parsed.
    """
    instant = parse_instant(resets_at)
    half = _RESET_BUCKET_MINUTES // 2
    minutes = (instant.minute + half) // _RESET_BUCKET_MINUTES * _RESET_BUCKET_MINUTES
    rounded = instant.replace(minute=0, second=0, microsecond=0) + timedelta(
        minutes=minutes
    )
    return format_instant(rounded)


class PeriodCostTracker:
    """
    PeriodCostTracker keeps the cumulative cost of the current 5-hour
    billing window in a single-record JSON file.

    The window is identified by its normalized reset timestamp. Within
    a window each session's cost is added once, when the session is
    first seen; last_session_id prevents repeated refreshes of the
    same session from adding it again. A new reset timestamp starts a
    fresh record holding only the incoming session's cost.
    """

    def __init__(self, path: "Path") -> "None":
        self._path = path

    def load(self) -> "PeriodCostRecord | None":
        try:
            with self._path.open(encoding="utf-8") as fh:
                return PeriodCostRecord.from_dict(json.load(fh))
        except FileNotFoundError:
            return None
        except (OSError, ValueError, KeyError, TypeError):
            logger.warning("period_record_unreadable", path=str(self._path))
            return None

    def _save(self, record: "PeriodCostRecord") -> "None":
        try:
            write_json_atomic(self._path, record.to_dict())
        except OSError:
            logger.warning("period_record_write_failed", path=str(self._path))

    def update(
        self,
        session_id: "str",
        session_cost: "float",
        resets_at: "str | None",
    ) -> "PeriodCostRecord | None":
        """
        folds the session's cost into the current window. Returns the
        record as persisted, or None when nothing was written.
        """
        if not resets_at or not session_cost:
            return None

        try:
            normalized = normalize_reset(resets_at)
        except ValueError:
            logger.debug("period_reset_unparsable", resets_at=resets_at)
            return None

        record = self.load()
        if record is not None and record.resets_at == normalized:
            if record.last_session_id == session_id:
                return None
            record.cost += session_cost
            record.last_session_id = session_id
            logger.debug("period_cost_added", cost=record.cost, resets_at=normalized)
        else:
            record = PeriodCostRecord(
                resets_at=normalized,
                cost=session_cost,
                last_session_id=session_id,
            )
            logger.debug("period_started", cost=session_cost, resets_at=normalized)

        self._save(record)
        return record

    def current_cost(self, now: "datetime | None" = None) -> "float":
        """
        returns the cumulative cost of the still-open window, or 0 when
        there is no record or its window has already reset.
        """
        record = self.load()
        if record is None:
            return 0.0

        try:
            reset = parse_instant(record.resets_at)
        except ValueError:
            return 0.0

        now = now or utcnow()
        if now > reset:
            return 0.0
        return record.cost
