import json
import os
import tempfile
from datetime import date
from pathlib import Path
from typing import Callable, Iterable

import structlog

from ccstatus.models import SessionRecord, SpendSummary

logger = structlog.get_logger()


def today_iso() -> "str":
    return date.today().isoformat()


def month_start_iso(day: "date | None" = None) -> "str":
    day = day or date.today()
    return day.replace(day=1).isoformat()


def summarize(records: "Iterable[SessionRecord]") -> "SpendSummary":
    total_cost = 0.0
    total_duration = 0
    count = 0
    for record in records:
        total_cost += record.cost
        total_duration += record.duration_ms
        count += 1
    return SpendSummary(
        total_cost=total_cost, total_duration_ms=total_duration, count=count
    )


class SpendLedger:
    """
    SpendLedger is the in-memory form of spend.json: an ordered
    list of session records holding at most one record per
    session id.
    """

    def __init__(self, sessions: "list[SessionRecord] | None" = None) -> "None":
        self.sessions: "list[SessionRecord]" = []
        for record in sessions or []:
            self.upsert(record)

    def __len__(self) -> "int":
        return len(self.sessions)

    def upsert(self, record: "SessionRecord") -> "None":
        """
        replaces the record with the same id in place, or appends it.
        """
        for idx, existing in enumerate(self.sessions):
            if existing.id == record.id:
                self.sessions[idx] = record
                return
        self.sessions.append(record)

    def get(self, session_id: "str") -> "SessionRecord | None":
        for record in self.sessions:
            if record.id == session_id:
                return record
        return None

    def aggregate(
        self, predicate: "Callable[[SessionRecord], bool]"
    ) -> "SpendSummary":
        return summarize(s for s in self.sessions if predicate(s))

    def on_date(self, day: "str") -> "list[SessionRecord]":
        return [s for s in self.sessions if s.date == day]

    def since(self, day: "str") -> "list[SessionRecord]":
        # ISO dates compare correctly as strings
        return [s for s in self.sessions if s.date >= day]

    def by_date(
        self, records: "Iterable[SessionRecord] | None" = None
    ) -> "dict[str, list[SessionRecord]]":
        """
        groups records (all of them by default) by day, newest day first.
        """
        groups: "dict[str, list[SessionRecord]]" = {}
        for record in self.sessions if records is None else records:
            groups.setdefault(record.date, []).append(record)
        return {day: groups[day] for day in sorted(groups, reverse=True)}

    def to_dict(self) -> "dict":
        return {"sessions": [s.to_dict() for s in self.sessions]}


def write_json_atomic(path: "Path", data: "dict") -> "None":
    """
    writes data to a temporary sibling file and renames it over path,
    so readers never see a half-written file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(data, fh, indent=2)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


class SpendStore:
    """
    SpendStore persists the ledger as a single JSON document. It is a
    best-effort sidecar: unreadable files load as an empty ledger and
    failed writes are logged and dropped.
    """

    def __init__(self, path: "Path") -> "None":
        self._path = path

    @property
    def path(self) -> "Path":
        return self._path

    def exists(self) -> "bool":
        return self._path.is_file()

    def load(self) -> "SpendLedger":
        try:
            with self._path.open(encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return SpendLedger()
        except (OSError, ValueError):
            logger.warning("spend_ledger_unreadable", path=str(self._path))
            return SpendLedger()

        raw_sessions = data.get("sessions") if isinstance(data, dict) else None
        if not isinstance(raw_sessions, list):
            logger.warning("spend_ledger_malformed", path=str(self._path))
            return SpendLedger()

        sessions: "list[SessionRecord]" = []
        for raw in raw_sessions:
            try:
                sessions.append(SessionRecord.from_dict(raw))
            except (KeyError, TypeError, ValueError):
                logger.debug("spend_record_skipped", record=raw)
        return SpendLedger(sessions)

    def save(self, ledger: "SpendLedger") -> "bool":
        try:
            write_json_atomic(self._path, ledger.to_dict())
        except OSError:
            logger.warning("spend_ledger_write_failed", path=str(self._path))
            return False
        logger.debug(
            "spend_ledger_saved", path=str(self._path), sessions=len(ledger)
        )
        return True

    def upsert(self, record: "SessionRecord") -> "None":
        """
        merges one session record into the persisted ledger. Records
        without an id or cost are not worth keeping and are ignored.
        """
        if not record.id or not record.cost:
            return
        ledger = self.load()
        ledger.upsert(record)
        self.save(ledger)
