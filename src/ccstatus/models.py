import json
from dataclasses import dataclass, field

import structlog

logger = structlog.get_logger()


def _as_dict(value: "object") -> "dict":
    return value if isinstance(value, dict) else {}


def _as_float(value: "object") -> "float":
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


def _as_int(value: "object") -> "int":
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


@dataclass(frozen=True, slots=True)
class HookInput:
    """
    HookInput is the session payload the assistant writes to
    stdin on every status line refresh. Missing or mistyped fields
    fall back to empty values so that rendering never fails.
    """

    session_id: "str" = ""
    transcript_path: "str" = ""
    cwd: "str" = ""
    model_id: "str" = ""
    model_name: "str" = ""
    current_dir: "str" = ""
    project_dir: "str" = ""
    cost_usd: "float" = 0.0
    duration_ms: "int" = 0
    lines_added: "int" = 0
    lines_removed: "int" = 0

    @classmethod
    def from_dict(cls, data: "dict") -> "HookInput":
        model = _as_dict(data.get("model"))
        workspace = _as_dict(data.get("workspace"))
        cost = _as_dict(data.get("cost"))
        cwd = str(data.get("cwd") or "")
        return cls(
            session_id=str(data.get("session_id") or ""),
            transcript_path=str(data.get("transcript_path") or ""),
            cwd=cwd,
            model_id=str(model.get("id") or ""),
            model_name=str(model.get("display_name") or ""),
            # older payloads only carry the top-level cwd
            current_dir=str(workspace.get("current_dir") or cwd),
            project_dir=str(workspace.get("project_dir") or ""),
            cost_usd=_as_float(cost.get("total_cost_usd")),
            duration_ms=_as_int(cost.get("total_duration_ms")),
            lines_added=_as_int(cost.get("total_lines_added")),
            lines_removed=_as_int(cost.get("total_lines_removed")),
        )

    @classmethod
    def from_json(cls, text: "str") -> "HookInput":
        """
        parses the raw stdin payload. Invalid JSON yields an
        all-default input.
        """
        try:
            data = json.loads(text) if text.strip() else {}
        except ValueError:
            logger.warning("hook_input_invalid_json")
            data = {}
        return cls.from_dict(_as_dict(data))


@dataclass(frozen=True, slots=True)
class DiffStats:
    added: "int" = 0
    deleted: "int" = 0
    files: "int" = 0


@dataclass(frozen=True, slots=True)
class GitStatus:
    """
    GitStatus describes the working tree. An empty branch
    means the directory is not a repository (or git could
    not be queried in time).
    """

    branch: "str" = ""
    has_changes: "bool" = False
    staged: "DiffStats" = field(default_factory=DiffStats)
    unstaged: "DiffStats" = field(default_factory=DiffStats)

    @property
    def is_repository(self) -> "bool":
        return bool(self.branch)


EMPTY_GIT_STATUS = GitStatus()


@dataclass(frozen=True, slots=True)
class UsageWindow:
    # percentage of the window's quota consumed, 0-100
    utilization: "float"
    # ISO instant at which the window resets
    resets_at: "str" = ""

    @classmethod
    def from_dict(cls, data: "object") -> "UsageWindow | None":
        if not isinstance(data, dict) or data.get("utilization") is None:
            return None
        return cls(
            utilization=_as_float(data.get("utilization")),
            resets_at=str(data.get("resets_at") or ""),
        )


@dataclass(frozen=True, slots=True)
class UsageLimits:
    five_hour: "UsageWindow | None" = None
    seven_day: "UsageWindow | None" = None


NO_LIMITS = UsageLimits()


@dataclass(slots=True)
class SessionRecord:
    """
    SessionRecord is one row of the spend ledger, keyed by
    the session id.
    """

    id: "str"
    cost: "float"
    # calendar day, YYYY-MM-DD
    date: "str"
    duration_ms: "int" = 0
    cwd: "str" = ""

    @classmethod
    def from_hook(cls, hook: "HookInput", today: "str") -> "SessionRecord":
        return cls(
            id=hook.session_id,
            cost=hook.cost_usd,
            date=today,
            duration_ms=hook.duration_ms,
            cwd=hook.cwd,
        )

    @classmethod
    def from_dict(cls, data: "dict") -> "SessionRecord":
        return cls(
            id=str(data["id"]),
            cost=float(data["cost"]),
            date=str(data["date"]),
            duration_ms=int(data.get("duration_ms") or 0),
            cwd=str(data.get("cwd") or ""),
        )

    def to_dict(self) -> "dict":
        return {
            "id": self.id,
            "cost": self.cost,
            "date": self.date,
            "duration_ms": self.duration_ms,
            "cwd": self.cwd,
        }


@dataclass(frozen=True, slots=True)
class SpendSummary:
    total_cost: "float" = 0.0
    total_duration_ms: "int" = 0
    count: "int" = 0


@dataclass(slots=True)
class PeriodCostRecord:
    """
    PeriodCostRecord is the cumulative cost of the current
    5-hour billing window. resets_at is already normalized.
    """

    resets_at: "str"
    cost: "float"
    last_session_id: "str"

    @classmethod
    def from_dict(cls, data: "dict") -> "PeriodCostRecord":
        return cls(
            resets_at=str(data["resets_at"]),
            cost=float(data["cost"]),
            last_session_id=str(data.get("last_session_id") or ""),
        )

    def to_dict(self) -> "dict":
        return {
            "resets_at": self.resets_at,
            "cost": self.cost,
            "last_session_id": self.last_session_id,
        }


@dataclass(frozen=True, slots=True)
class StatusSnapshot:
    """
    StatusSnapshot holds everything gathered during one refresh.
    today_cost excludes the current session's stored record.
    """

    git: "GitStatus" = EMPTY_GIT_STATUS
    context_tokens: "int" = 0
    limits: "UsageLimits" = NO_LIMITS
    today_cost: "float" = 0.0
    period_cost: "float" = 0.0
