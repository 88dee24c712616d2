import asyncio
from typing import Awaitable, Callable

import structlog

from ccstatus.deadline import with_deadline
from ccstatus.git import GitStatusCollector
from ccstatus.metrics import StatusMetrics
from ccstatus.models import (
    EMPTY_GIT_STATUS,
    NO_LIMITS,
    HookInput,
    SessionRecord,
    StatusSnapshot,
)
from ccstatus.period_tracker import PeriodCostTracker
from ccstatus.provider.base import UsageLimitProvider
from ccstatus.spend_store import SpendStore, today_iso
from ccstatus.transcript import read_context_tokens

logger = structlog.get_logger()


class StatusCollector:
    """
    StatusCollector gathers everything a status line needs for one
    session. Sources are queried concurrently; git and the usage API
    are raced against their deadlines and degrade to empty values.

    Persisting the session (ledger, period cost, metrics) happens after
    the line is printed, as background tasks. Their failures are logged
    and dropped: persistence is best effort and must never delay or
    break the display. Call drain() before the event loop ends.
    """

    def __init__(
        self,
        git: "GitStatusCollector",
        usage_provider: "UsageLimitProvider",
        spend_store: "SpendStore",
        period_tracker: "PeriodCostTracker",
        git_timeout: "float" = 1.5,
        usage_timeout: "float" = 2.0,
        metrics: "StatusMetrics | None" = None,
        metrics_path: "str" = "",
        today: "Callable[[], str]" = today_iso,
    ) -> "None":
        self._git = git
        self._usage = usage_provider
        self._spend_store = spend_store
        self._period_tracker = period_tracker
        self._git_timeout = git_timeout
        self._usage_timeout = usage_timeout
        self._metrics = metrics
        self._metrics_path = metrics_path
        self._today = today
        self._background: "set[asyncio.Task]" = set()

    def _today_cost(self, session_id: "str") -> "float":
        # the live session cost replaces this session's stored record
        day = self._today()
        summary = self._spend_store.load().aggregate(
            lambda s: s.date == day and s.id != session_id
        )
        return summary.total_cost

    async def collect(self, hook: "HookInput") -> "StatusSnapshot":
        git, context_tokens, limits, today_cost, period_cost = await asyncio.gather(
            with_deadline(
                self._git.collect(),
                self._git_timeout,
                EMPTY_GIT_STATUS,
                name="git",
            ),
            asyncio.to_thread(read_context_tokens, hook.transcript_path),
            with_deadline(
                self._usage.fetch_limits(),
                self._usage_timeout,
                NO_LIMITS,
                name=self._usage.name,
            ),
            asyncio.to_thread(self._today_cost, hook.session_id),
            asyncio.to_thread(self._period_tracker.current_cost),
        )
        logger.debug(
            "status_collected",
            branch=git.branch,
            context_tokens=context_tokens,
            today_cost=today_cost,
            period_cost=period_cost,
        )
        return StatusSnapshot(
            git=git,
            context_tokens=context_tokens,
            limits=limits,
            today_cost=today_cost,
            period_cost=period_cost,
        )

    def _spawn(self, name: "str", work: "Awaitable[object]") -> "asyncio.Task":
        task = asyncio.ensure_future(work)
        self._background.add(task)

        def _done(t: "asyncio.Task") -> "None":
            self._background.discard(t)
            if t.cancelled():
                logger.debug("background_task_cancelled", task=name)
                return
            exc = t.exception()
            if exc is not None:
                # intentionally dropped, persistence is best effort
                logger.warning("background_task_failed", task=name, exc_info=exc)

        task.add_done_callback(_done)
        return task

    def persist(self, hook: "HookInput", snapshot: "StatusSnapshot") -> "None":
        """
        schedules the session write, the period cost update and the
        optional metrics write without waiting for them.
        """
        record = SessionRecord.from_hook(hook, self._today())
        self._spawn("spend_upsert", asyncio.to_thread(self._spend_store.upsert, record))

        five_hour = snapshot.limits.five_hour
        self._spawn(
            "period_update",
            asyncio.to_thread(
                self._period_tracker.update,
                hook.session_id,
                hook.cost_usd,
                five_hour.resets_at if five_hour is not None else None,
            ),
        )

        if self._metrics is not None and self._metrics_path:
            self._metrics.update(hook, snapshot)
            self._spawn(
                "metrics_write",
                asyncio.to_thread(self._metrics.write, self._metrics_path),
            )

    async def drain(self) -> "None":
        """
        waits for pending background tasks; their errors were already
        logged by the task callbacks.
        """
        if self._background:
            await asyncio.gather(*self._background, return_exceptions=True)

    async def close(self) -> "None":
        await self._usage.close()
