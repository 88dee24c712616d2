from prometheus_client import CollectorRegistry, Gauge, write_to_textfile

from ccstatus.models import HookInput, StatusSnapshot


class StatusMetrics:
    """
    mirrors one status line refresh into Prometheus gauges, written in
    the node-exporter textfile format so spend can be graphed without
    running a server.
     - session_cost_usd / session_duration_seconds: the live session.
     - context_tokens: tokens in the context window.
     - today_cost_usd / period_cost_usd: ledger and 5-hour window totals,
     including the live session.
     - limit_utilization_percent: labeled by window (five_hour/seven_day).
    """

    def __init__(self, registry: "CollectorRegistry | None" = None) -> "None":
        self._registry: "CollectorRegistry" = registry or CollectorRegistry()
        self._session_cost = Gauge(
            "ccstatus_session_cost_usd",
            "Cost of the current session in USD",
            registry=self._registry,
        )
        self._session_duration = Gauge(
            "ccstatus_session_duration_seconds",
            "Wall-clock duration of the current session",
            registry=self._registry,
        )
        self._context_tokens = Gauge(
            "ccstatus_context_tokens",
            "Tokens currently occupying the context window",
            registry=self._registry,
        )
        self._today_cost = Gauge(
            "ccstatus_today_cost_usd",
            "Spend recorded today in USD",
            registry=self._registry,
        )
        self._period_cost = Gauge(
            "ccstatus_period_cost_usd",
            "Spend within the current 5-hour billing window in USD",
            registry=self._registry,
        )
        self._utilization = Gauge(
            "ccstatus_limit_utilization_percent",
            "Utilization of a rolling usage window",
            ["window"],
            registry=self._registry,
        )

    @property
    def registry(self) -> "CollectorRegistry":
        return self._registry

    def update(self, hook: "HookInput", snapshot: "StatusSnapshot") -> "None":
        self._session_cost.set(hook.cost_usd)
        self._session_duration.set(hook.duration_ms / 1000)
        self._context_tokens.set(snapshot.context_tokens)
        self._today_cost.set(snapshot.today_cost + hook.cost_usd)

        if snapshot.limits.five_hour is not None:
            self._period_cost.set(snapshot.period_cost + hook.cost_usd)
            self._utilization.labels(window="five_hour").set(
                snapshot.limits.five_hour.utilization
            )
        if snapshot.limits.seven_day is not None:
            self._utilization.labels(window="seven_day").set(
                snapshot.limits.seven_day.utilization
            )

    def write(self, path: "str") -> "None":
        write_to_textfile(path, self._registry)
