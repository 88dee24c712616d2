from pathlib import Path

from prometheus_client import CollectorRegistry

from ccstatus.metrics import StatusMetrics
from ccstatus.models import HookInput, StatusSnapshot, UsageLimits, UsageWindow


def _hook() -> "HookInput":
    return HookInput.from_dict(
        {
            "session_id": "s1",
            "cost": {"total_cost_usd": 0.5, "total_duration_ms": 90_000},
        }
    )


class TestStatusMetrics:
    def test_update_sets_gauges(self, registry: "CollectorRegistry") -> "None":
        metrics = StatusMetrics(registry=registry)
        snapshot = StatusSnapshot(
            context_tokens=12_345,
            limits=UsageLimits(
                five_hour=UsageWindow(utilization=40.0, resets_at="2099-01-01T00:00:00Z"),
                seven_day=UsageWindow(utilization=12.5),
            ),
            today_cost=2.0,
            period_cost=1.0,
        )
        metrics.update(_hook(), snapshot)

        assert registry.get_sample_value("ccstatus_session_cost_usd") == 0.5
        assert registry.get_sample_value("ccstatus_session_duration_seconds") == 90.0
        assert registry.get_sample_value("ccstatus_context_tokens") == 12_345
        assert registry.get_sample_value("ccstatus_today_cost_usd") == 2.5
        assert registry.get_sample_value("ccstatus_period_cost_usd") == 1.5
        assert (
            registry.get_sample_value(
                "ccstatus_limit_utilization_percent", {"window": "five_hour"}
            )
            == 40.0
        )
        assert (
            registry.get_sample_value(
                "ccstatus_limit_utilization_percent", {"window": "seven_day"}
            )
            == 12.5
        )

    def test_unknown_limits_are_not_exported(
        self, registry: "CollectorRegistry"
    ) -> "None":
        metrics = StatusMetrics(registry=registry)
        metrics.update(_hook(), StatusSnapshot())
        assert (
            registry.get_sample_value(
                "ccstatus_limit_utilization_percent", {"window": "five_hour"}
            )
            is None
        )

    def test_write_textfile(
        self, registry: "CollectorRegistry", tmp_path: "Path"
    ) -> "None":
        metrics = StatusMetrics(registry=registry)
        metrics.update(_hook(), StatusSnapshot())
        path = tmp_path / "ccstatus.prom"
        metrics.write(str(path))

        content = path.read_text(encoding="utf-8")
        assert "# TYPE ccstatus_session_cost_usd gauge" in content
        assert "ccstatus_session_cost_usd 0.5" in content
