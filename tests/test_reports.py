import re
from datetime import date

from ccstatus.colors import Colors
from ccstatus.models import SessionRecord
from ccstatus.reports import month_report, today_report
from ccstatus.spend_store import SpendLedger

TODAY = date(2025, 10, 18)
PLAIN = Colors(enabled=False)


def _record(
    session_id: "str", cost: "float", day: "str", minutes: "int" = 10
) -> "SessionRecord":
    return SessionRecord(
        id=session_id,
        cost=cost,
        date=day,
        duration_ms=minutes * 60000,
        cwd=f"/home/tester/src/{session_id}",
    )


def _dollars(line: "str") -> "float":
    return float(re.search(r"\$\s*([0-9.]+)", line).group(1))


class TestTodayReport:
    def test_empty_ledger(self) -> "None":
        assert today_report(SpendLedger(), TODAY, PLAIN) == ["No spend data found."]

    def test_no_sessions_today(self) -> "None":
        ledger = SpendLedger([_record("a", 1.0, "2025-10-17")])
        assert today_report(ledger, TODAY, PLAIN) == ["No sessions today."]

    def test_lists_sessions_and_total(self) -> "None":
        ledger = SpendLedger(
            [
                _record("a", 1.0, "2025-10-18", minutes=30),
                _record("b", 2.5, "2025-10-18", minutes=45),
                _record("c", 9.0, "2025-10-17"),
            ]
        )
        lines = today_report(ledger, TODAY, PLAIN)
        assert "Today's Sessions (2025-10-18)" in lines[0]
        assert "  • $1.00 (30m) src/a" in lines
        assert "  • $2.50 (45m) src/b" in lines
        assert lines[-2] == "  Total: $3.50 (1h 15m) • 2 sessions"


class TestMonthReport:
    def test_empty_ledger(self) -> "None":
        assert month_report(SpendLedger(), TODAY, PLAIN) == ["No spend data found."]

    def test_no_sessions_this_month(self) -> "None":
        ledger = SpendLedger([_record("a", 1.0, "2025-09-30")])
        assert month_report(ledger, TODAY, PLAIN) == ["No sessions this month."]

    def test_only_current_month_grouped_newest_first(self) -> "None":
        ledger = SpendLedger(
            [
                _record("old", 100.0, "2025-09-30"),
                _record("a", 1.25, "2025-10-01"),
                _record("b", 2.0, "2025-10-18"),
                _record("c", 0.75, "2025-10-18"),
            ]
        )
        lines = month_report(ledger, TODAY, PLAIN)
        assert "October 2025 Spending" in lines[0]

        day_lines = [line for line in lines if "sessions" in line and "Total" not in line]
        assert len(day_lines) == 2
        assert day_lines[0].lstrip().startswith("Sat, Oct 18")
        assert day_lines[1].lstrip().startswith("Wed, Oct 1")
        assert "• 2 sessions" in day_lines[0]

        total_line = next(line for line in lines if "Total:" in line)
        assert _dollars(total_line) == 4.0
        assert sum(_dollars(line) for line in day_lines) == _dollars(total_line)
        assert "• 3 sessions" in total_line
