from datetime import date

from ccstatus.colors import Colors
from ccstatus.paths import tail_segments
from ccstatus.render import format_long_duration
from ccstatus.spend_store import SpendLedger, month_start_iso, summarize


def _day_label(day: "str") -> "str":
    # 2025-10-18 -> 'Sat, Oct 18'
    try:
        d = date.fromisoformat(day)
    except ValueError:
        return day
    return f"{d:%a}, {d:%b} {d.day}"


def today_report(
    ledger: "SpendLedger",
    today: "date | None" = None,
    colors: "Colors | None" = None,
) -> "list[str]":
    """
    one line per session recorded today and a total.
    """
    c = colors or Colors()
    day = (today or date.today()).isoformat()
    if not len(ledger):
        return [c.yellow("No spend data found.")]

    sessions = ledger.on_date(day)
    if not sessions:
        return [c.yellow("No sessions today.")]

    lines = [c.bold(f"\n📅 Today's Sessions ({day})\n")]
    for session in sessions:
        mins = session.duration_ms // 60000
        lines.append(
            f"  {c.gray('•')} {c.white(f'${session.cost:.2f}')} "
            f"{c.gray(f'({mins}m)')} {c.gray(tail_segments(session.cwd))}"
        )

    total = summarize(sessions)
    lines.append(c.gray("\n  ─────────────────────────"))
    lines.append(
        f"  {c.bold('Total:')} {c.green(f'${total.total_cost:.2f}')} "
        f"{c.gray(f'({format_long_duration(total.total_duration_ms)})')} "
        f"{c.gray(f'• {total.count} sessions')}"
    )
    lines.append("")
    return lines


def month_report(
    ledger: "SpendLedger",
    today: "date | None" = None,
    colors: "Colors | None" = None,
) -> "list[str]":
    """
    month-to-date spend grouped by day, newest first, with a grand total.
    """
    c = colors or Colors()
    today = today or date.today()
    if not len(ledger):
        return [c.yellow("No spend data found.")]

    sessions = ledger.since(month_start_iso(today))
    if not sessions:
        return [c.yellow("No sessions this month.")]

    lines = [c.bold(f"\n📅 {today:%B %Y} Spending\n")]
    for day, day_sessions in ledger.by_date(sessions).items():
        summary = summarize(day_sessions)
        mins = summary.total_duration_ms // 60000
        lines.append(
            f"  {c.white(_day_label(day).ljust(12))} "
            f"{c.green(f'${summary.total_cost:6.2f}')} "
            f"{c.gray(f'({mins}m)')} {c.gray(f'• {summary.count} sessions')}"
        )

    total = summarize(sessions)
    lines.append(c.gray("\n  ─────────────────────────────────"))
    lines.append(
        f"  {c.bold('Total:')}      {c.green(f'${total.total_cost:6.2f}')} "
        f"{c.gray(f'({format_long_duration(total.total_duration_ms)})')} "
        f"{c.gray(f'• {total.count} sessions')}"
    )
    lines.append("")
    return lines
