from datetime import datetime

from ccstatus.colors import Colors
from ccstatus.models import GitStatus, HookInput, StatusSnapshot, UsageWindow
from ccstatus.paths import shorten_path
from ccstatus.timeutil import parse_instant, utcnow

_BAR_GLYPHS = ["⣀", "⣄", "⣤", "⣦", "⣶", "⣷", "⣿"]


def _round_half_up(value: "float") -> "int":
    return int(value + 0.5)


def format_cost(cost: "float") -> "str":
    return f"{cost:.2f}"


def format_duration(ms: "int") -> "str":
    mins = int(ms // 60000)
    hrs, m = divmod(mins, 60)
    return f"{hrs}h{m}m" if hrs > 0 else f"{m}m"


def format_long_duration(ms: "int") -> "str":
    """
    like format_duration, with a space: '1h 5m'. Used by the reports.
    """
    mins = int(ms // 60000)
    hrs, m = divmod(mins, 60)
    return f"{hrs}h {m}m" if hrs > 0 else f"{m}m"


def format_tokens(tokens: "int") -> "str":
    if tokens >= 1_000_000:
        return f"{tokens / 1_000_000:.1f}m"
    if tokens >= 1000:
        return f"{_round_half_up(tokens / 1000)}k"
    return str(tokens)


def format_percent(value: "float") -> "str":
    # 37.0 -> '37', 37.5 -> '37.5'
    return f"{value:g}"


def format_reset_time(resets_at: "str", now: "datetime | None" = None) -> "str":
    """
    time left until resets_at: 'now', '2h13m' or '13m'. Empty when the
    instant can't be parsed.
    """
    try:
        reset = parse_instant(resets_at)
    except ValueError:
        return ""
    diff = (reset - (now or utcnow())).total_seconds()
    if diff <= 0:
        return "now"
    hrs, rest = divmod(int(diff), 3600)
    mins = rest // 60
    return f"{hrs}h{mins}m" if hrs > 0 else f"{mins}m"


def progress_bar(pct: "float", colors: "Colors", length: "int" = 10) -> "str":
    """
    braille bar with sub-cell resolution, colored by how full it is.
    """
    pct = max(0.0, min(100.0, pct))
    cell_steps = len(_BAR_GLYPHS) - 1
    current = _round_half_up(pct / 100 * length * cell_steps)
    full, partial = divmod(current, cell_steps)
    empty = length - full - (1 if partial else 0)

    if pct < 50:
        paint = colors.gray
    elif pct < 70:
        paint = colors.yellow
    elif pct < 90:
        paint = colors.orange
    else:
        paint = colors.red

    filled = "⣿" * full + (_BAR_GLYPHS[partial] if partial else "")
    return paint(filled) + colors.gray("⣀" * empty)


def context_percent(tokens: "int", window: "int") -> "int":
    if window <= 0:
        return 0
    return min(100, _round_half_up(tokens / window * 100))


class Renderer:
    """
    Renderer turns a session and its collected snapshot into the two
    status lines. It has no side effects.
    """

    def __init__(
        self,
        colors: "Colors | None" = None,
        context_window: "int" = 200_000,
        home: "str" = "",
        default_model_family: "str" = "sonnet",
    ) -> "None":
        self._c = colors or Colors()
        self._context_window = context_window
        self._home = home
        self._default_model_family = default_model_family.lower()

    def git_segment(self, git: "GitStatus") -> "str":
        c = self._c
        part = c.white(git.branch)
        if not git.has_changes:
            return part

        part += c.magenta("*")
        changes: "list[str]" = []
        added = git.staged.added + git.unstaged.added
        deleted = git.staged.deleted + git.unstaged.deleted
        if added > 0:
            changes.append(c.green(f"+{added}"))
        if deleted > 0:
            changes.append(c.red(f"-{deleted}"))
        # staged files gray, unstaged yellow
        if git.staged.files > 0:
            changes.append(c.gray(f"~{git.staged.files}"))
        if git.unstaged.files > 0:
            changes.append(c.yellow(f"~{git.unstaged.files}"))
        if changes:
            part += " " + " ".join(changes)
        return part

    def _window_segment(
        self,
        label: "str",
        window: "UsageWindow",
        now: "datetime | None",
        cost: "float" = 0.0,
    ) -> "str":
        c = self._c
        reset = format_reset_time(window.resets_at, now) if window.resets_at else ""
        cost_part = c.green(f"${format_cost(cost)}") + " " if cost > 0 else ""
        reset_part = c.cyan(f" ({reset})") if reset else ""
        return (
            f"{c.magenta(label)} {cost_part}{progress_bar(window.utilization, c, 5)} "
            f"{c.white(format_percent(window.utilization))}{c.gray('%')}{reset_part}"
        )

    def first_line(self, hook: "HookInput", snapshot: "StatusSnapshot") -> "str":
        c = self._c
        parts: "list[str]" = []
        if snapshot.git.is_repository:
            parts.append(self.git_segment(snapshot.git))

        parts.append(c.gray(shorten_path(hook.current_dir, self._home)))

        name = hook.model_name
        if name and self._default_model_family not in name.lower():
            parts.append(c.cyan(name))
        return f" {c.gray('•')} ".join(parts)

    def second_line(
        self,
        hook: "HookInput",
        snapshot: "StatusSnapshot",
        now: "datetime | None" = None,
    ) -> "str":
        c = self._c
        parts: "list[str]" = [c.green(f"${format_cost(hook.cost_usd)}")]

        tokens = snapshot.context_tokens
        pct = context_percent(tokens, self._context_window)
        parts.append(
            f"{c.cyan(format_tokens(tokens))} {progress_bar(pct, c)} "
            f"{c.white(pct)}{c.gray('%')}"
        )

        parts.append(c.yellow(f"({format_duration(hook.duration_ms)})"))

        five_hour = snapshot.limits.five_hour
        if five_hour is not None:
            period_total = snapshot.period_cost + hook.cost_usd
            parts.append(self._window_segment("L:", five_hour, now, period_total))

        # the weekly window only matters once the 5-hour one is nearly spent
        seven_day = snapshot.limits.seven_day
        if seven_day is not None and five_hour is not None and five_hour.utilization >= 90:
            parts.append(self._window_segment("W:", seven_day, now))

        today_total = snapshot.today_cost + hook.cost_usd
        if today_total > 0:
            parts.append(f"{c.blue('D:')} {c.green(f'${format_cost(today_total)}')}")

        return f"{c.gray('S:')} " + " ".join(parts)

    def render(
        self,
        hook: "HookInput",
        snapshot: "StatusSnapshot",
        now: "datetime | None" = None,
    ) -> "tuple[str, str]":
        return self.first_line(hook, snapshot), self.second_line(hook, snapshot, now)
