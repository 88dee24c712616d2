import asyncio
import sys

import structlog

from ccstatus.cli import parse_args
from ccstatus.collector import StatusCollector
from ccstatus.colors import Colors
from ccstatus.config import Config
from ccstatus.git import GitStatusCollector
from ccstatus.logging import setup_logging
from ccstatus.metrics import StatusMetrics
from ccstatus.models import HookInput, StatusSnapshot
from ccstatus.period_tracker import PeriodCostTracker
from ccstatus.provider.anthropic import AnthropicUsageProvider
from ccstatus.render import Renderer
from ccstatus.reports import month_report, today_report
from ccstatus.spend_store import SpendStore

logger = structlog.get_logger()


def _force_utf8_stdio() -> "None":
    """
    the bar glyphs and report icons are not representable in legacy
    code pages (cp1252 is the default for piped output on Windows).
    """
    for stream in (sys.stdout, sys.stderr):
        if stream is not None and hasattr(stream, "reconfigure"):
            stream.reconfigure(encoding="utf-8", errors="replace")


def _read_stdin() -> "str":
    # nothing is piped when run by hand from a terminal
    if sys.stdin is None or sys.stdin.isatty():
        return ""
    # the payload is UTF-8 JSON whatever the locale says
    buffer = getattr(sys.stdin, "buffer", None)
    if buffer is None:
        return sys.stdin.read()
    return buffer.read().decode("utf-8", errors="replace")


async def run_statusline(config: "Config", raw_input: "str") -> "tuple[str, str]":
    """
    renders the status line for one hook payload, prints it, then
    persists the session in the background.
    """
    hook = HookInput.from_json(raw_input)
    structlog.contextvars.bind_contextvars(session_id=hook.session_id)

    collector = StatusCollector(
        git=GitStatusCollector(cwd=hook.current_dir or hook.cwd),
        usage_provider=AnthropicUsageProvider(
            credentials_path=config.credentials_file,
            url=config.usage_url,
        ),
        spend_store=SpendStore(config.spend_file),
        period_tracker=PeriodCostTracker(config.period_file),
        git_timeout=config.git_timeout,
        usage_timeout=config.usage_timeout,
        metrics=StatusMetrics() if config.metrics_enabled else None,
        metrics_path=config.metrics_textfile,
    )
    renderer = Renderer(
        colors=Colors(config.color),
        context_window=config.context_window,
        home=config.home,
        default_model_family=config.default_model_family,
    )

    try:
        try:
            snapshot = await collector.collect(hook)
        except Exception:
            # the line must render even when every source fails
            logger.exception("status_collect_error")
            snapshot = StatusSnapshot()
        lines = renderer.render(hook, snapshot)
        print(lines[0])
        print(lines[1], flush=True)

        collector.persist(hook, snapshot)
        await collector.drain()
    finally:
        await collector.close()
    return lines


def run_report(config: "Config") -> "None":
    ledger = SpendStore(config.spend_file).load()
    colors = Colors(config.color)
    if config.command == "today":
        lines = today_report(ledger, colors=colors)
    else:
        lines = month_report(ledger, colors=colors)
    print("\n".join(lines))


def main(argv: "list[str] | None" = None) -> "None":
    _force_utf8_stdio()
    config = parse_args(argv)
    setup_logging(config.log_level, config.log_file)
    logger.debug("starting", command=config.command, data_dir=str(config.data_dir))

    if config.command == "statusline":
        asyncio.run(run_statusline(config, _read_stdin()))
    else:
        run_report(config)


def spend_today() -> "None":
    main([*sys.argv[1:], "today"])


def spend_month() -> "None":
    main([*sys.argv[1:], "month"])


if __name__ == "__main__":
    main()
