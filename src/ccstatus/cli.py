import argparse
from pathlib import Path

from ccstatus.config import Config

COMMANDS = ("statusline", "today", "month")


def parse_args(argv: "list[str] | None" = None) -> "Config":
    parser = argparse.ArgumentParser(
        prog="ccstatus",
        description="Claude Code status line and spend reports",
    )
    parser.add_argument(
        "command",
        nargs="?",
        default="statusline",
        choices=COMMANDS,
        help="What to print (default: statusline, reads the session JSON from stdin)",
    )
    parser.add_argument(
        "--data.dir",
        dest="data_dir",
        default=None,
        help="Directory holding spend.json and period-cost.json",
    )
    parser.add_argument(
        "--git.timeout",
        dest="git_timeout",
        type=float,
        default=None,
        help="Seconds to wait for git before omitting it (default: 1.5)",
    )
    parser.add_argument(
        "--usage.timeout",
        dest="usage_timeout",
        type=float,
        default=None,
        help="Seconds to wait for the usage API (default: 2.0)",
    )
    parser.add_argument(
        "--metrics.textfile",
        dest="metrics_textfile",
        default=None,
        help="Write Prometheus textfile metrics to this path after each refresh",
    )
    parser.add_argument(
        "--no-color",
        dest="no_color",
        action="store_true",
        help="Disable ANSI colors",
    )
    parser.add_argument(
        "--log.level",
        dest="log_level",
        default="warning",
        choices=["debug", "info", "warning", "error"],
        help="Log level (default: warning)",
    )
    parser.add_argument(
        "--log.file",
        dest="log_file",
        default=None,
        help="Write logs to this file instead of stderr",
    )

    args = parser.parse_args(argv)
    config = Config.from_env()
    config.command = args.command
    config.log_level = args.log_level
    # flags only override the environment when given
    if args.data_dir is not None:
        config.data_dir = Path(args.data_dir).expanduser()
    if args.git_timeout is not None:
        config.git_timeout = args.git_timeout
    if args.usage_timeout is not None:
        config.usage_timeout = args.usage_timeout
    if args.metrics_textfile is not None:
        config.metrics_textfile = args.metrics_textfile
    if args.log_file is not None:
        config.log_file = args.log_file
    if args.no_color:
        config.color = False
    return config
