import os
from dataclasses import dataclass, field
from pathlib import Path

from ccstatus.paths import detect_home
from ccstatus.provider.anthropic import USAGE_URL


def _default_data_dir() -> "Path":
    return Path.home() / ".claude" / "ccstatus"


def _default_credentials_file() -> "Path":
    return Path.home() / ".claude" / ".credentials.json"


@dataclass
class Config:
    # statusline, today or month
    command: "str" = "statusline"
    log_level: "str" = "warning"
    # empty means stderr; stdout is reserved for the status line
    log_file: "str" = ""

    data_dir: "Path" = field(default_factory=_default_data_dir)
    credentials_file: "Path" = field(default_factory=_default_credentials_file)
    usage_url: "str" = USAGE_URL

    # seconds
    git_timeout: "float" = 1.5
    usage_timeout: "float" = 2.0

    context_window: "int" = 200_000
    # model names containing this are not shown on line 1
    default_model_family: "str" = "sonnet"
    color: "bool" = True
    # home directory used to shorten paths, see paths.detect_home
    home: "str" = ""

    metrics_textfile: "str" = ""

    @classmethod
    def from_env(cls) -> "Config":
        env = os.environ
        config = cls(
            usage_url=env.get("CCSTATUS_USAGE_URL", USAGE_URL),
            log_file=env.get("CCSTATUS_LOG_FILE", ""),
            metrics_textfile=env.get("CCSTATUS_METRICS_TEXTFILE", ""),
            # https://no-color.org
            color=not env.get("NO_COLOR"),
            home=detect_home(env),
        )
        if env.get("CCSTATUS_DATA_DIR"):
            config.data_dir = Path(env["CCSTATUS_DATA_DIR"]).expanduser()
        if env.get("CCSTATUS_CREDENTIALS_FILE"):
            config.credentials_file = Path(
                env["CCSTATUS_CREDENTIALS_FILE"]
            ).expanduser()
        return config

    @property
    def spend_file(self) -> "Path":
        return self.data_dir / "spend.json"

    @property
    def period_file(self) -> "Path":
        return self.data_dir / "period-cost.json"

    @property
    def metrics_enabled(self) -> "bool":
        return bool(self.metrics_textfile)
