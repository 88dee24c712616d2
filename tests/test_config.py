from pathlib import Path

from ccstatus.cli import parse_args
from ccstatus.config import Config
from ccstatus.provider.anthropic import USAGE_URL


class TestConfigFromEnv:
    def test_defaults(self, monkeypatch: "object") -> "None":
        for name in (
            "CCSTATUS_DATA_DIR",
            "CCSTATUS_CREDENTIALS_FILE",
            "CCSTATUS_USAGE_URL",
            "CCSTATUS_LOG_FILE",
            "CCSTATUS_METRICS_TEXTFILE",
            "NO_COLOR",
        ):
            monkeypatch.delenv(name, raising=False)
        config = Config.from_env()
        assert config.usage_url == USAGE_URL
        assert config.data_dir == Path.home() / ".claude" / "ccstatus"
        assert config.credentials_file.name == ".credentials.json"
        assert config.color is True
        assert config.metrics_enabled is False
        assert config.context_window == 200_000

    def test_reads_env_vars(self, monkeypatch: "object", tmp_path: "Path") -> "None":
        monkeypatch.setenv("CCSTATUS_DATA_DIR", str(tmp_path / "data"))
        monkeypatch.setenv("CCSTATUS_CREDENTIALS_FILE", str(tmp_path / "creds.json"))
        monkeypatch.setenv("CCSTATUS_USAGE_URL", "http://localhost:9999/usage")
        monkeypatch.setenv("CCSTATUS_METRICS_TEXTFILE", str(tmp_path / "m.prom"))
        monkeypatch.setenv("NO_COLOR", "1")
        config = Config.from_env()
        assert config.data_dir == tmp_path / "data"
        assert config.credentials_file == tmp_path / "creds.json"
        assert config.usage_url == "http://localhost:9999/usage"
        assert config.metrics_enabled is True
        assert config.color is False

    def test_home_prefers_userprofile(self, monkeypatch: "object") -> "None":
        monkeypatch.setenv("USERPROFILE", r"C:\Users\dev")
        monkeypatch.setenv("HOME", "/c/Users/dev")
        assert Config.from_env().home == r"C:\Users\dev"


class TestDerivedPaths:
    def test_data_files(self, tmp_path: "Path") -> "None":
        config = Config(data_dir=tmp_path)
        assert config.spend_file == tmp_path / "spend.json"
        assert config.period_file == tmp_path / "period-cost.json"


class TestParseArgs:
    def test_defaults_to_statusline(self, monkeypatch: "object") -> "None":
        monkeypatch.delenv("NO_COLOR", raising=False)
        config = parse_args([])
        assert config.command == "statusline"
        assert config.log_level == "warning"
        assert config.git_timeout == 1.5
        assert config.usage_timeout == 2.0

    def test_flags_override(self, tmp_path: "Path") -> "None":
        config = parse_args(
            [
                "month",
                "--data.dir",
                str(tmp_path),
                "--git.timeout",
                "0.5",
                "--usage.timeout",
                "3",
                "--metrics.textfile",
                str(tmp_path / "ccstatus.prom"),
                "--log.level",
                "debug",
                "--no-color",
            ]
        )
        assert config.command == "month"
        assert config.data_dir == tmp_path
        assert config.git_timeout == 0.5
        assert config.usage_timeout == 3.0
        assert config.metrics_textfile == str(tmp_path / "ccstatus.prom")
        assert config.log_level == "debug"
        assert config.color is False

    def test_env_data_dir_kept_without_flag(
        self, monkeypatch: "object", tmp_path: "Path"
    ) -> "None":
        monkeypatch.setenv("CCSTATUS_DATA_DIR", str(tmp_path))
        assert parse_args(["today"]).data_dir == tmp_path
