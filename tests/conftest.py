import json
from pathlib import Path

import pytest
from prometheus_client import CollectorRegistry

from ccstatus.config import Config
from ccstatus.logging import setup_logging


@pytest.fixture(scope="session", autouse=True)
def _route_logs_through_stdlib() -> "None":
    """
    structlog prints to stdout until configured, which would mix log
    lines into the captured status line output.
    """
    setup_logging("debug")


@pytest.fixture()
def registry() -> "CollectorRegistry":
    """
    fresh Prometheus registry to avoid cross-test state.
    """
    return CollectorRegistry()


@pytest.fixture()
def config(tmp_path: "Path") -> "Config":
    """
    config isolated from the real home directory and credentials.
    """
    return Config(
        data_dir=tmp_path / "data",
        credentials_file=tmp_path / "missing-credentials.json",
        color=False,
        home="/home/tester",
    )


@pytest.fixture()
def write_transcript(tmp_path: "Path"):
    """
    writes the given events (dicts or raw strings) as a JSONL transcript.
    """

    def _write(events: "list[object]") -> "Path":
        path = tmp_path / "transcript.jsonl"
        lines = [e if isinstance(e, str) else json.dumps(e) for e in events]
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write
