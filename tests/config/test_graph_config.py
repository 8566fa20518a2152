from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

import pytest

from contextgraph.config import (
    ConfigurationError,
    GraphConfig,
    bootstrap,
    configure_logging,
    get_graph_config,
    load_environment,
)

if TYPE_CHECKING:
    from pathlib import Path


def test_graph_config_defaults() -> None:
    config = get_graph_config()

    assert config == GraphConfig()
    assert config.provenance_history_limit == 5
    assert config.proceed_anyway_max_missing == 1
    assert config.readiness_cache_ttl_seconds == pytest.approx(60.0)


def test_graph_config_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CONTEXTGRAPH_HISTORY_LIMIT", "10")
    monkeypatch.setenv("CONTEXTGRAPH_PROCEED_MAX_MISSING", " 2 ")
    monkeypatch.setenv("CONTEXTGRAPH_READINESS_CACHE_TTL", "0.5")

    config = get_graph_config()

    assert config.provenance_history_limit == 10
    assert config.proceed_anyway_max_missing == 2
    assert config.readiness_cache_ttl_seconds == pytest.approx(0.5)


def test_zero_history_limit_keeps_full_history(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CONTEXTGRAPH_HISTORY_LIMIT", "0")

    assert get_graph_config().provenance_history_limit is None


def test_blank_values_fall_back_to_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CONTEXTGRAPH_PROCEED_MAX_MISSING", "   ")

    assert get_graph_config().proceed_anyway_max_missing == 1


@pytest.mark.parametrize(
    ("name", "raw"),
    [
        ("CONTEXTGRAPH_HISTORY_LIMIT", "five"),
        ("CONTEXTGRAPH_HISTORY_LIMIT", "-1"),
        ("CONTEXTGRAPH_PROCEED_MAX_MISSING", "-3"),
        ("CONTEXTGRAPH_READINESS_CACHE_TTL", "soon"),
        ("CONTEXTGRAPH_READINESS_CACHE_TTL", "0"),
    ],
)
def test_graph_config_rejects_malformed_values(
    monkeypatch: pytest.MonkeyPatch, name: str, raw: str
) -> None:
    monkeypatch.setenv(name, raw)

    with pytest.raises(ConfigurationError) as exc:
        get_graph_config()

    assert name in str(exc.value)


def test_load_environment_reads_dotenv_file(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    dotenv = tmp_path / ".env"
    dotenv.write_text("CONTEXTGRAPH_HISTORY_LIMIT=3\n", encoding="utf-8")
    monkeypatch.setenv("CONTEXTGRAPH_HISTORY_LIMIT", "9")

    assert load_environment(dotenv)
    assert os.environ["CONTEXTGRAPH_HISTORY_LIMIT"] == "9"

    assert load_environment(dotenv, override=True)
    assert get_graph_config().provenance_history_limit == 3


def test_load_environment_reports_missing_file(tmp_path: Path) -> None:
    assert not load_environment(tmp_path / "absent.env")


def test_configure_logging_installs_root_handler(monkeypatch: pytest.MonkeyPatch) -> None:
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    monkeypatch.setattr(root, "level", root.level)

    configure_logging(level=logging.DEBUG)

    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1


def test_bootstrap_loads_dotenv_and_configures_logging(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    dotenv = tmp_path / ".env"
    dotenv.write_text(
        "CONTEXTGRAPH_PROCEED_MAX_MISSING=2\nCONTEXTGRAPH_HISTORY_LIMIT=0\n", encoding="utf-8"
    )
    monkeypatch.setenv("CONTEXTGRAPH_HISTORY_LIMIT", "7")
    # registers removal of the value the .env file adds
    monkeypatch.setenv("CONTEXTGRAPH_PROCEED_MAX_MISSING", "unset")
    monkeypatch.delenv("CONTEXTGRAPH_PROCEED_MAX_MISSING")
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    monkeypatch.setattr(root, "level", root.level)

    config = bootstrap(dotenv, log_level=logging.WARNING)

    assert config.provenance_history_limit == 7
    assert config.proceed_anyway_max_missing == 2
    assert root.level == logging.WARNING
    assert len(root.handlers) == 1
