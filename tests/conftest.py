from __future__ import annotations

import pytest

from contextgraph.config import GraphConfig
from tests.helpers.graphs import InMemoryBatchRepository, InMemoryGraphRepository, empty_graph

_CONFIG_VARS = (
    "CONTEXTGRAPH_HISTORY_LIMIT",
    "CONTEXTGRAPH_PROCEED_MAX_MISSING",
    "CONTEXTGRAPH_READINESS_CACHE_TTL",
)


@pytest.fixture(autouse=True)
def _clean_graph_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _CONFIG_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def graph_config() -> GraphConfig:
    return GraphConfig()


@pytest.fixture
def graphs() -> InMemoryGraphRepository:
    return InMemoryGraphRepository(empty_graph("acme"))


@pytest.fixture
def batches() -> InMemoryBatchRepository:
    return InMemoryBatchRepository()
