"""Tunables for the context graph core."""

from __future__ import annotations

from logging import INFO, getLogger
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from contextgraph.domain.mutation import DEFAULT_HISTORY_LIMIT
from contextgraph.domain.readiness import DEFAULT_MAX_MISSING_CRITICAL

from .env import env_float, env_int, load_environment
from .errors import ConfigurationError
from .logging import configure_logging

if TYPE_CHECKING:
    from pathlib import Path

log = getLogger(__name__)

DEFAULT_PROVENANCE_HISTORY_LIMIT: Final[int] = DEFAULT_HISTORY_LIMIT
DEFAULT_PROCEED_ANYWAY_MAX_MISSING: Final[int] = DEFAULT_MAX_MISSING_CRITICAL
DEFAULT_READINESS_CACHE_TTL_SECONDS: Final[float] = 60.0


@dataclass(frozen=True, slots=True)
class GraphConfig:
    # None keeps the full contribution history
    provenance_history_limit: int | None = DEFAULT_PROVENANCE_HISTORY_LIMIT
    proceed_anyway_max_missing: int = DEFAULT_PROCEED_ANYWAY_MAX_MISSING
    readiness_cache_ttl_seconds: float = DEFAULT_READINESS_CACHE_TTL_SECONDS


def get_graph_config() -> GraphConfig:
    history_limit = env_int("CONTEXTGRAPH_HISTORY_LIMIT", DEFAULT_PROVENANCE_HISTORY_LIMIT)
    max_missing = env_int("CONTEXTGRAPH_PROCEED_MAX_MISSING", DEFAULT_PROCEED_ANYWAY_MAX_MISSING)
    cache_ttl = env_float("CONTEXTGRAPH_READINESS_CACHE_TTL", DEFAULT_READINESS_CACHE_TTL_SECONDS)

    if history_limit < 0:
        raise ConfigurationError("CONTEXTGRAPH_HISTORY_LIMIT must be >= 0")
    if max_missing < 0:
        raise ConfigurationError("CONTEXTGRAPH_PROCEED_MAX_MISSING must be >= 0")
    if cache_ttl <= 0:
        raise ConfigurationError("CONTEXTGRAPH_READINESS_CACHE_TTL must be positive")

    return GraphConfig(
        provenance_history_limit=history_limit or None,
        proceed_anyway_max_missing=max_missing,
        readiness_cache_ttl_seconds=cache_ttl,
    )


def bootstrap(
    dotenv_path: str | Path | None = None,
    *,
    log_level: int = INFO,
) -> GraphConfig:
    """Entry point for a service embedding the core.

    Loads ``.env`` (process variables win), installs the root log handler and returns the
    validated settings to pass to the ``contextgraph.app`` services.
    """

    load_environment(dotenv_path)
    configure_logging(level=log_level)
    config = get_graph_config()
    log.info(
        "Context graph settings: history_limit=%s proceed_max_missing=%d cache_ttl=%.1fs",
        config.provenance_history_limit,
        config.proceed_anyway_max_missing,
        config.readiness_cache_ttl_seconds,
    )
    return config
