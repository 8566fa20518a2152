"""Environment-driven settings, logging setup and the service bootstrap."""

from __future__ import annotations

from .env import env_float, env_int, load_environment
from .errors import ConfigurationError
from .graph import GraphConfig, bootstrap, get_graph_config
from .logging import configure_logging

__all__ = [
    "ConfigurationError",
    "GraphConfig",
    "bootstrap",
    "configure_logging",
    "env_float",
    "env_int",
    "get_graph_config",
    "load_environment",
]
