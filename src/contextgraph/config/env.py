"""Environment variable loaders for configuration."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from .errors import ConfigurationError

if TYPE_CHECKING:
    from pathlib import Path


def load_environment(dotenv_path: str | Path | None = None, *, override: bool = False) -> bool:
    """Load a ``.env`` file into the process environment.

    Returns whether a file was found and loaded. Existing variables win unless
    ``override`` is set.
    """

    return load_dotenv(dotenv_path=dotenv_path, override=override)


def env_int(name: str, default: int) -> int:
    """Read an optional integer variable, falling back to ``default`` when unset/blank."""

    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc


def env_float(name: str, default: float) -> float:
    """Read an optional float variable, falling back to ``default`` when unset/blank."""

    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw.strip())
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc
