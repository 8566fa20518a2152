"""Errors raised while reading context graph settings."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """A ``CONTEXTGRAPH_*`` setting is malformed or out of range."""
