"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import ContextGraphRepository, ProposalBatchRepository, Repository

__all__ = [
    "ContextGraphRepository",
    "ProposalBatchRepository",
    "Repository",
]
