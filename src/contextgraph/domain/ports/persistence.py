"""Ports for persisting context graphs and proposal batches.

Storage is owned by an external record store: reads and writes are per record and
concurrent writers race with last-write-wins semantics.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from contextgraph.domain.model import ContextGraph, ProposalBatch


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def get(self, key: str) -> TEntity | None: ...


@runtime_checkable
class ContextGraphRepository(Repository[ContextGraph], Protocol):
    """Persistence contract for context graphs, keyed by company id."""

    def save(self, graph: ContextGraph) -> None: ...


@runtime_checkable
class ProposalBatchRepository(Repository[ProposalBatch], Protocol):
    """Persistence contract for proposal batches, keyed by batch id."""

    def add(self, batch: ProposalBatch) -> None: ...

    def update(self, batch: ProposalBatch) -> None: ...

    def list_pending(self, company_id: str) -> list[ProposalBatch]: ...
