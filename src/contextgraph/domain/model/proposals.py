"""Staged candidate writes and the batches that group them."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any
from uuid import uuid4

from contextgraph.domain.model.enums import BatchStatus, ProposalStatus
from contextgraph.domain.model.errors import ProposalAlreadyDecidedError, ProposalNotFoundError
from contextgraph.domain.model.graph import DEFAULT_CONTRIBUTION_CONFIDENCE, utcnow
from contextgraph.domain.model.registry import FieldPath


def new_batch_id() -> str:
    return f"batch_{uuid4().hex}"


def new_proposal_id() -> str:
    return f"prop_{uuid4().hex}"


@dataclass(frozen=True, slots=True, kw_only=True)
class ProposalCandidate:
    """Raw output of a generation run before it is staged as a Proposal."""

    field_path: FieldPath
    proposed_value: Any
    confidence: float = DEFAULT_CONTRIBUTION_CONFIDENCE
    reason: str = ""


@dataclass(frozen=True, slots=True, kw_only=True)
class Proposal:
    id: str
    company_id: str
    field_path: FieldPath
    proposed_value: Any
    source: str
    confidence: float = DEFAULT_CONTRIBUTION_CONFIDENCE
    reason: str = ""
    previous_value: Any = None
    status: ProposalStatus = ProposalStatus.PROPOSED
    created_at: datetime = field(default_factory=utcnow)
    decided_at: datetime | None = None
    decided_by: str | None = None
    applied_value: Any = None

    def __post_init__(self) -> None:
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"Proposal confidence must be within [0, 1], got {self.confidence}")

    @property
    def is_pending(self) -> bool:
        return self.status is ProposalStatus.PROPOSED

    def decide(
        self,
        status: ProposalStatus,
        *,
        decided_by: str | None,
        decided_at: datetime | None = None,
        applied_value: Any = None,
    ) -> Proposal:
        """Return the terminal copy of this proposal.

        A proposal leaves ``proposed`` exactly once; deciding it again raises
        ``ProposalAlreadyDecidedError``.
        """
        if status is ProposalStatus.PROPOSED:
            raise ValueError("A decision must move a proposal out of 'proposed'")
        if not self.is_pending:
            raise ProposalAlreadyDecidedError(self.id, self.status.value)
        return replace(
            self,
            status=status,
            decided_by=decided_by,
            decided_at=decided_at or utcnow(),
            applied_value=applied_value,
        )


def compute_batch_status(proposals: tuple[Proposal, ...]) -> BatchStatus:
    if not proposals or all(not p.is_pending for p in proposals):
        if proposals and all(p.status is ProposalStatus.REJECTED for p in proposals):
            return BatchStatus.REJECTED
        return BatchStatus.COMPLETE
    if all(p.is_pending for p in proposals):
        return BatchStatus.PENDING
    return BatchStatus.PARTIAL


@dataclass(frozen=True, slots=True, kw_only=True)
class ProposalBatch:
    """Proposals produced by one generation run."""

    id: str
    company_id: str
    proposals: tuple[Proposal, ...] = ()
    source: str
    trigger: str | None = None
    reasoning: str = ""
    created_at: datetime = field(default_factory=utcnow)
    resolved_at: datetime | None = None

    @property
    def status(self) -> BatchStatus:
        return compute_batch_status(self.proposals)

    @property
    def pending(self) -> tuple[Proposal, ...]:
        return tuple(p for p in self.proposals if p.is_pending)

    def get(self, proposal_id: str) -> Proposal:
        for proposal in self.proposals:
            if proposal.id == proposal_id:
                return proposal
        raise ProposalNotFoundError(self.id, proposal_id)

    def replace_proposal(self, updated: Proposal, *, now: datetime | None = None) -> ProposalBatch:
        self.get(updated.id)
        proposals = tuple(updated if p.id == updated.id else p for p in self.proposals)
        batch = replace(self, proposals=proposals)
        terminal = batch.status in (BatchStatus.COMPLETE, BatchStatus.REJECTED)
        if batch.resolved_at is None and terminal:
            batch = replace(batch, resolved_at=now or utcnow())
        return batch
