"""Proposal lifecycle: stage candidate writes, then accept or reject them into the graph.

Responsibilities:
- snapshot the current value when a batch is staged
- resolve proposals one at a time or in bulk through the mutation engine
- report a per-field outcome for every write attempt

Rules:
- a decided proposal is terminal; deciding it again individually raises
- bulk actions only touch members still ``proposed``
- a per-field error leaves its proposal ``proposed`` and never aborts the batch
- rejecting never touches the graph
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Any

from contextgraph.domain.model import (
    DEFAULT_REGISTRY,
    ContextGraphValidationError,
    Contribution,
    FieldPath,
    Proposal,
    ProposalAlreadyDecidedError,
    ProposalBatch,
    ProposalStatus,
    Source,
)
from contextgraph.domain.model.graph import utcnow
from contextgraph.domain.model.proposals import new_batch_id, new_proposal_id
from contextgraph.domain.mutation import (
    DEFAULT_HISTORY_LIMIT,
    confirm_field,
    set_field_with_result,
)
from contextgraph.domain.proposals.results import (
    ApplyResult,
    FieldApplyResult,
    FieldOutcome,
    outcome_for,
)

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime

    from contextgraph.domain.model import ContextGraph, FieldRegistry, ProposalCandidate

log = getLogger(__name__)

HUMAN_ACCEPT_CONFIDENCE = 1.0


@dataclass(frozen=True, slots=True, kw_only=True)
class FieldWrite:
    """One producer write addressed by path."""

    path: FieldPath | str
    value: Any
    contribution: Contribution


@dataclass(frozen=True, slots=True, kw_only=True)
class ProposalDecision:
    graph: ContextGraph
    batch: ProposalBatch
    result: ApplyResult


@dataclass(frozen=True, slots=True, kw_only=True)
class BatchDecision:
    graph: ContextGraph
    batch: ProposalBatch
    result: ApplyResult


@dataclass(frozen=True, slots=True, kw_only=True)
class AcceptOptions:
    """How accepted proposals are written.

    ``human`` decides the contribution source: ``user`` at full confidence for a person,
    the proposal's own generator and confidence otherwise. ``confirm`` only applies to
    human decisions.
    """

    decided_by: str | None = None
    human: bool = True
    confirm: bool = True
    registry: FieldRegistry = DEFAULT_REGISTRY
    history_limit: int | None = DEFAULT_HISTORY_LIMIT

    def decider_for(self, proposal: Proposal) -> str:
        if self.decided_by:
            return self.decided_by
        return Source.USER if self.human else proposal.source


def create_proposal_batch(
    company_id: str,
    candidates: Iterable[ProposalCandidate],
    *,
    source: str,
    trigger: str | None = None,
    reasoning: str = "",
    graph: ContextGraph | None = None,
    now: datetime | None = None,
) -> ProposalBatch:
    """Stage the output of one generation run as a batch of ``proposed`` items."""
    created = now or utcnow()
    proposals = tuple(
        Proposal(
            id=new_proposal_id(),
            company_id=company_id,
            field_path=candidate.field_path,
            proposed_value=candidate.proposed_value,
            source=source,
            confidence=candidate.confidence,
            reason=candidate.reason,
            previous_value=(
                graph.slot(candidate.field_path.domain, candidate.field_path.field).value
                if graph is not None
                else None
            ),
            created_at=created,
        )
        for candidate in candidates
    )
    batch = ProposalBatch(
        id=new_batch_id(),
        company_id=company_id,
        proposals=proposals,
        source=source,
        trigger=trigger,
        reasoning=reasoning,
        created_at=created,
        resolved_at=None if proposals else created,
    )
    log.info("Staged %d proposals for %s in %s", len(proposals), company_id, batch.id)
    return batch


def _write(
    graph: ContextGraph,
    write: FieldWrite,
    *,
    force: bool,
    confirm_by: str | None,
    registry: FieldRegistry,
    history_limit: int | None,
    now: datetime | None,
) -> tuple[ContextGraph, FieldApplyResult]:
    try:
        definition = registry.resolve_path(write.path)
        path = definition.path
        current = graph.slot(path.domain, path.field)
        if not current.is_empty and current.value == write.value:
            outcome, previous = FieldOutcome.SKIPPED_UNCHANGED, current.value
            reason = "value unchanged"
        else:
            graph, applied = set_field_with_result(
                graph,
                path.domain,
                path.field,
                write.value,
                write.contribution,
                force=force,
                registry=registry,
                history_limit=history_limit,
                now=now,
            )
            outcome, previous = outcome_for(applied), applied.previous_value
            reason = applied.decision.value
        if confirm_by is not None and outcome in (
            FieldOutcome.UPDATED,
            FieldOutcome.SKIPPED_UNCHANGED,
        ):
            graph = confirm_field(
                graph, path.domain, path.field, confirm_by, registry=registry, now=now
            )
    except ContextGraphValidationError as exc:
        log.warning("Apply failed for %s: %s", write.path, exc)
        return graph, FieldApplyResult(path=write.path, status=FieldOutcome.ERROR, reason=str(exc))

    return graph, FieldApplyResult(
        path=path,
        status=outcome,
        reason=reason,
        previous_value=previous,
        new_value=write.value if outcome is FieldOutcome.UPDATED else previous,
    )


def apply_field_writes(
    graph: ContextGraph,
    writes: Iterable[FieldWrite],
    *,
    force: bool = False,
    registry: FieldRegistry = DEFAULT_REGISTRY,
    history_limit: int | None = DEFAULT_HISTORY_LIMIT,
    now: datetime | None = None,
) -> tuple[ContextGraph, ApplyResult]:
    """Apply producer writes in order; later writes see the effect of earlier ones."""
    result = ApplyResult()
    for write in writes:
        graph, field_result = _write(
            graph,
            write,
            force=force,
            confirm_by=None,
            registry=registry,
            history_limit=history_limit,
            now=now,
        )
        result.record(field_result)
    return graph, result


def _accept(
    graph: ContextGraph,
    batch: ProposalBatch,
    proposal: Proposal,
    value: Any,
    options: AcceptOptions,
    result: ApplyResult,
    now: datetime,
    *,
    edited: bool = False,
) -> tuple[ContextGraph, ProposalBatch]:
    """Write one proposal and mark it ``confirmed`` unless the write errored.

    ``confirmed`` records the decision, not the write: a machine accept that loses to a
    human or higher-priority value is still decided, and ``result`` reports the skip.
    """
    if options.human:
        contribution = Contribution.create(
            Source.USER,
            confidence=HUMAN_ACCEPT_CONFIDENCE,
            run_id=batch.id,
            notes=proposal.reason or None,
            now=now,
        )
    else:
        contribution = Contribution.create(
            proposal.source,
            confidence=proposal.confidence,
            run_id=batch.id,
            notes=proposal.reason or None,
            now=now,
        )
    decided_by = options.decider_for(proposal)
    graph, field_result = _write(
        graph,
        FieldWrite(path=proposal.field_path, value=value, contribution=contribution),
        force=False,
        confirm_by=decided_by if options.human and options.confirm else None,
        registry=options.registry,
        history_limit=options.history_limit,
        now=now,
    )
    result.record(field_result)
    if field_result.status is FieldOutcome.ERROR:
        return graph, batch

    decided = proposal.decide(
        ProposalStatus.CONFIRMED,
        decided_by=decided_by,
        decided_at=now,
        applied_value=value if edited else None,
    )
    return graph, batch.replace_proposal(decided, now=now)


def accept_proposal(
    graph: ContextGraph,
    batch: ProposalBatch,
    proposal_id: str,
    *,
    options: AcceptOptions | None = None,
    now: datetime | None = None,
) -> ProposalDecision:
    options = options or AcceptOptions()
    proposal = batch.get(proposal_id)
    if not proposal.is_pending:
        raise ProposalAlreadyDecidedError(proposal.id, proposal.status.value)
    result = ApplyResult()
    graph, batch = _accept(
        graph, batch, proposal, proposal.proposed_value, options, result, now or utcnow()
    )
    return ProposalDecision(graph=graph, batch=batch, result=result)


def edit_and_accept_proposal(
    graph: ContextGraph,
    batch: ProposalBatch,
    proposal_id: str,
    value: Any,
    *,
    options: AcceptOptions | None = None,
    now: datetime | None = None,
) -> ProposalDecision:
    """Accept a proposal with a caller-supplied value in place of ``proposed_value``."""
    options = options or AcceptOptions()
    proposal = batch.get(proposal_id)
    if not proposal.is_pending:
        raise ProposalAlreadyDecidedError(proposal.id, proposal.status.value)
    result = ApplyResult()
    graph, batch = _accept(
        graph, batch, proposal, value, options, result, now or utcnow(), edited=True
    )
    return ProposalDecision(graph=graph, batch=batch, result=result)


def reject_proposal(
    batch: ProposalBatch,
    proposal_id: str,
    *,
    decided_by: str | None = None,
    now: datetime | None = None,
) -> ProposalBatch:
    stamp = now or utcnow()
    rejected = batch.get(proposal_id).decide(
        ProposalStatus.REJECTED,
        decided_by=decided_by or Source.USER,
        decided_at=stamp,
    )
    return batch.replace_proposal(rejected, now=stamp)


def accept_all(
    graph: ContextGraph,
    batch: ProposalBatch,
    *,
    options: AcceptOptions | None = None,
    now: datetime | None = None,
) -> BatchDecision:
    options = options or AcceptOptions()
    stamp = now or utcnow()
    result = ApplyResult()
    for proposal in batch.pending:
        graph, batch = _accept(
            graph, batch, proposal, proposal.proposed_value, options, result, stamp
        )
    log.info(
        "Accepted batch %s: attempted=%d updated=%d skipped=%d errors=%d",
        batch.id,
        result.attempted,
        result.updated,
        result.skipped,
        result.errors,
    )
    return BatchDecision(graph=graph, batch=batch, result=result)


def reject_all(
    batch: ProposalBatch,
    *,
    decided_by: str | None = None,
    now: datetime | None = None,
) -> ProposalBatch:
    stamp = now or utcnow()
    pending = batch.pending
    for proposal in pending:
        batch = reject_proposal(batch, proposal.id, decided_by=decided_by, now=stamp)
    log.info("Rejected %d pending proposals in batch %s", len(pending), batch.id)
    return batch
