"""Application services over the repository ports.

These functions load records, run the pure domain operations and persist what changed.
A graph or batch is only written back when the domain operation returned a new value.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any

from contextgraph.common import TTLCache
from contextgraph.config import GraphConfig, get_graph_config
from contextgraph.domain.fingerprint import check_graph_drift, fingerprint_graph
from contextgraph.domain.model import DEFAULT_REGISTRY, ContextGraph, ContextGraphError, FlowType
from contextgraph.domain.proposals import (
    AcceptOptions,
    accept_all,
    accept_proposal,
    apply_field_writes,
    create_proposal_batch,
    edit_and_accept_proposal,
    reject_all,
    reject_proposal,
)
from contextgraph.domain.readiness import evaluate_flow_readiness

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime

    from contextgraph.domain.fingerprint import DriftCheck, SnapshotFingerprint
    from contextgraph.domain.model import FieldRegistry, ProposalBatch, ProposalCandidate
    from contextgraph.domain.ports import ContextGraphRepository, ProposalBatchRepository
    from contextgraph.domain.proposals import (
        ApplyResult,
        BatchDecision,
        FieldWrite,
        ProposalDecision,
    )
    from contextgraph.domain.readiness import FlowReadiness

type ReadinessKey = tuple[str, FlowType, str | None, int, FieldRegistry]
type ReadinessCache = TTLCache[ReadinessKey, FlowReadiness]


log = getLogger(__name__)


class GraphNotFoundError(ContextGraphError, LookupError):
    def __init__(self, company_id: str) -> None:
        super().__init__(f"No context graph for company {company_id}")
        self.company_id = company_id


class ProposalBatchNotFoundError(ContextGraphError, LookupError):
    def __init__(self, batch_id: str) -> None:
        super().__init__(f"Proposal batch {batch_id} not found")
        self.batch_id = batch_id


def _load_graph(graphs: ContextGraphRepository, company_id: str) -> ContextGraph:
    graph = graphs.get(company_id)
    if graph is None:
        raise GraphNotFoundError(company_id)
    return graph


def _load_batch(batches: ProposalBatchRepository, batch_id: str) -> ProposalBatch:
    batch = batches.get(batch_id)
    if batch is None:
        raise ProposalBatchNotFoundError(batch_id)
    return batch


def _save_if_changed(
    graphs: ContextGraphRepository, before: ContextGraph, after: ContextGraph
) -> None:
    if after is not before:
        graphs.save(after)


def build_readiness_cache(config: GraphConfig | None = None) -> ReadinessCache:
    effective = config or get_graph_config()
    return TTLCache(effective.readiness_cache_ttl_seconds)


def onboard_company(
    company_id: str,
    company_name: str | None = None,
    *,
    graphs: ContextGraphRepository,
    now: datetime | None = None,
) -> ContextGraph:
    """Create the empty graph for a new company; existing graphs are returned untouched."""

    existing = graphs.get(company_id)
    if existing is not None:
        log.info("Company %s already has a context graph", company_id)
        return existing
    graph = ContextGraph.create_empty(company_id, company_name, now=now)
    graphs.save(graph)
    log.info("Onboarded company %s", company_id)
    return graph


def apply_producer_writes(
    company_id: str,
    writes: Iterable[FieldWrite],
    *,
    graphs: ContextGraphRepository,
    force: bool = False,
    config: GraphConfig | None = None,
    registry: FieldRegistry = DEFAULT_REGISTRY,
    now: datetime | None = None,
) -> ApplyResult:
    effective = config or get_graph_config()
    graph = _load_graph(graphs, company_id)
    updated, result = apply_field_writes(
        graph,
        writes,
        force=force,
        registry=registry,
        history_limit=effective.provenance_history_limit,
        now=now,
    )
    _save_if_changed(graphs, graph, updated)
    log.info(
        "Producer writes for %s: attempted=%d updated=%d skipped=%d errors=%d",
        company_id,
        result.attempted,
        result.updated,
        result.skipped,
        result.errors,
    )
    return result


def stage_proposals(
    company_id: str,
    candidates: Iterable[ProposalCandidate],
    *,
    source: str,
    graphs: ContextGraphRepository,
    batches: ProposalBatchRepository,
    trigger: str | None = None,
    reasoning: str = "",
    now: datetime | None = None,
) -> ProposalBatch:
    batch = create_proposal_batch(
        company_id,
        candidates,
        source=source,
        trigger=trigger,
        reasoning=reasoning,
        graph=graphs.get(company_id),
        now=now,
    )
    batches.add(batch)
    return batch


def _accept_options(
    config: GraphConfig | None,
    *,
    decided_by: str | None,
    human: bool,
    registry: FieldRegistry,
) -> AcceptOptions:
    effective = config or get_graph_config()
    return AcceptOptions(
        decided_by=decided_by,
        human=human,
        registry=registry,
        history_limit=effective.provenance_history_limit,
    )


def accept_proposal_by_id(
    batch_id: str,
    proposal_id: str,
    *,
    graphs: ContextGraphRepository,
    batches: ProposalBatchRepository,
    decided_by: str | None = None,
    human: bool = True,
    config: GraphConfig | None = None,
    registry: FieldRegistry = DEFAULT_REGISTRY,
    now: datetime | None = None,
) -> ProposalDecision:
    batch = _load_batch(batches, batch_id)
    graph = _load_graph(graphs, batch.company_id)
    options = _accept_options(config, decided_by=decided_by, human=human, registry=registry)
    decision = accept_proposal(graph, batch, proposal_id, options=options, now=now)
    _save_if_changed(graphs, graph, decision.graph)
    if decision.batch is not batch:
        batches.update(decision.batch)
    return decision


def edit_and_accept_proposal_by_id(
    batch_id: str,
    proposal_id: str,
    value: Any,
    *,
    graphs: ContextGraphRepository,
    batches: ProposalBatchRepository,
    decided_by: str | None = None,
    config: GraphConfig | None = None,
    registry: FieldRegistry = DEFAULT_REGISTRY,
    now: datetime | None = None,
) -> ProposalDecision:
    batch = _load_batch(batches, batch_id)
    graph = _load_graph(graphs, batch.company_id)
    options = _accept_options(config, decided_by=decided_by, human=True, registry=registry)
    decision = edit_and_accept_proposal(graph, batch, proposal_id, value, options=options, now=now)
    _save_if_changed(graphs, graph, decision.graph)
    if decision.batch is not batch:
        batches.update(decision.batch)
    return decision


def reject_proposal_by_id(
    batch_id: str,
    proposal_id: str,
    *,
    batches: ProposalBatchRepository,
    decided_by: str | None = None,
    now: datetime | None = None,
) -> ProposalBatch:
    batch = reject_proposal(
        _load_batch(batches, batch_id), proposal_id, decided_by=decided_by, now=now
    )
    batches.update(batch)
    return batch


def accept_batch(
    batch_id: str,
    *,
    graphs: ContextGraphRepository,
    batches: ProposalBatchRepository,
    decided_by: str | None = None,
    human: bool = True,
    config: GraphConfig | None = None,
    registry: FieldRegistry = DEFAULT_REGISTRY,
    now: datetime | None = None,
) -> BatchDecision:
    batch = _load_batch(batches, batch_id)
    graph = _load_graph(graphs, batch.company_id)
    options = _accept_options(config, decided_by=decided_by, human=human, registry=registry)
    decision = accept_all(graph, batch, options=options, now=now)
    _save_if_changed(graphs, graph, decision.graph)
    if decision.batch is not batch:
        batches.update(decision.batch)
    return decision


def reject_batch(
    batch_id: str,
    *,
    batches: ProposalBatchRepository,
    decided_by: str | None = None,
    now: datetime | None = None,
) -> ProposalBatch:
    batch = _load_batch(batches, batch_id)
    rejected = reject_all(batch, decided_by=decided_by, now=now)
    if rejected is not batch:
        batches.update(rejected)
    return rejected


def check_flow_readiness(
    company_id: str,
    flow: FlowType | str,
    *,
    graphs: ContextGraphRepository,
    cache: ReadinessCache | None = None,
    config: GraphConfig | None = None,
    registry: FieldRegistry = DEFAULT_REGISTRY,
) -> FlowReadiness:
    """Evaluate a flow gate; a missing graph yields a not-ready result, never an error.

    Cached verdicts are keyed by the graph fingerprint and the proceed-anyway threshold. A write
    that populates a field or lands a newer contribution changes the key, whatever ``now`` the
    graph was saved with.
    """

    effective = config or get_graph_config()
    flow = FlowType(flow)
    graph = graphs.get(company_id)
    key: ReadinessKey = (
        company_id,
        flow,
        fingerprint_graph(graph).hash if graph is not None else None,
        effective.proceed_anyway_max_missing,
        registry,
    )
    if cache is not None:
        cached = cache.get(key)
        if cached is not None:
            return cached
    readiness = evaluate_flow_readiness(
        graph,
        flow,
        max_missing_critical=effective.proceed_anyway_max_missing,
        registry=registry,
    )
    if cache is not None:
        cache.set(key, readiness)
    return readiness


def fingerprint_company_context(
    company_id: str,
    *,
    graphs: ContextGraphRepository,
    now: datetime | None = None,
) -> SnapshotFingerprint:
    return fingerprint_graph(_load_graph(graphs, company_id), now=now)


def check_company_context_drift(
    company_id: str,
    saved: SnapshotFingerprint | None,
    *,
    graphs: ContextGraphRepository,
) -> DriftCheck:
    return check_graph_drift(_load_graph(graphs, company_id), saved)
