"""Translate record-store payloads into domain values and back."""

from __future__ import annotations

from collections.abc import Mapping
from logging import getLogger
from typing import Any

from pydantic import ValidationError

from contextgraph.domain.model import (
    ContextGraph,
    ContextGraphError,
    Contribution,
    Domain,
    FieldPath,
    FieldSlot,
    InvalidFieldPathError,
    Proposal,
    ProposalBatch,
    is_empty_value,
)

from .schema import (
    ContextGraphRecord,
    ContributionRecord,
    FieldSlotRecord,
    ProposalBatchRecord,
    ProposalRecord,
)

log = getLogger(__name__)

type GraphPayload = Mapping[str, Any] | ContextGraphRecord
type BatchPayload = Mapping[str, Any] | ProposalBatchRecord


class RecordFormatError(ContextGraphError):
    """A stored record cannot be turned into a domain value."""


def _ensure_graph_record(payload: GraphPayload) -> ContextGraphRecord:
    if isinstance(payload, ContextGraphRecord):
        return payload
    try:
        return ContextGraphRecord.model_validate(payload)
    except ValidationError as exc:
        raise RecordFormatError(f"Invalid context graph record: {exc}") from exc


def _ensure_batch_record(payload: BatchPayload) -> ProposalBatchRecord:
    if isinstance(payload, ProposalBatchRecord):
        return payload
    try:
        return ProposalBatchRecord.model_validate(payload)
    except ValidationError as exc:
        raise RecordFormatError(f"Invalid proposal batch record: {exc}") from exc


def _contribution_from_record(record: ContributionRecord) -> Contribution:
    return Contribution(
        source=record.source,
        confidence=record.confidence,
        updated_at=record.updated_at,
        value=record.value,
        run_id=record.run_id,
        notes=record.notes,
    )


def _slot_from_record(record: FieldSlotRecord) -> FieldSlot:
    provenance = [_contribution_from_record(item) for item in record.provenance]
    # older records only kept the value on the slot itself
    if provenance and provenance[0].value is None and not is_empty_value(record.value):
        provenance[0] = provenance[0].carrying(record.value)
    return FieldSlot(
        value=record.value,
        provenance=tuple(provenance),
        confirmed=record.confirmed,
        confirmed_by=record.confirmed_by,
        confirmed_at=record.confirmed_at,
    )


def graph_from_record(payload: GraphPayload) -> ContextGraph:
    record = _ensure_graph_record(payload)
    domains: dict[Domain, dict[str, FieldSlot]] = {}
    for domain_name, fields in record.domains.items():
        try:
            domain = Domain(domain_name)
        except ValueError:
            log.warning(
                "Skipping unknown domain %r in graph record for %s", domain_name, record.company_id
            )
            continue
        try:
            domains[domain] = {name: _slot_from_record(slot) for name, slot in fields.items()}
        except ValueError as exc:
            raise RecordFormatError(
                f"Inconsistent slot in {domain_name} for {record.company_id}: {exc}"
            ) from exc
    return ContextGraph(
        company_id=record.company_id,
        company_name=record.company_name,
        domains=domains,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


def _contribution_to_record(contribution: Contribution) -> ContributionRecord:
    return ContributionRecord(
        source=contribution.source,
        confidence=contribution.confidence,
        updated_at=contribution.updated_at,
        value=contribution.value,
        run_id=contribution.run_id,
        notes=contribution.notes,
    )


def graph_to_record(graph: ContextGraph) -> dict[str, Any]:
    record = ContextGraphRecord(
        company_id=graph.company_id,
        company_name=graph.company_name,
        domains={
            domain.value: {
                name: FieldSlotRecord(
                    value=slot.value,
                    provenance=[_contribution_to_record(item) for item in slot.provenance],
                    confirmed=slot.confirmed,
                    confirmed_by=slot.confirmed_by,
                    confirmed_at=slot.confirmed_at,
                )
                for name, slot in slots.items()
            }
            for domain, slots in graph.domains.items()
        },
        created_at=graph.created_at,
        updated_at=graph.updated_at,
    )
    return record.model_dump(by_alias=True, mode="json")


def _proposal_from_record(record: ProposalRecord) -> Proposal:
    try:
        field_path = FieldPath.parse(record.field_path)
    except InvalidFieldPathError as exc:
        raise RecordFormatError(f"Proposal {record.id} has an invalid field path") from exc
    return Proposal(
        id=record.id,
        company_id=record.company_id,
        field_path=field_path,
        proposed_value=record.proposed_value,
        source=record.source,
        confidence=record.confidence,
        reason=record.reason,
        previous_value=record.previous_value,
        status=record.status,
        created_at=record.created_at,
        decided_at=record.decided_at,
        decided_by=record.decided_by,
        applied_value=record.applied_value,
    )


def batch_from_record(payload: BatchPayload) -> ProposalBatch:
    record = _ensure_batch_record(payload)
    return ProposalBatch(
        id=record.id,
        company_id=record.company_id,
        proposals=tuple(_proposal_from_record(item) for item in record.proposals),
        source=record.source,
        trigger=record.trigger,
        reasoning=record.reasoning,
        created_at=record.created_at,
        resolved_at=record.resolved_at,
    )


def batch_to_record(batch: ProposalBatch) -> dict[str, Any]:
    record = ProposalBatchRecord(
        id=batch.id,
        company_id=batch.company_id,
        proposals=[
            ProposalRecord(
                id=proposal.id,
                company_id=proposal.company_id,
                field_path=str(proposal.field_path),
                proposed_value=proposal.proposed_value,
                source=proposal.source,
                confidence=proposal.confidence,
                reason=proposal.reason,
                previous_value=proposal.previous_value,
                status=proposal.status,
                created_at=proposal.created_at,
                decided_at=proposal.decided_at,
                decided_by=proposal.decided_by,
                applied_value=proposal.applied_value,
            )
            for proposal in batch.proposals
        ],
        source=batch.source,
        trigger=batch.trigger,
        reasoning=batch.reasoning,
        status=batch.status,
        created_at=batch.created_at,
        resolved_at=batch.resolved_at,
    )
    return record.model_dump(by_alias=True, mode="json")
