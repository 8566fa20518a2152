"""Pure write and read operations over :class:`ContextGraph`.

Every write returns a new graph. Blocked writes (empty value, confirmation lock, lower
priority) are not errors: the input graph is returned unchanged and the decision is logged.
Only an unknown field path or a value of the wrong shape raises.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from logging import getLogger
from typing import TYPE_CHECKING, Any, Final

from contextgraph.domain.model import (
    DEFAULT_REGISTRY,
    FieldPath,
    FieldSlot,
    is_empty_value,
)
from contextgraph.domain.model.graph import utcnow
from contextgraph.domain.mutation.policy import WriteCandidate, WriteDecision, decide_write
from contextgraph.domain.mutation.sources import can_write_through_lock

if TYPE_CHECKING:
    from datetime import datetime

    from contextgraph.domain.model import (
        ContextGraph,
        Contribution,
        Domain,
        FieldRegistry,
    )

log = getLogger(__name__)

DEFAULT_HISTORY_LIMIT: Final[int] = 5


@dataclass(frozen=True, slots=True, kw_only=True)
class FieldWriteResult:
    path: FieldPath
    decision: WriteDecision
    previous_value: Any = None
    previous_source: str | None = None

    @property
    def updated(self) -> bool:
        return self.decision.applied


def _prune(history: tuple[Contribution, ...], limit: int | None) -> tuple[Contribution, ...]:
    if limit is None:
        return history
    if limit < 1:
        raise ValueError("history_limit must be >= 1 or None")
    return history[:limit]


def set_field_with_result(
    graph: ContextGraph,
    domain: Domain | str,
    field: str,
    value: Any,
    provenance: Contribution,
    *,
    force: bool = False,
    registry: FieldRegistry = DEFAULT_REGISTRY,
    history_limit: int | None = DEFAULT_HISTORY_LIMIT,
    now: datetime | None = None,
) -> tuple[ContextGraph, FieldWriteResult]:
    """Apply one write and report what happened to it."""
    definition = registry.resolve(domain, field)
    path = definition.path
    slot = graph.slot(path.domain, field)
    empty = is_empty_value(value)
    if not empty:
        registry.validate_value(definition, value)

    decision = decide_write(
        path.domain,
        slot,
        WriteCandidate(source=provenance.source, confidence=provenance.confidence, is_empty=empty),
        force=force,
    )
    result = FieldWriteResult(
        path=path,
        decision=decision,
        previous_value=slot.value,
        previous_source=slot.active.source if slot.active else None,
    )

    if decision is WriteDecision.REJECT_LOCKED:
        log.warning(
            "BLOCKED (confirmed): %s is locked, source %r cannot overwrite it",
            path,
            provenance.source,
        )
        return graph, result
    if not decision.applied:
        log.debug(
            "Write to %s skipped (%s): existing=%s incoming=%s",
            path,
            decision,
            result.previous_source,
            provenance.source,
        )
        return graph, result

    history = _prune((provenance.carrying(value), *slot.provenance), history_limit)
    # a confirming actor keeps the lock; any other (forced) write releases it
    keep_lock = slot.confirmed and can_write_through_lock(provenance.source)
    updated_slot = FieldSlot(
        value=value,
        provenance=history,
        confirmed=keep_lock,
        confirmed_by=slot.confirmed_by if keep_lock else None,
        confirmed_at=slot.confirmed_at if keep_lock else None,
    )
    if force and slot.confirmed and not keep_lock:
        log.info("Forced write to %s by %r released its confirmation", path, provenance.source)
    return graph.with_slot(path.domain, field, updated_slot, now=now), result


def set_field(
    graph: ContextGraph,
    domain: Domain | str,
    field: str,
    value: Any,
    provenance: Contribution,
    *,
    force: bool = False,
    registry: FieldRegistry = DEFAULT_REGISTRY,
    history_limit: int | None = DEFAULT_HISTORY_LIMIT,
    now: datetime | None = None,
) -> ContextGraph:
    updated, _ = set_field_with_result(
        graph,
        domain,
        field,
        value,
        provenance,
        force=force,
        registry=registry,
        history_limit=history_limit,
        now=now,
    )
    return updated


def confirm_field(
    graph: ContextGraph,
    domain: Domain | str,
    field: str,
    confirmed_by: str | None = None,
    *,
    registry: FieldRegistry = DEFAULT_REGISTRY,
    now: datetime | None = None,
) -> ContextGraph:
    """Lock a populated field against machine writes. Idempotent."""
    path = registry.resolve(domain, field).path
    slot = graph.slot(path.domain, field)
    if not slot.provenance:
        log.warning("Cannot confirm %s: field has no value", path)
        return graph
    if slot.confirmed:
        return graph
    stamp = now or utcnow()
    locked = replace(slot, confirmed=True, confirmed_by=confirmed_by, confirmed_at=stamp)
    return graph.with_slot(path.domain, field, locked, now=stamp)


def unconfirm_field(
    graph: ContextGraph,
    domain: Domain | str,
    field: str,
    *,
    registry: FieldRegistry = DEFAULT_REGISTRY,
    now: datetime | None = None,
) -> ContextGraph:
    path = registry.resolve(domain, field).path
    slot = graph.slot(path.domain, field)
    if not slot.confirmed:
        return graph
    unlocked = replace(slot, confirmed=False, confirmed_by=None, confirmed_at=None)
    return graph.with_slot(path.domain, field, unlocked, now=now)


def is_field_confirmed(
    graph: ContextGraph,
    domain: Domain | str,
    field: str,
    *,
    registry: FieldRegistry = DEFAULT_REGISTRY,
) -> bool:
    path = registry.resolve(domain, field).path
    return graph.slot(path.domain, field).confirmed


def get_field_value(
    graph: ContextGraph,
    domain: Domain | str,
    field: str,
    *,
    registry: FieldRegistry = DEFAULT_REGISTRY,
) -> Any:
    path = registry.resolve(domain, field).path
    return graph.slot(path.domain, field).value


def _populated_slots(
    graph: ContextGraph,
    domain: Domain,
    registry: FieldRegistry,
) -> list[FieldSlot]:
    populated: list[FieldSlot] = []
    for field_name, slot in graph.slots(domain).items():
        if slot.is_empty:
            continue
        if not registry.is_known(domain, field_name) or registry.resolve(domain, field_name).meta:
            continue
        populated.append(slot)
    return populated


def has_domain_data(
    graph: ContextGraph,
    domain: Domain,
    *,
    registry: FieldRegistry = DEFAULT_REGISTRY,
) -> bool:
    """True iff at least one non-meta field of ``domain`` holds a non-empty value."""
    return bool(_populated_slots(graph, domain, registry))


def _latest_contribution(
    graph: ContextGraph,
    domain: Domain,
    registry: FieldRegistry,
) -> Contribution | None:
    actives = [slot.active for slot in _populated_slots(graph, domain, registry) if slot.active]
    if not actives:
        return None
    return max(actives, key=lambda contribution: contribution.updated_at)


def get_source_lab(
    graph: ContextGraph,
    domain: Domain,
    *,
    registry: FieldRegistry = DEFAULT_REGISTRY,
) -> str | None:
    """Source of the most recent active contribution in ``domain``."""
    latest = _latest_contribution(graph, domain, registry)
    return latest.source if latest else None


def get_last_updated(
    graph: ContextGraph,
    domain: Domain,
    *,
    registry: FieldRegistry = DEFAULT_REGISTRY,
) -> datetime | None:
    latest = _latest_contribution(graph, domain, registry)
    return latest.updated_at if latest else None
