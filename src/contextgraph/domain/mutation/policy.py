"""Write-conflict policy.

``decide_write`` is the single comparator used by the mutation engine. It looks only at the
incoming candidate, the current slot and the force flag; it never touches a graph.

Order of checks:
- empty incoming value -> ``REJECT_NOOP`` (force does not bypass)
- confirmed slot, non-confirming source, no force -> ``REJECT_LOCKED``
- force -> ``ACCEPT``
- source blocked for the domain -> ``REJECT_LOWER_PRIORITY``
- empty slot -> ``ACCEPT``
- machine source under the domain's minimum confidence -> ``REJECT_LOWER_PRIORITY``
- incoming priority >= current priority -> ``ACCEPT`` (ties go to the newer write)
- otherwise -> ``REJECT_LOWER_PRIORITY``
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from contextgraph.domain.mutation.sources import (
    can_write_through_lock,
    domain_priority,
    is_human_source,
    is_source_blocked,
    source_priority,
)

if TYPE_CHECKING:
    from contextgraph.domain.model import Domain, FieldSlot


class WriteDecision(StrEnum):
    ACCEPT = "accept"
    REJECT_LOCKED = "reject_locked"
    REJECT_NOOP = "reject_noop"
    REJECT_LOWER_PRIORITY = "reject_lower_priority"

    @property
    def applied(self) -> bool:
        return self is WriteDecision.ACCEPT


@dataclass(frozen=True, slots=True, kw_only=True)
class WriteCandidate:
    source: str
    confidence: float
    is_empty: bool = False


def decide_write(
    domain: Domain,
    slot: FieldSlot,
    candidate: WriteCandidate,
    *,
    force: bool = False,
) -> WriteDecision:
    if candidate.is_empty:
        return WriteDecision.REJECT_NOOP
    if slot.confirmed and not force and not can_write_through_lock(candidate.source):
        return WriteDecision.REJECT_LOCKED
    if force:
        return WriteDecision.ACCEPT
    if is_source_blocked(domain, candidate.source):
        return WriteDecision.REJECT_LOWER_PRIORITY

    current = slot.active
    if current is None or slot.is_empty:
        return WriteDecision.ACCEPT

    config = domain_priority(domain)
    if (
        config is not None
        and config.min_confidence is not None
        and not is_human_source(candidate.source)
        and candidate.confidence < config.min_confidence
    ):
        return WriteDecision.REJECT_LOWER_PRIORITY

    incoming = source_priority(domain, candidate.source)
    existing = source_priority(domain, current.source)
    if incoming >= existing:
        return WriteDecision.ACCEPT
    return WriteDecision.REJECT_LOWER_PRIORITY
