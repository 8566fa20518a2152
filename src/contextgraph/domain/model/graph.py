"""Immutable value types for the per-company context graph."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from contextgraph.domain.model.enums import Domain

if TYPE_CHECKING:
    from collections.abc import Mapping


DEFAULT_CONTRIBUTION_CONFIDENCE = 0.8


def utcnow() -> datetime:
    return datetime.now(tz=UTC)


def is_empty_value(value: object) -> bool:
    """Blank producer output: ``None``, ``""``, or an empty list/dict."""
    if value is None or value == "":
        return True
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False


@dataclass(frozen=True, slots=True, kw_only=True)
class Contribution:
    """One producer's write to a field: who, how sure, when, and what."""

    source: str
    confidence: float = DEFAULT_CONTRIBUTION_CONFIDENCE
    updated_at: datetime = field(default_factory=utcnow)
    value: Any = None
    run_id: str | None = None
    notes: str | None = None

    def __post_init__(self) -> None:
        if not self.source:
            raise ValueError("Contribution source must be a non-empty string")
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(
                f"Contribution confidence must be within [0, 1], got {self.confidence}"
            )

    @classmethod
    def create(
        cls,
        source: str,
        *,
        confidence: float = DEFAULT_CONTRIBUTION_CONFIDENCE,
        value: Any = None,
        run_id: str | None = None,
        notes: str | None = None,
        now: datetime | None = None,
    ) -> Contribution:
        return cls(
            source=str(source),
            confidence=confidence,
            updated_at=now or utcnow(),
            value=value,
            run_id=run_id,
            notes=notes,
        )

    def carrying(self, value: Any) -> Contribution:
        return replace(self, value=value)


@dataclass(frozen=True, slots=True, kw_only=True)
class FieldSlot:
    """Current value of one field plus its lineage and confirmation lock.

    ``provenance`` is ordered newest first and ``value`` always mirrors ``provenance[0].value``.
    """

    value: Any = None
    provenance: tuple[Contribution, ...] = ()
    confirmed: bool = False
    confirmed_by: str | None = None
    confirmed_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.provenance and self.provenance[0].value != self.value:
            raise ValueError("FieldSlot value must match the active contribution's value")
        if not self.provenance and not is_empty_value(self.value):
            raise ValueError("FieldSlot with a value must carry at least one contribution")

    @property
    def active(self) -> Contribution | None:
        return self.provenance[0] if self.provenance else None

    @property
    def is_empty(self) -> bool:
        return is_empty_value(self.value)


EMPTY_SLOT = FieldSlot()

type DomainSlots = Mapping[str, FieldSlot]


def _freeze(domains: Mapping[Domain, Mapping[str, FieldSlot]]) -> Mapping[Domain, DomainSlots]:
    return MappingProxyType(
        {Domain(domain): MappingProxyType(dict(slots)) for domain, slots in domains.items()}
    )


@dataclass(frozen=True, slots=True, kw_only=True)
class ContextGraph:
    """Per-company store of ``domain -> field -> FieldSlot``.

    Instances are never mutated; :meth:`with_slot` returns a new graph that shares every
    untouched domain with the original.
    """

    company_id: str
    company_name: str | None = None
    domains: Mapping[Domain, DomainSlots] = field(default_factory=dict)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if not self.company_id:
            raise ValueError("ContextGraph requires a company_id")
        if not isinstance(self.domains, MappingProxyType):
            object.__setattr__(self, "domains", _freeze(self.domains))
        if self.updated_at is None:
            object.__setattr__(self, "updated_at", self.created_at)

    @classmethod
    def create_empty(
        cls,
        company_id: str,
        company_name: str | None = None,
        *,
        now: datetime | None = None,
    ) -> ContextGraph:
        created = now or utcnow()
        return cls(company_id=company_id, company_name=company_name, created_at=created)

    def slots(self, domain: Domain) -> DomainSlots:
        return self.domains.get(domain, MappingProxyType({}))

    def slot(self, domain: Domain, field_name: str) -> FieldSlot:
        return self.slots(domain).get(field_name, EMPTY_SLOT)

    def with_slot(
        self,
        domain: Domain,
        field_name: str,
        slot: FieldSlot,
        *,
        now: datetime | None = None,
    ) -> ContextGraph:
        touched = dict(self.slots(domain))
        touched[field_name] = slot
        domains = dict(self.domains)
        domains[domain] = MappingProxyType(touched)
        return replace(
            self,
            domains=MappingProxyType(domains),
            updated_at=now or utcnow(),
        )
