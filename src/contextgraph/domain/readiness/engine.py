"""Flow readiness: can a generation flow run against the current graph?

``evaluate_flow_readiness`` is a pure function of a graph snapshot and a flow. Only
critical domains count toward ``completeness_percent``; recommended domains surface in
``missing_recommended`` and in lab call-to-actions but never block a flow.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from contextgraph.domain.model import DEFAULT_REGISTRY, FlowType, Importance
from contextgraph.domain.mutation import get_last_updated, get_source_lab, has_domain_data
from contextgraph.domain.readiness.requirements import (
    DOMAIN_PRODUCERS,
    FLOW_LABELS,
    domains_with,
    requirements_for,
)

if TYPE_CHECKING:
    from datetime import datetime

    from contextgraph.domain.model import ContextGraph, Domain, FieldRegistry
    from contextgraph.domain.readiness.requirements import LabInfo

DEFAULT_MAX_MISSING_CRITICAL: Final[int] = 1


@dataclass(frozen=True, slots=True, kw_only=True)
class DomainRequirement:
    domain: Domain
    importance: Importance
    present: bool
    source_lab: str | None = None
    last_updated: datetime | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class LabCTA:
    """Remediation pointing at the producer responsible for missing domains."""

    lab_key: str
    lab_name: str
    priority: Importance
    domains: tuple[Domain, ...]
    message: str


@dataclass(frozen=True, slots=True, kw_only=True)
class FlowReadiness:
    flow: FlowType
    is_ready: bool
    completeness_percent: int
    requirements: tuple[DomainRequirement, ...] = ()
    missing_critical: tuple[Domain, ...] = ()
    missing_recommended: tuple[Domain, ...] = ()
    lab_ctas: tuple[LabCTA, ...] = ()
    can_proceed_anyway: bool = False
    proceed_anyway_warning: str | None = None
    message: str = ""


def _domain_label(domain: Domain) -> str:
    return domain.value.replace("_", " ")


def _percent(present: int, total: int) -> int:
    """Half-up rounded percentage; a flow without critical domains is complete."""
    if total == 0:
        return 100
    return (200 * present + total) // (2 * total)


@dataclass(slots=True)
class _PendingCTA:
    lab: LabInfo
    priority: Importance
    domains: list[Domain]


def _build_ctas(
    missing_critical: tuple[Domain, ...],
    missing_recommended: tuple[Domain, ...],
) -> tuple[LabCTA, ...]:
    by_lab: dict[str, _PendingCTA] = {}
    for importance, domains in (
        (Importance.CRITICAL, missing_critical),
        (Importance.RECOMMENDED, missing_recommended),
    ):
        for domain in domains:
            lab = DOMAIN_PRODUCERS.get(domain)
            if lab is None:
                continue
            pending = by_lab.get(lab.key)
            if pending is None:
                by_lab[lab.key] = _PendingCTA(lab=lab, priority=importance, domains=[domain])
                continue
            pending.domains.append(domain)
            if importance is Importance.CRITICAL:
                pending.priority = Importance.CRITICAL

    ordered = sorted(
        by_lab.values(),
        key=lambda pending: pending.priority is not Importance.CRITICAL,
    )
    return tuple(
        LabCTA(
            lab_key=pending.lab.key,
            lab_name=pending.lab.name,
            priority=pending.priority,
            domains=tuple(pending.domains),
            message=(
                f"Run {pending.lab.name} to fill "
                f"{', '.join(_domain_label(domain) for domain in pending.domains)}"
            ),
        )
        for pending in ordered
    )


def create_empty_readiness(
    flow: FlowType,
    *,
    max_missing_critical: int = DEFAULT_MAX_MISSING_CRITICAL,
) -> FlowReadiness:
    """Readiness for a company that has no graph at all."""
    flow = FlowType(flow)
    missing_critical = domains_with(flow, Importance.CRITICAL)
    return FlowReadiness(
        flow=flow,
        is_ready=not missing_critical,
        completeness_percent=_percent(0, len(missing_critical)),
        missing_critical=missing_critical,
        missing_recommended=domains_with(flow, Importance.RECOMMENDED),
        can_proceed_anyway=len(missing_critical) <= max_missing_critical,
        message=(
            f"No context exists for this company yet. Run setup or a diagnostic before "
            f"starting {FLOW_LABELS[flow]}."
        ),
    )


def evaluate_flow_readiness(
    graph: ContextGraph | None,
    flow: FlowType,
    *,
    max_missing_critical: int = DEFAULT_MAX_MISSING_CRITICAL,
    registry: FieldRegistry = DEFAULT_REGISTRY,
) -> FlowReadiness:
    flow = FlowType(flow)
    if graph is None:
        return create_empty_readiness(flow, max_missing_critical=max_missing_critical)

    requirements: list[DomainRequirement] = []
    for domain, importance in requirements_for(flow).items():
        if importance is Importance.OPTIONAL:
            continue
        requirements.append(
            DomainRequirement(
                domain=domain,
                importance=importance,
                present=has_domain_data(graph, domain, registry=registry),
                source_lab=get_source_lab(graph, domain, registry=registry),
                last_updated=get_last_updated(graph, domain, registry=registry),
            )
        )

    critical = [r for r in requirements if r.importance is Importance.CRITICAL]
    missing_critical = tuple(r.domain for r in critical if not r.present)
    missing_recommended = tuple(
        r.domain for r in requirements if r.importance is Importance.RECOMMENDED and not r.present
    )
    is_ready = not missing_critical
    can_proceed = len(missing_critical) <= max_missing_critical
    label = FLOW_LABELS[flow]

    warning = None
    if not is_ready and can_proceed:
        warning = (
            f"Missing critical context ({', '.join(_domain_label(d) for d in missing_critical)}). "
            f"{label} output quality may be reduced."
        )
    if is_ready:
        message = f"Ready for {label}."
    else:
        message = f"{len(missing_critical)} critical domain(s) missing for {label}."

    return FlowReadiness(
        flow=flow,
        is_ready=is_ready,
        completeness_percent=_percent(len(critical) - len(missing_critical), len(critical)),
        requirements=tuple(requirements),
        missing_critical=missing_critical,
        missing_recommended=missing_recommended,
        lab_ctas=_build_ctas(missing_critical, missing_recommended),
        can_proceed_anyway=can_proceed,
        proceed_anyway_warning=warning,
        message=message,
    )
