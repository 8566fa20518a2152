"""Flow readiness gate over the context graph."""

from __future__ import annotations

from .engine import (
    DEFAULT_MAX_MISSING_CRITICAL,
    DomainRequirement,
    FlowReadiness,
    LabCTA,
    create_empty_readiness,
    evaluate_flow_readiness,
)
from .requirements import (
    DOMAIN_PRODUCERS,
    FLOW_LABELS,
    FLOW_REQUIREMENTS,
    LabInfo,
    domains_with,
    requirements_for,
)

__all__ = [
    "DEFAULT_MAX_MISSING_CRITICAL",
    "DOMAIN_PRODUCERS",
    "FLOW_LABELS",
    "FLOW_REQUIREMENTS",
    "DomainRequirement",
    "FlowReadiness",
    "LabCTA",
    "LabInfo",
    "create_empty_readiness",
    "domains_with",
    "evaluate_flow_readiness",
    "requirements_for",
]
