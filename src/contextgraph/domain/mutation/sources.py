"""Per-domain source ranking.

Human sources outrank every machine source. Among machine sources each domain declares an
ordered list (most authoritative first); sources missing from the list rank 0.

``DomainPriority.min_confidence`` and ``DomainPriority.blocked`` are extension points: no
shipped domain sets them, and ``decide_write`` honours them for tables that do.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from contextgraph.domain.model.enums import Domain, Source

if TYPE_CHECKING:
    from collections.abc import Mapping


HUMAN_PRIORITY = sys.maxsize

HUMAN_SOURCES: frozenset[str] = frozenset(
    {Source.USER, Source.MANUAL, Source.QBR, Source.STRATEGY}
)

# Only these actors may write through a confirmation lock.
CONFIRMING_SOURCES: frozenset[str] = frozenset({Source.USER, Source.MANUAL})


@dataclass(frozen=True, slots=True)
class DomainPriority:
    order: tuple[Source, ...]
    min_confidence: float | None = None
    blocked: frozenset[str] = field(default_factory=frozenset)

    def rank(self, source: str) -> int:
        try:
            index = self.order.index(Source(source))
        except ValueError:
            return 0
        return len(self.order) - index


_GAP = (Source.GAP_HEAVY, Source.GAP_FULL, Source.GAP_IA)
_FALLBACK = (Source.FCB, Source.BRAIN, Source.INFERRED)

DOMAIN_PRIORITY: Mapping[Domain, DomainPriority] = MappingProxyType(
    {
        Domain.IDENTITY: DomainPriority(
            (*_GAP, Source.SETUP_WIZARD, Source.FCB, Source.AIRTABLE, Source.BRAIN, Source.INFERRED)
        ),
        Domain.BRAND: DomainPriority((Source.BRAND_LAB, *_GAP, *_FALLBACK)),
        Domain.AUDIENCE: DomainPriority((Source.AUDIENCE_LAB, *_GAP, *_FALLBACK)),
        Domain.PRODUCT_OFFER: DomainPriority((*_GAP, *_FALLBACK)),
        Domain.WEBSITE: DomainPriority((Source.WEBSITE_LAB, Source.UX_LAB, *_GAP, *_FALLBACK)),
        Domain.SEO: DomainPriority(
            (
                Source.SEO_LAB,
                Source.GAP_HEAVY,
                Source.CONTENT_LAB,
                Source.GAP_FULL,
                Source.GAP_IA,
                *_FALLBACK,
            )
        ),
        Domain.CONTENT: DomainPriority(
            (
                Source.GAP_HEAVY,
                Source.CONTENT_LAB,
                Source.SEO_LAB,
                Source.GAP_FULL,
                Source.GAP_IA,
                *_FALLBACK,
            )
        ),
        Domain.CREATIVE: DomainPriority(
            (
                Source.CREATIVE_LAB,
                Source.GAP_HEAVY,
                Source.BRAND_LAB,
                Source.CONTENT_LAB,
                Source.GAP_FULL,
                Source.GAP_IA,
                *_FALLBACK,
            )
        ),
        Domain.COMPETITIVE: DomainPriority(
            (
                Source.COMPETITION_V4,
                Source.COMPETITION_LAB,
                *_GAP,
                Source.BRAND_LAB,
                *_FALLBACK,
            )
        ),
        Domain.OBJECTIVES: DomainPriority((*_GAP, Source.SETUP_WIZARD, *_FALLBACK)),
        Domain.PERFORMANCE_MEDIA: DomainPriority(
            (
                Source.MEDIA_LAB,
                Source.DEMAND_LAB,
                Source.GAP_HEAVY,
                Source.GAP_FULL,
                Source.ANALYTICS_GADS,
                Source.BRAIN,
                Source.INFERRED,
            )
        ),
        Domain.BUDGET_OPS: DomainPriority(
            (Source.MEDIA_LAB, Source.OPS_LAB, Source.AIRTABLE, Source.BRAIN, Source.INFERRED)
        ),
        Domain.OPS: DomainPriority(
            (Source.OPS_LAB, Source.GAP_HEAVY, Source.AIRTABLE, Source.BRAIN, Source.INFERRED)
        ),
        Domain.DIGITAL_INFRA: DomainPriority((Source.WEBSITE_LAB, *_GAP, *_FALLBACK)),
    }
)

SOURCE_DISPLAY_NAMES: Mapping[str, str] = MappingProxyType(
    {
        Source.USER: "Manual Edit",
        Source.MANUAL: "Manual Import",
        Source.QBR: "Strategic Plan",
        Source.STRATEGY: "Strategy Editor",
        Source.BRAND_LAB: "Brand Lab",
        Source.AUDIENCE_LAB: "Audience Lab",
        Source.MEDIA_LAB: "Media Lab",
        Source.WEBSITE_LAB: "Website Lab",
        Source.UX_LAB: "UX Lab",
        Source.SEO_LAB: "SEO Lab",
        Source.CONTENT_LAB: "Content Lab",
        Source.DEMAND_LAB: "Demand Lab",
        Source.OPS_LAB: "Ops Lab",
        Source.CREATIVE_LAB: "Creative Lab",
        Source.COMPETITION_LAB: "Competition Lab",
        Source.COMPETITION_V4: "Competition V4",
        Source.GAP_HEAVY: "GAP Heavy",
        Source.GAP_FULL: "GAP Full",
        Source.GAP_IA: "GAP IA",
        Source.FCB: "Auto-filled from Website",
        Source.BRAIN: "AI Brain",
        Source.INFERRED: "Inferred",
        Source.AIRTABLE: "Airtable Import",
        Source.IMPORT: "Data Import",
        Source.SETUP_WIZARD: "Setup Wizard",
        Source.ANALYTICS_GA4: "GA4 Analytics",
        Source.ANALYTICS_GADS: "Google Ads",
    }
)


def is_human_source(source: str | None) -> bool:
    return source in HUMAN_SOURCES


def can_write_through_lock(source: str) -> bool:
    return source in CONFIRMING_SOURCES


def domain_priority(domain: Domain) -> DomainPriority | None:
    return DOMAIN_PRIORITY.get(domain)


def source_priority(domain: Domain, source: str) -> int:
    if is_human_source(source):
        return HUMAN_PRIORITY
    config = DOMAIN_PRIORITY.get(domain)
    return config.rank(source) if config is not None else 0


def is_source_blocked(domain: Domain, source: str) -> bool:
    config = DOMAIN_PRIORITY.get(domain)
    return config is not None and source in config.blocked


def source_display_name(source: str) -> str:
    return SOURCE_DISPLAY_NAMES.get(source, source)


def authoritative_sources(domain: Domain, *, limit: int = 3) -> tuple[str, ...]:
    """Display names of the top-ranked machine sources for ``domain``."""
    config = DOMAIN_PRIORITY.get(domain)
    if config is None:
        return ()
    return tuple(source_display_name(source) for source in config.order[:limit])
