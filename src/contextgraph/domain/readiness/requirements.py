"""Static flow requirement matrix and the domain -> producer map."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from contextgraph.domain.model import Domain, FlowType, Importance, Source

if TYPE_CHECKING:
    from collections.abc import Mapping


_C, _R, _O = Importance.CRITICAL, Importance.RECOMMENDED, Importance.OPTIONAL

FLOW_REQUIREMENTS: Mapping[FlowType, Mapping[Domain, Importance]] = MappingProxyType(
    {
        FlowType.STRATEGY: MappingProxyType(
            {
                Domain.IDENTITY: _C,
                Domain.BRAND: _C,
                Domain.AUDIENCE: _C,
                Domain.PRODUCT_OFFER: _R,
                Domain.COMPETITIVE: _R,
                Domain.OBJECTIVES: _R,
                Domain.WEBSITE: _O,
                Domain.SEO: _O,
                Domain.CONTENT: _O,
            }
        ),
        FlowType.GAP_IA: MappingProxyType(
            {
                Domain.IDENTITY: _C,
                Domain.BRAND: _C,
                Domain.WEBSITE: _C,
                Domain.SEO: _R,
                Domain.CONTENT: _R,
                Domain.COMPETITIVE: _O,
            }
        ),
        FlowType.GAP_FULL: MappingProxyType(
            {
                Domain.IDENTITY: _C,
                Domain.BRAND: _C,
                Domain.WEBSITE: _C,
                Domain.SEO: _C,
                Domain.CONTENT: _R,
                Domain.AUDIENCE: _R,
                Domain.COMPETITIVE: _R,
                Domain.OBJECTIVES: _O,
            }
        ),
        FlowType.PROGRAMS: MappingProxyType(
            {
                Domain.IDENTITY: _C,
                Domain.OBJECTIVES: _C,
                Domain.AUDIENCE: _R,
                Domain.BRAND: _R,
                Domain.PERFORMANCE_MEDIA: _R,
                Domain.BUDGET_OPS: _O,
            }
        ),
        FlowType.CREATIVE_BRIEF: MappingProxyType(
            {
                Domain.BRAND: _C,
                Domain.AUDIENCE: _C,
                Domain.CREATIVE: _R,
                Domain.PRODUCT_OFFER: _R,
            }
        ),
    }
)

FLOW_LABELS: Mapping[FlowType, str] = MappingProxyType(
    {
        FlowType.STRATEGY: "Strategy",
        FlowType.GAP_IA: "GAP IA",
        FlowType.GAP_FULL: "Full GAP",
        FlowType.PROGRAMS: "Programs",
        FlowType.CREATIVE_BRIEF: "Creative Brief",
    }
)


@dataclass(frozen=True, slots=True)
class LabInfo:
    key: str
    name: str


_GAP_IA = LabInfo(Source.GAP_IA, "GAP IA")
_WEBSITE_LAB = LabInfo(Source.WEBSITE_LAB, "Website Lab")
_MEDIA_LAB = LabInfo(Source.MEDIA_LAB, "Media Lab")

DOMAIN_PRODUCERS: Mapping[Domain, LabInfo] = MappingProxyType(
    {
        Domain.IDENTITY: _GAP_IA,
        Domain.PRODUCT_OFFER: _GAP_IA,
        Domain.BRAND: LabInfo(Source.BRAND_LAB, "Brand Lab"),
        Domain.AUDIENCE: LabInfo(Source.AUDIENCE_LAB, "Audience Lab"),
        Domain.WEBSITE: _WEBSITE_LAB,
        Domain.DIGITAL_INFRA: _WEBSITE_LAB,
        Domain.SEO: LabInfo(Source.SEO_LAB, "SEO Lab"),
        Domain.CONTENT: LabInfo(Source.CONTENT_LAB, "Content Lab"),
        Domain.COMPETITIVE: LabInfo(Source.COMPETITION_LAB, "Competition Lab"),
        Domain.OBJECTIVES: LabInfo(Source.SETUP_WIZARD, "Setup Wizard"),
        Domain.CREATIVE: LabInfo(Source.CREATIVE_LAB, "Creative Lab"),
        Domain.PERFORMANCE_MEDIA: _MEDIA_LAB,
        Domain.BUDGET_OPS: _MEDIA_LAB,
        Domain.OPS: LabInfo(Source.OPS_LAB, "Ops Lab"),
    }
)


def requirements_for(flow: FlowType) -> Mapping[Domain, Importance]:
    return FLOW_REQUIREMENTS[FlowType(flow)]


def domains_with(flow: FlowType, importance: Importance) -> tuple[Domain, ...]:
    return tuple(
        domain for domain, level in requirements_for(flow).items() if level is importance
    )
