"""Static field catalog and typed field paths.

Every write and every readiness check goes through :class:`FieldRegistry`:
- ``(domain, field)`` pairs that are not catalogued raise ``UnknownFieldPathError``
- values are checked against the registered :class:`FieldType` with strict pydantic adapters
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from pydantic import ConfigDict, TypeAdapter, ValidationError

from contextgraph.domain.model.enums import Domain, FieldType
from contextgraph.domain.model.errors import (
    FieldValueError,
    InvalidFieldPathError,
    UnknownFieldPathError,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping


_ADAPTERS: Mapping[FieldType, TypeAdapter[Any]] = MappingProxyType(
    {
        FieldType.STRING: TypeAdapter(str),
        FieldType.NUMBER: TypeAdapter(int | float, config=ConfigDict(allow_inf_nan=False)),
        FieldType.BOOLEAN: TypeAdapter(bool),
        FieldType.ENUM: TypeAdapter(str),
        FieldType.STRING_LIST: TypeAdapter(list[str]),
        FieldType.OBJECT: TypeAdapter(dict[str, Any]),
        FieldType.OBJECT_LIST: TypeAdapter(list[dict[str, Any]]),
    }
)


@dataclass(frozen=True, slots=True, order=True)
class FieldPath:
    """Typed ``domain.field`` address."""

    domain: Domain
    field: str

    @classmethod
    def parse(cls, raw: str) -> FieldPath:
        domain_part, sep, field_part = raw.strip().partition(".")
        if not sep or not domain_part or not field_part or "." in field_part:
            raise InvalidFieldPathError(f"Malformed field path: {raw!r}")
        try:
            domain = Domain(domain_part)
        except ValueError as exc:
            raise InvalidFieldPathError(f"Unknown domain in field path: {raw!r}") from exc
        return cls(domain=domain, field=field_part)

    def __str__(self) -> str:
        return f"{self.domain.value}.{self.field}"


@dataclass(frozen=True, slots=True, kw_only=True)
class FieldDef:
    domain: Domain
    field: str
    type: FieldType
    label: str
    meta: bool = False
    choices: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.type is FieldType.ENUM and not self.choices:
            raise ValueError(f"Enum field {self.path} must declare choices")

    @property
    def path(self) -> FieldPath:
        return FieldPath(self.domain, self.field)


class FieldRegistry:
    """Lookup table of known fields keyed by domain."""

    def __init__(self, definitions: Iterable[FieldDef]) -> None:
        by_domain: dict[Domain, dict[str, FieldDef]] = {}
        for definition in definitions:
            fields = by_domain.setdefault(definition.domain, {})
            if definition.field in fields:
                raise ValueError(f"Duplicate field definition: {definition.path}")
            fields[definition.field] = definition
        self._by_domain = by_domain

    def __len__(self) -> int:
        return sum(len(fields) for fields in self._by_domain.values())

    def __iter__(self) -> Iterator[FieldDef]:
        for fields in self._by_domain.values():
            yield from fields.values()

    def resolve(self, domain: Domain | str, field: str) -> FieldDef:
        try:
            key = Domain(domain)
        except ValueError as exc:
            raise UnknownFieldPathError(str(domain), field) from exc
        definition = self._by_domain.get(key, {}).get(field)
        if definition is None:
            raise UnknownFieldPathError(key.value, field)
        return definition

    def resolve_path(self, path: FieldPath | str) -> FieldDef:
        if isinstance(path, str):
            path = FieldPath.parse(path)
        return self.resolve(path.domain, path.field)

    def is_known(self, domain: Domain | str, field: str) -> bool:
        try:
            self.resolve(domain, field)
        except UnknownFieldPathError:
            return False
        return True

    def fields_for(self, domain: Domain) -> tuple[FieldDef, ...]:
        return tuple(self._by_domain.get(domain, {}).values())

    def validate_value(self, definition: FieldDef, value: object) -> None:
        """Raise ``FieldValueError`` when ``value`` does not fit ``definition.type``."""
        path = str(definition.path)
        if definition.type is FieldType.NUMBER and isinstance(value, bool):
            raise FieldValueError(path, "expected a number, got a boolean")
        try:
            _ADAPTERS[definition.type].validate_python(value, strict=True)
        except ValidationError as exc:
            first = exc.errors()[0]
            message = f"expected {definition.type.value}: {first['msg']}"
            raise FieldValueError(path, message) from exc
        if definition.type is FieldType.ENUM and value not in definition.choices:
            raise FieldValueError(path, f"{value!r} is not one of {list(definition.choices)}")


def _define(domain: Domain, *specs: tuple[str, FieldType, str]) -> list[FieldDef]:
    return [
        FieldDef(domain=domain, field=field, type=field_type, label=label)
        for field, field_type, label in specs
    ]


def _run_marker(domain: Domain) -> FieldDef:
    # bookkeeping only; never counts as domain data
    return FieldDef(
        domain=domain,
        field="last_run_id",
        type=FieldType.STRING,
        label="Last Run ID",
        meta=True,
    )


_S = FieldType.STRING
_N = FieldType.NUMBER
_L = FieldType.STRING_LIST
_O = FieldType.OBJECT
_OL = FieldType.OBJECT_LIST

_CATALOG: list[FieldDef] = [
    *_define(
        Domain.IDENTITY,
        ("business_name", _S, "Business Name"),
        ("business_description", _S, "Business Description"),
        ("industry", _S, "Industry"),
        ("business_model", _S, "Business Model"),
        ("primary_offering", _S, "Primary Offering"),
        ("revenue_model", _S, "Revenue Model"),
        ("founded_year", _N, "Founded Year"),
        ("company_size", _S, "Company Size"),
        ("icp_description", _S, "ICP Description"),
        ("geographic_footprint", _S, "Geographic Footprint"),
        ("service_area", _S, "Service Area"),
        ("market_position", _S, "Market Position"),
        ("primary_competitors", _L, "Primary Competitors"),
        ("seasonality_notes", _S, "Seasonality Notes"),
        ("revenue_streams", _L, "Revenue Streams"),
    ),
    FieldDef(
        domain=Domain.IDENTITY,
        field="market_maturity",
        type=FieldType.ENUM,
        label="Market Maturity",
        choices=("launch", "growth", "plateau", "decline"),
    ),
    *_define(
        Domain.BRAND,
        ("positioning", _S, "Positioning"),
        ("tagline", _S, "Tagline"),
        ("mission_statement", _S, "Mission Statement"),
        ("value_props", _L, "Value Propositions"),
        ("differentiators", _L, "Differentiators"),
        ("tone_of_voice", _S, "Tone of Voice"),
        ("brand_personality", _L, "Brand Personality"),
        ("brand_promise", _S, "Brand Promise"),
        ("messaging_pillars", _L, "Messaging Pillars"),
        ("brand_perception", _S, "Brand Perception"),
        ("brand_strengths", _L, "Brand Strengths"),
        ("brand_weaknesses", _L, "Brand Weaknesses"),
    ),
    _run_marker(Domain.BRAND),
    *_define(
        Domain.AUDIENCE,
        ("primary_audience", _S, "Primary Audience"),
        ("audience_description", _S, "Audience Description"),
        ("primary_buyer_roles", _L, "Primary Buyer Roles"),
        ("company_profile", _O, "Company Profile (B2B)"),
        ("core_segments", _L, "Core Segments"),
        ("segment_details", _OL, "Segment Details"),
        ("primary_markets", _L, "Primary Markets"),
        ("pain_points", _L, "Pain Points"),
        ("motivations", _L, "Motivations"),
        ("persona_briefs", _OL, "Persona Briefs"),
    ),
    *_define(
        Domain.PRODUCT_OFFER,
        ("primary_products", _L, "Primary Products"),
        ("services", _L, "Services"),
        ("value_proposition", _S, "Value Proposition"),
        ("pricing_model", _S, "Pricing Model"),
        ("key_differentiators", _L, "Key Differentiators"),
        ("hero_products", _L, "Hero Products"),
        ("pricing_notes", _S, "Pricing Notes"),
        ("lead_magnets", _L, "Lead Magnets"),
    ),
    *_define(
        Domain.WEBSITE,
        ("website_score", _N, "Website Score"),
        ("website_summary", _S, "Website Summary"),
        ("conversion_blocks", _L, "Conversion Blocks"),
        ("conversion_opportunities", _L, "Conversion Opportunities"),
        ("critical_issues", _L, "Critical Issues"),
        ("quick_wins", _L, "Quick Wins"),
    ),
    _run_marker(Domain.WEBSITE),
    *_define(
        Domain.SEO,
        ("seo_score", _N, "SEO Score"),
        ("seo_summary", _S, "SEO Summary"),
    ),
    _run_marker(Domain.SEO),
    *_define(
        Domain.CONTENT,
        ("content_score", _N, "Content Score"),
        ("content_summary", _S, "Content Summary"),
    ),
    _run_marker(Domain.CONTENT),
    *_define(
        Domain.CREATIVE,
        ("messaging", _O, "Messaging Architecture"),
        ("creative_territories", _OL, "Creative Territories"),
        ("campaign_concepts", _OL, "Campaign Concepts"),
        ("core_messages", _L, "Core Messages"),
        ("proof_points", _L, "Proof Points"),
        ("call_to_actions", _L, "Calls to Action"),
        ("brand_guidelines", _S, "Brand Guidelines"),
    ),
    *_define(
        Domain.COMPETITIVE,
        ("primary_axis", _S, "Primary Positioning Axis"),
        ("secondary_axis", _S, "Secondary Positioning Axis"),
        ("position_summary", _S, "Position Summary"),
        ("whitespace_opportunities", _L, "Whitespace Opportunities"),
        ("competitors", _OL, "Competitors"),
        ("primary_competitors", _OL, "Primary Competitors"),
        ("competitive_advantages", _L, "Competitive Advantages"),
        ("competitive_threats", _L, "Competitive Threats"),
        ("market_trends", _L, "Market Trends"),
        ("own_position_primary", _N, "Own Position (Primary Axis)"),
        ("own_position_secondary", _N, "Own Position (Secondary Axis)"),
    ),
    _run_marker(Domain.COMPETITIVE),
    *_define(
        Domain.OBJECTIVES,
        ("primary_objective", _S, "Primary Objective"),
        ("secondary_objectives", _L, "Secondary Objectives"),
        ("primary_business_goal", _S, "Primary Business Goal"),
        ("time_horizon", _S, "Time Horizon"),
        ("kpi_labels", _L, "KPIs"),
        ("target_cpa", _N, "Target CPA"),
        ("target_roas", _N, "Target ROAS"),
        ("revenue_goal", _N, "Revenue Goal"),
        ("lead_goal", _N, "Lead Goal"),
    ),
    *_define(
        Domain.PERFORMANCE_MEDIA,
        ("media_summary", _S, "Media Summary"),
        ("active_channels", _L, "Active Channels"),
        ("attribution_model", _S, "Attribution Model"),
        ("media_issues", _L, "Media Issues"),
        ("media_opportunities", _L, "Media Opportunities"),
    ),
    *_define(
        Domain.BUDGET_OPS,
        ("total_marketing_budget", _N, "Total Marketing Budget"),
        ("media_spend_budget", _N, "Media Spend Budget"),
        ("budget_period", _S, "Budget Period"),
        ("avg_customer_value", _N, "Average Customer Value"),
        ("customer_ltv", _N, "Customer LTV"),
    ),
    *_define(
        Domain.OPS,
        ("ops_score", _N, "Ops Score"),
        ("tracking_tools", _L, "Tracking Tools"),
        ("ga4_property_id", _S, "GA4 Property ID"),
        ("ga4_conversion_events", _L, "GA4 Conversion Events"),
    ),
    *_define(
        Domain.DIGITAL_INFRA,
        ("tracking_stack_summary", _S, "Tracking Stack Summary"),
        ("gbp_health", _S, "Google Business Profile Health"),
        ("data_quality", _S, "Data Quality"),
        ("ga4_health", _S, "GA4 Health"),
        ("search_console_health", _S, "Search Console Health"),
    ),
    FieldDef(
        domain=Domain.DIGITAL_INFRA,
        field="has_conversion_tracking",
        type=FieldType.BOOLEAN,
        label="Conversion Tracking Installed",
    ),
]

DEFAULT_REGISTRY = FieldRegistry(_CATALOG)
