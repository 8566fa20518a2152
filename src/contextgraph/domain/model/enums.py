"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class Domain(StrEnum):
    IDENTITY = "identity"
    BRAND = "brand"
    AUDIENCE = "audience"
    PRODUCT_OFFER = "product_offer"
    WEBSITE = "website"
    SEO = "seo"
    CONTENT = "content"
    CREATIVE = "creative"
    COMPETITIVE = "competitive"
    OBJECTIVES = "objectives"
    PERFORMANCE_MEDIA = "performance_media"
    BUDGET_OPS = "budget_ops"
    OPS = "ops"
    DIGITAL_INFRA = "digital_infra"


class FieldType(StrEnum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ENUM = "enum"
    STRING_LIST = "string_list"
    OBJECT = "object"
    OBJECT_LIST = "object_list"


class Source(StrEnum):
    """Known producers. Contributions accept any string; unknown names rank lowest."""

    # human
    USER = "user"
    MANUAL = "manual"
    QBR = "qbr"
    STRATEGY = "strategy"

    # labs
    BRAND_LAB = "brand_lab"
    AUDIENCE_LAB = "audience_lab"
    WEBSITE_LAB = "website_lab"
    UX_LAB = "ux_lab"
    SEO_LAB = "seo_lab"
    CONTENT_LAB = "content_lab"
    DEMAND_LAB = "demand_lab"
    OPS_LAB = "ops_lab"
    MEDIA_LAB = "media_lab"
    CREATIVE_LAB = "creative_lab"
    COMPETITION_LAB = "competition_lab"
    COMPETITION_V4 = "competition_v4"

    # assessments and AI pipelines
    GAP_HEAVY = "gap_heavy"
    GAP_FULL = "gap_full"
    GAP_IA = "gap_ia"
    FCB = "fcb"
    BRAIN = "brain"
    INFERRED = "inferred"

    # imports
    SETUP_WIZARD = "setup_wizard"
    IMPORT = "import"
    AIRTABLE = "airtable"
    ANALYTICS_GA4 = "analytics_ga4"
    ANALYTICS_GADS = "analytics_gads"


class ProposalStatus(StrEnum):
    PROPOSED = "proposed"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"


class BatchStatus(StrEnum):
    PENDING = "pending"
    PARTIAL = "partial"
    COMPLETE = "complete"
    REJECTED = "rejected"


class FlowType(StrEnum):
    STRATEGY = "strategy"
    GAP_IA = "gap_ia"
    GAP_FULL = "gap_full"
    PROGRAMS = "programs"
    CREATIVE_BRIEF = "creative_brief"


class Importance(StrEnum):
    CRITICAL = "critical"
    RECOMMENDED = "recommended"
    OPTIONAL = "optional"
