"""Conflict policy and pure write operations over the context graph."""

from __future__ import annotations

from .engine import (
    DEFAULT_HISTORY_LIMIT,
    FieldWriteResult,
    confirm_field,
    get_field_value,
    get_last_updated,
    get_source_lab,
    has_domain_data,
    is_field_confirmed,
    set_field,
    set_field_with_result,
    unconfirm_field,
)
from .policy import WriteCandidate, WriteDecision, decide_write
from .sources import (
    CONFIRMING_SOURCES,
    DOMAIN_PRIORITY,
    HUMAN_SOURCES,
    DomainPriority,
    authoritative_sources,
    is_human_source,
    source_display_name,
    source_priority,
)

__all__ = [
    "CONFIRMING_SOURCES",
    "DEFAULT_HISTORY_LIMIT",
    "DOMAIN_PRIORITY",
    "HUMAN_SOURCES",
    "DomainPriority",
    "FieldWriteResult",
    "WriteCandidate",
    "WriteDecision",
    "authoritative_sources",
    "confirm_field",
    "decide_write",
    "get_field_value",
    "get_last_updated",
    "get_source_lab",
    "has_domain_data",
    "is_field_confirmed",
    "is_human_source",
    "set_field",
    "set_field_with_result",
    "source_display_name",
    "source_priority",
    "unconfirm_field",
]
