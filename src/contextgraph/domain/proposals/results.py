"""Per-field outcome reporting for proposal and producer applies."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from contextgraph.domain.mutation import WriteDecision, is_human_source

if TYPE_CHECKING:
    from contextgraph.domain.model import FieldPath
    from contextgraph.domain.mutation import FieldWriteResult


class FieldOutcome(StrEnum):
    UPDATED = "updated"
    SKIPPED_HUMAN_OVERRIDE = "skipped_human_override"
    SKIPPED_HIGHER_PRIORITY = "skipped_higher_priority"
    SKIPPED_UNCHANGED = "skipped_unchanged"
    ERROR = "error"


@dataclass(frozen=True, slots=True, kw_only=True)
class FieldApplyResult:
    path: FieldPath | str
    status: FieldOutcome
    reason: str | None = None
    previous_value: Any = None
    new_value: Any = None


def outcome_for(write: FieldWriteResult) -> FieldOutcome:
    """Translate a mutation decision into the outcome callers report on."""
    match write.decision:
        case WriteDecision.ACCEPT:
            return FieldOutcome.UPDATED
        case WriteDecision.REJECT_LOCKED:
            return FieldOutcome.SKIPPED_HUMAN_OVERRIDE
        case WriteDecision.REJECT_LOWER_PRIORITY if is_human_source(write.previous_source):
            return FieldOutcome.SKIPPED_HUMAN_OVERRIDE
        case WriteDecision.REJECT_LOWER_PRIORITY:
            return FieldOutcome.SKIPPED_HIGHER_PRIORITY
        case _:
            return FieldOutcome.SKIPPED_UNCHANGED


@dataclass(slots=True)
class ApplyResult:
    """Summary of one apply call, with a detail row per attempted field."""

    attempted: int = 0
    updated: int = 0
    skipped_human_override: int = 0
    skipped_higher_priority: int = 0
    skipped_unchanged: int = 0
    errors: int = 0
    field_results: list[FieldApplyResult] = field(default_factory=list["FieldApplyResult"])

    def record(self, result: FieldApplyResult) -> None:
        self.attempted += 1
        match result.status:
            case FieldOutcome.UPDATED:
                self.updated += 1
            case FieldOutcome.SKIPPED_HUMAN_OVERRIDE:
                self.skipped_human_override += 1
            case FieldOutcome.SKIPPED_HIGHER_PRIORITY:
                self.skipped_higher_priority += 1
            case FieldOutcome.SKIPPED_UNCHANGED:
                self.skipped_unchanged += 1
            case FieldOutcome.ERROR:
                self.errors += 1
        self.field_results.append(result)

    @property
    def skipped(self) -> int:
        return self.skipped_human_override + self.skipped_higher_priority + self.skipped_unchanged
