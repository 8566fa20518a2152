"""Pydantic models describing context graph and proposal records in the record store."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from contextgraph.domain.model import BatchStatus, ProposalStatus

# statuses written by older producers
_LEGACY_PROPOSAL_STATUS = {
    "pending": ProposalStatus.PROPOSED,
    "accepted": ProposalStatus.CONFIRMED,
    "edited": ProposalStatus.CONFIRMED,
}


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class RecordBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ContributionRecord(RecordBaseModel):
    source: str
    confidence: float = Field(ge=0.0, le=1.0)
    updated_at: datetime = Field(alias="updatedAt")
    value: Any = None
    run_id: str | None = Field(default=None, alias="runId")
    notes: str | None = None

    _normalize_blanks = field_validator("run_id", "notes", mode="before")(_blank_to_none)


class FieldSlotRecord(RecordBaseModel):
    value: Any = None
    provenance: list[ContributionRecord] = Field(default_factory=list["ContributionRecord"])
    confirmed: bool = False
    confirmed_by: str | None = Field(default=None, alias="confirmedBy")
    confirmed_at: datetime | None = Field(default=None, alias="confirmedAt")


class ContextGraphRecord(RecordBaseModel):
    company_id: str = Field(alias="companyId")
    company_name: str | None = Field(default=None, alias="companyName")
    domains: dict[str, dict[str, FieldSlotRecord]] = Field(default_factory=dict)
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")


class ProposalRecord(RecordBaseModel):
    id: str
    company_id: str = Field(alias="companyId")
    field_path: str = Field(alias="fieldPath")
    proposed_value: Any = Field(default=None, alias="proposedValue")
    source: str
    confidence: float = Field(default=0.8, ge=0.0, le=1.0)
    reason: str = ""
    previous_value: Any = Field(default=None, alias="previousValue")
    status: ProposalStatus = ProposalStatus.PROPOSED
    created_at: datetime = Field(alias="createdAt")
    decided_at: datetime | None = Field(default=None, alias="decidedAt")
    decided_by: str | None = Field(default=None, alias="decidedBy")
    applied_value: Any = Field(default=None, alias="appliedValue")

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, value: object) -> object:
        if isinstance(value, str):
            return _LEGACY_PROPOSAL_STATUS.get(value, value)
        return value


class ProposalBatchRecord(RecordBaseModel):
    id: str = Field(alias="batchId")
    company_id: str = Field(alias="companyId")
    proposals: list[ProposalRecord] = Field(default_factory=list["ProposalRecord"])
    source: str = Field(alias="triggerSource")
    trigger: str | None = None
    reasoning: str = Field(default="", alias="batchReasoning")
    # derived on read; persisted so the store can filter pending batches
    status: BatchStatus | None = None
    created_at: datetime = Field(alias="createdAt")
    resolved_at: datetime | None = Field(default=None, alias="resolvedAt")
