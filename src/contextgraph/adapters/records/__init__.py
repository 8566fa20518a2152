"""Public interface for the record-store adapter."""

from __future__ import annotations

from .schema import (
    ContextGraphRecord,
    ContributionRecord,
    FieldSlotRecord,
    ProposalBatchRecord,
    ProposalRecord,
)
from .translator import (
    RecordFormatError,
    batch_from_record,
    batch_to_record,
    graph_from_record,
    graph_to_record,
)

__all__ = [
    "ContextGraphRecord",
    "ContributionRecord",
    "FieldSlotRecord",
    "ProposalBatchRecord",
    "ProposalRecord",
    "RecordFormatError",
    "batch_from_record",
    "batch_to_record",
    "graph_from_record",
    "graph_to_record",
]
