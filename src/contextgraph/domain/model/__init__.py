"""Public domain model surface."""

from __future__ import annotations

from contextgraph.domain.model.enums import (
    BatchStatus,
    Domain,
    FieldType,
    FlowType,
    Importance,
    ProposalStatus,
    Source,
)
from contextgraph.domain.model.errors import (
    ContextGraphError,
    ContextGraphValidationError,
    FieldValueError,
    InvalidFieldPathError,
    ProposalAlreadyDecidedError,
    ProposalError,
    ProposalNotFoundError,
    UnknownFieldPathError,
)
from contextgraph.domain.model.graph import (
    DEFAULT_CONTRIBUTION_CONFIDENCE,
    ContextGraph,
    Contribution,
    FieldSlot,
    is_empty_value,
)
from contextgraph.domain.model.proposals import (
    Proposal,
    ProposalBatch,
    ProposalCandidate,
    compute_batch_status,
)
from contextgraph.domain.model.registry import (
    DEFAULT_REGISTRY,
    FieldDef,
    FieldPath,
    FieldRegistry,
)

__all__ = [
    "DEFAULT_CONTRIBUTION_CONFIDENCE",
    "DEFAULT_REGISTRY",
    "BatchStatus",
    "ContextGraph",
    "ContextGraphError",
    "ContextGraphValidationError",
    "Contribution",
    "Domain",
    "FieldDef",
    "FieldPath",
    "FieldRegistry",
    "FieldSlot",
    "FieldType",
    "FieldValueError",
    "FlowType",
    "Importance",
    "InvalidFieldPathError",
    "Proposal",
    "ProposalAlreadyDecidedError",
    "ProposalBatch",
    "ProposalCandidate",
    "ProposalError",
    "ProposalNotFoundError",
    "ProposalStatus",
    "Source",
    "UnknownFieldPathError",
    "compute_batch_status",
    "is_empty_value",
]
