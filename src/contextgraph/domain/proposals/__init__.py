"""Proposal staging, resolution and apply reporting."""

from __future__ import annotations

from .results import ApplyResult, FieldApplyResult, FieldOutcome, outcome_for
from .workflow import (
    AcceptOptions,
    BatchDecision,
    FieldWrite,
    ProposalDecision,
    accept_all,
    accept_proposal,
    apply_field_writes,
    create_proposal_batch,
    edit_and_accept_proposal,
    reject_all,
    reject_proposal,
)

__all__ = [
    "AcceptOptions",
    "ApplyResult",
    "BatchDecision",
    "FieldApplyResult",
    "FieldOutcome",
    "FieldWrite",
    "ProposalDecision",
    "accept_all",
    "accept_proposal",
    "apply_field_writes",
    "create_proposal_batch",
    "edit_and_accept_proposal",
    "outcome_for",
    "reject_all",
    "reject_proposal",
]
