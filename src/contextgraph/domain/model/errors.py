"""Exception hierarchy for the context graph core."""

from __future__ import annotations


class ContextGraphError(Exception):
    """Base class for errors raised by contextgraph."""


class ContextGraphValidationError(ContextGraphError, ValueError):
    """A caller passed something the registry or model cannot accept."""


class InvalidFieldPathError(ContextGraphValidationError):
    """A dotted field path is malformed."""


class UnknownFieldPathError(ContextGraphValidationError):
    """A ``(domain, field)`` pair is not in the field registry."""

    def __init__(self, domain: str, field: str) -> None:
        super().__init__(f"Unknown field path: {domain}.{field}")
        self.domain = domain
        self.field = field


class FieldValueError(ContextGraphValidationError):
    """A value does not match the registered shape of its field."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"Invalid value for {path}: {message}")
        self.path = path


class ProposalError(ContextGraphError):
    """Base class for proposal lifecycle errors."""


class ProposalNotFoundError(ProposalError, LookupError):
    def __init__(self, batch_id: str, proposal_id: str) -> None:
        super().__init__(f"Proposal {proposal_id} not found in batch {batch_id}")
        self.batch_id = batch_id
        self.proposal_id = proposal_id


class ProposalAlreadyDecidedError(ProposalError):
    """Decided proposals are terminal and cannot be decided again."""

    def __init__(self, proposal_id: str, status: str) -> None:
        super().__init__(f"Proposal {proposal_id} is already {status}")
        self.proposal_id = proposal_id
        self.status = status
