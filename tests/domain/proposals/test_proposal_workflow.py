from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from contextgraph.domain.model import (
    BatchStatus,
    Domain,
    ProposalAlreadyDecidedError,
    ProposalNotFoundError,
    ProposalStatus,
    Source,
)
from contextgraph.domain.mutation import confirm_field, set_field
from contextgraph.domain.proposals import (
    AcceptOptions,
    FieldOutcome,
    FieldWrite,
    accept_all,
    accept_proposal,
    apply_field_writes,
    create_proposal_batch,
    edit_and_accept_proposal,
    reject_all,
    reject_proposal,
)
from tests.helpers.graphs import NOW, candidate, contribution, empty_graph

if TYPE_CHECKING:
    from contextgraph.domain.model import ContextGraph, ProposalBatch, ProposalCandidate


def _batch(*candidates: ProposalCandidate, graph: ContextGraph | None = None) -> ProposalBatch:
    return create_proposal_batch(
        "acme",
        candidates,
        source=Source.BRAIN,
        trigger="website_lab_run",
        reasoning="Extracted from the latest diagnostic",
        graph=graph,
        now=NOW,
    )


def test_create_proposal_batch_snapshots_previous_values() -> None:
    graph = set_field(empty_graph(), Domain.BRAND, "positioning", "Old", contribution())

    batch = _batch(candidate("brand.positioning", "New"), graph=graph)

    assert batch.id.startswith("batch_")
    assert batch.status is BatchStatus.PENDING
    (proposal,) = batch.proposals
    assert proposal.id.startswith("prop_")
    assert proposal.previous_value == "Old"
    assert proposal.status is ProposalStatus.PROPOSED
    assert proposal.source == Source.BRAIN


def test_empty_batch_is_complete() -> None:
    batch = _batch()

    assert batch.status is BatchStatus.COMPLETE
    assert batch.resolved_at == NOW


def test_human_accept_writes_as_user_and_confirms() -> None:
    batch = _batch(candidate("brand.positioning", "Premium"))
    proposal = batch.proposals[0]

    decision = accept_proposal(empty_graph(), batch, proposal.id, now=NOW)

    slot = decision.graph.slot(Domain.BRAND, "positioning")
    assert slot.value == "Premium"
    assert slot.active is not None
    assert slot.active.source == Source.USER
    assert slot.active.confidence == pytest.approx(1.0)
    assert slot.active.run_id == batch.id
    assert slot.confirmed
    accepted = decision.batch.get(proposal.id)
    assert accepted.status is ProposalStatus.CONFIRMED
    assert accepted.decided_at == NOW
    assert accepted.decided_by == Source.USER
    assert decision.batch.status is BatchStatus.COMPLETE
    assert decision.result.updated == 1


def test_machine_accept_keeps_generator_source_and_does_not_confirm() -> None:
    batch = _batch(candidate("seo.seo_summary", "Weak", confidence=0.6))

    decision = accept_proposal(
        empty_graph(), batch, batch.proposals[0].id, options=AcceptOptions(human=False)
    )

    slot = decision.graph.slot(Domain.SEO, "seo_summary")
    assert slot.active is not None
    assert slot.active.source == Source.BRAIN
    assert slot.active.confidence == pytest.approx(0.6)
    assert not slot.confirmed
    assert decision.batch.proposals[0].decided_by == Source.BRAIN


def test_machine_accept_against_human_value_reports_human_override() -> None:
    graph = set_field(empty_graph(), Domain.BRAND, "tagline", "Ours", contribution(Source.USER))
    batch = _batch(candidate("brand.tagline", "Theirs"), graph=graph)

    decision = accept_proposal(
        graph, batch, batch.proposals[0].id, options=AcceptOptions(human=False)
    )

    assert decision.graph.slot(Domain.BRAND, "tagline").value == "Ours"
    assert decision.result.skipped_human_override == 1
    assert decision.batch.proposals[0].status is ProposalStatus.CONFIRMED
    (field_result,) = decision.result.field_results
    assert field_result.status is FieldOutcome.SKIPPED_HUMAN_OVERRIDE
    assert field_result.previous_value == "Ours"
    assert field_result.new_value == "Ours"


def test_edit_and_accept_writes_supplied_value() -> None:
    batch = _batch(candidate("identity.industry", "Plumbing"))
    proposal = batch.proposals[0]

    decision = edit_and_accept_proposal(empty_graph(), batch, proposal.id, "Plumbing & HVAC")

    assert decision.graph.slot(Domain.IDENTITY, "industry").value == "Plumbing & HVAC"
    accepted = decision.batch.get(proposal.id)
    assert accepted.applied_value == "Plumbing & HVAC"
    assert accepted.proposed_value == "Plumbing"


def test_accepting_decided_proposal_raises() -> None:
    batch = _batch(candidate("identity.industry", "Plumbing"))
    proposal_id = batch.proposals[0].id
    decision = accept_proposal(empty_graph(), batch, proposal_id)

    with pytest.raises(ProposalAlreadyDecidedError):
        accept_proposal(decision.graph, decision.batch, proposal_id)


def test_reject_unknown_proposal_raises_not_found() -> None:
    batch = _batch(candidate("identity.industry", "x"))

    with pytest.raises(ProposalNotFoundError):
        reject_proposal(batch, "prop_missing")


def test_reject_proposal_never_touches_graph_and_is_terminal() -> None:
    batch = _batch(candidate("identity.industry", "Plumbing"))
    proposal_id = batch.proposals[0].id

    rejected = reject_proposal(batch, proposal_id, decided_by="ops@acme", now=NOW)

    proposal = rejected.get(proposal_id)
    assert proposal.status is ProposalStatus.REJECTED
    assert proposal.decided_by == "ops@acme"
    assert rejected.status is BatchStatus.REJECTED
    assert rejected.resolved_at == NOW
    with pytest.raises(ProposalAlreadyDecidedError):
        reject_proposal(rejected, proposal_id)


def test_reject_all_keeps_confirmed_member_of_same_field() -> None:
    batch = _batch(
        candidate("brand.positioning", "Premium"),
        candidate("brand.positioning", "Budget"),
    )
    first, second = batch.proposals
    decision = accept_proposal(empty_graph(), batch, first.id, now=NOW)
    assert decision.batch.status is BatchStatus.PARTIAL

    resolved = reject_all(decision.batch, now=NOW)

    assert resolved.get(first.id).status is ProposalStatus.CONFIRMED
    assert resolved.get(second.id).status is ProposalStatus.REJECTED
    assert resolved.status is BatchStatus.COMPLETE
    assert decision.graph.slot(Domain.BRAND, "positioning").value == "Premium"


def test_accept_all_skips_decided_members() -> None:
    batch = _batch(
        candidate("identity.industry", "Plumbing"),
        candidate("brand.tagline", "On time or free"),
    )
    first, second = batch.proposals
    batch = reject_proposal(batch, first.id, now=NOW)

    decision = accept_all(empty_graph(), batch, now=NOW)

    assert decision.batch.get(first.id).status is ProposalStatus.REJECTED
    assert decision.batch.get(second.id).status is ProposalStatus.CONFIRMED
    assert decision.graph.slot(Domain.IDENTITY, "industry").is_empty
    assert decision.result.attempted == 1


def test_accept_all_reports_per_field_errors_without_aborting() -> None:
    batch = _batch(
        candidate("brand.favourite_colour", "blue"),
        candidate("website.website_score", "very high"),
        candidate("brand.tagline", "On time or free"),
    )
    unknown, wrong_shape, good = batch.proposals

    decision = accept_all(empty_graph(), batch, now=NOW)

    assert decision.result.attempted == 3
    assert decision.result.errors == 2
    assert decision.result.updated == 1
    statuses = [field_result.status for field_result in decision.result.field_results]
    assert statuses == [FieldOutcome.ERROR, FieldOutcome.ERROR, FieldOutcome.UPDATED]
    assert decision.batch.get(unknown.id).status is ProposalStatus.PROPOSED
    assert decision.batch.get(wrong_shape.id).status is ProposalStatus.PROPOSED
    assert decision.batch.get(good.id).status is ProposalStatus.CONFIRMED
    assert decision.batch.status is BatchStatus.PARTIAL


def test_accept_reports_unchanged_value_and_still_confirms() -> None:
    graph = set_field(empty_graph(), Domain.IDENTITY, "industry", "Plumbing", contribution())
    batch = _batch(candidate("identity.industry", "Plumbing"), graph=graph)

    decision = accept_proposal(graph, batch, batch.proposals[0].id, now=NOW)

    assert decision.result.skipped_unchanged == 1
    slot = decision.graph.slot(Domain.IDENTITY, "industry")
    assert slot.confirmed
    assert slot.active is not None
    assert slot.active.source == Source.BRAND_LAB


def test_apply_field_writes_counts_each_outcome() -> None:
    graph = set_field(
        empty_graph(), Domain.WEBSITE, "website_score", 80, contribution(Source.WEBSITE_LAB)
    )
    graph = set_field(graph, Domain.BRAND, "tagline", "Ours", contribution(Source.USER))
    graph = confirm_field(graph, Domain.BRAND, "tagline", "ops@acme")
    graph = set_field(graph, Domain.SEO, "seo_score", 50, contribution(Source.SEO_LAB))

    updated, result = apply_field_writes(
        graph,
        [
            FieldWrite(
                path="website.website_score", value=40, contribution=contribution(Source.FCB)
            ),
            FieldWrite(path="brand.tagline", value="Theirs", contribution=contribution()),
            FieldWrite(path="seo.seo_score", value=50, contribution=contribution(Source.SEO_LAB)),
            FieldWrite(path="identity.industry", value="Plumbing", contribution=contribution()),
            FieldWrite(path="nowhere.field", value="x", contribution=contribution()),
        ],
        now=NOW,
    )

    assert result.attempted == 5
    assert result.skipped_higher_priority == 1
    assert result.skipped_human_override == 1
    assert result.skipped_unchanged == 1
    assert result.updated == 1
    assert result.errors == 1
    assert updated.slot(Domain.IDENTITY, "industry").value == "Plumbing"
    assert updated.slot(Domain.WEBSITE, "website_score").value == 80


def test_decide_requires_terminal_status() -> None:
    proposal = _batch(candidate("identity.industry", "x")).proposals[0]

    with pytest.raises(ValueError, match="out of 'proposed'"):
        proposal.decide(ProposalStatus.PROPOSED, decided_by="user")


def test_accept_all_reports_non_finite_number_and_continues() -> None:
    batch = _batch(
        candidate("identity.industry", "Plumbing"),
        candidate("website.website_score", float("nan")),
        candidate("brand.tagline", "On time or free"),
    )
    before, broken, after = batch.proposals

    decision = accept_all(empty_graph(), batch, now=NOW)

    assert decision.result.attempted == 3
    assert decision.result.updated == 2
    assert decision.result.errors == 1
    assert decision.batch.get(before.id).status is ProposalStatus.CONFIRMED
    assert decision.batch.get(broken.id).status is ProposalStatus.PROPOSED
    assert decision.batch.get(after.id).status is ProposalStatus.CONFIRMED
    assert decision.graph.slot(Domain.WEBSITE, "website_score").is_empty
