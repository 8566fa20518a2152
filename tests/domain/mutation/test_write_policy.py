from __future__ import annotations

import sys

import pytest

from contextgraph.domain.model import Domain, FieldSlot, Source
from contextgraph.domain.mutation import (
    WriteCandidate,
    WriteDecision,
    decide_write,
    is_human_source,
    source_display_name,
    source_priority,
)
from contextgraph.domain.mutation.sources import (
    DOMAIN_PRIORITY,
    DomainPriority,
    authoritative_sources,
)
from tests.helpers.graphs import contribution


def _slot(source: str, *, confirmed: bool = False) -> FieldSlot:
    return FieldSlot(
        value="current",
        provenance=(contribution(source).carrying("current"),),
        confirmed=confirmed,
        confirmed_by="ops@acme" if confirmed else None,
    )


def _candidate(source: str, *, confidence: float = 0.8, is_empty: bool = False) -> WriteCandidate:
    return WriteCandidate(source=source, confidence=confidence, is_empty=is_empty)


def test_human_sources_rank_above_every_machine_source() -> None:
    assert source_priority(Domain.BRAND, Source.USER) == sys.maxsize
    assert source_priority(Domain.BRAND, Source.QBR) == sys.maxsize
    assert source_priority(Domain.BRAND, Source.BRAND_LAB) < sys.maxsize


def test_domain_order_ranks_listed_sources_and_zeroes_unlisted() -> None:
    brand = DOMAIN_PRIORITY[Domain.BRAND]

    assert source_priority(Domain.BRAND, Source.BRAND_LAB) == len(brand.order)
    assert source_priority(Domain.BRAND, Source.BRAND_LAB) > source_priority(
        Domain.BRAND, Source.GAP_IA
    )
    assert source_priority(Domain.BRAND, Source.SEO_LAB) == 0
    assert source_priority(Domain.BRAND, "custom_pipeline") == 0


def test_is_human_source_and_display_names() -> None:
    assert is_human_source(Source.STRATEGY)
    assert not is_human_source(Source.BRAIN)
    assert not is_human_source(None)
    assert source_display_name(Source.FCB) == "Auto-filled from Website"
    assert source_display_name("custom_pipeline") == "custom_pipeline"
    assert authoritative_sources(Domain.WEBSITE) == ("Website Lab", "UX Lab", "GAP Heavy")


def test_empty_value_is_noop_even_when_forced() -> None:
    decision = decide_write(
        Domain.BRAND, _slot(Source.FCB), _candidate(Source.USER, is_empty=True), force=True
    )

    assert decision is WriteDecision.REJECT_NOOP


def test_confirmed_slot_rejects_machine_source() -> None:
    decision = decide_write(
        Domain.BRAND, _slot(Source.FCB, confirmed=True), _candidate(Source.BRAND_LAB)
    )

    assert decision is WriteDecision.REJECT_LOCKED


@pytest.mark.parametrize("source", [Source.QBR, Source.STRATEGY])
def test_confirmed_slot_rejects_non_confirming_human_sources(source: Source) -> None:
    decision = decide_write(Domain.BRAND, _slot(Source.USER, confirmed=True), _candidate(source))

    assert decision is WriteDecision.REJECT_LOCKED


@pytest.mark.parametrize("source", [Source.USER, Source.MANUAL])
def test_confirmed_slot_accepts_confirming_sources(source: Source) -> None:
    decision = decide_write(Domain.BRAND, _slot(Source.USER, confirmed=True), _candidate(source))

    assert decision is WriteDecision.ACCEPT


def test_force_bypasses_lock_and_priority() -> None:
    locked = _slot(Source.USER, confirmed=True)

    assert decide_write(Domain.BRAND, locked, _candidate(Source.INFERRED), force=True) is (
        WriteDecision.ACCEPT
    )


def test_empty_slot_accepts_any_source() -> None:
    decision = decide_write(Domain.BRAND, FieldSlot(), _candidate("custom_pipeline"))

    assert decision is WriteDecision.ACCEPT


def test_lower_priority_source_is_rejected() -> None:
    decision = decide_write(Domain.BRAND, _slot(Source.BRAND_LAB), _candidate(Source.FCB))

    assert decision is WriteDecision.REJECT_LOWER_PRIORITY


def test_machine_source_cannot_replace_human_value() -> None:
    decision = decide_write(Domain.BRAND, _slot(Source.USER), _candidate(Source.BRAND_LAB))

    assert decision is WriteDecision.REJECT_LOWER_PRIORITY


def test_equal_priority_newer_write_wins() -> None:
    decision = decide_write(Domain.SEO, _slot(Source.SEO_LAB), _candidate(Source.SEO_LAB))

    assert decision is WriteDecision.ACCEPT


def test_higher_priority_source_replaces_value() -> None:
    decision = decide_write(Domain.WEBSITE, _slot(Source.FCB), _candidate(Source.WEBSITE_LAB))

    assert decision is WriteDecision.ACCEPT


def test_min_confidence_gates_machine_sources(monkeypatch: pytest.MonkeyPatch) -> None:
    gated = dict(DOMAIN_PRIORITY)
    gated[Domain.SEO] = DomainPriority(DOMAIN_PRIORITY[Domain.SEO].order, min_confidence=0.9)
    monkeypatch.setattr("contextgraph.domain.mutation.sources.DOMAIN_PRIORITY", gated)

    slot = _slot(Source.FCB)

    assert decide_write(Domain.SEO, slot, _candidate(Source.SEO_LAB, confidence=0.5)) is (
        WriteDecision.REJECT_LOWER_PRIORITY
    )
    assert decide_write(Domain.SEO, slot, _candidate(Source.SEO_LAB, confidence=0.95)) is (
        WriteDecision.ACCEPT
    )
    assert decide_write(Domain.SEO, slot, _candidate(Source.USER, confidence=0.1)) is (
        WriteDecision.ACCEPT
    )


def test_blocked_source_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    blocked = dict(DOMAIN_PRIORITY)
    blocked[Domain.OPS] = DomainPriority(
        DOMAIN_PRIORITY[Domain.OPS].order, blocked=frozenset({Source.BRAIN})
    )
    monkeypatch.setattr("contextgraph.domain.mutation.sources.DOMAIN_PRIORITY", blocked)

    decision = decide_write(Domain.OPS, FieldSlot(), _candidate(Source.BRAIN))

    assert decision is WriteDecision.REJECT_LOWER_PRIORITY


def test_shipped_priority_tables_leave_gates_unset() -> None:
    for priority in DOMAIN_PRIORITY.values():
        assert priority.min_confidence is None
        assert priority.blocked == frozenset()
