"""Snapshot fingerprints for staleness detection.

A fingerprint is a short, order-independent hash over ``id:updated_at`` pairs of a curated
set of collections. It is a change detector, not an integrity check: the hash is a 32-bit
multiplicative rolling hash and collisions are acceptable.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Final

from contextgraph.domain.model import Domain
from contextgraph.domain.model.graph import utcnow

if TYPE_CHECKING:
    from contextgraph.domain.model import ContextGraph


FIRM_SNAPSHOT_COLLECTIONS: Final[tuple[str, ...]] = (
    "agency_profile",
    "team_members",
    "case_studies",
    "references",
    "pricing_templates",
    "plan_templates",
)

GRAPH_SNAPSHOT_COLLECTIONS: Final[tuple[str, ...]] = tuple(domain.value for domain in Domain)

EMPTY_MARKER: Final[str] = "-"
COLLECTION_SEPARATOR: Final[str] = "|"

_HASH_MASK: Final[int] = 0xFFFFFFFF


@dataclass(frozen=True, slots=True)
class SnapshotItem:
    id: str
    updated_at: datetime | str | None = None


type Snapshot = Mapping[str, object]


@dataclass(frozen=True, slots=True)
class SnapshotFingerprint:
    hash: str
    created_at: datetime


class DriftStatus(StrEnum):
    UNCHANGED = "unchanged"
    DRIFTED = "drifted"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True, kw_only=True)
class DriftCheck:
    status: DriftStatus
    current_hash: str
    saved_hash: str | None = None

    @property
    def drifted(self) -> bool:
        return self.status is DriftStatus.DRIFTED


def _render_timestamp(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def _item_key(item: object) -> str:
    if isinstance(item, Mapping):
        item_id = item.get("id")
        updated = item.get("updated_at", item.get("updatedAt"))
    else:
        item_id = getattr(item, "id", None)
        updated = getattr(item, "updated_at", None)
    return f"{'' if item_id is None else item_id}:{_render_timestamp(updated)}"


def _as_items(collection: object) -> list[object]:
    # a single record (agency profile) is a one-element collection
    if isinstance(collection, Mapping) or not isinstance(collection, Iterable):
        return [collection]
    if isinstance(collection, (str, bytes)):
        return [collection]
    return list(collection)


def _collection_string(tag: str, collection: object) -> str:
    if collection is None:
        return f"{tag}:{EMPTY_MARKER}"
    items = _as_items(collection)
    keys = sorted(_item_key(item) for item in items)
    return f"{tag}:{len(keys)}:{','.join(keys)}"


def canonical_snapshot_string(
    snapshot: Snapshot,
    collections: Iterable[str] = FIRM_SNAPSHOT_COLLECTIONS,
) -> str:
    return COLLECTION_SEPARATOR.join(
        _collection_string(tag, snapshot.get(tag)) for tag in collections
    )


def hash_string(text: str) -> str:
    value = 0
    for char in text:
        value = (value * 31 + ord(char)) & _HASH_MASK
    return f"{value:08x}"


def build_fingerprint(
    snapshot: Snapshot,
    *,
    collections: Iterable[str] = FIRM_SNAPSHOT_COLLECTIONS,
    now: datetime | None = None,
) -> SnapshotFingerprint:
    canonical = canonical_snapshot_string(snapshot, collections)
    return SnapshotFingerprint(hash=hash_string(canonical), created_at=now or utcnow())


def check_drift(
    current_snapshot: Snapshot,
    saved: SnapshotFingerprint | None,
    *,
    collections: Iterable[str] = FIRM_SNAPSHOT_COLLECTIONS,
) -> DriftCheck:
    """Compare a live snapshot against a fingerprint stored with an artifact.

    Without a saved fingerprint the answer is ``UNKNOWN``, never ``DRIFTED``.
    """
    current = build_fingerprint(current_snapshot, collections=collections).hash
    if saved is None:
        return DriftCheck(status=DriftStatus.UNKNOWN, current_hash=current)
    status = DriftStatus.UNCHANGED if current == saved.hash else DriftStatus.DRIFTED
    return DriftCheck(status=status, current_hash=current, saved_hash=saved.hash)


def graph_snapshot(graph: ContextGraph) -> dict[str, list[SnapshotItem]]:
    """Project a graph onto one collection per domain keyed by populated field."""
    snapshot: dict[str, list[SnapshotItem]] = {}
    for domain in Domain:
        items = [
            SnapshotItem(id=field_name, updated_at=slot.active.updated_at)
            for field_name, slot in graph.slots(domain).items()
            if slot.active is not None and not slot.is_empty
        ]
        if items:
            snapshot[domain.value] = items
    return snapshot


def fingerprint_graph(graph: ContextGraph, *, now: datetime | None = None) -> SnapshotFingerprint:
    return build_fingerprint(
        graph_snapshot(graph), collections=GRAPH_SNAPSHOT_COLLECTIONS, now=now
    )


def check_graph_drift(graph: ContextGraph, saved: SnapshotFingerprint | None) -> DriftCheck:
    return check_drift(graph_snapshot(graph), saved, collections=GRAPH_SNAPSHOT_COLLECTIONS)
