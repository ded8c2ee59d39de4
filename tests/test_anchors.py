from __future__ import annotations

import pytest

from pallet_loader.models import Anchor, PalletSpec
from pallet_loader.packing.anchors import AnchorSet

PALLET = PalletSpec(length=1.2, width=0.8, base_height=0.15, load_height=2.0, max_weight=1000)


def as_tuples(anchors: AnchorSet) -> list[tuple[float, float, float]]:
    return [(a.x, a.y, a.z) for a in anchors]


def test_starts_with_deck_origin() -> None:
    anchors = AnchorSet(PALLET)

    assert as_tuples(anchors) == [(0.0, 0.15, 0.0)]


def test_placement_offers_seven_corners_sorted_bottom_back_left() -> None:
    """A 0.4 x 0.2 x 0.3 box at the origin replaces the origin with its seven corners."""
    anchors = AnchorSet(PALLET)
    bounds = (0.0, 0.15, 0.0, 0.4, 0.35, 0.3)

    added = anchors.add_from_bounds(bounds, [bounds])
    anchors.remove(Anchor(0.0, 0.15, 0.0))

    assert len(added) == 7
    assert as_tuples(anchors) == [
        (0.4, 0.15, 0.0),
        (0.0, 0.15, 0.3),
        (0.4, 0.15, 0.3),
        (0.0, 0.35, 0.0),
        (0.4, 0.35, 0.0),
        (0.0, 0.35, 0.3),
        (0.4, 0.35, 0.3),
    ]


def test_candidates_outside_the_pallet_are_discarded() -> None:
    anchors = AnchorSet(PALLET)
    # Far faces at x = 1.3, beyond the 1.2 m pallet length
    bounds = (0.9, 0.15, 0.0, 1.3, 0.35, 0.3)

    anchors.add_from_bounds(bounds, [bounds])

    assert len(anchors) == 4
    assert all(a.x <= 1.2 for a in anchors)
    assert Anchor(0.0, 0.15, 0.0) in anchors


def test_anchors_on_the_far_boundary_are_kept() -> None:
    anchors = AnchorSet(PALLET)
    bounds = (0.0, 0.15, 0.0, 1.2, 0.35, 0.8)

    anchors.add_from_bounds(bounds, [bounds])

    assert Anchor(1.2, 0.15, 0.0) in anchors
    assert Anchor(0.0, 0.35, 0.0) in anchors


def test_duplicates_are_not_added_twice() -> None:
    anchors = AnchorSet(PALLET)
    bounds = (0.0, 0.15, 0.0, 0.4, 0.35, 0.3)

    anchors.add_from_bounds(bounds, [bounds])
    size = len(anchors)

    assert anchors.add_from_bounds(bounds, [bounds]) == []
    assert len(anchors) == size


def test_duplicates_within_tolerance_are_merged() -> None:
    anchors = AnchorSet(PALLET, tolerance=0.0005)
    a = (0.0, 0.15, 0.0, 0.4, 0.35, 0.3)
    b = (0.0, 0.15, 0.0, 0.4002, 0.35, 0.3)

    anchors.add_from_bounds(a, [a])
    added = anchors.add_from_bounds(b, [a, b])

    assert added == []


def test_candidates_buried_in_other_boxes_are_skipped() -> None:
    anchors = AnchorSet(PALLET)
    first = (0.0, 0.15, 0.0, 0.4, 0.35, 0.3)
    # Second box sits right of the first and fully covers (0.4, 0.15, 0.0) onward
    second = (0.4, 0.15, 0.0, 0.8, 0.35, 0.3)

    anchors.add_from_bounds(first, [first])
    anchors.add_from_bounds(second, [first, second])

    assert Anchor(0.4, 0.15, 0.0) not in anchors
    assert Anchor(0.8, 0.15, 0.0) in anchors


def test_floor_only_keeps_anchors_on_the_base() -> None:
    anchors = AnchorSet(PALLET, floor_only=True)
    bounds = (0.0, 0.15, 0.0, 0.4, 0.35, 0.3)

    anchors.add_from_bounds(bounds, [bounds])

    assert len(anchors) == 3
    assert all(a.y == pytest.approx(0.15) for a in anchors)


def test_from_bounds_rebuilds_anchor_set() -> None:
    first = (0.0, 0.15, 0.0, 0.4, 0.35, 0.3)
    second = (0.4, 0.15, 0.0, 0.8, 0.35, 0.3)

    rebuilt = AnchorSet.from_bounds(PALLET, [first, second])

    assert Anchor(0.8, 0.15, 0.0) in rebuilt
    assert Anchor(0.0, 0.15, 0.3) in rebuilt
    # Origin is buried in the first box
    assert Anchor(0.0, 0.15, 0.0) not in rebuilt


def test_is_valid() -> None:
    anchors = AnchorSet(PALLET)

    assert anchors.is_valid(Anchor(0.0, 0.15, 0.0))
    assert anchors.is_valid(Anchor(1.2, 2.15, 0.8))
    assert not anchors.is_valid(Anchor(0.0, 0.1, 0.0))
    assert not anchors.is_valid(Anchor(-0.1, 0.15, 0.0))
    assert not anchors.is_valid(Anchor(0.0, 0.15, 0.81))


def test_order_does_not_depend_on_insertion_order() -> None:
    """Anchors whose heights differ by less than the tolerance sort as one level."""
    a = (0.0, 0.15, 0.0, 0.4, 0.35, 0.3)
    b = (0.8, 0.15, 0.5, 1.0, 0.3502, 0.7)

    forward = AnchorSet(PALLET)
    forward.add_from_bounds(a, [a])
    forward.add_from_bounds(b, [a, b])

    backward = AnchorSet(PALLET)
    backward.add_from_bounds(b, [b])
    backward.add_from_bounds(a, [b, a])

    assert as_tuples(forward) == as_tuples(backward)
    upper = [(x, z) for x, y, z in as_tuples(forward) if y > 0.3]
    # One level: back-to-front, then left-to-right
    assert upper == sorted(upper, key=lambda xz: (xz[1], xz[0]))
