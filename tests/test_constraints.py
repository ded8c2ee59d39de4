from __future__ import annotations

from pallet_loader.models import PalletSpec, PlacedBox
from pallet_loader.packing.constraints import (
    ContainmentConstraint,
    OverlapConstraint,
    UniqueIdConstraint,
    WeightConstraint,
    validate_placement,
)

PALLET = PalletSpec(length=1.2, width=0.8, base_height=0.15, load_height=2.0, max_weight=1000)


def placed(box_id: str, x: float, y: float, z: float, weight: float = 5.0) -> PlacedBox:
    return PlacedBox(box_id=box_id, type_id="A", x=x, y=y, z=z, length=0.4, width=0.3, height=0.2, weight=weight)


def test_valid_placement_has_no_violations() -> None:
    placements = [placed("A_0", 0.0, 0.15, 0.0), placed("A_1", 0.4, 0.15, 0.0), placed("A_2", 0.0, 0.35, 0.0)]

    assert validate_placement(placements, PALLET) == []


def test_containment() -> None:
    constraint = ContainmentConstraint()

    assert not constraint.check([placed("A_0", 0.9, 0.15, 0.0)], PALLET)
    # Below the pallet deck
    assert not constraint.check([placed("A_0", 0.0, 0.0, 0.0)], PALLET)
    assert not constraint.check([placed("A_0", 0.0, 2.0, 0.0)], PALLET)
    assert constraint.check([placed("A_0", 0.8, 1.95, 0.5)], PALLET)


def test_overlap() -> None:
    violations = OverlapConstraint().violations([placed("A_0", 0.0, 0.15, 0.0), placed("A_1", 0.2, 0.15, 0.1)], PALLET)

    assert violations == ["A_0 overlaps A_1"]


def test_weight() -> None:
    constraint = WeightConstraint()

    assert constraint.check([placed("A_0", 0.0, 0.15, 0.0, weight=1000)], PALLET)
    assert not constraint.check([placed("A_0", 0.0, 0.15, 0.0, weight=600), placed("A_1", 0.4, 0.15, 0.0, weight=600)], PALLET)
    assert constraint.admits(995, 5, 1000)
    assert not constraint.admits(995, 5.5, 1000)


def test_unique_ids() -> None:
    violations = UniqueIdConstraint().violations([placed("A_0", 0.0, 0.15, 0.0), placed("A_0", 0.4, 0.15, 0.0)], PALLET)

    assert violations == ["A_0 placed more than once"]


def test_validate_placement_collects_everything() -> None:
    placements = [placed("A_0", 0.0, 0.15, 0.0, weight=800), placed("A_0", 0.1, 0.15, 0.0, weight=800)]

    violations = validate_placement(placements, PALLET)

    assert len(violations) == 3
