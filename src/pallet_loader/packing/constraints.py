"""Constraints every returned placement must satisfy."""

from __future__ import annotations

from typing import Sequence

from pallet_loader.config import DEFAULT_TOLERANCE
from pallet_loader.geometry import approx_le, boxes_overlap
from pallet_loader.models import PalletSpec, PlacedBox


class Constraint:
    """Base class for placement constraints."""

    def violations(self, placements: Sequence[PlacedBox], pallet: PalletSpec) -> list[str]:
        """
        Check placements against the pallet.

        Args:
            placements: Placed boxes to check
            pallet: Pallet they were placed on

        Returns:
            Human-readable violations; empty when the constraint holds
        """
        raise NotImplementedError

    def check(self, placements: Sequence[PlacedBox], pallet: PalletSpec) -> bool:
        return not self.violations(placements, pallet)


class WeightConstraint(Constraint):
    """Total weight must stay within the pallet's max weight."""

    def __init__(self, tolerance: float = 0.0):
        self.tolerance = tolerance

    def admits(self, current_weight: float, weight: float, max_weight: float) -> bool:
        """Weight admission guard, checked before any geometric search."""
        return current_weight + weight <= max_weight + self.tolerance

    def violations(self, placements: Sequence[PlacedBox], pallet: PalletSpec) -> list[str]:
        total_weight = sum(p.weight for p in placements)
        if not self.admits(0.0, total_weight, pallet.max_weight):
            return [f"total weight {total_weight:.3f} exceeds max weight {pallet.max_weight:.3f}"]
        return []


class ContainmentConstraint(Constraint):
    """Every box lies inside the loadable volume above the pallet base."""

    def __init__(self, tolerance: float = DEFAULT_TOLERANCE):
        self.tolerance = tolerance

    def violations(self, placements: Sequence[PlacedBox], pallet: PalletSpec) -> list[str]:
        tol = self.tolerance
        out = []
        for p in placements:
            x1, y1, z1, x2, y2, z2 = p.bounds
            inside = (
                approx_le(0.0, x1, tol)
                and approx_le(pallet.base_height, y1, tol)
                and approx_le(0.0, z1, tol)
                and approx_le(x2, pallet.length, tol)
                and approx_le(y2, pallet.top, tol)
                and approx_le(z2, pallet.width, tol)
            )
            if not inside:
                out.append(f"{p.box_id} at ({p.x:.4f}, {p.y:.4f}, {p.z:.4f}) leaves the pallet bounds")
        return out


class OverlapConstraint(Constraint):
    """No two boxes share volume (touching faces are fine)."""

    def __init__(self, tolerance: float = DEFAULT_TOLERANCE):
        self.tolerance = tolerance

    def violations(self, placements: Sequence[PlacedBox], pallet: PalletSpec) -> list[str]:
        bounds = [p.bounds for p in placements]
        out = []
        for i in range(len(bounds)):
            for j in range(i + 1, len(bounds)):
                if boxes_overlap(bounds[i], bounds[j], self.tolerance):
                    out.append(f"{placements[i].box_id} overlaps {placements[j].box_id}")
        return out


class UniqueIdConstraint(Constraint):
    """Each expanded box is placed at most once."""

    def violations(self, placements: Sequence[PlacedBox], pallet: PalletSpec) -> list[str]:
        seen: set[str] = set()
        out = []
        for p in placements:
            if p.box_id in seen:
                out.append(f"{p.box_id} placed more than once")
            seen.add(p.box_id)
        return out


def validate_placement(
    placements: Sequence[PlacedBox],
    pallet: PalletSpec,
    tolerance: float = DEFAULT_TOLERANCE,
) -> list[str]:
    """Return every containment, overlap, weight and duplicate violation."""
    constraints: list[Constraint] = [
        ContainmentConstraint(tolerance),
        OverlapConstraint(tolerance),
        WeightConstraint(1e-9),
        UniqueIdConstraint(),
    ]
    out: list[str] = []
    for constraint in constraints:
        out.extend(constraint.violations(placements, pallet))
    return out
