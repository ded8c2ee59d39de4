"""Candidate anchor points for the next box (extreme-points style)."""

from __future__ import annotations

import logging
from typing import Iterable, Iterator

from pallet_loader.config import DEFAULT_TOLERANCE
from pallet_loader.geometry import Bounds, approx_equal, approx_le
from pallet_loader.models import Anchor, PalletSpec

logger = logging.getLogger(__name__)


def _inside(anchor: Anchor, bounds: Bounds, tolerance: float) -> bool:
    # Any box whose corner sits here overlaps `bounds`.
    x1, y1, z1, x2, y2, z2 = bounds
    return (
        x1 <= anchor.x < x2 - tolerance
        and y1 <= anchor.y < y2 - tolerance
        and z1 <= anchor.z < z2 - tolerance
    )


class AnchorSet:
    """
    Ordered set of anchors where a box's near corner may be tried next.

    Seeded with the origin on the pallet deck. Every placement consumes its
    anchor and offers up to seven new corners of the placed box. Anchors are
    kept sorted by (y, z, x), with y and z snapped to the tolerance grid:
    lowest first, then back-to-front, then left-to-right, which biases
    placement toward bottom-left-back.

    Anchors buried inside a placed box can never host a box again and are
    dropped when that box is placed.
    """

    def __init__(self, pallet: PalletSpec, tolerance: float = DEFAULT_TOLERANCE, floor_only: bool = False):
        self.pallet = pallet
        self.tolerance = tolerance
        # Layer bands only grow sideways: no anchors above the band floor.
        self.floor_only = floor_only
        self._anchors: list[Anchor] = [Anchor(0.0, pallet.base_height, 0.0)]

    @classmethod
    def from_bounds(
        cls,
        pallet: PalletSpec,
        occupied: Iterable[Bounds],
        tolerance: float = DEFAULT_TOLERANCE,
    ) -> "AnchorSet":
        """Rebuild the anchor set for boxes that were placed without one."""
        anchors = cls(pallet, tolerance)
        placed: list[Bounds] = []
        for bounds in occupied:
            placed.append(bounds)
            anchors.add_from_bounds(bounds, placed)
        return anchors

    def __iter__(self) -> Iterator[Anchor]:
        return iter(list(self._anchors))

    def __len__(self) -> int:
        return len(self._anchors)

    def __contains__(self, anchor: Anchor) -> bool:
        return self.contains(anchor)

    def contains(self, anchor: Anchor) -> bool:
        return any(self._same(a, anchor) for a in self._anchors)

    def is_valid(self, anchor: Anchor) -> bool:
        pallet, tol = self.pallet, self.tolerance
        return (
            anchor.x >= 0
            and anchor.y >= pallet.base_height
            and anchor.z >= 0
            and approx_le(anchor.x, pallet.length, tol)
            and approx_le(anchor.y, pallet.top, tol)
            and approx_le(anchor.z, pallet.width, tol)
        )

    def remove(self, anchor: Anchor) -> None:
        self._anchors = [a for a in self._anchors if not self._same(a, anchor)]

    def add_from_bounds(self, bounds: Bounds, occupied: Iterable[Bounds] = ()) -> list[Anchor]:
        """
        Offer the corners of a newly placed box.

        Candidates are the three axis-adjacent corners (right, front, above)
        and their two- and three-way combinations. Candidates outside the
        pallet, duplicates, and candidates buried in an occupied box are
        discarded. Returns the anchors actually added.
        """
        x, y, z, x2, y2, z2 = bounds
        candidates = [
            # Adjacent
            Anchor(x2, y, z),
            Anchor(x, y, z2),
            Anchor(x, y2, z),
            # Corners
            Anchor(x2, y2, z),
            Anchor(x, y2, z2),
            Anchor(x2, y, z2),
            Anchor(x2, y2, z2),
        ]

        tol = self.tolerance
        occupied = list(occupied)
        self._anchors = [a for a in self._anchors if not _inside(a, bounds, tol)]

        added: list[Anchor] = []
        for candidate in candidates:
            if self.floor_only and not approx_equal(candidate.y, self.pallet.base_height, tol):
                continue
            if not self.is_valid(candidate) or self.contains(candidate):
                continue
            if any(_inside(candidate, other, tol) for other in occupied):
                continue
            self._anchors.append(candidate)
            added.append(candidate)

        self._anchors.sort(key=self._sort_key)
        return added

    def _same(self, a: Anchor, b: Anchor) -> bool:
        tol = self.tolerance
        return approx_equal(a.x, b.x, tol) and approx_equal(a.y, b.y, tol) and approx_equal(a.z, b.z, tol)

    def _sort_key(self, anchor: Anchor) -> tuple[int, int, float]:
        # y and z snap to the tolerance grid so near-equal levels sort as one
        tol = self.tolerance
        return (round(anchor.y / tol), round(anchor.z / tol), anchor.x)
