"""Per-trial packing state and the single-box greedy placer."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from pallet_loader.config import DEFAULT_TOLERANCE
from pallet_loader.geometry import Bounds, can_place, fits_in_pallet, generate_rotations
from pallet_loader.models import Anchor, ExpandedBox, PalletSpec, PlacedBox, Rotation
from pallet_loader.packing.anchors import AnchorSet
from pallet_loader.packing.constraints import WeightConstraint
from pallet_loader.packing.scoring import PositionScorer, weighted_score

logger = logging.getLogger(__name__)


def make_placed(box: ExpandedBox, anchor: Anchor, rotation: Rotation) -> PlacedBox:
    spec = box.spec
    return PlacedBox(
        box_id=box.id,
        type_id=spec.id,
        name=spec.name,
        x=float(anchor.x),
        y=float(anchor.y),
        z=float(anchor.z),
        length=rotation.length,
        width=rotation.width,
        height=rotation.height,
        weight=spec.weight,
        rotation=rotation.angles,
        color=spec.color,
    )


class Workspace:
    """
    Placed boxes plus the anchor set of ONE strategy trial.

    A workspace is created empty (or seeded from an earlier partial
    placement), filled by exactly one trial and discarded after scoring.
    Trials never share a workspace.
    """

    def __init__(
        self,
        pallet: PalletSpec,
        tolerance: float = DEFAULT_TOLERANCE,
        scorer: PositionScorer = weighted_score,
        initial_weight: float = 0.0,
        floor_only: bool = False,
    ):
        self.pallet = pallet
        self.tolerance = tolerance
        self.scorer = scorer
        self.placed: list[PlacedBox] = []
        self.anchors = AnchorSet(pallet, tolerance, floor_only=floor_only)
        self.guard = WeightConstraint()
        self._bounds: list[Bounds] = []
        self._weight = float(initial_weight)

    @classmethod
    def seeded(
        cls,
        pallet: PalletSpec,
        placements: Iterable[PlacedBox],
        tolerance: float = DEFAULT_TOLERANCE,
        scorer: PositionScorer = weighted_score,
    ) -> "Workspace":
        """Start from boxes placed by another algorithm; anchors are rebuilt from them."""
        ws = cls(pallet, tolerance, scorer)
        ws.placed = list(placements)
        ws._bounds = [p.bounds for p in ws.placed]
        for p in ws.placed:
            ws._weight += p.weight
        ws.anchors = AnchorSet.from_bounds(pallet, ws._bounds, tolerance)
        return ws

    def current_weight(self) -> float:
        return self._weight

    def can_add_weight(self, weight: float) -> bool:
        return self.guard.admits(self._weight, weight, self.pallet.max_weight)

    def can_place(self, rotation: Rotation, anchor: Anchor) -> bool:
        return can_place(rotation, anchor, self.pallet, self._bounds, self.tolerance)

    def commit(self, box: ExpandedBox, anchor: Anchor, rotation: Rotation) -> PlacedBox:
        placed = make_placed(box, anchor, rotation)
        self.placed.append(placed)
        self._bounds.append(placed.bounds)
        self._weight += placed.weight
        self.anchors.add_from_bounds(placed.bounds, self._bounds)
        self.anchors.remove(anchor)
        return placed

    def place(self, box: ExpandedBox, max_height: Optional[float] = None) -> Optional[PlacedBox]:
        """
        Place one box at its best (rotation, anchor) pair, or return None.

        Every allowed rotation is paired with every anchor; pairs that fit
        the pallet are ranked by the position score (ties keep rotation-major,
        anchor order) and the first collision-free pair wins. `max_height`
        skips rotations taller than a layer band.
        """
        if not self.can_add_weight(box.weight):
            return None

        pallet, tol = self.pallet, self.tolerance
        candidates: list[tuple[float, int, Rotation, Anchor]] = []
        for rotation in generate_rotations(box.length, box.width, box.height, box.rotation_type):
            if max_height is not None and rotation.height > max_height + tol:
                continue
            for anchor in self.anchors:
                if fits_in_pallet(rotation, anchor, pallet, tol):
                    candidates.append((self.scorer(pallet, anchor, rotation), len(candidates), rotation, anchor))

        candidates.sort(key=lambda c: (c[0], c[1]))
        for _, _, rotation, anchor in candidates:
            if self.can_place(rotation, anchor):
                return self.commit(box, anchor, rotation)
        return None
