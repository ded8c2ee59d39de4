"""Position scores for the single-box placer. Lower is better."""

from __future__ import annotations

from typing import Callable

from pallet_loader.models import Anchor, PalletSpec, Rotation

PositionScorer = Callable[[PalletSpec, Anchor, Rotation], float]


def leftover_score(pallet: PalletSpec, anchor: Anchor, rotation: Rotation) -> float:
    """Empty span left between the box's far faces and the pallet's far bounds."""
    right = pallet.length - (anchor.x + rotation.length)
    front = pallet.width - (anchor.z + rotation.width)
    above = pallet.top - (anchor.y + rotation.height)
    return right + front + above


def weighted_score(pallet: PalletSpec, anchor: Anchor, rotation: Rotation) -> float:
    """Prefer low, back, left anchors; penalize wasted space (height counts half)."""
    height_score = anchor.y * 10
    position_score = anchor.z * 5 + anchor.x * 2

    right = pallet.length - (anchor.x + rotation.length)
    front = pallet.width - (anchor.z + rotation.width)
    above = pallet.top - (anchor.y + rotation.height)
    wasted_space = right + front + above * 0.5

    return height_score + position_score + wasted_space


POSITION_SCORERS: dict[str, PositionScorer] = {
    "leftover": leftover_score,
    "weighted": weighted_score,
}


def get_position_scorer(name: str) -> PositionScorer:
    if name not in POSITION_SCORERS:
        raise ValueError(f"Unknown position scoring '{name}'. Valid: {sorted(POSITION_SCORERS.keys())}")
    return POSITION_SCORERS[name]
