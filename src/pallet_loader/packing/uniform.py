"""Uniform grid packing of a single box type, and the hybrid that builds on it."""

from __future__ import annotations

import logging
from typing import Sequence

from pallet_loader.config import DEFAULT_TOLERANCE, PackingSettings
from pallet_loader.geometry import generate_rotations, grid_count
from pallet_loader.models import Anchor, ExpandedBox, PalletSpec, PlacedBox, Rotation
from pallet_loader.packing.constraints import WeightConstraint
from pallet_loader.packing.expansion import BoxType, group_by_type
from pallet_loader.packing.greedy import greedy_fill
from pallet_loader.packing.heuristics import register_strategy
from pallet_loader.packing.scoring import get_position_scorer
from pallet_loader.packing.workspace import Workspace, make_placed

logger = logging.getLogger(__name__)


def pack_uniform_boxes(
    boxes: Sequence[ExpandedBox],
    rotation: Rotation,
    pallet: PalletSpec,
    tolerance: float = DEFAULT_TOLERANCE,
) -> list[PlacedBox]:
    """
    Fill a rows x columns x layers grid with identically rotated boxes.

    Boxes are laid row by row, column by column, layer by layer from the
    pallet origin. Stops at the grid capacity, when boxes run out, or when
    the next box would breach the weight cap.
    """
    rows = grid_count(pallet.length, rotation.length, tolerance)
    cols = grid_count(pallet.width, rotation.width, tolerance)
    layers = grid_count(pallet.load_height, rotation.height, tolerance)

    guard = WeightConstraint()
    result: list[PlacedBox] = []
    current_weight = 0.0
    index = 0
    total = min(len(boxes), rows * cols * layers)

    for layer in range(layers):
        y = pallet.base_height + layer * rotation.height
        for col in range(cols):
            for row in range(rows):
                if index >= total:
                    return result
                box = boxes[index]
                if not guard.admits(current_weight, box.weight, pallet.max_weight):
                    return result
                anchor = Anchor(row * rotation.length, y, col * rotation.width)
                result.append(make_placed(box, anchor, rotation))
                current_weight += box.weight
                index += 1
    return result


def best_uniform_for_type(
    box_type: BoxType,
    pallet: PalletSpec,
    tolerance: float = DEFAULT_TOLERANCE,
) -> list[PlacedBox]:
    """Best single-rotation grid for one type; the first rotation wins ties."""
    sample = box_type.sample
    best: list[PlacedBox] = []
    for rotation in generate_rotations(sample.length, sample.width, sample.height, sample.rotation_type):
        result = pack_uniform_boxes(box_type.boxes, rotation, pallet, tolerance)
        if len(result) > len(best):
            best = result
    return best


@register_strategy("uniform", order=30)
def uniform_packing(pallet: PalletSpec, boxes: list[ExpandedBox], settings: PackingSettings) -> list[PlacedBox]:
    """Best uniform grid among the most common box types."""
    best: list[PlacedBox] = []
    for box_type in group_by_type(boxes)[: settings.uniform_top_n]:
        result = best_uniform_for_type(box_type, pallet, settings.tolerance)
        if len(result) > len(best):
            best = result
    return best


@register_strategy("hybrid", order=20)
def hybrid_packing(pallet: PalletSpec, boxes: list[ExpandedBox], settings: PackingSettings) -> list[PlacedBox]:
    """
    Seed with the best uniform grid of the most numerous type, then place
    every remaining box greedily into the leftover anchors.
    """
    types = group_by_type(boxes)
    if not types:
        return []

    seed = best_uniform_for_type(types[0], pallet, settings.tolerance)
    workspace = Workspace.seeded(
        pallet,
        seed,
        settings.tolerance,
        get_position_scorer(settings.position_scoring),
    )

    used_ids = {p.box_id for p in seed}
    remaining = [box for box_type in types for box in box_type.boxes if box.id not in used_ids]
    placed = greedy_fill(workspace, remaining)
    logger.debug("hybrid: seeded %d, placed %d/%d in total", len(seed), len(placed), len(boxes))
    return placed
