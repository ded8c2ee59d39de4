"""Layer-based packing: stack horizontal layers, uniform or mixed."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Sequence

from pallet_loader.config import DEFAULT_TOLERANCE, PackingSettings
from pallet_loader.geometry import generate_rotations, grid_count
from pallet_loader.models import Anchor, ExpandedBox, PalletSpec, PlacedBox, Rotation, TypeKey
from pallet_loader.packing.constraints import WeightConstraint
from pallet_loader.packing.expansion import group_by_type
from pallet_loader.packing.heuristics import register_strategy
from pallet_loader.packing.scoring import get_position_scorer
from pallet_loader.packing.workspace import Workspace, make_placed

logger = logging.getLogger(__name__)


@dataclass
class LayerPlan:
    packages: list[PlacedBox] = field(default_factory=list)
    height: float = 0.0
    efficiency: float = 0.0


def layer_efficiency(packages: Sequence[PlacedBox], layer_height: float, pallet: PalletSpec) -> float:
    """0.7 x volume fraction + 0.3 x count fraction of the layer's theoretical max."""
    if not packages or layer_height <= 0:
        return 0.0

    layer_volume = pallet.length * pallet.width * layer_height
    volume_efficiency = sum(p.volume for p in packages) / layer_volume

    # Volumes are products of rounded dims; nudge before flooring
    max_possible = math.floor(layer_volume / min(p.volume for p in packages) + 1e-9)
    count_efficiency = len(packages) / max_possible if max_possible > 0 else 0.0

    return volume_efficiency * 0.7 + count_efficiency * 0.3


def create_uniform_layer(
    boxes: Sequence[ExpandedBox],
    rotation: Rotation,
    pallet: PalletSpec,
    start_height: float,
    current_weight: float,
    tolerance: float = DEFAULT_TOLERANCE,
) -> LayerPlan:
    """One rows x columns grid of identically rotated boxes at `start_height`."""
    rows = grid_count(pallet.length, rotation.length, tolerance)
    cols = grid_count(pallet.width, rotation.width, tolerance)

    guard = WeightConstraint()
    packages: list[PlacedBox] = []
    index = 0
    for col in range(cols):
        for row in range(rows):
            if index >= len(boxes):
                break
            box = boxes[index]
            if not guard.admits(current_weight, box.weight, pallet.max_weight):
                break
            anchor = Anchor(row * rotation.length, start_height, col * rotation.width)
            packages.append(make_placed(box, anchor, rotation))
            current_weight += box.weight
            index += 1

    return LayerPlan(packages, rotation.height, layer_efficiency(packages, rotation.height, pallet))


def _layer_priority(box: ExpandedBox, max_height: float, tolerance: float) -> float | None:
    # Denser boxes and larger bases first; the nominal orientation gets a bonus.
    best = None
    for rotation in generate_rotations(box.length, box.width, box.height, box.rotation_type):
        if rotation.height > max_height + tolerance:
            continue
        density = box.weight / rotation.volume
        priority = density * 1000 + rotation.base_area * 100
        if rotation.dims == (box.length, box.width, box.height):
            priority += 50
        if best is None or priority > best:
            best = priority
    return best


def create_mixed_layer(
    remaining: dict[TypeKey, list[ExpandedBox]],
    pallet: PalletSpec,
    start_height: float,
    current_weight: float,
    settings: PackingSettings,
) -> LayerPlan:
    """
    Boxes of any remaining type placed greedily on the layer floor.

    Uses the regular anchor/feasibility machinery on a band of the pallet
    that starts at `start_height`; anchors never leave the band floor.
    """
    tol = settings.tolerance
    available = pallet.top - start_height
    band = pallet.model_copy(update={"base_height": start_height, "load_height": available})
    workspace = Workspace(
        band,
        tol,
        get_position_scorer(settings.position_scoring),
        initial_weight=current_weight,
        floor_only=True,
    )

    ranked: list[tuple[float, ExpandedBox]] = []
    for boxes in remaining.values():
        for box in boxes:
            priority = _layer_priority(box, available, tol)
            if priority is not None:
                ranked.append((priority, box))
    ranked.sort(key=lambda item: item[0], reverse=True)

    for _, box in ranked:
        workspace.place(box, max_height=available)

    packages = workspace.placed
    height = max((p.height for p in packages), default=0.0)
    return LayerPlan(packages, height, layer_efficiency(packages, height, pallet))


def create_optimal_layer(
    remaining: dict[TypeKey, list[ExpandedBox]],
    pallet: PalletSpec,
    start_height: float,
    current_weight: float,
    settings: PackingSettings,
) -> LayerPlan:
    """Best of every uniform layer (type x rotation) and one mixed layer."""
    tol = settings.tolerance
    available = pallet.top - start_height
    best = LayerPlan()

    for boxes in remaining.values():
        if not boxes:
            continue
        sample = boxes[0]
        for rotation in generate_rotations(sample.length, sample.width, sample.height, sample.rotation_type):
            if rotation.height > available + tol:
                continue
            plan = create_uniform_layer(boxes, rotation, pallet, start_height, current_weight, tol)
            if plan.packages and plan.efficiency > best.efficiency:
                best = plan

    mixed = create_mixed_layer(remaining, pallet, start_height, current_weight, settings)
    if mixed.packages and mixed.efficiency > best.efficiency:
        best = mixed

    return best


@register_strategy("layer_based", order=10)
def layer_based_packing(pallet: PalletSpec, boxes: list[ExpandedBox], settings: PackingSettings) -> list[PlacedBox]:
    """
    Build horizontal layers bottom-up until nothing fits or the load
    height is used up. Each layer starts at the top of the previous one.
    """
    remaining: dict[TypeKey, list[ExpandedBox]] = {t.key: list(t.boxes) for t in group_by_type(boxes)}
    current_height = pallet.base_height
    current_weight = 0.0
    result: list[PlacedBox] = []

    while current_height < pallet.top - settings.tolerance:
        layer = create_optimal_layer(remaining, pallet, current_height, current_weight, settings)
        if not layer.packages:
            break

        result.extend(layer.packages)
        current_weight += sum(p.weight for p in layer.packages)
        logger.debug(
            "layer at y=%.4f: %d boxes, height=%.4f, efficiency=%.3f",
            current_height,
            len(layer.packages),
            layer.height,
            layer.efficiency,
        )
        current_height += layer.height

        used_ids = {p.box_id for p in layer.packages}
        for key, type_boxes in remaining.items():
            remaining[key] = [b for b in type_boxes if b.id not in used_ids]

    return result
