"""Sorted-order greedy packing: one strategy per sort key."""

from __future__ import annotations

import logging
from typing import Callable

from pallet_loader.config import PackingSettings
from pallet_loader.models import ExpandedBox, PalletSpec, PlacedBox
from pallet_loader.packing.heuristics import register_strategy
from pallet_loader.packing.scoring import get_position_scorer
from pallet_loader.packing.workspace import Workspace

logger = logging.getLogger(__name__)


def box_volume(box: ExpandedBox) -> float:
    return float(box.length) * float(box.width) * float(box.height)


def box_density(box: ExpandedBox) -> float:
    volume = box_volume(box)
    return box.weight / volume if volume > 0 else 0.0


def greedy_fill(workspace: Workspace, boxes: list[ExpandedBox]) -> list[PlacedBox]:
    """Place boxes in the given order; boxes that do not fit are skipped."""
    for box in boxes:
        if workspace.can_add_weight(box.weight):
            workspace.place(box)
    return workspace.placed


def pack_sorted(
    pallet: PalletSpec,
    boxes: list[ExpandedBox],
    settings: PackingSettings,
    key: Callable[[ExpandedBox], float],
) -> list[PlacedBox]:
    """
    Greedy packer over boxes sorted by `key`, largest first.

    The sort is stable, so equal keys keep input order.
    """
    workspace = Workspace(pallet, settings.tolerance, get_position_scorer(settings.position_scoring))
    boxes_sorted = sorted(boxes, key=key, reverse=True)
    placed = greedy_fill(workspace, boxes_sorted)
    logger.debug("greedy: placed %d/%d boxes, anchors left=%d", len(placed), len(boxes), len(workspace.anchors))
    return placed


@register_strategy("greedy_volume", order=40)
def greedy_by_volume(pallet: PalletSpec, boxes: list[ExpandedBox], settings: PackingSettings) -> list[PlacedBox]:
    return pack_sorted(pallet, boxes, settings, box_volume)


@register_strategy("greedy_height", order=50)
def greedy_by_height(pallet: PalletSpec, boxes: list[ExpandedBox], settings: PackingSettings) -> list[PlacedBox]:
    return pack_sorted(pallet, boxes, settings, lambda b: b.height)


@register_strategy("greedy_weight", order=60)
def greedy_by_weight(pallet: PalletSpec, boxes: list[ExpandedBox], settings: PackingSettings) -> list[PlacedBox]:
    return pack_sorted(pallet, boxes, settings, lambda b: b.weight)


@register_strategy("greedy_base_area", order=70)
def greedy_by_base_area(pallet: PalletSpec, boxes: list[ExpandedBox], settings: PackingSettings) -> list[PlacedBox]:
    return pack_sorted(pallet, boxes, settings, lambda b: b.base_area)


@register_strategy("greedy_density", order=80)
def greedy_by_density(pallet: PalletSpec, boxes: list[ExpandedBox], settings: PackingSettings) -> list[PlacedBox]:
    return pack_sorted(pallet, boxes, settings, box_density)
