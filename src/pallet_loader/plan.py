"""Turn a packing request into a plan (used by the CLI and the API)."""

from __future__ import annotations

import logging
from typing import Any, Optional

from pallet_loader.config import PackingSettings
from pallet_loader.engine import PackingEngine
from pallet_loader.io.schemas import PackRequestSchema, PackResponseSchema
from pallet_loader.metrics import calculate_package_stats
from pallet_loader.models import PalletSpec, PlacedBox

logger = logging.getLogger(__name__)


def build_plan(request: PackRequestSchema, settings: Optional[PackingSettings] = None) -> PackResponseSchema:
    """
    Build plan from a packing request.

    Args:
        request: Pallet (or preset) plus the package types to load
        settings: Engine settings; the request's strategy list overrides them

    Returns:
        Winning placement with utilization statistics and display stats
    """
    pallet = request.resolve_pallet()
    specs = request.box_specs()

    settings = settings or PackingSettings()
    if request.strategies is not None:
        settings = settings.model_copy(update={"strategies": tuple(request.strategies)})

    engine = PackingEngine(pallet, settings)
    result = engine.pack_result(specs)

    return PackResponseSchema(
        pallet=pallet,
        strategy=result.strategy,
        score=result.score,
        statistics=result.statistics,
        stats=calculate_package_stats(specs, result.placements, pallet),
        placements=result.placements,
        unpacked=result.unpacked,
    )


def build_placements_render(placements: list[PlacedBox]) -> list[dict[str, Any]]:
    """
    Lightweight placement records for the 3D viewer (JSON primitives only).

    Returns:
        List of dicts with x, y, z, dims, rotation, color
    """
    return [
        {
            "x": float(p.x),
            "y": float(p.y),
            "z": float(p.z),
            "dims": [float(p.length), float(p.width), float(p.height)],
            "rotation": [float(a) for a in p.rotation],
            "color": p.color,
        }
        for p in placements
    ]


def build_pallet_render(pallet: PalletSpec) -> dict[str, float]:
    return {
        "L": float(pallet.length),
        "W": float(pallet.width),
        "H": float(pallet.load_height),
        "base": float(pallet.base_height),
    }
