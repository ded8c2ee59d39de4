from __future__ import annotations

from typing import Iterable, Sequence

from pallet_loader.models import BoxSpec, PackageStats, PackingStatistics, PalletSpec, PlacedBox


def placement_volume(p: PlacedBox) -> float:
    return float(p.length) * float(p.width) * float(p.height)


def compute_metrics(pallet: PalletSpec, placements: Sequence[PlacedBox]) -> tuple[float, float, float]:
    """(used_volume, pallet_load_volume, fill_rate)"""
    used_volume = sum(placement_volume(p) for p in placements)
    load_volume = pallet.load_volume
    fill_rate = 0.0 if load_volume == 0 else used_volume / load_volume
    return used_volume, load_volume, fill_rate


def total_weight(placements: Iterable[PlacedBox]) -> float:
    return sum(p.weight for p in placements)


def quality_score(pallet: PalletSpec, placements: Sequence[PlacedBox]) -> float:
    """
    Score one candidate placement; higher is better.

    50% volume utilization, 30% placed count (per thousand boxes) and
    20% weight utilization. An empty placement scores 0.
    """
    if not placements:
        return 0.0

    _, _, volume_utilization = compute_metrics(pallet, placements)
    weight_utilization = total_weight(placements) / pallet.max_weight if pallet.max_weight > 0 else 0.0

    return volume_utilization * 0.5 + (len(placements) / 1000) * 0.3 + weight_utilization * 0.2


def packing_statistics(pallet: PalletSpec, placements: Sequence[PlacedBox]) -> PackingStatistics:
    used_volume, load_volume, fill_rate = compute_metrics(pallet, placements)
    weight = total_weight(placements)
    return PackingStatistics(
        total_volume=load_volume,
        used_volume=used_volume,
        volume_utilization=fill_rate,
        total_weight=weight,
        weight_utilization=weight / pallet.max_weight if pallet.max_weight > 0 else 0.0,
        package_count=len(placements),
    )


def calculate_package_stats(
    specs: Sequence[BoxSpec],
    placements: Sequence[PlacedBox],
    pallet: PalletSpec,
) -> PackageStats:
    """Display totals for a packing run; percentages are rounded to 2 decimals."""
    total_packages = sum(spec.quantity for spec in specs)
    placed_count = len(placements)

    total_volume = sum(spec.volume * spec.quantity for spec in specs)
    used_volume = sum(placement_volume(p) for p in placements)
    load_volume = pallet.load_volume

    all_weight = sum(spec.weight * spec.quantity for spec in specs)
    used_weight = total_weight(placements)

    volume_utilization = used_volume / load_volume * 100 if load_volume > 0 else 0.0
    weight_utilization = used_weight / pallet.max_weight * 100 if pallet.max_weight > 0 else 0.0
    placement_efficiency = placed_count / total_packages * 100 if total_packages > 0 else 0.0

    return PackageStats(
        total_packages=total_packages,
        placed_packages=placed_count,
        total_volume=total_volume,
        used_volume=used_volume,
        total_weight=all_weight,
        used_weight=used_weight,
        volume_utilization=round(volume_utilization, 2),
        weight_utilization=round(weight_utilization, 2),
        placement_efficiency=round(placement_efficiency, 2),
    )
