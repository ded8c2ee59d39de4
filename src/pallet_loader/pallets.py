# src/pallet_loader/pallets.py
from __future__ import annotations

from pallet_loader.models import PalletSpec

# Footprints and deck heights in meters, max load in kg.
PALLET_PRESETS_M: dict[str, dict[str, float]] = {
    "DEFAULT": {"length": 1.200, "width": 0.800, "base_height": 0.150, "load_height": 2.0, "max_weight": 1000.0},
    "EUR":     {"length": 1.200, "width": 0.800, "base_height": 0.144, "load_height": 2.0, "max_weight": 1000.0},
    "EUR1":    {"length": 1.200, "width": 0.800, "base_height": 0.144, "load_height": 2.0, "max_weight": 1000.0},  # alias
    "EUR2":    {"length": 1.200, "width": 1.000, "base_height": 0.144, "load_height": 2.0, "max_weight": 1250.0},
    "EUR6":    {"length": 0.800, "width": 0.600, "base_height": 0.144, "load_height": 1.0, "max_weight": 500.0},
    "US":      {"length": 1.219, "width": 1.016, "base_height": 0.140, "load_height": 2.0, "max_weight": 1200.0},
}


def get_pallet_dims(preset: str) -> dict[str, float]:
    key = preset.strip().upper()
    if key not in PALLET_PRESETS_M:
        raise ValueError(f"Unknown pallet_preset '{preset}'. Valid: {sorted(PALLET_PRESETS_M.keys())}")
    return PALLET_PRESETS_M[key]


def get_pallet_preset(preset: str, **overrides: float) -> PalletSpec:
    """Preset pallet, optionally with some fields (e.g. max_weight) overridden."""
    dims = dict(get_pallet_dims(preset))
    dims.update({k: v for k, v in overrides.items() if v is not None})
    return PalletSpec(**dims)
