from __future__ import annotations

import pytest

from pallet_loader.pallets import PALLET_PRESETS_M, get_pallet_dims, get_pallet_preset


def test_default_preset_matches_the_reference_pallet() -> None:
    pallet = get_pallet_preset("DEFAULT")

    assert (pallet.length, pallet.width, pallet.base_height) == (1.2, 0.8, 0.15)
    assert pallet.load_height == 2.0
    assert pallet.max_weight == 1000
    assert pallet.top == pytest.approx(2.15)


def test_preset_names_are_case_insensitive() -> None:
    assert get_pallet_dims(" eur ") == PALLET_PRESETS_M["EUR"]
    assert get_pallet_dims("EUR1") == PALLET_PRESETS_M["EUR"]


def test_overrides() -> None:
    pallet = get_pallet_preset("EUR2", max_weight=800, load_height=None)

    assert pallet.max_weight == 800
    assert pallet.load_height == PALLET_PRESETS_M["EUR2"]["load_height"]


def test_unknown_preset() -> None:
    with pytest.raises(ValueError, match="Unknown pallet_preset"):
        get_pallet_dims("CHEP")
