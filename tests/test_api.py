from __future__ import annotations

from fastapi.testclient import TestClient

from pallet_loader.api import app
from pallet_loader.packing.heuristics import strategy_names

client = TestClient(app)


def scenario_a(**extra) -> dict:
    body = {
        "pallet": {"length": 1.2, "width": 0.8, "base_height": 0.15, "load_height": 2.0, "max_weight": 1000},
        "boxes": [{"id": "A", "length": 0.4, "width": 0.3, "height": 0.2, "weight": 5, "quantity": 24}],
    }
    body.update(extra)
    return body


def test_health() -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "strategies": strategy_names()}


def test_presets() -> None:
    response = client.get("/presets")

    assert response.status_code == 200
    assert response.json()["EUR"]["length"] == 1.2


def test_pack_returns_placements_and_stats() -> None:
    """Test that /pack returns the winning placement with statistics."""
    response = client.post("/pack", json=scenario_a())

    assert response.status_code == 200
    data = response.json()

    assert data["strategy"] in strategy_names()
    assert len(data["placements"]) == 24
    assert data["unpacked"] == []
    assert data["stats"]["placed_packages"] == 24
    assert data["stats"]["total_packages"] == 24
    assert data["statistics"]["package_count"] == 24
    assert "placements_render" not in data


def test_pack_render_data() -> None:
    response = client.post("/pack?render=1", json=scenario_a())

    assert response.status_code == 200
    data = response.json()

    assert len(data["placements_render"]) == 24
    first = data["placements_render"][0]
    assert set(first) == {"x", "y", "z", "dims", "rotation", "color"}
    assert len(first["dims"]) == 3
    assert data["pallet_render"] == {"L": 1.2, "W": 0.8, "H": 2.0, "base": 0.15}


def test_pack_with_preset_and_weight_override() -> None:
    body = scenario_a(pallet_preset="EUR", pallet={"max_weight": 50})
    body["boxes"][0]["weight"] = 10

    response = client.post("/pack", json=body)

    assert response.status_code == 200
    data = response.json()
    assert len(data["placements"]) == 5
    assert len(data["unpacked"]) == 19


def test_pack_invalid_pallet_is_422() -> None:
    body = scenario_a()
    body["pallet"]["length"] = 0

    response = client.post("/pack", json=body)

    assert response.status_code == 422
    data = response.json()
    assert data["error"] == "INVALID_CONFIGURATION"
    assert data["details"]


def test_pack_unknown_strategy_is_422() -> None:
    response = client.post("/pack", json=scenario_a(strategies=["nope"]))

    assert response.status_code == 422
    assert response.json()["error"] == "INVALID_CONFIGURATION"


def test_pack_invalid_box_is_rejected() -> None:
    body = scenario_a()
    body["boxes"][0]["height"] = -0.2

    response = client.post("/pack", json=body)

    assert response.status_code == 422


def test_pack_dims_as_a_list_is_422() -> None:
    body = {"pallet_preset": "EUR", "boxes": [{"id": "A", "dims_cm": [40, 30, 20]}]}

    response = client.post("/pack", json=body)

    assert response.status_code == 422
