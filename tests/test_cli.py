from __future__ import annotations

import json
from pathlib import Path

from pallet_loader.cli import main


def write_input(path: Path, data: dict) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def scenario_a() -> dict:
    return {
        "pallet_preset": "DEFAULT",
        "boxes": [{"id": "A", "length": 0.4, "width": 0.3, "height": 0.2, "weight": 5, "quantity": 24}],
    }


def test_cli_writes_a_verified_plan(tmp_path: Path) -> None:
    input_path = write_input(tmp_path / "input.json", scenario_a())
    output_path = tmp_path / "out" / "plan.json"

    code = main(["--input", str(input_path), "--output", str(output_path), "--verify"])

    assert code == 0
    plan = json.loads(output_path.read_text(encoding="utf-8"))
    assert len(plan["placements"]) == 24
    assert plan["unpacked"] == []
    assert plan["summary"]["stats"]["placed_packages"] == 24
    assert plan["summary"]["stats"]["placement_efficiency"] == 100.0
    assert plan["pallet"]["length"] == 1.2
    assert {"box_id", "type_id", "x", "y", "z", "length", "width", "height", "rotation"} <= set(plan["placements"][0])


def test_cli_strategy_option(tmp_path: Path) -> None:
    input_path = write_input(tmp_path / "input.json", scenario_a())
    output_path = tmp_path / "plan.json"

    code = main(["--input", str(input_path), "--output", str(output_path), "--strategy", "uniform", "--workers", "2"])

    assert code == 0
    assert json.loads(output_path.read_text(encoding="utf-8"))["strategy"] == "uniform"


def test_cli_rejects_invalid_pallet(tmp_path: Path) -> None:
    data = scenario_a()
    data["pallet"] = {"length": 0}
    input_path = write_input(tmp_path / "input.json", data)
    output_path = tmp_path / "plan.json"

    code = main(["--input", str(input_path), "--output", str(output_path)])

    assert code == 2
    assert not output_path.exists()


def test_cli_rejects_unknown_strategy(tmp_path: Path) -> None:
    input_path = write_input(tmp_path / "input.json", scenario_a())

    code = main(["--input", str(input_path), "--output", str(tmp_path / "plan.json"), "--strategy", "nope"])

    assert code == 2


def test_cli_rejects_invalid_box(tmp_path: Path) -> None:
    data = scenario_a()
    data["boxes"][0]["length"] = -1
    input_path = write_input(tmp_path / "input.json", data)

    assert main(["--input", str(input_path), "--output", str(tmp_path / "plan.json")]) == 2


def test_cli_rejects_malformed_json(tmp_path: Path) -> None:
    input_path = tmp_path / "input.json"
    input_path.write_text("{not json", encoding="utf-8")
    output_path = tmp_path / "plan.json"

    code = main(["--input", str(input_path), "--output", str(output_path)])

    assert code == 2
    assert not output_path.exists()
