from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from pallet_loader.config import PackingSettings, configure_logging
from pallet_loader.errors import ConfigurationError
from pallet_loader.io.schemas import PackRequestSchema
from pallet_loader.packing.constraints import validate_placement
from pallet_loader.plan import build_plan

logger = logging.getLogger(__name__)


def load_input(path: Path) -> PackRequestSchema:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {path}", details=[str(e)]) from e
    try:
        return PackRequestSchema.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid input file {path}",
            details=[f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()],
        ) from e


def write_plan(plan: dict[str, Any], output_path: str) -> None:
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(plan, f, indent=2, sort_keys=True)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Pallet Loader CLI")
    parser.add_argument("--input", required=True, help="Input JSON file with pallet/pallet_preset and boxes")
    parser.add_argument("--output", required=True, help="Output plan JSON file")
    parser.add_argument(
        "--strategy",
        action="append",
        dest="strategies",
        help="Run only this strategy (repeatable); default runs all",
    )
    parser.add_argument("--workers", type=int, default=None, help="Threads used to run strategy trials")
    parser.add_argument(
        "--verify",
        action="store_true",
        help="Re-check the plan for overlaps, bounds and weight; exit 1 on violations",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: PALLET_LOG_LEVEL or INFO)")
    args = parser.parse_args(argv)

    configure_logging(args.log_level)

    try:
        request = load_input(Path(args.input))
        if args.strategies:
            request = request.model_copy(update={"strategies": args.strategies})
        settings = PackingSettings.from_env(max_workers=args.workers)
        plan = build_plan(request, settings)
    except ConfigurationError as e:
        logger.error("%s: %s", e, "; ".join(e.details))
        return 2

    output = {
        "pallet": plan.pallet.model_dump(),
        "strategy": plan.strategy,
        "score": plan.score,
        "summary": {
            "statistics": plan.statistics.model_dump(),
            "stats": plan.stats.model_dump(),
        },
        "placements": [p.model_dump(mode="json") for p in plan.placements],
        "unpacked": plan.unpacked,
    }
    write_plan(output, args.output)

    stats = plan.stats
    print(
        f"Placed {stats.placed_packages}/{stats.total_packages} ({stats.placement_efficiency:.2f}%), "
        f"Volume={stats.volume_utilization:.2f}%, Weight={stats.weight_utilization:.2f}%, "
        f"Strategy={plan.strategy}"
    )
    print(f"✅ Plan written to {args.output}")

    if args.verify:
        violations = validate_placement(plan.placements, plan.pallet, settings.tolerance)
        if violations:
            for v in violations:
                print(f"❌ {v}")
            return 1
        print("✅ Plan verified: no overlaps, inside bounds, within weight")

    return 0


if __name__ == "__main__":
    sys.exit(main())
