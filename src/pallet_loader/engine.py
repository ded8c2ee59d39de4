"""Packing engine: runs every strategy trial and keeps the best placement."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Iterable, Mapping, Optional, Union

from pydantic import ValidationError

from pallet_loader.config import PackingSettings
from pallet_loader.errors import ConfigurationError
from pallet_loader.metrics import packing_statistics, quality_score, total_weight
from pallet_loader.models import BoxSpec, ExpandedBox, PackingResult, PackingStatistics, PalletSpec, PlacedBox, is_finite_number

# Importing the strategy modules registers them.
from pallet_loader.packing import greedy, layers, uniform  # noqa: F401
from pallet_loader.packing.constraints import WeightConstraint, validate_placement
from pallet_loader.packing.expansion import expand_boxes
from pallet_loader.packing.heuristics import StrategyFn, resolve_strategies

logger = logging.getLogger(__name__)


def _validation_details(e: ValidationError) -> list[str]:
    return [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]


def load_pallet(pallet: Union[PalletSpec, Mapping[str, Any]]) -> PalletSpec:
    """Validate pallet input; bad geometry fails fast with ConfigurationError."""
    if not isinstance(pallet, PalletSpec):
        try:
            return PalletSpec(**dict(pallet))
        except ValidationError as e:
            raise ConfigurationError("Invalid pallet configuration", details=_validation_details(e)) from e

    # model_construct() skips validation, so check again
    problems = []
    for name in ("length", "width", "load_height", "max_weight"):
        value = getattr(pallet, name)
        if not is_finite_number(value) or value <= 0:
            problems.append(f"{name}: must be a finite number greater than 0, got {value!r}")
    if not is_finite_number(pallet.base_height) or pallet.base_height < 0:
        problems.append(f"base_height: must be a finite number >= 0, got {pallet.base_height!r}")
    if problems:
        raise ConfigurationError("Invalid pallet configuration", details=problems)
    return pallet


def load_boxes(boxes: Iterable[Union[BoxSpec, Mapping[str, Any]]]) -> list[BoxSpec]:
    specs: list[BoxSpec] = []
    for i, box in enumerate(boxes):
        if isinstance(box, BoxSpec):
            specs.append(box)
            continue
        try:
            specs.append(BoxSpec(**dict(box)))
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid box #{i + 1}",
                details=[f"boxes.{i}.{d}" for d in _validation_details(e)],
            ) from e

    seen: set[str] = set()
    for spec in specs:
        if spec.id in seen:
            raise ConfigurationError(f"Duplicate box id '{spec.id}'")
        seen.add(spec.id)
    return specs


class PackingEngine:
    """
    Pallet packing engine.

    `pack()` expands the boxes, runs every registered strategy on its own
    workspace, scores each result and returns the best one. Ties keep the
    strategy evaluated first (registry order), so a run is deterministic.
    """

    def __init__(self, pallet: Union[PalletSpec, Mapping[str, Any]], settings: Optional[PackingSettings] = None):
        self.pallet = load_pallet(pallet)
        self.settings = settings or PackingSettings()
        self.strategies: list[tuple[str, StrategyFn]] = resolve_strategies(self.settings.strategies)
        self.trial_scores: dict[str, float] = {}
        self._placements: list[PlacedBox] = []
        self._guard = WeightConstraint()

    def pack(self, boxes: Iterable[Union[BoxSpec, Mapping[str, Any]]]) -> list[PlacedBox]:
        return self.pack_result(boxes).placements

    def pack_result(self, boxes: Iterable[Union[BoxSpec, Mapping[str, Any]]]) -> PackingResult:
        specs = load_boxes(boxes)
        expanded = expand_boxes(specs)

        results = self._run_trials(expanded)

        self.trial_scores = {}
        best_name: Optional[str] = None
        best: list[PlacedBox] = []
        best_score = -1.0
        for name, placements in results:
            score = quality_score(self.pallet, placements)
            self.trial_scores[name] = score
            logger.debug("strategy=%s placed=%d score=%.6f", name, len(placements), score)
            if score > best_score:
                best_name, best, best_score = name, placements, score

        self._placements = list(best)
        placed_ids = {p.box_id for p in best}
        unpacked = [b.id for b in expanded if b.id not in placed_ids]

        logger.info(
            "placed=%d/%d, strategy=%s, score=%.4f",
            len(best),
            len(expanded),
            best_name,
            max(best_score, 0.0),
        )

        return PackingResult(
            placements=self._placements,
            unpacked=unpacked,
            strategy=best_name,
            score=max(best_score, 0.0),
            statistics=packing_statistics(self.pallet, self._placements),
        )

    def current_weight(self) -> float:
        """Weight of the most recent winning placement."""
        return total_weight(self._placements)

    def can_add_weight(self, weight: float) -> bool:
        return self._guard.admits(self.current_weight(), weight, self.pallet.max_weight)

    def packing_statistics(self) -> PackingStatistics:
        return packing_statistics(self.pallet, self._placements)

    def _run_trials(self, expanded: list[ExpandedBox]) -> list[tuple[str, list[PlacedBox]]]:
        workers = min(self.settings.max_workers, len(self.strategies))
        if workers <= 1:
            return [(name, self._run_trial(name, fn, expanded)) for name, fn in self.strategies]

        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [(name, executor.submit(self._run_trial, name, fn, expanded)) for name, fn in self.strategies]
            return [(name, future.result()) for name, future in futures]

    def _run_trial(self, name: str, fn: StrategyFn, expanded: list[ExpandedBox]) -> list[PlacedBox]:
        try:
            placements = fn(self.pallet, list(expanded), self.settings)
        except Exception:
            logger.warning("strategy %s failed; scoring it as empty", name, exc_info=True)
            return []

        violations = validate_placement(placements, self.pallet, self.settings.tolerance)
        if violations:
            logger.error("strategy %s produced an invalid placement: %s", name, "; ".join(violations[:5]))
            return []
        return list(placements)
