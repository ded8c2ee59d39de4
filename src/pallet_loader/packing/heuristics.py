"""Registry of macro packing heuristics (strategy runners).

A strategy is a plain function::

    def my_strategy(pallet: PalletSpec, boxes: list[ExpandedBox], settings: PackingSettings) -> list[PlacedBox]

It receives the full expanded box list, builds its own Workspace and
returns one complete candidate placement. Register it with
``@register_strategy("name", order=...)``; `order` fixes the evaluation
order, which is also the tie-break order when two results score the same.
"""

from __future__ import annotations

from typing import Callable, Optional, Sequence

from pallet_loader.config import PackingSettings
from pallet_loader.errors import ConfigurationError
from pallet_loader.models import ExpandedBox, PalletSpec, PlacedBox

StrategyFn = Callable[[PalletSpec, list[ExpandedBox], PackingSettings], list[PlacedBox]]

STRATEGY_REGISTRY: dict[str, tuple[int, StrategyFn]] = {}


def register_strategy(name: str, order: int) -> Callable[[StrategyFn], StrategyFn]:
    """Function decorator: registers a strategy under `name`."""

    def decorator(fn: StrategyFn) -> StrategyFn:
        STRATEGY_REGISTRY[name] = (order, fn)
        return fn

    return decorator


def strategy_names() -> list[str]:
    return [name for name, _ in sorted(STRATEGY_REGISTRY.items(), key=lambda item: item[1][0])]


def get_strategy(name: str) -> StrategyFn:
    if name not in STRATEGY_REGISTRY:
        available = ", ".join(strategy_names())
        raise ConfigurationError(f"Unknown strategy '{name}'. Available: [{available}]")
    return STRATEGY_REGISTRY[name][1]


def resolve_strategies(names: Optional[Sequence[str]] = None) -> list[tuple[str, StrategyFn]]:
    """Registered strategies in evaluation order, optionally restricted to `names`."""
    if names is not None:
        for name in names:
            get_strategy(name)
        if not names:
            raise ConfigurationError("At least one strategy must be selected")
    wanted = set(names) if names is not None else None
    return [(name, get_strategy(name)) for name in strategy_names() if wanted is None or name in wanted]
