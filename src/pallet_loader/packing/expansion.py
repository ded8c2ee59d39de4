"""Repeat-count expansion and grouping of boxes by type."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from pallet_loader.models import BoxSpec, ExpandedBox, TypeKey


@dataclass
class BoxType:
    """Identical boxes (same dims, weight and rotation class) of one run."""

    key: TypeKey
    boxes: list[ExpandedBox] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.boxes)

    @property
    def sample(self) -> ExpandedBox:
        return self.boxes[0]


def expand_boxes(specs: Iterable[BoxSpec]) -> list[ExpandedBox]:
    """One ExpandedBox per unit, ids "<spec id>_<i>", in input order."""
    expanded: list[ExpandedBox] = []
    for spec in specs:
        for i in range(spec.quantity):
            expanded.append(ExpandedBox(id=f"{spec.id}_{i}", spec=spec))
    return expanded


def group_by_type(boxes: Iterable[ExpandedBox]) -> list[BoxType]:
    """Group boxes by type, most numerous first (ties keep first-seen order)."""
    types: dict[TypeKey, BoxType] = {}
    for box in boxes:
        key = box.type_key
        if key not in types:
            types[key] = BoxType(key=key)
        types[key].boxes.append(box)
    return sorted(types.values(), key=lambda t: t.count, reverse=True)
