"""Geometry utilities for pallet loading."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Iterable

from pallet_loader.config import DEFAULT_TOLERANCE
from pallet_loader.models import Anchor, Rotation, RotationClass

if TYPE_CHECKING:
    from .models import PalletSpec

Bounds = tuple[float, float, float, float, float, float]

HALF_PI = math.pi / 2


def approx_equal(a: float, b: float, tolerance: float = DEFAULT_TOLERANCE) -> bool:
    return abs(a - b) <= tolerance


def approx_le(a: float, b: float, tolerance: float = DEFAULT_TOLERANCE) -> bool:
    """a <= b, allowing a to exceed b by at most the tolerance."""
    return a <= b or abs(a - b) <= tolerance


def grid_count(span: float, size: float, tolerance: float = DEFAULT_TOLERANCE) -> int:
    """How many items of `size` fit side by side in `span`.

    1.2 / 0.4 is 2.9999999999999996 in floating point, so the span gets the
    tolerance before flooring.
    """
    if size <= 0:
        return 0
    return max(0, math.floor((span + tolerance) / size))


def generate_rotations(length: float, width: float, height: float, rotation_type: RotationClass) -> list[Rotation]:
    """
    Return the orientation set allowed by a rotation class.

    vertical:   (L,W,H)
    horizontal: (L,W,H), (W,L,H)  -- yaw swap, height unchanged
    all:        (L,W,H), (W,L,H), (L,H,W), (H,W,L), (W,H,L), (H,L,W)

    Orientations with identical dimensions (cubes, square bases) are
    returned once, keeping the first angle triple.
    """
    L, W, H = float(length), float(width), float(height)
    rotation_type = RotationClass(rotation_type)

    if rotation_type is RotationClass.VERTICAL:
        candidates = [Rotation(L, W, H, (0.0, 0.0, 0.0))]
    elif rotation_type is RotationClass.HORIZONTAL:
        candidates = [
            Rotation(L, W, H, (0.0, 0.0, 0.0)),
            Rotation(W, L, H, (0.0, HALF_PI, 0.0)),
        ]
    else:
        candidates = [
            Rotation(L, W, H, (0.0, 0.0, 0.0)),
            Rotation(W, L, H, (0.0, HALF_PI, 0.0)),
            Rotation(L, H, W, (HALF_PI, 0.0, 0.0)),
            Rotation(H, W, L, (0.0, 0.0, HALF_PI)),
            Rotation(W, H, L, (HALF_PI, HALF_PI, 0.0)),
            Rotation(H, L, W, (HALF_PI, 0.0, HALF_PI)),
        ]

    seen = set()
    out: list[Rotation] = []
    for rot in candidates:
        if rot.dims not in seen:
            seen.add(rot.dims)
            out.append(rot)
    return out


def rotation_bounds(anchor: Anchor, rotation: Rotation) -> Bounds:
    return (
        anchor.x,
        anchor.y,
        anchor.z,
        anchor.x + rotation.length,
        anchor.y + rotation.height,
        anchor.z + rotation.width,
    )


def boxes_overlap(a: Bounds, b: Bounds, tolerance: float = DEFAULT_TOLERANCE) -> bool:
    """
    Axis-aligned bounding box (AABB) overlap test.

    a, b are bounds: (x1, y1, z1, x2, y2, z2)

    The boxes are disjoint iff they are separated along at least one axis,
    i.e. one box's far face is <= the other's near face within the tolerance.
    Touching faces are NOT overlap.
    """
    ax1, ay1, az1, ax2, ay2, az2 = a
    bx1, by1, bz1, bx2, by2, bz2 = b

    return not (
        approx_le(ax2, bx1, tolerance)
        or approx_le(bx2, ax1, tolerance)
        or approx_le(ay2, by1, tolerance)
        or approx_le(by2, ay1, tolerance)
        or approx_le(az2, bz1, tolerance)
        or approx_le(bz2, az1, tolerance)
    )


def fits_in_pallet(rotation: Rotation, anchor: Anchor, pallet: "PalletSpec", tolerance: float = DEFAULT_TOLERANCE) -> bool:
    return (
        approx_le(anchor.x + rotation.length, pallet.length, tolerance)
        and approx_le(anchor.z + rotation.width, pallet.width, tolerance)
        and approx_le(anchor.y + rotation.height, pallet.top, tolerance)
    )


def can_place(
    rotation: Rotation,
    anchor: Anchor,
    pallet: "PalletSpec",
    occupied: Iterable[Bounds],
    tolerance: float = DEFAULT_TOLERANCE,
) -> bool:
    """
    Check if a box in the given orientation can be placed at the anchor:
    - inside pallet bounds
    - no overlap with any occupied bounds
    """
    if not fits_in_pallet(rotation, anchor, pallet, tolerance):
        return False

    new_bounds = rotation_bounds(anchor, rotation)
    for other in occupied:
        if boxes_overlap(new_bounds, other, tolerance):
            return False
    return True
