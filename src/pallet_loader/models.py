from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class RotationClass(str, Enum):
    """Which re-orientations a box type allows.

    The names are kept from the loading UI: ``vertical`` keeps the nominal
    orientation only, ``horizontal`` allows a single length/width swap and
    ``all`` allows every axis-aligned orientation.
    """

    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"
    ALL = "all"


class PalletSpec(BaseModel):
    """Pallet footprint, loadable height and weight limit (meters / kg)."""

    model_config = ConfigDict(frozen=True)

    length: float = Field(gt=0, allow_inf_nan=False, description="Footprint length (x axis)")
    width: float = Field(gt=0, allow_inf_nan=False, description="Footprint width (z axis)")
    base_height: float = Field(
        default=0.0,
        ge=0,
        allow_inf_nan=False,
        description="Height of the pallet deck before the loadable volume begins",
    )
    load_height: float = Field(gt=0, allow_inf_nan=False, description="Usable vertical extent above the base")
    max_weight: float = Field(gt=0, allow_inf_nan=False, description="Maximum total load weight in kg")

    @property
    def top(self) -> float:
        return self.base_height + self.load_height

    @property
    def load_volume(self) -> float:
        return self.length * self.width * self.load_height


class BoxSpec(BaseModel):
    """One package type as submitted by the user, with its repeat count."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Unique identifier for the package type")
    name: str = Field(default="", description="Display name")
    length: float = Field(gt=0, allow_inf_nan=False, description="Nominal length in meters")
    width: float = Field(gt=0, allow_inf_nan=False, description="Nominal width in meters")
    height: float = Field(gt=0, allow_inf_nan=False, description="Nominal height in meters")
    weight: float = Field(default=0.0, ge=0, allow_inf_nan=False, description="Weight of one unit in kg")
    rotation_type: RotationClass = Field(default=RotationClass.ALL, description="Allowed re-orientations")
    quantity: int = Field(default=1, ge=0, description="Number of identical units")
    color: Optional[str] = Field(default=None, description="Display color, ignored by the packer")

    @property
    def volume(self) -> float:
        return self.length * self.width * self.height


TypeKey = Tuple[float, float, float, float, str]


@dataclass(frozen=True)
class ExpandedBox:
    """A single unit of a BoxSpec, alive for one packing run."""

    id: str
    spec: BoxSpec

    @property
    def length(self) -> float:
        return self.spec.length

    @property
    def width(self) -> float:
        return self.spec.width

    @property
    def height(self) -> float:
        return self.spec.height

    @property
    def weight(self) -> float:
        return self.spec.weight

    @property
    def rotation_type(self) -> RotationClass:
        return self.spec.rotation_type

    @property
    def volume(self) -> float:
        return self.spec.volume

    @property
    def base_area(self) -> float:
        return self.spec.length * self.spec.width

    @property
    def type_key(self) -> TypeKey:
        s = self.spec
        return (s.length, s.width, s.height, s.weight, s.rotation_type.value)


@dataclass(frozen=True)
class Rotation:
    """Oriented dimensions (L, W, H) plus the angles that produce them."""

    length: float
    width: float
    height: float
    angles: Tuple[float, float, float] = (0.0, 0.0, 0.0)

    @property
    def dims(self) -> Tuple[float, float, float]:
        return (self.length, self.width, self.height)

    @property
    def volume(self) -> float:
        return self.length * self.width * self.height

    @property
    def base_area(self) -> float:
        return self.length * self.width


@dataclass(frozen=True)
class Anchor:
    """Candidate near-bottom-left-back corner for the next box."""

    x: float
    y: float
    z: float


class PlacedBox(BaseModel):
    """An expanded box bound to a position and an orientation."""

    model_config = ConfigDict(frozen=True)

    box_id: str = Field(description="Identifier of the placed unit")
    type_id: str = Field(description="Identifier of the package type it came from")
    name: str = Field(default="", description="Display name of the package type")
    x: float = Field(description="X coordinate (along pallet length)")
    y: float = Field(description="Y coordinate (vertical)")
    z: float = Field(description="Z coordinate (along pallet width)")

    # Actual dimensions after rotation
    length: float = Field(gt=0, description="Extent along x")
    width: float = Field(gt=0, description="Extent along z")
    height: float = Field(gt=0, description="Extent along y")

    weight: float = Field(default=0.0, ge=0, description="Weight in kg")
    rotation: Tuple[float, float, float] = Field(
        default=(0.0, 0.0, 0.0),
        description="Rotation angles (radians) about x, y, z",
    )
    color: Optional[str] = None

    @property
    def dims(self) -> Tuple[float, float, float]:
        return (self.length, self.width, self.height)

    @property
    def volume(self) -> float:
        return self.length * self.width * self.height

    @property
    def bounds(self) -> tuple[float, float, float, float, float, float]:
        return (
            self.x,
            self.y,
            self.z,
            self.x + self.length,
            self.y + self.height,
            self.z + self.width,
        )


class PackingStatistics(BaseModel):
    """Utilization of one placement against its pallet (fractions)."""

    total_volume: float = 0.0
    used_volume: float = 0.0
    volume_utilization: float = 0.0
    total_weight: float = 0.0
    weight_utilization: float = 0.0
    package_count: int = 0


class PackageStats(BaseModel):
    """Display totals; utilization values are percentages rounded to 2 decimals."""

    total_packages: int = 0
    placed_packages: int = 0
    total_volume: float = 0.0
    used_volume: float = 0.0
    total_weight: float = 0.0
    used_weight: float = 0.0
    volume_utilization: float = 0.0
    weight_utilization: float = 0.0
    placement_efficiency: float = 0.0


class PackingResult(BaseModel):
    """Winning placement of a packing run plus what it left behind."""

    placements: list[PlacedBox] = Field(default_factory=list)
    unpacked: list[str] = Field(default_factory=list)
    strategy: Optional[str] = None
    score: float = 0.0
    statistics: PackingStatistics = Field(default_factory=PackingStatistics)


def is_finite_number(value: float) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)
