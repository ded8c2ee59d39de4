"""Data schemas for input/output operations."""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, Field, ValidationError, model_validator

from pallet_loader.errors import ConfigurationError
from pallet_loader.models import BoxSpec, PackageStats, PackingStatistics, PalletSpec, PlacedBox, RotationClass
from pallet_loader.pallets import get_pallet_dims

# Unit factors to meters
_DIMS_UNITS = {"dims_m": 1.0, "dims_cm": 0.01, "dims_mm": 0.001, "dims_in": 0.0254}


class BoxSchema(BaseModel):
    """Schema for a package type; dimensions in meters or via dims_cm / dims_mm / dims_in."""

    id: str = Field(description="Package type identifier")
    name: str = Field(default="", description="Display name")
    length: float = Field(gt=0, allow_inf_nan=False, description="Length in meters")
    width: float = Field(gt=0, allow_inf_nan=False, description="Width in meters")
    height: float = Field(gt=0, allow_inf_nan=False, description="Height in meters")
    weight: float = Field(default=0.0, ge=0, allow_inf_nan=False, description="Weight of one unit in kg")
    rotation_type: RotationClass = Field(default=RotationClass.ALL)
    quantity: int = Field(default=1, ge=0, description="Number of units")
    color: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if "id" not in data and "sku" in data:
            data["id"] = data.pop("sku")
        if "quantity" not in data:
            for alias in ("qty", "duplicate_count", "duplicateCount"):
                if alias in data:
                    data["quantity"] = data.pop(alias)
                    break
        if "rotation_type" not in data and "rotationType" in data:
            data["rotation_type"] = data.pop("rotationType")
        if "weight" not in data and "weight_kg" in data:
            data["weight"] = data.pop("weight_kg")
        for key, factor in _DIMS_UNITS.items():
            if key in data:
                dims = data.pop(key)
                if not isinstance(dims, dict):
                    raise ValueError(f"{key} must be an object with L/W/H")
                data.setdefault("length", float(dims.get("L", dims.get("length", 0))) * factor)
                data.setdefault("width", float(dims.get("W", dims.get("width", 0))) * factor)
                data.setdefault("height", float(dims.get("H", dims.get("height", 0))) * factor)
                break
        return data

    def to_spec(self) -> BoxSpec:
        return BoxSpec(**self.model_dump())


class PackRequestSchema(BaseModel):
    """Schema for a packing request."""

    pallet: Optional[dict[str, float]] = Field(
        default=None,
        description="Explicit pallet values; merged over the preset when both are given",
    )
    pallet_preset: Optional[str] = Field(default=None, description="Name of a pallet preset")
    boxes: List[BoxSchema] = Field(default_factory=list, description="Package types to load")
    strategies: Optional[List[str]] = Field(default=None, description="Restrict the run to these strategies")

    def resolve_pallet(self) -> PalletSpec:
        pallet_kwargs: dict[str, float] = {}

        # 1) Preset dimensions OR explicit pallet
        if self.pallet_preset:
            try:
                pallet_kwargs.update(get_pallet_dims(self.pallet_preset))
            except ValueError as e:
                raise ConfigurationError(str(e)) from e
        elif not self.pallet:
            raise ConfigurationError("Request must include either 'pallet_preset' or 'pallet'")

        # 2) Explicit values override the preset (e.g. max_weight)
        if self.pallet:
            pallet_kwargs.update(self.pallet)

        try:
            return PalletSpec(**pallet_kwargs)
        except ValidationError as e:
            raise ConfigurationError(
                "Invalid pallet configuration",
                details=[f"pallet.{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()],
            ) from e

    def box_specs(self) -> list[BoxSpec]:
        return [box.to_spec() for box in self.boxes]


class PackResponseSchema(BaseModel):
    """Schema for a packing result."""

    pallet: PalletSpec
    strategy: Optional[str] = None
    score: float = 0.0
    statistics: PackingStatistics
    stats: PackageStats
    placements: List[PlacedBox] = Field(default_factory=list)
    unpacked: List[str] = Field(default_factory=list)
