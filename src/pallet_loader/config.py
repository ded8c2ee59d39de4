"""Packing settings; loads .env locally via python-dotenv."""

from __future__ import annotations

import logging
import os
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pallet_loader.errors import ConfigurationError

logger = logging.getLogger(__name__)

# 0.05 cm
DEFAULT_TOLERANCE = 0.0005


class PackingSettings(BaseModel):
    """Knobs shared by every strategy trial of one engine."""

    model_config = ConfigDict(frozen=True)

    tolerance: float = Field(
        default=DEFAULT_TOLERANCE,
        gt=0,
        allow_inf_nan=False,
        description="Single epsilon for bounds, collision and anchor de-duplication",
    )
    position_scoring: Literal["leftover", "weighted"] = Field(
        default="weighted",
        description="Score used by the single-box placer to rank (rotation, anchor) pairs",
    )
    uniform_top_n: int = Field(default=3, ge=1, description="Most common types tried by uniform packing")
    max_workers: int = Field(default=1, ge=1, description="Threads used to run strategy trials")
    strategies: Optional[tuple[str, ...]] = Field(
        default=None,
        description="Restrict the run to these strategy names (registry order is kept)",
    )

    @classmethod
    def from_env(cls, **overrides) -> "PackingSettings":
        """
        Build settings from PALLET_* environment variables.

        A local .env is loaded when present; it does not override variables
        already set in the environment. Keyword overrides win over both.
        """
        load_dotenv()

        values: dict = {}
        env_map = {
            "PALLET_TOLERANCE": "tolerance",
            "PALLET_POSITION_SCORING": "position_scoring",
            "PALLET_UNIFORM_TOP_N": "uniform_top_n",
            "PALLET_MAX_WORKERS": "max_workers",
        }
        for env_name, field_name in env_map.items():
            raw = os.getenv(env_name)
            if raw is not None and raw.strip() != "":
                values[field_name] = raw.strip()

        raw_strategies = os.getenv("PALLET_STRATEGIES")
        if raw_strategies:
            values["strategies"] = tuple(s.strip() for s in raw_strategies.split(",") if s.strip())

        values.update({k: v for k, v in overrides.items() if v is not None})
        try:
            settings = cls(**values)
        except ValidationError as e:
            raise ConfigurationError(
                "Invalid packing settings",
                details=[f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()],
            ) from e

        logger.debug("Packing settings: %s", settings.model_dump())
        return settings


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for the CLI and the API."""
    load_dotenv()
    level_name = (level or os.getenv("PALLET_LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
