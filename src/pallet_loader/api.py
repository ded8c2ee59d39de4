"""FastAPI endpoint for the pallet loader."""

from __future__ import annotations

import logging
import os
from typing import Any

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pallet_loader.config import PackingSettings, configure_logging
from pallet_loader.errors import ConfigurationError
from pallet_loader.io.schemas import PackRequestSchema
from pallet_loader.packing.heuristics import strategy_names
from pallet_loader.pallets import PALLET_PRESETS_M
from pallet_loader.plan import build_pallet_render, build_placements_render, build_plan

configure_logging()
logger = logging.getLogger(__name__)

# FastAPI app instance (exactly one)
app = FastAPI(
    title="Pallet Loader API",
    description="Pallet load planning service",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in os.getenv("PALLET_CORS_ORIGINS", "*").split(",") if o.strip()],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    max_age=3600,
)


def _configuration_error_response(e: ConfigurationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={
            "error": "INVALID_CONFIGURATION",
            "summary": str(e),
            "details": e.details,
        },
    )


@app.get("/health")
async def health() -> dict[str, Any]:
    return {"status": "ok", "strategies": strategy_names()}


@app.get("/presets")
async def presets() -> dict[str, dict[str, float]]:
    return PALLET_PRESETS_M


@app.post("/pack")
def pack(
    request: PackRequestSchema,
    render: int = Query(0, description="Include rendering data (1) or not (0)"),
) -> Any:
    """
    Pack the requested boxes onto the pallet and return the best placement.

    Input (request body):
        {
            "pallet_preset": "EUR",
            "pallet": { "max_weight": 800 },
            "boxes": [
                { "id": "A", "dims_cm": {"L": 40, "W": 30, "H": 20}, "weight": 5, "quantity": 24 }
            ]
        }
    """
    try:
        settings = PackingSettings.from_env()
        plan = build_plan(request, settings)
    except ConfigurationError as e:
        logger.info("rejected pack request: %s", e)
        return _configuration_error_response(e)
    except Exception as e:
        logger.error(f"ERROR in /pack endpoint: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))

    response = plan.model_dump(mode="json")
    if render == 1:
        response["placements_render"] = build_placements_render(plan.placements)
        response["pallet_render"] = build_pallet_render(plan.pallet)

    logger.info(
        f"placed={plan.stats.placed_packages}/{plan.stats.total_packages}, "
        f"strategy={plan.strategy}, volume={plan.stats.volume_utilization}%"
    )
    return response
