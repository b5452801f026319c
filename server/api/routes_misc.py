"""
Miscellaneous routes: service info, health, modulation preview.
"""

import logging
from datetime import datetime
from typing import Any, Dict

from fastapi import APIRouter, HTTPException

from horn.deps import ENGINE_RUNTIME_READY, get_dependency_status
from horn.modulation import modulation_preview
from models import ModulationPreviewRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/")
async def root() -> Dict[str, Any]:
    """Root endpoint."""
    return {
        "name": "Horn Designer Geometry Engine",
        "version": "1.0.0",
        "status": "running",
        "engine_ready": ENGINE_RUNTIME_READY,
    }


@router.get("/health")
async def health_check() -> Dict[str, Any]:
    """Health check endpoint."""
    logger.info("Health check requested")
    return {
        "status": "ok",
        "engineReady": ENGINE_RUNTIME_READY,
        "dependencies": get_dependency_status(),
        "timestamp": datetime.now().isoformat(),
    }


@router.post("/api/modulation/preview")
async def preview_modulation(request: ModulationPreviewRequest) -> Dict[str, Any]:
    """Polar samples of the raw and combined modulation patterns."""
    try:
        return modulation_preview(
            request.diagonal_mod.to_params(),
            request.cardinal_mod.to_params(),
            num_points=request.num_points,
        )
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Modulation preview failed: {exc}") from exc
