"""
API endpoints para optimizar el orden de visita de un itinerario.
"""

import logging
import time

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel, Field

from itinerary_optimizer.models import Itinerary, Preferences
from itinerary_optimizer.services import ItineraryOptimizer
from itinerary_optimizer.type_defs import APIResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/itinerary", tags=["optimization"])


class OptimizeRequest(BaseModel):
    """Solicitud de optimizacion: itinerario + preferencias."""

    itinerary: Itinerary = Field(..., description="Itinerario a optimizar")
    preferences: Preferences = Field(default_factory=Preferences, description="Preferencias del viajero")


def get_optimizer(request: Request) -> ItineraryOptimizer:
    optimizer = getattr(request.app.state, "optimizer", None)
    if optimizer is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Optimizer not initialized",
        )
    return optimizer


@router.post("/optimize")
async def optimize(
    payload: OptimizeRequest,
    optimizer: ItineraryOptimizer = Depends(get_optimizer),
) -> APIResponse:
    """Optimiza cada dia; los dias que fallen se devuelven sin cambios."""
    start_time = time.time()
    optimized = await optimizer.optimize_itinerary(payload.itinerary, payload.preferences)
    logger.info(
        f"[API] Optimized {len(payload.itinerary.itinerary)} days in "
        f"{(time.time() - start_time) * 1000:.1f}ms"
    )
    return optimized.model_dump(by_alias=True, exclude_none=True, mode="json")


@router.get("/cache/stats")
async def cache_stats(optimizer: ItineraryOptimizer = Depends(get_optimizer)) -> APIResponse:
    return {"provider": optimizer.provider.name, **optimizer.cache.get_stats()}


@router.delete("/cache")
async def clear_cache(optimizer: ItineraryOptimizer = Depends(get_optimizer)) -> APIResponse:
    optimizer.cache.clear()
    return {"cleared": True}
