"""HTTP API routers."""

from itinerary_optimizer.api.optimization import router

__all__ = ["router"]
