"""
Servicios del optimizador: proveedores, cache, scoring, solver y scheduler.
"""

from itinerary_optimizer.services.activity_scheduler import ActivityScheduler
from itinerary_optimizer.services.itinerary_optimizer import ItineraryOptimizer, optimize_itinerary
from itinerary_optimizer.services.route_scorer import RouteScorer, ScoreBreakdown
from itinerary_optimizer.services.route_solver import RouteSolver, SolverResult, heap_permutations
from itinerary_optimizer.services.travel_time_cache import TravelTimeCache
from itinerary_optimizer.services.travel_time_provider import (
    GoogleDistanceMatrixProvider,
    HaversineProvider,
    OSRMTableProvider,
    TravelTimeProvider,
    create_provider,
)

__all__ = [
    "ActivityScheduler",
    "ItineraryOptimizer",
    "optimize_itinerary",
    "RouteScorer",
    "ScoreBreakdown",
    "RouteSolver",
    "SolverResult",
    "heap_permutations",
    "TravelTimeCache",
    "TravelTimeProvider",
    "GoogleDistanceMatrixProvider",
    "OSRMTableProvider",
    "HaversineProvider",
    "create_provider",
]
