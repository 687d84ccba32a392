"""
Modelos de datos del optimizador de itinerarios.
"""

from itinerary_optimizer.models.itinerary import (
    Activity,
    Coordinates,
    Day,
    Itinerary,
    Location,
    OptimizationResult,
    Preferences,
    RouteOptimizationSummary,
    TimeSlot,
    TransportMode,
    TravelInfo,
)
from itinerary_optimizer.models.matrix import (
    DEFAULT_TRAVEL_METERS,
    DEFAULT_TRAVEL_SECONDS,
    ZERO_ENTRY,
    CacheEntry,
    MatrixEntry,
    TravelTimeMatrix,
)

__all__ = [
    # Itinerario
    'Activity', 'Coordinates', 'Day', 'Itinerary', 'Location',
    'OptimizationResult', 'Preferences', 'RouteOptimizationSummary',
    'TimeSlot', 'TransportMode', 'TravelInfo',
    # Matriz de tiempos
    'CacheEntry', 'MatrixEntry', 'TravelTimeMatrix',
    'DEFAULT_TRAVEL_METERS', 'DEFAULT_TRAVEL_SECONDS', 'ZERO_ENTRY',
]
