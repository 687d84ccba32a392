"""
Taxonomia de errores del optimizador de itinerarios.

Ninguno de estos errores llega al llamador de ``optimize_itinerary``:
- ProviderError se recupera en la cache con una matriz por defecto.
- DataError se recupera con entradas por defecto (o "abierto" en horarios).
- SolverFailure se recupera a nivel de dia devolviendo el dia original.
"""

from typing import Optional


class ItineraryOptimizationError(Exception):
    """Base para todos los errores del optimizador."""


class ProviderError(ItineraryOptimizationError):
    """Fallo del proveedor de tiempos de viaje (red, cuota, status no OK)."""

    def __init__(self, message: str, status: Optional[str] = None):
        super().__init__(message)
        self.status = status


class DataError(ItineraryOptimizationError):
    """Coordenadas u horarios ausentes o invalidos en una actividad."""


class SolverFailure(ItineraryOptimizationError):
    """Excepcion inesperada durante scoring, solving o scheduling de un dia."""

    def __init__(self, message: str, day_index: Optional[int] = None):
        super().__init__(message)
        self.day_index = day_index
