"""
Modelos Pydantic del itinerario consumido y producido por el optimizador.

Los nombres JSON son camelCase (``estimatedDuration``, ``timeSlot``...) y los
atributos Python snake_case; ambos se aceptan en la entrada. Los campos
desconocidos se conservan para devolver el payload del colaborador intacto.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class TransportMode(str, Enum):
    """Modos de transporte soportados por los proveedores."""
    WALKING = "walking"
    DRIVING = "driving"
    TRANSIT = "transit"
    BICYCLING = "bicycling"


class Coordinates(BaseModel):
    """Coordenadas geograficas canonicas (latitud, longitud)."""

    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., ge=-90, le=90, description="Latitud en grados decimales")
    lng: float = Field(..., ge=-180, le=180, description="Longitud en grados decimales")

    def as_param(self) -> str:
        return f"{self.lat},{self.lng}"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


class Location(_CamelModel):
    """
    Ubicacion tal como llega del generador de itinerarios.

    Los valores no se validan aqui: ``normalize_coordinates`` decide una sola
    vez si son utilizables.
    """

    coordinates: Optional[Dict[str, Any]] = None
    lat: Optional[Any] = None
    lng: Optional[Any] = None
    address: Optional[str] = None


class TimeSlot(_CamelModel):
    start_time: str = Field(..., description="Hora de inicio HH:MM")
    end_time: str = Field(..., description="Hora de termino HH:MM")


class TravelInfo(_CamelModel):
    duration: float = Field(..., ge=0, description="Tiempo de viaje al siguiente (s)")
    duration_text: str
    mode: TransportMode


class Activity(_CamelModel):
    """Actividad planificada dentro de un dia."""

    id: Union[str, int]
    name: str = ""
    location: Optional[Location] = None
    estimated_duration: Optional[float] = Field(None, description="Duracion estimada (min)")
    priority: Optional[int] = Field(None, description="Prioridad 1-5")
    opening_hours: Optional[Any] = None
    preferred_time: Optional[str] = None
    time_slot: Optional[TimeSlot] = None
    travel_to_next: Optional[TravelInfo] = None

    @field_validator("estimated_duration", mode="before")
    @classmethod
    def _coerce_duration(cls, v):
        if v is None or isinstance(v, bool):
            return None
        try:
            value = float(v)
        except (TypeError, ValueError):
            return None
        return value if value >= 0 else None

    @field_validator("priority", mode="before")
    @classmethod
    def _coerce_priority(cls, v):
        if v is None or isinstance(v, bool):
            return None
        try:
            value = int(v)
        except (TypeError, ValueError):
            return None
        return max(1, min(5, value))


class OptimizationResult(_CamelModel):
    """Resultado adjunto a cada dia optimizado."""

    original_order: List[int]
    optimized_order: List[int]
    time_saved: float = Field(0.0, description="Viaje ahorrado frente al orden original (s)")
    total_travel_time: float = Field(0.0, ge=0, description="Viaje total del orden optimizado (s)")
    algorithm: str = "identity"
    score: Optional[float] = None
    used_fallback_matrix: bool = False


class Day(_CamelModel):
    date: Optional[str] = None
    activities: List[Activity] = Field(default_factory=list)
    optimization: Optional[OptimizationResult] = None


class RouteOptimizationSummary(_CamelModel):
    optimized: bool = True
    total_days: int = 0
    optimized_days: int = 0
    average_travel_time_per_day: str = "0 min"
    recommended_transport: str = "walking"
    efficiency: str = "high"
    total_time_saved: float = 0.0


class Itinerary(_CamelModel):
    itinerary: List[Day] = Field(default_factory=list)
    route_optimization: Optional[RouteOptimizationSummary] = None


class Preferences(_CamelModel):
    transport_mode: Optional[TransportMode] = None
    start_time: Optional[str] = None

    @field_validator("transport_mode", mode="before")
    @classmethod
    def _known_mode(cls, v):
        if isinstance(v, TransportMode) or v is None:
            return v
        try:
            return TransportMode(str(v).strip().lower())
        except ValueError:
            return None
