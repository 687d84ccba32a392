"""
Constantes de scoring y scheduling del optimizador de rutas diarias.

Todas son ajustables por variables de entorno (``OptimizerSettings.from_env``)
o construyendo una instancia propia e inyectandola en el optimizador.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace

# Maximo de actividades para busqueda exhaustiva: 6! = 720 evaluaciones.
EXACT_SOLVE_CEILING = 6


def _env_int(name: str, default: int) -> int:
    """Read an integer from environment, falling back to *default*."""
    raw = os.environ.get(name, "").strip()
    if raw:
        try:
            return int(raw)
        except ValueError:
            pass
    return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if raw:
        try:
            return float(raw)
        except ValueError:
            pass
    return default


@dataclass(frozen=True)
class OptimizerSettings:
    """
    Parametros del optimizador.

    Attributes:
        default_duration_minutes: duracion de visita cuando la actividad no la trae.
        default_priority: prioridad asumida cuando falta (escala 1-5).
        default_travel_seconds: duracion de un tramo sin dato en la matriz.
        default_travel_meters: distancia de un tramo sin dato en la matriz.
        closed_penalty_seconds: penalizacion plana si el lugar esta cerrado a la llegada.
        preferred_time_coefficient: segundos de penalizacion por segundo de desvio
            respecto a la hora preferida.
        priority_bonus_seconds: bonus por posicion restante (scorer) y por punto
            de prioridad (vecino mas cercano).
        high_priority_threshold: prioridad minima que recibe bonus en el scorer.
        exact_limit: numero maximo de actividades resuelto por fuerza bruta.
        default_start_time: hora de inicio del dia ("HH:MM").
        default_transport_mode: modo de transporte por defecto.
    """

    default_duration_minutes: int = 120
    default_priority: int = 3
    default_travel_seconds: int = 600
    default_travel_meters: int = 500
    closed_penalty_seconds: float = 3600.0
    preferred_time_coefficient: float = 0.5
    priority_bonus_seconds: float = 300.0
    high_priority_threshold: int = 4
    exact_limit: int = EXACT_SOLVE_CEILING
    default_start_time: str = "09:00"
    default_transport_mode: str = "walking"

    def __post_init__(self) -> None:
        if not 1 <= self.exact_limit <= EXACT_SOLVE_CEILING:
            raise ValueError(
                f"exact_limit must be between 1 and {EXACT_SOLVE_CEILING}, got {self.exact_limit}"
            )
        if self.default_duration_minutes < 0 or self.default_travel_seconds < 0:
            raise ValueError("default durations must be non-negative")

    @classmethod
    def from_env(cls) -> "OptimizerSettings":
        base = cls()
        return replace(
            base,
            default_duration_minutes=_env_int("OPT_DEFAULT_DURATION_MIN", base.default_duration_minutes),
            default_priority=_env_int("OPT_DEFAULT_PRIORITY", base.default_priority),
            default_travel_seconds=_env_int("OPT_DEFAULT_TRAVEL_SEC", base.default_travel_seconds),
            default_travel_meters=_env_int("OPT_DEFAULT_TRAVEL_M", base.default_travel_meters),
            closed_penalty_seconds=_env_float("OPT_CLOSED_PENALTY_SEC", base.closed_penalty_seconds),
            preferred_time_coefficient=_env_float(
                "OPT_PREFERRED_TIME_COEF", base.preferred_time_coefficient
            ),
            priority_bonus_seconds=_env_float("OPT_PRIORITY_BONUS_SEC", base.priority_bonus_seconds),
            high_priority_threshold=_env_int("OPT_HIGH_PRIORITY", base.high_priority_threshold),
            exact_limit=max(
                1, min(_env_int("OPT_EXACT_LIMIT", base.exact_limit), EXACT_SOLVE_CEILING)
            ),
            default_start_time=os.getenv("OPT_DEFAULT_START_TIME", base.default_start_time),
            default_transport_mode=os.getenv("OPT_DEFAULT_TRANSPORT_MODE", base.default_transport_mode),
        )
