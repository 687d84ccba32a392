"""
Orquestador de la optimizacion de rutas de un itinerario completo.

Pipeline por dia (los dias se procesan en paralelo):
1) matriz de tiempos (cache -> proveedor)
2) orden de visita (scorer + solver)
3) horarios (scheduler)
4) OptimizationResult

Un fallo en un dia deja ese dia intacto; ``optimize_itinerary`` nunca lanza
excepciones al llamador.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import ValidationError

from itinerary_optimizer.config import OptimizerSettings
from itinerary_optimizer.errors import SolverFailure
from itinerary_optimizer.models import (
    Day,
    Itinerary,
    OptimizationResult,
    Preferences,
    RouteOptimizationSummary,
    TransportMode,
    TravelTimeMatrix,
)
from itinerary_optimizer.services.activity_scheduler import ActivityScheduler
from itinerary_optimizer.services.geo import normalize_coordinates
from itinerary_optimizer.services.route_scorer import RouteScorer, activity_duration_seconds
from itinerary_optimizer.services.route_solver import RouteSolver
from itinerary_optimizer.services.time_windows import format_duration, parse_clock, weekday_of
from itinerary_optimizer.services.travel_time_cache import TravelTimeCache
from itinerary_optimizer.services.travel_time_provider import TravelTimeProvider, create_provider
from itinerary_optimizer.type_defs import ClockSeconds, SolveHook

logger = logging.getLogger(__name__)

WALKING_MAX_LEG_METERS = 1000
MIXED_MAX_LEG_METERS = 5000
WALKING_MAX_ACTIVITIES = 10
HIGH_EFFICIENCY_SHARE = 0.15
MEDIUM_EFFICIENCY_SHARE = 0.30


@dataclass
class DayStats:
    """Metricas de un dia optimizado para el resumen del viaje."""
    travel_seconds: float
    visit_seconds: float
    time_saved: float
    leg_distances: List[float]


class ItineraryOptimizer:
    """
    Optimiza el orden de las actividades de cada dia de un itinerario.

    Es dueno de su cache y su proveedor: se construye explicitamente y se
    cierra con ``aclose()`` (o ``async with``).
    """

    def __init__(
        self,
        provider: Optional[TravelTimeProvider] = None,
        cache: Optional[TravelTimeCache] = None,
        settings: Optional[OptimizerSettings] = None,
        on_solve: SolveHook = None,
    ):
        self.settings = settings or OptimizerSettings()
        if cache is None:
            cache = TravelTimeCache(
                provider or create_provider(),
                default_duration=self.settings.default_travel_seconds,
                default_distance=self.settings.default_travel_meters,
            )
        self.cache = cache
        self.provider = cache.provider
        self.on_solve = on_solve
        self.scheduler = ActivityScheduler(self.settings)

    async def __aenter__(self) -> "ItineraryOptimizer":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.provider.aclose()

    # ------------------------------------------------------------------
    # API publica
    # ------------------------------------------------------------------

    async def optimize_itinerary(
        self,
        itinerary: Union[Itinerary, Dict[str, Any]],
        preferences: Union[Preferences, Dict[str, Any], None] = None,
    ) -> Union[Itinerary, Dict[str, Any]]:
        """
        Devuelve un itinerario nuevo con cada dia optimizado.

        Acepta modelos o dicts (y devuelve el mismo tipo). En el peor caso
        devuelve el itinerario original sin cambios.
        """
        started = time.perf_counter()
        as_dict = isinstance(itinerary, dict)
        try:
            model = itinerary if isinstance(itinerary, Itinerary) else Itinerary.model_validate(itinerary)
        except ValidationError as e:
            logger.error(f"[Optimizer] Invalid itinerary, returning it unchanged: {e.error_count()} errors")
            return itinerary

        try:
            prefs = self._parse_preferences(preferences)
            optimized = await self._optimize(model, prefs)
            logger.info(
                f"[Optimizer] {optimized.route_optimization.optimized_days}/{len(model.itinerary)} days "
                f"optimized in {(time.perf_counter() - started) * 1000:.1f}ms"
            )
            if as_dict:
                return optimized.model_dump(by_alias=True, exclude_none=True, mode="json")
            return optimized
        except Exception:
            logger.exception("[Optimizer] Unexpected failure, returning original itinerary")
            return itinerary

    async def optimize_day(self, day: Day, preferences: Preferences, day_index: int = 0) -> Day:
        """Optimiza un dia; ante cualquier fallo devuelve el dia original."""
        optimized, _ = await self._optimize_day_safe(day, preferences, day_index)
        return optimized

    # ------------------------------------------------------------------
    # Internos
    # ------------------------------------------------------------------

    def _parse_preferences(self, preferences) -> Preferences:
        if isinstance(preferences, Preferences):
            return preferences
        try:
            return Preferences.model_validate(preferences or {})
        except ValidationError as e:
            logger.warning(f"[Optimizer] Invalid preferences, using defaults: {e.error_count()} errors")
            return Preferences()

    def _start_time(self, preferences: Preferences) -> ClockSeconds:
        if preferences.start_time:
            parsed = parse_clock(preferences.start_time)
            if parsed is not None:
                return parsed
            logger.warning(f"[Optimizer] Invalid startTime {preferences.start_time!r}, using default")
        return parse_clock(self.settings.default_start_time) or 9 * 3600.0

    def _mode(self, preferences: Preferences) -> TransportMode:
        if preferences.transport_mode is not None:
            return preferences.transport_mode
        try:
            return TransportMode(self.settings.default_transport_mode)
        except ValueError:
            return TransportMode.WALKING

    async def _optimize(self, itinerary: Itinerary, preferences: Preferences) -> Itinerary:
        tasks = [
            self._optimize_day_safe(day, preferences, index)
            for index, day in enumerate(itinerary.itinerary)
        ]
        results: List[Tuple[Day, Optional[DayStats]]] = list(await asyncio.gather(*tasks)) if tasks else []

        days = [day for day, _ in results]
        stats = [day_stats for _, day_stats in results if day_stats is not None]
        summary = self._build_summary(days, stats)
        return itinerary.model_copy(update={"itinerary": days, "route_optimization": summary})

    async def _optimize_day_safe(
        self, day: Day, preferences: Preferences, day_index: int
    ) -> Tuple[Day, Optional[DayStats]]:
        if len(day.activities) < 2:
            return day, None
        try:
            return await self._optimize_day(day, preferences, day_index)
        except Exception as e:
            failure = e if isinstance(e, SolverFailure) else SolverFailure(str(e), day_index=day_index)
            logger.error(
                f"[Optimizer] Day {day_index} ({day.date}) kept in original order: "
                f"{type(e).__name__}: {failure}",
                exc_info=True,
            )
            return day, None

    async def _optimize_day(
        self, day: Day, preferences: Preferences, day_index: int
    ) -> Tuple[Day, DayStats]:
        activities = day.activities
        mode = self._mode(preferences)
        start_time = self._start_time(preferences)

        coordinates = [normalize_coordinates(activity) for activity in activities]
        missing = [str(a.id) for a, c in zip(activities, coordinates) if c is None]
        if missing:
            logger.warning(
                f"[Optimizer] Day {day_index}: activities without coordinates use default travel: "
                f"{', '.join(missing)}"
            )

        matrix = await self.cache.get(coordinates, mode)

        try:
            scorer = RouteScorer(
                activities,
                matrix,
                start_time,
                settings=self.settings,
                weekday=weekday_of(day.date),
            )
            solver = RouteSolver(self.settings, on_solve=self.on_solve)
            solution = solver.solve(scorer)
            scheduled = self.scheduler.schedule(activities, solution.order, matrix, start_time, mode)
        except Exception as e:
            raise SolverFailure(f"{type(e).__name__}: {e}", day_index=day_index) from e

        original_order = list(range(len(activities)))
        original_travel = self._travel_along(original_order, matrix)
        optimized_travel = self._travel_along(solution.order, matrix)

        optimization = OptimizationResult(
            original_order=original_order,
            optimized_order=list(solution.order),
            time_saved=original_travel - optimized_travel,
            total_travel_time=optimized_travel,
            algorithm=solution.algorithm,
            score=solution.score,
            used_fallback_matrix=matrix.is_default,
        )
        stats = DayStats(
            travel_seconds=optimized_travel,
            visit_seconds=sum(activity_duration_seconds(a, self.settings) for a in activities),
            time_saved=optimization.time_saved,
            leg_distances=[] if matrix.is_default else [
                matrix.distance(a, b) for a, b in zip(solution.order, solution.order[1:])
            ],
        )
        optimized_day = day.model_copy(update={"activities": scheduled, "optimization": optimization})
        return optimized_day, stats

    @staticmethod
    def _travel_along(order: List[int], matrix: TravelTimeMatrix) -> float:
        return float(sum(matrix.duration(a, b) for a, b in zip(order, order[1:])))

    def _build_summary(self, days: List[Day], stats: List[DayStats]) -> RouteOptimizationSummary:
        total_activities = sum(len(day.activities) for day in days)
        total_travel = sum(s.travel_seconds for s in stats)
        total_visit = sum(s.visit_seconds for s in stats)
        average_travel = total_travel / len(stats) if stats else 0.0

        return RouteOptimizationSummary(
            optimized=True,
            total_days=len(days),
            optimized_days=len(stats),
            average_travel_time_per_day=format_duration(average_travel),
            recommended_transport=recommend_transport(stats, total_activities),
            efficiency=efficiency_label(total_travel, total_visit),
            total_time_saved=sum(s.time_saved for s in stats),
        )


def recommend_transport(stats: List[DayStats], total_activities: int) -> str:
    """Modo recomendado segun la distancia media por tramo."""
    legs = [meters for s in stats for meters in s.leg_distances]
    if not legs:
        return "walking" if total_activities < WALKING_MAX_ACTIVITIES else "walking + public transport"
    average_leg = sum(legs) / len(legs)
    if average_leg <= WALKING_MAX_LEG_METERS:
        return "walking"
    if average_leg <= MIXED_MAX_LEG_METERS:
        return "walking + public transport"
    return "driving"


def efficiency_label(travel_seconds: float, visit_seconds: float) -> str:
    """Proporcion del dia dedicada a desplazarse: high / medium / low."""
    busy = travel_seconds + visit_seconds
    if busy <= 0:
        return "high"
    share = travel_seconds / busy
    if share < HIGH_EFFICIENCY_SHARE:
        return "high"
    if share < MEDIUM_EFFICIENCY_SHARE:
        return "medium"
    return "low"


async def optimize_itinerary(
    itinerary: Union[Itinerary, Dict[str, Any]],
    preferences: Union[Preferences, Dict[str, Any], None] = None,
    provider: Optional[TravelTimeProvider] = None,
) -> Union[Itinerary, Dict[str, Any]]:
    """Atajo que construye un optimizador temporal y lo cierra al terminar."""
    try:
        optimizer = ItineraryOptimizer(provider=provider)
    except Exception:
        logger.exception("[Optimizer] Could not build optimizer, returning original itinerary")
        return itinerary
    try:
        return await optimizer.optimize_itinerary(itinerary, preferences)
    finally:
        try:
            await optimizer.aclose()
        except Exception as e:
            logger.warning(f"[Optimizer] Error closing provider: {e}")
