"""
Scoring de un orden de visita (menor es mejor).

score = viaje + penalizacion por ventanas horarias - bonus de prioridad
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from itinerary_optimizer.config import OptimizerSettings
from itinerary_optimizer.models import Activity, TravelTimeMatrix
from itinerary_optimizer.services.time_windows import (
    floor_to_minute,
    is_open_at,
    normalize_opening_hours,
    parse_clock,
)
from itinerary_optimizer.type_defs import ClockSeconds, Interval

logger = logging.getLogger(__name__)


@dataclass
class ScoreBreakdown:
    travel: float
    time_window_penalty: float
    priority_bonus: float

    @property
    def total(self) -> float:
        return self.travel + self.time_window_penalty - self.priority_bonus


def activity_duration_seconds(activity: Activity, settings: OptimizerSettings) -> float:
    minutes = activity.estimated_duration
    if minutes is None:
        minutes = settings.default_duration_minutes
    return float(minutes) * 60


def activity_priority(activity: Activity, settings: OptimizerSettings) -> int:
    return activity.priority if activity.priority is not None else settings.default_priority


class RouteScorer:
    """
    Evalua permutaciones de las actividades de un dia.

    Los horarios de apertura y las horas preferidas se normalizan una sola vez
    al construir el scorer; ``score`` se llama hasta 720 veces por dia.
    """

    def __init__(
        self,
        activities: Sequence[Activity],
        matrix: TravelTimeMatrix,
        start_time: ClockSeconds,
        settings: Optional[OptimizerSettings] = None,
        weekday: Optional[int] = None,
    ):
        self.settings = settings or OptimizerSettings()
        self.matrix = matrix
        self.start_time = start_time
        self.durations: List[float] = [activity_duration_seconds(a, self.settings) for a in activities]
        self.priorities: List[int] = [activity_priority(a, self.settings) for a in activities]
        self.windows: List[Optional[List[Interval]]] = [
            normalize_opening_hours(a.opening_hours, weekday, a.id) for a in activities
        ]
        self.preferred: List[Optional[ClockSeconds]] = []
        for activity in activities:
            preferred = parse_clock(activity.preferred_time) if activity.preferred_time else None
            if activity.preferred_time and preferred is None:
                logger.warning(
                    f"[Scorer] Ignoring invalid preferredTime {activity.preferred_time!r} "
                    f"of activity {activity.id}"
                )
            self.preferred.append(preferred)

    @property
    def size(self) -> int:
        return len(self.durations)

    def travel_cost(self, order: Sequence[int]) -> float:
        return sum(self.matrix.duration(a, b) for a, b in zip(order, order[1:]))

    def time_window_penalty(self, order: Sequence[int]) -> float:
        penalty = 0.0
        clock = floor_to_minute(self.start_time)
        last = len(order) - 1
        for position, index in enumerate(order):
            if not is_open_at(self.windows[index], clock):
                penalty += self.settings.closed_penalty_seconds
            preferred = self.preferred[index]
            if preferred is not None:
                penalty += abs(clock - preferred) * self.settings.preferred_time_coefficient
            clock += self.durations[index]
            if position < last:
                travel = self.matrix.duration(index, order[position + 1])
                # Misma aritmetica que ActivityScheduler (horas al minuto)
                clock = floor_to_minute(floor_to_minute(clock) + travel)
        return penalty

    def priority_bonus(self, order: Sequence[int]) -> float:
        """Bonus (positivo) por colocar pronto las actividades de prioridad alta."""
        bonus = 0.0
        total = len(order)
        for position, index in enumerate(order):
            if self.priorities[index] >= self.settings.high_priority_threshold:
                bonus += (total - 1 - position) * self.settings.priority_bonus_seconds
        return bonus

    def breakdown(self, order: Sequence[int]) -> ScoreBreakdown:
        return ScoreBreakdown(
            travel=self.travel_cost(order),
            time_window_penalty=self.time_window_penalty(order),
            priority_bonus=self.priority_bonus(order),
        )

    def score(self, order: Sequence[int]) -> float:
        return self.travel_cost(order) + self.time_window_penalty(order) - self.priority_bonus(order)
