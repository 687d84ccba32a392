"""
Convierte un orden de visita en horarios concretos.

Para cada actividad: inicio = reloj, fin = inicio + duracion; si no es la
ultima se anota el viaje al siguiente y el reloj avanza fin + viaje. El reloj
se trunca al minuto antes de cada inicio para que las horas publicadas
("HH:MM") cumplan fin + viaje == inicio del siguiente.
"""

import logging
from typing import List, Optional, Sequence

from itinerary_optimizer.config import OptimizerSettings
from itinerary_optimizer.models import Activity, TimeSlot, TransportMode, TravelInfo, TravelTimeMatrix
from itinerary_optimizer.services.route_scorer import activity_duration_seconds
from itinerary_optimizer.services.time_windows import floor_to_minute, format_clock, format_duration
from itinerary_optimizer.type_defs import ClockSeconds, Order

logger = logging.getLogger(__name__)


class ActivityScheduler:
    """Asigna timeSlot y travelToNext a copias de las actividades."""

    def __init__(self, settings: Optional[OptimizerSettings] = None):
        self.settings = settings or OptimizerSettings()

    def schedule(
        self,
        activities: Sequence[Activity],
        order: Order,
        matrix: TravelTimeMatrix,
        start_time: ClockSeconds,
        mode: TransportMode,
    ) -> List[Activity]:
        if sorted(order) != list(range(len(activities))):
            raise ValueError(f"Order {order} is not a permutation of {len(activities)} activities")

        scheduled: List[Activity] = []
        clock = floor_to_minute(start_time)
        last = len(order) - 1

        for position, index in enumerate(order):
            activity = activities[index]
            end = clock + activity_duration_seconds(activity, self.settings)
            update = {
                "time_slot": TimeSlot(start_time=format_clock(clock), end_time=format_clock(end)),
                "travel_to_next": None,
            }
            if position < last:
                travel = matrix.duration(index, order[position + 1])
                update["travel_to_next"] = TravelInfo(
                    duration=travel,
                    duration_text=format_duration(travel),
                    mode=mode,
                )
                clock = floor_to_minute(floor_to_minute(end) + travel)
            else:
                clock = end
            scheduled.append(activity.model_copy(update=update, deep=True))

        logger.debug(
            f"[Scheduler] {len(scheduled)} activities from {format_clock(start_time)} "
            f"to {format_clock(clock)}"
        )
        return scheduled
