"""
Normalizacion de coordenadas y distancia Haversine.
"""

import logging
import math
from typing import Any, Optional

from pydantic import ValidationError

from itinerary_optimizer.models import Activity, Coordinates

logger = logging.getLogger(__name__)

EARTH_RADIUS_M = 6371000


def haversine_m(start: Coordinates, end: Coordinates) -> float:
    """Distancia Haversine en metros."""
    lat1 = math.radians(start.lat)
    lat2 = math.radians(end.lat)
    dlat = math.radians(end.lat - start.lat)
    dlng = math.radians(end.lng - start.lng)
    a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def _to_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def normalize_coordinates(activity: Activity) -> Optional[Coordinates]:
    """
    Coordenadas canonicas de una actividad, o None si son desconocidas.

    ``location.coordinates`` tiene prioridad sobre ``location.lat/lng``.
    (0, 0), valores no numericos o fuera de rango cuentan como desconocidos.
    """
    location = activity.location
    if location is None:
        return None

    candidates = []
    if location.coordinates:
        candidates.append((location.coordinates.get("lat"), location.coordinates.get("lng")))
    candidates.append((location.lat, location.lng))

    for raw_lat, raw_lng in candidates:
        lat, lng = _to_float(raw_lat), _to_float(raw_lng)
        if lat is None or lng is None or (lat == 0 and lng == 0):
            continue
        try:
            return Coordinates(lat=lat, lng=lng)
        except ValidationError:
            continue

    logger.debug(f"[Geo] Activity {activity.id} has no usable coordinates")
    return None
