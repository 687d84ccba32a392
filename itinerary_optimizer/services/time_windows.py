"""
Utilidades de reloj y horarios de apertura.

Todos los tiempos se manejan en segundos desde medianoche. Los horarios de
apertura se normalizan a una lista de intervalos [apertura, cierre) que el
scorer evalua en cada llegada.
"""

import logging
import re
from datetime import date
from typing import Any, List, Optional

from itinerary_optimizer.errors import DataError
from itinerary_optimizer.type_defs import ClockSeconds, Interval

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 3600

ALWAYS_OPEN: List[Interval] = [(0.0, float(SECONDS_PER_DAY))]

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

_CLOCK_RE = re.compile(
    r"^\s*(?P<h>\d{1,2})(?::(?P<m>\d{2}))?(?::(?P<s>\d{2}))?\s*(?P<ampm>[ap]\.?\s?m\.?)?\s*$",
    re.IGNORECASE,
)
_RANGE_SPLIT_RE = re.compile(r"\s*(?:-|–|—|\bto\b)\s*", re.IGNORECASE)
_ALWAYS_OPEN_TEXTS = {"open 24 hours", "24/7", "24 hours", "always open", "00:00-24:00"}
_CLOSED_TEXTS = {"closed", "cerrado"}


# =============================================================================
# Reloj
# =============================================================================

def parse_clock(value: Any) -> Optional[ClockSeconds]:
    """
    "HH:MM", "H:MM:SS", "9 AM", "9:30 pm" -> segundos desde medianoche.

    Devuelve None si el texto no es una hora valida. "24:00" se acepta como
    fin de dia.
    """
    if value is None:
        return None
    match = _CLOCK_RE.match(str(value))
    if not match:
        return None
    hours = int(match.group("h"))
    minutes = int(match.group("m") or 0)
    seconds = int(match.group("s") or 0)
    ampm = match.group("ampm")
    if minutes > 59 or seconds > 59:
        return None
    if ampm:
        if not 1 <= hours <= 12:
            return None
        is_pm = ampm.lower().startswith("p")
        hours = hours % 12 + (12 if is_pm else 0)
    if hours > 24 or (hours == 24 and (minutes or seconds)):
        return None
    return float(hours * 3600 + minutes * 60 + seconds)


def floor_to_minute(seconds: ClockSeconds) -> ClockSeconds:
    """Trunca al minuto, igual que ``format_clock`` al publicar la hora."""
    return float(int(seconds) // 60 * 60)


def format_clock(seconds: ClockSeconds) -> str:
    """Segundos desde medianoche -> "HH:MM" (modulo 24 h)."""
    total = int(seconds) % SECONDS_PER_DAY
    return f"{total // 3600:02d}:{(total % 3600) // 60:02d}"


def format_duration(seconds: float) -> str:
    """600 -> "10 min", 5400 -> "1h 30m"."""
    minutes = int(round(seconds / 60))
    if minutes < 60:
        return f"{minutes} min"
    return f"{minutes // 60}h {minutes % 60}m"


def weekday_of(day_date: Optional[str]) -> Optional[int]:
    """Dia de la semana (lunes=0) de una fecha ISO, o None."""
    if not day_date:
        return None
    try:
        return date.fromisoformat(str(day_date)[:10]).weekday()
    except ValueError:
        return None


# =============================================================================
# Horarios de apertura
# =============================================================================

def _parse_range(text: str) -> List[Interval]:
    lowered = text.strip().lower()
    if lowered in _ALWAYS_OPEN_TEXTS:
        return list(ALWAYS_OPEN)
    if lowered in _CLOSED_TEXTS:
        return []
    parts = _RANGE_SPLIT_RE.split(text.strip())
    if len(parts) != 2:
        raise DataError(f"Unrecognized opening-hours range: {text!r}")
    opens, closes = parse_clock(parts[0]), parse_clock(parts[1])
    if opens is None or closes is None:
        raise DataError(f"Unrecognized opening-hours range: {text!r}")
    if opens == closes:
        return list(ALWAYS_OPEN)
    if opens < closes:
        return [(opens, closes)]
    # Cruza medianoche
    return [(opens, float(SECONDS_PER_DAY)), (0.0, closes)]


def _parse_text(text: str) -> List[Interval]:
    intervals: List[Interval] = []
    for chunk in re.split(r"[,;]", text):
        if chunk.strip():
            intervals.extend(_parse_range(chunk))
    return intervals


def _parse_weekday_text(lines: List[str], weekday: Optional[int]) -> List[Interval]:
    by_day = {}
    for line in lines:
        name, sep, hours = str(line).partition(":")
        if not sep or name.strip().lower() not in WEEKDAYS:
            raise DataError(f"Unrecognized weekday_text line: {line!r}")
        by_day[WEEKDAYS.index(name.strip().lower())] = hours.strip()

    if weekday is not None:
        if weekday not in by_day:
            raise DataError(f"No opening hours listed for {WEEKDAYS[weekday]}")
        return _parse_text(by_day[weekday])

    intervals: List[Interval] = []
    for hours in by_day.values():
        intervals.extend(_parse_text(hours))
    return intervals


def parse_opening_hours(hours: Any, weekday: Optional[int] = None) -> List[Interval]:
    """
    Normaliza un horario de apertura a intervalos [apertura, cierre).

    Formatos aceptados: "09:00-17:00" (varios separados por coma), "Open 24
    hours", "Closed", listas de esos textos, {"open", "close"} y el formato de
    Google Places {"weekday_text": [...]}. Lanza DataError si no se reconoce.
    """
    if isinstance(hours, str):
        return _parse_text(hours)
    if isinstance(hours, (list, tuple)):
        intervals: List[Interval] = []
        for item in hours:
            intervals.extend(parse_opening_hours(item, weekday))
        return intervals
    if isinstance(hours, dict):
        if "weekday_text" in hours or "weekdayText" in hours:
            lines = hours.get("weekday_text") or hours.get("weekdayText") or []
            return _parse_weekday_text(list(lines), weekday)
        if "open" in hours and "close" in hours:
            return _parse_range(f"{hours['open']}-{hours['close']}")
    raise DataError(f"Unsupported opening-hours format: {type(hours).__name__}")


def is_open_at(intervals: Optional[List[Interval]], clock: ClockSeconds) -> bool:
    """True si ``clock`` cae dentro de algun intervalo. None = sin restriccion."""
    if intervals is None:
        return True
    moment = clock % SECONDS_PER_DAY
    return any(opens <= moment < closes for opens, closes in intervals)


def normalize_opening_hours(hours: Any, weekday: Optional[int] = None, activity_id: Any = None) -> Optional[List[Interval]]:
    """
    Version tolerante de ``parse_opening_hours`` para la ingesta.

    Devuelve None (sin restriccion) cuando no hay horario o no se reconoce.
    """
    if hours is None or hours == "" or hours == {}:
        return None
    try:
        return parse_opening_hours(hours, weekday)
    except DataError as e:
        logger.warning(f"[TimeWindows] Ignoring opening hours of activity {activity_id}: {e}")
        return None
