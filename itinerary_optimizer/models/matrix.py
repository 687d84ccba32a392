"""
Matriz de tiempos de viaje entre las actividades de un dia.
"""

from dataclasses import dataclass, field
from typing import List, Optional

DEFAULT_TRAVEL_SECONDS = 600
DEFAULT_TRAVEL_METERS = 500


@dataclass(frozen=True)
class MatrixEntry:
    """Tramo i -> j: duracion en segundos y distancia en metros."""
    duration: float
    distance: float
    duration_text: Optional[str] = None
    distance_text: Optional[str] = None
    estimated: bool = False


ZERO_ENTRY = MatrixEntry(duration=0, distance=0)


@dataclass
class TravelTimeMatrix:
    """
    Matriz cuadrada N x N. La diagonal es siempre {0, 0}.

    No se asume simetria: ``entries[i][j]`` es el tramo de i hacia j y puede
    diferir de ``entries[j][i]`` (transito, sentidos unicos).
    """
    entries: List[List[Optional[MatrixEntry]]]
    is_default: bool = False
    default_duration: float = DEFAULT_TRAVEL_SECONDS
    default_distance: float = DEFAULT_TRAVEL_METERS
    source: str = "provider"

    def __post_init__(self) -> None:
        n = len(self.entries)
        for i, row in enumerate(self.entries):
            if len(row) != n:
                raise ValueError(f"Travel matrix row {i} has {len(row)} entries, expected {n}")
            row[i] = ZERO_ENTRY

    @property
    def size(self) -> int:
        return len(self.entries)

    def entry(self, i: int, j: int) -> MatrixEntry:
        if i == j:
            return ZERO_ENTRY
        try:
            value = self.entries[i][j]
        except IndexError:
            value = None
        if value is None:
            return MatrixEntry(
                duration=self.default_duration,
                distance=self.default_distance,
                estimated=True,
            )
        return value

    def duration(self, i: int, j: int) -> float:
        return self.entry(i, j).duration

    def distance(self, i: int, j: int) -> float:
        return self.entry(i, j).distance

    @classmethod
    def default(
        cls,
        size: int,
        duration: float = DEFAULT_TRAVEL_SECONDS,
        distance: float = DEFAULT_TRAVEL_METERS,
        source: str = "default",
    ) -> "TravelTimeMatrix":
        """Matriz sintetica: fuera de la diagonal todo es ``duration``/``distance``."""
        fallback = MatrixEntry(duration=duration, distance=distance, estimated=True)
        entries = [[fallback for _ in range(size)] for _ in range(size)]
        return cls(
            entries=entries,
            is_default=True,
            default_duration=duration,
            default_distance=distance,
            source=source,
        )

    def to_list(self) -> List[List[dict]]:
        return [
            [{"duration": self.duration(i, j), "distance": self.distance(i, j)} for j in range(self.size)]
            for i in range(self.size)
        ]


@dataclass
class CacheEntry:
    """Matriz cacheada para un conjunto de coordenadas distintas y un modo."""
    matrix: TravelTimeMatrix
    fetched_at: float
    hits: int = field(default=0)
