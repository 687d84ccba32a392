"""
Cache con TTL de matrices de tiempos de viaje.

La clave es el conjunto de coordenadas distintas (redondeadas) mas el modo de
transporte. Un fallo del proveedor nunca se propaga: se sintetiza una matriz
por defecto (600 s / 500 m fuera de la diagonal) que no se cachea.
"""

import asyncio
import logging
import time
from typing import Dict, List, Optional, Sequence

from itinerary_optimizer.config import routing_config
from itinerary_optimizer.errors import ProviderError
from itinerary_optimizer.models import (
    DEFAULT_TRAVEL_METERS,
    DEFAULT_TRAVEL_SECONDS,
    CacheEntry,
    Coordinates,
    MatrixEntry,
    TransportMode,
    TravelTimeMatrix,
)
from itinerary_optimizer.services.travel_time_provider import TravelTimeProvider
from itinerary_optimizer.type_defs import Clock, LatLng, MatrixCacheKey, StatsDict

logger = logging.getLogger(__name__)

_SAME_PLACE = MatrixEntry(duration=0, distance=0)


class TravelTimeCache:
    """Memoiza matrices del proveedor durante ``ttl_seconds``."""

    def __init__(
        self,
        provider: TravelTimeProvider,
        ttl_seconds: Optional[float] = None,
        max_entries: Optional[int] = None,
        precision: Optional[int] = None,
        timeout: Optional[float] = None,
        clock: Clock = time.monotonic,
        default_duration: float = DEFAULT_TRAVEL_SECONDS,
        default_distance: float = DEFAULT_TRAVEL_METERS,
    ):
        self.provider = provider
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else routing_config.CACHE_TTL_SECONDS
        self.max_entries = max_entries or routing_config.CACHE_MAX_ENTRIES
        self.precision = precision if precision is not None else routing_config.CACHE_PRECISION
        self.timeout = timeout if timeout is not None else routing_config.TIMEOUT_SECONDS
        self.default_duration = default_duration
        self.default_distance = default_distance
        self._clock = clock
        self._entries: Dict[MatrixCacheKey, CacheEntry] = {}
        self._locks: Dict[MatrixCacheKey, asyncio.Lock] = {}
        self._stats = {'provider_calls': 0, 'cache_hits': 0, 'cache_misses': 0, 'fallbacks': 0}

    # ------------------------------------------------------------------
    # API publica
    # ------------------------------------------------------------------

    async def get(self, coordinates: Sequence[Optional[Coordinates]], mode) -> TravelTimeMatrix:
        """
        Matriz N x N para las posiciones de un dia.

        ``coordinates`` puede contener None (actividad sin ubicacion): sus
        pares reciben la entrada por defecto. Si todas las ubicaciones
        conocidas coinciden se consulta igualmente al proveedor con el punto
        repetido, de modo que un fallo da la matriz por defecto completa.
        """
        mode_value = mode.value if isinstance(mode, TransportMode) else str(mode)
        size = len(coordinates)
        positions: List[Optional[LatLng]] = [self._round(c) for c in coordinates]

        distinct: List[LatLng] = []
        for point in positions:
            if point is not None and point not in distinct:
                distinct.append(point)

        if sum(1 for point in positions if point is not None) < 2:
            return self._default_matrix(size, reason="fewer than 2 known locations")

        colocated = len(distinct) == 1
        points = distinct * 2 if colocated else distinct

        key: MatrixCacheKey = (tuple(points), mode_value)
        lock = self._locks.setdefault(key, asyncio.Lock())
        async with lock:
            entry = self._entries.get(key)
            now = self._clock()
            if entry is not None and now - entry.fetched_at < self.ttl_seconds:
                entry.hits += 1
                self._stats['cache_hits'] += 1
                logger.debug(f"[TravelCache] Hit for {len(distinct)} locations ({mode_value})")
                return self._expand(entry.matrix, positions, distinct, colocated)

            if entry is not None:
                del self._entries[key]
            self._stats['cache_misses'] += 1

            base = await self._fetch(points, mode_value)
            if base is not None:
                self._entries[key] = CacheEntry(matrix=base, fetched_at=self._clock())
                self._evict_overflow()

        if base is None:
            self._drop_lock(key)
            return self._default_matrix(size, reason="provider failure")
        return self._expand(base, positions, distinct, colocated)

    def clear(self) -> None:
        self._entries.clear()
        self._locks = {k: v for k, v in self._locks.items() if v.locked()}
        logger.info("[TravelCache] Cache cleared")

    @property
    def size(self) -> int:
        return len(self._entries)

    def get_stats(self) -> StatsDict:
        stats = self._stats.copy()
        stats['size'] = self.size
        return stats

    # ------------------------------------------------------------------
    # Internos
    # ------------------------------------------------------------------

    def _round(self, point: Optional[Coordinates]) -> Optional[LatLng]:
        if point is None:
            return None
        return (round(point.lat, self.precision), round(point.lng, self.precision))

    async def _fetch(self, distinct: List[LatLng], mode: str) -> Optional[TravelTimeMatrix]:
        coords = [Coordinates(lat=lat, lng=lng) for lat, lng in distinct]
        self._stats['provider_calls'] += 1
        try:
            matrix = await asyncio.wait_for(
                self.provider.fetch_matrix(coords, mode),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"[TravelCache] Provider timeout after {self.timeout}s, using default matrix")
            return None
        except ProviderError as e:
            logger.warning(f"[TravelCache] Provider error ({e.status}): {e}, using default matrix")
            return None
        except Exception as e:
            logger.error(f"[TravelCache] Unexpected provider error: {e}", exc_info=True)
            return None

        if matrix is None or matrix.size != len(distinct):
            logger.warning(
                f"[TravelCache] Provider returned a matrix of size "
                f"{getattr(matrix, 'size', None)} for {len(distinct)} locations, using default matrix"
            )
            return None
        return matrix

    def _default_matrix(self, size: int, reason: str) -> TravelTimeMatrix:
        if size >= 2:
            self._stats['fallbacks'] += 1
            logger.info(f"[TravelCache] Default matrix for {size} activities: {reason}")
        return TravelTimeMatrix.default(size, self.default_duration, self.default_distance)

    def _expand(
        self,
        base: TravelTimeMatrix,
        positions: List[Optional[LatLng]],
        distinct: List[LatLng],
        colocated: bool = False,
    ) -> TravelTimeMatrix:
        """Proyecta la matriz de coordenadas distintas sobre las N posiciones del dia."""
        index = {point: k for k, point in enumerate(distinct)}
        # Con un unico punto el proveedor devuelve el tramo 0 -> 1 del punto repetido
        same_place = base.entry(0, 1) if colocated else _SAME_PLACE
        entries: List[List[Optional[MatrixEntry]]] = []
        missing = 0
        for i, origin in enumerate(positions):
            row: List[Optional[MatrixEntry]] = []
            for j, destination in enumerate(positions):
                if i == j:
                    row.append(None)
                elif origin is None or destination is None:
                    row.append(None)
                    missing += 1
                elif origin == destination:
                    row.append(same_place)
                else:
                    row.append(base.entry(index[origin], index[destination]))
            entries.append(row)
        if missing:
            logger.debug(f"[TravelCache] {missing} pairs without coordinates use default travel")
        return TravelTimeMatrix(
            entries=entries,
            is_default=base.is_default,
            default_duration=self.default_duration,
            default_distance=self.default_distance,
            source=base.source,
        )

    def _drop_lock(self, key: MatrixCacheKey) -> None:
        lock = self._locks.get(key)
        if lock is not None and not lock.locked():
            del self._locks[key]

    def _evict_overflow(self) -> None:
        if len(self._entries) <= self.max_entries:
            return
        ordered = sorted(self._entries.items(), key=lambda item: item[1].fetched_at)
        for key, _ in ordered[: len(self._entries) - self.max_entries]:
            del self._entries[key]
            self._drop_lock(key)
