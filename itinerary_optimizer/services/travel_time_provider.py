"""
Proveedores de tiempos de viaje (colaborador externo).

Contrato: ``fetch_matrix(coordinates, mode)`` devuelve la matriz completa de
pares o lanza ProviderError (red, cuota, status no OK). Quien consume debe
tratar cualquier fallo como recuperable.
"""

import logging
from typing import Dict, List, Optional

import httpx

from itinerary_optimizer.config import config, routing_config
from itinerary_optimizer.errors import ProviderError
from itinerary_optimizer.models import (
    DEFAULT_TRAVEL_METERS,
    DEFAULT_TRAVEL_SECONDS,
    Coordinates,
    MatrixEntry,
    TransportMode,
    TravelTimeMatrix,
)
from itinerary_optimizer.services.geo import haversine_m
from itinerary_optimizer.services.time_windows import format_duration

logger = logging.getLogger(__name__)

GOOGLE_TRAVEL_MODES: Dict[str, str] = {
    "walking": "walking",
    "driving": "driving",
    "transit": "transit",
    "bicycling": "bicycling",
}

OSRM_PROFILES: Dict[str, str] = {
    "walking": "foot",
    "driving": "driving",
    "bicycling": "bike",
    "transit": "driving",
}

# Velocidades medias (m/s) para la estimacion offline
AVERAGE_SPEED_MS: Dict[str, float] = {
    "walking": 1.4,
    "bicycling": 4.2,
    "transit": 8.3,
    "driving": 13.9,
}


def _mode_value(mode) -> str:
    if isinstance(mode, TransportMode):
        return mode.value
    return str(mode or "walking").lower()


def _fallback_entry() -> MatrixEntry:
    return MatrixEntry(
        duration=DEFAULT_TRAVEL_SECONDS,
        distance=DEFAULT_TRAVEL_METERS,
        estimated=True,
    )


class TravelTimeProvider:
    """Interfaz de un proveedor de matrices de tiempos de viaje."""

    name = "base"

    async def fetch_matrix(self, coordinates: List[Coordinates], mode: str) -> TravelTimeMatrix:
        raise NotImplementedError

    async def aclose(self) -> None:
        return None


class _HttpProvider(TravelTimeProvider):
    """Gestion compartida del cliente httpx."""

    def __init__(
        self,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.timeout = timeout if timeout is not None else routing_config.TIMEOUT_SECONDS
        self._http_client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._http_client is None or self._http_client.is_closed:
            self._http_client = httpx.AsyncClient(
                timeout=self.timeout,
                limits=httpx.Limits(max_connections=20, max_keepalive_connections=10),
            )
            self._owns_client = True
        return self._http_client

    async def _get_json(self, url: str, params: Optional[dict] = None) -> dict:
        client = await self._get_client()
        try:
            response = await client.get(url, params=params)
        except httpx.TimeoutException as e:
            raise ProviderError(f"{self.name} request timed out", status="TIMEOUT") from e
        except httpx.HTTPError as e:
            raise ProviderError(f"{self.name} request failed: {e}", status="NETWORK_ERROR") from e

        if response.status_code == 429:
            raise ProviderError(f"{self.name} quota exceeded", status="OVER_QUERY_LIMIT")
        if response.status_code != 200:
            raise ProviderError(
                f"{self.name} error: HTTP {response.status_code}",
                status=str(response.status_code),
            )
        try:
            return response.json()
        except ValueError as e:
            raise ProviderError(f"{self.name} returned invalid JSON", status="INVALID_RESPONSE") from e

    async def aclose(self) -> None:
        if self._owns_client and self._http_client and not self._http_client.is_closed:
            await self._http_client.aclose()


class GoogleDistanceMatrixProvider(_HttpProvider):
    """Google Distance Matrix API (origins == destinations)."""

    name = "google"

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(timeout=timeout, client=client)
        self.api_key = api_key if api_key is not None else routing_config.GOOGLE_MAPS_API_KEY
        self.base_url = base_url or routing_config.GOOGLE_DISTANCE_MATRIX_URL

    @staticmethod
    def travel_mode(mode) -> str:
        return GOOGLE_TRAVEL_MODES.get(_mode_value(mode), "walking")

    async def fetch_matrix(self, coordinates: List[Coordinates], mode: str) -> TravelTimeMatrix:
        locations = "|".join(c.as_param() for c in coordinates)
        params = {
            "origins": locations,
            "destinations": locations,
            "mode": self.travel_mode(mode),
            "key": self.api_key,
        }
        logger.debug(f"[Google] Distance matrix {len(coordinates)}x{len(coordinates)} mode={params['mode']}")
        data = await self._get_json(self.base_url, params=params)

        status = data.get("status")
        if status != "OK":
            raise ProviderError(f"Distance Matrix API status: {status}", status=status)

        rows = data.get("rows") or []
        n = len(coordinates)
        entries: List[List[Optional[MatrixEntry]]] = []
        for i in range(n):
            elements = rows[i].get("elements", []) if i < len(rows) else []
            row: List[Optional[MatrixEntry]] = []
            for j in range(n):
                element = elements[j] if j < len(elements) else None
                if element and element.get("status") == "OK":
                    row.append(MatrixEntry(
                        duration=float(element["duration"]["value"]),
                        distance=float(element["distance"]["value"]),
                        duration_text=element["duration"].get("text"),
                        distance_text=element["distance"].get("text"),
                    ))
                else:
                    if i != j:
                        logger.warning(
                            f"[Google] Element {i}->{j} status "
                            f"{element.get('status') if element else 'MISSING'}, using default"
                        )
                    row.append(_fallback_entry())
            entries.append(row)
        return TravelTimeMatrix(entries=entries, source=self.name)


class OSRMTableProvider(_HttpProvider):
    """Servicio table de OSRM (duraciones y distancias en una sola llamada)."""

    name = "osrm"

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(timeout=timeout, client=client)
        self.base_url = base_url

    def table_url(self, mode) -> str:
        profile = OSRM_PROFILES.get(_mode_value(mode), "driving")
        if self.base_url:
            return f"{self.base_url.rstrip('/')}/table/v1/{profile}"
        return routing_config.get_osrm_table_url(profile)

    async def fetch_matrix(self, coordinates: List[Coordinates], mode: str) -> TravelTimeMatrix:
        # OSRM usa lon,lat
        coord_str = ";".join(f"{c.lng},{c.lat}" for c in coordinates)
        url = f"{self.table_url(mode)}/{coord_str}"
        data = await self._get_json(url, params={"annotations": "duration,distance"})

        if data.get("code") != "Ok" or "durations" not in data:
            raise ProviderError(f"OSRM table error: {data.get('code')}", status=data.get("code"))

        durations = data.get("durations") or []
        distances = data.get("distances") or []
        n = len(coordinates)
        entries: List[List[Optional[MatrixEntry]]] = []
        for i in range(n):
            row: List[Optional[MatrixEntry]] = []
            for j in range(n):
                duration = durations[i][j] if i < len(durations) and j < len(durations[i]) else None
                distance = distances[i][j] if i < len(distances) and j < len(distances[i]) else None
                if duration is None:
                    row.append(_fallback_entry())
                    continue
                row.append(MatrixEntry(
                    duration=float(duration),
                    distance=float(distance) if distance is not None else DEFAULT_TRAVEL_METERS,
                    duration_text=format_duration(duration),
                    estimated=distance is None,
                ))
            entries.append(row)
        return TravelTimeMatrix(entries=entries, source=self.name)


class HaversineProvider(TravelTimeProvider):
    """Estimacion offline: distancia Haversine a velocidad media por modo."""

    name = "haversine"

    def __init__(self, speeds: Optional[Dict[str, float]] = None):
        self.speeds = dict(AVERAGE_SPEED_MS)
        if speeds:
            self.speeds.update(speeds)

    async def fetch_matrix(self, coordinates: List[Coordinates], mode: str) -> TravelTimeMatrix:
        speed = self.speeds.get(_mode_value(mode), self.speeds["walking"])
        entries: List[List[Optional[MatrixEntry]]] = []
        for start in coordinates:
            row: List[Optional[MatrixEntry]] = []
            for end in coordinates:
                meters = haversine_m(start, end)
                seconds = float(int(meters / speed))
                row.append(MatrixEntry(
                    duration=seconds,
                    distance=float(int(meters)),
                    duration_text=format_duration(seconds),
                    estimated=True,
                ))
            entries.append(row)
        return TravelTimeMatrix(entries=entries, source=self.name)


def create_provider(name: Optional[str] = None) -> TravelTimeProvider:
    """Construye el proveedor configurado (``TRAVEL_PROVIDER``)."""
    selected = (name or config.TRAVEL_PROVIDER or "haversine").lower()
    if selected == "google":
        if not routing_config.has_google_key():
            logger.warning("[Provider] GOOGLE_MAPS_API_KEY not set, using haversine estimation")
            return HaversineProvider()
        return GoogleDistanceMatrixProvider()
    if selected == "osrm":
        return OSRMTableProvider()
    return HaversineProvider()
