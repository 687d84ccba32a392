"""
Configuracion especifica para los proveedores de tiempos de viaje.
"""

import os


class RoutingConfig:
    """Configuration class for travel-time providers and the matrix cache."""

    GOOGLE_MAPS_API_KEY: str = os.getenv("GOOGLE_MAPS_API_KEY", "")
    GOOGLE_DISTANCE_MATRIX_URL: str = os.getenv(
        "GOOGLE_DISTANCE_MATRIX_URL",
        "https://maps.googleapis.com/maps/api/distancematrix/json",
    )

    OSRM_BASE_URL: str = os.getenv("OSRM_BASE_URL", "https://router.project-osrm.org")

    TIMEOUT_SECONDS: float = float(os.getenv("ROUTING_TIMEOUT", "10.0"))

    CACHE_TTL_SECONDS: int = int(os.getenv("ROUTING_CACHE_TTL", "3600"))
    CACHE_MAX_ENTRIES: int = int(os.getenv("ROUTING_CACHE_MAX_ENTRIES", "512"))
    CACHE_PRECISION: int = int(os.getenv("ROUTING_CACHE_PRECISION", "5"))

    @classmethod
    def get_osrm_table_url(cls, profile: str) -> str:
        return f"{cls.OSRM_BASE_URL.rstrip('/')}/table/v1/{profile}"

    @classmethod
    def has_google_key(cls) -> bool:
        return bool(cls.GOOGLE_MAPS_API_KEY)

    @classmethod
    def get_config_dict(cls) -> dict:
        return {
            "GOOGLE_MAPS_API_KEY": "***" if cls.GOOGLE_MAPS_API_KEY else "",
            "GOOGLE_DISTANCE_MATRIX_URL": cls.GOOGLE_DISTANCE_MATRIX_URL,
            "OSRM_BASE_URL": cls.OSRM_BASE_URL,
            "TIMEOUT_SECONDS": cls.TIMEOUT_SECONDS,
            "CACHE_TTL_SECONDS": cls.CACHE_TTL_SECONDS,
            "CACHE_MAX_ENTRIES": cls.CACHE_MAX_ENTRIES,
            "CACHE_PRECISION": cls.CACHE_PRECISION,
        }


routing_config = RoutingConfig()
