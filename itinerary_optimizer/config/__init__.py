"""
Configuration module for the itinerary optimizer.

Centralizes application settings loaded from environment variables.
Routing/provider settings live in ``config.routing`` and the scoring
constants in ``config.optimizer``.
"""

import os

from itinerary_optimizer.config.optimizer import OptimizerSettings
from itinerary_optimizer.config.routing import RoutingConfig, routing_config


class Config:
    """Application configuration loaded from environment variables."""

    APP_ENV: str = os.getenv("APP_ENV", "development").strip().lower() or "development"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"

    # google | osrm | haversine
    TRAVEL_PROVIDER: str = os.getenv(
        "TRAVEL_PROVIDER",
        "google" if os.getenv("GOOGLE_MAPS_API_KEY") else "haversine",
    ).strip().lower()

    @classmethod
    def get_config_dict(cls) -> dict:
        """Return configuration as dictionary (for debugging)."""
        return {
            "APP_ENV": cls.APP_ENV,
            "LOG_LEVEL": cls.LOG_LEVEL,
            "TRAVEL_PROVIDER": cls.TRAVEL_PROVIDER,
            **routing_config.get_config_dict(),
        }


# Global configuration instance
config = Config()

__all__ = ["Config", "config", "OptimizerSettings", "RoutingConfig", "routing_config"]
