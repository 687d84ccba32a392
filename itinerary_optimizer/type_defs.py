"""
Type definitions for the itinerary optimizer.

This module contains type aliases used across services.
"""

from typing import Any, Callable, Dict, List, Optional, Tuple

# =============================================================================
# Basic type aliases
# =============================================================================

# Coordinates as (lat, lng) tuples, rounded for cache keys
LatLng = Tuple[float, float]

# Seconds since midnight
ClockSeconds = float

# Permutation of activity indices
Order = List[int]

# Opening interval [open, close) in seconds since midnight
Interval = Tuple[ClockSeconds, ClockSeconds]

# =============================================================================
# Cache types
# =============================================================================

# (distinct rounded coordinates, transport mode)
MatrixCacheKey = Tuple[Tuple[LatLng, ...], str]

# Monotonic clock injected into the cache
Clock = Callable[[], float]

# =============================================================================
# API types
# =============================================================================

# Response dictionary
APIResponse = Dict[str, Any]

# Stats dictionary
StatsDict = Dict[str, int]

# Hook receiving the solver result of each day
SolveHook = Optional[Callable[..., None]]
