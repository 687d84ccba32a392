"""Per-day route ordering and scheduling for travel itineraries."""

from itinerary_optimizer.models import Itinerary, Preferences
from itinerary_optimizer.services import ItineraryOptimizer, optimize_itinerary

__version__ = "0.1.0"

__all__ = ["Itinerary", "Preferences", "ItineraryOptimizer", "optimize_itinerary", "__version__"]
