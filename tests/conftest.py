"""
Pytest configuration and shared fixtures for the itinerary optimizer tests.
"""
import os
import sys
from typing import List

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from itinerary_optimizer.models import Activity, Coordinates, Day, Itinerary
from tests.fakes import FakeClock, FixedProvider, LineProvider, make_activity


# ============================================================
# FIXTURES
# ============================================================

@pytest.fixture
def fixed_provider() -> FixedProvider:
    """All pairs 600 s / 500 m."""
    return FixedProvider()


@pytest.fixture
def line_provider() -> LineProvider:
    return LineProvider()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def coordinates() -> List[Coordinates]:
    """Three distinct points in Barcelona."""
    return [
        Coordinates(lat=41.3851, lng=2.1734),
        Coordinates(lat=41.4036, lng=2.1744),
        Coordinates(lat=41.3917, lng=2.1649),
    ]


@pytest.fixture
def scenario_a_activities() -> List[Activity]:
    """A(priority 5, 60m), B(priority 1, 30m), C(priority 3, 45m)."""
    return [
        make_activity("A", lat=41.3851, lng=2.1734, duration=60, priority=5),
        make_activity("B", lat=41.4036, lng=2.1744, duration=30, priority=1),
        make_activity("C", lat=41.3917, lng=2.1649, duration=45, priority=3),
    ]


@pytest.fixture
def scenario_a_itinerary(scenario_a_activities) -> Itinerary:
    return Itinerary(itinerary=[Day(date="2024-06-03", activities=scenario_a_activities)])


@pytest.fixture
def scenario_a_payload() -> dict:
    """Scenario A as the JSON payload produced by the itinerary generator."""
    return {
        "itinerary": [
            {
                "date": "2024-06-03",
                "theme": "Old town",
                "activities": [
                    {"id": "A", "name": "Cathedral", "priority": 5, "estimatedDuration": 60,
                     "location": {"coordinates": {"lat": 41.3851, "lng": 2.1734}}},
                    {"id": "B", "name": "Market", "priority": 1, "estimatedDuration": 30,
                     "location": {"coordinates": {"lat": 41.4036, "lng": 2.1744}}},
                    {"id": "C", "name": "Museum", "priority": 3, "estimatedDuration": 45,
                     "location": {"lat": 41.3917, "lng": 2.1649}},
                ],
            }
        ]
    }
