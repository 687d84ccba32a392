"""
Tests for the Pydantic itinerary models and the travel-time matrix.
"""

import pytest
from pydantic import ValidationError

from itinerary_optimizer.models import (
    Activity,
    Coordinates,
    Itinerary,
    MatrixEntry,
    Preferences,
    TransportMode,
    TravelTimeMatrix,
)


# =============================================================================
# Itinerary models
# =============================================================================

class TestCoordinates:
    def test_valid(self):
        coords = Coordinates(lat=41.38, lng=2.17)
        assert coords.as_param() == "41.38,2.17"

    def test_out_of_range(self):
        with pytest.raises(ValidationError):
            Coordinates(lat=91, lng=0)
        with pytest.raises(ValidationError):
            Coordinates(lat=0, lng=-181)


class TestActivity:
    """Tests for lenient activity ingestion."""

    def test_camel_case_input(self):
        activity = Activity.model_validate({
            "id": "a1",
            "estimatedDuration": 90,
            "preferredTime": "10:00",
            "openingHours": "09:00-17:00",
        })
        assert activity.estimated_duration == 90
        assert activity.preferred_time == "10:00"
        assert activity.opening_hours == "09:00-17:00"

    def test_snake_case_input(self):
        activity = Activity(id=1, estimated_duration=30)
        assert activity.estimated_duration == 30

    @pytest.mark.parametrize("raw,expected", [(9, 5), (0, 1), ("4", 4), ("high", None), (None, None)])
    def test_priority_is_clamped(self, raw, expected):
        assert Activity(id=1, priority=raw).priority == expected

    @pytest.mark.parametrize("raw", [-10, "long", None, True])
    def test_invalid_duration_becomes_missing(self, raw):
        assert Activity(id=1, estimated_duration=raw).estimated_duration is None

    def test_unknown_fields_are_preserved(self):
        activity = Activity.model_validate({"id": "a1", "category": "museum", "rating": 4.7})
        dumped = activity.model_dump(by_alias=True, exclude_none=True)
        assert dumped["category"] == "museum"
        assert dumped["rating"] == 4.7


class TestPreferences:
    def test_defaults(self):
        prefs = Preferences()
        assert prefs.transport_mode is None
        assert prefs.start_time is None

    def test_mode_is_case_insensitive(self):
        assert Preferences(transportMode="DRIVING").transport_mode == TransportMode.DRIVING

    def test_unknown_mode_is_dropped(self):
        assert Preferences(transportMode="teleport").transport_mode is None


class TestItinerary:
    def test_round_trip_keeps_camel_case(self):
        payload = {
            "itinerary": [{"date": "2024-06-03", "activities": [{"id": "a", "estimatedDuration": 60}]}],
            "tripName": "Barcelona",
        }
        dumped = Itinerary.model_validate(payload).model_dump(by_alias=True, exclude_none=True)
        assert dumped["tripName"] == "Barcelona"
        assert dumped["itinerary"][0]["activities"][0]["estimatedDuration"] == 60


# =============================================================================
# Travel-time matrix
# =============================================================================

class TestTravelTimeMatrix:
    def test_default_matrix(self):
        matrix = TravelTimeMatrix.default(3)
        assert matrix.is_default
        for i in range(3):
            for j in range(3):
                expected = (0, 0) if i == j else (600, 500)
                assert (matrix.duration(i, j), matrix.distance(i, j)) == expected

    def test_diagonal_is_forced_to_zero(self):
        entry = MatrixEntry(duration=99, distance=99)
        matrix = TravelTimeMatrix(entries=[[entry, entry], [entry, entry]])
        assert matrix.duration(0, 0) == 0
        assert matrix.duration(1, 1) == 0
        assert matrix.duration(0, 1) == 99

    def test_missing_entry_uses_default(self):
        matrix = TravelTimeMatrix(entries=[[None, None], [MatrixEntry(duration=42, distance=10), None]])
        assert matrix.entry(0, 1).estimated
        assert matrix.duration(0, 1) == 600
        assert matrix.distance(0, 1) == 500
        assert matrix.duration(1, 0) == 42

    def test_asymmetric_entries_are_kept(self):
        matrix = TravelTimeMatrix(entries=[
            [None, MatrixEntry(duration=100, distance=1)],
            [MatrixEntry(duration=300, distance=1), None],
        ])
        assert matrix.duration(0, 1) == 100
        assert matrix.duration(1, 0) == 300

    def test_non_square_is_rejected(self):
        with pytest.raises(ValueError):
            TravelTimeMatrix(entries=[[None, None], [None]])

    def test_to_list(self):
        assert TravelTimeMatrix.default(2).to_list() == [
            [{"duration": 0, "distance": 0}, {"duration": 600, "distance": 500}],
            [{"duration": 600, "distance": 500}, {"duration": 0, "distance": 0}],
        ]
