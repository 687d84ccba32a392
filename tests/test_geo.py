"""
Tests para la normalizacion de coordenadas y la distancia Haversine.
"""

import pytest

from itinerary_optimizer.models import Activity, Coordinates
from itinerary_optimizer.services.geo import haversine_m, normalize_coordinates


def _activity(location):
    return Activity.model_validate({"id": 1, "name": "Test", "location": location})


class TestHaversine:
    def test_same_point_is_zero(self):
        point = Coordinates(lat=41.38, lng=2.17)
        assert haversine_m(point, point) == 0

    def test_one_hundredth_degree_latitude(self):
        distance = haversine_m(Coordinates(lat=41.0, lng=2.0), Coordinates(lat=41.01, lng=2.0))
        assert distance == pytest.approx(1112, rel=0.01)


class TestNormalizeCoordinates:
    """Tests for the single coordinate-normalization step."""

    def test_coordinates_object(self):
        coords = normalize_coordinates(_activity({"coordinates": {"lat": 41.38, "lng": 2.17}}))
        assert coords == Coordinates(lat=41.38, lng=2.17)

    def test_flat_lat_lng_strings(self):
        coords = normalize_coordinates(_activity({"lat": "48.8584", "lng": "2.2945"}))
        assert coords == Coordinates(lat=48.8584, lng=2.2945)

    def test_coordinates_take_precedence(self):
        coords = normalize_coordinates(_activity({
            "coordinates": {"lat": 40.0, "lng": 3.0},
            "lat": 10.0,
            "lng": 10.0,
        }))
        assert coords.lat == 40.0

    def test_invalid_coordinates_fall_back_to_flat(self):
        coords = normalize_coordinates(_activity({
            "coordinates": {"lat": "n/a", "lng": None},
            "lat": 10.0,
            "lng": 20.0,
        }))
        assert coords == Coordinates(lat=10.0, lng=20.0)

    @pytest.mark.parametrize("location", [
        None,
        {"address": "Somewhere"},
        {"coordinates": {"lat": 0, "lng": 0}},
        {"lat": 200, "lng": 2.0},
        {"lat": "abc", "lng": "def"},
        {"coordinates": {"lat": True, "lng": 2.0}},
    ])
    def test_unknown(self, location):
        assert normalize_coordinates(_activity(location)) is None
