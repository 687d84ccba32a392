"""
Tests for the route scoring function.
"""

import pytest

from itinerary_optimizer.config import OptimizerSettings
from itinerary_optimizer.models import TravelTimeMatrix
from itinerary_optimizer.services.route_scorer import RouteScorer, activity_duration_seconds
from tests.fakes import make_activity

NINE_AM = 9 * 3600.0


class TestActivityDefaults:
    def test_missing_duration_uses_default(self):
        settings = OptimizerSettings()
        assert activity_duration_seconds(make_activity("a", duration=None), settings) == 120 * 60

    def test_custom_default_duration(self):
        settings = OptimizerSettings(default_duration_minutes=30)
        assert activity_duration_seconds(make_activity("a", duration=None), settings) == 1800

    def test_missing_priority_uses_default(self):
        scorer = RouteScorer([make_activity("a", priority=None)], TravelTimeMatrix.default(1), NINE_AM)
        assert scorer.priorities == [3]


class TestRouteScorer:
    """Tests for travel + time-window penalty - priority bonus."""

    def test_scenario_a_scores(self, scenario_a_activities):
        scorer = RouteScorer(scenario_a_activities, TravelTimeMatrix.default(3), NINE_AM)

        # Solo A tiene prioridad alta: bonus (3 - 1 - posicion) * 300
        assert scorer.score([0, 2, 1]) == 1200 - 600
        assert scorer.score([0, 1, 2]) == 1200 - 600
        assert scorer.score([2, 0, 1]) == 1200 - 300
        assert scorer.score([1, 2, 0]) == 1200

    def test_breakdown_total_matches_score(self, scenario_a_activities):
        scorer = RouteScorer(scenario_a_activities, TravelTimeMatrix.default(3), NINE_AM)
        breakdown = scorer.breakdown([2, 0, 1])
        assert breakdown.travel == 1200
        assert breakdown.time_window_penalty == 0
        assert breakdown.priority_bonus == 300
        assert breakdown.total == scorer.score([2, 0, 1])

    def test_closed_venue_flat_penalty(self):
        activities = [make_activity("a"), make_activity("b", openingHours="Closed")]
        scorer = RouteScorer(activities, TravelTimeMatrix.default(2), NINE_AM)
        assert scorer.time_window_penalty([0, 1]) == 3600
        assert scorer.time_window_penalty([1, 0]) == 3600

    def test_arrival_includes_travel_time(self):
        # a dura 60 min; b abre a las 10:05. Llegada a b: 09:00 + 60 min + 10 min de viaje
        activities = [make_activity("a", duration=60), make_activity("b", openingHours="10:05-18:00")]
        scorer = RouteScorer(activities, TravelTimeMatrix.default(2), NINE_AM)
        assert scorer.time_window_penalty([0, 1]) == 0
        assert scorer.time_window_penalty([1, 0]) == 3600

    def test_preferred_time_deviation(self):
        activities = [make_activity("a", preferredTime="10:00"), make_activity("b", duration=60)]
        scorer = RouteScorer(activities, TravelTimeMatrix.default(2), NINE_AM)
        # Primero: llega 09:00, desvio 1 h. Segundo: llega 10:10, desvio 10 min
        assert scorer.time_window_penalty([0, 1]) == 3600 * 0.5
        assert scorer.time_window_penalty([1, 0]) == 600 * 0.5

    def test_invalid_preferred_time_is_ignored(self, caplog):
        activities = [make_activity("a", preferredTime="whenever"), make_activity("b")]
        scorer = RouteScorer(activities, TravelTimeMatrix.default(2), NINE_AM)
        assert scorer.time_window_penalty([0, 1]) == 0
        assert "whenever" in caplog.text

    def test_weekday_specific_hours(self):
        hours = {"weekday_text": ["Monday: Closed", "Tuesday: 9:00 AM – 6:00 PM"]}
        activities = [make_activity("a", openingHours=hours), make_activity("b")]
        monday = RouteScorer(activities, TravelTimeMatrix.default(2), NINE_AM, weekday=0)
        tuesday = RouteScorer(activities, TravelTimeMatrix.default(2), NINE_AM, weekday=1)
        assert monday.time_window_penalty([0, 1]) == 3600
        assert tuesday.time_window_penalty([0, 1]) == 0

    def test_custom_settings(self):
        settings = OptimizerSettings(closed_penalty_seconds=100, priority_bonus_seconds=10)
        activities = [make_activity("a", priority=5, openingHours="Closed"), make_activity("b")]
        scorer = RouteScorer(activities, TravelTimeMatrix.default(2), NINE_AM, settings=settings)
        assert scorer.score([0, 1]) == pytest.approx(600 + 100 - 10)
