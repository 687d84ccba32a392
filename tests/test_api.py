"""
Tests para los endpoints HTTP del optimizador.
"""

import pytest
from fastapi.testclient import TestClient

from itinerary_optimizer.main import create_app
from itinerary_optimizer.services import ItineraryOptimizer
from tests.fakes import FixedProvider


@pytest.fixture
def provider() -> FixedProvider:
    return FixedProvider()


@pytest.fixture
def client(provider):
    """TestClient with the optimizer swapped for one using a fake provider."""
    app = create_app()
    with TestClient(app) as test_client:
        app.state.optimizer = ItineraryOptimizer(provider=provider)
        yield test_client


@pytest.mark.api
class TestOptimizationAPI:
    """Tests for /api/v1/itinerary endpoints."""

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_optimize(self, client, scenario_a_payload):
        response = client.post("/api/v1/itinerary/optimize", json={
            "itinerary": scenario_a_payload,
            "preferences": {"transportMode": "walking", "startTime": "09:00"},
        })

        assert response.status_code == 200
        data = response.json()
        day = data["itinerary"][0]
        assert [a["id"] for a in day["activities"]] == ["A", "C", "B"]
        assert day["activities"][1]["timeSlot"]["startTime"] == "10:10"
        assert data["routeOptimization"]["totalDays"] == 1

    def test_optimize_without_preferences(self, client, scenario_a_payload):
        response = client.post("/api/v1/itinerary/optimize", json={"itinerary": scenario_a_payload})
        assert response.status_code == 200
        assert response.json()["itinerary"][0]["activities"][0]["timeSlot"]["startTime"] == "09:00"

    def test_invalid_body(self, client):
        response = client.post("/api/v1/itinerary/optimize", json={"itinerary": {"itinerary": 5}})
        assert response.status_code == 422

    def test_cache_stats_and_clear(self, client, provider, scenario_a_payload):
        client.post("/api/v1/itinerary/optimize", json={"itinerary": scenario_a_payload})

        stats = client.get("/api/v1/itinerary/cache/stats").json()
        assert stats["provider"] == "fixed"
        assert stats["provider_calls"] == 1
        assert stats["size"] == 1

        assert client.delete("/api/v1/itinerary/cache").json() == {"cleared": True}
        assert client.get("/api/v1/itinerary/cache/stats").json()["size"] == 0

    def test_optimizer_not_initialized(self, client):
        client.app.state.optimizer = None
        response = client.get("/api/v1/itinerary/cache/stats")
        assert response.status_code == 503

    def test_startup_with_zero_exact_limit(self, monkeypatch):
        monkeypatch.setenv("OPT_EXACT_LIMIT", "0")
        app = create_app()

        with TestClient(app) as test_client:
            assert test_client.get("/").status_code == 200
            assert app.state.optimizer.settings.exact_limit == 1
