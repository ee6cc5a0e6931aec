"""
Tests for the CityWalk HTTP API.
"""

from pathlib import Path
import sys

import pytest
from fastapi.testclient import TestClient

TEST_DIR = Path(__file__).resolve().parent
for path in (TEST_DIR.parent, TEST_DIR):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from citywalk.main import app, get_geo_query_cache
from citywalk.services.places import GeoQueryCache

from fakes import ORIGIN, FakePlacesProvider, ManualClock, north_of, raw_place, unavailable


@pytest.fixture
def provider():
    return FakePlacesProvider(
        [
            raw_place("park", north_of(ORIGIN, 80), types=["park"], name="Esplanade Park"),
            raw_place("diner", north_of(ORIGIN, 1500), types=["restaurant"]),
        ]
    )


@pytest.fixture
def client(provider):
    """Test client wired to an engine backed by the fake provider."""
    engine = GeoQueryCache(provider=provider, clock=ManualClock())
    app.dependency_overrides[get_geo_query_cache] = lambda: engine
    yield TestClient(app)
    app.dependency_overrides.clear()


def _position():
    return {"latitude": ORIGIN.latitude, "longitude": ORIGIN.longitude}


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_nearby_places(client, provider):
    response = client.post(
        "/api/v1/places/nearby",
        json={"position": _position(), "view_radius_m": 500, "interests": ["park"]},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["total_count"] == 1
    assert data["cache_state"] == "warm"
    place = data["places"][0]
    assert place["id"] == "park"
    assert place["name"] == "Esplanade Park"
    assert place["label"] == "Park"
    assert place["distance_text"] == "80m"
    assert len(provider.calls) == 1


def test_nearby_places_rejects_bad_coordinates(client):
    response = client.post(
        "/api/v1/places/nearby",
        json={"position": {"latitude": 95, "longitude": 0}, "view_radius_m": 500},
    )
    assert response.status_code == 422


def test_nearby_places_provider_unavailable(client, provider):
    provider.init_error = unavailable()

    response = client.post(
        "/api/v1/places/nearby",
        json={"position": _position(), "view_radius_m": 500},
    )

    assert response.status_code == 503


def test_place_types(client):
    response = client.get("/api/v1/places/types")
    assert response.status_code == 200
    values = [option["value"] for option in response.json()]
    assert "restaurant" in values
    assert "bakery" in values


def test_route_summary(client):
    points = [_position(), {"latitude": north_of(ORIGIN, 1500).latitude, "longitude": ORIGIN.longitude}]

    response = client.post(
        "/api/v1/routes/summary", json={"points": points, "duration_ms": 1_230_000}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["distance_m"] == pytest.approx(1500, abs=0.1)
    assert data["distance_text"] == "1.5km"
    assert data["duration_text"] == "20m 30s"


def test_route_summary_without_points(client):
    response = client.post("/api/v1/routes/summary", json={})
    assert response.status_code == 200
    assert response.json() == {"distance_m": 0.0, "distance_text": "0m", "duration_text": None}
