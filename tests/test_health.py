# tests/test_health.py
from fastapi.testclient import TestClient
from route_planner.main import app


client = TestClient(app)


def test_health_check():
    response = client.get("/health/")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert "app" in data
    assert "version" in data
    assert "environment" in data
    assert data["providers"]["ors_walking"] is False
    assert data["transit_enabled"] is False
