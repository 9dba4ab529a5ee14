"""Unit tests for the health endpoint."""

from fastapi.testclient import TestClient

from airspace.api import app


def test_health():
    client = TestClient(app)

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
