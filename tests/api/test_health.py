"""
Tests for the health check endpoints.
"""


def test_health_check_returns_200(client):
    """
    Verify the health endpoint responds with HTTP 200.

    If this fails, nothing else will work.
    """
    response = client.get("/health")
    assert response.status_code == 200


def test_health_check_returns_service_name(client):
    """
    Verify the response includes the correct service name.

    Monitoring systems parse this field.
    """
    response = client.get("/health")
    data = response.json()
    assert data["service"] == "gleam-webhook-server"


def test_health_check_reports_database_status(client):
    response = client.get("/health")
    data = response.json()
    assert data["database"] == "healthy"
    assert data["ok"] is True


def test_root_reports_service_and_time(client):
    response = client.get("/")
    data = response.json()
    assert response.status_code == 200
    assert data["ok"] is True
    assert data["service"] == "gleam-webhook-server"
    assert "T" in data["time"]
    assert data["time"].endswith("Z")
