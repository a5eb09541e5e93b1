from unittest.mock import patch

from fastapi.testclient import TestClient

from corpreg import __version__
from corpreg.main import app


def test_health_check(client):
    """Test that the health endpoint returns OK."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_root_reports_version(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["version"] == __version__


def test_api_docs_available(client):
    """Test that API docs are accessible."""
    response = client.get("/docs")
    assert response.status_code == 200


def test_lifespan_creates_tables():
    """Tables are created when the app starts, not on import."""
    with patch("corpreg.main.init_db") as init_db:
        with TestClient(app):
            init_db.assert_called_once_with()
