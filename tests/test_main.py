# tests/test_main.py
from fastapi.testclient import TestClient

from docvault.main import create_app


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_lifespan_creates_schema_and_service(test_settings):
    app = create_app(test_settings)
    with TestClient(app) as client:
        assert app.state.settings is test_settings
        assert app.state.document_service.blob_store.upload_dir == test_settings.UPLOADS_PATH
        assert client.get("/documents").json() == []


def test_cors_exposes_content_disposition(client):
    response = client.get("/health", headers={"Origin": "http://localhost:5173"})
    assert response.headers["access-control-allow-origin"] == "*"
    assert "Content-Disposition" in response.headers["access-control-expose-headers"]
