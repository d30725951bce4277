import pytest
from fastapi.testclient import TestClient

from api.app import app
from api.routers import bodygraph as bodygraph_router

client = TestClient(app)

ENGLISH_TYPES = {"Manifestor", "Generator", "Manifesting Generator", "Projector", "Reflector"}


def test_health_and_root():
    assert client.get("/__health").json() == {"ok": True}
    assert "generate-chart" in client.get("/").json()["message"]


def test_failure_is_an_envelope_not_an_http_error(monkeypatch):
    monkeypatch.setattr(
        bodygraph_router.pipeline,
        "generate_chart",
        lambda req: {"success": False, "message": "ResolutionNotFound: Capability 'x' not found"},
    )
    r = client.post("/api/generate-chart", json={"name": "Ada", "date": "1990-08-18", "time": "09:02"})
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is False
    assert body["data"] is None
    assert "not found" in body["message"]


def test_malformed_body_is_rejected():
    r = client.post("/api/generate-chart", json={"name": {"first": "Ada"}})
    assert r.status_code == 422


def test_request_id_header_when_logging_enabled(monkeypatch):
    monkeypatch.setenv("LOGGING_ENABLED", "true")
    r = client.get("/__health", headers={"X-Request-ID": "abc123"})
    assert r.headers["X-Request-ID"] == "abc123"


@pytest.fixture
def offline_engine(monkeypatch, tmp_path):
    pytest.importorskip("swisseph")
    monkeypatch.setenv("EPHEMERIS_DIR", str(tmp_path))
    monkeypatch.setenv("EPHEMERIS_AUTO_DOWNLOAD", "false")
    monkeypatch.delenv("HD_ENGINE_PACKAGES", raising=False)
    monkeypatch.delenv("HD_RENDERER", raising=False)
    return tmp_path


def test_generate_chart_with_reference_engine(offline_engine):
    payload = {"name": "Ada", "date": "1990-08-18", "time": "14:32", "tz": "Asia/Kolkata"}
    r = client.post("/api/generate-chart", json=payload)
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["success"] is True, body.get("message")

    data = body["data"]
    assert data["name"] == "Ada"
    assert data["chartImageSVG"].startswith("<svg")
    assert data["type"] in ENGLISH_TYPES
    assert "/" in data["profile"]
    assert data["timestamp"] == "1990-08-18T09:02:00+00:00"
    # no data files and downloads disabled: one warning per file, Moshier still answers
    assert len(data["warnings"]) == 3


def test_generate_chart_in_chinese(offline_engine):
    payload = {"name": "Ada", "date": "1990-08-18", "time": "14:32", "tz": "Asia/Kolkata", "lang": "zh"}
    data = client.post("/api/generate-chart", json=payload).json()["data"]
    assert data["type"] not in ENGLISH_TYPES
    assert data["strategy"] != "unknown"
