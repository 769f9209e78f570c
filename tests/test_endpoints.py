# tests/test_endpoints.py
import base64

import pytest
from fastapi.testclient import TestClient

from postgen.features.cover.service import CoverResolutionClient
from postgen.features.generate.router import get_orchestrator
from postgen.features.post_text.service import TextGenerationClient
from postgen.main import app
from postgen.orchestrator import GenerationOrchestrator
from postgen.progress import ProgressSimulator
from conftest import FakeGenaiClient, make_config


@pytest.fixture
def fake():
    return FakeGenaiClient()


@pytest.fixture
def client(fake):
    cfg = make_config()
    orch = GenerationOrchestrator(
        TextGenerationClient(fake, cfg=cfg),
        CoverResolutionClient(fake, cfg=cfg),
        ProgressSimulator(interval=0.005, done_hold=0.05),
        cfg=cfg,
    )
    app.dependency_overrides[get_orchestrator] = lambda: orch
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    orch.close()


def test_healthz(client):
    r = client.get("/healthz")
    assert r.status_code == 200
    assert r.json() == {"ok": True}


def test_generate_post_auto(client, fake):
    r = client.post("/api/v1/generate/post", json={"topic": "周末去哪儿玩", "style": "educational", "length": "short"})
    assert r.status_code == 200
    body = r.json()
    assert body["post"]["title"] == "周末去哪儿"
    assert body["post"]["cover_summary"] is None
    assert body["cover"]["kind"] == "inline"
    assert body["cover_src"].startswith("data:image/png;base64,")
    assert body["progress"] == {"percent": 100, "phase": "done"}


def test_generate_post_template(client, fake):
    r = client.post("/api/v1/generate/post", json={"topic": "深夜食堂", "cover_mode": "template"})
    assert r.status_code == 200
    body = r.json()
    assert body["cover"]["kind"] == "template"
    assert body["cover"]["template"] == body["post"]["cover_summary"]
    assert body["cover_src"] is None
    assert fake.calls_for("image") == []


def test_generate_post_with_reference_image(client, fake, png_bytes):
    data_url = "data:image/png;base64," + base64.b64encode(png_bytes).decode("ascii")
    r = client.post("/api/v1/generate/post", json={
        "topic": "咖啡拉花", "cover_mode": "reference", "reference_image_base64": data_url,
    })
    assert r.status_code == 200
    parts = fake.calls_for("image")[0]["contents"][0].parts
    assert parts[0].inline_data.data == png_bytes


def test_reference_image_ignored_outside_reference_mode(client, fake):
    r = client.post("/api/v1/generate/post", json={
        "topic": "咖啡", "cover_mode": "auto", "reference_image_base64": "not base64 at all",
    })
    assert r.status_code == 200
    assert len(fake.calls_for("image")[0]["contents"][0].parts) == 1


def test_bad_reference_image_is_400(client):
    r = client.post("/api/v1/generate/post", json={
        "topic": "咖啡", "cover_mode": "reference",
        "reference_image_base64": base64.b64encode(b"definitely not an image").decode("ascii"),
    })
    assert r.status_code == 400


@pytest.mark.parametrize("payload", [
    {"topic": ""},
    {"topic": "   "},
    {"topic": "x", "style": "sarcastic"},
    {"topic": "x", "cover_mode": "ref"},
])
def test_invalid_requests_are_422(client, payload):
    assert client.post("/api/v1/generate/post", json=payload).status_code == 422


@pytest.mark.parametrize("exc, status, kind, actionable", [
    (RuntimeError("429 RESOURCE_EXHAUSTED"), 429, "QuotaExceeded", True),
    (RuntimeError("403 PERMISSION_DENIED"), 401, "AuthInvalid", True),
    (RuntimeError("socket closed"), 502, "Unknown", False),
])
def test_provider_errors_map_to_http(client, fake, exc, status, kind, actionable):
    fake.text_error = exc
    r = client.post("/api/v1/generate/post", json={"topic": "周末"})
    assert r.status_code == status
    detail = r.json()["detail"]
    assert detail["kind"] == kind
    assert detail["actionable"] is actionable
    assert detail["message"]

    progress = client.get("/api/v1/generate/progress").json()
    assert progress == {"percent": 0, "phase": "failed"}


def test_malformed_output_is_502(client, fake):
    fake.text = "I am not JSON"
    r = client.post("/api/v1/generate/post", json={"topic": "周末"})
    assert r.status_code == 502
    assert r.json()["detail"]["kind"] == "MalformedOutput"


def test_related_topics_blank_topic(client):
    r = client.post("/api/v1/generate/related-topics", json={"topic": "  "})
    assert r.status_code == 200
    assert r.json() == {"topics": []}


def test_related_topics_endpoint(client, monkeypatch):
    from postgen.features.topics import router as topics_router

    async def _fake_suggest(topic):
        return [f"{topic} 1", f"{topic} 2"]

    monkeypatch.setattr(topics_router, "suggest_topics", _fake_suggest)
    r = client.post("/api/v1/generate/related-topics", json={"topic": "露营"})
    assert r.status_code == 200
    assert r.json() == {"topics": ["露营 1", "露营 2"]}
