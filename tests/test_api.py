import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from humanizer.main import app
from humanizer.services.backends import ModelLoadConfig, RuleBasedBackend
from humanizer.services.datasets import InMemoryDatasetStore
from humanizer.services.orchestrator import HumanizationOrchestrator
from tests.conftest import SequenceRandom

TECHNICAL = "However, the algorithm implementation is fast because the architecture is simple."


@pytest.fixture
def engine():
    orchestrator = HumanizationOrchestrator(backend=RuleBasedBackend(rng=SequenceRandom([0.0])))
    orchestrator.initialize_model(ModelLoadConfig())
    app.state.engine = orchestrator
    app.state.dataset_store = InMemoryDatasetStore()
    return orchestrator


@pytest_asyncio.fixture
async def client(engine):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http:
        yield http


@pytest.mark.asyncio
async def test_humanize_and_fetch_session(client):
    response = await client.post(
        "/v1/humanize",
        json={"text": "This is very good and it's a big improvement.", "target_style": "casual"},
    )

    assert response.status_code == 200
    body = response.json()
    assert "it's" in body["output_text"]
    assert body["cache_hit"] is False
    assert response.headers["x-trace-id"]

    session = await client.get(f"/v1/sessions/{body['session_id']}")
    assert session.status_code == 200
    assert session.json()["status"] == "completed"

    listing = await client.get("/v1/sessions")
    assert [item["id"] for item in listing.json()] == [body["session_id"]]


@pytest.mark.asyncio
async def test_unknown_session_is_404(client):
    response = await client.get("/v1/sessions/missing")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_humanize_rejects_unknown_style(client):
    response = await client.post("/v1/humanize", json={"text": "hello", "target_style": "pirate"})

    assert response.status_code == 422
    assert response.json()["trace_id"]


@pytest.mark.asyncio
async def test_caller_trace_id_is_echoed(client):
    response = await client.post("/v1/humanize", json={"text": "   "}, headers={"x-trace-id": "abc123"})

    assert response.status_code == 422
    assert response.headers["x-trace-id"] == "abc123"
    assert response.json()["trace_id"] == "abc123"


@pytest.mark.asyncio
async def test_humanize_without_model_is_503(client, engine):
    engine.unload_model()

    response = await client.post("/v1/humanize", json={"text": "hello"})

    assert response.status_code == 503
    assert response.json()["detail"] == "Generation model not initialized"


@pytest.mark.asyncio
async def test_stats_and_cache_clear(client):
    payload = {"text": "This is very good.", "target_style": "formal"}
    await client.post("/v1/humanize", json=payload)
    await client.post("/v1/humanize", json=payload)

    stats = (await client.get("/v1/stats")).json()
    assert stats["total_sessions"] == 2
    assert stats["cache_hit_rate"] == 0.5
    assert stats["cache_size"] == 1

    cleared = await client.delete("/v1/cache")
    assert cleared.status_code == 204
    assert (await client.get("/v1/stats")).json()["cache_size"] == 0


@pytest.mark.asyncio
async def test_analyze_endpoint(client):
    response = await client.post("/v1/analyze", json={"text": "This research is good."})

    body = response.json()
    assert body["suggested_category"] == "academic"
    assert body["word_count"] == 4
    assert 0.0 <= body["detection_score"] <= 1.0


@pytest.mark.asyncio
async def test_detect_requires_loaded_detector(client, engine):
    response = await client.post("/v1/detect", json={"text": "yeah I don't think so, you know"})
    assert response.status_code == 503

    model_id = await engine.detector.load_model("models/detector")
    response = await client.post("/v1/detect", json={"text": "yeah I don't think so, you know"})

    assert response.status_code == 200
    assert response.json()["is_machine_generated"] is False
    assert response.json()["model_id"] == model_id


@pytest.mark.asyncio
async def test_dataset_ingest_and_list(client):
    response = await client.post(
        "/v1/datasets/d1/paragraphs",
        json={"paragraphs": [{"text": TECHNICAL}, {"text": "too short"}]},
    )

    assert response.status_code == 201
    body = response.json()
    assert len(body["accepted"]) == 1
    assert body["rejected"][0]["index"] == 1

    listing = (await client.get("/v1/datasets/d1/paragraphs")).json()
    assert listing["total"] == 1
    assert listing["paragraphs"][0]["category"] == "technical"


@pytest.mark.asyncio
async def test_training_estimate(client):
    response = await client.post(
        "/v1/training/estimate",
        json={"preset": "full_fine_tune", "dataset_size": 10000, "overrides": {"dataset_id": "d1"}},
    )

    body = response.json()
    assert response.status_code == 200
    assert body["training_hours"] == 45
    assert body["memory_gb"] == 32.0
    assert body["validation_errors"] == []


@pytest.mark.asyncio
async def test_training_estimate_rejects_unknown_override(client):
    response = await client.post(
        "/v1/training/estimate",
        json={"preset": "lora_lightweight", "dataset_size": 10, "overrides": {"nonsense": 1}},
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_healthz(client):
    response = await client.get("/healthz")

    assert response.json() == {"status": "ok"}
