# tests/test_api.py
"""
HTTP surface: health checks, run trigger, OpenRouter model refresh.
"""
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from unittest.mock import AsyncMock, patch

from council.actions.llm_council import CouncilAction
from council.llm.adapter import LLMAdapter
from council.llm.http import HttpResponse
from council.main import create_app
from council.orchestration.runner import CouncilRunner


TARGET = "notes/onboarding.md"


@pytest_asyncio.fixture
async def action(vault, council_settings, happy_adapter, notifier):
    await vault.create_blob(TARGET, "Reduce onboarding time")
    runner = CouncilRunner(vault, happy_adapter, council_settings)
    return CouncilAction(vault, notifier, council_settings, runner=runner)


@pytest_asyncio.fixture
async def async_client(action, council_settings):
    app = create_app(council_settings, action)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.mark.asyncio
async def test_healthz(async_client):
    response = await async_client.get("/healthz")
    assert response.status_code == 200
    assert response.json()["ok"] is True


@pytest.mark.asyncio
async def test_api_health_reports_council_switch(async_client, council_settings):
    council_settings.council.enabled = False
    response = await async_client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["council_enabled"] is False


@pytest.mark.asyncio
async def test_run_completes(async_client, vault):
    response = await async_client.post("/api/council/runs", json={"target": TARGET})

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "completed"
    assert data["winner"] == "executor2"
    assert data["ideas"] == 4
    assert data["executions"] == 3
    assert "LLM Council Results" in await vault.read_blob(TARGET)


@pytest.mark.asyncio
async def test_run_missing_target(async_client):
    response = await async_client.post("/api/council/runs", json={"target": "notes/nope.md"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_run_rejected_while_target_busy(async_client, action):
    assert action.registry.try_acquire(TARGET)

    response = await async_client.post("/api/council/runs", json={"target": TARGET})
    assert response.status_code == 409

    active = await async_client.get("/api/council/runs/active")
    assert active.json() == {"active": [TARGET]}

    action.registry.release(TARGET)
    active = await async_client.get("/api/council/runs/active")
    assert active.json() == {"active": []}


@pytest.mark.asyncio
async def test_refresh_openrouter_models(vault, council_settings, notifier):
    runner = CouncilRunner(vault, LLMAdapter(council_settings), council_settings)
    app = create_app(council_settings, CouncilAction(vault, notifier, council_settings, runner=runner))
    listing = HttpResponse(200, {"data": [
        {"id": "x:free", "name": "X", "context_length": 32000,
         "pricing": {"prompt": "0", "completion": "0"}},
        {"id": "y", "name": "Y", "context_length": 8000,
         "pricing": {"prompt": "0.000001", "completion": "0.000002"}},
    ]})

    with patch("council.llm.providers.openrouter.get_json", AsyncMock(return_value=listing)):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.post("/api/council/openrouter/models/refresh")

    assert response.status_code == 200
    data = response.json()
    assert data["count"] == 2
    assert data["free"] == 1
    assert data["models"][0] == {"id": "x:free", "name": "X", "context_length": 32000, "is_free": True}
    assert data["last_fetched"] is not None
    assert [m.id for m in council_settings.openrouter.model_cache] == ["x:free", "y"]
