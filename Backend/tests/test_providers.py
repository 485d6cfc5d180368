# tests/test_providers.py
"""
Provider request shaping and response extraction.

post_json is patched per provider module. The charset tests talk to a
local aiohttp test server only.
"""
import pytest
import pytest_asyncio
from aiohttp import test_utils, web
from unittest.mock import AsyncMock, patch

from council.core.config import Settings
from council.core.exceptions import LLMError
from council.llm.adapter import LLMAdapter, detect_provider
from council.llm.http import HttpResponse, post_json
from council.llm.options import CallOptions
from council.llm.providers import anthropic, gemini, openai, openrouter


@pytest.fixture
def keyed_settings():
    settings = Settings()
    settings.llm.gemini_api_key = "g-key"
    settings.llm.openai_api_key = "o-key"
    settings.llm.anthropic_api_key = "a-key"
    settings.llm.openrouter_api_key = "r-key"
    return settings


class TestRouting:

    @pytest.mark.parametrize("model,provider", [
        ("openrouter:auto-free", "openrouter"),
        ("meta-llama/llama-3.3-70b-instruct:free", "openrouter"),
        ("claude-opus-4-5-20251101", "anthropic"),
        ("gpt-5.2", "openai"),
        ("o3-mini", "openai"),
        ("gemini-pro-latest", "gemini"),
        ("something-else", "gemini"),
    ])
    def test_detect_provider(self, model, provider):
        assert detect_provider(model) == provider

    @pytest.mark.asyncio
    async def test_empty_model_returns_none(self, keyed_settings):
        adapter = LLMAdapter(keyed_settings)
        assert await adapter.call_model("sys", "user", "  ") is None

    @pytest.mark.asyncio
    async def test_adapter_forwards_to_provider(self, keyed_settings):
        adapter = LLMAdapter(keyed_settings)
        fake = AsyncMock(return_value="text")
        adapter.providers["anthropic"] = fake

        result = await adapter.call_model("sys", "user", "claude-sonnet-4-5", CallOptions(temperature=0.3))

        assert result == "text"
        kwargs = fake.call_args.kwargs
        assert kwargs["system_prompt"] == "sys"
        assert kwargs["prompt"] == "user"
        assert kwargs["settings"] is keyed_settings

    @pytest.mark.asyncio
    async def test_updated_settings_reach_next_call(self, keyed_settings):
        adapter = LLMAdapter(Settings())
        fake = AsyncMock(return_value="text")
        adapter.providers["gemini"] = fake

        adapter.update_settings(keyed_settings)
        await adapter.call_model("sys", "user", "gemini-pro-latest")

        assert fake.call_args.kwargs["settings"] is keyed_settings


class TestAnthropic:

    def test_request_shape(self):
        payload, headers = anthropic.build_request(
            "user", "sys", "claude-opus-4-5-20251101",
            CallOptions(use_search=True, temperature=1.7, reasoning_effort="high"),
            "a-key", 4096,
        )
        assert payload["temperature"] == 1.0
        assert payload["system"] == "sys"
        assert payload["tools"][0]["type"] == "web_search_20250305"
        assert payload["output_config"] == {"effort": "high"}
        assert headers["anthropic-beta"] == anthropic.EFFORT_BETA

    def test_effort_omitted_for_other_models(self):
        payload, headers = anthropic.build_request(
            "user", "", "claude-sonnet-4-5", CallOptions(reasoning_effort="high"), "a-key", 4096
        )
        assert "output_config" not in payload
        assert "anthropic-beta" not in headers

    @pytest.mark.asyncio
    async def test_concatenates_text_blocks(self, keyed_settings):
        response = HttpResponse(200, {"content": [
            {"type": "text", "text": "Hello "},
            {"type": "web_search_tool_result", "content": []},
            {"type": "text", "text": "world"},
        ]})
        with patch("council.llm.providers.anthropic.post_json", AsyncMock(return_value=response)):
            assert await anthropic.call("hi", settings=keyed_settings) == "Hello world"

    @pytest.mark.asyncio
    async def test_http_error_returns_none(self, keyed_settings):
        response = HttpResponse(500, {"error": {"message": "overloaded"}})
        with patch("council.llm.providers.anthropic.post_json", AsyncMock(return_value=response)):
            assert await anthropic.call("hi", settings=keyed_settings) is None

    @pytest.mark.asyncio
    async def test_missing_key_skips_request(self):
        settings = Settings()
        settings.llm.anthropic_api_key = None
        post = AsyncMock()
        with patch("council.llm.providers.anthropic.post_json", post):
            assert await anthropic.call("hi", settings=settings) is None
        post.assert_not_called()


class TestOpenAI:

    def test_gpt5_reasoning_dropped_with_search(self):
        payload, _ = openai.build_request(
            "user", "sys", "gpt-5.2", CallOptions(use_search=True, reasoning_effort="high"), "o-key"
        )
        assert payload["input"] == "sys\n\nuser"
        assert payload["text"] == {"verbosity": "low"}
        assert "reasoning" not in payload
        assert payload["tools"] == [{"type": "web_search"}]

    def test_gpt5_reasoning_without_search(self):
        payload, _ = openai.build_request("user", "", "gpt-5.2", CallOptions(reasoning_effort="low"), "o-key")
        assert payload["reasoning"] == {"effort": "low"}

    def test_extract_text_prefers_message_parts(self):
        data = {"output": [
            {"type": "web_search_call"},
            {"type": "message", "content": [{"type": "output_text", "text": "A"}, {"type": "output_text", "text": "B"}]},
        ], "output_text": "ignored"}
        assert openai.extract_text(data) == "AB"
        assert openai.extract_text({"output": [], "output_text": "fallback"}) == "fallback"

    @pytest.mark.asyncio
    async def test_transport_error_returns_none(self, keyed_settings):
        with patch("council.llm.providers.openai.post_json", AsyncMock(side_effect=LLMError("openai", "timeout"))):
            assert await openai.call("hi", model="gpt-5.2", settings=keyed_settings) is None


class TestGemini:

    def test_effort_maps_to_thinking_budget(self):
        payload = gemini.build_payload("user", "sys", CallOptions(use_search=True, reasoning_effort="medium"))
        config = payload["generationConfig"]
        assert config["temperature"] == 0.2
        assert config["thinkingConfig"] == {"thinkingBudget": 2048}
        assert payload["systemInstruction"] == {"parts": [{"text": "sys"}]}
        assert payload["tools"] == [{"googleSearch": {}}]

    @pytest.mark.asyncio
    async def test_joins_first_candidate_parts(self, keyed_settings):
        response = HttpResponse(200, {"candidates": [
            {"content": {"parts": [{"text": "one"}, {"text": "two"}]}},
            {"content": {"parts": [{"text": "other"}]}},
        ]})
        with patch("council.llm.providers.gemini.post_json", AsyncMock(return_value=response)):
            assert await gemini.call("hi", model="gemini-pro-latest", settings=keyed_settings) == "onetwo"

    @pytest.mark.asyncio
    async def test_no_text_returns_none(self, keyed_settings):
        response = HttpResponse(200, {"candidates": []})
        with patch("council.llm.providers.gemini.post_json", AsyncMock(return_value=response)):
            assert await gemini.call("hi", model="gemini-pro-latest", settings=keyed_settings) is None


# ═══════════════════════════════════════════════════════
# Bodies that are not valid in their declared charset
# ═══════════════════════════════════════════════════════

GARBLED_BODIES = {
    "/v1/messages": b'{"content":[{"type":"text","text":"\xff\xfe"}]}',
    "/chat/completions": b'{"choices":[{"message":{"content":"\xff ok"}}]}',
    "/models": b'{"data":[{"id":"x\xff:free","pricing":{"prompt":"0","completion":"0"}}]}',
}


@pytest_asyncio.fixture
async def garbled_server():
    async def handler(request):
        return web.Response(
            body=GARBLED_BODIES[request.path],
            content_type="application/json",
            charset="utf-8",
        )

    app = web.Application()
    app.router.add_post("/v1/messages", handler)
    app.router.add_post("/chat/completions", handler)
    app.router.add_get("/models", handler)
    server = test_utils.TestServer(app)
    await server.start_server()
    yield server
    await server.close()


class TestUndecodableBodies:

    @pytest.mark.asyncio
    async def test_post_json_replaces_invalid_bytes(self, garbled_server):
        response = await post_json(str(garbled_server.make_url("/v1/messages")), {})
        assert response.ok
        assert response.data["content"][0]["text"] == "\ufffd\ufffd"

    @pytest.mark.asyncio
    async def test_anthropic_call_does_not_raise(self, keyed_settings, garbled_server):
        url = str(garbled_server.make_url("/v1/messages"))
        with patch("council.llm.providers.anthropic.API_URL", url):
            result = await anthropic.call("hi", model="claude-sonnet-4-5", settings=keyed_settings)
        assert result == "\ufffd\ufffd"

    @pytest.mark.asyncio
    async def test_openrouter_call_does_not_raise(self, keyed_settings, garbled_server):
        url = str(garbled_server.make_url("/chat/completions"))
        with patch("council.llm.providers.openrouter.API_URL", url):
            result = await openrouter.call("hi", model="openrouter:vendor/model", settings=keyed_settings)
        assert result == "\ufffd ok"

    @pytest.mark.asyncio
    async def test_model_refresh_survives_garbled_listing(self, keyed_settings, garbled_server):
        url = str(garbled_server.make_url("/models"))
        with patch("council.llm.providers.openrouter.MODELS_URL", url):
            models = await openrouter.fetch_models(keyed_settings, force=True)
        assert [m.id for m in models] == ["x\ufffd:free"]
