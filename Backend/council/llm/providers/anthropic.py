# council/llm/providers/anthropic.py
"""
Anthropic Claude provider implementation (Messages API).
"""
from typing import Any, Dict, Optional, Tuple

from council.core.config import Settings
from council.core.exceptions import LLMError
from council.core.logging import log
from council.llm.http import post_json
from council.llm.options import CallOptions, clamp


DEFAULT_MODEL = "claude-sonnet-4-5-20250929"
API_URL = "https://api.anthropic.com/v1/messages"
EFFORT_BETA = "effort-2025-11-24"


def supports_effort(model: str) -> bool:
    """Only Opus 4.5 accepts output_config.effort."""
    return "claude-opus-4-5" in model.lower()


def build_request(
    prompt: str,
    system_prompt: str,
    model: str,
    options: CallOptions,
    api_key: str,
    default_max_tokens: int,
) -> Tuple[Dict[str, Any], Dict[str, str]]:
    payload: Dict[str, Any] = {
        "model": model,
        "max_tokens": options.max_output_tokens or default_max_tokens,
        "messages": [{"role": "user", "content": prompt}],
    }

    if options.temperature is not None:
        payload["temperature"] = clamp(options.temperature, 0.0, 1.0)

    if system_prompt:
        payload["system"] = system_prompt

    if options.use_search:
        payload["tools"] = [{"type": "web_search_20250305", "name": "web_search", "max_uses": 5}]

    headers = {
        "x-api-key": api_key,
        "anthropic-version": "2023-06-01",
        "Content-Type": "application/json",
    }

    if options.reasoning_effort and supports_effort(model):
        payload["output_config"] = {"effort": options.reasoning_effort}
        headers["anthropic-beta"] = EFFORT_BETA

    return payload, headers


def extract_text(data: Any) -> Optional[str]:
    """Concatenate every text block of a Messages response, in order."""
    if not isinstance(data, dict):
        return None
    content = data.get("content")
    if not isinstance(content, list):
        return None
    blocks = [
        block["text"] for block in content
        if isinstance(block, dict) and block.get("type") == "text" and block.get("text")
    ]
    return "".join(blocks) if blocks else None


async def call(
    prompt: str,
    system_prompt: str = "",
    model: Optional[str] = None,
    options: Optional[CallOptions] = None,
    settings: Optional[Settings] = None,
) -> Optional[str]:
    """
    Call Anthropic Claude API.

    Returns:
        The generated text, or None on missing key, HTTP error,
        error payload or a response with no text blocks
    """
    settings = settings or Settings()
    options = options or CallOptions()
    api_key = settings.llm.anthropic_api_key
    if not api_key:
        log("LLM", "ANTHROPIC_API_KEY not configured")
        return None

    model = model or DEFAULT_MODEL
    payload, headers = build_request(
        prompt, system_prompt, model, options, api_key, settings.llm.default_max_tokens
    )

    try:
        response = await post_json(API_URL, payload, headers, settings.llm.request_timeout, provider="anthropic")
        if not response.ok:
            raise LLMError("anthropic", response.error_message(), status=response.status)

        data = response.data
        if isinstance(data, dict) and data.get("error"):
            raise LLMError("anthropic", response.error_message(), status=response.status)

        text = extract_text(data)
        if text is None:
            raise LLMError("anthropic", "Response has no text content")
        return text
    except LLMError as e:
        log("LLM", f"Anthropic call failed for {model}: {e.message}")
        return None
