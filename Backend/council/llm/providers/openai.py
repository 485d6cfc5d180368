# council/llm/providers/openai.py
"""
OpenAI provider implementation (Responses API).
"""
from typing import Any, Dict, Optional, Tuple

from council.core.config import Settings
from council.core.exceptions import LLMError
from council.core.logging import log
from council.llm.http import post_json
from council.llm.options import CallOptions


DEFAULT_MODEL = "gpt-5"
API_URL = "https://api.openai.com/v1/responses"


def build_request(
    prompt: str,
    system_prompt: str,
    model: str,
    options: CallOptions,
    api_key: str,
) -> Tuple[Dict[str, Any], Dict[str, str]]:
    payload: Dict[str, Any] = {
        "model": model,
        "input": f"{system_prompt}\n\n{prompt}" if system_prompt else prompt,
    }

    if model.startswith("gpt-5"):
        payload["text"] = {"verbosity": "low"}
        # reasoning + web_search together time out; search wins
        if options.reasoning_effort and not options.use_search:
            payload["reasoning"] = {"effort": options.reasoning_effort}

    if options.max_output_tokens:
        payload["max_output_tokens"] = options.max_output_tokens

    if options.use_search:
        payload["tools"] = [{"type": "web_search"}]

    headers = {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {api_key}",
    }
    return payload, headers


def extract_text(data: Any) -> Optional[str]:
    """Concatenate output_text parts of every message item; fall back to output_text."""
    if not isinstance(data, dict):
        return None

    parts = []
    for item in data.get("output") or []:
        if not isinstance(item, dict) or item.get("type") != "message":
            continue
        for content in item.get("content") or []:
            if isinstance(content, dict) and content.get("type") == "output_text" and content.get("text"):
                parts.append(content["text"])
    if parts:
        return "".join(parts)

    output_text = data.get("output_text")
    if isinstance(output_text, str) and output_text:
        return output_text
    return None


async def call(
    prompt: str,
    system_prompt: str = "",
    model: Optional[str] = None,
    options: Optional[CallOptions] = None,
    settings: Optional[Settings] = None,
) -> Optional[str]:
    """
    Call OpenAI Responses API.

    Returns:
        The generated text, or None on any failure
    """
    settings = settings or Settings()
    options = options or CallOptions()
    api_key = settings.llm.openai_api_key
    if not api_key:
        log("LLM", "OPENAI_API_KEY not configured")
        return None

    model = model or DEFAULT_MODEL
    payload, headers = build_request(prompt, system_prompt, model, options, api_key)

    try:
        response = await post_json(API_URL, payload, headers, settings.llm.request_timeout, provider="openai")
        if not response.ok:
            raise LLMError("openai", response.error_message(), status=response.status)

        data = response.data
        if isinstance(data, dict) and data.get("error"):
            raise LLMError("openai", response.error_message(), status=response.status)

        if isinstance(data, dict) and data.get("status") not in (None, "completed"):
            log("LLM", f"OpenAI response status is '{data.get('status')}', not 'completed'")

        text = extract_text(data)
        if text is None:
            raise LLMError("openai", "Response has no recognized output field")
        return text
    except LLMError as e:
        log("LLM", f"OpenAI call failed for {model}: {e.message}")
        return None
