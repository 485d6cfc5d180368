# council/llm/providers/gemini.py
"""
Google Gemini provider implementation.
"""
from typing import Any, Dict, Optional

from council.core.config import Settings
from council.core.exceptions import LLMError
from council.core.logging import log
from council.llm.http import post_json
from council.llm.options import CallOptions


DEFAULT_MODEL = "gemini-flash-latest"
API_URL = "https://generativelanguage.googleapis.com/v1beta/models"

# reasoning effort -> thinking token budget
THINKING_BUDGETS = {
    "low": 512,
    "medium": 2048,
    "high": 4096,
}


def build_payload(prompt: str, system_prompt: str, options: CallOptions) -> Dict[str, Any]:
    generation_config: Dict[str, Any] = {
        "temperature": options.temperature if options.temperature is not None else 0.2,
    }
    if options.max_output_tokens:
        generation_config["maxOutputTokens"] = options.max_output_tokens

    # Unsupported on some Gemini models; those calls fail and return None.
    budget = THINKING_BUDGETS.get(options.reasoning_effort or "")
    if budget:
        generation_config["thinkingConfig"] = {"thinkingBudget": budget}

    payload: Dict[str, Any] = {
        "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        "generationConfig": generation_config,
    }

    if system_prompt:
        payload["systemInstruction"] = {"parts": [{"text": system_prompt}]}

    if options.use_search:
        payload["tools"] = [{"googleSearch": {}}]

    return payload


def extract_text(data: Any) -> Optional[str]:
    """Concatenate the text parts of the first candidate."""
    if not isinstance(data, dict):
        return None
    candidates = data.get("candidates") or []
    if not candidates or not isinstance(candidates[0], dict):
        return None
    parts = (candidates[0].get("content") or {}).get("parts") or []
    texts = [part["text"] for part in parts if isinstance(part, dict) and part.get("text")]
    return "".join(texts) if texts else None


async def call(
    prompt: str,
    system_prompt: str = "",
    model: Optional[str] = None,
    options: Optional[CallOptions] = None,
    settings: Optional[Settings] = None,
) -> Optional[str]:
    """
    Call Google Gemini API.

    Returns:
        The generated text, or None on any failure
    """
    settings = settings or Settings()
    options = options or CallOptions()
    api_key = settings.llm.gemini_api_key
    if not api_key:
        log("LLM", "GEMINI_API_KEY not configured")
        return None

    model = model or DEFAULT_MODEL
    url = f"{API_URL}/{model}:generateContent?key={api_key}"
    payload = build_payload(prompt, system_prompt, options)

    try:
        response = await post_json(
            url,
            payload,
            {"Content-Type": "application/json"},
            settings.llm.request_timeout,
            provider="gemini",
        )
        if not response.ok:
            raise LLMError("gemini", response.error_message(), status=response.status)

        data = response.data
        if isinstance(data, dict) and data.get("error"):
            raise LLMError("gemini", response.error_message(), status=response.status)

        text = extract_text(data)
        if text is None:
            raise LLMError("gemini", "No candidates with text in response")
        return text
    except LLMError as e:
        log("LLM", f"Gemini call failed for {model}: {e.message}")
        return None
