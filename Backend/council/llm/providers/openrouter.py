# council/llm/providers/openrouter.py
"""
OpenRouter provider implementation - the only provider with fallback.

CANDIDATE CHAIN (virtual "auto-free" alias only):
1. free_model_rank (models known to be paid are dropped)
2. selected_models that the cache marks as free
3. every cached free model, largest context window first

Candidates not enabled by the caller (selected_models, when non-empty)
are skipped. Each attempt ends in one of:
- success            -> return text
- non-retryable fail -> return None
- retryable fail     -> try the next candidate

A concrete model id gets exactly one attempt.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from council.core.config import OpenRouterModel, OpenRouterSettings, Settings
from council.core.exceptions import LLMError
from council.core.logging import log
from council.llm.http import get_json, post_json
from council.llm.options import CallOptions, clamp


API_URL = "https://openrouter.ai/api/v1/chat/completions"
MODELS_URL = "https://openrouter.ai/api/v1/models"
MODEL_PREFIX = "openrouter:"

AUTO_FREE_MODELS = {
    "openrouter:auto-free",
    "openrouter:auto",
    "openrouter:free",
    "openrouter/free",
}

RETRYABLE_PHRASES = (
    "rate limit",
    "rate-limit",
    "rate_limit",
    "ratelimit",
    "quota",
    "too many requests",
)


@dataclass
class AttemptResult:
    text: Optional[str]
    retryable: bool = False


def is_auto_free(model: str) -> bool:
    return model.strip().lower() in AUTO_FREE_MODELS


def is_retryable_error(message: Optional[str]) -> bool:
    """Rate-limit / quota phrasing means another candidate may succeed."""
    if not message:
        return False
    normalized = message.lower()
    return any(phrase in normalized for phrase in RETRYABLE_PHRASES)


def is_model_enabled(model_id: str, openrouter: OpenRouterSettings) -> bool:
    """With no explicit selection every model is enabled."""
    if not openrouter.selected_models:
        return True
    lower = model_id.lower()
    return any(selected.lower() == lower for selected in openrouter.selected_models)


def get_auto_free_candidates(openrouter: OpenRouterSettings) -> List[str]:
    """Ordered candidate chain for the auto-free alias, before enablement filtering."""
    ranked = openrouter.free_model_rank
    if ranked:
        ranked_free = []
        for model_id in ranked:
            model = openrouter.get_model(model_id)
            if model is None or model.is_free:
                ranked_free.append(model_id)
        if ranked_free:
            return ranked_free

    selected_free = []
    for model_id in openrouter.selected_models:
        model = openrouter.get_model(model_id)
        if model is not None and model.is_free:
            selected_free.append(model_id)
    if selected_free:
        return selected_free

    cached_free = [model for model in openrouter.model_cache if model.is_free]
    cached_free.sort(key=lambda model: model.context_length, reverse=True)
    return [model.id for model in cached_free]


def build_payload(
    prompt: str,
    system_prompt: str,
    model: str,
    options: CallOptions,
    metadata: Optional[OpenRouterModel],
) -> Dict[str, Any]:
    messages = []
    if system_prompt:
        messages.append({"role": "system", "content": system_prompt})
    messages.append({"role": "user", "content": prompt})

    payload: Dict[str, Any] = {"model": model, "messages": messages}

    if options.temperature is not None:
        payload["temperature"] = clamp(options.temperature, 0.0, 2.0)

    if options.max_output_tokens:
        payload["max_tokens"] = options.max_output_tokens

    if options.reasoning_effort and metadata is not None and metadata.supports("reasoning"):
        payload["reasoning"] = {"effort": options.reasoning_effort}

    if options.use_search:
        if metadata is None or metadata.supports("tools"):
            payload["tools"] = [{"type": "web_search"}]
        else:
            log("OPENROUTER", f"Model {model} does not support tools/web_search")

    return payload


def extract_text(data: Any) -> Optional[str]:
    """Concatenate message content across choices."""
    if not isinstance(data, dict):
        return None
    texts = []
    for choice in data.get("choices") or []:
        if not isinstance(choice, dict):
            continue
        content = (choice.get("message") or {}).get("content")
        if isinstance(content, str) and content:
            texts.append(content)
        elif isinstance(content, list):
            texts.extend(
                part["text"] for part in content
                if isinstance(part, dict) and part.get("type") == "text" and part.get("text")
            )
    return "".join(texts) if texts else None


async def call_once(
    prompt: str,
    system_prompt: str,
    model: str,
    options: CallOptions,
    settings: Settings,
) -> AttemptResult:
    """One request against one concrete model, classified for the chain."""
    metadata = settings.openrouter.get_model(model)
    payload = build_payload(prompt, system_prompt, model, options, metadata)
    headers = {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {settings.llm.openrouter_api_key}",
        "X-Title": "LLM Council",
    }

    try:
        response = await post_json(API_URL, payload, headers, settings.llm.request_timeout, provider="openrouter")
    except LLMError as e:
        log("OPENROUTER", f"Request to {model} failed: {e.message}")
        return AttemptResult(None, retryable=is_retryable_error(e.message))

    if not response.ok:
        message = response.error_message()
        log("OPENROUTER", f"HTTP {response.status} from {model}: {message}")
        return AttemptResult(None, retryable=response.status == 429 or is_retryable_error(message))

    data = response.data
    if isinstance(data, dict) and data.get("error"):
        message = response.error_message()
        log("OPENROUTER", f"Error payload from {model}: {message}")
        return AttemptResult(None, retryable=is_retryable_error(message))

    text = extract_text(data)
    if not text:
        log("OPENROUTER", f"Response from {model} had no message content")
        return AttemptResult(None, retryable=False)
    return AttemptResult(text)


async def call(
    prompt: str,
    system_prompt: str = "",
    model: Optional[str] = None,
    options: Optional[CallOptions] = None,
    settings: Optional[Settings] = None,
) -> Optional[str]:
    """
    Call OpenRouter, walking the candidate chain for the auto-free alias.

    Returns:
        The generated text, or None when every permitted attempt failed
    """
    settings = settings or Settings()
    options = options or CallOptions()
    if not settings.llm.openrouter_api_key:
        log("LLM", "OPENROUTER_API_KEY not configured")
        return None

    requested = (model or "").strip()
    if not requested:
        log("LLM", "OpenRouter model is empty")
        return None

    auto = is_auto_free(requested)
    if auto:
        candidates = [
            candidate for candidate in get_auto_free_candidates(settings.openrouter)
            if is_model_enabled(candidate, settings.openrouter)
        ]
    else:
        concrete = requested[len(MODEL_PREFIX):] if requested.lower().startswith(MODEL_PREFIX) else requested
        candidates = [concrete]

    if not candidates:
        log("OPENROUTER", "No OpenRouter models available for auto-free selection")
        return None

    for candidate in candidates:
        attempt = await call_once(prompt, system_prompt, candidate, options, settings)
        if attempt.text:
            if auto:
                log("OPENROUTER", f"auto-free resolved to {candidate}")
            return attempt.text
        if not attempt.retryable or not auto:
            return None
        log("OPENROUTER", f"{candidate} is rate limited, trying next candidate")

    return None


# ═══════════════════════════════════════════════════════════════════════════════
# MODEL CACHE
# ═══════════════════════════════════════════════════════════════════════════════

def _as_number(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return 0.0
    return 0.0


def normalize_model(raw: Dict[str, Any]) -> Optional[OpenRouterModel]:
    """Turn one /api/v1/models entry into cached metadata."""
    model_id = raw.get("id")
    if not isinstance(model_id, str) or not model_id:
        return None

    pricing = raw.get("pricing") or {}
    supported = raw.get("supported_parameters") or []
    return OpenRouterModel(
        id=model_id,
        name=str(raw.get("name") or model_id),
        context_length=int(_as_number(raw.get("context_length"))),
        prompt_price=_as_number(pricing.get("prompt")),
        completion_price=_as_number(pricing.get("completion")),
        supported_parameters=[str(param) for param in supported if isinstance(param, str)],
    )


async def fetch_models(settings: Settings, force: bool = False) -> List[OpenRouterModel]:
    """
    Refresh settings.openrouter.model_cache from the public models list.

    On any failure the existing cache is returned unchanged.
    """
    cache = settings.openrouter
    if not force and cache.model_cache:
        return cache.model_cache

    try:
        response = await get_json(MODELS_URL, provider="openrouter")
    except LLMError as e:
        log("OPENROUTER", f"Failed to fetch models: {e.message}")
        return cache.model_cache

    if not response.ok:
        log("OPENROUTER", f"Models request failed (HTTP {response.status})")
        return cache.model_cache

    data = response.data.get("data") if isinstance(response.data, dict) else None
    if not isinstance(data, list):
        log("OPENROUTER", "Models endpoint returned an unexpected payload")
        return cache.model_cache

    models = [model for model in (normalize_model(raw) for raw in data if isinstance(raw, dict)) if model]
    cache.model_cache = models
    cache.last_fetched = datetime.now(timezone.utc).isoformat()
    log("OPENROUTER", f"Cached {len(models)} models ({sum(1 for m in models if m.is_free)} free)")
    return models
