# council/llm/adapter.py
"""
Unified LLM adapter - single interface for all providers.

Routes by model id, forwards to the provider module, returns text or None.
Providers never raise to the adapter; fallback across models exists only
inside the OpenRouter provider (auto-free alias).
"""
import re
from typing import Awaitable, Callable, Dict, Optional

from council.core.config import Settings, settings as default_settings
from council.core.logging import log
from council.llm.options import CallOptions
from council.llm.providers import anthropic, gemini, openai, openrouter


ProviderCall = Callable[..., Awaitable[Optional[str]]]

OPENAI_MODEL_PATTERN = re.compile(r"^(gpt-|o\d)")


def detect_provider(model: str) -> str:
    """
    Detect provider from model name.

    openrouter:* / openrouter/* / vendor/model -> openrouter
    claude-*                                   -> anthropic
    gpt-*, o1*, o3*, o4*                       -> openai
    everything else                            -> gemini
    """
    model_lower = model.strip().lower()

    if model_lower.startswith("openrouter:") or "/" in model_lower:
        return "openrouter"

    if model_lower.startswith("claude-"):
        return "anthropic"

    if OPENAI_MODEL_PATTERN.match(model_lower):
        return "openai"

    if "gemini" not in model_lower:
        log("LLM", f"Could not detect provider for model '{model}', defaulting to gemini")
    return "gemini"


class LLMAdapter:
    """
    Unified adapter for LLM providers.

    Holds the settings reference the providers read (API keys, OpenRouter
    cache). update_settings() is called between runs, never mid-run.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or default_settings
        self.providers: Dict[str, ProviderCall] = {
            "gemini": gemini.call,
            "openai": openai.call,
            "anthropic": anthropic.call,
            "openrouter": openrouter.call,
        }

    def update_settings(self, settings: Settings) -> None:
        self.settings = settings

    async def call_model(
        self,
        system_prompt: str,
        user_prompt: str,
        model: str,
        options: Optional[CallOptions] = None,
    ) -> Optional[str]:
        """
        Call the model, auto-routing to the correct provider.

        Args:
            system_prompt: System instructions
            user_prompt: The user prompt
            model: Model identifier (e.g. "gemini-pro-latest", "openrouter:auto-free")
            options: Generation options

        Returns:
            Generated text, or None if the call failed for any reason
        """
        if not model or not model.strip():
            log("LLM", "Model identifier is empty")
            return None

        provider = detect_provider(model)
        call_func = self.providers[provider]

        return await call_func(
            prompt=user_prompt,
            system_prompt=system_prompt,
            model=model.strip(),
            options=options or CallOptions(),
            settings=self.settings,
        )

    async def refresh_openrouter_models(self, force: bool = True):
        """Refresh the OpenRouter model cache on the current settings."""
        return await openrouter.fetch_models(self.settings, force=force)
