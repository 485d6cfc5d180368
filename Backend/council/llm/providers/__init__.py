# council/llm/providers/__init__.py
"""
LLM Providers - Individual provider implementations.
"""
from . import gemini, openai, anthropic, openrouter

__all__ = ["gemini", "openai", "anthropic", "openrouter"]
