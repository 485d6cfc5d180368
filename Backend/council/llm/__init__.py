# council/llm/__init__.py
"""
LLM module - Unified interface for all LLM providers.
"""
from .adapter import LLMAdapter, detect_provider
from .options import CallOptions

__all__ = ["LLMAdapter", "detect_provider", "CallOptions"]
