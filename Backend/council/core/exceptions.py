# council/core/exceptions.py
"""
Custom exceptions for the council.

None of these cross the run-lifecycle boundary: providers turn LLMError
into None, stage tasks turn everything else into a failed task result.
"""
from typing import Optional, Dict, Any


class CouncilError(Exception):
    """Base exception for all council errors."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class LLMError(CouncilError):
    """LLM provider error (credentials, transport, HTTP status, envelope)."""
    def __init__(
        self,
        provider: str,
        message: str,
        status: Optional[int] = None,
        retryable: bool = False,
    ):
        super().__init__(
            f"LLM error ({provider}): {message}",
            {"provider": provider, "status": status, "retryable": retryable}
        )
        self.provider = provider
        self.status = status
        self.retryable = retryable


class PromptNotFoundError(CouncilError):
    """A configured prompt template does not exist in the content store."""
    def __init__(self, path: str):
        super().__init__(f"Prompt file not found: {path}", {"path": path})
        self.path = path


class PersistenceError(CouncilError):
    """Content store error."""
    def __init__(self, path: str, message: str):
        super().__init__(
            f"Cannot write to {path}: {message}",
            {"path": path}
        )
        self.path = path


class ParseError(CouncilError):
    """Structured output could not be recovered."""
    pass
