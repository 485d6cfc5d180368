# council/api/__init__.py
"""
API routes.
"""
from . import health, council

__all__ = ["health", "council"]
