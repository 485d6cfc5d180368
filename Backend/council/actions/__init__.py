# council/actions/__init__.py
from .llm_council import CouncilAction

__all__ = ["CouncilAction"]
