# council/llm/prompts/__init__.py
"""
Built-in council prompts - used when no prompt file is configured.
"""
from .ideators import PERSONA_PROMPTS, PERSONA_NAMES, ideator_prompt
from .executor import EXECUTOR_PROMPT
from .judge import JUDGE_PROMPT

__all__ = [
    "PERSONA_PROMPTS", "PERSONA_NAMES", "ideator_prompt",
    "EXECUTOR_PROMPT",
    "JUDGE_PROMPT",
]
