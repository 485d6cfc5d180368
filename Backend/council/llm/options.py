# council/llm/options.py
"""
Per-call generation options shared by every provider.
"""
from dataclasses import dataclass
from typing import Optional

from council.core.config import GenerationConfig, REASONING_EFFORTS


@dataclass
class CallOptions:
    """
    use_search: enable the backend's web-search tool
    temperature: sampling temperature (each backend clamps to its range)
    reasoning_effort: low / medium / high, or None to omit
    max_output_tokens: hard output cap, None for the backend default
    """
    use_search: bool = False
    temperature: Optional[float] = None
    reasoning_effort: Optional[str] = None
    max_output_tokens: Optional[int] = None

    def __post_init__(self):
        if self.reasoning_effort is not None:
            effort = str(self.reasoning_effort).lower()
            self.reasoning_effort = effort if effort in REASONING_EFFORTS else None

    @classmethod
    def from_generation_config(cls, cfg: GenerationConfig, use_search: bool = True) -> "CallOptions":
        return cls(
            use_search=use_search,
            temperature=cfg.temperature,
            reasoning_effort=cfg.reasoning_effort,
        )


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
