# council/core/__init__.py
"""
Core module - configuration, logging, exceptions and shared types.
"""
from .config import (
    settings,
    Settings,
    LLMSettings,
    CouncilSettings,
    CouncilPrompts,
    GenerationConfig,
    StageGenerationConfigs,
    OpenRouterModel,
    OpenRouterSettings,
)
from .exceptions import (
    CouncilError,
    LLMError,
    PromptNotFoundError,
    PersistenceError,
    ParseError,
)
from .types import (
    Source,
    PlanStep,
    Idea,
    Execution,
    JudgeScore,
    Judgment,
    StageTaskResult,
    CouncilRun,
    CouncilRunResult,
    CouncilRunOutcome,
    RunState,
    RunStatus,
    DEFAULT_RUBRIC_WEIGHTS,
)

__all__ = [
    "settings", "Settings", "LLMSettings", "CouncilSettings", "CouncilPrompts",
    "GenerationConfig", "StageGenerationConfigs", "OpenRouterModel", "OpenRouterSettings",
    "CouncilError", "LLMError", "PromptNotFoundError", "PersistenceError", "ParseError",
    "Source", "PlanStep", "Idea", "Execution", "JudgeScore", "Judgment",
    "StageTaskResult", "CouncilRun", "CouncilRunResult", "CouncilRunOutcome",
    "RunState", "RunStatus", "DEFAULT_RUBRIC_WEIGHTS",
]
