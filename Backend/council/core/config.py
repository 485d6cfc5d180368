# council/core/config.py
"""
Application configuration - single source of truth for all settings.

Collaborators receive a Settings instance in their constructor and are
re-pointed between runs through update_settings(); nothing reads the
module-level singleton mid-run.
"""
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from dotenv import load_dotenv

load_dotenv()


REASONING_EFFORTS = ("low", "medium", "high")


def _effort_from_env(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name, default or "none").strip().lower()
    return value if value in REASONING_EFFORTS else None


@dataclass
class LLMSettings:
    """LLM provider configuration."""
    gemini_api_key: Optional[str] = field(default_factory=lambda: os.getenv("GEMINI_API_KEY"))
    openai_api_key: Optional[str] = field(default_factory=lambda: os.getenv("OPENAI_API_KEY"))
    anthropic_api_key: Optional[str] = field(default_factory=lambda: os.getenv("ANTHROPIC_API_KEY"))
    openrouter_api_key: Optional[str] = field(default_factory=lambda: os.getenv("OPENROUTER_API_KEY"))
    request_timeout: int = field(default_factory=lambda: int(os.getenv("LLM_REQUEST_TIMEOUT", "300")))
    default_max_tokens: int = 4096


@dataclass
class GenerationConfig:
    """Sampling temperature plus a coarse reasoning-effort hint (low/medium/high or None)."""
    temperature: float = 0.2
    reasoning_effort: Optional[str] = None


@dataclass
class StageGenerationConfigs:
    ideation: GenerationConfig = field(
        default_factory=lambda: GenerationConfig(1.0, _effort_from_env("COUNCIL_IDEATION_EFFORT", "high"))
    )
    execution: GenerationConfig = field(
        default_factory=lambda: GenerationConfig(0.2, _effort_from_env("COUNCIL_EXECUTION_EFFORT", "high"))
    )
    judgment: GenerationConfig = field(
        default_factory=lambda: GenerationConfig(0.1, _effort_from_env("COUNCIL_JUDGMENT_EFFORT", "high"))
    )


@dataclass
class CouncilPrompts:
    """
    Prompt template locations inside the content store.

    An empty location means "use the built-in prompt".
    """
    ideators: Dict[str, str] = field(default_factory=lambda: {
        "feynman": "llm_council/prompts/Ideator_Richard_Feynman.md",
        "taleb": "llm_council/prompts/Ideator_Nassim_Taleb.md",
        "da_vinci": "llm_council/prompts/Ideator_Leonardo_daVinci.md",
        "fuller": "llm_council/prompts/Ideator_Buckminster_Fuller.md",
    })
    executor: str = "llm_council/prompts/Executor.md"
    judge: str = "llm_council/prompts/Judge.md"


@dataclass
class CouncilSettings:
    """
    LLM Council pipeline configuration.

    ideator_models and executor_models are ordered: their key order is the
    task order used when assembling stage results.
    """
    enabled: bool = field(default_factory=lambda: os.getenv("COUNCIL_ENABLED", "true").lower() == "true")
    runs_path: str = field(default_factory=lambda: os.getenv("COUNCIL_RUNS_PATH", "llm_council/runs"))
    prompts: CouncilPrompts = field(default_factory=CouncilPrompts)
    ideator_models: Dict[str, str] = field(default_factory=lambda: {
        "feynman": "gemini-pro-latest",
        "taleb": "gemini-pro-latest",
        "da_vinci": "gemini-pro-latest",
        "fuller": "gemini-pro-latest",
    })
    executor_models: Dict[str, str] = field(default_factory=lambda: {
        "executor1": "gemini-pro-latest",
        "executor2": "claude-opus-4-5-20251101",
        "executor3": "gpt-5.2",
    })
    judge_model: str = field(default_factory=lambda: os.getenv("COUNCIL_JUDGE_MODEL", "claude-opus-4-5-20251101"))
    generation_config: StageGenerationConfigs = field(default_factory=StageGenerationConfigs)


@dataclass
class OpenRouterModel:
    """Cached OpenRouter model metadata (subset of /api/v1/models)."""
    id: str
    name: str = ""
    context_length: int = 0
    prompt_price: float = 0.0
    completion_price: float = 0.0
    supported_parameters: List[str] = field(default_factory=list)

    @property
    def is_free(self) -> bool:
        return self.prompt_price == 0 and self.completion_price == 0

    def supports(self, param: str) -> bool:
        return param in self.supported_parameters


@dataclass
class OpenRouterSettings:
    """OpenRouter model cache and free-model selection."""
    model_cache: List[OpenRouterModel] = field(default_factory=list)
    selected_models: List[str] = field(default_factory=list)
    free_model_rank: List[str] = field(default_factory=list)
    last_fetched: Optional[str] = None

    def get_model(self, model_id: str) -> Optional[OpenRouterModel]:
        for model in self.model_cache:
            if model.id == model_id:
                return model
        return None


@dataclass
class ContentSettings:
    """Where the file-system content store is rooted."""
    root: str = field(default_factory=lambda: os.getenv("COUNCIL_VAULT_PATH", "vault"))


@dataclass
class Settings:
    """Main application settings."""
    llm: LLMSettings = field(default_factory=LLMSettings)
    council: CouncilSettings = field(default_factory=CouncilSettings)
    openrouter: OpenRouterSettings = field(default_factory=OpenRouterSettings)
    content: ContentSettings = field(default_factory=ContentSettings)
    port: int = field(default_factory=lambda: int(os.getenv("PORT", 8000)))
    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")


# Singleton instance
settings = Settings()
