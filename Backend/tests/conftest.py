# tests/conftest.py
"""
Shared pytest fixtures for LLM Council tests.

Provides:
- A temporary content store (vault)
- Council settings with one distinct model id per task
- Canned ideator / executor / judge responses
- A scripted adapter that answers by model id
"""
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add Backend/ to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from council.core.config import CouncilPrompts, Settings
from council.lib.file_system import FileSystemStore
from council.lib.notify import CollectingNotifier


PERSONAS = ["feynman", "taleb", "da_vinci", "fuller"]
EXECUTORS = ["executor1", "executor2", "executor3"]
JUDGE_MODEL = "model-judge"


# ═══════════════════════════════════════════════════════
# CANNED RESPONSES
# ═══════════════════════════════════════════════════════

def idea_response(persona_id: str, thesis: str = "Measure before you change anything") -> str:
    return f"""---
persona_id: {persona_id}
persona: "Persona {persona_id}"
thesis: "{thesis}"
risks:
  - "Teams ignore the new flow"
anti_plan:
  - "Do not rewrite the whole onboarding"
falsifiers:
  - "Time-to-first-commit does not move"
sources:
  - title: "Onboarding study"
    url: https://example.com/onboarding
---

## Plan

### 1. Time the current onboarding

**Rationale:** You cannot improve what you do not measure.

**Mini-artifact:** A stopwatch log for three new hires.

### 2. Remove the slowest step

**Rationale:** The bottleneck dominates.
"""


def execution_response(title: str, body: str = "Do the measured thing first.") -> str:
    return f"# {title}\n\n{body}\n"


def judge_response(totals: Dict[str, float], winner: str, synthesis: str = "Combine measurement with pruning.") -> str:
    score_lines = []
    for executor, total in totals.items():
        score_lines += [
            f"  - executor: {executor}",
            "    raw_scores:",
            f"      clarity: {total}",
            f"      actionability: {total}",
            f"      completeness: {total}",
            f"      creativity: {total}",
            f"      grounding: {total}",
            f"    weighted_total: {total}",
            f'    notes: "Notes for {executor}"',
        ]
    scores = "\n".join(score_lines)
    return f"""---
rubric_weights:
  clarity: 0.2
  actionability: 0.2
  completeness: 0.2
  creativity: 0.2
  grounding: 0.2
scores:
{scores}
winner: {winner}
next_actions:
  - "Time the next three onboardings"
sources:
  - title: "Onboarding study"
    url: https://example.com/onboarding
---

{synthesis}
"""


# ═══════════════════════════════════════════════════════
# FIXTURES - Store & Settings
# ═══════════════════════════════════════════════════════

@pytest.fixture
def vault(tmp_path):
    """Empty file-system content store rooted in a temp dir."""
    return FileSystemStore(tmp_path / "vault")


@pytest.fixture
def council_settings():
    """Settings with built-in prompts and one model id per task."""
    settings = Settings()
    settings.council.enabled = True
    settings.council.runs_path = "llm_council/runs"
    settings.council.prompts = CouncilPrompts(
        ideators={persona: "" for persona in PERSONAS},
        executor="",
        judge="",
    )
    settings.council.ideator_models = {persona: f"model-{persona}" for persona in PERSONAS}
    settings.council.executor_models = {name: f"model-{name}" for name in EXECUTORS}
    settings.council.judge_model = JUDGE_MODEL
    return settings


@pytest.fixture
def notifier():
    return CollectingNotifier()


# ═══════════════════════════════════════════════════════
# FIXTURES - Scripted adapter
# ═══════════════════════════════════════════════════════

def make_adapter(responses: Dict[str, Any]) -> MagicMock:
    """
    Adapter double answering call_model by model id.

    A value may be a string, None, an Exception instance (raised), or a
    callable taking the user prompt.
    """
    calls: List[str] = []

    async def call_model(system_prompt: str, user_prompt: str, model: str, options=None) -> Optional[str]:
        calls.append(model)
        value = responses.get(model)
        if isinstance(value, Exception):
            raise value
        if callable(value):
            return value(user_prompt)
        return value

    adapter = MagicMock()
    adapter.call_model = AsyncMock(side_effect=call_model)
    adapter.calls = calls
    return adapter


def happy_responses(winner: str = "executor2") -> Dict[str, Any]:
    responses: Dict[str, Any] = {f"model-{persona}": idea_response(persona) for persona in PERSONAS}
    responses.update({
        f"model-{name}": execution_response(f"Plan from {name}") for name in EXECUTORS
    })
    totals = {name: (9.0 if name == winner else 6.5) for name in EXECUTORS}
    responses[JUDGE_MODEL] = judge_response(totals, winner)
    return responses


@pytest.fixture
def scripted_adapter():
    return make_adapter


@pytest.fixture
def happy_adapter():
    return make_adapter(happy_responses())
