# council/llm/prompt_management.py
"""
Council prompt context builder.

System prompts come from prompt templates in the content store (or the
built-ins when no location is configured). User prompts are assembled
here from the run input and the outputs of earlier stages.
"""
import re
from typing import List

from council.core.exceptions import PromptNotFoundError
from council.core.logging import log
from council.core.types import DEFAULT_RUBRIC_WEIGHTS, Execution, Idea
from council.lib.file_system import ContentStore


SYSTEM_BLOCK_PATTERN = re.compile(r"<!-- LLM_COUNCIL:BEGIN -->(.*?)<!-- LLM_COUNCIL:END -->", re.DOTALL)
ACTIVE_NOTE_PLACEHOLDER = "{activenote}"

EXECUTION_CONTEXT_LIMIT = 3000
TRUNCATION_MARKER = "\n\n[...truncated...]"

RUBRIC_DESCRIPTIONS = {
    "clarity": "How clear and well-structured is the solution?",
    "actionability": "Can someone start executing this today?",
    "completeness": "Does it address the full scope of the problem?",
    "creativity": "Does it incorporate novel insights from the ideators?",
    "grounding": "Are claims backed by evidence or explicit assumptions?",
}


# ------------------------------------------------------------------
# SYSTEM PROMPTS
# ------------------------------------------------------------------

def extract_system_prompt(template: str, input_text: str = "") -> str:
    """
    Text between the LLM_COUNCIL:BEGIN/END markers, or the whole template.

    {activenote} is replaced with the run input before extraction.
    """
    prompt = template.replace(ACTIVE_NOTE_PLACEHOLDER, input_text)
    match = SYSTEM_BLOCK_PATTERN.search(prompt)
    if match:
        return match.group(1).strip()
    return prompt.strip()


async def load_system_prompt(
    store: ContentStore,
    location: str,
    builtin: str,
    input_text: str = "",
) -> str:
    """
    Resolve the system prompt for one task.

    Raises:
        PromptNotFoundError: a location is configured but missing from the store
    """
    if not location or not location.strip():
        return builtin.strip()

    if not store.exists(location):
        raise PromptNotFoundError(location)

    template = await store.read_blob(location)
    log("PROMPTS", f"Loaded prompt template {location} ({len(template)} chars)")
    return extract_system_prompt(template, input_text)


# ------------------------------------------------------------------
# USER PROMPTS
# ------------------------------------------------------------------

def build_ideator_prompt(run_id: str, input_text: str) -> str:
    return f"Run ID: {run_id}\n\nINPUT:\n{input_text}"


def _joined(items: List[str]) -> str:
    return ", ".join(items) if items else "None specified"


def render_ideas_for_executor(ideas: List[Idea]) -> str:
    blocks = []
    for idea in ideas:
        persona = idea.persona or idea.persona_id or "Unknown"
        plan = "\n".join(
            f"{i}. {step.step or 'Step'}" for i, step in enumerate(idea.plan_steps, start=1)
        ) or "No plan provided"
        blocks.append(
            f"## {persona} ({idea.persona_id or 'unknown'})\n\n"
            f"**Thesis:** {idea.thesis or 'No thesis provided'}\n\n"
            f"**Plan:**\n{plan}\n\n"
            f"**Risks:** {_joined(idea.risks)}\n\n"
            f"**Falsifiers:** {_joined(idea.falsifiers)}"
        )
    return "\n\n---\n\n".join(blocks)


def build_executor_prompt(run_id: str, input_text: str, ideas: List[Idea]) -> str:
    return (
        f"Run ID: {run_id}\n\n"
        f"## INPUT (Problem to Solve)\n{input_text}\n\n"
        f"## IDEATOR OUTPUTS\n{render_ideas_for_executor(ideas)}\n\n"
        "---\n\n"
        "Now synthesize the above into a single, executable solution. "
        'Start your response with "# [Title]" where Title is a snappy, '
        "filename-safe title for your solution."
    )


def render_ideas_for_judge(ideas: List[Idea]) -> str:
    return "\n\n".join(
        f"### {idea.persona or idea.persona_id or 'Unknown'} ({idea.persona_id or 'unknown'})\n"
        f"**Thesis:** {idea.thesis or 'No thesis provided'}\n"
        f"**Risks:** {_joined(idea.risks)}\n"
        f"**Falsifiers:** {_joined(idea.falsifiers)}"
        for idea in ideas
    )


def render_executions_for_judge(executions: List[Execution]) -> str:
    blocks = []
    for execution in executions:
        content = execution.content[:EXECUTION_CONTEXT_LIMIT]
        if len(execution.content) > EXECUTION_CONTEXT_LIMIT:
            content += TRUNCATION_MARKER
        blocks.append(
            f"### {execution.executor_name} ({execution.model})\n"
            f"**Title:** {execution.title}\n\n{content}"
        )
    return "\n\n---\n\n".join(blocks)


def build_judge_prompt(
    run_id: str,
    input_text: str,
    ideas: List[Idea],
    executions: List[Execution],
) -> str:
    rubric = "\n".join(f"- {name}: {text}" for name, text in RUBRIC_DESCRIPTIONS.items())
    weight = next(iter(DEFAULT_RUBRIC_WEIGHTS.values()))
    return (
        f"Run ID: {run_id}\n\n"
        f"## INPUT (Original Problem)\n{input_text}\n\n"
        f"## IDEATOR OUTPUTS\n{render_ideas_for_judge(ideas)}\n\n"
        f"## EXECUTOR DELIVERABLES\n{render_executions_for_judge(executions)}\n\n"
        "---\n\n"
        "Score each executor deliverable on a scale of 1-10 using the following rubric:\n"
        f"{rubric}\n\n"
        f"Use equal weights ({weight} each) for the rubric. Compute weighted_total for each executor.\n\n"
        "Output Markdown with YAML frontmatter. Include a synthesis in the body that "
        "integrates the best elements."
    )
