# council/utils/markdown.py
"""
Markdown helpers for council artifacts: plan-step extraction, titles,
coercion of loosely-typed frontmatter values.
"""
import re
from typing import Any, Dict, List, Optional

from council.core.types import PlanStep, Source


STEP_HEADING_PATTERN = re.compile(r"^###[ \t]*\d+\.[ \t]*(.+?)[ \t]*$", re.MULTILINE)
RATIONALE_PATTERN = re.compile(r"\*\*Rationale:\*\*[ \t]*(.+?)(?=\n[ \t]*\n|\n\*\*Mini-artifact:\*\*|\Z)", re.DOTALL)
MINI_ARTIFACT_PATTERN = re.compile(r"\*\*Mini-artifact:\*\*[ \t]*(.*)", re.DOTALL)
TITLE_PATTERN = re.compile(r"^#[ \t]+(.+?)[ \t]*$", re.MULTILINE)
UNSAFE_TITLE_CHARS = re.compile(r'[/\\:*?"<>|]')

MAX_TITLE_LENGTH = 50


def extract_plan_steps(body: str) -> List[PlanStep]:
    """
    Pull "### N. Step" sections out of an idea body.

    Each section may carry a **Rationale:** paragraph and a
    **Mini-artifact:** block running to the end of the section. A heading
    without either still yields a step, so the list is empty only when
    the body has no step headings at all.
    """
    if not body:
        return []

    headings = list(STEP_HEADING_PATTERN.finditer(body))
    steps: List[PlanStep] = []
    for i, heading in enumerate(headings):
        end = headings[i + 1].start() if i + 1 < len(headings) else len(body)
        section = body[heading.end():end]

        rationale = RATIONALE_PATTERN.search(section)
        artifact = MINI_ARTIFACT_PATTERN.search(section)

        steps.append(PlanStep(
            step=heading.group(1).strip(),
            rationale=rationale.group(1).strip() if rationale else "",
            mini_artifact=artifact.group(1).strip() if artifact else "",
        ))
    return steps


def render_plan_body(steps: List[PlanStep]) -> str:
    """Regenerate an idea body from plan steps (used when the body was lost)."""
    lines = ["## Plan", ""]
    for i, step in enumerate(steps, start=1):
        lines.extend([f"### {i}. {step.step}", ""])
        if step.rationale:
            lines.extend([f"**Rationale:** {step.rationale}", ""])
        if step.mini_artifact:
            lines.extend([f"**Mini-artifact:** {step.mini_artifact}", ""])
    return "\n".join(lines)


def sanitize_title(title: str) -> str:
    """Make a title safe to use as a file name (max 50 chars)."""
    return UNSAFE_TITLE_CHARS.sub("_", title).strip()[:MAX_TITLE_LENGTH].strip()


def extract_title(content: str, executor_name: str) -> str:
    """First level-1 heading, sanitized; falls back to Execution_<executor>."""
    match = TITLE_PATTERN.search(content or "")
    title = sanitize_title(match.group(1)) if match else ""
    return title or f"Execution_{executor_name}"


def truncate(text: str, limit: int, suffix: str = "...") -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + suffix


# ═══════════════════════════════════════════════════════════════════════════════
# COERCION - frontmatter values arrive in whatever shape the model chose
# ═══════════════════════════════════════════════════════════════════════════════

def as_text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip()
    return str(value).strip()


def as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [as_text(item) for item in value if item is not None and as_text(item)]
    text = as_text(value)
    return [text] if text else []


def as_float(value: Any, default: float = 0.0) -> float:
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        match = re.search(r"-?\d+(?:\.\d+)?", value)
        if match:
            return float(match.group(0))
    return default


def as_sources(value: Any) -> List[Source]:
    """Accepts [{title, url}], [url], or a single url string."""
    if value is None:
        return []
    items = value if isinstance(value, (list, tuple)) else [value]
    sources: List[Source] = []
    for item in items:
        if isinstance(item, dict):
            url = as_text(item.get("url"))
            if url:
                sources.append(Source(url=url, title=as_text(item.get("title"))))
        elif isinstance(item, str) and item.strip():
            sources.append(Source(url=item.strip()))
    return sources


def as_weight_map(value: Any) -> Optional[Dict[str, float]]:
    if not isinstance(value, dict) or not value:
        return None
    return {str(key): as_float(weight) for key, weight in value.items()}
