# council/orchestration/artifacts.py
"""
Run artifacts - pure renderers, no I/O and no model calls.

The runner decides where each document lives; these functions only turn
stage results into Markdown.
"""
from typing import Any, Dict, List, Optional

from council.core.types import Execution, Idea, Judgment
from council.utils.markdown import render_plan_body, truncate
from council.utils.parser import dump_frontmatter


SCORE_NOTES_LIMIT = 100
CALLOUT_SYNTHESIS_LIMIT = 500
JUDGMENT_FAILED_TEXT = "Council run completed but judgment failed."


def idea_metadata(idea: Idea) -> Dict[str, Any]:
    return {
        "persona_id": idea.persona_id,
        "persona": idea.persona,
        "thesis": idea.thesis,
        "risks": list(idea.risks),
        "anti_plan": list(idea.anti_plan),
        "falsifiers": list(idea.falsifiers),
        "sources": [{"title": source.title, "url": source.url} for source in idea.sources],
    }


def render_idea_document(idea: Idea) -> str:
    """ideas/<persona_id>.md - normalized frontmatter plus the original body."""
    body = idea.markdown_body or render_plan_body(idea.plan_steps)
    return dump_frontmatter(idea_metadata(idea), body)


def _table_cell(text: str) -> str:
    return text.replace("\n", " ").replace("|", "\\|")


def render_scores_table(judgment: Judgment) -> List[str]:
    lines = [
        "| Executor | Weighted Score | Notes |",
        "|----------|---------------|-------|",
    ]
    for score in judgment.scores:
        notes = _table_cell(truncate(score.notes, SCORE_NOTES_LIMIT))
        lines.append(f"| {score.executor} | {score.weighted_total:.2f} | {notes} |")
    return lines


def render_summary(
    run_path: str,
    run_id: str,
    ideas: List[Idea],
    executions: List[Execution],
    judgment: Optional[Judgment],
) -> str:
    """output.md - the human-readable summary of one run."""
    lines = [f"# LLM Council Run: {run_id}", ""]

    if judgment:
        lines += ["## Executive Summary", "", f"**Winner:** {judgment.winner or 'N/A'}", "",
                  judgment.synthesis, ""]
        lines += ["## Scores", ""] + render_scores_table(judgment) + [""]
        lines += ["## Next Actions", ""]
        lines += [f"{i}. {action}" for i, action in enumerate(judgment.next_actions, start=1)]
        lines.append("")
    else:
        lines += ["> [!warning] Judgment unavailable",
                  "> The judge did not return a usable verdict. Ideas and deliverables are listed below.",
                  ""]

    lines += ["## Ideator Summaries", ""]
    for idea in ideas:
        lines += [f"### {idea.persona}", "",
                  f"**Thesis:** {idea.thesis}", "",
                  f"**File:** [[{run_path}/ideas/{idea.persona_id}.md]]", ""]

    lines += ["## Executor Deliverables", ""]
    for execution in executions:
        lines += [f"### {execution.executor_name} ({execution.model})", "",
                  f"**Title:** {execution.title}", "",
                  f"**File:** [[{run_path}/exec/{execution.title}.md]]", ""]

    if judgment:
        lines += ["## Judge Result", "",
                  f"**File:** [[{run_path}/judge/judge.md]]", "",
                  "**Sources:**"]
        lines += [f"- {source.title or source.url}: {source.url}" for source in judgment.sources]
        lines.append("")

    return "\n".join(lines)


def render_callout(run_id: str, run_path: str, judgment: Optional[Judgment]) -> str:
    """Collapsible callout appended to the source document."""
    winner = (judgment.winner if judgment else "") or "N/A"
    score = judgment.score_for(winner) if judgment else None
    winner_score = score.weighted_total if score else 0.0
    synthesis = (judgment.synthesis if judgment else "") or JUDGMENT_FAILED_TEXT
    summary = truncate(synthesis, CALLOUT_SYNTHESIS_LIMIT).replace("\n", "\n> ")

    return "\n".join([
        "",
        f"> [!abstract]- LLM Council Results ({run_id})",
        f"> **Winner:** {winner} - Score: {winner_score:.1f}/10",
        ">",
        f"> **Executive Summary:** {summary}",
        ">",
        f"> **Full Results:** [[{run_path}/output.md|View Complete Analysis]]",
        "",
    ])
