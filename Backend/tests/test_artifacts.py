# tests/test_artifacts.py
"""
Markdown renderers for output.md and the document callout.
"""
from council.core.types import Execution, Idea, JudgeScore, Judgment
from council.orchestration.artifacts import render_callout, render_scores_table, render_summary


RUN_PATH = "llm_council/runs/2025-01-01_120000"


def judgment(**overrides):
    values = dict(
        run_id="2025-01-01_120000",
        scores=[
            JudgeScore("executor1", weighted_total=6.5, notes="Solid | but slow\nneeds work"),
            JudgeScore("executor2", weighted_total=8.5, notes="x" * 150),
        ],
        winner="executor2",
        synthesis="Combine both.",
        next_actions=["Ship it", "Measure it"],
    )
    values.update(overrides)
    return Judgment(**values)


def test_scores_table_escapes_and_truncates_notes():
    lines = render_scores_table(judgment())

    assert lines[0] == "| Executor | Weighted Score | Notes |"
    assert lines[2] == "| executor1 | 6.50 | Solid \\| but slow needs work |"
    assert lines[3] == f"| executor2 | 8.50 | {'x' * 100}... |"


def test_summary_section_order():
    ideas = [Idea(run_id="r", persona_id="taleb", persona="Nassim Taleb", thesis="Avoid ruin")]
    executions = [Execution("executor1", "model-a", "# Plan", "Plan")]

    summary = render_summary(RUN_PATH, "2025-01-01_120000", ideas, executions, judgment())

    headings = [line for line in summary.splitlines() if line.startswith("## ")]
    assert headings == [
        "## Executive Summary", "## Scores", "## Next Actions",
        "## Ideator Summaries", "## Executor Deliverables", "## Judge Result",
    ]
    assert "1. Ship it\n2. Measure it" in summary
    assert f"[[{RUN_PATH}/ideas/taleb.md]]" in summary
    assert f"[[{RUN_PATH}/exec/Plan.md]]" in summary


def test_summary_without_judgment():
    summary = render_summary(RUN_PATH, "r", [], [], None)

    assert "> [!warning] Judgment unavailable" in summary
    assert "## Scores" not in summary
    assert "## Judge Result" not in summary


def test_callout_winner_and_score():
    callout = render_callout("2025-01-01_120000", RUN_PATH, judgment())

    assert callout.startswith("\n> [!abstract]- LLM Council Results (2025-01-01_120000)")
    assert "> **Winner:** executor2 - Score: 8.5/10" in callout
    assert f"[[{RUN_PATH}/output.md|View Complete Analysis]]" in callout


def test_callout_keeps_multiline_synthesis_inside_quote():
    callout = render_callout("r", RUN_PATH, judgment(synthesis="line one\nline two"))
    assert "> **Executive Summary:** line one\n> line two" in callout


def test_callout_truncates_long_synthesis():
    callout = render_callout("r", RUN_PATH, judgment(synthesis="s" * 800))
    assert "s" * 500 + "..." in callout
    assert "s" * 501 not in callout


def test_callout_without_judgment():
    callout = render_callout("r", RUN_PATH, None)
    assert "**Winner:** N/A - Score: 0.0/10" in callout
    assert "judgment failed" in callout
