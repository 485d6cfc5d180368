# council/core/types.py
"""
Canonical council data model.

Ideas, executions and the judgment are owned by one run; the controller
receives a CouncilRunResult snapshot at the end.
"""
from enum import Enum
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Optional, Tuple, TypeVar


T = TypeVar("T")


DEFAULT_RUBRIC_WEIGHTS: Dict[str, float] = {
    "clarity": 0.2,
    "actionability": 0.2,
    "completeness": 0.2,
    "creativity": 0.2,
    "grounding": 0.2,
}


class RunState(Enum):
    """Per-run state machine. There is no FAILED state: partial failure is expressed by empty stage outputs."""
    CREATED = "created"
    IDEATING = "ideating"
    EXECUTING = "executing"
    JUDGING = "judging"
    COMPLETED = "completed"


class RunStatus(Enum):
    """Terminal outcome reported by the run lifecycle controller."""
    COMPLETED = "completed"
    DISABLED = "disabled"
    ALREADY_RUNNING = "already_running"
    IDEATION_FAILED = "ideation_failed"
    EXECUTION_FAILED = "execution_failed"
    ERROR = "error"


@dataclass
class Source:
    url: str
    title: str = ""


@dataclass
class PlanStep:
    step: str
    rationale: str = ""
    mini_artifact: str = ""


@dataclass
class Idea:
    """One persona's proposal."""
    run_id: str
    persona_id: str
    persona: str
    thesis: str = ""
    plan_steps: List[PlanStep] = field(default_factory=list)
    risks: List[str] = field(default_factory=list)
    anti_plan: List[str] = field(default_factory=list)
    falsifiers: List[str] = field(default_factory=list)
    sources: List[Source] = field(default_factory=list)
    markdown_body: str = ""
    phase: str = "ideas"


@dataclass
class Execution:
    """One executor's synthesis. title is never empty."""
    executor_name: str
    model: str
    content: str
    title: str


@dataclass
class JudgeScore:
    executor: str
    raw_scores: Dict[str, float] = field(default_factory=dict)
    weighted_total: float = 0.0
    notes: str = ""


@dataclass
class Judgment:
    """
    The evaluator's verdict.

    Weights are not required to sum to 1.0 and winner is not checked
    against scores; both are taken as the judge supplied them.
    """
    run_id: str
    rubric_weights: Dict[str, float] = field(default_factory=lambda: dict(DEFAULT_RUBRIC_WEIGHTS))
    scores: List[JudgeScore] = field(default_factory=list)
    winner: str = ""
    synthesis: str = ""
    next_actions: List[str] = field(default_factory=list)
    sources: List[Source] = field(default_factory=list)
    phase: str = "judge"

    def score_for(self, executor: str) -> Optional[JudgeScore]:
        for score in self.scores:
            if score.executor == executor:
                return score
        return None


@dataclass
class StageTaskResult(Generic[T]):
    """Transient per-task success/failure wrapper used for fan-in."""
    task_id: str
    value: Optional[T] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.value is not None


@dataclass
class CouncilRun:
    """Mutable run record, owned by the orchestrator for one invocation."""
    run_id: str
    run_path: str
    input_path: str = ""
    state: RunState = RunState.CREATED
    ideas: List[Idea] = field(default_factory=list)
    executions: List[Execution] = field(default_factory=list)
    judgment: Optional[Judgment] = None
    output_path: str = ""
    callout: str = ""

    def advance(self, state: RunState) -> None:
        order = list(RunState)
        if order.index(state) < order.index(self.state):
            raise ValueError(f"Run {self.run_id} cannot move from {self.state.value} to {state.value}")
        self.state = state

    def snapshot(self) -> "CouncilRunResult":
        return CouncilRunResult(
            run_id=self.run_id,
            run_path=self.run_path,
            input_path=self.input_path,
            state=self.state,
            ideas=tuple(self.ideas),
            executions=tuple(self.executions),
            judgment=self.judgment,
            output_path=self.output_path,
            callout=self.callout,
        )


@dataclass(frozen=True)
class CouncilRunResult:
    """Read-only snapshot handed to the controller."""
    run_id: str
    run_path: str
    input_path: str
    state: RunState
    ideas: Tuple[Idea, ...]
    executions: Tuple[Execution, ...]
    judgment: Optional[Judgment]
    output_path: str
    callout: str


@dataclass
class CouncilRunOutcome:
    """What the controller tells its caller: status, failing stage, artifacts."""
    status: RunStatus
    target: str
    run_id: Optional[str] = None
    failed_stage: Optional[str] = None
    message: str = ""
    artifacts: List[str] = field(default_factory=list)
    result: Optional[CouncilRunResult] = None

    @property
    def succeeded(self) -> bool:
        return self.status == RunStatus.COMPLETED

    def to_dict(self) -> Dict[str, Any]:
        judgment = self.result.judgment if self.result else None
        return {
            "status": self.status.value,
            "target": self.target,
            "run_id": self.run_id,
            "failed_stage": self.failed_stage,
            "message": self.message,
            "artifacts": list(self.artifacts),
            "ideas": len(self.result.ideas) if self.result else 0,
            "executions": len(self.result.executions) if self.result else 0,
            "winner": judgment.winner if judgment else None,
        }
