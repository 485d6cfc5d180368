# council/orchestration/runner.py
"""
Council Runner - drives each pipeline stage and persists its artifacts.

STAGES:
    run_ideators   fan-out over configured personas     -> List[Idea]
    run_executors  fan-out over configured executors    -> List[Execution]
    run_judge      single call over ideas + executions  -> Optional[Judgment]

A task that fails (no model text, unparseable output, missing prompt)
simply drops out of its stage's result list; siblings keep running.
Sequencing the stages and deciding what counts as failure is the
controller's job (council.actions.llm_council).
"""
from collections import Counter
from datetime import datetime
from typing import Any, Dict, List, Optional, Set

from council.core.config import Settings, settings as default_settings
from council.core.exceptions import PersistenceError
from council.core.logging import log, log_preview
from council.core.types import (
    DEFAULT_RUBRIC_WEIGHTS,
    CouncilRun,
    Execution,
    Idea,
    JudgeScore,
    Judgment,
    RunState,
)
from council.lib.file_system import ContentStore
from council.llm.adapter import LLMAdapter
from council.llm.options import CallOptions
from council.llm.prompt_management import (
    build_executor_prompt,
    build_ideator_prompt,
    build_judge_prompt,
    load_system_prompt,
)
from council.llm.prompts import EXECUTOR_PROMPT, JUDGE_PROMPT, PERSONA_NAMES, ideator_prompt
from council.orchestration.artifacts import render_callout, render_idea_document, render_summary
from council.orchestration.fan_out import ProgressCallback, run_stage, successful
from council.utils.markdown import (
    as_float,
    as_sources,
    as_str_list,
    as_text,
    as_weight_map,
    extract_plan_steps,
    extract_title,
)
from council.utils.parser import IDEA_PROFILE, JUDGE_PROFILE, ParsedDocument, parse_frontmatter


RUN_SUBDIRECTORIES = ("ideas", "exec", "judge", "logs")


class CouncilRunner:
    """
    Stage runner for one content store.

    The settings reference is read once at the start of every stage
    method, so update_settings() between runs never affects a stage that
    is already in flight.
    """

    def __init__(
        self,
        store: ContentStore,
        adapter: Optional[LLMAdapter] = None,
        settings: Optional[Settings] = None,
    ):
        self.store = store
        self.settings = settings or default_settings
        self.adapter = adapter or LLMAdapter(self.settings)
        # Run ids reserved while their directories are being created.
        self._allocated: Set[str] = set()

    def update_settings(self, settings: Settings) -> None:
        self.settings = settings
        self.adapter.update_settings(settings)

    # ═══════════════════════════════════════════════════════════════════════
    # RUN SETUP
    # ═══════════════════════════════════════════════════════════════════════

    def generate_run_id(self) -> str:
        """Sortable, time-derived id: YYYY-MM-DD_HHMMSS (local time)."""
        return datetime.now().strftime("%Y-%m-%d_%H%M%S")

    async def create_run_directory(self, run_id: str) -> str:
        run_path = f"{self.settings.council.runs_path.rstrip('/')}/{run_id}"
        await self.store.ensure_container(run_path)
        for sub in RUN_SUBDIRECTORIES:
            await self.store.ensure_container(f"{run_path}/{sub}")
        return run_path

    async def save_input(self, run_path: str, content: str) -> str:
        return await self.store.create_blob(f"{run_path}/input.md", content)

    async def start_run(self, input_text: str) -> CouncilRun:
        """
        Allocate a run id, create its directory tree and persist the input.

        Two runs started in the same second get "-2", "-3"... suffixes.
        """
        base_id = self.generate_run_id()
        runs_path = self.settings.council.runs_path.rstrip("/")
        run_id = base_id
        attempt = 1
        while run_id in self._allocated or self.store.exists(f"{runs_path}/{run_id}"):
            attempt += 1
            run_id = f"{base_id}-{attempt}"
        self._allocated.add(run_id)
        try:
            run_path = await self.create_run_directory(run_id)
        finally:
            # Once the directory exists, store.exists() guards the id.
            self._allocated.discard(run_id)
        input_path = await self.save_input(run_path, input_text)
        log("COUNCIL", f"Run directory ready at {run_path}", run_id=run_id)
        return CouncilRun(run_id=run_id, run_path=run_path, input_path=input_path)

    async def _persist(self, path: str, text: str, run_id: str, scope: str) -> Optional[str]:
        """Per-task persistence: a store failure is logged, never fatal."""
        try:
            return await self.store.create_blob(path, text)
        except PersistenceError as e:
            log(scope, f"⚠️ Could not save {path}: {e.message}", run_id=run_id)
            return None

    # ═══════════════════════════════════════════════════════════════════════
    # IDEATION
    # ═══════════════════════════════════════════════════════════════════════

    def build_idea(self, persona_id: str, run_id: str, parsed: ParsedDocument) -> Idea:
        meta = parsed.metadata
        return Idea(
            run_id=run_id,
            persona_id=persona_id,
            persona=as_text(meta.get("persona")) or PERSONA_NAMES.get(persona_id, persona_id),
            thesis=as_text(meta.get("thesis")),
            plan_steps=extract_plan_steps(parsed.body),
            risks=as_str_list(meta.get("risks")),
            anti_plan=as_str_list(meta.get("anti_plan")),
            falsifiers=as_str_list(meta.get("falsifiers")),
            sources=as_sources(meta.get("sources")),
            markdown_body=parsed.body,
        )

    async def run_ideator(
        self,
        persona_id: str,
        run_id: str,
        input_text: str,
        settings: Optional[Settings] = None,
    ) -> Optional[Idea]:
        """
        One persona: prompt -> model -> parse.

        Returns None when the model returned nothing or the output could
        not be parsed. A missing prompt file raises PromptNotFoundError.
        """
        settings = settings or self.settings
        council = settings.council
        model = council.ideator_models.get(persona_id, "")

        system_prompt = await load_system_prompt(
            self.store,
            council.prompts.ideators.get(persona_id, ""),
            ideator_prompt(persona_id),
            input_text,
        )

        response = await self.adapter.call_model(
            system_prompt,
            build_ideator_prompt(run_id, input_text),
            model,
            CallOptions.from_generation_config(council.generation_config.ideation),
        )
        if not response:
            log("IDEATION", f"Ideator {persona_id} returned no response ({model})", run_id=run_id)
            return None

        parsed = parse_frontmatter(response, IDEA_PROFILE)
        if parsed is None:
            log_preview("IDEATION", f"Failed to parse ideator {persona_id} frontmatter", response, run_id=run_id)
            return None

        idea = self.build_idea(persona_id, run_id, parsed)
        log("IDEATION", f"Ideator {persona_id}: {len(idea.plan_steps)} plan steps via {parsed.strategy}", run_id=run_id)
        return idea

    async def run_ideators(
        self,
        run: CouncilRun,
        input_text: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> List[Idea]:
        """Fan out over every configured persona; ideas come back in persona order."""
        settings = self.settings
        run.advance(RunState.IDEATING)

        async def worker(persona_id: str) -> Optional[Idea]:
            idea = await self.run_ideator(persona_id, run.run_id, input_text, settings)
            if idea:
                await self._persist(
                    f"{run.run_path}/ideas/{persona_id}.md",
                    render_idea_document(idea),
                    run.run_id,
                    "IDEATION",
                )
            return idea

        results = await run_stage(
            list(settings.council.ideator_models.keys()),
            worker,
            on_progress,
            scope="IDEATION",
            run_id=run.run_id,
        )
        run.ideas = successful(results)
        return run.ideas

    # ═══════════════════════════════════════════════════════════════════════
    # EXECUTION
    # ═══════════════════════════════════════════════════════════════════════

    async def run_executor(
        self,
        executor_name: str,
        model: str,
        run_id: str,
        input_text: str,
        ideas: List[Idea],
        settings: Optional[Settings] = None,
    ) -> Optional[Execution]:
        """One executor: every surviving idea in, one Markdown deliverable out."""
        settings = settings or self.settings
        council = settings.council

        system_prompt = await load_system_prompt(
            self.store, council.prompts.executor, EXECUTOR_PROMPT, input_text
        )

        response = await self.adapter.call_model(
            system_prompt,
            build_executor_prompt(run_id, input_text, ideas),
            model,
            CallOptions.from_generation_config(council.generation_config.execution),
        )
        if not response:
            log("EXECUTION", f"Executor {executor_name} returned no response ({model})", run_id=run_id)
            return None

        return Execution(
            executor_name=executor_name,
            model=model,
            content=response,
            title=extract_title(response, executor_name),
        )

    @staticmethod
    def resolve_title_collisions(executions: List[Execution]) -> None:
        """Executions sharing a title are renamed <title>_<executor> (all of them)."""
        counts = Counter(execution.title for execution in executions)
        for execution in executions:
            if counts[execution.title] > 1:
                execution.title = f"{execution.title}_{execution.executor_name}"

    async def run_executors(
        self,
        run: CouncilRun,
        input_text: str,
        ideas: List[Idea],
        on_progress: Optional[ProgressCallback] = None,
    ) -> List[Execution]:
        """Fan out over every configured executor; each sees all ideas."""
        settings = self.settings
        executor_models = dict(settings.council.executor_models)
        run.advance(RunState.EXECUTING)

        async def worker(executor_name: str) -> Optional[Execution]:
            return await self.run_executor(
                executor_name,
                executor_models[executor_name],
                run.run_id,
                input_text,
                ideas,
                settings,
            )

        results = await run_stage(
            list(executor_models.keys()),
            worker,
            on_progress,
            scope="EXECUTION",
            run_id=run.run_id,
        )
        executions = successful(results)

        # File names are only known once every title is in.
        self.resolve_title_collisions(executions)
        for execution in executions:
            await self._persist(
                f"{run.run_path}/exec/{execution.title}.md",
                execution.content,
                run.run_id,
                "EXECUTION",
            )

        run.executions = executions
        return executions

    # ═══════════════════════════════════════════════════════════════════════
    # JUDGMENT
    # ═══════════════════════════════════════════════════════════════════════

    @staticmethod
    def compute_weighted_total(raw_scores: Dict[str, float], weights: Dict[str, float]) -> float:
        return sum(raw_scores.get(name, 0.0) * weight for name, weight in weights.items())

    def build_score(self, entry: Any, weights: Dict[str, float]) -> Optional[JudgeScore]:
        if not isinstance(entry, dict):
            return None
        executor = as_text(entry.get("executor"))
        if not executor:
            return None

        raw = entry.get("raw_scores")
        raw_scores = {str(k): as_float(v) for k, v in raw.items()} if isinstance(raw, dict) else {}

        if entry.get("weighted_total") is not None:
            weighted_total = as_float(entry.get("weighted_total"))
        else:
            weighted_total = self.compute_weighted_total(raw_scores, weights)

        return JudgeScore(
            executor=executor,
            raw_scores=raw_scores,
            weighted_total=weighted_total,
            notes=as_text(entry.get("notes")),
        )

    def build_judgment(self, run_id: str, parsed: ParsedDocument) -> Judgment:
        """
        Judgment from parsed judge output.

        Weights and winner are taken as given: weights need not sum to 1.0
        and the winner is not checked against the scored executors.
        """
        meta = parsed.metadata
        weights = as_weight_map(meta.get("rubric_weights")) or dict(DEFAULT_RUBRIC_WEIGHTS)

        raw_scores = meta.get("scores")
        entries = raw_scores if isinstance(raw_scores, list) else []
        scores = [score for score in (self.build_score(e, weights) for e in entries) if score]

        return Judgment(
            run_id=run_id,
            rubric_weights=weights,
            scores=scores,
            winner=as_text(meta.get("winner")),
            synthesis=parsed.body,
            next_actions=as_str_list(meta.get("next_actions")),
            sources=as_sources(meta.get("sources")),
        )

    async def run_judge(
        self,
        run: CouncilRun,
        input_text: str,
        ideas: List[Idea],
        executions: List[Execution],
    ) -> Optional[Judgment]:
        """
        Single judge call. Returns None (never raises) when the judge fails;
        an unparseable response is kept in judge/judge_raw.md.
        """
        settings = self.settings
        council = settings.council
        run.advance(RunState.JUDGING)

        try:
            system_prompt = await load_system_prompt(
                self.store, council.prompts.judge, JUDGE_PROMPT, input_text
            )
            response = await self.adapter.call_model(
                system_prompt,
                build_judge_prompt(run.run_id, input_text, ideas, executions),
                council.judge_model,
                CallOptions.from_generation_config(council.generation_config.judgment),
            )
        except Exception as e:
            log("JUDGMENT", f"❌ Judge failed: {type(e).__name__}: {e}", run_id=run.run_id)
            return None

        if not response:
            log("JUDGMENT", f"Judge returned no response ({council.judge_model})", run_id=run.run_id)
            return None

        parsed = parse_frontmatter(response, JUDGE_PROFILE)
        if parsed is None:
            log_preview("JUDGMENT", "Failed to parse judge frontmatter", response, run_id=run.run_id)
            await self._persist(f"{run.run_path}/judge/judge_raw.md", response, run.run_id, "JUDGMENT")
            return None

        judgment = self.build_judgment(run.run_id, parsed)
        await self._persist(f"{run.run_path}/judge/judge.md", response, run.run_id, "JUDGMENT")
        run.judgment = judgment
        return judgment

    # ═══════════════════════════════════════════════════════════════════════
    # ARTIFACTS
    # ═══════════════════════════════════════════════════════════════════════

    async def generate_output(self, run: CouncilRun) -> str:
        summary = render_summary(run.run_path, run.run_id, run.ideas, run.executions, run.judgment)
        run.output_path = await self.store.create_blob(f"{run.run_path}/output.md", summary)
        return run.output_path

    def generate_callout(self, run: CouncilRun) -> str:
        run.callout = render_callout(run.run_id, run.run_path, run.judgment)
        return run.callout

    async def finish(self, run: CouncilRun) -> str:
        """Write output.md, build the callout and mark the run completed."""
        await self.generate_output(run)
        self.generate_callout(run)
        run.advance(RunState.COMPLETED)
        log("COUNCIL", f"Run complete, summary at {run.output_path}", run_id=run.run_id)
        return run.callout
