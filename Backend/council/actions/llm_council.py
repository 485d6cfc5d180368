# council/actions/llm_council.py
"""
LLM Council action - the run lifecycle controller.

Ideators -> Executors -> Judge for one target document, at most one run
per target at a time. Everything below this layer recovers locally; the
outcome returned here is the only place success or failure is reported.
"""
from typing import Optional

from council.core.config import Settings, settings as default_settings
from council.core.exceptions import CouncilError
from council.core.logging import log, log_section
from council.core.types import CouncilRun, CouncilRunOutcome, RunState, RunStatus
from council.lib.file_system import ContentStore
from council.lib.notify import LogNotifier, Notifier, safe_notify
from council.orchestration.runner import CouncilRunner
from council.orchestration.state import RunRegistry


class CouncilAction:
    """Runs the full council pipeline against documents in a content store."""

    def __init__(
        self,
        store: ContentStore,
        notifier: Optional[Notifier] = None,
        settings: Optional[Settings] = None,
        runner: Optional[CouncilRunner] = None,
        registry: Optional[RunRegistry] = None,
    ):
        self.store = store
        self.notifier = notifier or LogNotifier()
        self.settings = settings or default_settings
        self.runner = runner or CouncilRunner(store, settings=self.settings)
        self.registry = registry or RunRegistry()

    def update_settings(self, settings: Settings) -> None:
        self.settings = settings
        self.runner.update_settings(settings)

    def notify(self, message: str) -> None:
        safe_notify(self.notifier, message)

    async def run_council(self, target_path: str) -> CouncilRunOutcome:
        """
        Run the council on one document and append the results callout to it.

        Returns:
            CouncilRunOutcome; never raises
        """
        if not self.settings.council.enabled:
            self.notify("LLM Council is disabled in settings")
            return CouncilRunOutcome(RunStatus.DISABLED, target_path, message="LLM Council is disabled")

        with self.registry.hold(target_path) as acquired:
            if not acquired:
                self.notify("Council already running on this file")
                log("COUNCIL", f"Rejected duplicate run for {target_path}")
                return CouncilRunOutcome(
                    RunStatus.ALREADY_RUNNING, target_path, message="Council already running on this file"
                )
            return await self._execute(target_path)

    async def _execute(self, target_path: str) -> CouncilRunOutcome:
        run: Optional[CouncilRun] = None
        try:
            input_text = await self.store.read_blob(target_path)
            run = await self.runner.start_run(input_text)

            log_section("COUNCIL", f"LLM Council run for {target_path}", run_id=run.run_id)
            self.notify(f"🧠 LLM Council starting ({run.run_id})...")
            return await self._run_stages(run, target_path, input_text)
        except Exception as e:
            run_id = run.run_id if run else None
            message = e.message if isinstance(e, CouncilError) else f"{type(e).__name__}: {e}"
            log("COUNCIL", f"❌ LLM Council failed for {target_path}: {message}", run_id=run_id)
            self.notify("LLM Council failed - check logs for details")
            return CouncilRunOutcome(
                RunStatus.ERROR,
                target_path,
                run_id=run_id,
                message=message,
                artifacts=self._artifacts(run),
                result=run.snapshot() if run else None,
            )

    async def _run_stages(self, run: CouncilRun, target_path: str, input_text: str) -> CouncilRunOutcome:
        # Stage 1: ideation
        ideators = len(self.runner.settings.council.ideator_models)
        self.notify(f"🧠 Running ideators (0/{ideators})...")
        ideas = await self.runner.run_ideators(
            run, input_text, lambda done, total: self.notify(f"🧠 Running ideators ({done}/{total})...")
        )
        if not ideas:
            return self._stage_failed(run, target_path, RunStatus.IDEATION_FAILED, "ideation",
                                      "❌ All ideators failed. Check logs for details.")
        self.notify(f"✅ Ideation complete ({len(ideas)}/{ideators} succeeded)")

        # Stage 2: execution
        executors = len(self.runner.settings.council.executor_models)
        self.notify(f"⚡ Running executors (0/{executors})...")
        executions = await self.runner.run_executors(
            run, input_text, ideas, lambda done, total: self.notify(f"⚡ Running executors ({done}/{total})...")
        )
        if not executions:
            return self._stage_failed(run, target_path, RunStatus.EXECUTION_FAILED, "execution",
                                      "❌ All executors failed. Check logs for details.")
        self.notify(f"✅ Execution complete ({len(executions)}/{executors} succeeded)")

        # Stage 3: judgment (failure is tolerated)
        self.notify("⚖️ Running judge...")
        judgment = await self.runner.run_judge(run, input_text, ideas, executions)
        if judgment:
            self.notify("✅ Judgment complete")
            log("COUNCIL", f"Judge selected winner: {judgment.winner}", run_id=run.run_id)
        else:
            self.notify("⚠️ Judge failed, but results are still available")

        # Artifacts
        callout = await self.runner.finish(run)
        await self.append_to_document(target_path, callout)

        winner = judgment.winner if judgment and judgment.winner else "N/A"
        self.notify(f"🎉 LLM Council complete! Winner: {winner}")
        return CouncilRunOutcome(
            RunStatus.COMPLETED,
            target_path,
            run_id=run.run_id,
            message=f"Winner: {winner}",
            artifacts=self._artifacts(run),
            result=run.snapshot(),
        )

    def _stage_failed(
        self,
        run: CouncilRun,
        target_path: str,
        status: RunStatus,
        stage: str,
        notice: str,
    ) -> CouncilRunOutcome:
        self.notify(notice)
        log("COUNCIL", f"❌ Stage '{stage}' produced no usable output", run_id=run.run_id)
        # Later stages stay empty; the run itself still completes.
        run.advance(RunState.COMPLETED)
        return CouncilRunOutcome(
            status,
            target_path,
            run_id=run.run_id,
            failed_stage=stage,
            message=f"All {stage} tasks failed",
            artifacts=self._artifacts(run),
            result=run.snapshot(),
        )

    def _artifacts(self, run: Optional[CouncilRun]) -> list:
        """Paths of everything this run wrote that is known to exist."""
        if run is None:
            return []
        candidates = [run.input_path]
        candidates += [f"{run.run_path}/ideas/{idea.persona_id}.md" for idea in run.ideas]
        candidates += [f"{run.run_path}/exec/{execution.title}.md" for execution in run.executions]
        candidates += [f"{run.run_path}/judge/judge.md", f"{run.run_path}/judge/judge_raw.md", run.output_path]
        return [path for path in candidates if path and self.store.exists(path)]

    async def append_to_document(self, target_path: str, content: str) -> None:
        current = await self.store.read_blob(target_path)
        await self.store.write_blob(target_path, current + "\n" + content)
