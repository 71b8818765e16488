# src/dragdrop/runner.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from selenium.common.exceptions import TimeoutException, WebDriverException

from .actions import augment_actions
from .errors import DragDropError
from .instrumentation import Cat
from .orchestrator import DragDropOrchestrator
from .plan_reader import DragPlan, DragStep
from .session import BrowserSession
from .timing import phase_timer


@dataclass
class PlanResult:
    plan: DragPlan
    ok: bool
    error: str | None = None
    steps_queued: int = 0


@dataclass
class RunSummary:
    results: List[PlanResult] = field(default_factory=list)

    @property
    def failed(self) -> List[PlanResult]:
        return [r for r in self.results if not r.ok]


class PlanRunner:
    """
    Opens each plan's page and performs its drags as one queued action sequence.

    A failing plan is recorded and the next one still runs.
    """

    def __init__(self, session: BrowserSession):
        self.session = session

    def run_all(self, plans: List[DragPlan]) -> RunSummary:
        summary = RunSummary()
        for plan in plans:
            summary.results.append(self.run_plan(plan))

        self.session.emit_signal(
            Cat.PLAN,
            f"Ran {len(summary.results)} plan(s), {len(summary.failed)} failed",
            level="warning" if summary.failed else "info",
        )
        return summary

    def run_plan(self, plan: DragPlan) -> PlanResult:
        label = plan.title or plan.source_path.name
        try:
            with phase_timer(self.session, f"plan {label}", cat=Cat.PLAN):
                self.session.open(plan.url, ready_selector=plan.ready_selector)
                orchestrator = self.session.orchestrator
                if plan.wait_time_ms is not None:
                    orchestrator = DragDropOrchestrator(
                        self.session,
                        wait_time_ms=plan.wait_time_ms,
                        emit_drag_event=self.session.orchestrator.emit_drag_event,
                    )
                actions = augment_actions(self.session.driver, orchestrator, session=self.session)
                for step in plan.steps:
                    self._queue_step(actions, step)
                queued = len(actions.queued)
                actions.perform()
        except (DragDropError, TimeoutException, WebDriverException) as e:
            self.session.emit_signal(
                Cat.PLAN,
                f"Plan failed: {e}",
                level="error",
                plan=label,
                exception=type(e).__name__,
            )
            return PlanResult(plan, ok=False, error=str(e))

        return PlanResult(plan, ok=True, steps_queued=queued)

    def _queue_step(self, actions, step: DragStep) -> None:
        source = self.session.find(step.source_selector)
        if step.offset is not None:
            actions.drag_and_drop(source, step.offset)
        else:
            actions.drag_and_drop(source, self.session.find(step.target_selector))
        self.session.emit_diag(
            Cat.PLAN,
            "Queued drag step",
            src=step.source_selector,
            tgt=step.target_selector or step.offset,
            label=step.label,
        )
