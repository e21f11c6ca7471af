from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Protocol, Sequence

from rich.console import Console

from .config import ProvisionConfig
from .errors import ProvisionError
from .lib.host import Host
from .prompts import Prompter
from .state import RunState, StepOutcome, StepStatus

logger = logging.getLogger(__name__)


@dataclass
class ProvisionContext:
    config: ProvisionConfig
    host: Host
    prompter: Prompter
    console: Console

    @property
    def dry_run(self) -> bool:
        return self.host.dry_run

    @property
    def workspace(self) -> Path:
        return self.host.home / self.config.bench_dir

    def pace(self) -> None:
        self.host.sleep(self.config.pacing_seconds)


class Step(Protocol):
    """A single idempotent step.

    precondition() returns a reason to skip when the step's effect already
    holds on the live host, None otherwise. It is evaluated on every run.
    """

    step_id: str
    description: str

    def prepare(self, ctx: ProvisionContext, state: RunState) -> RunState:
        ...

    def precondition(self, ctx: ProvisionContext, state: RunState) -> Optional[str]:
        ...

    def apply(self, ctx: ProvisionContext, state: RunState) -> RunState:
        ...

    def verify(self, ctx: ProvisionContext, state: RunState) -> None:
        ...


@dataclass(frozen=True)
class PipelineResult:
    state: RunState
    outcomes: List[StepOutcome]

    @property
    def ran_steps(self) -> List[str]:
        return [o.step_id for o in self.outcomes if o.status is StepStatus.SUCCEEDED]

    @property
    def skipped_steps(self) -> List[str]:
        return [o.step_id for o in self.outcomes if o.status is StepStatus.SKIPPED]

    @property
    def failed(self) -> Optional[StepOutcome]:
        for o in self.outcomes:
            if o.status is StepStatus.FAILED:
                return o
        return None

    @property
    def ok(self) -> bool:
        return self.failed is None


def run_step(ctx: ProvisionContext, state: RunState, step: Step) -> tuple[RunState, StepOutcome]:
    state.current_step = step.step_id
    try:
        state = step.prepare(ctx, state)
        reason = step.precondition(ctx, state)
        if reason is not None:
            logger.info("Skipping step %s: %s", step.step_id, reason)
            return state, StepOutcome.skipped(step.step_id, reason)

        logger.info("Running step %s (%s)", step.step_id, step.description)
        state = step.apply(ctx, state)
        if ctx.dry_run:
            logger.info("Dry run: not verifying %s", step.step_id)
        else:
            step.verify(ctx, state)
        return state, StepOutcome.succeeded(step.step_id)
    except ProvisionError as e:
        logger.error("Step %s failed: %s", step.step_id, e)
        return state, StepOutcome.failed(step.step_id, str(e), e.exit_code)


def run_pipeline(
    *,
    ctx: ProvisionContext,
    state: RunState,
    steps: Sequence[Step],
    abort_on_failure: bool = True,
) -> PipelineResult:
    """Run steps in order; stop at the first failure. No rollback, no resume."""

    for step in steps:
        state, outcome = run_step(ctx, state, step)
        state.outcomes.append(outcome)
        if outcome.status is StepStatus.FAILED and abort_on_failure:
            logger.error("Aborting run after %s", step.step_id)
            break

    state.current_step = None
    return PipelineResult(state=state, outcomes=list(state.outcomes))
