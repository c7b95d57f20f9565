from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Sequence

from .lib.command import CommandError
from .lib.users import TargetUser

logger = logging.getLogger(__name__)


class StepStatus(str, enum.Enum):
    RAN = "ran"
    SKIPPED = "skipped"
    FAILED = "failed"
    # Best-effort step failed; the run went on.
    IGNORED = "ignored"


@dataclass
class RunContext:
    """Everything a step may consult: resolved config, target user, run flags.

    decisions collects facts steps want to surface in the run report.
    """

    config: Any
    user: TargetUser
    dry_run: bool = False
    decisions: Dict[str, Any] = field(default_factory=dict)


class Step(Protocol):
    """A single step; idempotent where the host allows it."""

    step_id: str
    description: str
    best_effort: bool

    def run(self, ctx: RunContext) -> StepStatus:
        ...


@dataclass(frozen=True)
class StepResult:
    step_id: str
    status: StepStatus
    error: Optional[BaseException] = None


@dataclass(frozen=True)
class PipelineResult:
    results: List[StepResult]

    def _ids(self, status: StepStatus) -> List[str]:
        return [r.step_id for r in self.results if r.status is status]

    @property
    def ran_steps(self) -> List[str]:
        return self._ids(StepStatus.RAN)

    @property
    def skipped_steps(self) -> List[str]:
        return self._ids(StepStatus.SKIPPED)

    @property
    def ignored_steps(self) -> List[str]:
        return self._ids(StepStatus.IGNORED)

    @property
    def failure(self) -> Optional[StepResult]:
        return next((r for r in self.results if r.status is StepStatus.FAILED), None)

    @property
    def succeeded(self) -> bool:
        return self.failure is None

    @property
    def exit_code(self) -> int:
        """0 on success, else the failing command's status (1 if it has none)."""
        failure = self.failure
        if failure is None:
            return 0
        if isinstance(failure.error, CommandError) and failure.error.returncode > 0:
            return failure.error.returncode
        return 1

    def summary(self) -> Dict[str, Any]:
        failure = self.failure
        return {
            "ran_steps": self.ran_steps,
            "skipped_steps": self.skipped_steps,
            "ignored_steps": self.ignored_steps,
            "failed_step": failure.step_id if failure else None,
            "error": str(failure.error) if failure else None,
            "exit_code": self.exit_code,
        }


def execute_step(step: Step, ctx: RunContext) -> StepResult:
    """Run one step and turn its outcome (or exception) into a StepResult."""

    try:
        status = step.run(ctx)
    except Exception as e:
        status = StepStatus.IGNORED if step.best_effort else StepStatus.FAILED
        return StepResult(step_id=step.step_id, status=status, error=e)
    return StepResult(step_id=step.step_id, status=status or StepStatus.RAN)


def run_pipeline(
    *,
    ctx: RunContext,
    steps: Sequence[Step],
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
) -> PipelineResult:
    """Run steps strictly in order; stop at the first failure of a non best-effort step."""

    known = {s.step_id for s in steps}
    for name, value in (("start_at", start_at), ("stop_after", stop_after)):
        if value is not None and value not in known:
            raise ValueError(f"Unknown step for {name}: {value} (known: {', '.join(sorted(known))})")

    results: List[StepResult] = []
    started = start_at is None

    for step in steps:
        if not started:
            if step.step_id == start_at:
                started = True
            else:
                continue

        logger.info("%s", step.description)
        logger.debug("Running step %s", step.step_id)
        result = execute_step(step, ctx)
        results.append(result)

        if result.status is StepStatus.SKIPPED:
            logger.debug("Step %s skipped", step.step_id)
        elif result.status is StepStatus.IGNORED:
            logger.warning("Best-effort step %s failed, continuing: %s", step.step_id, result.error)
        elif result.status is StepStatus.FAILED:
            logger.error("Step %s failed: %s", step.step_id, result.error)
            break

        if stop_after is not None and step.step_id == stop_after:
            logger.info("Stopping after %s", stop_after)
            break

    return PipelineResult(results=results)
