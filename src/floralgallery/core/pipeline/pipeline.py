"""
声明式工作流状态机，替代硬编码的 try/await 顺序逻辑。

A workflow instance moves through ``WorkflowState`` values, one stage at a
time. Every transition is published as a ``WorkflowProgress`` to an optional
observer; that stream is the user's only view into a multi-stage external
process, so it is emitted for every transition without exception.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from time import perf_counter
from typing import Any, Awaitable, Callable, Dict, FrozenSet, List, Optional, Type

from floralgallery.core.errors import FloralGalleryError

logger = logging.getLogger("floralgallery.workflows")


class WorkflowState(Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    PUBLISHING = "publishing"
    SUBMITTING = "submitting"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


TERMINAL_STATES: FrozenSet[WorkflowState] = frozenset({WorkflowState.SUCCEEDED, WorkflowState.FAILED})

_TRANSITIONS: Dict[WorkflowState, FrozenSet[WorkflowState]] = {
    WorkflowState.IDLE: frozenset({WorkflowState.VALIDATING, WorkflowState.FAILED}),
    WorkflowState.VALIDATING: frozenset(
        {WorkflowState.PUBLISHING, WorkflowState.SUBMITTING, WorkflowState.FAILED}
    ),
    WorkflowState.PUBLISHING: frozenset({WorkflowState.SUBMITTING, WorkflowState.FAILED}),
    WorkflowState.SUBMITTING: frozenset({WorkflowState.AWAITING_CONFIRMATION, WorkflowState.FAILED}),
    # a batch goes back to SUBMITTING for the next copy
    WorkflowState.AWAITING_CONFIRMATION: frozenset(
        {WorkflowState.SUBMITTING, WorkflowState.SUCCEEDED, WorkflowState.FAILED}
    ),
}


@dataclass
class WorkflowProgress:
    kind: str
    state: WorkflowState
    message: str
    step: Optional[int] = None
    total: Optional[int] = None
    tx_hash: Optional[str] = None
    ts: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "state": self.state.value,
            "message": self.message,
            "step": self.step,
            "total": self.total,
            "tx_hash": self.tx_hash,
            "ts": self.ts.isoformat(),
        }


ProgressCallback = Callable[[WorkflowProgress], None]


class WorkflowTracker:
    """Holds the current state of one workflow instance and enforces legal transitions."""

    def __init__(self, kind: str, on_progress: Optional[ProgressCallback] = None):
        self.kind = kind
        self.state = WorkflowState.IDLE
        self.history: List[WorkflowProgress] = []
        self.error: Optional[FloralGalleryError] = None
        self._on_progress = on_progress

    @property
    def finished(self) -> bool:
        return self.state in TERMINAL_STATES

    def transition(
        self,
        state: WorkflowState,
        message: str,
        *,
        step: Optional[int] = None,
        total: Optional[int] = None,
        tx_hash: Optional[str] = None,
    ) -> WorkflowProgress:
        if self.finished:
            raise RuntimeError(f"{self.kind} workflow already {self.state.value}; cannot move to {state.value}")
        if state is not self.state and state not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"Illegal {self.kind} transition {self.state.value} -> {state.value}")

        self.state = state
        progress = WorkflowProgress(
            kind=self.kind,
            state=state,
            message=message,
            step=step,
            total=total,
            tx_hash=tx_hash,
        )
        self.history.append(progress)
        self._emit(progress)
        return progress

    def fail(self, error: FloralGalleryError) -> WorkflowProgress:
        self.error = error
        progress = self.transition(WorkflowState.FAILED, error.message)
        if error.is_fault:
            logger.error(f"{self.kind} failed: {error}")
        else:
            logger.info(f"{self.kind} stopped: {error}")
        return progress

    def _emit(self, progress: WorkflowProgress) -> None:
        logger.info(f"[{progress.kind}] {progress.state.value}: {progress.message}")
        if self._on_progress is None:
            return
        try:
            self._on_progress(progress)
        except Exception:  # noqa: BLE001
            logger.exception(f"Progress observer failed for {progress.kind}")


@dataclass
class StageResult:
    name: str
    status: str
    error: Optional[FloralGalleryError] = None
    duration_ms: Optional[float] = None


@dataclass
class PipelineResult:
    stages: List[StageResult] = field(default_factory=list)
    status: str = "success"
    error: Optional[FloralGalleryError] = None

    def failed(self) -> bool:
        return self.status == "failed"


class PipelineStage:
    """
    One sequential stage of a workflow.

    ``state``/``message`` are announced before the stage runs; stages that
    drive finer-grained transitions themselves (batch submission) leave
    ``state`` unset and call the tracker directly.
    """

    def __init__(
        self,
        name: str,
        run_fn: Callable[[Any], Awaitable[Any]],
        *,
        state: Optional[WorkflowState] = None,
        message: str = "",
        error_type: Type[FloralGalleryError] = FloralGalleryError,
    ):
        self.name = name
        self.run_fn = run_fn
        self.state = state
        self.message = message
        self.error_type = error_type

    async def run(self, tracker: WorkflowTracker, ctx: Any) -> StageResult:
        if self.state is not None:
            tracker.transition(self.state, self.message or self.name)

        start = perf_counter()
        try:
            await self.run_fn(ctx)
        except FloralGalleryError as exc:
            return self._failed(exc, start)
        except Exception as exc:  # noqa: BLE001
            logger.exception(f"Unexpected error in stage {self.name}")
            error = self.error_type(
                message=f"Unexpected error during {self.name}: {exc}",
                code="UNEXPECTED_ERROR",
                context={"stage": self.name, "exception": type(exc).__name__},
            )
            error.__cause__ = exc
            return self._failed(error, start)
        return StageResult(name=self.name, status="success", duration_ms=(perf_counter() - start) * 1000)

    def _failed(self, error: FloralGalleryError, start: float) -> StageResult:
        return StageResult(
            name=self.name,
            status="error",
            error=error,
            duration_ms=(perf_counter() - start) * 1000,
        )


class Pipeline:
    def __init__(self, name: str, success_message: str = "Done"):
        self.name = name
        self.success_message = success_message
        self.stages: List[PipelineStage] = []

    def add_stage(self, stage: PipelineStage) -> "Pipeline":
        self.stages.append(stage)
        return self

    async def run(self, tracker: WorkflowTracker, ctx: Any) -> PipelineResult:
        results: List[StageResult] = []

        for stage in self.stages:
            stage_result = await stage.run(tracker, ctx)
            results.append(stage_result)

            if stage_result.error is not None:
                tracker.fail(stage_result.error)
                return PipelineResult(stages=results, status="failed", error=stage_result.error)

        tracker.transition(WorkflowState.SUCCEEDED, self.success_message)
        return PipelineResult(stages=results, status="success")
