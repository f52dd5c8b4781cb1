"""
工作流状态机与并发 fan-out 原语。
"""

from .pipeline import (
    Pipeline,
    PipelineStage,
    PipelineResult,
    StageResult,
    WorkflowProgress,
    WorkflowState,
    WorkflowTracker,
    TERMINAL_STATES,
)
from .fanout import gather_settled

__all__ = [
    "Pipeline",
    "PipelineStage",
    "PipelineResult",
    "StageResult",
    "WorkflowProgress",
    "WorkflowState",
    "WorkflowTracker",
    "TERMINAL_STATES",
    "gather_settled",
]
