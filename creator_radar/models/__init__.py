"""Pydantic data models for the analysis pipeline."""

from .enums import STAGE_NAMES, STAGE_ORDER, EventType, StageKey, StageStatus
from .events import (
    ErrorEvent,
    LogEvent,
    PipelineEvent,
    ResultEvent,
    StageCompleteEvent,
    StageStartEvent,
    event_to_dict,
    pipeline_event_adapter,
)
from .stages import (
    AudienceFitOutput,
    ClarityIssue,
    DropOffRisk,
    EngagementIssue,
    EngagementOutput,
    RewritePriority,
    Segment,
    SegmentationOutput,
    StageModel,
    SynthesisOutput,
    TrendsOutput,
)

__all__ = [
    # Enums
    "StageKey",
    "EventType",
    "StageStatus",
    "STAGE_ORDER",
    "STAGE_NAMES",
    # Stage outputs
    "StageModel",
    "Segment",
    "SegmentationOutput",
    "DropOffRisk",
    "EngagementIssue",
    "EngagementOutput",
    "ClarityIssue",
    "AudienceFitOutput",
    "TrendsOutput",
    "RewritePriority",
    "SynthesisOutput",
    # Events
    "PipelineEvent",
    "StageStartEvent",
    "StageCompleteEvent",
    "LogEvent",
    "ResultEvent",
    "ErrorEvent",
    "event_to_dict",
    "pipeline_event_adapter",
]
