"""Streaming multi-stage analysis pipeline.

Stage Flow:
A. Segmentation → B. Engagement → C. Audience Fit → D. Trends → E. Synthesis

Usage:
    from creator_radar.pipeline import PipelineOrchestrator

    orchestrator = PipelineOrchestrator.from_settings()
    events = orchestrator.run(content, from_stage="D", previous=previous)
    async for event in events:
        ...
"""

from creator_radar.pipeline.consumer import (
    NDJSONEventDecoder,
    StreamState,
    TimelineEntry,
    adecode_stream,
    apply_event,
    decode_stream,
    fold_events,
)
from creator_radar.pipeline.orchestrator import PipelineOrchestrator
from creator_radar.pipeline.sanitize import infer_topic, sanitize_user_input
from creator_radar.pipeline.schemas import parse_stage_output, validate_stage_output
from creator_radar.pipeline.state import PipelineRunState
from creator_radar.pipeline.transport import (
    NDJSON_MEDIA_TYPE,
    STREAM_HEADERS,
    encode_event,
    stream_ndjson,
)

__all__ = [
    # Orchestration
    "PipelineOrchestrator",
    "PipelineRunState",
    # Validation
    "validate_stage_output",
    "parse_stage_output",
    # Input handling
    "sanitize_user_input",
    "infer_topic",
    # Transport
    "encode_event",
    "stream_ndjson",
    "NDJSON_MEDIA_TYPE",
    "STREAM_HEADERS",
    # Consumer
    "NDJSONEventDecoder",
    "StreamState",
    "TimelineEntry",
    "apply_event",
    "fold_events",
    "decode_stream",
    "adecode_stream",
]
