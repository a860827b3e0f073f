"""
Pipeline Runner Service

Bridges the HTTP request to the pipeline orchestrator.

Design Decisions:
- Preconditions are checked before the response starts, so they can still
  map to an HTTP status
- Once streaming has begun, success or failure is only reported in-band
- A client disconnect closes the orchestrator stream; no further stages run
"""

from typing import AsyncIterator, Optional

import structlog

from backend.api.schemas import AnalyzeRequest
from creator_radar.pipeline import PipelineOrchestrator, PipelineRunState, stream_ndjson
from creator_radar.pipeline.transport import DisconnectCheck

logger = structlog.get_logger(__name__)


def start_run(orchestrator: PipelineOrchestrator, request: AnalyzeRequest) -> PipelineRunState:
    """Validate the request and build the run state.

    Raises:
        PreconditionFailure: Empty content or missing resume dependency.
    """
    previous = request.previous.by_stage() if request.previous else {}
    state = orchestrator.prepare(
        request.content,
        from_stage=request.from_stage,
        previous=previous,
    )
    logger.info(
        "run_accepted",
        from_stage=state.start_stage.value,
        content_length=len(state.content),
    )
    return state


def stream_run(
    orchestrator: PipelineOrchestrator,
    state: PipelineRunState,
    is_disconnected: Optional[DisconnectCheck] = None,
) -> AsyncIterator[bytes]:
    """NDJSON byte stream for a prepared run."""
    return stream_ndjson(orchestrator.stream(state), is_disconnected)
