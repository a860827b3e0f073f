"""
Analyze Route

Runs the staged analysis and streams progress as NDJSON events.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response, StreamingResponse
import structlog

from backend.api.deps import get_orchestrator
from backend.api.schemas import AnalyzeRequest, ErrorResponse
from backend.services import pipeline_runner
from creator_radar.errors import PreconditionFailure
from creator_radar.pipeline import NDJSON_MEDIA_TYPE, STREAM_HEADERS, PipelineOrchestrator

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post(
    "/analyze",
    response_class=StreamingResponse,
    responses={
        200: {"content": {NDJSON_MEDIA_TYPE: {}}, "description": "Stream of pipeline events"},
        400: {"model": ErrorResponse, "description": "Run could not start"},
    },
)
async def analyze_content(
    payload: AnalyzeRequest,
    request: Request,
    orchestrator: PipelineOrchestrator = Depends(get_orchestrator),
) -> Response:
    """
    Analyze content through the five-stage pipeline.

    The HTTP status is decided before streaming starts:
    - 400 with {"error": ...} for empty content or a missing resume dependency
    - 200 with an NDJSON event stream otherwise; failures after this point
      arrive as an `error` event
    """
    try:
        state = pipeline_runner.start_run(orchestrator, payload)
    except PreconditionFailure as e:
        logger.info("run_rejected", reason=str(e), type=type(e).__name__)
        return JSONResponse({"error": str(e)}, status_code=400)

    return StreamingResponse(
        pipeline_runner.stream_run(orchestrator, state, request.is_disconnected),
        media_type=NDJSON_MEDIA_TYPE,
        headers=STREAM_HEADERS,
    )
