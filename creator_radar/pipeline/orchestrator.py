"""Pipeline Orchestrator - Coordinates the five analysis stages.

Stages run strictly in order (A → E). Each stage:
1. emits a log line and `stage_start`
2. builds its input from outputs already known to the run
3. calls its provider, then validates the answer against the stage model
4. emits `result` and `stage_complete`

Any failure emits a single `error` event and ends the stream; later stages
never run. A caller recovers by starting a new run at the failed stage with
the earlier outputs supplied as `previous`.
"""

import asyncio
import time
from typing import Any, AsyncIterator, Mapping, Optional, Union

import structlog

from creator_radar.config.prompts import PIPELINE_COMPLETE_MESSAGE
from creator_radar.config.settings import Settings, get_settings
from creator_radar.errors import (
    EmptyContentError,
    MissingResumeDependency,
    StageFailure,
    StageTimeoutError,
)
from creator_radar.llm.client import AnalysisClient, TrendsClient
from creator_radar.models import (
    STAGE_ORDER,
    ErrorEvent,
    LogEvent,
    PipelineEvent,
    ResultEvent,
    StageCompleteEvent,
    StageKey,
    StageStartEvent,
)
from creator_radar.pipeline.sanitize import MAX_CONTENT_LENGTH, sanitize_user_input
from creator_radar.pipeline.schemas import validate_stage_output
from creator_radar.pipeline.stages import STAGE_DEFINITIONS, StageDefinition
from creator_radar.pipeline.state import PipelineRunState

logger = structlog.get_logger(__name__)

PriorOutputs = Mapping[Union[StageKey, str], Optional[dict[str, Any]]]


def _normalize_prior_outputs(previous: Optional[PriorOutputs]) -> dict[StageKey, dict[str, Any]]:
    """Accept keys as StageKey, 'A', or 'stageA'; drop empty entries."""
    normalized: dict[StageKey, dict[str, Any]] = {}
    for raw_key, output in (previous or {}).items():
        if not output:
            continue
        key = raw_key.value if isinstance(raw_key, StageKey) else str(raw_key)
        if key.startswith("stage"):
            key = key[len("stage"):]
        try:
            normalized[StageKey(key)] = output
        except ValueError:
            logger.debug("prior_output_key_ignored", key=str(raw_key))
    return normalized


class PipelineOrchestrator:
    """Runs the stage sequence and yields the event stream for one request."""

    def __init__(
        self,
        analysis_client: Any,
        trends_client: Any,
        stage_timeout: Optional[float] = None,
        max_content_length: int = MAX_CONTENT_LENGTH,
    ):
        self.analysis_client = analysis_client
        self.trends_client = trends_client
        self.stage_timeout = stage_timeout
        self.max_content_length = max_content_length

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "PipelineOrchestrator":
        settings = settings or get_settings()
        return cls(
            analysis_client=AnalysisClient.from_settings(settings),
            trends_client=TrendsClient.from_settings(settings),
            stage_timeout=settings.stage_timeout_seconds,
            max_content_length=settings.max_content_length,
        )

    # ------------------------------------------------------------------
    # Preconditions
    # ------------------------------------------------------------------

    def prepare(
        self,
        content: Optional[str],
        from_stage: Union[StageKey, str, None] = None,
        previous: Optional[PriorOutputs] = None,
    ) -> PipelineRunState:
        """Check preconditions and build the run state.

        Synchronous, and makes no network calls.

        Raises:
            EmptyContentError: Content is empty after sanitization.
            MissingResumeDependency: A stage before `from_stage` has no
                prior output; names the first such stage.
        """
        sanitized = sanitize_user_input(content or "", self.max_content_length)
        if not sanitized:
            raise EmptyContentError()

        start_stage = StageKey(from_stage or StageKey.A)
        prior_outputs = _normalize_prior_outputs(previous)

        for stage in STAGE_ORDER[:start_stage.position]:
            if stage not in prior_outputs:
                logger.info(
                    "resume_dependency_missing",
                    from_stage=start_stage.value,
                    missing_stage=stage.value,
                )
                raise MissingResumeDependency(stage.value)

        return PipelineRunState(
            content=sanitized,
            start_stage=start_stage,
            prior_outputs=prior_outputs,
        )

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def run(
        self,
        content: Optional[str],
        from_stage: Union[StageKey, str, None] = None,
        previous: Optional[PriorOutputs] = None,
    ) -> AsyncIterator[PipelineEvent]:
        """Validate preconditions now, then return the event stream.

        Precondition errors are raised from this call, before any event is
        produced.
        """
        state = self.prepare(content, from_stage, previous)
        return self.stream(state)

    async def stream(self, state: PipelineRunState) -> AsyncIterator[PipelineEvent]:
        """Yield events for every pending stage of a prepared run.

        Stops issuing provider calls as soon as the consumer stops iterating.
        """
        pipeline_start = time.monotonic()
        logger.info(
            "pipeline_start",
            from_stage=state.start_stage.value,
            prior_stages=sorted(k.value for k in state.prior_outputs),
            content_length=len(state.content),
        )

        for stage_key in state.pending_stages():
            definition = STAGE_DEFINITIONS[stage_key]

            yield LogEvent(message=definition.log_message)
            yield StageStartEvent(stage=definition.name)

            stage_start = time.monotonic()
            logger.info("stage_start", stage=stage_key.value, name=definition.name)

            try:
                output = await self._execute_stage(definition, state)
            except Exception as e:
                logger.error(
                    "stage_failed",
                    stage=stage_key.value,
                    error=str(e),
                    type=type(e).__name__,
                    exc_info=not isinstance(e, StageFailure),
                )
                yield ErrorEvent(stage=definition.name, message=str(e) or "Unknown error")
                return

            state.record(stage_key, output)
            state.stage_durations[stage_key.value] = round(time.monotonic() - stage_start, 3)
            logger.info(
                "stage_complete",
                stage=stage_key.value,
                duration_seconds=state.stage_durations[stage_key.value],
            )

            yield ResultEvent(stage=definition.name, payload=output)
            yield StageCompleteEvent(stage=definition.name)

        logger.info(
            "pipeline_complete",
            duration_seconds=round(time.monotonic() - pipeline_start, 2),
            stages_run=[k.value for k in state.produced_outputs],
        )
        yield LogEvent(message=PIPELINE_COMPLETE_MESSAGE)

    async def _execute_stage(
        self,
        definition: StageDefinition,
        state: PipelineRunState,
    ) -> dict[str, Any]:
        """Call the stage's provider and validate the answer."""
        client = self.trends_client if definition.provider == "trends" else self.analysis_client
        call = definition.runner(state, client)

        if self.stage_timeout:
            try:
                raw = await asyncio.wait_for(call, timeout=self.stage_timeout)
            except asyncio.TimeoutError as e:
                raise StageTimeoutError(definition.key.value, self.stage_timeout) from e
        else:
            raw = await call

        return validate_stage_output(definition.key, raw)
