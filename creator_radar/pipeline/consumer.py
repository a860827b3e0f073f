"""Client-side stream consumer.

Turns the NDJSON byte stream back into events and folds them into a view
state. The fold is a pure reducer (state x event -> state), so the same
event sequence always produces the same state.
"""

import codecs
import json
from dataclasses import dataclass, field, replace
from functools import reduce
from types import MappingProxyType
from typing import Any, AsyncIterator, Iterable, Iterator, Mapping, Optional, Union

import structlog
from pydantic import ValidationError

from creator_radar.models import (
    STAGE_NAMES,
    STAGE_ORDER,
    ErrorEvent,
    LogEvent,
    PipelineEvent,
    ResultEvent,
    StageCompleteEvent,
    StageKey,
    StageStartEvent,
    StageStatus,
    pipeline_event_adapter,
)

logger = structlog.get_logger(__name__)

FINAL_STAGE_NAME = STAGE_NAMES[StageKey.E]


# =============================================================================
# Line decoding
# =============================================================================

class NDJSONEventDecoder:
    """Incremental NDJSON decoder.

    Feed it chunks as they arrive; it returns the events of every complete
    line and keeps the trailing partial line until more bytes arrive. A line
    that fails to parse is logged and skipped.
    """

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""
        self.skipped_lines = 0

    def feed(self, chunk: Union[bytes, str]) -> list[PipelineEvent]:
        text = chunk if isinstance(chunk, str) else self._decoder.decode(chunk)
        self._buffer += text
        *lines, self._buffer = self._buffer.split("\n")
        return [event for event in map(self._parse_line, lines) if event is not None]

    def flush(self) -> list[PipelineEvent]:
        """Parse whatever is left once the stream has ended."""
        remainder = self._buffer + self._decoder.decode(b"", final=True)
        self._buffer = ""
        event = self._parse_line(remainder)
        return [event] if event is not None else []

    def _parse_line(self, line: str) -> Optional[PipelineEvent]:
        if not line.strip():
            return None
        try:
            return pipeline_event_adapter.validate_json(line)
        except (ValidationError, json.JSONDecodeError, ValueError) as e:
            self.skipped_lines += 1
            logger.warning("stream_line_parse_failed", error=str(e), preview=line[:120])
            return None


def decode_stream(chunks: Iterable[Union[bytes, str]]) -> Iterator[PipelineEvent]:
    """Decode a finite iterable of chunks into events."""
    decoder = NDJSONEventDecoder()
    for chunk in chunks:
        yield from decoder.feed(chunk)
    yield from decoder.flush()


async def adecode_stream(chunks: AsyncIterator[bytes]) -> AsyncIterator[PipelineEvent]:
    """Decode an async byte stream (e.g. httpx `aiter_bytes`) into events."""
    decoder = NDJSONEventDecoder()
    async for chunk in chunks:
        for event in decoder.feed(chunk):
            yield event
    for event in decoder.flush():
        yield event


# =============================================================================
# View state
# =============================================================================

@dataclass(frozen=True)
class TimelineEntry:
    type: str
    stage: Optional[str] = None
    message: Optional[str] = None


def _initial_status() -> Mapping[str, StageStatus]:
    return MappingProxyType({STAGE_NAMES[key]: StageStatus.IDLE for key in STAGE_ORDER})


@dataclass(frozen=True)
class StreamState:
    """Everything a client renders, rebuilt from the event sequence."""

    stage_status: Mapping[str, StageStatus] = field(default_factory=_initial_status)
    current_stage: Optional[str] = None
    logs: tuple[str, ...] = ()
    timeline: tuple[TimelineEntry, ...] = ()
    outputs: Mapping[StageKey, dict[str, Any]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    error_stage: Optional[StageKey] = None
    error_message: Optional[str] = None
    is_running: bool = True

    @classmethod
    def resumed(cls, outputs: Mapping[StageKey, dict[str, Any]]) -> "StreamState":
        """State for a retry run that keeps outputs from the previous attempt."""
        return cls(outputs=MappingProxyType(dict(outputs)))

    def output(self, stage: StageKey) -> Optional[dict[str, Any]]:
        return self.outputs.get(stage)

    @property
    def completed(self) -> bool:
        return self.stage_status.get(FINAL_STAGE_NAME) == StageStatus.DONE

    def retry_request(self, content: str) -> dict[str, Any]:
        """Request body that resumes from the failed stage.

        Raises:
            ValueError: If no stage has failed.
        """
        if self.error_stage is None:
            raise ValueError("No failed stage to retry from")
        previous = {
            key.previous_key: self.outputs[key]
            for key in STAGE_ORDER[:self.error_stage.position]
            if key in self.outputs
        }
        return {
            "content": content,
            "fromStage": self.error_stage.value,
            "previous": previous,
        }


def _with_status(state: StreamState, stage: str, status: StageStatus) -> Mapping[str, StageStatus]:
    return MappingProxyType({**state.stage_status, stage: status})


def apply_event(state: StreamState, event: PipelineEvent) -> StreamState:
    """Fold one event into the state. Pure: never mutates `state`."""
    if isinstance(event, StageStartEvent):
        return replace(
            state,
            current_stage=event.stage,
            stage_status=_with_status(state, event.stage, StageStatus.RUNNING),
            timeline=state.timeline + (TimelineEntry("start", stage=event.stage),),
        )

    if isinstance(event, StageCompleteEvent):
        return replace(
            state,
            stage_status=_with_status(state, event.stage, StageStatus.DONE),
            timeline=state.timeline + (TimelineEntry("complete", stage=event.stage),),
            is_running=state.is_running and event.stage != FINAL_STAGE_NAME,
        )

    if isinstance(event, LogEvent):
        return replace(
            state,
            logs=state.logs + (event.message,),
            timeline=state.timeline + (TimelineEntry("log", message=event.message),),
        )

    if isinstance(event, ResultEvent):
        key = StageKey.from_display_name(event.stage)
        if key is None or not event.payload:
            return state
        return replace(state, outputs=MappingProxyType({**state.outputs, key: event.payload}))

    if isinstance(event, ErrorEvent):
        stage_status = state.stage_status
        if event.stage:
            stage_status = _with_status(state, event.stage, StageStatus.ERROR)
        return replace(
            state,
            stage_status=stage_status,
            error_stage=StageKey.from_display_name(event.stage) if event.stage else None,
            error_message=event.message or "Something went wrong.",
            timeline=state.timeline
            + (TimelineEntry("error", stage=event.stage, message=event.message),),
            is_running=False,
        )

    return state


def fold_events(
    events: Iterable[PipelineEvent],
    initial: Optional[StreamState] = None,
) -> StreamState:
    """Reduce an event sequence into a StreamState."""
    return reduce(apply_event, events, initial or StreamState())
