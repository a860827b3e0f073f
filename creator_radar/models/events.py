"""Streamed event models.

One event per line on the wire. The `stage` field carries the stage's
display name (e.g. "Audience Fit"), matching what clients render.
"""

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter


class StageStartEvent(BaseModel):
    type: Literal["stage_start"] = "stage_start"
    stage: str


class StageCompleteEvent(BaseModel):
    type: Literal["stage_complete"] = "stage_complete"
    stage: str


class LogEvent(BaseModel):
    type: Literal["log"] = "log"
    message: str


class ResultEvent(BaseModel):
    type: Literal["result"] = "result"
    stage: str
    payload: dict[str, Any]


class ErrorEvent(BaseModel):
    type: Literal["error"] = "error"
    stage: Optional[str] = None
    message: str = "Something went wrong."


PipelineEvent = Annotated[
    Union[StageStartEvent, StageCompleteEvent, LogEvent, ResultEvent, ErrorEvent],
    Field(discriminator="type"),
]

pipeline_event_adapter: TypeAdapter[PipelineEvent] = TypeAdapter(PipelineEvent)


def event_to_dict(event: BaseModel) -> dict[str, Any]:
    """Wire representation of an event (unset optional fields omitted)."""
    return event.model_dump(mode="json", exclude_none=True)
