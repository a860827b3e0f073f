"""
Request schemas for the API.

These define the expected input structure for API endpoints.
Using Pydantic v2 for validation and serialization.

Prior stage outputs are accepted as plain objects: they were produced and
validated by an earlier run, so they are trusted and not re-validated.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from creator_radar.models import StageKey


class PreviousOutputs(BaseModel):
    """Stage outputs from an earlier run, used when resuming."""

    model_config = ConfigDict(populate_by_name=True)

    stage_a: Optional[dict[str, Any]] = Field(default=None, alias="stageA")
    stage_b: Optional[dict[str, Any]] = Field(default=None, alias="stageB")
    stage_c: Optional[dict[str, Any]] = Field(default=None, alias="stageC")
    stage_d: Optional[dict[str, Any]] = Field(default=None, alias="stageD")

    def by_stage(self) -> dict[StageKey, dict[str, Any]]:
        outputs = {
            StageKey.A: self.stage_a,
            StageKey.B: self.stage_b,
            StageKey.C: self.stage_c,
            StageKey.D: self.stage_d,
        }
        return {key: value for key, value in outputs.items() if value}


class AnalyzeRequest(BaseModel):
    """Request to analyze content, optionally resuming from a later stage."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {"content": "Hook: Learn how to design a creator content pipeline in 10 minutes."},
                {
                    "content": "Hook: ...",
                    "fromStage": "D",
                    "previous": {"stageA": {}, "stageB": {}, "stageC": {}},
                },
            ]
        },
    )

    content: Optional[str] = Field(default="", description="Raw content to analyze (sanitized server-side)")
    from_stage: Optional[StageKey] = Field(
        default=None,
        alias="fromStage",
        description="Stage to start at (A-E); defaults to A",
    )
    previous: Optional[PreviousOutputs] = Field(
        default=None,
        description="Outputs of stages before fromStage",
    )
