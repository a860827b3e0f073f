"""Stage output models.

These models define the contracts between pipeline stages and the wire
format of `result` payloads. Field names are snake_case in Python and
camelCase on the wire.

Stage Flow:
A. Segmentation   → SegmentationOutput
B. Engagement     → EngagementOutput      (needs A)
C. Audience Fit   → AudienceFitOutput     (needs A)
D. Trends         → TrendsOutput          (needs raw content only)
E. Synthesis      → SynthesisOutput       (needs A, B, C, D)

Validation is strict: ids must be real integers and enumerated fields only
accept their fixed values. Unknown keys are dropped.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr
from pydantic.alias_generators import to_camel

SegmentPurpose = Literal["hook", "context", "story", "value", "cta", "other"]
Level = Literal["low", "medium", "high"]


class StageModel(BaseModel):
    """Base for all stage output models."""

    model_config = ConfigDict(
        strict=True,
        extra="ignore",
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_payload(self) -> dict:
        """Wire representation (camelCase keys)."""
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# Stage A: Segmentation
# =============================================================================

class Segment(StageModel):
    """A unit of content with a purpose tag."""

    id: StrictInt = Field(description="Model-assigned id, unique within the output")
    text: StrictStr
    purpose: SegmentPurpose


class SegmentationOutput(StageModel):
    segments: list[Segment] = Field(min_length=1)


# =============================================================================
# Stage B: Engagement
# =============================================================================

class DropOffRisk(StageModel):
    segment_id: StrictInt
    reason: StrictStr
    severity: Level


class EngagementIssue(StageModel):
    segment_id: StrictInt
    issue: StrictStr


class EngagementOutput(StageModel):
    drop_off_risks: list[DropOffRisk]
    engagement_issues: list[EngagementIssue]


# =============================================================================
# Stage C: Audience Fit
# =============================================================================

class ClarityIssue(StageModel):
    segment_id: StrictInt
    problem: StrictStr


class AudienceFitOutput(StageModel):
    audience_mismatch: list[StrictStr]
    clarity_issues: list[ClarityIssue]
    tone_problems: list[StrictStr]


# =============================================================================
# Stage D: Trends
# =============================================================================

class TrendsOutput(StageModel):
    """Trend signals for the inferred topic. Not keyed by segment."""

    current_trends: list[StrictStr]
    saturation_signals: list[StrictStr]
    similar_popular_formats: list[StrictStr]


# =============================================================================
# Stage E: Synthesis
# =============================================================================

class RewritePriority(StageModel):
    segment_id: StrictInt
    recommended_change: StrictStr
    expected_impact: StrictStr


class SynthesisOutput(StageModel):
    overall_potential: Level
    highest_impact_fixes: list[StrictStr]
    rewrite_priorities: list[RewritePriority]
    content_positioning_advice: list[StrictStr]
