"""Pipeline stages - each stage builds its input and calls one provider.

Stage outputs are validated by the orchestrator, not here.
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Literal

from creator_radar.config.prompts import STAGE_LOG_MESSAGES
from creator_radar.models import StageKey
from creator_radar.pipeline.stages.audience import build_audience_fit_input, run_audience_fit
from creator_radar.pipeline.stages.engagement import build_engagement_input, run_engagement
from creator_radar.pipeline.stages.segmentation import (
    build_segmentation_input,
    run_segmentation,
)
from creator_radar.pipeline.stages.synthesis import build_synthesis_input, run_synthesis
from creator_radar.pipeline.stages.trends import build_trends_messages, run_trends
from creator_radar.pipeline.state import PipelineRunState

ProviderName = Literal["analysis", "trends"]


@dataclass(frozen=True)
class StageDefinition:
    """How to run one stage."""

    key: StageKey
    provider: ProviderName
    runner: Callable[[PipelineRunState, Any], Awaitable[Any]]

    @property
    def name(self) -> str:
        return self.key.display_name

    @property
    def log_message(self) -> str:
        return STAGE_LOG_MESSAGES[self.key.value]


STAGE_DEFINITIONS: dict[StageKey, StageDefinition] = {
    StageKey.A: StageDefinition(StageKey.A, "analysis", run_segmentation),
    StageKey.B: StageDefinition(StageKey.B, "analysis", run_engagement),
    StageKey.C: StageDefinition(StageKey.C, "analysis", run_audience_fit),
    StageKey.D: StageDefinition(StageKey.D, "trends", run_trends),
    StageKey.E: StageDefinition(StageKey.E, "analysis", run_synthesis),
}

__all__ = [
    "StageDefinition",
    "STAGE_DEFINITIONS",
    # Stage functions
    "run_segmentation",
    "run_engagement",
    "run_audience_fit",
    "run_trends",
    "run_synthesis",
    # Input builders
    "build_segmentation_input",
    "build_engagement_input",
    "build_audience_fit_input",
    "build_trends_messages",
    "build_synthesis_input",
]
