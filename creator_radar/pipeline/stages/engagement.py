"""Stage B: Engagement - drop-off risks and engagement issues per segment."""

from typing import Any

from creator_radar.config.prompts import ENGAGEMENT_INSTRUCTIONS, ENGAGEMENT_SHAPE
from creator_radar.llm.client import AnalysisClient
from creator_radar.models import StageKey
from creator_radar.pipeline.state import PipelineRunState


def build_engagement_input(state: PipelineRunState) -> dict[str, Any]:
    return {"segments": state.segments}


async def run_engagement(state: PipelineRunState, client: AnalysisClient) -> Any:
    return await client.run_stage(
        stage=StageKey.B.value,
        input_payload=build_engagement_input(state),
        shape=ENGAGEMENT_SHAPE,
        instructions=ENGAGEMENT_INSTRUCTIONS,
    )
