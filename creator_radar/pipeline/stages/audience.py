"""Stage C: Audience Fit - audience mismatch, clarity and tone."""

from typing import Any

from creator_radar.config.prompts import AUDIENCE_FIT_INSTRUCTIONS, AUDIENCE_FIT_SHAPE
from creator_radar.llm.client import AnalysisClient
from creator_radar.models import StageKey
from creator_radar.pipeline.state import PipelineRunState


def build_audience_fit_input(state: PipelineRunState) -> dict[str, Any]:
    return {"segments": state.segments}


async def run_audience_fit(state: PipelineRunState, client: AnalysisClient) -> Any:
    return await client.run_stage(
        stage=StageKey.C.value,
        input_payload=build_audience_fit_input(state),
        shape=AUDIENCE_FIT_SHAPE,
        instructions=AUDIENCE_FIT_INSTRUCTIONS,
    )
