"""Stage E: Synthesis - overall diagnosis and rewrite priorities."""

from typing import Any

from creator_radar.config.prompts import SYNTHESIS_INSTRUCTIONS, SYNTHESIS_SHAPE
from creator_radar.llm.client import AnalysisClient
from creator_radar.models import StageKey
from creator_radar.pipeline.state import PipelineRunState


def build_synthesis_input(state: PipelineRunState) -> dict[str, Any]:
    return {
        "stageA": state.output_for(StageKey.A),
        "stageB": state.output_for(StageKey.B),
        "stageC": state.output_for(StageKey.C),
        "stageD": state.output_for(StageKey.D),
    }


async def run_synthesis(state: PipelineRunState, client: AnalysisClient) -> Any:
    return await client.run_stage(
        stage=StageKey.E.value,
        input_payload=build_synthesis_input(state),
        shape=SYNTHESIS_SHAPE,
        instructions=SYNTHESIS_INSTRUCTIONS,
    )
