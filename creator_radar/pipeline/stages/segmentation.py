"""Stage A: Segmentation - split content into purpose-tagged segments."""

from typing import Any

from creator_radar.config.prompts import SEGMENTATION_INSTRUCTIONS, SEGMENTATION_SHAPE
from creator_radar.llm.client import AnalysisClient
from creator_radar.models import StageKey
from creator_radar.pipeline.state import PipelineRunState


def build_segmentation_input(state: PipelineRunState) -> dict[str, Any]:
    return {"content": state.content}


async def run_segmentation(state: PipelineRunState, client: AnalysisClient) -> Any:
    return await client.run_stage(
        stage=StageKey.A.value,
        input_payload=build_segmentation_input(state),
        shape=SEGMENTATION_SHAPE,
        instructions=SEGMENTATION_INSTRUCTIONS,
    )
