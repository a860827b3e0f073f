"""Stage output validation.

Resolved provider JSON is only accepted as a stage's output after it passes
that stage's model. Failures surface immediately as SchemaViolation; they
are never retried within the same run.
"""

from typing import Any

import structlog
from pydantic import ValidationError

from creator_radar.errors import SchemaViolation
from creator_radar.models import (
    AudienceFitOutput,
    EngagementOutput,
    SegmentationOutput,
    StageKey,
    StageModel,
    SynthesisOutput,
    TrendsOutput,
)

logger = structlog.get_logger(__name__)

STAGE_OUTPUT_MODELS: dict[StageKey, type[StageModel]] = {
    StageKey.A: SegmentationOutput,
    StageKey.B: EngagementOutput,
    StageKey.C: AudienceFitOutput,
    StageKey.D: TrendsOutput,
    StageKey.E: SynthesisOutput,
}


def parse_stage_output(stage: StageKey, data: Any) -> StageModel:
    """Validate data against the stage's model.

    Raises:
        SchemaViolation: If required fields are missing, an enumerated value
            is outside its set, an id is not an integer, or Stage A has no
            segments.
    """
    model = STAGE_OUTPUT_MODELS[StageKey(stage)]
    try:
        return model.model_validate(data)
    except ValidationError as e:
        errors = e.errors(include_url=False, include_input=False)
        logger.warning(
            "stage_schema_violation",
            stage=StageKey(stage).value,
            error_count=len(errors),
        )
        raise SchemaViolation(StageKey(stage).value, errors) from e


def validate_stage_output(stage: StageKey, data: Any) -> dict[str, Any]:
    """Validate data and return the wire payload for the stage."""
    return parse_stage_output(stage, data).to_payload()


def output_json_schema(stage: StageKey) -> dict[str, Any]:
    """JSON schema of a stage's output (camelCase), for structured-output requests."""
    return STAGE_OUTPUT_MODELS[StageKey(stage)].model_json_schema(by_alias=True)
