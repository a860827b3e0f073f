"""Pipeline run state.

Exists only for the lifetime of one request. Created by the orchestrator
after preconditions pass, mutated as each stage completes, discarded when
the stream closes.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from creator_radar.models import STAGE_ORDER, StageKey


@dataclass
class PipelineRunState:
    """Inputs and outputs of a single pipeline invocation."""

    content: str
    start_stage: StageKey = StageKey.A
    prior_outputs: dict[StageKey, dict[str, Any]] = field(default_factory=dict)
    produced_outputs: dict[StageKey, dict[str, Any]] = field(default_factory=dict)
    stage_durations: dict[str, float] = field(default_factory=dict)

    def pending_stages(self) -> list[StageKey]:
        """Stages this run executes, in order."""
        return list(STAGE_ORDER[self.start_stage.position:])

    def output_for(self, stage: StageKey) -> Optional[dict[str, Any]]:
        """Output produced in this run, else the caller-supplied one."""
        if stage in self.produced_outputs:
            return self.produced_outputs[stage]
        return self.prior_outputs.get(stage)

    def require_output(self, stage: StageKey) -> dict[str, Any]:
        output = self.output_for(stage)
        if output is None:
            raise KeyError(f"No output available for stage {stage.value}")
        return output

    def record(self, stage: StageKey, output: dict[str, Any]) -> None:
        self.produced_outputs[stage] = output

    @property
    def segments(self) -> list[Any]:
        return self.require_output(StageKey.A).get("segments", [])
