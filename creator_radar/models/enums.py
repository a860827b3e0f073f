"""Enumeration types for the pipeline models."""

from enum import Enum


class StageKey(str, Enum):
    """Pipeline stages, in execution order."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"

    @property
    def display_name(self) -> str:
        return STAGE_NAMES[self]

    @property
    def position(self) -> int:
        return STAGE_ORDER.index(self)

    @property
    def previous_key(self) -> str:
        """Key used for this stage's output in a resume request (e.g. 'stageA')."""
        return f"stage{self.value}"

    @classmethod
    def from_display_name(cls, name: str) -> "StageKey | None":
        for key, display in STAGE_NAMES.items():
            if display == name:
                return key
        return None


class EventType(str, Enum):
    """Discriminator for streamed events."""

    STAGE_START = "stage_start"
    STAGE_COMPLETE = "stage_complete"
    LOG = "log"
    RESULT = "result"
    ERROR = "error"


class StageStatus(str, Enum):
    """Client-side status of a single stage."""

    IDLE = "idle"
    RUNNING = "running"
    DONE = "done"
    ERROR = "error"


STAGE_ORDER: tuple[StageKey, ...] = (
    StageKey.A,
    StageKey.B,
    StageKey.C,
    StageKey.D,
    StageKey.E,
)

STAGE_NAMES: dict[StageKey, str] = {
    StageKey.A: "Segmentation",
    StageKey.B: "Engagement",
    StageKey.C: "Audience Fit",
    StageKey.D: "Trends",
    StageKey.E: "Synthesis",
}
