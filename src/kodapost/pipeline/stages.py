"""Pipeline stage table.

Each stage declares whether its failure aborts the job and the progress
range it occupies. Ranges never overlap, so progress strictly increases at
every stage boundary and only the final step reaches 100.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final

from ..constants import (
    PROGRESS_ANALYZE_END,
    PROGRESS_ANALYZE_START,
    PROGRESS_CAPTION_END,
    PROGRESS_CAPTION_START,
    PROGRESS_COMPOSITE_END,
    PROGRESS_COMPOSITE_START,
    PROGRESS_GENERATE_END,
    PROGRESS_GENERATE_START,
    PipelineStep,
)


class StageKind(str, Enum):
    """How a stage failure affects the job."""

    FATAL = "fatal"
    """Failure marks the job failed; later stages do not run."""

    NON_FATAL = "non_fatal"
    """Failure is logged and the stage output degrades."""


@dataclass(frozen=True)
class PipelineStage:
    """One step of the generation pipeline."""

    step: PipelineStep
    kind: StageKind
    progress_start: int
    progress_end: int
    failure_message: str
    """Job error used when the failing call gave no message."""

    @property
    def is_fatal(self) -> bool:
        return self.kind == StageKind.FATAL

    def progress_at(self, done: int, total: int) -> int:
        """Progress after ``done`` of ``total`` units of work in this stage."""
        if total <= 0:
            return self.progress_end
        span = self.progress_end - self.progress_start
        return self.progress_start + round(done / total * span)


ANALYZE: Final = PipelineStage(
    PipelineStep.ANALYZING, StageKind.NON_FATAL, PROGRESS_ANALYZE_START, PROGRESS_ANALYZE_END,
    "Image analysis failed",
)
GENERATE: Final = PipelineStage(
    PipelineStep.GENERATING, StageKind.FATAL, PROGRESS_GENERATE_START, PROGRESS_GENERATE_END,
    "Carousel generation failed",
)
COMPOSITE: Final = PipelineStage(
    PipelineStep.COMPOSITING, StageKind.FATAL, PROGRESS_COMPOSITE_START, PROGRESS_COMPOSITE_END,
    "Slide compositing failed",
)
CAPTION: Final = PipelineStage(
    PipelineStep.CAPTIONING, StageKind.NON_FATAL, PROGRESS_CAPTION_START, PROGRESS_CAPTION_END,
    "Caption generation failed",
)

STAGES: Final[tuple[PipelineStage, ...]] = (ANALYZE, GENERATE, COMPOSITE, CAPTION)

NO_READY_SLIDES_ERROR: Final[str] = "No slides were generated successfully"
GENERATION_FAILED_ERROR: Final[str] = "Generation pipeline failed"


class StageFailed(Exception):
    """A fatal stage failed; the message becomes the job error."""

    def __init__(self, stage: PipelineStage, message: str):
        super().__init__(message)
        self.stage = stage
