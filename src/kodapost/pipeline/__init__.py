"""Generation job pipeline.

Usage:
    from kodapost.pipeline import GenerationOrchestrator

    orchestrator = GenerationOrchestrator(store, analyzer, generator, compositor, captioner)
    await orchestrator.run_job(job_id, config, images)
"""

from .contracts import (
    Analyzer,
    Captioner,
    CarouselDraft,
    CarouselProject,
    Compositor,
    GeneratedSlide,
    Generator,
    UploadedImage,
    map_to_carousel_project,
)
from .orchestrator import GenerationOrchestrator
from .stages import (
    NO_READY_SLIDES_ERROR,
    STAGES,
    PipelineStage,
    StageKind,
)

__all__ = [
    "Analyzer",
    "Captioner",
    "CarouselDraft",
    "CarouselProject",
    "Compositor",
    "GeneratedSlide",
    "Generator",
    "UploadedImage",
    "map_to_carousel_project",
    "GenerationOrchestrator",
    "NO_READY_SLIDES_ERROR",
    "STAGES",
    "PipelineStage",
    "StageKind",
]
