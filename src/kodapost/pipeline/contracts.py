"""Models and collaborator interfaces for the generation pipeline.

The AI and imaging routines are external services. The orchestrator only
sees them through the protocols below, so any object with a matching
async method can be plugged in (including test mocks).
"""

from __future__ import annotations

from typing import Any, Protocol, Sequence, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from ..constants import (
    DEFAULT_CAPTION_STYLE,
    DEFAULT_CREATIVITY_MODE,
    DEFAULT_IMAGE_ALLOCATION_MODE,
    DEFAULT_SLIDE_COUNT_CAP,
    SLIDE_COUNT_MIN,
)
from ..jobs.models import CompositedSlide
from ..jobs.service import GenerateConfig, generate_id


# =============================================================================
# Models
# =============================================================================

class UploadedImage(BaseModel):
    """A photo supplied by the caller.

    ``analysis`` is attached in place by the Analyze stage.
    """

    id: str
    data: bytes | str  # raw bytes or a data URI
    filename: str
    analysis: dict[str, Any] | None = None


class GeneratedSlide(BaseModel):
    """A slide produced by the Generator, before rasterization."""

    model_config = ConfigDict(extra="allow")

    slide_index: int
    status: str = "ready"
    image_id: str | None = None
    headline: str | None = None
    subtitle: str | None = None

    @property
    def is_ready(self) -> bool:
        return self.status == "ready"


class CarouselDraft(BaseModel):
    """Generator output: styled slides plus the filter to apply."""

    slides: list[GeneratedSlide] = Field(default_factory=list)
    filter_config: dict[str, Any] | None = None


class CarouselProject(BaseModel):
    """Full project handed to the Generator."""

    id: str
    post_mode: str = "carousel"
    theme: str
    keywords: list[str] = Field(default_factory=list)
    slide_count: int
    camera_profile_id: int = 0
    uploaded_images: list[UploadedImage] = Field(default_factory=list)
    analog_creativity_mode: str = DEFAULT_CREATIVITY_MODE
    image_allocation_mode: str = DEFAULT_IMAGE_ALLOCATION_MODE
    target_platforms: list[str] = Field(default_factory=list)
    caption_style: str = DEFAULT_CAPTION_STYLE
    overlay_style: dict[str, Any] | None = None
    filter_config: dict[str, Any] | None = None


def map_to_carousel_project(
    config: GenerateConfig,
    images: Sequence[UploadedImage],
) -> CarouselProject:
    """Build a CarouselProject from a request, filling defaults.

    Without an explicit slide count, one slide per image is used, clamped
    to the 2..10 range.
    """
    slide_count = config.slide_count or min(
        max(len(images), SLIDE_COUNT_MIN), DEFAULT_SLIDE_COUNT_CAP
    )

    filter_config = None
    if config.filter:
        filter_config = config.filter.model_dump()

    return CarouselProject(
        id=f"api-{generate_id('proj')}",
        post_mode="single" if slide_count == 1 else "carousel",
        theme=config.theme,
        keywords=list(config.keywords),
        slide_count=slide_count,
        camera_profile_id=config.camera_profile_id,
        uploaded_images=list(images),
        target_platforms=list(config.platforms),
        caption_style=config.caption_style or DEFAULT_CAPTION_STYLE,
        overlay_style=config.overlay_style,
        filter_config=filter_config,
    )


# =============================================================================
# Collaborator protocols
# =============================================================================

@runtime_checkable
class Analyzer(Protocol):
    """Describes one uploaded image (vision model)."""

    async def analyze(self, image: UploadedImage) -> dict[str, Any]:
        ...


@runtime_checkable
class Generator(Protocol):
    """Writes text overlays and styles slides for a project."""

    async def generate(self, project: CarouselProject) -> CarouselDraft:
        ...


@runtime_checkable
class Compositor(Protocol):
    """Rasterizes ready slides into export images per platform."""

    async def composite(
        self,
        slides: Sequence[GeneratedSlide],
        platforms: Sequence[str],
        filter_config: dict[str, Any] | None,
    ) -> list[CompositedSlide]:
        ...


@runtime_checkable
class Captioner(Protocol):
    """Writes the post caption."""

    async def caption(self, theme: str, keywords: Sequence[str]) -> str:
        ...
