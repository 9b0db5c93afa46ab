"""Shared test fixtures and configuration.

Provides stores with a controllable clock, async mocks for the pipeline
collaborators, and an httpx transport that records every request so
adapter tests can assert on the exact calls made.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from io import BytesIO
from typing import Callable
from unittest.mock import AsyncMock

import httpx
import pytest
from PIL import Image

from kodapost.jobs import CompositedSlide, GenerateConfig, InMemoryJobStore, create_job
from kodapost.pipeline import CarouselDraft, GeneratedSlide, UploadedImage
from kodapost.platforms import HostedMedia, PlatformCredentials

# Minimal JPEG header/footer; enough for magic-byte checks, not for decoding
JPEG_STUB = bytes([
    0xFF, 0xD8, 0xFF, 0xE0, 0x00, 0x10, 0x4A, 0x46,
    0x49, 0x46, 0x00, 0x01, 0x01, 0x00, 0x00, 0x01,
    0x00, 0x01, 0x00, 0x00, 0xFF, 0xD9
])


class FakeClock:
    """Manually advanced clock for expiry tests."""

    def __init__(self, start: datetime | None = None):
        self.current = start or datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: list[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(record)


def make_image(fmt: str = "JPEG", size: tuple[int, int] = (200, 250), color=(200, 40, 40)) -> bytes:
    """Encode a solid-color image with Pillow."""
    output = BytesIO()
    Image.new("RGB", size, color).save(output, format=fmt)
    return output.getvalue()


# =============================================================================
# Jobs
# =============================================================================

@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> InMemoryJobStore:
    return InMemoryJobStore(clock=clock)


@pytest.fixture
def generate_config() -> GenerateConfig:
    return GenerateConfig(
        theme="Autumn in Kyoto",
        platforms=["instagram"],
        keywords=["travel", "japan"],
    )


@pytest.fixture
def pending_job(store: InMemoryJobStore, generate_config: GenerateConfig):
    return create_job(store, "user_1", generate_config, image_count=3)


@pytest.fixture
def uploaded_images() -> list[UploadedImage]:
    return [
        UploadedImage(id=f"img_{i}", data=JPEG_STUB, filename=f"photo{i}.jpg")
        for i in range(1, 4)
    ]


# =============================================================================
# Pipeline collaborators
# =============================================================================

@pytest.fixture
def mock_analyzer() -> AsyncMock:
    analyzer = AsyncMock()
    analyzer.analyze.return_value = {"scene": "temple", "mood": "calm"}
    return analyzer


@pytest.fixture
def mock_generator() -> AsyncMock:
    generator = AsyncMock()
    generator.generate.return_value = CarouselDraft(
        slides=[
            GeneratedSlide(slide_index=i, status="ready", image_id=f"img_{i + 1}", headline=f"Slide {i + 1}")
            for i in range(3)
        ],
        filter_config={"predefined_filter": "kelvin"},
    )
    return generator


@pytest.fixture
def mock_compositor() -> AsyncMock:
    async def composite(slides, platforms, filter_config):
        return [
            CompositedSlide(platform=platform, slide_index=slide.slide_index, image_bytes=JPEG_STUB)
            for platform in platforms
            for slide in slides
        ]

    compositor = AsyncMock()
    compositor.composite.side_effect = composite
    return compositor


@pytest.fixture
def mock_captioner() -> AsyncMock:
    captioner = AsyncMock()
    captioner.caption.return_value = "Golden leaves and quiet temples. #kyoto"
    return captioner


# =============================================================================
# Publishing
# =============================================================================

@pytest.fixture
def credentials() -> PlatformCredentials:
    return PlatformCredentials(access_token="tok_secret", platform_account_id="1784140000")


@pytest.fixture
def mock_sleep() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def mock_image_host() -> AsyncMock:
    host = AsyncMock()

    async def hosted(images):
        return HostedMedia(
            urls=[f"https://media.example.com/slide-{i}.jpg" for i in range(1, len(images) + 1)],
            handle="session",
        )

    host.host.side_effect = hosted
    return host


@pytest.fixture
def jpeg_image() -> bytes:
    return make_image("JPEG")


@pytest.fixture
def png_image() -> bytes:
    return make_image("PNG", color=(20, 120, 220))
