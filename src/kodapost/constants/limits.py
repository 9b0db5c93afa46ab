"""Limit constants for KodaPost.

This module contains all limits and constraints:
- Platform carousel ranges
- Polling intervals and attempt ceilings
- Upload validation limits
- Pipeline progress ranges

AI CONTEXT:
-----------
Platform limits come from each platform's publishing API. Poll settings
bound how long an adapter waits for asynchronous processing: the total
wait before a timeout error is exactly interval * max attempts.

MODIFICATION GUIDE:
------------------
- *_MIN_IMAGES / *_MAX_IMAGES: check the platform docs before changing
- *_POLL_*: keep the interval fixed (no backoff)
- PROGRESS_*: must stay strictly increasing stage to stage
"""

from typing import Final

# =============================================================================
# JOB LIMITS
# =============================================================================

JOB_TTL_SECONDS: Final[int] = 60 * 60
"""Job results are readable for one hour after creation."""

JOB_ID_PREFIX: Final[str] = "job"
"""Prefix of generated job identifiers."""

MAX_UPLOAD_IMAGES: Final[int] = 12
"""Maximum number of images accepted for one generation request."""

MAX_UPLOAD_FILE_SIZE: Final[int] = 10 * 1024 * 1024
"""Maximum size of a single uploaded image (10 MB)."""

ACCEPTED_IMAGE_TYPES: Final[tuple[str, ...]] = (
    "image/jpeg",
    "image/png",
    "image/webp",
    "image/jpg",
)
"""MIME types accepted for uploaded images."""

SLIDE_COUNT_MIN: Final[int] = 2
SLIDE_COUNT_MAX: Final[int] = 12
"""Range accepted for an explicit slide count."""

DEFAULT_SLIDE_COUNT_CAP: Final[int] = 10
"""Upper bound when the slide count is derived from the image count."""


# =============================================================================
# PIPELINE PROGRESS
# =============================================================================

PROGRESS_ANALYZE_START: Final[int] = 5
PROGRESS_ANALYZE_END: Final[int] = 30
PROGRESS_GENERATE_START: Final[int] = 35
PROGRESS_GENERATE_END: Final[int] = 55
PROGRESS_COMPOSITE_START: Final[int] = 60
PROGRESS_COMPOSITE_END: Final[int] = 80
PROGRESS_CAPTION_START: Final[int] = 85
PROGRESS_CAPTION_END: Final[int] = 90
PROGRESS_DONE: Final[int] = 100


# =============================================================================
# INSTAGRAM LIMITS
# =============================================================================

INSTAGRAM_CAPTION_MAX_LENGTH: Final[int] = 2200
"""Maximum caption length in characters for Instagram posts."""

INSTAGRAM_CAROUSEL_MIN_SLIDES: Final[int] = 2
"""Minimum slides in a carousel post."""

INSTAGRAM_CAROUSEL_MAX_SLIDES: Final[int] = 10
"""Maximum slides in a carousel post."""

INSTAGRAM_POLL_INTERVAL_SECONDS: Final[float] = 2.0
INSTAGRAM_POLL_MAX_ATTEMPTS: Final[int] = 30


# =============================================================================
# TIKTOK LIMITS
# =============================================================================

TIKTOK_CAPTION_MAX_LENGTH: Final[int] = 2200
TIKTOK_PHOTO_MIN_IMAGES: Final[int] = 2
TIKTOK_PHOTO_MAX_IMAGES: Final[int] = 35
TIKTOK_POLL_INTERVAL_SECONDS: Final[float] = 3.0
TIKTOK_POLL_MAX_ATTEMPTS: Final[int] = 30


# =============================================================================
# LINKEDIN LIMITS
# =============================================================================

LINKEDIN_MIN_IMAGES: Final[int] = 1
LINKEDIN_PAGE_WIDTH_PX: Final[int] = 1080
LINKEDIN_PAGE_HEIGHT_PX: Final[int] = 1350
"""Document pages use a fixed 4:5 aspect ratio."""


# =============================================================================
# HTTP
# =============================================================================

HTTP_TIMEOUT_SECONDS: Final[float] = 60.0
"""Default timeout for platform API requests."""

UPLOAD_TIMEOUT_SECONDS: Final[float] = 300.0
"""Timeout for binary uploads."""

ERROR_BODY_PREVIEW_CHARS: Final[int] = 200
"""How much of an error response body is kept in error messages."""
