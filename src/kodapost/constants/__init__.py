"""Global constants package for KodaPost.

PACKAGE STRUCTURE:
-----------------
- status.py    : Job status, pipeline steps, publish error kinds
- limits.py    : Platform ranges, poll ceilings, upload limits, progress ranges
- platforms.py : Platform names and accepted option values

USAGE EXAMPLES:
--------------
    from kodapost.constants import JobStatus, PipelineStep
    from kodapost.constants import INSTAGRAM_POLL_MAX_ATTEMPTS
"""

from .status import (
    JobStatus,
    PipelineStep,
    PublishErrorKind,
    TERMINAL_JOB_STATUSES,
)
from .limits import (
    JOB_TTL_SECONDS,
    JOB_ID_PREFIX,
    MAX_UPLOAD_IMAGES,
    MAX_UPLOAD_FILE_SIZE,
    ACCEPTED_IMAGE_TYPES,
    SLIDE_COUNT_MIN,
    SLIDE_COUNT_MAX,
    DEFAULT_SLIDE_COUNT_CAP,
    PROGRESS_ANALYZE_START,
    PROGRESS_ANALYZE_END,
    PROGRESS_GENERATE_START,
    PROGRESS_GENERATE_END,
    PROGRESS_COMPOSITE_START,
    PROGRESS_COMPOSITE_END,
    PROGRESS_CAPTION_START,
    PROGRESS_CAPTION_END,
    PROGRESS_DONE,
    INSTAGRAM_CAPTION_MAX_LENGTH,
    INSTAGRAM_CAROUSEL_MIN_SLIDES,
    INSTAGRAM_CAROUSEL_MAX_SLIDES,
    INSTAGRAM_POLL_INTERVAL_SECONDS,
    INSTAGRAM_POLL_MAX_ATTEMPTS,
    TIKTOK_CAPTION_MAX_LENGTH,
    TIKTOK_PHOTO_MIN_IMAGES,
    TIKTOK_PHOTO_MAX_IMAGES,
    TIKTOK_POLL_INTERVAL_SECONDS,
    TIKTOK_POLL_MAX_ATTEMPTS,
    LINKEDIN_MIN_IMAGES,
    LINKEDIN_PAGE_WIDTH_PX,
    LINKEDIN_PAGE_HEIGHT_PX,
    HTTP_TIMEOUT_SECONDS,
    UPLOAD_TIMEOUT_SECONDS,
    ERROR_BODY_PREVIEW_CHARS,
)
from .platforms import (
    INSTAGRAM,
    TIKTOK,
    LINKEDIN,
    YOUTUBE,
    YOUTUBE_SHORTS,
    REDDIT,
    LEMON8,
    X,
    GENERATION_PLATFORMS,
    PREDEFINED_FILTERS,
    CAPTION_STYLES,
    DEFAULT_CAPTION_STYLE,
    DEFAULT_IMAGE_ALLOCATION_MODE,
    DEFAULT_CREATIVITY_MODE,
)

__all__ = [
    # Status
    "JobStatus",
    "PipelineStep",
    "PublishErrorKind",
    "TERMINAL_JOB_STATUSES",
    # Limits
    "JOB_TTL_SECONDS",
    "JOB_ID_PREFIX",
    "MAX_UPLOAD_IMAGES",
    "MAX_UPLOAD_FILE_SIZE",
    "ACCEPTED_IMAGE_TYPES",
    "SLIDE_COUNT_MIN",
    "SLIDE_COUNT_MAX",
    "DEFAULT_SLIDE_COUNT_CAP",
    "PROGRESS_ANALYZE_START",
    "PROGRESS_ANALYZE_END",
    "PROGRESS_GENERATE_START",
    "PROGRESS_GENERATE_END",
    "PROGRESS_COMPOSITE_START",
    "PROGRESS_COMPOSITE_END",
    "PROGRESS_CAPTION_START",
    "PROGRESS_CAPTION_END",
    "PROGRESS_DONE",
    "INSTAGRAM_CAPTION_MAX_LENGTH",
    "INSTAGRAM_CAROUSEL_MIN_SLIDES",
    "INSTAGRAM_CAROUSEL_MAX_SLIDES",
    "INSTAGRAM_POLL_INTERVAL_SECONDS",
    "INSTAGRAM_POLL_MAX_ATTEMPTS",
    "TIKTOK_CAPTION_MAX_LENGTH",
    "TIKTOK_PHOTO_MIN_IMAGES",
    "TIKTOK_PHOTO_MAX_IMAGES",
    "TIKTOK_POLL_INTERVAL_SECONDS",
    "TIKTOK_POLL_MAX_ATTEMPTS",
    "LINKEDIN_MIN_IMAGES",
    "LINKEDIN_PAGE_WIDTH_PX",
    "LINKEDIN_PAGE_HEIGHT_PX",
    "HTTP_TIMEOUT_SECONDS",
    "UPLOAD_TIMEOUT_SECONDS",
    "ERROR_BODY_PREVIEW_CHARS",
    # Platforms
    "INSTAGRAM",
    "TIKTOK",
    "LINKEDIN",
    "YOUTUBE",
    "YOUTUBE_SHORTS",
    "REDDIT",
    "LEMON8",
    "X",
    "GENERATION_PLATFORMS",
    "PREDEFINED_FILTERS",
    "CAPTION_STYLES",
    "DEFAULT_CAPTION_STYLE",
    "DEFAULT_IMAGE_ALLOCATION_MODE",
    "DEFAULT_CREATIVITY_MODE",
]
