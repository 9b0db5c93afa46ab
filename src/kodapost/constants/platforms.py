"""Platform names and option sets accepted by the generation API."""

from typing import Final

INSTAGRAM: Final[str] = "instagram"
TIKTOK: Final[str] = "tiktok"
LINKEDIN: Final[str] = "linkedin"
YOUTUBE: Final[str] = "youtube"
YOUTUBE_SHORTS: Final[str] = "youtube_shorts"
REDDIT: Final[str] = "reddit"
LEMON8: Final[str] = "lemon8"
X: Final[str] = "x"

GENERATION_PLATFORMS: Final[tuple[str, ...]] = (
    INSTAGRAM,
    TIKTOK,
    LINKEDIN,
    YOUTUBE,
    REDDIT,
    LEMON8,
)
"""Platforms a generation request may target (composite output formats)."""

PREDEFINED_FILTERS: Final[tuple[str, ...]] = (
    "none",
    "1977",
    "earlybird",
    "lofi",
    "nashville",
    "toaster",
    "kelvin",
    "xpro2",
    "inkwell",
)

CAPTION_STYLES: Final[tuple[str, ...]] = ("storyteller", "minimalist", "data_driven")
DEFAULT_CAPTION_STYLE: Final[str] = "storyteller"
DEFAULT_IMAGE_ALLOCATION_MODE: Final[str] = "sequential"
DEFAULT_CREATIVITY_MODE: Final[str] = "recommended"
