"""LinkedIn platform adapter."""

from .document import DocumentBuildError, build_carousel_pdf, detect_image_format
from .publisher import LINKEDIN_API_BASE, LinkedInPublisher, author_urn

__all__ = [
    "DocumentBuildError",
    "LINKEDIN_API_BASE",
    "LinkedInPublisher",
    "author_urn",
    "build_carousel_pdf",
    "detect_image_format",
]
