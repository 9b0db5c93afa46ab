"""PDF document builder for LinkedIn carousels.

LinkedIn shows multi-page documents as swipeable carousels, so the slide
images are packed into one PDF, one slide per 4:5 page.
"""

from __future__ import annotations

from io import BytesIO
from typing import Sequence

from PIL import Image

from ...constants import LINKEDIN_PAGE_HEIGHT_PX, LINKEDIN_PAGE_WIDTH_PX

JPEG_MAGIC = b"\xff\xd8"
PNG_MAGIC = b"\x89PNG"


class DocumentBuildError(ValueError):
    """Slide images could not be turned into a PDF."""


def detect_image_format(data: bytes) -> str:
    """Detect the image format from magic bytes.

    Returns ``"JPEG"`` or ``"PNG"``. Unknown content is treated as PNG.
    """
    if data[:2] == JPEG_MAGIC:
        return "JPEG"
    if data[:4] == PNG_MAGIC:
        return "PNG"
    return "PNG"


def _fit_page(img: Image.Image, page_size: tuple[int, int]) -> Image.Image:
    """Scale to cover the page, then center crop."""
    page_width, page_height = page_size
    img = img.convert("RGB")
    if img.size == page_size:
        return img

    img_ratio = img.width / img.height
    page_ratio = page_width / page_height
    if img_ratio > page_ratio:
        new_height = page_height
        new_width = int(new_height * img_ratio)
    else:
        new_width = page_width
        new_height = int(new_width / img_ratio)

    img = img.resize((new_width, new_height), Image.Resampling.LANCZOS)
    left = (new_width - page_width) // 2
    top = (new_height - page_height) // 2
    return img.crop((left, top, left + page_width, top + page_height))


def build_carousel_pdf(
    images: Sequence[bytes],
    page_size: tuple[int, int] = (LINKEDIN_PAGE_WIDTH_PX, LINKEDIN_PAGE_HEIGHT_PX),
) -> bytes:
    """Build a PDF with one full-bleed page per image.

    Raises:
        DocumentBuildError: No images, or an image Pillow cannot decode as
            its detected format.
    """
    if not images:
        raise DocumentBuildError("No images provided for PDF generation")

    pages = []
    for index, data in enumerate(images, start=1):
        image_format = detect_image_format(data)
        try:
            with Image.open(BytesIO(data), formats=[image_format]) as img:
                pages.append(_fit_page(img, page_size))
        except (OSError, ValueError) as e:
            raise DocumentBuildError(
                f"PDF generation failed on image {index} ({image_format}): {e}"
            ) from e

    output = BytesIO()
    pages[0].save(
        output,
        format="PDF",
        save_all=True,
        append_images=pages[1:],
        resolution=72.0,
    )
    return output.getvalue()
