"""Platform publish adapters.

All adapters share one contract:

    publisher = PlatformRegistry.get_publisher("tiktok")
    outcome = await publisher.publish(images, caption, credentials)

Supported: instagram, tiktok, linkedin. Placeholders (export manually):
youtube, youtube_shorts, reddit, x, lemon8.
"""

from .base import PlatformCredentials, PlatformPublisher, ProgressCallback, PublishOutcome
from .http import (
    PlatformAPIError,
    PlatformHTTP,
    PollTimeoutError,
    PublishError,
    PublishValidationError,
    poll_until_ready,
    require_image_count,
)
from .media_host import CloudinaryImageHost, HostedMedia, ImageHost, TemporaryMediaHost
from .registry import PlatformRegistry, create_publisher, image_host_from_settings

__all__ = [
    # Contract
    "PlatformCredentials",
    "PlatformPublisher",
    "ProgressCallback",
    "PublishOutcome",
    # Errors and helpers
    "PlatformAPIError",
    "PlatformHTTP",
    "PollTimeoutError",
    "PublishError",
    "PublishValidationError",
    "poll_until_ready",
    "require_image_count",
    # Media hosting
    "CloudinaryImageHost",
    "HostedMedia",
    "ImageHost",
    "TemporaryMediaHost",
    # Registry
    "PlatformRegistry",
    "create_publisher",
    "image_host_from_settings",
]
