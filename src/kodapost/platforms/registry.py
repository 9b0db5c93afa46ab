"""Platform registry for discovering and instantiating platform publishers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Type

from ..constants import INSTAGRAM, LEMON8, LINKEDIN, REDDIT, TIKTOK, X, YOUTUBE, YOUTUBE_SHORTS

if TYPE_CHECKING:
    from ..config import Settings
    from .base import PlatformPublisher
    from .media_host import ImageHost


class PlatformRegistry:
    """Registry and factory for platform publishers.

    Platforms are registered at import time and can be retrieved by name.

    Usage:
        # Get available platforms
        platforms = PlatformRegistry.available_platforms()

        # Create a publisher
        publisher = PlatformRegistry.get_publisher("tiktok")
        publisher = PlatformRegistry.get_publisher("instagram", image_host=host)
    """

    _platforms: dict[str, Type["PlatformPublisher"]] = {}

    @classmethod
    def register(cls, name: str, publisher_cls: Type["PlatformPublisher"]) -> None:
        """Register a platform adapter.

        Args:
            name: Platform identifier (e.g., 'instagram', 'tiktok').
            publisher_cls: Publisher class implementing PlatformPublisher.
        """
        cls._platforms[name.lower()] = publisher_cls

    @classmethod
    def get_publisher(cls, name: str, **kwargs: Any) -> "PlatformPublisher":
        """Get a publisher instance for a platform.

        Args:
            name: Platform identifier.
            **kwargs: Passed to the publisher constructor.

        Raises:
            ValueError: If platform is not registered.
        """
        name = name.lower()
        if name not in cls._platforms:
            available = ", ".join(cls._platforms.keys())
            raise ValueError(f"Unknown platform: {name}. Available: {available}")

        return cls._platforms[name](**kwargs)

    @classmethod
    def available_platforms(cls) -> list[str]:
        """Get list of all registered platform names."""
        return list(cls._platforms.keys())

    @classmethod
    def is_registered(cls, name: str) -> bool:
        """Check if a platform is registered."""
        return name.lower() in cls._platforms


def image_host_from_settings(settings: "Settings") -> "ImageHost":
    """Pick the image host configured in settings."""
    from .media_host import CloudinaryImageHost, TemporaryMediaHost

    if settings.image_host == "cloudinary":
        if not settings.cloudinary_configured():
            raise ValueError(
                "image_host is 'cloudinary' but Cloudinary credentials are not set"
            )
        return CloudinaryImageHost(
            cloud_name=settings.cloudinary_cloud_name,
            api_key=settings.cloudinary_api_key,
            api_secret=settings.cloudinary_api_secret,
            folder=settings.cloudinary_folder,
        )
    return TemporaryMediaHost(settings.media_base_url, settings.media_dir)


def create_publisher(name: str, settings: "Settings", **kwargs: Any) -> "PlatformPublisher":
    """Build a publisher wired from settings (timeout, image host)."""
    kwargs.setdefault("timeout", settings.http_timeout_seconds)
    if name.lower() == INSTAGRAM:
        kwargs.setdefault("image_host", image_host_from_settings(settings))
    return PlatformRegistry.get_publisher(name, **kwargs)


def _register_platforms() -> None:
    """Register all available platform adapters.

    Called automatically on module import.
    """
    from .instagram import InstagramPublisher
    from .linkedin import LinkedInPublisher
    from .placeholders import (
        Lemon8Publisher,
        RedditPublisher,
        XPublisher,
        YouTubePublisher,
        YouTubeShortsPublisher,
    )
    from .tiktok import TikTokPublisher

    PlatformRegistry.register(INSTAGRAM, InstagramPublisher)
    PlatformRegistry.register(TIKTOK, TikTokPublisher)
    PlatformRegistry.register(LINKEDIN, LinkedInPublisher)
    PlatformRegistry.register(YOUTUBE, YouTubePublisher)
    PlatformRegistry.register(YOUTUBE_SHORTS, YouTubeShortsPublisher)
    PlatformRegistry.register(REDDIT, RedditPublisher)
    PlatformRegistry.register(X, XPublisher)
    PlatformRegistry.register(LEMON8, Lemon8Publisher)


# Auto-register platforms on import
_register_platforms()
