"""Tests for the platform registry and settings-driven construction."""

from __future__ import annotations

import pytest

from kodapost.config import Settings
from kodapost.platforms import (
    PlatformRegistry,
    TemporaryMediaHost,
    create_publisher,
    image_host_from_settings,
)
from kodapost.platforms.instagram import InstagramPublisher
from kodapost.platforms.linkedin import LinkedInPublisher
from kodapost.platforms.tiktok import TikTokPublisher


class TestPlatformRegistry:

    def test_all_platforms_registered(self):
        available = PlatformRegistry.available_platforms()
        for name in ("instagram", "tiktok", "linkedin", "youtube", "youtube_shorts", "reddit", "x", "lemon8"):
            assert name in available

    def test_lookup_is_case_insensitive(self):
        assert PlatformRegistry.is_registered("TikTok")
        assert isinstance(PlatformRegistry.get_publisher("TIKTOK"), TikTokPublisher)

    def test_unknown_platform(self):
        with pytest.raises(ValueError, match="Unknown platform: myspace"):
            PlatformRegistry.get_publisher("myspace")


class TestCreatePublisher:

    def test_instagram_gets_image_host(self, tmp_path):
        settings = Settings(media_base_url="https://app.example.com", media_dir=tmp_path)

        publisher = create_publisher("instagram", settings)

        assert isinstance(publisher, InstagramPublisher)
        assert isinstance(publisher.image_host, TemporaryMediaHost)
        assert publisher.image_host.root == tmp_path

    def test_timeout_from_settings(self):
        publisher = create_publisher("linkedin", Settings(http_timeout_seconds=5.0))
        assert isinstance(publisher, LinkedInPublisher)
        assert publisher._timeout == 5.0

    def test_cloudinary_requires_credentials(self):
        with pytest.raises(ValueError, match="Cloudinary credentials"):
            image_host_from_settings(Settings(image_host="cloudinary"))
