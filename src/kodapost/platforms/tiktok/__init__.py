"""TikTok platform adapter."""

from .publisher import TIKTOK_API_BASE, TikTokAPIError, TikTokPublisher

__all__ = ["TIKTOK_API_BASE", "TikTokAPIError", "TikTokPublisher"]
