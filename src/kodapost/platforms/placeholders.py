"""Adapters for platforms without a publishing integration yet.

They honor the publish contract so callers need no special cases, and
always answer with the same "export manually" outcome. No network calls.
"""

from __future__ import annotations

from ..constants import LEMON8, REDDIT, X, YOUTUBE, YOUTUBE_SHORTS, PublishErrorKind
from .base import PlatformCredentials, PlatformPublisher, PublishOutcome


class PlaceholderPublisher(PlatformPublisher):
    """Base for not-yet-implemented platforms."""

    name: str = ""
    message: str = ""

    @property
    def platform_name(self) -> str:
        return self.name

    async def _publish(
        self,
        images: list[bytes],
        caption: str,
        credentials: PlatformCredentials,
    ) -> PublishOutcome:
        return self._make_result(
            False,
            error=self.message,
            error_kind=PublishErrorKind.UNSUPPORTED,
        )


class YouTubePublisher(PlaceholderPublisher):
    name = YOUTUBE
    message = (
        "YouTube Community post publishing is coming soon. "
        "Please export your carousel and upload it manually to YouTube."
    )


class YouTubeShortsPublisher(YouTubePublisher):
    name = YOUTUBE_SHORTS


class RedditPublisher(PlaceholderPublisher):
    name = REDDIT
    message = (
        "Reddit gallery post publishing is coming soon. "
        "Please export your carousel and upload it manually to Reddit."
    )


class XPublisher(PlaceholderPublisher):
    # TODO: wire up X API v2 chunked media upload (INIT/APPEND/FINALIZE) + POST /2/tweets
    name = X
    message = (
        "X publishing is coming soon. "
        "Please export your carousel and post it manually to X."
    )


class Lemon8Publisher(PlaceholderPublisher):
    name = LEMON8
    message = (
        "Lemon8 photo post publishing is coming soon. "
        "Please export your carousel and upload it manually to Lemon8."
    )
