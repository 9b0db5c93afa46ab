"""Abstract base classes for platform publishers.

Every adapter implements the same contract:

    outcome = await publisher.publish(images, caption, credentials)

Callers never branch on platform type except to pick which adapter to call.
Expected failures come back as a failed PublishOutcome, never as exceptions.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Awaitable, Callable, Optional, Sequence

import httpx

from ..constants import HTTP_TIMEOUT_SECONDS, PublishErrorKind
from .http import PlatformHTTP, PublishError, Sleep


@dataclass(frozen=True)
class PlatformCredentials:
    """Per-call credentials supplied by the token provider.

    Opaque to the adapters beyond reading them; never cached or refreshed here.
    """

    access_token: str
    refresh_token: Optional[str] = None
    platform_account_id: Optional[str] = None

    def __repr__(self) -> str:
        return (
            f"PlatformCredentials(access_token='***', "
            f"platform_account_id={self.platform_account_id!r})"
        )


@dataclass
class PublishOutcome:
    """Unified result from publishing to any platform."""

    success: bool
    platform: str
    post_id: Optional[str] = None
    permalink: Optional[str] = None
    publish_id: Optional[str] = None
    post_urn: Optional[str] = None
    error: Optional[str] = None
    error_kind: Optional[PublishErrorKind] = None
    details: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        if self.success:
            handle = self.permalink or self.post_id or self.post_urn or self.publish_id
            return f"[{self.platform}] Success: {handle}"
        return f"[{self.platform}] Failed: {self.error}"

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"success": self.success, "platform": self.platform}
        for key in ("post_id", "permalink", "publish_id", "post_urn", "error"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        if self.error_kind is not None:
            data["error_kind"] = self.error_kind.value
        if self.details:
            data["details"] = self.details
        return data


# Type for progress callbacks: (stage, percent, message)
ProgressCallback = Callable[[str, float, str], Awaitable[None]] | None


class PlatformPublisher(ABC):
    """Abstract base class for platform publishers.

    Subclasses implement ``_publish`` and raise PublishError subclasses for
    expected failures; ``publish`` turns those into failed outcomes.

    Args:
        http_client: Shared client to use instead of creating one per call.
            The caller keeps ownership and closes it.
        timeout: Request timeout when the publisher creates its own client.
        sleep: Awaitable used between poll attempts.
        progress_callback: Optional callback for progress updates.
    """

    logger_name = "publish"

    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        sleep: Sleep | None = None,
        progress_callback: ProgressCallback = None,
    ):
        self._http_client = http_client
        self._timeout = timeout
        self._sleep: Sleep = sleep or asyncio.sleep
        self._progress_callback = progress_callback
        self._logger = logging.getLogger(self.logger_name)

    @property
    @abstractmethod
    def platform_name(self) -> str:
        """Return the platform identifier (e.g., 'instagram', 'tiktok')."""
        ...

    @property
    def display_name(self) -> str:
        return self.platform_name.replace("_", " ").title()

    async def publish(
        self,
        images: Sequence[bytes],
        caption: str,
        credentials: PlatformCredentials,
    ) -> PublishOutcome:
        """Publish a carousel of images with a caption.

        Returns:
            PublishOutcome with success status and platform handles.
        """
        images = list(images)
        self._logger.info(
            f"PUBLISH:{self.platform_name} | START | images:{len(images)} | "
            f"caption_chars:{len(caption or '')}"
        )
        try:
            outcome = await self._publish(images, caption or "", credentials)
        except PublishError as e:
            self._logger.error(
                f"PUBLISH:{self.platform_name} | FAILED | kind:{e.kind.value} | error:{e}"
            )
            return self._make_result(
                False,
                publish_id=e.publish_id,
                error=str(e),
                error_kind=e.kind,
            )
        except Exception as e:
            self._logger.exception(f"PUBLISH:{self.platform_name} | ERROR | error:{e}")
            return self._make_result(
                False,
                error=f"{self.display_name} publish failed: {e}",
                error_kind=PublishErrorKind.UNEXPECTED,
            )

        self._logger.info(f"PUBLISH:{self.platform_name} | DONE | {outcome}")
        return outcome

    @abstractmethod
    async def _publish(
        self,
        images: list[bytes],
        caption: str,
        credentials: PlatformCredentials,
    ) -> PublishOutcome:
        """Platform protocol. Raise PublishError subclasses on failure."""
        ...

    @asynccontextmanager
    async def _open_http(self) -> AsyncIterator[PlatformHTTP]:
        """Yield a PlatformHTTP bound to the injected or a fresh client."""
        if self._http_client is not None:
            yield PlatformHTTP(self._http_client, self._logger)
            return
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            yield PlatformHTTP(client, self._logger)

    async def _emit_progress(self, stage: str, progress: float, message: str) -> None:
        """Emit a progress update if callback is set."""
        if self._progress_callback:
            await self._progress_callback(stage, progress, message)

    def _make_result(
        self,
        success: bool,
        post_id: Optional[str] = None,
        permalink: Optional[str] = None,
        publish_id: Optional[str] = None,
        post_urn: Optional[str] = None,
        error: Optional[str] = None,
        error_kind: Optional[PublishErrorKind] = None,
        **details: Any,
    ) -> PublishOutcome:
        """Create a PublishOutcome for this platform."""
        return PublishOutcome(
            success=success,
            platform=self.platform_name,
            post_id=post_id,
            permalink=permalink,
            publish_id=publish_id,
            post_urn=post_urn,
            error=error,
            error_kind=error_kind,
            details=details,
        )
