"""Shared HTTP and polling helpers for platform adapters.

Every adapter follows some variant of create -> upload -> poll -> finalize.
The pieces they share live here:
- the publish error hierarchy (validation / protocol / timeout)
- a bounded poll loop with a fixed interval and attempt ceiling
- a small httpx wrapper that logs calls and raises on bad replies
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, Sequence, TypeVar

import httpx

from ..constants import ERROR_BODY_PREVIEW_CHARS, PublishErrorKind

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]


# =============================================================================
# Errors
# =============================================================================

class PublishError(Exception):
    """Base class for expected publish failures.

    ``publish_id`` carries a platform handle when one was already assigned,
    so the caller can look the post up later.
    """

    kind: PublishErrorKind = PublishErrorKind.UNEXPECTED

    def __init__(self, message: str, publish_id: Optional[str] = None):
        super().__init__(message)
        self.publish_id = publish_id


class PublishValidationError(PublishError):
    """Input rejected before any network call. Never retried."""

    kind = PublishErrorKind.VALIDATION


class PlatformAPIError(PublishError):
    """Platform replied with an error, or with something unusable."""

    kind = PublishErrorKind.PROTOCOL

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        error_code: str | None = None,
        publish_id: Optional[str] = None,
    ):
        super().__init__(message, publish_id=publish_id)
        self.status_code = status_code
        self.error_code = error_code


class PollTimeoutError(PublishError):
    """Poll attempt ceiling exhausted.

    Distinct from PlatformAPIError: the platform may still finish the
    operation out of band.
    """

    kind = PublishErrorKind.TIMEOUT

    def __init__(
        self,
        message: str,
        attempts: int,
        waited_seconds: float,
        publish_id: Optional[str] = None,
    ):
        super().__init__(message, publish_id=publish_id)
        self.attempts = attempts
        self.waited_seconds = waited_seconds


# =============================================================================
# Preconditions
# =============================================================================

def require_image_count(
    images: Sequence[bytes],
    minimum: int,
    maximum: int | None,
    message: str,
) -> None:
    """Reject an image count outside ``[minimum, maximum]``.

    ``message`` may use ``{count}``, ``{minimum}`` and ``{maximum}``.
    """
    count = len(images)
    if count < minimum or (maximum is not None and count > maximum):
        raise PublishValidationError(
            message.format(count=count, minimum=minimum, maximum=maximum)
        )


# =============================================================================
# Polling
# =============================================================================

async def poll_until_ready(
    check: Callable[[int], Awaitable[Optional[T]]],
    *,
    interval: float,
    max_attempts: int,
    timeout_message: str,
    sleep: Sleep = asyncio.sleep,
    publish_id: Optional[str] = None,
) -> T:
    """Call ``check`` until it returns a value, with a fixed interval.

    ``check`` receives the 1-based attempt number and returns None while the
    operation is still pending. It raises to abort. The loop sleeps after
    every pending check, so a timeout happens after exactly
    ``interval * max_attempts`` seconds of waiting.

    Raises:
        PollTimeoutError: If no attempt produced a value.
    """
    for attempt in range(1, max_attempts + 1):
        result = await check(attempt)
        if result is not None:
            return result
        await sleep(interval)

    raise PollTimeoutError(
        timeout_message,
        attempts=max_attempts,
        waited_seconds=interval * max_attempts,
        publish_id=publish_id,
    )


# =============================================================================
# HTTP
# =============================================================================

def preview(text: str) -> str:
    """Trim a response body for error messages."""
    return text[:ERROR_BODY_PREVIEW_CHARS]


class PlatformHTTP:
    """httpx wrapper used by one adapter invocation.

    Logs each call (without query strings, which can carry tokens) and turns
    non-2xx replies and transport failures into PlatformAPIError.
    """

    def __init__(self, client: httpx.AsyncClient, logger: logging.Logger):
        self._client = client
        self._logger = logger
        self._call_count = 0

    @property
    def call_count(self) -> int:
        return self._call_count

    async def send(
        self,
        method: str,
        url: str,
        *,
        error_prefix: str,
        timeout: float | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """Send a request and require a 2xx reply.

        Raises:
            PlatformAPIError: On a transport error or a non-2xx status.
        """
        self._call_count += 1
        call = self._call_count
        self._logger.info(f"API CALL #{call} | {method.upper()} {url.split('?')[0]}")

        if timeout is not None:
            kwargs["timeout"] = timeout

        try:
            response = await self._client.request(method.upper(), url, **kwargs)
        except httpx.HTTPError as e:
            self._logger.error(f"API CALL #{call} | TRANSPORT ERROR: {e}")
            raise PlatformAPIError(f"{error_prefix}: {e}") from e

        if not response.is_success:
            self._logger.error(
                f"API CALL #{call} | HTTP {response.status_code}: {preview(response.text)}"
            )
            raise PlatformAPIError(
                f"{error_prefix}: {response.text}",
                status_code=response.status_code,
            )

        self._logger.info(f"API CALL #{call} | HTTP {response.status_code}")
        return response

    async def send_json(
        self,
        method: str,
        url: str,
        *,
        error_prefix: str,
        **kwargs: Any,
    ) -> dict[str, Any]:
        """Send a request and return the decoded JSON object.

        Raises:
            PlatformAPIError: On a bad status or a reply that is not a JSON object.
        """
        response = await self.send(method, url, error_prefix=error_prefix, **kwargs)
        return decode_json(response, error_prefix)


def decode_json(response: httpx.Response, error_prefix: str) -> dict[str, Any]:
    """Decode a JSON object reply or raise PlatformAPIError."""
    try:
        data = response.json()
    except ValueError as e:
        raise PlatformAPIError(
            f"{error_prefix}: malformed reply: {preview(response.text)}",
            status_code=response.status_code,
        ) from e
    if not isinstance(data, dict):
        raise PlatformAPIError(
            f"{error_prefix}: unexpected reply: {preview(response.text)}",
            status_code=response.status_code,
        )
    return data
