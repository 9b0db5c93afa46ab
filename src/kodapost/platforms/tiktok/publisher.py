"""TikTok photo post publisher (Content Posting API).

Flow:
1. Init a photo post declaring the image count and caption
2. PUT each image to the upload URL TikTok assigned to it
3. Poll the publish status until PUBLISH_COMPLETE or FAILED

Note: posts are created as SELF_ONLY until the app passes TikTok's audit.
The user can change visibility in the TikTok app.
"""

from __future__ import annotations

from typing import Any, Optional

from ...constants import (
    TIKTOK,
    TIKTOK_CAPTION_MAX_LENGTH,
    TIKTOK_PHOTO_MAX_IMAGES,
    TIKTOK_PHOTO_MIN_IMAGES,
    TIKTOK_POLL_INTERVAL_SECONDS,
    TIKTOK_POLL_MAX_ATTEMPTS,
    UPLOAD_TIMEOUT_SECONDS,
)
from ..base import PlatformCredentials, PlatformPublisher, PublishOutcome
from ..http import (
    PlatformAPIError,
    PlatformHTTP,
    poll_until_ready,
    preview,
    require_image_count,
)

TIKTOK_API_BASE = "https://open.tiktokapis.com"

STATUS_COMPLETE = "PUBLISH_COMPLETE"
STATUS_FAILED = "FAILED"


class TikTokAPIError(PlatformAPIError):
    """TikTok reported an error code in an otherwise successful reply."""

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        log_id: str | None = None,
        publish_id: str | None = None,
    ):
        super().__init__(message, error_code=error_code, publish_id=publish_id)
        self.log_id = log_id


class TikTokPublisher(PlatformPublisher):
    """Publishes photo carousels through TikTok's Content Posting API."""

    logger_name = "tiktok_api"

    def __init__(
        self,
        *,
        base_url: str = TIKTOK_API_BASE,
        poll_interval: float = TIKTOK_POLL_INTERVAL_SECONDS,
        poll_max_attempts: int = TIKTOK_POLL_MAX_ATTEMPTS,
        **kwargs: Any,
    ):
        super().__init__(**kwargs)
        self.base_url = base_url.rstrip("/")
        self.poll_interval = poll_interval
        self.poll_max_attempts = poll_max_attempts

    @property
    def platform_name(self) -> str:
        return TIKTOK

    @property
    def display_name(self) -> str:
        return "TikTok"

    async def _publish(
        self,
        images: list[bytes],
        caption: str,
        credentials: PlatformCredentials,
    ) -> PublishOutcome:
        require_image_count(
            images,
            TIKTOK_PHOTO_MIN_IMAGES,
            TIKTOK_PHOTO_MAX_IMAGES,
            "TikTok photo posts require {minimum}-{maximum} images, got {count}",
        )
        headers = {"Authorization": f"Bearer {credentials.access_token}"}

        async with self._open_http() as http:
            await self._emit_progress("init", 0.0, "Initializing TikTok photo post...")
            publish_id, upload_urls = await self._init_photo_post(
                http, headers, caption, len(images)
            )
            self._logger.info(f"PUBLISH_ID:{publish_id} | INIT_OK | slots:{len(upload_urls)}")

            # Upload slots map to images by position
            if len(upload_urls) != len(images):
                raise PlatformAPIError(
                    f"TikTok returned {len(upload_urls)} upload URLs "
                    f"but we have {len(images)} images",
                    publish_id=publish_id,
                )
            if not all(upload_urls):
                raise PlatformAPIError(
                    "TikTok returned an upload slot without an upload URL",
                    publish_id=publish_id,
                )

            for index, (url, data) in enumerate(zip(upload_urls, images), start=1):
                await http.send(
                    "PUT",
                    url,
                    error_prefix=f"Failed to upload image {index}",
                    timeout=UPLOAD_TIMEOUT_SECONDS,
                    headers={
                        "Content-Type": "image/jpeg",
                        "Content-Length": str(len(data)),
                    },
                    content=data,
                )
                await self._emit_progress(
                    "upload",
                    60.0 * index / len(images),
                    f"Uploaded image {index}/{len(images)}",
                )

            await self._emit_progress("process", 70.0, "Waiting for TikTok to process the post...")
            await self._wait_for_publish(http, headers, publish_id)

        await self._emit_progress("complete", 100.0, "Published successfully!")
        return self._make_result(True, publish_id=publish_id)

    async def _init_photo_post(
        self,
        http: PlatformHTTP,
        headers: dict[str, str],
        caption: str,
        image_count: int,
    ) -> tuple[str, list[str]]:
        """Create the post and return ``(publish_id, upload_urls)``."""
        result = await http.send_json(
            "POST",
            f"{self.base_url}/v2/post/publish/content/init/",
            error_prefix="TikTok init failed",
            headers={**headers, "Content-Type": "application/json; charset=UTF-8"},
            json={
                "post_info": {
                    "title": caption[:TIKTOK_CAPTION_MAX_LENGTH],
                    "privacy_level": "SELF_ONLY",
                    "disable_comment": False,
                },
                "source_info": {
                    "source": "FILE_UPLOAD",
                    "media_type": "PHOTO",
                    "photo_cover_index": 0,
                    "photo_images": [{"image_type": "JPEG"} for _ in range(image_count)],
                },
            },
        )

        error = result.get("error") or {}
        code = error.get("code")
        if code and code != "ok":
            raise TikTokAPIError(
                f"TikTok init error: {error.get('message') or code}",
                error_code=code,
                log_id=error.get("log_id"),
            )

        data = result.get("data")
        if not data:
            raise PlatformAPIError(f"TikTok init returned no data: {preview(str(result))}")

        publish_id = data.get("publish_id")
        if not publish_id:
            raise PlatformAPIError("TikTok did not return a publish ID")

        upload_urls = [slot.get("upload_url") for slot in data.get("photo_images") or []]
        return publish_id, upload_urls

    async def _wait_for_publish(
        self,
        http: PlatformHTTP,
        headers: dict[str, str],
        publish_id: str,
    ) -> None:
        """Poll the publish status.

        Raises:
            PlatformAPIError: TikTok reported FAILED.
            PollTimeoutError: Still processing after the attempt ceiling.
        """

        async def check(attempt: int) -> Optional[bool]:
            try:
                result = await http.send_json(
                    "POST",
                    f"{self.base_url}/v2/post/publish/status/fetch/",
                    error_prefix="TikTok status check failed",
                    headers={**headers, "Content-Type": "application/json"},
                    json={"publish_id": publish_id},
                )
            except PlatformAPIError as e:
                if e.status_code is None:
                    raise
                self._logger.warning(
                    f"PUBLISH_ID:{publish_id} | POLL {attempt} | HTTP {e.status_code}"
                )
                return None

            data = result.get("data") or {}
            status = data.get("status")
            self._logger.info(f"PUBLISH_ID:{publish_id} | POLL {attempt} | {status}")
            if status == STATUS_COMPLETE:
                return True
            if status == STATUS_FAILED:
                raise PlatformAPIError(
                    f"TikTok publish failed: {data.get('fail_reason') or 'unknown'}",
                    publish_id=publish_id,
                )
            return None

        await poll_until_ready(
            check,
            interval=self.poll_interval,
            max_attempts=self.poll_max_attempts,
            timeout_message="Timed out waiting for TikTok to process the post",
            sleep=self._sleep,
            publish_id=publish_id,
        )
