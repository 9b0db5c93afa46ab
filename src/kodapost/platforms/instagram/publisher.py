"""Instagram carousel publisher (Graph API).

Flow:
1. Host each image at a public URL (the Graph API fetches media by URL)
2. Create one carousel item container per image
3. Create the parent CAROUSEL container referencing all items
4. Poll the container until FINISHED
5. Publish the container via media_publish
6. Fetch the permalink (best effort)
"""

from __future__ import annotations

from typing import Any, Optional

from ...constants import (
    INSTAGRAM,
    INSTAGRAM_CAROUSEL_MAX_SLIDES,
    INSTAGRAM_CAROUSEL_MIN_SLIDES,
    INSTAGRAM_POLL_INTERVAL_SECONDS,
    INSTAGRAM_POLL_MAX_ATTEMPTS,
)
from ..base import PlatformCredentials, PlatformPublisher, PublishOutcome
from ..http import (
    PlatformAPIError,
    PlatformHTTP,
    PublishValidationError,
    poll_until_ready,
    preview,
    require_image_count,
)
from ..media_host import ImageHost
from .caption import sanitize_caption

GRAPH_API_BASE = "https://graph.facebook.com/v21.0"

# Container status_code values
STATUS_FINISHED = "FINISHED"
STATUS_ERROR = "ERROR"


class InstagramPublisher(PlatformPublisher):
    """Publishes photo carousels to an Instagram Business account.

    ``credentials.platform_account_id`` must be the Instagram Business
    Account id. Hosted images are always released once publishing ends,
    successful or not.
    """

    logger_name = "instagram_api"

    def __init__(
        self,
        image_host: ImageHost,
        *,
        base_url: str = GRAPH_API_BASE,
        poll_interval: float = INSTAGRAM_POLL_INTERVAL_SECONDS,
        poll_max_attempts: int = INSTAGRAM_POLL_MAX_ATTEMPTS,
        **kwargs: Any,
    ):
        super().__init__(**kwargs)
        self.image_host = image_host
        self.base_url = base_url.rstrip("/")
        self.poll_interval = poll_interval
        self.poll_max_attempts = poll_max_attempts

    @property
    def platform_name(self) -> str:
        return INSTAGRAM

    async def _publish(
        self,
        images: list[bytes],
        caption: str,
        credentials: PlatformCredentials,
    ) -> PublishOutcome:
        require_image_count(
            images,
            INSTAGRAM_CAROUSEL_MIN_SLIDES,
            INSTAGRAM_CAROUSEL_MAX_SLIDES,
            "Instagram carousels require {minimum}-{maximum} images, got {count}",
        )
        ig_user_id = credentials.platform_account_id
        if not ig_user_id:
            raise PublishValidationError(
                "Instagram Business Account ID is missing. Please reconnect in Settings."
            )

        await self._emit_progress("upload", 0.0, f"Hosting {len(images)} images...")
        hosted = await self.image_host.host(images)
        try:
            async with self._open_http() as http:
                return await self._publish_hosted(
                    http, hosted.urls, caption, credentials.access_token, ig_user_id
                )
        finally:
            await self.image_host.release(hosted)

    async def _publish_hosted(
        self,
        http: PlatformHTTP,
        image_urls: list[str],
        caption: str,
        access_token: str,
        ig_user_id: str,
    ) -> PublishOutcome:
        item_ids = []
        for index, url in enumerate(image_urls, start=1):
            item_ids.append(await self._create_item(http, url, access_token, ig_user_id))
            await self._emit_progress(
                "upload",
                40.0 * index / len(image_urls),
                f"Created carousel item {index}/{len(image_urls)}",
            )

        container_id = await self._create_container(
            http, item_ids, caption, access_token, ig_user_id
        )
        self._logger.info(f"CONTAINER:{container_id} | CREATED | children:{len(item_ids)}")

        await self._emit_progress("process", 50.0, "Waiting for Instagram to process images...")
        await self._wait_for_container(http, container_id, access_token)

        await self._emit_progress("publish", 80.0, "Publishing carousel...")
        data = await http.send_json(
            "POST",
            f"{self.base_url}/{ig_user_id}/media_publish",
            error_prefix="Failed to publish carousel",
            json={"creation_id": container_id, "access_token": access_token},
        )
        post_id = data.get("id")
        if not post_id:
            raise PlatformAPIError(
                f"Instagram did not return a post ID: {preview(str(data))}"
            )

        permalink = await self._fetch_permalink(http, post_id, access_token)
        await self._emit_progress("complete", 100.0, "Published successfully!")
        return self._make_result(
            True,
            post_id=post_id,
            permalink=permalink,
            container_id=container_id,
        )

    async def _create_item(
        self,
        http: PlatformHTTP,
        image_url: str,
        access_token: str,
        ig_user_id: str,
    ) -> str:
        data = await http.send_json(
            "POST",
            f"{self.base_url}/{ig_user_id}/media",
            error_prefix="Failed to create carousel item",
            json={
                "image_url": image_url,
                "is_carousel_item": True,
                "access_token": access_token,
            },
        )
        if not data.get("id"):
            raise PlatformAPIError(
                f"Instagram API did not return a media ID: {preview(str(data.get('error') or data))}"
            )
        return data["id"]

    async def _create_container(
        self,
        http: PlatformHTTP,
        item_ids: list[str],
        caption: str,
        access_token: str,
        ig_user_id: str,
    ) -> str:
        data = await http.send_json(
            "POST",
            f"{self.base_url}/{ig_user_id}/media",
            error_prefix="Failed to create carousel container",
            json={
                "media_type": "CAROUSEL",
                "caption": sanitize_caption(caption),
                "children": ",".join(item_ids),
                "access_token": access_token,
            },
        )
        if not data.get("id"):
            raise PlatformAPIError(
                f"Instagram did not return a container ID: {preview(str(data.get('error') or data))}"
            )
        return data["id"]

    async def _wait_for_container(
        self,
        http: PlatformHTTP,
        container_id: str,
        access_token: str,
    ) -> None:
        """Poll until the container is FINISHED.

        Raises:
            PlatformAPIError: Container reported ERROR.
            PollTimeoutError: Still processing after the attempt ceiling.
        """

        async def check(attempt: int) -> Optional[bool]:
            try:
                data = await http.send_json(
                    "GET",
                    f"{self.base_url}/{container_id}",
                    error_prefix="Container status check failed",
                    params={"fields": "status_code,status", "access_token": access_token},
                )
            except PlatformAPIError as e:
                if e.status_code is None:
                    raise
                # A bad status reply is treated as still processing
                self._logger.warning(
                    f"CONTAINER:{container_id} | POLL {attempt} | HTTP {e.status_code}"
                )
                return None

            status_code = data.get("status_code")
            self._logger.info(f"CONTAINER:{container_id} | POLL {attempt} | {status_code}")
            if status_code == STATUS_FINISHED:
                return True
            if status_code == STATUS_ERROR:
                raise PlatformAPIError(
                    f"Container processing failed: {data.get('status') or 'unknown error'}"
                )
            return None

        await poll_until_ready(
            check,
            interval=self.poll_interval,
            max_attempts=self.poll_max_attempts,
            timeout_message="Timed out waiting for Instagram to process images",
            sleep=self._sleep,
        )

    async def _fetch_permalink(
        self,
        http: PlatformHTTP,
        post_id: str,
        access_token: str,
    ) -> Optional[str]:
        """Look up the post permalink. A failed lookup is not a failed publish."""
        try:
            data = await http.send_json(
                "GET",
                f"{self.base_url}/{post_id}",
                error_prefix="Permalink lookup failed",
                params={"fields": "permalink", "access_token": access_token},
            )
        except PlatformAPIError as e:
            self._logger.warning(f"POST:{post_id} | PERMALINK_SKIPPED | error:{preview(str(e))}")
            return None
        return data.get("permalink")
