"""LinkedIn document carousel publisher (Posts API).

Flow:
1. Build a PDF from the slide images (client side, before any call)
2. Register a document upload owned by the author
3. PUT the PDF to the returned upload URL
4. Create a post referencing the document URN

There is no asynchronous processing step: the post create call is final.
"""

from __future__ import annotations

from typing import Any

from ...constants import LINKEDIN, LINKEDIN_MIN_IMAGES, UPLOAD_TIMEOUT_SECONDS
from ..base import PlatformCredentials, PlatformPublisher, PublishOutcome
from ..http import PlatformAPIError, PublishValidationError, require_image_count
from .document import DocumentBuildError, build_carousel_pdf

LINKEDIN_API_BASE = "https://api.linkedin.com"
LINKEDIN_VERSION = "202401"


def author_urn(account_id: str) -> str:
    """Member URN for an account id; URNs pass through unchanged."""
    if account_id.startswith("urn:li:"):
        return account_id
    return f"urn:li:person:{account_id}"


class LinkedInPublisher(PlatformPublisher):
    """Publishes slides as a LinkedIn document post."""

    logger_name = "linkedin_api"

    def __init__(
        self,
        *,
        base_url: str = LINKEDIN_API_BASE,
        document_title: str = "Carousel",
        **kwargs: Any,
    ):
        super().__init__(**kwargs)
        self.base_url = base_url.rstrip("/")
        self.document_title = document_title

    @property
    def platform_name(self) -> str:
        return LINKEDIN

    @property
    def display_name(self) -> str:
        return "LinkedIn"

    def _headers(self, access_token: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json",
            "LinkedIn-Version": LINKEDIN_VERSION,
            "X-Restli-Protocol-Version": "2.0.0",
        }

    async def _publish(
        self,
        images: list[bytes],
        caption: str,
        credentials: PlatformCredentials,
    ) -> PublishOutcome:
        require_image_count(
            images, LINKEDIN_MIN_IMAGES, None, "No images provided for LinkedIn post"
        )
        if not credentials.platform_account_id:
            raise PublishValidationError(
                "LinkedIn author URN is missing. Please reconnect in Settings."
            )
        author = author_urn(credentials.platform_account_id)

        await self._emit_progress("document", 0.0, f"Building PDF from {len(images)} slides...")
        try:
            pdf = build_carousel_pdf(images)
        except DocumentBuildError as e:
            raise PublishValidationError(str(e)) from e
        self._logger.info(f"DOCUMENT | BUILT | pages:{len(images)} | bytes:{len(pdf)}")

        headers = self._headers(credentials.access_token)
        async with self._open_http() as http:
            await self._emit_progress("register", 20.0, "Registering document upload...")
            registered = await http.send_json(
                "POST",
                f"{self.base_url}/rest/documents",
                error_prefix="LinkedIn document registration failed",
                headers=headers,
                json={"data": {"owner": author}},
            )
            value = registered.get("value") or {}
            upload_url = value.get("uploadUrl")
            document_urn = value.get("document")
            if not upload_url or not document_urn:
                raise PlatformAPIError(
                    "LinkedIn did not return an upload URL or document URN"
                )

            await self._emit_progress("upload", 40.0, "Uploading PDF...")
            await http.send(
                "PUT",
                upload_url,
                error_prefix="LinkedIn PDF upload failed",
                timeout=UPLOAD_TIMEOUT_SECONDS,
                headers={
                    "Authorization": f"Bearer {credentials.access_token}",
                    "Content-Type": "application/pdf",
                },
                content=pdf,
            )

            await self._emit_progress("publish", 80.0, "Creating post...")
            response = await http.send(
                "POST",
                f"{self.base_url}/rest/posts",
                error_prefix="LinkedIn post creation failed",
                headers=headers,
                json={
                    "author": author,
                    "commentary": caption,
                    "visibility": "PUBLIC",
                    "distribution": {
                        "feedDistribution": "MAIN_FEED",
                        "targetEntities": [],
                        "thirdPartyDistributionChannels": [],
                    },
                    "content": {
                        "media": {"title": self.document_title, "id": document_urn},
                    },
                    "lifecycleState": "PUBLISHED",
                    "isReshareDisabledByAuthor": False,
                },
            )

        post_urn = response.headers.get("x-restli-id")
        await self._emit_progress("complete", 100.0, "Published successfully!")
        return self._make_result(True, post_urn=post_urn, document_urn=document_urn)
