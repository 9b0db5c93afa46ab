"""Public image hosting for platforms that only accept media URLs.

Instagram's Graph API fetches carousel items from publicly accessible URLs,
so raw image bytes have to be parked somewhere first:

- TemporaryMediaHost writes them under a temp directory that the app's
  ``/api/media/<filename>`` route serves.
- CloudinaryImageHost uploads them to Cloudinary (generous free tier).

Both are released in a ``finally`` by the adapter once publishing ends.
"""

from __future__ import annotations

import asyncio
import logging
import secrets
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol, Sequence, runtime_checkable

import cloudinary
import cloudinary.uploader

_logger = logging.getLogger("publish")

TMP_PREFIX = "nf-media-"


@dataclass
class HostedMedia:
    """URLs for hosted images plus whatever the host needs to release them."""

    urls: list[str]
    handle: Any = None
    extra: dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class ImageHost(Protocol):
    """Turns image bytes into public URLs, and cleans them up afterwards."""

    async def host(self, images: Sequence[bytes]) -> HostedMedia:
        ...

    async def release(self, hosted: HostedMedia) -> None:
        ...


class TemporaryMediaHost:
    """Serve images from a per-session temp directory.

    Files are named ``slide-<n>-<session>.jpg`` and exposed as
    ``<base_url>/api/media/<filename>``.
    """

    def __init__(self, base_url: str, root: Path | str = "/tmp"):
        self.base_url = base_url.rstrip("/")
        self.root = Path(root)

    async def host(self, images: Sequence[bytes]) -> HostedMedia:
        session_id = secrets.token_hex(16)
        temp_dir = self.root / f"{TMP_PREFIX}{session_id}"
        temp_dir.mkdir(parents=True, exist_ok=True)

        urls = []
        try:
            for index, data in enumerate(images, start=1):
                filename = f"slide-{index}-{session_id}.jpg"
                (temp_dir / filename).write_bytes(data)
                urls.append(f"{self.base_url}/api/media/{filename}")
        except OSError:
            _logger.error(f"MEDIA_HOST | TEMP_SAVE_FAILED | dir:{temp_dir.name} | saved:{len(urls)}")
            await self.release(HostedMedia(urls=urls, handle=temp_dir))
            raise

        _logger.info(f"MEDIA_HOST | TEMP_SAVED | dir:{temp_dir.name} | files:{len(urls)}")
        return HostedMedia(urls=urls, handle=temp_dir)

    async def release(self, hosted: HostedMedia) -> None:
        temp_dir = Path(hosted.handle) if hosted.handle else None
        # Only ever delete directories this host created
        if temp_dir is None or TMP_PREFIX not in temp_dir.name or not temp_dir.exists():
            return
        try:
            shutil.rmtree(temp_dir)
        except OSError as e:
            _logger.warning(f"MEDIA_HOST | TEMP_CLEANUP_FAILED | dir:{temp_dir.name} | error:{e}")


class CloudinaryImageHost:
    """Upload images to Cloudinary and destroy them after publishing."""

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        folder: str = "kodapost",
    ):
        self.folder = folder
        cloudinary.config(
            cloud_name=cloud_name,
            api_key=api_key,
            api_secret=api_secret,
            secure=True,
        )

    def _upload(self, data: bytes, public_id: str) -> dict[str, Any]:
        return cloudinary.uploader.upload(
            data,
            folder=self.folder,
            resource_type="image",
            overwrite=True,
            public_id=public_id,
        )

    async def host(self, images: Sequence[bytes]) -> HostedMedia:
        session_id = secrets.token_hex(8)
        loop = asyncio.get_running_loop()

        urls: list[str] = []
        public_ids: list[str] = []
        # Sequential to stay under Cloudinary rate limits
        try:
            for index, data in enumerate(images, start=1):
                result = await loop.run_in_executor(
                    None,
                    lambda d=data, i=index: self._upload(d, f"slide-{i}-{session_id}"),
                )
                public_ids.append(result["public_id"])
                urls.append(result["secure_url"])
        except Exception:
            _logger.error(f"MEDIA_HOST | CLOUDINARY_UPLOAD_FAILED | uploaded:{len(public_ids)}")
            await self.release(HostedMedia(urls=urls, handle=public_ids))
            raise

        _logger.info(f"MEDIA_HOST | CLOUDINARY_UPLOADED | files:{len(urls)}")
        return HostedMedia(urls=urls, handle=public_ids)

    def _destroy_all(self, public_ids: list[str]) -> int:
        deleted = 0
        for public_id in public_ids:
            try:
                cloudinary.uploader.destroy(public_id)
                deleted += 1
            except Exception as e:
                _logger.warning(f"MEDIA_HOST | CLOUDINARY_DESTROY_FAILED | id:{public_id} | error:{e}")
        return deleted

    async def release(self, hosted: HostedMedia) -> None:
        if not hosted.handle:
            return
        loop = asyncio.get_running_loop()
        deleted = await loop.run_in_executor(None, self._destroy_all, list(hosted.handle))
        _logger.info(f"MEDIA_HOST | CLOUDINARY_RELEASED | deleted:{deleted}")
