"""Token providers: where publish credentials come from.

The core never stores, caches or refreshes tokens. A provider is asked for
credentials once per publish call; refresh-on-expiry is the provider's job.
"""

from __future__ import annotations

import os
from typing import Iterable, Mapping, Optional, Protocol, runtime_checkable

from ..platforms.base import PlatformCredentials


@runtime_checkable
class TokenProvider(Protocol):
    """Supplies credentials for a platform, or None when not connected."""

    async def get_credentials(self, platform: str) -> Optional[PlatformCredentials]:
        ...


class StaticTokenProvider:
    """Fixed credentials per platform (tests, scripts)."""

    def __init__(self, credentials: Mapping[str, PlatformCredentials]):
        self._credentials = {name.lower(): creds for name, creds in credentials.items()}

    async def get_credentials(self, platform: str) -> Optional[PlatformCredentials]:
        return self._credentials.get(platform.lower())


class EnvTokenProvider:
    """Read credentials from environment variables.

    For platform ``tiktok`` it reads ``TIKTOK_ACCESS_TOKEN`` (required),
    ``TIKTOK_REFRESH_TOKEN`` and ``TIKTOK_ACCOUNT_ID``.
    """

    def __init__(self, environ: Mapping[str, str] | None = None):
        self._environ = environ if environ is not None else os.environ

    async def get_credentials(self, platform: str) -> Optional[PlatformCredentials]:
        prefix = platform.upper()
        access_token = self._environ.get(f"{prefix}_ACCESS_TOKEN", "")
        if not access_token:
            return None
        return PlatformCredentials(
            access_token=access_token,
            refresh_token=self._environ.get(f"{prefix}_REFRESH_TOKEN") or None,
            platform_account_id=self._environ.get(f"{prefix}_ACCOUNT_ID") or None,
        )


async def connection_status(
    provider: TokenProvider,
    platforms: Iterable[str],
) -> dict[str, bool]:
    """Map each platform to whether the provider has credentials for it."""
    status = {}
    for platform in platforms:
        status[platform] = await provider.get_credentials(platform) is not None
    return status
