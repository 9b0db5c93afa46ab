"""Publish one carousel to every selected, connected platform.

Platforms run one at a time in selection order. Each gets its own outcome;
a failure on one never stops or undoes another.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import Callable, Mapping, Optional, Sequence

from ..config import Settings, load_settings
from ..constants import PublishErrorKind
from ..platforms.base import PlatformPublisher, PublishOutcome
from ..platforms.registry import create_publisher
from .tokens import TokenProvider

_logger = logging.getLogger("publish")

PublisherFactory = Callable[[str], PlatformPublisher]


class PublishCoordinator:
    """Fan a publish request out to several platform adapters.

    Usage:
        coordinator = PublishCoordinator(EnvTokenProvider())
        outcomes = await coordinator.publish_selected(
            ["instagram", "tiktok"],
            {"instagram": True, "tiktok": True},
            images,
            caption,
        )
    """

    def __init__(
        self,
        token_provider: TokenProvider,
        publisher_factory: Optional[PublisherFactory] = None,
        settings: Optional[Settings] = None,
    ):
        self.token_provider = token_provider
        if publisher_factory is None:
            # Adapters are wired from settings (timeouts, image host)
            publisher_factory = partial(create_publisher, settings=settings or load_settings())
        self.publisher_factory = publisher_factory

    async def publish_selected(
        self,
        selected: Sequence[str],
        connections: Mapping[str, bool],
        images: Sequence[bytes],
        caption: str,
    ) -> dict[str, PublishOutcome]:
        """Publish to the platforms that are both selected and connected.

        Returns:
            Outcome per attempted platform, in the order attempted.
        """
        targets = [name for name in dict.fromkeys(selected) if connections.get(name)]
        skipped = [name for name in selected if name not in targets]
        if skipped:
            _logger.info(f"PUBLISH_ALL | SKIPPED_NOT_CONNECTED | {','.join(skipped)}")

        _logger.info(f"PUBLISH_ALL | START | platforms:{','.join(targets)} | images:{len(images)}")

        outcomes: dict[str, PublishOutcome] = {}
        for platform in targets:
            outcomes[platform] = await self._publish_one(platform, images, caption)

        succeeded = sum(1 for outcome in outcomes.values() if outcome.success)
        _logger.info(f"PUBLISH_ALL | DONE | succeeded:{succeeded}/{len(outcomes)}")
        return outcomes

    async def _publish_one(
        self,
        platform: str,
        images: Sequence[bytes],
        caption: str,
    ) -> PublishOutcome:
        try:
            credentials = await self.token_provider.get_credentials(platform)
            if credentials is None:
                return PublishOutcome(
                    success=False,
                    platform=platform,
                    error=f"Not connected to {platform}. Please connect in Settings.",
                    error_kind=PublishErrorKind.AUTH,
                )

            publisher = self.publisher_factory(platform)
            return await publisher.publish(images, caption, credentials)
        except Exception as e:
            _logger.exception(f"PUBLISH:{platform} | ADAPTER_ERROR | error:{e}")
            return PublishOutcome(
                success=False,
                platform=platform,
                error=str(e) or f"{platform} publish failed",
                error_kind=PublishErrorKind.UNEXPECTED,
            )
