"""Publishing across platforms: credentials and the multi-platform coordinator."""

from .coordinator import PublishCoordinator, PublisherFactory
from .tokens import EnvTokenProvider, StaticTokenProvider, TokenProvider, connection_status

__all__ = [
    "EnvTokenProvider",
    "PublishCoordinator",
    "PublisherFactory",
    "StaticTokenProvider",
    "TokenProvider",
    "connection_status",
]
