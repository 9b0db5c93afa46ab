"""Instagram platform adapter."""

from .caption import sanitize_caption
from .publisher import GRAPH_API_BASE, InstagramPublisher

__all__ = ["GRAPH_API_BASE", "InstagramPublisher", "sanitize_caption"]
