"""Caption cleanup for the Instagram Graph API.

The caption is sent as written. Only invisible characters that break the
API's form encoding are removed, and the text is cut to the length limit.
Emoji and symbols are kept.
"""

from __future__ import annotations

import unicodedata

from ...constants import INSTAGRAM_CAPTION_MAX_LENGTH

# Joiners are part of emoji sequences
_KEPT_FORMAT_CHARS = frozenset({"\u200c", "\u200d"})

_REPLACEMENTS = str.maketrans({
    "\u200b": "",     # Zero-width space
    "\ufeff": "",     # BOM
    "\u00ad": "",     # Soft hyphen
    "\u2028": "\n",   # Line separator
    "\u2029": "\n",   # Paragraph separator
})


def _keep(char: str) -> bool:
    if char in "\n\r\t" or char in _KEPT_FORMAT_CHARS:
        return True
    return unicodedata.category(char) not in ("Cc", "Cf")


def sanitize_caption(caption: str, max_length: int = INSTAGRAM_CAPTION_MAX_LENGTH) -> str:
    """Drop invisible control characters and cut to ``max_length`` characters.

    Example:
        sanitize_caption("co\\u200bffee \\U0001F341") -> "coffee \\U0001F341"
    """
    if not caption:
        return ""

    text = unicodedata.normalize("NFC", caption).translate(_REPLACEMENTS)
    text = "".join(char for char in text if _keep(char))
    return text.strip()[:max_length]
