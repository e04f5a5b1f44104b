"""Recognise 7TV CDN emote links."""

import re
from urllib.parse import parse_qs, urlsplit

from ..models import EmoteReference

DEFAULT_EMOTE_NAME = "7TV Emote"

# /emote/<hex id>/<file>.<ext>, e.g. /emote/60ae958e229664e8667aea38/4x.webp
EMOTE_PATH_RE = re.compile(r"/emote/([a-f0-9]+)/\w+\.(png|webp|gif)")


def parse_emote_url(url: str) -> EmoteReference | None:
    """Parse a 7TV emote reference out of a URL.

    The display name comes from the ``name`` query parameter that the
    search picker appends to inserted links.

    Args:
        url: Any link target.

    Returns:
        The emote reference, or None if the URL is not an emote link.
    """
    if not url:
        return None

    try:
        parts = urlsplit(url)
    except ValueError:
        # Unsplittable URL: still match the raw string, but no name is available
        parts = None

    match = EMOTE_PATH_RE.search(parts.path if parts is not None else url)
    if not match:
        return None

    display_name = DEFAULT_EMOTE_NAME
    if parts is not None:
        names = parse_qs(parts.query).get("name")
        if names:
            display_name = names[0]

    return EmoteReference(
        id=match.group(1),
        animated=match.group(2) == "gif",
        display_name=display_name,
    )


def is_emote_url(url: str | None) -> bool:
    """Check whether a URL points at a 7TV emote image."""
    return url is not None and parse_emote_url(url) is not None
