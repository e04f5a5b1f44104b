"""Link preview suppression and fake emote attribution."""

import re
from typing import Any

from .emotes.parser import is_emote_url
from .models import ContentNode, Element, Embed, Message

FAKE_EMOTE_NOTICE = (
    " This is a 7TV Emote and renders like a real emoji only for you."
    " Appears as a link to non-plugin users."
)

_WHITESPACE_RE = re.compile(r"\s")


def should_ignore_embed(embed: Embed, message: Message) -> bool:
    """Decide whether a link preview duplicates an inlined emote.

    Only a message consisting of the emote link and nothing else loses
    its preview; any surrounding text keeps the panel.
    """
    # Every whitespace character separates, so "a  b" has three tokens
    tokens = _WHITESPACE_RE.split(message.content)
    if len(tokens) > 1:
        return False

    if embed.type == "image":
        proxy_url = embed.image.proxy_url if embed.image else None
        if embed.url not in tokens and proxy_url not in tokens:
            return False
        return is_emote_url(embed.url)

    return False


def should_keep_emote_link(link: Any) -> bool:
    """Keep a lone link visible when its target is an emote.

    The host hides a message's only link when a preview will show it; an
    emote link has to stay so it can be rendered as an emote instead.
    """
    if not isinstance(link, Element):
        return False
    return is_emote_url(link.props.get("target"))


def add_fake_notice(node: ContentNode | list[ContentNode], fake: bool) -> list[ContentNode]:
    """Append the fake emote attribution to an emoji detail popout."""
    nodes = list(node) if isinstance(node, list) else [node]
    if not fake:
        return nodes
    nodes.append(FAKE_EMOTE_NOTICE)
    return nodes
