"""Message content rewriter - turns lone 7TV emote links into inline emotes.

The host renderer hands over the already-parsed content tree of a message.
When the message is a single link (or a single inline wrapper around links
and lists), emote links are swapped for fake custom-emoji nodes and any
structure left empty by the swap is pruned. The returned tree is always
built from new nodes; the caller's tree is never modified.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from .emotes.parser import parse_emote_url
from .models import CUSTOM_EMOJI_TYPE, ContentNode, Element, EmoteReference

logger = logging.getLogger(__name__)


class RewriteStatus(str, Enum):
    """Outcome of a rewrite pass."""

    REWRITTEN = "rewritten"  # The tree was walked and rebuilt
    SKIPPED = "skipped"  # Not eligible (mixed prose, block root); identity copy
    FAILED = "failed"  # Internal error; original content returned


@dataclass
class RewriteResult:
    """Content returned to the host plus what happened to it."""

    content: list[ContentNode]
    status: RewriteStatus
    replaced: int = 0  # Links turned into fake emotes
    removed: int = 0  # Links dropped from list items
    error: Exception | None = None

    @property
    def changed(self) -> bool:
        return self.replaced > 0 or self.removed > 0


def make_fake_emote(ref: EmoteReference, jumboable: bool) -> Element:
    """Build the custom-emoji node that stands in for an emote link."""
    return Element(
        type=CUSTOM_EMOJI_TYPE,
        props={
            "emoji_id": ref.id,
            "name": ref.display_name,
            "animated": ref.animated,
            "jumboable": jumboable,
            "fake": True,
        },
    )


def _is_block(node: ContentNode) -> bool:
    return isinstance(node, Element) and node.is_block


def copy_node(node: ContentNode) -> ContentNode:
    """Rebuild a node and its subtree without changing anything."""
    if isinstance(node, str):
        return node
    children = node.children
    if isinstance(children, list):
        children = [copy_node(child) for child in children]
    elif children is not None:
        children = copy_node(children)
    return Element(type=node.type, props=dict(node.props), children=children)


def trim_content(children: list[ContentNode]) -> list[ContentNode]:
    """Strip leading whitespace of the first text run and trailing of the last.

    A run that ends up empty is dropped. Only the outermost runs are looked
    at; whitespace between siblings is left alone.
    """
    if children and isinstance(children[0], str):
        first = children[0].lstrip()
        children = children[1:] if not first else [first, *children[1:]]
    if children and isinstance(children[-1], str):
        last = children[-1].rstrip()
        children = children[:-1] if not last else [*children[:-1], last]
    return children


def _has_content(item: ContentNode) -> bool:
    """Whether a list item still renders something."""
    if isinstance(item, str):
        return bool(item.strip())
    children = item.children
    if children is None:
        return False
    if isinstance(children, list):
        return len(children) > 0
    return True


class _EmoteLinkRewriter:
    """One rebuild pass over a content tree."""

    def __init__(self, jumboable: bool):
        self.jumboable = jumboable
        self.replaced = 0
        self.removed = 0

    def rewrite_children(
        self, children: Sequence[ContentNode], in_list: bool = False
    ) -> list[ContentNode]:
        rewritten = [self.rewrite_node(child, in_list) for child in children]
        compacted = [child for child in rewritten if child is not None]
        return trim_content(compacted)

    def rewrite_node(self, node: ContentNode, in_list: bool = False) -> ContentNode | None:
        if isinstance(node, str):
            return node
        if node.is_link:
            return self._rewrite_link(node, in_list)
        if node.children is None:
            return copy_node(node)

        # Always work on a list of children from here on
        children = node.children if isinstance(node.children, list) else [node.children]
        children = self.rewrite_children(children, in_list or node.is_list)
        if not children:
            return None

        if node.is_list:
            items = [item for item in children if _has_content(item)]
            if not items:
                return None
            children = items

        return Element(type=node.type, props=dict(node.props), children=children)

    def _rewrite_link(self, link: Element, in_list: bool) -> ContentNode | None:
        href = link.props.get("href")
        if not href:
            return copy_node(link)

        ref = parse_emote_url(href)
        if ref is None:
            return copy_node(link)

        if in_list:
            # A bare emote link inside a list item carries no text of its own
            self.removed += 1
            return None

        self.replaced += 1
        return make_fake_emote(ref, self.jumboable)


def rewrite_content(content: Sequence[ContentNode], inline: bool = False) -> RewriteResult:
    """Replace lone 7TV emote links in a message content tree.

    Args:
        content: Top-level nodes of the rendered message.
        inline: True when the message is rendered inline (replies, embeds),
            which keeps emotes at normal size.

    Returns:
        A RewriteResult. On any internal error the original nodes are
        returned untouched with status FAILED.
    """
    nodes = list(content)
    try:
        # Mixed prose, or a single heading/list/quote: leave it alone
        if len(nodes) > 1 or (nodes and _is_block(nodes[0])):
            return RewriteResult(
                content=[copy_node(node) for node in nodes], status=RewriteStatus.SKIPPED
            )

        jumboable = not inline and len(nodes) == 1 and not _is_block(nodes[0])
        rewriter = _EmoteLinkRewriter(jumboable)
        rewritten = rewriter.rewrite_children(nodes)
    except Exception as e:
        logger.exception(f"Failed to rewrite message content: {e}")
        return RewriteResult(content=nodes, status=RewriteStatus.FAILED, error=e)

    if rewriter.replaced or rewriter.removed:
        logger.debug(
            f"Rewrote message content: {rewriter.replaced} replaced, {rewriter.removed} removed"
        )
    return RewriteResult(
        content=rewritten,
        status=RewriteStatus.REWRITTEN,
        replaced=rewriter.replaced,
        removed=rewriter.removed,
    )


def patch_content(content: Sequence[ContentNode], inline: bool = False) -> list[ContentNode]:
    """Host render hook: the rewritten content, or the original on failure."""
    return rewrite_content(content, inline).content
