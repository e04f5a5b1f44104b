"""Data models for message content trees, embeds, and 7TV catalog results."""

from dataclasses import dataclass, field
from typing import Any, Union
from urllib.parse import quote

# Tag used by the host renderer for custom (guild) emoji nodes
CUSTOM_EMOJI_TYPE = "customEmoji"

# Tags the host renderer emits as structural blocks rather than inline text
BLOCK_TYPES = frozenset(
    {"h1", "h2", "h3", "h4", "h5", "h6", "ul", "ol", "li", "blockquote", "pre", "p", "div"}
)

LIST_TYPES = frozenset({"ul", "ol"})


@dataclass(frozen=True)
class Element:
    """A typed node of a rendered message content tree."""

    type: str
    props: dict[str, Any] = field(default_factory=dict)
    children: Union["ContentNode", list["ContentNode"], None] = None

    @property
    def is_block(self) -> bool:
        """Whether this is a structural block element (heading, list, ...)."""
        return self.type in BLOCK_TYPES

    @property
    def is_list(self) -> bool:
        return self.type in LIST_TYPES

    @property
    def is_link(self) -> bool:
        """Links are the only nodes the host marks with a ``trusted`` prop."""
        return self.props.get("trusted") is not None

    @property
    def is_fake(self) -> bool:
        return bool(self.props.get("fake", False))


# Text runs are plain strings
ContentNode = Union[str, Element]


@dataclass(frozen=True)
class EmoteReference:
    """An emote identified from a 7TV CDN link."""

    id: str
    animated: bool
    display_name: str


@dataclass
class EmbedImage:
    """Image attached to a link preview."""

    url: str | None = None
    proxy_url: str | None = None


@dataclass
class Embed:
    """A link preview panel rendered below a message."""

    type: str  # "image", "rich", "video", "gifv", ...
    url: str | None = None
    image: EmbedImage | None = None


@dataclass
class Message:
    """The subset of a chat message the embed hooks need."""

    id: str
    content: str
    embeds: list[Embed] = field(default_factory=list)


@dataclass
class SevenTVEmote:
    """An emote returned by the 7TV catalog search."""

    id: str
    name: str
    animated: bool
    host_url: str  # Protocol-relative, e.g. "//cdn.7tv.app/emote/<id>"

    def url(self, image_size: str = "1x") -> str:
        """Build the link inserted into the chat box for this emote."""
        extension = "gif" if self.animated else "webp"
        base = self.host_url
        if base.startswith("//"):
            base = "https:" + base
        return f"{base}/{image_size}.{extension}?name={quote(self.name)}"

    @classmethod
    def from_api(cls, data: dict) -> "SevenTVEmote | None":
        """Parse an emote from a GraphQL search result item."""
        emote_id = data.get("id", "")
        name = data.get("name", "")
        host = data.get("host") or {}
        host_url = host.get("url", "")

        if not emote_id or not name:
            return None
        if not host_url:
            host_url = f"//cdn.7tv.app/emote/{emote_id}"

        return cls(
            id=emote_id,
            name=name,
            animated=bool(data.get("animated", False)),
            host_url=host_url,
        )


@dataclass
class CosmeticBadge:
    """A 7TV user's active cosmetic badge."""

    id: str
    kind: str
    name: str
    host_url: str = ""
