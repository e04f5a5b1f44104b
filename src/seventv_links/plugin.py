"""Host integration - the hooks a chat client calls while rendering."""

import logging
from collections.abc import Sequence
from typing import Any

from .api.seventv import SevenTVClient
from .chat.badges import BadgeCache, ProfileBadge
from .chat.embeds import add_fake_notice, should_ignore_embed, should_keep_emote_link
from .chat.models import ContentNode, Embed, Message, SevenTVEmote
from .chat.rewriter import patch_content
from .chat.search import EmoteSearchController
from .core.settings import SevenTVSettings

logger = logging.getLogger(__name__)

DEFAULT_BADGE_NAMES = (
    "7TV Subscriber",
    "7TV Contributor",
    "7TV Translator",
    "7TV Moderator",
    "7TV Admin",
)


class SevenTVPlugin:
    """Owns the search session and badge cache and exposes the render hooks.

    One instance per host window; nothing here is module-global, so
    separate instances never share search results or badge answers.
    """

    def __init__(
        self,
        settings: SevenTVSettings | None = None,
        client: SevenTVClient | None = None,
        badge_names: Sequence[str] = DEFAULT_BADGE_NAMES,
    ):
        self.settings = settings if settings is not None else SevenTVSettings()
        self.client = client if client is not None else SevenTVClient()
        self.search = EmoteSearchController(self.client, self.settings)
        self.badges = BadgeCache(self.client)
        self._badge_names = tuple(badge_names)

    # --- Render hooks ---

    def patch_message_content(
        self, content: Sequence[ContentNode], inline: bool = False
    ) -> list[ContentNode]:
        return patch_content(content, inline)

    def should_ignore_embed(self, embed: Embed, message: Message) -> bool:
        return should_ignore_embed(embed, message)

    def should_keep_emote_link(self, link: Any) -> bool:
        return should_keep_emote_link(link)

    def add_fake_notice(
        self, node: ContentNode | list[ContentNode], fake: bool
    ) -> list[ContentNode]:
        return add_fake_notice(node, fake)

    # --- Badges ---

    def has_badge(self, user_id: str, badge_name: str) -> bool:
        if not self.settings.show_badges:
            return False
        return self.badges.has_badge(user_id, badge_name)

    def profile_badges(self) -> list[ProfileBadge]:
        """Badges to register with the host's profile badge list."""
        if not self.settings.show_badges:
            return []
        return [ProfileBadge(name=name, description=name) for name in self._badge_names]

    def badges_for_user(self, user_id: str) -> list[ProfileBadge]:
        """Badges that should currently be drawn for a user."""
        return [badge for badge in self.profile_badges() if self.has_badge(user_id, badge.name)]

    # --- Picker ---

    def emote_url(self, emote: SevenTVEmote) -> str:
        """The link inserted into the chat box when an emote is picked."""
        return emote.url(self.settings.image_size.value)

    async def close(self) -> None:
        await self.client.close()
