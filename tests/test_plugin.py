"""Tests for the host-facing plugin hooks."""

import asyncio

import pytest
from conftest import EMOTE_GIF, EMOTE_WEBP, FakeBadgeClient, link, subscriber_badge

from seventv_links.api.seventv import SevenTVClient
from seventv_links.chat.embeds import FAKE_EMOTE_NOTICE
from seventv_links.chat.models import Embed, Message, SevenTVEmote
from seventv_links.core.settings import ImageSize, SevenTVSettings
from seventv_links.plugin import DEFAULT_BADGE_NAMES, SevenTVPlugin


class FakePluginClient(FakeBadgeClient):
    """Badge lookups plus the close() the plugin calls on shutdown."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.closed = False

    async def search_emotes(self, variables: dict) -> dict:
        return {"data": {"emotes": {"items": []}}}

    async def close(self) -> None:
        self.closed = True


def _plugin(settings=None, **client_kwargs) -> SevenTVPlugin:
    return SevenTVPlugin(settings=settings, client=FakePluginClient(**client_kwargs))


def test_patch_message_content():
    content = _plugin().patch_message_content([link(EMOTE_GIF)])
    assert content[0].is_fake


def test_should_ignore_embed():
    plugin = _plugin()
    embed = Embed(type="image", url=EMOTE_WEBP)
    assert plugin.should_ignore_embed(embed, Message(id="1", content=EMOTE_WEBP))


def test_should_keep_emote_link():
    assert _plugin().should_keep_emote_link(link(EMOTE_GIF))


def test_add_fake_notice():
    assert _plugin().add_fake_notice("Pog", fake=True) == ["Pog", FAKE_EMOTE_NOTICE]


def test_emote_url_uses_image_size():
    plugin = _plugin(SevenTVSettings(image_size=ImageSize.X3))
    emote = SevenTVEmote(id="ab12", name="Pog", animated=True, host_url="//cdn.7tv.app/emote/ab12")
    assert plugin.emote_url(emote) == "https://cdn.7tv.app/emote/ab12/3x.gif?name=Pog"


# --- Badges ---


def test_profile_badges():
    names = [badge.name for badge in _plugin().profile_badges()]
    assert names == list(DEFAULT_BADGE_NAMES)


def test_badges_disabled():
    plugin = _plugin(SevenTVSettings(show_badges=False), user_ids={"42": "7tv-42"})

    async def run():
        return plugin.has_badge("42", "7TV Subscriber")

    assert asyncio.run(run()) is False
    assert plugin.profile_badges() == []
    assert plugin.client.user_lookups == []


def test_badges_for_user_after_resolve():
    plugin = _plugin(user_ids={"42": "7tv-42"}, badges={"7tv-42": subscriber_badge()})

    async def run():
        assert plugin.badges_for_user("42") == []
        await asyncio.gather(
            *(plugin.badges.resolve("42", name) for name in DEFAULT_BADGE_NAMES)
        )

    asyncio.run(run())
    assert [badge.name for badge in plugin.badges_for_user("42")] == ["7TV Subscriber"]


def test_plugins_do_not_share_caches():
    client = FakePluginClient(user_ids={"42": "7tv-42"}, badges={"7tv-42": subscriber_badge()})
    first = SevenTVPlugin(client=client)
    second = SevenTVPlugin(client=client)

    asyncio.run(first.badges.resolve("42", "7TV Subscriber"))
    assert first.badges.get_cached("42", "7TV Subscriber") is True
    assert second.badges.get_cached("42", "7TV Subscriber") is None
    assert first.search is not second.search


def test_close_closes_client():
    plugin = _plugin()
    asyncio.run(plugin.close())
    assert plugin.client.closed


# --- Cosmetics payload ---


def _cosmetics_client(payload: dict) -> SevenTVClient:
    client = SevenTVClient()

    async def gql(query, variables):
        return payload

    client.gql = gql
    return client


def test_get_user_badge_parses_active_badge():
    style = {"badge": {"id": "b1", "kind": "BADGE", "name": "7TV Subscriber"}}
    client = _cosmetics_client({"data": {"user": {"id": "u1", "style": style}}})
    badge = asyncio.run(client.get_user_badge("u1"))
    assert badge.name == "7TV Subscriber"
    assert badge.host_url == ""


def test_get_user_badge_without_badge():
    client = _cosmetics_client({"data": {"user": {"id": "u1", "style": {"badge": None}}}})
    assert asyncio.run(client.get_user_badge("u1")) is None


@pytest.mark.parametrize(
    "payload",
    [
        {"data": ["x"]},
        {"data": {"user": {"style": "x"}}},
        {"data": {"user": {"style": {"badge": {"name": "x", "host": "x"}}}}},
    ],
)
def test_get_user_badge_rejects_malformed_payload(payload):
    with pytest.raises(ValueError):
        asyncio.run(_cosmetics_client(payload).get_user_badge("u1"))
