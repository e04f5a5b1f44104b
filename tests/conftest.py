"""Shared test fixtures for seventv_links tests."""

import asyncio

import pytest

from seventv_links.chat.models import CosmeticBadge, Element
from seventv_links.core.settings import SevenTVSettings

EMOTE_GIF = "https://host/emote/abc123/4x.gif?name=Pog"
EMOTE_WEBP = "https://host/emote/abc123/4x.webp"
PLAIN_URL = "https://example.com/page"


def link(href: str | None) -> Element:
    """A link node the way the host renderer emits it."""
    props = {"trusted": True}
    if href is not None:
        props["href"] = href
        props["target"] = href
    return Element(type="link", props=props, children=[href or ""])


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 100.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSearchClient:
    """Stands in for SevenTVClient.search_emotes."""

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.calls: list[dict] = []
        self.gate: asyncio.Event | None = None

    async def search_emotes(self, variables: dict) -> dict:
        self.calls.append(variables)
        if self.gate is not None:
            await self.gate.wait()
        response = self.responses.pop(0) if self.responses else emotes_response([])
        if isinstance(response, Exception):
            raise response
        return response


class FakeBadgeClient:
    """Stands in for SevenTVClient's user and cosmetics lookups."""

    def __init__(self, user_ids: dict[str, str] | None = None, badges=None):
        self.user_ids = user_ids or {}
        self.badges: dict[str, CosmeticBadge | Exception] = badges or {}
        self.user_lookups: list[tuple[str, str]] = []
        self.badge_lookups: list[str] = []
        self.gate: asyncio.Event | None = None

    async def get_user_id_by_connection(self, platform: str, external_id: str) -> str | None:
        self.user_lookups.append((platform, external_id))
        if self.gate is not None:
            await self.gate.wait()
        return self.user_ids.get(external_id)

    async def get_user_badge(self, user_id: str) -> CosmeticBadge | None:
        self.badge_lookups.append(user_id)
        badge = self.badges.get(user_id)
        if isinstance(badge, Exception):
            raise badge
        return badge


def emote_item(emote_id: str, name: str, animated: bool = False) -> dict:
    return {
        "id": emote_id,
        "name": name,
        "animated": animated,
        "host": {"url": f"//cdn.7tv.app/emote/{emote_id}"},
    }


def emotes_response(items: list[dict]) -> dict:
    return {"data": {"emotes": {"items": items}}}


def error_response(message: str) -> dict:
    return {"errors": [{"message": message}], "data": {"emotes": None}}


def subscriber_badge() -> CosmeticBadge:
    return CosmeticBadge(
        id="b1", kind="BADGE", name="7TV Subscriber", host_url="//cdn.7tv.app/badge/b1"
    )


@pytest.fixture
def settings():
    return SevenTVSettings()


@pytest.fixture
def clock():
    return FakeClock()
