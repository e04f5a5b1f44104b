"""Throttled, paginated 7TV emote search."""

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

import aiohttp

from ..core.settings import SevenTVSettings
from .models import SevenTVEmote

logger = logging.getLogger(__name__)

MINIMUM_API_DELAY = 0.5  # seconds between accepted requests


class EmoteSearchClient(Protocol):
    async def search_emotes(self, variables: dict) -> dict: ...


@dataclass
class SearchState:
    """State of one search session."""

    query: str = ""
    page: int = 1
    error: str = ""  # Last server-reported error, empty when none
    searching: bool = False
    emotes: list[SevenTVEmote] = field(default_factory=list)
    last_request: float | None = None  # Clock time of the last accepted request


def build_search_variables(query: str, page: int, settings: SevenTVSettings) -> dict:
    """Build the GraphQL variables for a search or category browse.

    An empty query browses the configured category; a text query also
    applies the name/tag filters from settings.
    """
    variables = {
        "query": query,
        "limit": settings.limit,
        "page": page,
        "sort": {
            "value": settings.sort_value.value,
            "order": settings.sort_order.value,
        },
    }
    if query:
        variables["filter"] = {
            "category": settings.category.value,
            "exact_match": settings.exact_match,
            "case_sensitive": settings.case_sensitive,
            "ignore_tags": settings.ignore_tags,
            "zero_width": settings.zero_width,
            "animated": settings.animated,
            "aspect_ratio": "",
        }
    else:
        variables["filter"] = {"category": settings.category.value}
    return variables


class EmoteSearchController:
    """Runs catalog searches and holds the current page of results.

    Requests are dropped, not queued, while one is in flight or within
    MINIMUM_API_DELAY of the last accepted one. When the server reports an
    error the previous results stay on display next to the error text.
    """

    def __init__(
        self,
        client: EmoteSearchClient,
        settings: SevenTVSettings,
        clock: Callable[[], float] = time.monotonic,
        on_update: Callable[[], None] | None = None,
    ):
        self._client = client
        self._settings = settings
        self._clock = clock
        self.on_update = on_update
        self.state = SearchState()

    @property
    def emotes(self) -> list[SevenTVEmote]:
        return self.state.emotes

    @property
    def status_text(self) -> str:
        """Footer text: the page indicator, or the last error."""
        if self.state.error:
            return self.state.error
        return f"Page {self.state.page}"

    def can_fetch(self) -> bool:
        """Whether a request issued now would be accepted."""
        if self.state.searching:
            return False
        last = self.state.last_request
        return last is None or self._clock() - last >= MINIMUM_API_DELAY

    async def fetch(self, query: str | None = None, page: int | None = None) -> bool:
        """Fetch a page of results.

        Args:
            query: Search text; None keeps the current query.
            page: Page to load; None keeps the current page.

        Returns:
            True if the request was accepted, False if it was throttled or
            another request is still in flight.
        """
        if not self.can_fetch():
            logger.debug("Emote search request dropped (throttled or in flight)")
            return False

        state = self.state
        state.last_request = self._clock()
        if query is not None:
            state.query = query
        if page is not None:
            state.page = page
        state.page = max(state.page, 1)
        state.error = ""
        state.searching = True

        variables = build_search_variables(state.query, state.page, self._settings)
        try:
            data = await self._client.search_emotes(variables)
            self._apply_response(data)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.error(f"7TV emote search failed: {e}")
        finally:
            state.searching = False

        if self.on_update is not None:
            self.on_update()
        return True

    def _apply_response(self, data: dict) -> None:
        """Store results or the server error; raise ValueError on any other shape."""
        if not isinstance(data, dict):
            raise ValueError("7TV search response is not an object")
        payload = data.get("data") or {}
        if not isinstance(payload, dict):
            raise ValueError("7TV search response has a malformed data field")

        emotes_data = payload.get("emotes")
        if emotes_data is not None:
            if not isinstance(emotes_data, dict):
                raise ValueError("7TV search response has a malformed emotes field")
            items = emotes_data.get("items") or []
            if not isinstance(items, list):
                raise ValueError("7TV search response has a malformed items field")
            emotes = []
            for item in items:
                emote = SevenTVEmote.from_api(item) if isinstance(item, dict) else None
                if emote:
                    emotes.append(emote)
            self.state.emotes = emotes
            return

        errors = data.get("errors")
        if not errors:
            raise ValueError("7TV search response has neither data nor errors")
        if not isinstance(errors, list):
            raise ValueError("7TV search response has a malformed errors field")
        first = errors[0] if isinstance(errors[0], dict) else {}
        self.state.error = first.get("message") or "Unknown error"

    async def search(self, query: str) -> bool:
        """Start a new search from the first page."""
        return await self.fetch(query=query, page=1)

    async def next_page(self) -> bool:
        return await self.fetch(page=self.state.page + 1)

    async def previous_page(self) -> bool:
        return await self.fetch(page=self.state.page - 1)

    async def ensure_loaded(self) -> bool:
        """Load the current query if nothing has been fetched yet."""
        if self.state.emotes:
            return False
        return await self.fetch()
