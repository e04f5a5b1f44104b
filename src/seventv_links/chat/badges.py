"""Per-user 7TV cosmetic badge cache with background resolution."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol

import aiohttp

from .models import CosmeticBadge

logger = logging.getLogger(__name__)

DEFAULT_CONNECTION_PLATFORM = "DISCORD"


class BadgeLookupClient(Protocol):
    async def get_user_id_by_connection(self, platform: str, external_id: str) -> str | None: ...

    async def get_user_badge(self, user_id: str) -> CosmeticBadge | None: ...


@dataclass(frozen=True)
class ProfileBadge:
    """A badge the host shows on user profiles when the cache says so."""

    name: str
    description: str


class BadgeCache:
    """Answers "does this user have badge X" without blocking.

    A miss returns False straight away and starts a lookup; later calls
    see the stored answer. Lookups for the same (badge, user) pair share
    one request, and failed or empty lookups are cached as False.
    """

    def __init__(self, client: BadgeLookupClient, platform: str = DEFAULT_CONNECTION_PLATFORM):
        self._client = client
        self._platform = platform
        self._cache: dict[str, dict[str, bool]] = {}  # badge name -> user id -> has badge
        self._pending: dict[tuple[str, str], asyncio.Task] = {}

    def get_cached(self, user_id: str, badge_name: str) -> bool | None:
        """Cached answer, or None if this pair has not been resolved."""
        return self._cache.get(badge_name, {}).get(user_id)

    def is_pending(self, user_id: str, badge_name: str) -> bool:
        return (badge_name, user_id) in self._pending

    def has_badge(self, user_id: str, badge_name: str) -> bool:
        """Return the cached answer, starting a lookup on a miss."""
        cached = self.get_cached(user_id, badge_name)
        if cached is not None:
            return cached

        try:
            self._schedule(user_id, badge_name)
        except RuntimeError:
            logger.debug(f"No running event loop, badge lookup for {user_id} deferred")
        return False

    async def resolve(self, user_id: str, badge_name: str) -> bool:
        """Resolve a badge, sharing any lookup already in flight."""
        cached = self.get_cached(user_id, badge_name)
        if cached is not None:
            return cached
        return await asyncio.shield(self._schedule(user_id, badge_name))

    def _schedule(self, user_id: str, badge_name: str) -> asyncio.Task:
        key = (badge_name, user_id)
        task = self._pending.get(key)
        if task is None:
            loop = asyncio.get_running_loop()
            task = loop.create_task(self._lookup(user_id, badge_name))
            task.add_done_callback(self._log_lookup_failure)
            self._pending[key] = task
        return task

    @staticmethod
    def _log_lookup_failure(task: asyncio.Task) -> None:
        # has_badge never awaits its task, so the exception is collected here
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"7TV badge lookup raised {type(exc).__name__}: {exc}")

    async def _lookup(self, user_id: str, badge_name: str) -> bool:
        result = False
        try:
            seventv_id = await self._client.get_user_id_by_connection(self._platform, user_id)
            if seventv_id is None:
                logger.debug(f"No 7TV account linked to {self._platform} user {user_id}")
            else:
                badge = await self._client.get_user_badge(seventv_id)
                result = badge is not None and badge.name == badge_name
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.error(f"7TV badge lookup for {user_id} failed: {e}")
        finally:
            self._cache.setdefault(badge_name, {})[user_id] = result
            self._pending.pop((badge_name, user_id), None)
        return result
