"""7TV REST and GraphQL API client."""

import logging

from ..chat.models import CosmeticBadge
from .base import BaseApiClient, safe_json

logger = logging.getLogger(__name__)

SEARCH_EMOTES_QUERY = """query SearchEmotes(
    $query: String!, $page: Int, $sort: Sort, $limit: Int, $filter: EmoteSearchFilter
) {
    emotes(query: $query, page: $page, sort: $sort, limit: $limit, filter: $filter) {
        items {
            id
            name
            animated
            host {
                url
            }
        }
    }
}"""

USER_COSMETICS_QUERY = """query GetUserCurrentCosmetics($id: ObjectID!) {
    user(id: $id) {
        id
        username
        display_name
        style {
            paint {
                id
                kind
                name
            }
            badge {
                id
                kind
                name
                host {
                    url
                    files {
                        name
                    }
                }
            }
        }
    }
}"""


class SevenTVClient(BaseApiClient):
    """Client for the 7TV v3 API.

    Transport problems surface as aiohttp.ClientError or
    asyncio.TimeoutError; a body that is not a JSON object raises
    ValueError. GraphQL errors are returned in the payload untouched.
    """

    BASE_URL = "https://7tv.io/v3"

    @property
    def name(self) -> str:
        return "7tv"

    async def gql(self, query: str, variables: dict) -> dict:
        """POST a GraphQL document and return the decoded response."""
        async with self.session.post(
            f"{self.BASE_URL}/gql",
            json={"query": query, "variables": variables},
            headers={"Content-Type": "application/json"},
        ) as resp:
            data = await safe_json(resp)

        if not isinstance(data, dict):
            raise ValueError(f"7TV GQL returned an invalid payload (HTTP {resp.status})")
        return data

    async def search_emotes(self, variables: dict) -> dict:
        """Run the emote search query.

        Returns:
            Either ``{"data": {"emotes": {"items": [...]}}}`` or
            ``{"errors": [{"message": ...}], ...}``.
        """
        return await self.gql(SEARCH_EMOTES_QUERY, variables)

    async def get_user_id_by_connection(self, platform: str, external_id: str) -> str | None:
        """Map a user on a connected platform to their 7TV user ID.

        Args:
            platform: Connection platform, e.g. "DISCORD" or "TWITCH".
            external_id: The user's ID on that platform.

        Returns:
            The 7TV user ID, or None if the user has no 7TV account.
        """
        async with self.session.get(
            f"{self.BASE_URL}/users/{platform.upper()}/{external_id}"
        ) as resp:
            if resp.status != 200:
                logger.debug(f"7TV user lookup for {platform}:{external_id} failed: {resp.status}")
                return None
            data = await safe_json(resp)

        if not isinstance(data, dict):
            return None
        user = data.get("user") or {}
        return user.get("id")

    async def get_user_badge(self, user_id: str) -> CosmeticBadge | None:
        """Fetch the badge a 7TV user currently displays.

        Raises:
            ValueError: The response does not have the cosmetics shape.
        """
        data = await self.gql(USER_COSMETICS_QUERY, {"id": user_id})

        badge = data
        for key in ("data", "user", "style", "badge"):
            badge = badge.get(key)
            if not badge:
                return None
            if not isinstance(badge, dict):
                raise ValueError(f"7TV cosmetics response has a malformed {key} field")

        host = badge.get("host") or {}
        if not isinstance(host, dict):
            raise ValueError("7TV cosmetics response has a malformed host field")
        return CosmeticBadge(
            id=badge.get("id", ""),
            kind=badge.get("kind", ""),
            name=badge.get("name", ""),
            host_url=host.get("url", ""),
        )
