"""Base API client with a lazily created aiohttp session."""

import asyncio
import json
import logging

import aiohttp

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30  # seconds


async def safe_json(resp: aiohttp.ClientResponse) -> dict | list | None:
    """Safely parse JSON from response, returning None on error.

    This handles common error cases:
    - HTML error pages (ContentTypeError)
    - Malformed JSON (JSONDecodeError)

    Args:
        resp: aiohttp response object

    Returns:
        Parsed JSON data or None if parsing failed
    """
    try:
        return await resp.json()
    except (aiohttp.ContentTypeError, json.JSONDecodeError) as e:
        logger.warning(f"Failed to parse JSON response: {e}")
        return None


class BaseApiClient:
    """Shared session handling for HTTP API clients."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._session: aiohttp.ClientSession | None = None
        self._timeout = timeout

    @property
    def name(self) -> str:
        return type(self).__name__

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create the HTTP session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self._timeout)
            self._session = aiohttp.ClientSession(
                timeout=timeout,
                headers={"Accept": "application/json"},
            )
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            try:
                await self._session.close()
                # Let the connector finish closing to avoid "Unclosed connector" warnings
                await asyncio.sleep(0.1)
            except RuntimeError as e:
                # Session may be attached to a different event loop
                if "attached to a different loop" in str(e):
                    logger.debug(f"{self.name}: session attached to different loop: {e}")
                else:
                    raise
            finally:
                self._session = None
