"""API clients for 7TV."""

from .base import BaseApiClient
from .seventv import SevenTVClient

__all__ = [
    "BaseApiClient",
    "SevenTVClient",
]
