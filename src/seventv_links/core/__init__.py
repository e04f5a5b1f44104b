"""Core configuration for the 7TV emote integration."""

from .settings import Category, ImageSize, SevenTVSettings, SortOrder, SortValue

__all__ = [
    "Category",
    "ImageSize",
    "SevenTVSettings",
    "SortOrder",
    "SortValue",
]
