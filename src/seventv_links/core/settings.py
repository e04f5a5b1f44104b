"""Settings management for the 7TV emote integration."""

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from appdirs import user_config_dir

logger = logging.getLogger(__name__)

APP_NAME = "seventv-links"
APP_AUTHOR = "seventv-links"

DEFAULT_LIMIT = 42
MAX_LIMIT = 100


class Category(str, Enum):
    """Catalog category searched when no text is given."""

    TOP = "TOP"
    TRENDING = "TRENDING_DAY"


class SortValue(str, Enum):
    """Field search results are sorted by."""

    POPULARITY = "popularity"
    DATE_CREATED = "date_created"


class SortOrder(str, Enum):
    DESCENDING = "DESCENDING"
    ASCENDING = "ASCENDING"


class ImageSize(str, Enum):
    """CDN image size used for inserted emote links."""

    X1 = "1x"
    X2 = "2x"
    X3 = "3x"
    X4 = "4x"


def get_config_dir() -> Path:
    """Get the configuration directory."""
    path = Path(user_config_dir(APP_NAME, APP_AUTHOR))
    path.mkdir(parents=True, exist_ok=True)
    return path


@dataclass
class SevenTVSettings:
    """Search filters, paging, and display options."""

    exact_match: bool = True  # Only names that match the query exactly
    case_sensitive: bool = False
    ignore_tags: bool = False
    zero_width: bool = False  # Zero-width emotes can't overlay in chat anyway
    animated: bool = False  # Animated emotes only
    limit: int = DEFAULT_LIMIT  # Emotes per page
    category: Category = Category.TOP
    sort_value: SortValue = SortValue.POPULARITY
    sort_order: SortOrder = SortOrder.DESCENDING
    image_size: ImageSize = ImageSize.X1
    show_badges: bool = True

    @classmethod
    def load(cls, path: Path | None = None) -> "SevenTVSettings":
        """Load settings from file, falling back to defaults."""
        if path is None:
            path = get_config_dir() / "settings.json"

        if not path.exists():
            return cls()

        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
            return cls._from_dict(data)
        except (json.JSONDecodeError, KeyError, TypeError, AttributeError) as e:
            logger.warning(f"Ignoring unreadable settings file {path}: {e}")
            return cls()

    def save(self, path: Path | None = None) -> None:
        """Save settings to file."""
        if path is None:
            path = get_config_dir() / "settings.json"

        path.parent.mkdir(parents=True, exist_ok=True)

        # Atomic write: write to temp file then rename to prevent corruption on crash
        fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp", prefix="settings_")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(self._to_dict(), f, indent=2)
            os.replace(tmp_path, path)
        except Exception:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise

    @staticmethod
    def _validate_int(value, default: int, min_val: int = 0, max_val: int | None = None) -> int:
        """Validate and constrain an integer value."""
        if not isinstance(value, int) or isinstance(value, bool):
            return default
        if value < min_val:
            return min_val
        if max_val is not None and value > max_val:
            return max_val
        return value

    @staticmethod
    def _validate_bool(value, default: bool) -> bool:
        return value if isinstance(value, bool) else default

    @staticmethod
    def _validate_enum(enum_cls: type[Enum], value, default: Enum) -> Enum:
        try:
            return enum_cls(value)
        except ValueError:
            return default

    @classmethod
    def _from_dict(cls, data: dict) -> "SevenTVSettings":
        """Create settings from a dictionary with validation."""
        settings = cls()

        settings.exact_match = cls._validate_bool(data.get("exact_match"), settings.exact_match)
        settings.case_sensitive = cls._validate_bool(
            data.get("case_sensitive"), settings.case_sensitive
        )
        settings.ignore_tags = cls._validate_bool(data.get("ignore_tags"), settings.ignore_tags)
        settings.zero_width = cls._validate_bool(data.get("zero_width"), settings.zero_width)
        settings.animated = cls._validate_bool(data.get("animated"), settings.animated)
        settings.show_badges = cls._validate_bool(data.get("show_badges"), settings.show_badges)
        settings.limit = cls._validate_int(
            data.get("limit"), DEFAULT_LIMIT, min_val=1, max_val=MAX_LIMIT
        )

        settings.category = cls._validate_enum(Category, data.get("category"), Category.TOP)
        settings.sort_value = cls._validate_enum(
            SortValue, data.get("sort_value"), SortValue.POPULARITY
        )
        settings.sort_order = cls._validate_enum(
            SortOrder, data.get("sort_order"), SortOrder.DESCENDING
        )
        settings.image_size = cls._validate_enum(ImageSize, data.get("image_size"), ImageSize.X1)

        return settings

    def _to_dict(self) -> dict:
        """Convert settings to a dictionary."""
        return {
            "exact_match": self.exact_match,
            "case_sensitive": self.case_sensitive,
            "ignore_tags": self.ignore_tags,
            "zero_width": self.zero_width,
            "animated": self.animated,
            "limit": self.limit,
            "category": self.category.value,
            "sort_value": self.sort_value.value,
            "sort_order": self.sort_order.value,
            "image_size": self.image_size.value,
            "show_badges": self.show_badges,
        }
