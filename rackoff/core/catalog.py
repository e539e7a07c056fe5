"""
Built-in file categories.

The set of categories is closed: users can toggle them, change where they go
and edit their extensions, but cannot add or remove categories.
"""

import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

from .types import DestinationPolicy, FileCategory, MatchStrategy

logger = logging.getLogger(__name__)

# Name fragments macOS (and common capture tools) use for screenshots,
# including a few localized system names.
SCREENSHOT_PATTERNS: List[str] = [
    "screenshot",
    "screen shot",
    "cleanshot",
    "bildschirmfoto",
    "capture d'écran",
    "capture d’écran",
    "captura de pantalla",
    "schermata",
    "スクリーンショット",
]

SCREENSHOT_EXTENSIONS: List[str] = [".png", ".jpg", ".jpeg", ".heic", ".tiff"]

MEDIA_EXTENSIONS: List[str] = [
    ".jpg",
    ".jpeg",
    ".png",
    ".gif",
    ".webp",
    ".heic",
    ".tiff",
    ".mov",
    ".mp4",
    ".m4v",
    ".mp3",
    ".m4a",
    ".wav",
]


def built_in_categories() -> List[FileCategory]:
    """Return fresh copies of the built-in categories in registry order."""
    return [
        FileCategory(
            name="Screenshots",
            extensions=SCREENSHOT_EXTENSIONS,
            match_strategy=MatchStrategy.BY_FILENAME_PATTERN,
            patterns=SCREENSHOT_PATTERNS,
            icon="camera.viewfinder",
            enabled=True,
            destination_policy=DestinationPolicy.DAILY,
        ),
        FileCategory(
            name="PDFs",
            extensions=[".pdf"],
            icon="doc.fill",
        ),
        FileCategory(
            name="Documents",
            extensions=[
                ".doc",
                ".docx",
                ".txt",
                ".rtf",
                ".pages",
                ".md",
                ".odt",
                ".xls",
                ".xlsx",
                ".csv",
                ".key",
                ".ppt",
                ".pptx",
            ],
            icon="doc.text",
        ),
        FileCategory(
            name="Media",
            extensions=MEDIA_EXTENSIONS,
            match_strategy=MatchStrategy.BY_EXTENSION_EXCLUDING_PATTERN,
            patterns=SCREENSHOT_PATTERNS,
            icon="photo",
            destination_policy=DestinationPolicy.MONTHLY,
        ),
        FileCategory(
            name="Archives",
            extensions=[".dmg", ".zip", ".pkg", ".rar", ".7z", ".tar", ".gz"],
            icon="archivebox",
        ),
    ]


class FileCatalog:
    """Ordered registry of file categories."""

    def __init__(self, categories: Optional[Iterable[FileCategory]] = None):
        """
        Initialize the catalog.

        Args:
            categories: Categories in processing order. Defaults to the
                built-in set.
        """
        items = list(categories) if categories is not None else built_in_categories()
        names = [category.name.lower() for category in items]
        if len(names) != len(set(names)):
            raise ValueError("category names must be unique")
        self._categories: List[FileCategory] = items

    def __iter__(self) -> Iterator[FileCategory]:
        return iter(self._categories)

    def __len__(self) -> int:
        return len(self._categories)

    @property
    def categories(self) -> List[FileCategory]:
        return list(self._categories)

    def enabled(self) -> List[FileCategory]:
        """Enabled categories, in registry order."""
        return [category for category in self._categories if category.enabled]

    def get(self, name: str) -> FileCategory:
        """
        Look up a category by name, ignoring case.

        Raises:
            KeyError: If no category has that name
        """
        wanted = name.strip().lower()
        for category in self._categories:
            if category.name.lower() == wanted:
                return category
        raise KeyError(name)

    def set_enabled(self, name: str, enabled: bool) -> FileCategory:
        category = self.get(name)
        category.enabled = enabled
        logger.debug(f"{category.name}: enabled={enabled}")
        return category

    def set_destination(
        self,
        name: str,
        policy: DestinationPolicy,
        custom_destination: Optional[Path] = None,
    ) -> FileCategory:
        """
        Change where a category goes in Smart Clean mode.

        A custom destination is only kept for the Custom policy; passing
        Custom without a path keeps any previously chosen folder.
        """
        category = self.get(name)
        category.destination_policy = policy
        if policy == DestinationPolicy.CUSTOM:
            if custom_destination is not None:
                category.custom_destination = Path(custom_destination).expanduser()
        else:
            category.custom_destination = None
        logger.debug(f"{category.name}: destination={policy.value}")
        return category

    def set_extensions(self, name: str, extensions: Iterable[str]) -> FileCategory:
        """
        Replace a category's extensions.

        Raises:
            pydantic.ValidationError: If the list is empty or has a blank entry
        """
        category = self.get(name)
        category.extensions = list(extensions)
        return category
