"""
Destination strategies for archived files.

Maps an organization mode and a category's destination policy onto a folder
inside the archive root.
"""

import logging
from datetime import datetime
from pathlib import Path

from ..core.types import DestinationPolicy, FileCategory, OrganizationMode

logger = logging.getLogger(__name__)


def daily_folder_name(date: datetime) -> str:
    """2024-03-15"""
    return date.strftime("%Y-%m-%d")


def weekly_folder_name(date: datetime) -> str:
    """ISO week stamp, e.g. 2024-W11. Uses the ISO year so late-December
    dates can land in week 1 of the next year."""
    iso_year, iso_week, _ = date.isocalendar()
    return f"{iso_year}-W{iso_week:02d}"


def monthly_folder_name(date: datetime) -> str:
    """2024-03"""
    return date.strftime("%Y-%m")


class DestinationResolver:
    """Compute the folder a file should be moved into."""

    def resolve(
        self,
        category: FileCategory,
        mode: OrganizationMode,
        file_timestamp: datetime,
        archive_root: Path,
    ) -> Path:
        """
        Get the target directory for a file.

        Args:
            category: Category that claimed the file
            mode: Active organization mode
            file_timestamp: File creation time (or processing time if unknown)
            archive_root: Root of the archive

        Returns:
            Target directory path
        """
        archive_root = Path(archive_root)

        if mode == OrganizationMode.QUICK_ARCHIVE:
            return archive_root / daily_folder_name(file_timestamp)
        elif mode == OrganizationMode.SORT_BY_TYPE:
            return archive_root / category.name

        policy = category.destination_policy
        if policy == DestinationPolicy.DAILY:
            return archive_root / daily_folder_name(file_timestamp)
        elif policy == DestinationPolicy.WEEKLY:
            return archive_root / weekly_folder_name(file_timestamp)
        elif policy == DestinationPolicy.MONTHLY:
            return archive_root / monthly_folder_name(file_timestamp)
        elif policy == DestinationPolicy.CUSTOM:
            if category.custom_destination is not None:
                return Path(category.custom_destination).expanduser()
            logger.debug(
                f"{category.name}: no custom folder chosen, using type folder"
            )
        elif policy == DestinationPolicy.SKIP:
            # Skipped categories are filtered out before resolution.
            logger.warning(
                f"{category.name} is set to skip but reached the resolver; "
                f"using type folder"
            )

        return archive_root / category.name

    def depends_on_archive_root(
        self, category: FileCategory, mode: OrganizationMode
    ) -> bool:
        """True unless the category resolves to its own custom folder."""
        return not (
            mode == OrganizationMode.SMART_CLEAN
            and category.destination_policy == DestinationPolicy.CUSTOM
            and category.custom_destination is not None
        )


def describe_destination(category: FileCategory, mode: OrganizationMode) -> str:
    """Short label shown next to a category, e.g. "→ Daily"."""
    if mode == OrganizationMode.QUICK_ARCHIVE:
        return "→ Daily"
    if mode == OrganizationMode.SORT_BY_TYPE:
        return f"→ {category.name}/"

    policy = category.destination_policy
    if policy == DestinationPolicy.DAILY:
        return "→ Daily"
    if policy == DestinationPolicy.WEEKLY:
        return "→ Weekly"
    if policy == DestinationPolicy.MONTHLY:
        return "→ Monthly"
    if policy == DestinationPolicy.CUSTOM:
        if category.custom_destination is not None:
            return f"→ {Path(category.custom_destination).name}"
        return "→ Custom"
    if policy == DestinationPolicy.SKIP:
        return "→ Skip"
    return f"→ {category.name}/"
