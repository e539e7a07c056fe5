"""
Name collision handling for archived files.
"""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

# Includes the original candidate, so at most 99 numbered names are tried.
MAX_COLLISION_ATTEMPTS = 100


class CollisionLimitError(ValueError):
    """Raised when no free name is found within the attempt limit."""


def numbered_name(path: Path, counter: int) -> Path:
    """photo.png -> photo 2.png; README -> README 2"""
    return path.parent / f"{path.stem} {counter}{path.suffix}"


class CollisionResolver:
    """Find a free path next to an occupied one by adding " 2", " 3", ..."""

    def __init__(self, max_attempts: int = MAX_COLLISION_ATTEMPTS):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts

    def resolve(self, candidate: Path) -> Path:
        """
        Resolve a naming conflict.

        Args:
            candidate: Preferred target path

        Returns:
            The candidate if it is free, otherwise the first free numbered
            variant

        Raises:
            CollisionLimitError: If every attempt is taken
        """
        candidate = Path(candidate)
        if not _occupied(candidate):
            return candidate

        for counter in range(2, self.max_attempts + 1):
            new_path = numbered_name(candidate, counter)
            if not _occupied(new_path):
                logger.debug(f"Name taken, using {new_path.name}")
                return new_path

        raise CollisionLimitError(
            f"Too many naming conflicts for {candidate.name} "
            f"({self.max_attempts} attempts)"
        )


def _occupied(path: Path) -> bool:
    # A dangling symlink still occupies the name.
    return path.exists() or path.is_symlink()
