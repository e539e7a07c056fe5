"""
Decide which category a file on the desktop belongs to.
"""

import logging
import os
import stat
from pathlib import Path
from typing import List, Union

from ..core.types import FileCategory, MatchStrategy

logger = logging.getLogger(__name__)

# BSD "hidden" file flag (chflags hidden); absent on Linux and Windows.
UF_HIDDEN = getattr(stat, "UF_HIDDEN", 0)


def _name_of(entry: Union[str, Path, os.DirEntry]) -> str:
    if isinstance(entry, (Path, os.DirEntry)):
        return entry.name
    return Path(entry).name


def _has_extension(lower_name: str, extensions: List[str]) -> bool:
    return any(lower_name.endswith(ext) for ext in extensions)


def _contains_pattern(lower_name: str, patterns: List[str]) -> bool:
    return any(pattern in lower_name for pattern in patterns)


def matches(entry: Union[str, Path, os.DirEntry], category: FileCategory) -> bool:
    """
    Check whether an entry's name matches a category.

    Only the name is inspected; filtering out directories and hidden
    entries is the caller's job (see list_candidates).

    Args:
        entry: File name, path or directory entry
        category: Category to test against

    Returns:
        True if the entry belongs to the category
    """
    lower_name = _name_of(entry).lower()
    if not _has_extension(lower_name, category.extensions):
        return False

    if category.match_strategy == MatchStrategy.BY_EXTENSION:
        return True
    if category.match_strategy == MatchStrategy.BY_FILENAME_PATTERN:
        return _contains_pattern(lower_name, category.patterns)
    if category.match_strategy == MatchStrategy.BY_EXTENSION_EXCLUDING_PATTERN:
        return not _contains_pattern(lower_name, category.patterns)

    return False  # type: ignore[unreachable]


def is_hidden(entry: os.DirEntry) -> bool:
    """Dot-files and entries carrying the BSD hidden flag."""
    if entry.name.startswith("."):
        return True
    if UF_HIDDEN:
        try:
            return bool(entry.stat(follow_symlinks=False).st_flags & UF_HIDDEN)
        except (OSError, AttributeError):
            return False
    return False


def list_candidates(directory: Path) -> List[Path]:
    """
    List regular, visible files directly inside a directory.

    Directories (including bundles such as .app) and hidden entries are
    never candidates. Results are sorted by name so runs are reproducible.

    Raises:
        OSError: If the directory cannot be read
    """
    candidates: List[Path] = []
    with os.scandir(directory) as it:
        for entry in it:
            try:
                if entry.is_dir():
                    continue
                if not entry.is_file():
                    continue
            except OSError as e:
                logger.debug(f"Skipping {entry.name}: {e}")
                continue
            if is_hidden(entry):
                logger.debug(f"Skipping hidden entry {entry.name}")
                continue
            candidates.append(Path(entry.path))
    candidates.sort(key=lambda path: path.name)
    return candidates


def filter_matches(paths: List[Path], category: FileCategory) -> List[Path]:
    """Candidates that belong to a category."""
    return [path for path in paths if matches(path, category)]
