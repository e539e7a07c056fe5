"""Core types, built-in categories and persisted preferences."""

from .catalog import FileCatalog, built_in_categories
from .types import (
    DestinationPolicy,
    FileCategory,
    MatchStrategy,
    MoveRecord,
    OrganizationMode,
    Progress,
    RunResult,
    Schedule,
    UndoResult,
)

__all__ = [
    "DestinationPolicy",
    "FileCatalog",
    "FileCategory",
    "MatchStrategy",
    "MoveRecord",
    "OrganizationMode",
    "Progress",
    "RunResult",
    "Schedule",
    "UndoResult",
    "built_in_categories",
]
