"""
Type definitions for the file-organization engine.
"""

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class MatchStrategy(str, Enum):
    """How a category decides that a file belongs to it."""

    BY_EXTENSION = "by_extension"
    BY_FILENAME_PATTERN = "by_filename_pattern"
    BY_EXTENSION_EXCLUDING_PATTERN = "by_extension_excluding_pattern"


class DestinationPolicy(str, Enum):
    """Per-category destination, honored only in Smart Clean mode."""

    DAILY = "daily"  # 2024-03-15
    WEEKLY = "weekly"  # 2024-W11
    MONTHLY = "monthly"  # 2024-03
    TYPE_FOLDER = "type_folder"  # Screenshots/
    CUSTOM = "custom"  # user-chosen folder
    SKIP = "skip"  # leave these files alone


class OrganizationMode(str, Enum):
    """Global organization mode."""

    QUICK_ARCHIVE = "quick_archive"  # everything into today's folder
    SORT_BY_TYPE = "sort_by_type"  # everything into a folder per category
    SMART_CLEAN = "smart_clean"  # each category's own policy


class Schedule(str, Enum):
    """When the host runs a clean without being asked."""

    MANUAL = "manual"
    ON_LAUNCH = "on_launch"
    DAILY = "daily"


def normalize_extension(raw_extension: str) -> str:
    """Lowercase an extension and make sure it starts with a dot."""
    ext = raw_extension.strip().lower()
    if not ext or ext == ".":
        raise ValueError("extension cannot be empty")
    if not ext.startswith("."):
        ext = f".{ext}"
    return ext


class FileCategory(BaseModel):
    """One kind of file the engine knows how to move."""

    model_config = ConfigDict(validate_assignment=True)

    name: str = Field(min_length=1, description="Unique, user-facing name")
    extensions: List[str] = Field(
        default_factory=list, description="Ordered suffixes, compared case-insensitively"
    )
    match_strategy: MatchStrategy = MatchStrategy.BY_EXTENSION
    patterns: List[str] = Field(
        default_factory=list,
        description="Name fragments to require (pattern match) or exclude",
    )
    icon: str = Field(default="doc", description="Menu-bar symbol name")
    enabled: bool = False
    destination_policy: DestinationPolicy = DestinationPolicy.TYPE_FOLDER
    custom_destination: Optional[Path] = None

    @field_validator("extensions")
    @classmethod
    def _normalize_extensions(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError("at least one extension is required")
        normalized: List[str] = []
        for raw in value:
            ext = normalize_extension(raw)
            if ext not in normalized:
                normalized.append(ext)
        return normalized

    @field_validator("patterns")
    @classmethod
    def _normalize_patterns(cls, value: List[str]) -> List[str]:
        return [pattern.lower() for pattern in value if pattern.strip()]

    @model_validator(mode="after")
    def _check_strategy_requirements(self) -> "FileCategory":
        if not self.extensions:
            raise ValueError(f"category {self.name!r} needs at least one extension")
        if (
            self.match_strategy != MatchStrategy.BY_EXTENSION
            and not self.patterns
        ):
            raise ValueError(
                f"category {self.name!r} needs at least one pattern for "
                f"{self.match_strategy.value}"
            )
        return self


class MoveRecord(BaseModel):
    """A single successful move, kept so it can be reversed."""

    source_path: Path
    destination_path: Path
    timestamp: datetime = Field(default_factory=datetime.now)


class RunResult(BaseModel):
    """Outcome of one clean."""

    model_config = ConfigDict(frozen=True)

    moved_count: int = Field(default=0, ge=0)
    total_bytes: int = Field(default=0, ge=0)
    errors: List[str] = Field(default_factory=list)


class UndoResult(BaseModel):
    """Outcome of undoing the last clean."""

    model_config = ConfigDict(frozen=True)

    restored_count: int = Field(default=0, ge=0)
    errors: List[str] = Field(default_factory=list)


class Progress(BaseModel):
    """Snapshot of engine progress, safe to hand to another thread."""

    model_config = ConfigDict(frozen=True)

    current: int = 0
    total: int = 0

    @property
    def fraction(self) -> float:
        if self.total == 0:
            return 0.0
        return self.current / self.total
