"""
Persisted user preferences.

Stored as a JSON document. Every key is optional: a missing key keeps its
default and a bad value is logged and ignored, so an old or hand-edited file
never stops the app from starting.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from ..shared.debounce import Debouncer
from .catalog import FileCatalog
from .types import DestinationPolicy, OrganizationMode, Schedule

logger = logging.getLogger(__name__)


class CategoryPreferences(BaseModel):
    """Saved overrides for one category. None means "use the default"."""

    enabled: Optional[bool] = None
    destination_policy: Optional[DestinationPolicy] = None
    custom_destination: Optional[Path] = None
    extensions: Optional[List[str]] = None


class Preferences(BaseModel):
    """Everything that survives a restart."""

    organization_mode: OrganizationMode = OrganizationMode.QUICK_ARCHIVE
    source_directory: Optional[Path] = None
    archive_directory: Optional[Path] = None
    last_run: Optional[datetime] = None
    schedule: Schedule = Schedule.MANUAL
    daily_hour: int = Field(default=9, ge=0, le=23)
    categories: Dict[str, CategoryPreferences] = Field(default_factory=dict)

    @field_validator("categories", mode="before")
    @classmethod
    def _drop_bad_categories(cls, value: Any) -> Dict[str, Any]:
        if not isinstance(value, dict):
            logger.warning("Ignoring saved categories: not a mapping")
            return {}
        return {
            name: _lenient(CategoryPreferences, data, f"category {name}")
            for name, data in value.items()
        }


def _lenient(model: type, data: Any, label: str) -> BaseModel:
    """Build a model field by field, skipping values that fail validation."""
    if not isinstance(data, dict):
        logger.warning(f"Ignoring saved {label}: not a mapping")
        return model()
    kept: Dict[str, Any] = {}
    for key, value in data.items():
        if key not in model.model_fields:
            continue
        try:
            model.model_validate({**kept, key: value})
        except ValidationError as e:
            logger.warning(f"Ignoring saved {label} {key}={value!r}: {e.errors()[0]['msg']}")
            continue
        kept[key] = value
    return model.model_validate(kept)


class PreferencesStore:
    """Load and save preferences to a JSON file."""

    def __init__(self, path: Path, save_debounce_seconds: float = 0.5):
        """
        Initialize the store and load whatever is on disk.

        Args:
            path: Preferences file. Created on first save
            save_debounce_seconds: Quiet period for save_debounced()
        """
        self.path = Path(path).expanduser()
        self.preferences = self._load()
        self._debouncer = Debouncer(self.save, save_debounce_seconds)

    def _load(self) -> Preferences:
        if not self.path.exists():
            return Preferences()
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read preferences {self.path}: {e}")
            return Preferences()
        return _lenient(Preferences, data, "preference")  # type: ignore[return-value]

    def save(self) -> None:
        """Write preferences to disk now."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(self.preferences.model_dump(mode="json"), f, indent=2)
        tmp_path.replace(self.path)
        logger.debug(f"Saved preferences to {self.path}")

    def save_debounced(self) -> None:
        """Save once changes stop arriving."""
        self._debouncer.trigger()

    def flush(self) -> None:
        """Write any debounced save immediately."""
        self._debouncer.flush()

    def apply(self, catalog: FileCatalog) -> FileCatalog:
        """
        Push saved per-category values into a catalog.

        Unknown category names are ignored; values the category rejects are
        logged and skipped.
        """
        for name, saved in self.preferences.categories.items():
            try:
                category = catalog.get(name)
            except KeyError:
                logger.debug(f"Ignoring preferences for unknown category {name}")
                continue

            if saved.enabled is not None:
                category.enabled = saved.enabled
            if saved.destination_policy is not None:
                category.destination_policy = saved.destination_policy
            if saved.custom_destination is not None:
                category.custom_destination = saved.custom_destination
            if saved.extensions is not None:
                try:
                    category.extensions = saved.extensions
                except ValidationError as e:
                    logger.warning(f"Ignoring saved extensions for {name}: {e}")
        return catalog

    def capture(
        self,
        catalog: FileCatalog,
        mode: Optional[OrganizationMode] = None,
        source_directory: Optional[Path] = None,
        archive_directory: Optional[Path] = None,
        last_run: Optional[datetime] = None,
    ) -> Preferences:
        """Copy the current engine-facing state into the preferences."""
        prefs = self.preferences
        for category in catalog:
            prefs.categories[category.name] = CategoryPreferences(
                enabled=category.enabled,
                destination_policy=category.destination_policy,
                custom_destination=category.custom_destination,
                extensions=list(category.extensions),
            )
        if mode is not None:
            prefs.organization_mode = mode
        if source_directory is not None:
            prefs.source_directory = source_directory
        if archive_directory is not None:
            prefs.archive_directory = archive_directory
        if last_run is not None:
            prefs.last_run = last_run
        return prefs
