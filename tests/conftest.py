"""
Pytest configuration and fixtures for rackoff tests.
"""

from datetime import datetime
from pathlib import Path
from typing import Callable

import pytest

from rackoff.core.catalog import FileCatalog
from rackoff.organization.engine import VacuumEngine

FIXED_NOW = datetime(2024, 3, 15, 10, 30, 0)


@pytest.fixture
def source_dir(tmp_path: Path) -> Path:
    """Folder standing in for the desktop."""
    path = tmp_path / "Desktop"
    path.mkdir()
    return path


@pytest.fixture
def archive_dir(tmp_path: Path) -> Path:
    """Archive root (not created yet; the engine creates it)."""
    return tmp_path / "Archive"


@pytest.fixture
def make_file(source_dir: Path) -> Callable[..., Path]:
    """Create a file in the source folder."""

    def _make(name: str, content: str = "x") -> Path:
        path = source_dir / name
        path.write_text(content, encoding="utf-8")
        return path

    return _make


@pytest.fixture
def catalog() -> FileCatalog:
    """Built-in catalog with only Screenshots enabled (the default)."""
    return FileCatalog()


@pytest.fixture
def engine(source_dir: Path, archive_dir: Path, catalog: FileCatalog) -> VacuumEngine:
    """Engine with a fixed clock and an in-memory undo log."""
    return VacuumEngine(
        source_directory=source_dir,
        archive_root=archive_dir,
        catalog=catalog,
        clock=lambda: FIXED_NOW,
    )
