"""Tests for name collision handling."""

from pathlib import Path

import pytest

from rackoff.organization.collision import (
    MAX_COLLISION_ATTEMPTS,
    CollisionLimitError,
    CollisionResolver,
    numbered_name,
)


@pytest.fixture
def folder(tmp_path: Path) -> Path:
    path = tmp_path / "2024-03-15"
    path.mkdir()
    return path


class TestNumberedName:
    """Test suffix placement."""

    def test_before_extension(self):
        assert numbered_name(Path("/a/photo.png"), 2) == Path("/a/photo 2.png")

    def test_without_extension(self):
        assert numbered_name(Path("/a/README"), 3) == Path("/a/README 3")

    def test_only_last_extension_is_kept_apart(self):
        assert numbered_name(Path("/a/backup.tar.gz"), 2) == Path("/a/backup.tar 2.gz")


class TestCollisionResolver:
    """Test resolving occupied paths."""

    def test_free_path_is_unchanged(self, folder):
        candidate = folder / "photo.png"

        assert CollisionResolver().resolve(candidate) == candidate

    def test_first_collision_gets_two(self, folder):
        (folder / "photo.png").write_text("x")

        assert CollisionResolver().resolve(folder / "photo.png") == folder / "photo 2.png"

    def test_suffixes_increase_as_folder_fills(self, folder):
        """Repeated calls on a growing folder never reuse a suffix."""
        resolver = CollisionResolver()
        candidate = folder / "photo.png"
        candidate.write_text("original")

        names = []
        for _ in range(4):
            path = resolver.resolve(candidate)
            path.write_text("x")
            names.append(path.name)

        assert names == ["photo 2.png", "photo 3.png", "photo 4.png", "photo 5.png"]

    def test_fills_gaps(self, folder):
        """The first free number is used."""
        (folder / "a.txt").write_text("x")
        (folder / "a 2.txt").write_text("x")
        (folder / "a 4.txt").write_text("x")

        assert CollisionResolver().resolve(folder / "a.txt") == folder / "a 3.txt"

    def test_limit_is_reported(self, folder):
        """With 100 same-named files the resolver gives up instead of looping."""
        (folder / "a.png").write_text("x")
        for counter in range(2, MAX_COLLISION_ATTEMPTS + 1):
            (folder / f"a {counter}.png").write_text("x")
        assert len(list(folder.iterdir())) == 100

        with pytest.raises(CollisionLimitError):
            CollisionResolver().resolve(folder / "a.png")

    def test_custom_limit(self, folder):
        (folder / "a.png").write_text("x")
        (folder / "a 2.png").write_text("x")

        with pytest.raises(CollisionLimitError):
            CollisionResolver(max_attempts=2).resolve(folder / "a.png")

    def test_invalid_limit(self):
        with pytest.raises(ValueError):
            CollisionResolver(max_attempts=0)

    def test_dangling_symlink_counts_as_taken(self, folder):
        (folder / "a.png").symlink_to(folder / "missing.png")

        assert CollisionResolver().resolve(folder / "a.png") == folder / "a 2.png"
