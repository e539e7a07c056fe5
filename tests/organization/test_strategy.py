"""Tests for destination strategies."""

from datetime import datetime
from pathlib import Path

import pytest

from rackoff.core.types import DestinationPolicy, FileCategory, OrganizationMode
from rackoff.organization.strategy import (
    DestinationResolver,
    daily_folder_name,
    describe_destination,
    monthly_folder_name,
    weekly_folder_name,
)

STAMP = datetime(2024, 3, 15, 14, 30, 22)
ROOT = Path("/Archive")


def make_category(policy=DestinationPolicy.TYPE_FOLDER, custom=None, name="Documents"):
    return FileCategory(
        name=name,
        extensions=[".txt"],
        destination_policy=policy,
        custom_destination=custom,
    )


@pytest.fixture
def resolver():
    return DestinationResolver()


class TestFolderNames:
    """Test date stamps."""

    def test_daily(self):
        assert daily_folder_name(STAMP) == "2024-03-15"

    def test_monthly(self):
        assert monthly_folder_name(STAMP) == "2024-03"

    def test_weekly(self):
        assert weekly_folder_name(STAMP) == "2024-W11"

    def test_weekly_uses_iso_year(self):
        """30 Dec 2024 belongs to ISO week 1 of 2025."""
        assert weekly_folder_name(datetime(2024, 12, 30)) == "2025-W01"

    def test_weekly_pads_single_digit_weeks(self):
        assert weekly_folder_name(datetime(2024, 1, 3)) == "2024-W01"


class TestModeDispatch:
    """Test organization modes."""

    @pytest.mark.parametrize("policy", list(DestinationPolicy))
    def test_quick_archive_ignores_policy(self, resolver, policy):
        """Quick Archive always uses the day folder."""
        category = make_category(policy, custom=Path("/Elsewhere"))

        target = resolver.resolve(category, OrganizationMode.QUICK_ARCHIVE, STAMP, ROOT)

        assert target == Path("/Archive/2024-03-15")

    @pytest.mark.parametrize("policy", list(DestinationPolicy))
    def test_sort_by_type_ignores_policy(self, resolver, policy):
        """Sort by Type always uses the category folder."""
        category = make_category(policy, custom=Path("/Elsewhere"))

        target = resolver.resolve(category, OrganizationMode.SORT_BY_TYPE, STAMP, ROOT)

        assert target == Path("/Archive/Documents")


class TestSmartClean:
    """Test per-category policies."""

    @pytest.mark.parametrize(
        "policy,expected",
        [
            (DestinationPolicy.DAILY, "/Archive/2024-03-15"),
            (DestinationPolicy.WEEKLY, "/Archive/2024-W11"),
            (DestinationPolicy.MONTHLY, "/Archive/2024-03"),
            (DestinationPolicy.TYPE_FOLDER, "/Archive/Documents"),
        ],
    )
    def test_policies(self, resolver, policy, expected):
        target = resolver.resolve(
            make_category(policy), OrganizationMode.SMART_CLEAN, STAMP, ROOT
        )

        assert target == Path(expected)

    def test_custom_destination(self, resolver):
        """A custom folder is used as-is, outside the archive root."""
        category = make_category(DestinationPolicy.CUSTOM, custom=Path("/Work/Docs"))

        target = resolver.resolve(category, OrganizationMode.SMART_CLEAN, STAMP, ROOT)

        assert target == Path("/Work/Docs")

    def test_custom_without_path_falls_back_to_type_folder(self, resolver):
        category = make_category(DestinationPolicy.CUSTOM)

        target = resolver.resolve(category, OrganizationMode.SMART_CLEAN, STAMP, ROOT)

        assert target == Path("/Archive/Documents")

    def test_skip_falls_back_with_warning(self, resolver, caplog):
        """Skip should never reach the resolver; if it does, use the type folder."""
        category = make_category(DestinationPolicy.SKIP)

        target = resolver.resolve(category, OrganizationMode.SMART_CLEAN, STAMP, ROOT)

        assert target == Path("/Archive/Documents")
        assert "skip" in caplog.text

    def test_depends_on_archive_root(self, resolver):
        custom = make_category(DestinationPolicy.CUSTOM, custom=Path("/Work"))
        daily = make_category(DestinationPolicy.DAILY)

        assert not resolver.depends_on_archive_root(custom, OrganizationMode.SMART_CLEAN)
        assert resolver.depends_on_archive_root(custom, OrganizationMode.SORT_BY_TYPE)
        assert resolver.depends_on_archive_root(daily, OrganizationMode.SMART_CLEAN)


class TestDescribeDestination:
    """Test the short labels shown next to categories."""

    def test_mode_labels(self):
        category = make_category(DestinationPolicy.WEEKLY, name="Screenshots")

        assert describe_destination(category, OrganizationMode.QUICK_ARCHIVE) == "→ Daily"
        assert describe_destination(category, OrganizationMode.SORT_BY_TYPE) == "→ Screenshots/"
        assert describe_destination(category, OrganizationMode.SMART_CLEAN) == "→ Weekly"

    def test_custom_labels(self):
        chosen = make_category(DestinationPolicy.CUSTOM, custom=Path("/Users/me/Work"))
        unset = make_category(DestinationPolicy.CUSTOM)

        assert describe_destination(chosen, OrganizationMode.SMART_CLEAN) == "→ Work"
        assert describe_destination(unset, OrganizationMode.SMART_CLEAN) == "→ Custom"

    def test_skip_label(self):
        category = make_category(DestinationPolicy.SKIP)

        assert describe_destination(category, OrganizationMode.SMART_CLEAN) == "→ Skip"
