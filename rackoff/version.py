"""Version information for rackoff, read from the installed distribution."""

from importlib.metadata import PackageNotFoundError, version

DISTRIBUTION = "rackoff"
UNKNOWN_VERSION = "0.0.0+unknown"


def installed_version(distribution: str = DISTRIBUTION) -> str:
    """Version recorded in the package metadata.

    Returns:
        The installed version, or UNKNOWN_VERSION when running from a source
        tree that was never installed.
    """
    try:
        return version(distribution)
    except PackageNotFoundError:
        return UNKNOWN_VERSION


__version__ = installed_version()
