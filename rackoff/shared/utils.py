"""
Formatting and logging helpers shared by the CLI and the host.
"""

import logging

from ..core.types import RunResult


def format_bytes(size_bytes: int) -> str:
    """
    Format bytes in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted string (e.g., "2.5 GB")
    """
    if size_bytes == 0:
        return "0 B"

    units = ["B", "KB", "MB", "GB", "TB", "PB"]
    unit_index = 0
    size = float(size_bytes)

    while size >= 1024.0 and unit_index < len(units) - 1:
        size /= 1024.0
        unit_index += 1

    if unit_index == 0:
        return f"{int(size)} B"
    return f"{size:.1f} {units[unit_index]}"


def summarize_result(result: RunResult) -> str:
    """One-line summary of a clean, as shown in the completion notice."""
    if result.moved_count == 0:
        return "Desktop already clean"
    plural = "" if result.moved_count == 1 else "s"
    return (
        f"Vacuumed {result.moved_count} file{plural} to archive "
        f"({format_bytes(result.total_bytes)})"
    )


def setup_logging(verbose: bool = False, quiet: bool = False, level: str = "INFO") -> None:
    """
    Configure logging for the application.

    Args:
        verbose: If True, set logging level to DEBUG
        quiet: If True, set logging level to WARNING
        level: Level name used when neither flag is set
    """
    if quiet:
        log_level = logging.WARNING
    elif verbose:
        log_level = logging.DEBUG
    else:
        log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
