"""
RackOff - move desktop clutter into organized archive folders.

The engine scans a source folder, sorts files into categories, moves them
into date- or type-named archive folders and can undo the last clean.
"""

from .version import __version__

__all__ = ["__version__"]
