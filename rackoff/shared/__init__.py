"""
Shared utilities for RackOff.
"""

from .debounce import Debouncer
from .utils import format_bytes, setup_logging, summarize_result

__all__ = [
    "Debouncer",
    "format_bytes",
    "setup_logging",
    "summarize_result",
]
