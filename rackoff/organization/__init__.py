"""
Organization module for moving files into the archive.

This module handles matching files to categories, choosing where they go,
avoiding name clashes, performing the moves, and undoing the last clean.
"""

from .collision import CollisionLimitError, CollisionResolver
from .engine import EngineBusyError, EngineState, VacuumEngine
from .matcher import is_hidden, list_candidates, matches
from .strategy import DestinationResolver, describe_destination
from .transaction import UndoLog

__all__ = [
    "CollisionLimitError",
    "CollisionResolver",
    "DestinationResolver",
    "EngineBusyError",
    "EngineState",
    "UndoLog",
    "VacuumEngine",
    "describe_destination",
    "is_hidden",
    "list_candidates",
    "matches",
]
