"""
Undo log for the most recent clean.

Records every successful move so the whole run can be reversed once.
"""

import json
import logging
import uuid
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError

from ..core.types import MoveRecord

logger = logging.getLogger(__name__)


class UndoLog(BaseModel):
    """Move records of a single run."""

    run_id: str = Field(
        default_factory=lambda: str(uuid.uuid4()), description="Unique run ID"
    )
    created_at: datetime = Field(
        default_factory=datetime.now, description="When the run started"
    )
    records: List[MoveRecord] = Field(
        default_factory=list, description="Moves in the order they happened"
    )

    def __len__(self) -> int:
        return len(self.records)

    @property
    def is_empty(self) -> bool:
        return not self.records

    def add(
        self,
        source_path: Path,
        destination_path: Path,
        timestamp: Optional[datetime] = None,
    ) -> MoveRecord:
        """
        Append a move to the log.

        Args:
            source_path: Where the file was
            destination_path: Where the file went
            timestamp: When the move happened (defaults to now)

        Returns:
            Created record
        """
        record = MoveRecord(
            source_path=source_path,
            destination_path=destination_path,
            timestamp=timestamp or datetime.now(),
        )
        self.records.append(record)
        return record

    def rollback_order(self) -> List[MoveRecord]:
        """Records newest first, the order they must be reversed in."""
        return list(reversed(self.records))

    def clear(self) -> None:
        self.records.clear()

    def save(self, log_path: Path) -> None:
        """
        Save undo log to file.

        Args:
            log_path: Path to save log file
        """
        log_path.parent.mkdir(parents=True, exist_ok=True)

        with open(log_path, "w", encoding="utf-8") as f:
            json.dump(self.model_dump(mode="json"), f, indent=2)

        logger.debug(f"Saved undo log to {log_path}")

    @classmethod
    def load(cls, log_path: Path) -> "UndoLog":
        """
        Load undo log from file.

        Args:
            log_path: Path to log file

        Returns:
            Loaded undo log
        """
        with open(log_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        return cls.model_validate(data)

    @classmethod
    def load_or_empty(cls, log_path: Optional[Path]) -> "UndoLog":
        """Load a saved log, falling back to an empty one if it is missing
        or unreadable."""
        if log_path is None or not log_path.exists():
            return cls()
        try:
            return cls.load(log_path)
        except (OSError, ValueError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable undo log {log_path}: {e}")
            return cls()
