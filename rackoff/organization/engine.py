"""
Vacuum engine: moves matching files out of the source folder.

Handles the actual file operations for a clean and for undoing it. Every
per-file failure is collected into the result; a run always completes.
"""

import asyncio
import logging
import os
import shutil
import threading
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Set, Tuple, Union

from ..core.catalog import FileCatalog
from ..core.types import (
    DestinationPolicy,
    FileCategory,
    MoveRecord,
    OrganizationMode,
    Progress,
    RunResult,
    UndoResult,
)
from .collision import CollisionResolver
from .matcher import filter_matches, list_candidates, matches
from .strategy import DestinationResolver
from .transaction import UndoLog

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[Progress], None]

NOTHING_TO_UNDO = "Nothing to undo"


class EngineState(str, Enum):
    """What the engine is doing right now."""

    IDLE = "idle"
    RUNNING = "running"
    UNDOING = "undoing"


class EngineBusyError(RuntimeError):
    """Raised when a clean or undo is requested while one is in progress."""


class FileMoveError(Exception):
    """A single file could not be moved or restored."""


def file_timestamp(st: os.stat_result, clock: Callable[[], datetime]) -> datetime:
    """Creation time where the platform records it, otherwise now."""
    birthtime = getattr(st, "st_birthtime", None)
    if birthtime:
        return datetime.fromtimestamp(birthtime)
    return clock()


def restore_timestamps(path: Path, st: os.stat_result) -> bool:
    """
    Re-apply the creation time captured before a move.

    There is no call that sets a creation time directly. On macOS, setting
    the modification time earlier than the creation time pulls the creation
    time back with it, so the birthtime is written as the mtime first and the
    real mtime put back afterwards.

    Returns:
        True if a creation time was re-applied
    """
    birthtime_ns = getattr(st, "st_birthtime_ns", None)
    if birthtime_ns is None:
        birthtime = getattr(st, "st_birthtime", None)
        if not birthtime:
            return False
        birthtime_ns = int(birthtime * 1_000_000_000)
    try:
        os.utime(path, ns=(st.st_atime_ns, birthtime_ns))
        os.utime(path, ns=(st.st_atime_ns, st.st_mtime_ns))
    except OSError as e:
        logger.warning(f"Could not restore creation time on {path}: {e}")
        return False
    return True


class VacuumEngine:
    """Move files from a source folder into an archive, one run at a time."""

    def __init__(
        self,
        source_directory: Optional[Path] = None,
        archive_root: Optional[Path] = None,
        catalog: Optional[Union[FileCatalog, Iterable[FileCategory]]] = None,
        mode: OrganizationMode = OrganizationMode.QUICK_ARCHIVE,
        undo_log_path: Optional[Path] = None,
        clock: Callable[[], datetime] = datetime.now,
        yield_every: int = 10,
    ):
        """
        Initialize the engine.

        Args:
            source_directory: Folder to clean (usually the desktop)
            archive_root: Root of the archive
            catalog: Categories to use. Defaults to the built-in set
            mode: Organization mode
            undo_log_path: Where to keep the undo log between restarts.
                If None the log only lives in memory
            clock: Source of "now", used when a file has no creation time
            yield_every: Give control back to the event loop after this
                many files
        """
        self.source_directory: Optional[Path] = None
        self.archive_root: Optional[Path] = None
        self.catalog = FileCatalog()
        self.mode = mode
        self.undo_log_path = Path(undo_log_path) if undo_log_path else None
        self.clock = clock
        self.yield_every = max(1, yield_every)
        self.resolver = DestinationResolver()
        self.collisions = CollisionResolver()
        self.configuration_error: Optional[str] = None
        self.last_run: Optional[datetime] = None

        self._lock = threading.Lock()
        self._state = EngineState.IDLE
        self._progress = Progress()
        self._subscribers: List[ProgressCallback] = []
        self._undo_log = UndoLog.load_or_empty(self.undo_log_path)

        if catalog is not None:
            self.catalog = _as_catalog(catalog)
        if source_directory is not None and archive_root is not None:
            self.configure(source_directory, archive_root)

    # ------------------------------------------------------------------
    # Observable state

    @property
    def state(self) -> EngineState:
        with self._lock:
            return self._state

    @property
    def is_processing(self) -> bool:
        return self.state != EngineState.IDLE

    @property
    def progress(self) -> Progress:
        with self._lock:
            return self._progress

    @property
    def can_undo(self) -> bool:
        with self._lock:
            return not self._undo_log.is_empty

    @property
    def undo_records(self) -> List[MoveRecord]:
        """Copy of the moves the next undo would reverse."""
        with self._lock:
            return list(self._undo_log.records)

    def subscribe(self, callback: ProgressCallback) -> Callable[[], None]:
        """
        Get notified of progress changes.

        Callbacks run on whichever thread drives the engine.

        Returns:
            Function that removes the subscription
        """
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    # ------------------------------------------------------------------
    # Configuration

    def configure(
        self,
        source_directory: Path,
        archive_root: Path,
        categories: Optional[Union[FileCatalog, Iterable[FileCategory]]] = None,
        mode: Optional[OrganizationMode] = None,
    ) -> Optional[str]:
        """
        Set the working folders, categories and mode.

        The archive root is created if missing. Failing to create it does not
        raise; the message is returned, logged, and reported again by the next
        run.

        Returns:
            Configuration error message, or None

        Raises:
            EngineBusyError: If a clean or undo is in progress
        """
        # No run may start while settings are half-applied
        with self._lock:
            if self._state != EngineState.IDLE:
                raise EngineBusyError("Cannot reconfigure while processing")

            self.source_directory = Path(source_directory).expanduser()
            self.archive_root = Path(archive_root).expanduser()
            if categories is not None:
                self.catalog = _as_catalog(categories)
            if mode is not None:
                self.mode = OrganizationMode(mode)

            self.configuration_error = self._ensure_archive_root()
            return self.configuration_error

    def _ensure_archive_root(self) -> Optional[str]:
        if self.archive_root is None:
            return "No archive folder configured"
        try:
            self.archive_root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            message = f"Cannot create archive folder {self.archive_root}: {e}"
            logger.error(message)
            return message
        return None

    # ------------------------------------------------------------------
    # Clean

    async def run(self) -> RunResult:
        """
        Move every matching file out of the source folder.

        Returns:
            Counts, bytes moved and per-file errors

        Raises:
            EngineBusyError: If a clean or undo is already in progress
        """
        self._begin(EngineState.RUNNING)
        try:
            return await self._vacuum()
        finally:
            self._finish()

    def _active_categories(self) -> List[FileCategory]:
        active = []
        for category in self.catalog.enabled():
            if (
                self.mode == OrganizationMode.SMART_CLEAN
                and category.destination_policy == DestinationPolicy.SKIP
            ):
                logger.debug(f"Skipping {category.name}: destination is skip")
                continue
            active.append(category)
        return active

    async def _vacuum(self) -> RunResult:
        started = self.clock()
        errors: List[str] = []
        moved = 0
        total_bytes = 0
        run_log = UndoLog(created_at=started)

        categories = self._active_categories()
        if not categories:
            logger.info("No categories enabled, nothing to clean")
            self.last_run = started
            return RunResult()

        if self.source_directory is None or self.archive_root is None:
            return RunResult(errors=["No source or archive folder configured"])

        root_error = self._ensure_archive_root()
        if root_error:
            errors.append(root_error)

        try:
            candidates = list_candidates(self.source_directory)
        except OSError as e:
            message = f"Cannot read {self.source_directory}: {e}"
            logger.error(message)
            errors.append(message)
            return RunResult(errors=errors)

        total = sum(
            1 for path in candidates if any(matches(path, c) for c in categories)
        )
        self._set_progress(0, total)
        logger.info(
            f"Starting clean of {self.source_directory} "
            f"({total} files, mode {self.mode.value})"
        )

        claimed: Set[Path] = set()
        processed = 0

        for category in categories:
            if root_error and self.resolver.depends_on_archive_root(
                category, self.mode
            ):
                logger.warning(f"Skipping {category.name}: archive folder unavailable")
                continue

            try:
                entries = filter_matches(
                    list_candidates(self.source_directory), category
                )
            except OSError as e:
                message = f"Cannot read {self.source_directory}: {e}"
                logger.error(message)
                errors.append(message)
                continue

            for path in entries:
                if path in claimed:
                    continue
                claimed.add(path)

                try:
                    target, size = self._move_one(path, category)
                    run_log.add(path, target, self.clock())
                    moved += 1
                    total_bytes += size
                except Exception as e:
                    logger.error(f"Error moving {path}: {e}")
                    errors.append(f"{path.name}: {e}")

                processed += 1
                self._set_progress(processed, max(total, processed))
                if processed % self.yield_every == 0:
                    await asyncio.sleep(0)

        if moved:
            self._replace_undo_log(run_log)

        self.last_run = started
        logger.info(
            f"Clean complete: {moved} moved, {total_bytes} bytes, "
            f"{len(errors)} errors"
        )
        return RunResult(moved_count=moved, total_bytes=total_bytes, errors=errors)

    def _move_one(self, path: Path, category: FileCategory) -> Tuple[Path, int]:
        """
        Move a single file into its archive folder.

        Returns:
            Final path and size in bytes

        Raises:
            Exception if the move fails
        """
        try:
            st = path.stat()
        except FileNotFoundError:
            raise FileMoveError("source file not found")

        timestamp = file_timestamp(st, self.clock)
        folder = self.resolver.resolve(
            category, self.mode, timestamp, self.archive_root  # type: ignore[arg-type]
        )

        try:
            folder.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FileMoveError(f"could not create folder {folder}: {e}")

        target = self.collisions.resolve(folder / path.name)
        # rename() replaces an existing file silently; never overwrite
        if target.exists() or target.is_symlink():
            raise FileMoveError(f"{target.name} appeared in {folder} before the move")

        try:
            shutil.move(str(path), str(target))
        except FileNotFoundError:
            if not path.exists():
                raise FileMoveError("source file not found")
            raise

        restore_timestamps(target, st)
        logger.info(f"Moved {path} → {target}")
        return target, st.st_size

    def _replace_undo_log(self, log: UndoLog) -> None:
        with self._lock:
            self._undo_log = log
        if self.undo_log_path is not None:
            try:
                log.save(self.undo_log_path)
            except OSError as e:
                logger.warning(f"Could not save undo log: {e}")

    # ------------------------------------------------------------------
    # Undo

    async def undo(self) -> UndoResult:
        """
        Move every file from the last clean back where it came from.

        The log is cleared afterwards even if some files could not be
        restored.

        Raises:
            EngineBusyError: If a clean or undo is already in progress
        """
        self._begin(EngineState.UNDOING)
        try:
            return await self._rollback()
        finally:
            self._finish()

    async def _rollback(self) -> UndoResult:
        with self._lock:
            log = self._undo_log

        if log.is_empty:
            return UndoResult(errors=[NOTHING_TO_UNDO])

        records = log.rollback_order()
        logger.info(f"Undoing {len(records)} moves from run {log.run_id}")
        self._set_progress(0, len(records))

        restored = 0
        errors: List[str] = []
        for index, record in enumerate(records, start=1):
            try:
                self._restore_one(record)
                restored += 1
            except Exception as e:
                logger.error(f"Error restoring {record.destination_path}: {e}")
                errors.append(f"{record.destination_path.name}: {e}")

            self._set_progress(index, len(records))
            if index % self.yield_every == 0:
                await asyncio.sleep(0)

        self._clear_undo_log()
        logger.info(f"Undo complete: {restored} restored, {len(errors)} errors")
        return UndoResult(restored_count=restored, errors=errors)

    def _restore_one(self, record: MoveRecord) -> None:
        archived = record.destination_path
        try:
            st = archived.stat()
        except FileNotFoundError:
            raise FileMoveError("archived file not found")

        original = record.source_path
        original.parent.mkdir(parents=True, exist_ok=True)
        target = self.collisions.resolve(original)
        if target != original:
            logger.warning(f"{original} is taken, restoring as {target.name}")
        if target.exists() or target.is_symlink():
            raise FileMoveError(f"{target.name} appeared before the restore")

        shutil.move(str(archived), str(target))
        restore_timestamps(target, st)
        logger.info(f"Moved back: {archived} → {target}")

    def _clear_undo_log(self) -> None:
        with self._lock:
            self._undo_log = UndoLog()
        if self.undo_log_path is not None:
            try:
                self.undo_log_path.unlink()
            except FileNotFoundError:
                pass
            except OSError as e:
                logger.warning(f"Could not remove undo log: {e}")

    # ------------------------------------------------------------------
    # State transitions

    def _begin(self, state: EngineState) -> None:
        with self._lock:
            if self._state != EngineState.IDLE:
                raise EngineBusyError(f"Engine is busy ({self._state.value})")
            self._state = state
            self._progress = Progress()

    def _finish(self) -> None:
        with self._lock:
            self._state = EngineState.IDLE
        self._set_progress(0, 0)

    def _set_progress(self, current: int, total: int) -> None:
        snapshot = Progress(current=current, total=total)
        with self._lock:
            self._progress = snapshot
            subscribers = list(self._subscribers)
        for callback in subscribers:
            try:
                callback(snapshot)
            except Exception as e:
                logger.warning(f"Progress callback failed: {e}")


def _as_catalog(categories: Union[FileCatalog, Iterable[FileCategory]]) -> FileCatalog:
    if isinstance(categories, FileCatalog):
        return categories
    return FileCatalog(categories)
