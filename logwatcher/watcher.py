"""LogWatcher: tails one file by path and survives rotation and truncation."""

import logging
import os
import time
from typing import BinaryIO, Callable, Iterator

from logwatcher.config import Config
from logwatcher.cursor import Cursor
from logwatcher.dispatcher import EventDispatcher
from logwatcher.errors import IoFailure, LogWatcherError, NotFound, from_os_error
from logwatcher.events import (
    Callback,
    Line,
    LogRotation,
    LogWatcherAction,
    StopReason,
    WatchOutcome,
    WatchResult,
)
from logwatcher.identity import FileStat, IdentityBackend, InodeBackend
from logwatcher.reader import LineReader
from logwatcher.rotation import Rotation, RotationDetector

logger = logging.getLogger(__name__)


class LogWatcher:
    """Watches a log file for new lines and hands them to a callback.

    Handles:
    - Log rotation (file identity change at the watched path)
    - File truncation (size drops below the read offset)
    - The path briefly missing between rename and recreate

    Create instances with :meth:`register`; the watcher starts at the end
    of the file, so only content appended afterwards is delivered.
    """

    def __init__(
        self,
        path: str,
        handle: BinaryIO,
        stat: FileStat,
        config: Config,
        backend: IdentityBackend,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._path = path
        self._handle: BinaryIO | None = handle
        self._identity = stat.identity
        self._cursor = Cursor(offset=stat.size)
        self._config = config
        self._detector = RotationDetector(backend)
        self._reader = LineReader(config.encoding, config.read_limit)
        self._backend = backend
        self._sleep = sleep
        self._missing_polls = 0
        self._fatal_error: LogWatcherError | None = None

    @classmethod
    def register(
        cls,
        path,
        config: Config | None = None,
        *,
        backend: IdentityBackend | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> "LogWatcher":
        """Open ``path`` and position the watcher at its current end.

        Raises NotFound, PermissionDenied or IoFailure.
        """
        path = os.fspath(path)
        config = config or Config(log_file=path)
        backend = backend or InodeBackend()
        try:
            handle = open(path, "rb")
        except OSError as e:
            raise from_os_error(e, "open", path, fatal=True) from e
        try:
            stat = backend.stat_handle(handle)
        except OSError as e:
            handle.close()
            raise from_os_error(e, "stat", path, fatal=True) from e
        logger.info("Registered %s (identity=%s, offset=%d)", path, stat.identity, stat.size)
        return cls(path, handle, stat, config, backend, sleep)

    @property
    def path(self) -> str:
        return self._path

    @property
    def offset(self) -> int:
        return self._cursor.offset

    @property
    def identity(self):
        return self._identity

    @property
    def closed(self) -> bool:
        return self._handle is None

    def close(self):
        """Close the current file handle."""
        if self._handle:
            self._handle.close()
            self._handle = None
            logger.debug("Closed %s", self._path)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def poll(self) -> list[WatchResult]:
        """Run one cycle: a rotation check followed by one bounded read.

        Never sleeps. A fatal error, when one occurs, is the last result.
        """
        if self._handle is None:
            raise ValueError(f"Watcher for {self._path} is closed")
        self._fatal_error = None
        self._reader.more_pending = False

        try:
            rotation = self._detector.check(self._path, self._identity, self._cursor.offset)
        except OSError as e:
            return [self._stat_failed(e)]
        self._missing_polls = 0

        results: list[WatchResult] = []
        if rotation is not Rotation.NONE:
            results.extend(self._rotate(rotation))
            if results and isinstance(results[-1], LogWatcherError):
                return results

        try:
            results.extend(self._reader.read(self._handle, self._cursor))
        except OSError as e:
            results.append(self._record(IoFailure(f"read {self._path} failed", underlying=e)))
        return results

    def follow(self) -> Iterator[WatchResult]:
        """Yield results from successive polls; ends after a fatal error.

        Sleeps ``poll_interval`` only after a cycle that produced no lines
        and left nothing unread.
        """
        while True:
            results = self.poll()
            yield from results
            if self._fatal_error is not None:
                return
            if self._reader.more_pending:
                continue
            if not any(isinstance(r, Line) for r in results):
                self._sleep(self._config.poll_interval)

    def watch(self, callback: Callback) -> WatchOutcome:
        """Block, delivering results to ``callback`` until it returns FINISH
        or a fatal error occurs. The watcher is closed on return.
        """
        dispatcher = EventDispatcher(callback)
        logger.info("Watching %s (poll_interval=%.2fs)", self._path, self._config.poll_interval)
        try:
            while True:
                action = dispatcher.dispatch(self.poll())
                fatal = self._fatal_error
                # A FINISH that stopped delivery before the fatal error was seen is a user stop
                if fatal is not None and dispatcher.last_delivered is fatal:
                    logger.error("Stopped watching %s: %s", self._path, fatal)
                    return WatchOutcome(StopReason.FATAL_ERROR, fatal)
                if action is LogWatcherAction.FINISH:
                    logger.info("Stopped watching %s: finish requested", self._path)
                    return WatchOutcome(StopReason.USER_REQUESTED)
                if action is LogWatcherAction.SEEK_TO_END:
                    self.seek_to_end()
                if not self._reader.more_pending:
                    self._sleep(self._config.poll_interval)
        finally:
            self.close()

    def seek_to_end(self):
        """Skip everything not yet delivered, including a pending partial line."""
        try:
            size = self._backend.stat_handle(self._handle).size
        except OSError as e:
            logger.warning("Could not seek %s to end: %s", self._path, e)
            return
        logger.debug("Seeking %s from offset %d to end (%d)", self._path, self._cursor.offset, size)
        self._cursor.reset(size)

    def _rotate(self, rotation: Rotation) -> list[WatchResult]:
        results: list[WatchResult] = []
        if rotation is Rotation.REPLACED:
            # Everything appended to the old file after the last poll belongs before the rotation
            try:
                results.extend(self._reader.drain(self._handle, self._cursor))
            except OSError as e:
                logger.warning("Could not drain rotated file %s: %s", self._path, e)
            if self._cursor.residual:
                logger.debug("Flushing %d byte unterminated line from rotated file", len(self._cursor.residual))
                results.append(Line(self._reader.decode(self._cursor.residual)))
                self._cursor.residual = b""

        if rotation is Rotation.TRUNCATED:
            self._cursor.reset(0)
            results.append(LogRotation())
            return results

        try:
            handle = open(self._path, "rb")
        except OSError as e:
            fatal = not isinstance(e, FileNotFoundError)
            results.append(self._record(from_os_error(e, "reopen", self._path, fatal=fatal)))
            return results
        try:
            stat = self._backend.stat_handle(handle)
        except OSError as e:
            handle.close()
            results.append(self._record(from_os_error(e, "stat", self._path)))
            return results

        self.close()
        self._handle = handle
        self._identity = stat.identity
        self._cursor.reset(0)
        logger.info("Reopened %s (identity=%s)", self._path, self._identity)
        results.append(LogRotation())
        return results

    def _stat_failed(self, exc: OSError) -> LogWatcherError:
        fatal = isinstance(exc, PermissionError)
        if isinstance(exc, FileNotFoundError):
            self._missing_polls += 1
            parent = os.path.dirname(self._path) or "."
            limit = self._config.missing_file_limit
            if not os.path.isdir(parent):
                return self._record(NotFound(
                    f"parent directory of {self._path} is gone", underlying=exc, fatal=True,
                ))
            if limit is not None and self._missing_polls > limit:
                return self._record(NotFound(
                    f"{self._path} missing for {self._missing_polls} polls", underlying=exc, fatal=True,
                ))
        return self._record(from_os_error(exc, "stat", self._path, fatal=fatal))

    def _record(self, error: LogWatcherError) -> LogWatcherError:
        if error.fatal:
            logger.error("Fatal error watching %s: %s", self._path, error)
            self._fatal_error = error
        else:
            logger.warning("Transient error watching %s: %s", self._path, error)
        return error


def register(path, config: Config | None = None, **kwargs) -> LogWatcher:
    """Shortcut for :meth:`LogWatcher.register`."""
    return LogWatcher.register(path, config, **kwargs)
