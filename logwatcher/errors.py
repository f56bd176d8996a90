"""Error taxonomy for the watcher: registration and in-loop failures."""

import errno


class LogWatcherError(Exception):
    """Base exception for the log watcher.

    ``fatal`` tells the watch loop whether it may keep polling after the
    error has been handed to the callback.
    """

    def __init__(
        self,
        message: str,
        *,
        underlying: BaseException | None = None,
        fatal: bool = False,
    ):
        super().__init__(message)
        self.underlying = underlying
        self.fatal = fatal

    def __str__(self):
        if self.underlying:
            return f"{self.args[0]} (caused by {self.underlying})"
        return self.args[0]


class NotFound(LogWatcherError):
    """The watched path does not exist."""


class PermissionDenied(LogWatcherError):
    """The watched path exists but cannot be read."""


class IoFailure(LogWatcherError):
    """Any other OS-level failure; ``detail`` describes it."""

    def __init__(self, detail: str, **kwargs):
        super().__init__(detail, **kwargs)
        self.detail = detail


class ConfigError(ValueError):
    """Raised when configuration values are invalid."""


def from_os_error(exc: OSError, action: str, path: str, *, fatal: bool = False) -> LogWatcherError:
    """Map an OSError raised while touching ``path`` onto the watcher taxonomy."""
    if isinstance(exc, FileNotFoundError) or exc.errno == errno.ENOENT:
        return NotFound(f"{action} {path}: no such file", underlying=exc, fatal=fatal)
    if isinstance(exc, PermissionError):
        return PermissionDenied(f"{action} {path}: permission denied", underlying=exc, fatal=fatal)
    return IoFailure(f"{action} {path} failed", underlying=exc, fatal=fatal)
