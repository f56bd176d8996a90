"""Events delivered to the callback and the directives it returns."""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Union

from logwatcher.errors import LogWatcherError


class LogWatcherEvent:
    """Base class for everything the watcher emits on success."""


@dataclass(frozen=True)
class Line(LogWatcherEvent):
    text: str


@dataclass(frozen=True)
class LogRotation(LogWatcherEvent):
    pass


class LogWatcherAction(Enum):
    CONTINUE = "continue"
    FINISH = "finish"
    SEEK_TO_END = "seek_to_end"


class StopReason(Enum):
    USER_REQUESTED = "user_requested"
    FATAL_ERROR = "fatal_error"


@dataclass(frozen=True)
class WatchOutcome:
    reason: StopReason
    error: LogWatcherError | None = None


# Either an event or the error that made the current poll fail.
WatchResult = Union[LogWatcherEvent, LogWatcherError]

Callback = Callable[[WatchResult], LogWatcherAction | None]
