"""Rotation-aware log file tailing."""

from logwatcher.config import Config, load_config, load_yaml_config
from logwatcher.errors import (
    ConfigError,
    IoFailure,
    LogWatcherError,
    NotFound,
    PermissionDenied,
)
from logwatcher.events import (
    Line,
    LogRotation,
    LogWatcherAction,
    LogWatcherEvent,
    StopReason,
    WatchOutcome,
    WatchResult,
)
from logwatcher.identity import FileIdentity, FileStat, IdentityBackend, InodeBackend
from logwatcher.watcher import LogWatcher, register

__all__ = [
    "Config",
    "ConfigError",
    "FileIdentity",
    "FileStat",
    "IdentityBackend",
    "InodeBackend",
    "IoFailure",
    "Line",
    "LogRotation",
    "LogWatcher",
    "LogWatcherAction",
    "LogWatcherError",
    "LogWatcherEvent",
    "NotFound",
    "PermissionDenied",
    "StopReason",
    "WatchOutcome",
    "WatchResult",
    "load_config",
    "load_yaml_config",
    "register",
]
