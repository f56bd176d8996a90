"""File identity tokens and the backend that produces them."""

import os
from dataclasses import dataclass
from typing import BinaryIO, Protocol


@dataclass(frozen=True)
class FileIdentity:
    device: int
    inode: int

    def __str__(self):
        return f"{self.device}:{self.inode}"


@dataclass(frozen=True)
class FileStat:
    identity: FileIdentity
    size: int


class IdentityBackend(Protocol):
    """Capability used by the rotation detector.

    Given a path (or an already open handle), return a comparable identity
    token and the current size. Raises OSError like ``os.stat`` does.
    """

    def stat_path(self, path: str) -> FileStat: ...

    def stat_handle(self, handle: BinaryIO) -> FileStat: ...


class InodeBackend:
    """Identity from ``st_dev`` + ``st_ino`` (Unix-like systems)."""

    @staticmethod
    def _from_stat(st: os.stat_result) -> FileStat:
        return FileStat(FileIdentity(st.st_dev, st.st_ino), st.st_size)

    def stat_path(self, path: str) -> FileStat:
        return self._from_stat(os.stat(path))

    def stat_handle(self, handle: BinaryIO) -> FileStat:
        return self._from_stat(os.fstat(handle.fileno()))
