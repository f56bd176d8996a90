"""Rotation detection: replaced file (identity change) or in-place truncation."""

import logging
from enum import Enum

from logwatcher.identity import FileIdentity, IdentityBackend

logger = logging.getLogger(__name__)


class Rotation(Enum):
    NONE = "none"
    REPLACED = "replaced"
    TRUNCATED = "truncated"


class RotationDetector:
    def __init__(self, backend: IdentityBackend):
        self._backend = backend

    def check(self, path: str, identity: FileIdentity, offset: int) -> Rotation:
        """Re-stat ``path`` and compare it with the file currently open.

        Truncation is best-effort: a file rewritten in place that has grown
        past ``offset`` again by the time of the check looks like plain
        growth. Raises OSError when the path cannot be statted.
        """
        current = self._backend.stat_path(path)
        if current.identity != identity:
            logger.info("File rotation detected for %s (%s -> %s)", path, identity, current.identity)
            return Rotation.REPLACED
        if current.size < offset:
            logger.info("File truncation detected for %s (size %d < offset %d)",
                        path, current.size, offset)
            return Rotation.TRUNCATED
        return Rotation.NONE
