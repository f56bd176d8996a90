"""Incremental line reader: bytes from the cursor to EOF, split on newlines."""

import logging
from typing import BinaryIO

from logwatcher.cursor import Cursor
from logwatcher.events import Line

logger = logging.getLogger(__name__)

LINE_TERMINATOR = b"\n"
CHUNK_SIZE = 64 * 1024


class LineReader:
    """Turns newly appended bytes into ``Line`` events.

    Only complete lines are emitted; whatever follows the last terminator
    stays in ``cursor.residual`` until a later read completes it. Decoding
    is lossy (``errors="replace"``) so binary garbage never stalls the loop.

    ``read_limit`` caps the bytes consumed by one call; ``more_pending`` is
    set when a call stopped at the cap rather than at EOF.
    """

    def __init__(self, encoding: str = "utf-8", read_limit: int | None = None):
        self._encoding = encoding
        self._read_limit = read_limit
        self.more_pending = False

    def read(self, handle: BinaryIO, cursor: Cursor) -> list[Line]:
        """Read from ``cursor.offset`` until EOF or the read limit. Raises OSError."""
        return self._read(handle, cursor, self._read_limit)

    def drain(self, handle: BinaryIO, cursor: Cursor) -> list[Line]:
        """Read everything left up to EOF, ignoring the read limit."""
        return self._read(handle, cursor, None)

    def _read(self, handle: BinaryIO, cursor: Cursor, limit: int | None) -> list[Line]:
        handle.seek(cursor.offset)
        self.more_pending = False
        lines: list[Line] = []
        total = 0
        while True:
            size = CHUNK_SIZE if limit is None else min(CHUNK_SIZE, limit - total)
            data = handle.read(size)
            if not data:
                break
            total += len(data)
            cursor.advance(len(data))
            lines.extend(self.feed(cursor, data))
            if limit is not None and total >= limit:
                self.more_pending = True
                break
        if total:
            logger.debug("Read %d bytes, offset now %d", total, cursor.offset)
        return lines

    def feed(self, cursor: Cursor, data: bytes) -> list[Line]:
        """Split ``data`` (prefixed by the residual) into complete lines."""
        *complete, cursor.residual = (cursor.residual + data).split(LINE_TERMINATOR)
        return [Line(self.decode(segment)) for segment in complete]

    def decode(self, segment: bytes) -> str:
        # CRLF terminated lines lose the \r too
        if segment.endswith(b"\r"):
            segment = segment[:-1]
        return segment.decode(self._encoding, errors="replace")
