"""Read position and carried-over partial line for the open file."""

from dataclasses import dataclass


@dataclass
class Cursor:
    offset: int = 0
    residual: bytes = b""

    def reset(self, offset: int = 0):
        self.offset = offset
        self.residual = b""

    def advance(self, nbytes: int):
        self.offset += nbytes
