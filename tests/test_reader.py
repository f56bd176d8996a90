"""Tests for the incremental line reader and cursor."""

import io

from logwatcher.cursor import Cursor
from logwatcher.events import Line
from logwatcher.reader import LineReader


class TestCursor:
    def test_advance(self):
        cursor = Cursor(offset=10)
        cursor.advance(5)
        assert cursor.offset == 15

    def test_reset_clears_residual(self):
        cursor = Cursor(offset=7, residual=b"abc")
        cursor.reset()
        assert cursor.offset == 0
        assert cursor.residual == b""

    def test_reset_to_offset(self):
        cursor = Cursor(offset=7, residual=b"abc")
        cursor.reset(42)
        assert cursor.offset == 42
        assert cursor.residual == b""


class TestFeed:
    def test_complete_lines(self):
        cursor = Cursor()
        lines = LineReader().feed(cursor, b"one\ntwo\n")
        assert lines == [Line("one"), Line("two")]
        assert cursor.residual == b""

    def test_partial_line_is_held(self):
        cursor = Cursor()
        reader = LineReader()
        assert reader.feed(cursor, b"b") == []
        assert cursor.residual == b"b"
        assert reader.feed(cursor, b"c\n") == [Line("bc")]
        assert cursor.residual == b""

    def test_residual_never_holds_terminator(self):
        cursor = Cursor()
        LineReader().feed(cursor, b"a\nb\nc")
        assert b"\n" not in cursor.residual
        assert cursor.residual == b"c"

    def test_empty_lines_are_kept(self):
        cursor = Cursor()
        assert LineReader().feed(cursor, b"\n\nx\n") == [Line(""), Line(""), Line("x")]

    def test_crlf_stripped(self):
        cursor = Cursor()
        assert LineReader().feed(cursor, b"win\r\n") == [Line("win")]

    def test_invalid_bytes_replaced(self):
        cursor = Cursor()
        assert LineReader().feed(cursor, b"caf\xff\n") == [Line("caf�")]

    def test_alternate_encoding(self):
        cursor = Cursor()
        assert LineReader("latin-1").feed(cursor, b"caf\xe9\n") == [Line("café")]

    def test_multibyte_char_split_across_reads(self):
        cursor = Cursor()
        reader = LineReader()
        data = "é\n".encode("utf-8")
        assert reader.feed(cursor, data[:1]) == []
        assert reader.feed(cursor, data[1:]) == [Line("é")]


class TestRead:
    def test_reads_from_offset_to_eof(self):
        handle = io.BytesIO(b"old\nnew\n")
        cursor = Cursor(offset=4)
        assert LineReader().read(handle, cursor) == [Line("new")]
        assert cursor.offset == 8

    def test_eof_yields_nothing(self):
        handle = io.BytesIO(b"done\n")
        cursor = Cursor(offset=5)
        assert LineReader().read(handle, cursor) == []
        assert cursor.offset == 5

    def test_residual_not_recounted(self):
        handle = io.BytesIO(b"par")
        cursor = Cursor()
        reader = LineReader()
        reader.read(handle, cursor)
        assert cursor.offset == 3
        handle.seek(0, io.SEEK_END)
        handle.write(b"tial\n")
        assert reader.read(handle, cursor) == [Line("partial")]
        assert cursor.offset == 8


class TestReadLimit:
    def test_stops_at_limit(self):
        handle = io.BytesIO(b"aaa\nbbb\n")
        cursor = Cursor()
        reader = LineReader(read_limit=4)
        assert reader.read(handle, cursor) == [Line("aaa")]
        assert cursor.offset == 4
        assert reader.more_pending
        assert reader.read(handle, cursor) == [Line("bbb")]

    def test_short_read_is_not_pending(self):
        handle = io.BytesIO(b"ab\n")
        reader = LineReader(read_limit=100)
        reader.read(handle, Cursor())
        assert not reader.more_pending

    def test_reads_in_chunks_to_eof(self, monkeypatch):
        monkeypatch.setattr("logwatcher.reader.CHUNK_SIZE", 3)
        handle = io.BytesIO(b"hello\nworld\n")
        cursor = Cursor()
        assert LineReader().read(handle, cursor) == [Line("hello"), Line("world")]
        assert cursor.offset == 12

    def test_drain_ignores_limit(self):
        handle = io.BytesIO(b"aaa\nbbb\nc")
        cursor = Cursor()
        reader = LineReader(read_limit=2)
        assert reader.drain(handle, cursor) == [Line("aaa"), Line("bbb")]
        assert cursor.residual == b"c"
        assert not reader.more_pending
