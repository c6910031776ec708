# tests/test_core/test_line_buffer.py
"""Unit tests for `LineBuffer` and `Line`.
==========================================

Covers the editing primitives (insert/delete/split/join), the dirty flag,
capacity growth and the "never zero lines" invariant.
"""

from typing import Callable

import pytest

from rawed.core.LineBuffer import Line, LineBuffer


class TestLine:
    def test_line_caches_length(self) -> None:
        line = Line.from_bytes(b"hello")
        assert len(line) == 5
        assert bytes(line) == b"hello"
        assert line.size == len(line.chars)

    def test_empty_line(self) -> None:
        line = Line()
        assert len(line) == 0
        assert bytes(line) == b""


class TestLineBuffer:
    """Editing primitives on a real `LineBuffer`."""

    def test_starts_with_one_empty_line(self) -> None:
        buf = LineBuffer()
        assert buf.count == 1
        assert buf.as_bytes_list() == [b""]
        assert buf.dirty is False
        assert buf.capacity == LineBuffer.DEFAULT_CAPACITY

    def test_insert_char_clamps_column_and_marks_dirty(self) -> None:
        buf = LineBuffer()
        buf.insert_char(0, 0, ord("b"))
        buf.insert_char(0, 0, ord("a"))
        buf.insert_char(0, 99, ord("c"))
        assert buf.line_bytes(0) == b"abc"
        assert buf.length(0) == 3
        assert buf.dirty is True
        buf.check_invariants()

    def test_delete_char_removes_byte_before_column(self, make_buffer: Callable[..., LineBuffer]) -> None:
        buf = make_buffer([b"abc"])
        buf.delete_char(0, 2)
        assert buf.line_bytes(0) == b"ac"
        assert buf.dirty is True

    @pytest.mark.parametrize("col", [0, -1, 4])
    def test_delete_char_out_of_range_is_noop(self, make_buffer: Callable[..., LineBuffer], col: int) -> None:
        buf = make_buffer([b"abc"])
        buf.delete_char(0, col)
        assert buf.line_bytes(0) == b"abc"
        assert buf.dirty is False

    def test_split_line_moves_tail_to_new_line(self, make_buffer: Callable[..., LineBuffer]) -> None:
        buf = make_buffer([b"hello world", b"next"])
        buf.split_line(0, 5)
        assert buf.as_bytes_list() == [b"hello", b" world", b"next"]
        assert buf.dirty is True
        buf.check_invariants()

    def test_split_at_end_creates_empty_line(self, make_buffer: Callable[..., LineBuffer]) -> None:
        buf = make_buffer([b"abc"])
        buf.split_line(0, 3)
        assert buf.as_bytes_list() == [b"abc", b""]

    def test_join_with_previous(self, make_buffer: Callable[..., LineBuffer]) -> None:
        buf = make_buffer([b"ab", b"cd", b"ef"])
        buf.join_with_previous(1)
        assert buf.as_bytes_list() == [b"abcd", b"ef"]
        assert buf.length(0) == 4
        assert buf.dirty is True

    @pytest.mark.parametrize("row", [0, -1, 2])
    def test_join_with_previous_out_of_range(self, make_buffer: Callable[..., LineBuffer], row: int) -> None:
        buf = make_buffer([b"ab", b"cd"])
        buf.join_with_previous(row)
        assert buf.as_bytes_list() == [b"ab", b"cd"]
        assert buf.dirty is False

    def test_split_then_join_restores_content(self, make_buffer: Callable[..., LineBuffer]) -> None:
        buf = make_buffer([b"abcdef"])
        buf.split_line(0, 2)
        buf.join_with_previous(1)
        assert buf.as_bytes_list() == [b"abcdef"]

    def test_insert_line_bounds(self) -> None:
        buf = LineBuffer()
        assert buf.insert_line(1, b"tail") is True
        assert buf.insert_line(0, b"head") is True
        assert buf.insert_line(5, b"nope") is False
        assert buf.insert_line(-1, b"nope") is False
        assert buf.as_bytes_list() == [b"head", b"", b"tail"]

    def test_insert_line_does_not_mark_dirty(self) -> None:
        buf = LineBuffer()
        buf.append_empty_line()
        assert buf.count == 2
        assert buf.dirty is False

    def test_capacity_doubles(self) -> None:
        buf = LineBuffer(initial_capacity=2)
        buf.append_empty_line()
        assert buf.capacity == 2
        buf.append_empty_line()
        assert buf.capacity == 4
        for _ in range(3):
            buf.append_empty_line()
        assert buf.count == 6
        assert buf.capacity == 8

    def test_replace_all_never_leaves_zero_lines(self) -> None:
        buf = LineBuffer()
        buf.replace_all([])
        assert buf.as_bytes_list() == [b""]
        buf.replace_all([b"one", b"two"])
        assert buf.as_bytes_list() == [b"one", b"two"]

    def test_mark_clean(self) -> None:
        buf = LineBuffer()
        buf.insert_char(0, 0, ord("x"))
        buf.mark_clean()
        assert buf.dirty is False

    def test_check_invariants_detects_mismatch(self) -> None:
        buf = LineBuffer()
        buf.line(0).size = 3
        with pytest.raises(AssertionError):
            buf.check_invariants()

    def test_line_bytes_returns_copy(self, make_buffer: Callable[..., LineBuffer]) -> None:
        buf = make_buffer([b"abc"])
        data = buf.line_bytes(0)
        buf.insert_char(0, 0, ord("z"))
        assert data == b"abc"
