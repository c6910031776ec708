# rawed/core/LineBuffer.py
"""rawed.core.LineBuffer
=======================

The document model of the editor: an ordered, growable sequence of lines.

Every line is a `Line`, an explicit byte span that carries its own length.
Nothing in the buffer relies on a terminator byte; the cached `size` of a
line is kept equal to the length of its content by every mutation.

Invariants:
    - The buffer always holds at least one line. An empty document is one
      empty line, never zero lines.
    - For every line, `line.size == len(line.chars)`.
    - Lines are owned by the buffer; callers receive copies via
      `line_bytes()` / `as_bytes_list()`.

Mutating operations clamp columns but do not validate rows beyond that;
callers pass coordinates already checked against the `View`.
"""

import logging
from typing import Iterable, Iterator


logger = logging.getLogger("rawed.buffer")


class Line:
    """A single line: a byte span with its length cached separately."""

    __slots__ = ("chars", "size")

    def __init__(self, data: bytes = b"") -> None:
        self.chars: bytearray = bytearray(data)
        self.size: int = len(self.chars)

    @classmethod
    def from_bytes(cls, data: bytes) -> "Line":
        return cls(data)

    def __len__(self) -> int:
        return self.size

    def __bytes__(self) -> bytes:
        return bytes(self.chars[: self.size])

    def __repr__(self) -> str:
        return f"Line({bytes(self)!r})"


class LineBuffer:
    """Class LineBuffer
    =====================
    Ordered collection of `Line` objects with insert/delete/split/join
    operations and a dirty flag.

    Backing storage is a plain list; `capacity` tracks the reserved slot
    count and doubles whenever an insertion would overflow it.

    Attributes:
        capacity (int): Reserved line slots, doubled on growth.
        dirty (bool): Set by content mutations, cleared by `mark_clean()`.
    """

    DEFAULT_CAPACITY = 64

    def __init__(self, initial_capacity: int = DEFAULT_CAPACITY) -> None:
        self.capacity: int = max(1, initial_capacity)
        self._lines: list[Line] = [Line()]
        self.dirty: bool = False

    # ---------------------- Queries ----------------------
    @property
    def count(self) -> int:
        return len(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def line(self, row: int) -> Line:
        return self._lines[row]

    def length(self, row: int) -> int:
        """Cached length of line `row`, O(1)."""
        return self._lines[row].size

    def line_bytes(self, row: int) -> bytes:
        return bytes(self._lines[row])

    def lines(self) -> Iterator[Line]:
        return iter(self._lines)

    def as_bytes_list(self) -> list[bytes]:
        return [bytes(line) for line in self._lines]

    # ---------------------- Growth ----------------------
    def _ensure_capacity(self, need: int) -> None:
        if need <= self.capacity:
            return
        old = self.capacity
        while self.capacity < need:
            self.capacity *= 2
        logger.debug("LineBuffer capacity grown %d -> %d", old, self.capacity)

    # ---------------------- Mutations ----------------------
    def insert_line(self, at: int, data: bytes = b"") -> bool:
        """Inserts a new line at `at` (0 <= at <= count).

        Out-of-range positions are ignored. Returns True if a line was added.
        Does not mark the buffer dirty.
        """
        if at < 0 or at > self.count:
            logger.debug("insert_line: position %d out of range (count=%d)", at, self.count)
            return False
        self._ensure_capacity(self.count + 1)
        self._lines.insert(at, Line(data))
        return True

    def append_empty_line(self) -> None:
        self.insert_line(self.count, b"")

    def insert_char(self, row: int, col: int, byte: int) -> None:
        """Inserts one byte into line `row` at the clamped column `col`."""
        line = self._lines[row]
        col = min(max(col, 0), line.size)
        line.chars.insert(col, byte)
        line.size += 1
        self.dirty = True

    def delete_char(self, row: int, col: int) -> None:
        """Deletes the byte just before `col` (backspace semantics)."""
        line = self._lines[row]
        if col <= 0 or col > line.size:
            return
        del line.chars[col - 1]
        line.size -= 1
        self.dirty = True

    def split_line(self, row: int, col: int) -> None:
        """Moves bytes from `col` to the end of `row` onto a new line below it."""
        line = self._lines[row]
        col = min(max(col, 0), line.size)
        tail = bytes(line.chars[col:])
        self.insert_line(row + 1, tail)
        del line.chars[col:]
        line.size = col
        self.dirty = True

    def join_with_previous(self, row: int) -> None:
        """Appends line `row` onto line `row - 1` and removes line `row`."""
        if row <= 0 or row >= self.count:
            return
        prev = self._lines[row - 1]
        current = self._lines.pop(row)
        prev.chars.extend(current.chars)
        prev.size += current.size
        self.dirty = True

    def replace_all(self, lines: Iterable[bytes]) -> None:
        """Replaces the whole content.

        The first line overwrites the buffer's initial line, the rest are
        appended. An empty iterable leaves a single empty line.
        """
        self._lines = [Line()]
        first = True
        for data in lines:
            if first:
                self._lines[0] = Line(data)
                first = False
            else:
                self.insert_line(self.count, data)

    def mark_clean(self) -> None:
        self.dirty = False

    def check_invariants(self) -> None:
        assert self.count >= 1, "buffer must hold at least one line"
        for idx, line in enumerate(self._lines):
            assert line.size == len(line.chars), f"cached length mismatch on line {idx}"
