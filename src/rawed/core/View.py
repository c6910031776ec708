# rawed/core/View.py
"""rawed.core.View
=================

Cursor position, scroll offsets and screen dimensions, plus the cursor
motions that operate on them.

`cx`/`cy` are document coordinates. `pref_cx` is the preferred column: the
horizontal position vertical motion tries to restore when it crosses lines
of different lengths. Horizontal motion, Home/End and search update it;
Up/Down/PageUp/PageDown only read it.
"""

import logging
from typing import Optional

from rawed.core.LineBuffer import LineBuffer


logger = logging.getLogger("rawed.view")

DEFAULT_ROWS = 24
DEFAULT_COLS = 80
# status bar + message line
RESERVED_ROWS = 2


class View:
    """Viewport and cursor state for a single buffer."""

    def __init__(self, screenrows: int = DEFAULT_ROWS - RESERVED_ROWS, screencols: int = DEFAULT_COLS) -> None:
        self.cx: int = 0
        self.cy: int = 0
        self.rowoff: int = 0
        self.coloff: int = 0
        self.screenrows: int = screenrows
        self.screencols: int = screencols
        self.pref_cx: int = 0

    def __repr__(self) -> str:
        return (
            f"View(cx={self.cx}, cy={self.cy}, rowoff={self.rowoff}, coloff={self.coloff}, "
            f"screen={self.screenrows}x{self.screencols}, pref_cx={self.pref_cx})"
        )

    # ---------------------- Scrolling ----------------------
    def adjust_scroll(self) -> None:
        """Moves `rowoff`/`coloff` so the cursor is inside the visible area.

        Never touches the cursor; calling it again with an unchanged cursor
        leaves the offsets as they are.
        """
        if self.cy < self.rowoff:
            self.rowoff = self.cy
        if self.cy >= self.rowoff + self.screenrows:
            self.rowoff = self.cy - self.screenrows + 1
        if self.cx < self.coloff:
            self.coloff = self.cx
        if self.cx >= self.coloff + self.screencols:
            self.coloff = self.cx - self.screencols + 1

    def update_dimensions(self, size: Optional[tuple[int, int]]) -> bool:
        """Applies a `(rows, cols)` terminal size; returns True when it changed.

        `None` (size query failed) keeps the previous dimensions.
        """
        if size is None:
            rows = self.screenrows + RESERVED_ROWS
            cols = self.screencols
        else:
            rows, cols = size
        textrows = max(1, rows - RESERVED_ROWS)
        cols = max(1, cols)
        changed = textrows != self.screenrows or cols != self.screencols
        if changed:
            logger.debug("View resized to %dx%d text area", textrows, cols)
        self.screenrows = textrows
        self.screencols = cols
        return changed

    def percent_through(self, count: int) -> int:
        if count <= 1:
            return 100
        pct = (self.cy + 1) * 100 // count
        return min(max(pct, 1), 100)

    # ---------------------- Cursor helpers ----------------------
    def clamp_to(self, buffer: LineBuffer) -> None:
        self.cy = min(max(self.cy, 0), buffer.count - 1)
        self.cx = min(max(self.cx, 0), buffer.length(self.cy))

    def move_to(self, row: int, col: int) -> None:
        self.cy = row
        self.cx = col
        self.pref_cx = col

    def _restore_preferred(self, buffer: LineBuffer) -> None:
        self.cx = min(self.pref_cx, buffer.length(self.cy))

    # ---------------------- Motions ----------------------
    def move_left(self, buffer: LineBuffer) -> None:
        if self.cx > 0:
            self.cx -= 1
        elif self.cy > 0:
            self.cy -= 1
            self.cx = buffer.length(self.cy)
        self.pref_cx = self.cx

    def move_right(self, buffer: LineBuffer) -> None:
        if self.cx < buffer.length(self.cy):
            self.cx += 1
        elif self.cy + 1 < buffer.count:
            self.cy += 1
            self.cx = 0
        self.pref_cx = self.cx

    def move_up(self, buffer: LineBuffer) -> None:
        if self.cy > 0:
            self.cy -= 1
        self._restore_preferred(buffer)

    def move_down(self, buffer: LineBuffer) -> None:
        """Moves one line down; on the last line a new empty line is appended first."""
        if self.cy + 1 >= buffer.count:
            buffer.append_empty_line()
        self.cy += 1
        self._restore_preferred(buffer)

    def move_home(self, buffer: LineBuffer) -> None:
        self.cx = 0
        self.pref_cx = 0

    def move_end(self, buffer: LineBuffer) -> None:
        self.cx = buffer.length(self.cy)
        self.pref_cx = self.cx

    def page_size(self) -> int:
        return max(1, self.screenrows - 2)

    def page_up(self, buffer: LineBuffer) -> None:
        self.cy = max(0, self.cy - self.page_size())
        self._restore_preferred(buffer)

    def page_down(self, buffer: LineBuffer) -> None:
        self.cy = min(buffer.count - 1, self.cy + self.page_size())
        self._restore_preferred(buffer)
