# rawed/ui/DrawScreen.py
"""DrawScreen.py
========================
DrawScreen renders the editor into a single frame of raw VT100 escape
sequences and writes it to the terminal in one go.

It is responsible for:
- drawing the visible slice of every text row, horizontally scrolled,
- inverting the current search match,
- rendering the inverse-video status bar and the message line,
- placing the cursor and hiding it while the frame is painted.

Bytes are emitted as they are stored: one byte is one screen cell.
"""

import logging
import time
from typing import TYPE_CHECKING, Optional


if TYPE_CHECKING:
    from rawed.core.Search import Highlight
    from rawed.core.Rawed import Rawed


VERSION = "0.3"

HIDE_CURSOR = b"\x1b[?25l"
SHOW_CURSOR = b"\x1b[?25h"
CURSOR_HOME = b"\x1b[H"
CLEAR_LINE = b"\x1b[2K\r"
CLEAR_SCREEN = b"\x1b[2J"
INVERSE = b"\x1b[7m"
RESET_ATTRS = b"\x1b[m"
CRLF = b"\r\n"

FILENAME_DISPLAY_MAX = 40


## ================= class DrawScreen ==============================
class DrawScreen:
    """DrawScreen Class
    =========================
    Builds and emits the complete screen for a `Rawed` editor.

    Attributes:
        editor (Rawed): Editor whose buffer, view, search state and status
            message are rendered.

    Methods:
        render(): Returns the full frame as bytes; adjusts scroll offsets.
        draw(): Renders and writes the frame through the editor's terminal.
        clear_screen(): Writes the clear-screen sequence.
    """

    def __init__(self, editor: "Rawed") -> None:
        self.editor = editor

    # ---------------------- Public API ----------------------
    def render(self, now: Optional[float] = None) -> bytes:
        if now is None:
            now = time.time()
        editor = self.editor
        view = editor.view

        out = bytearray()
        out += HIDE_CURSOR + CURSOR_HOME
        view.adjust_scroll()

        self._draw_rows(out)
        self._draw_status_bar(out)
        self._draw_message_line(out, now)
        self._position_cursor(out)
        return bytes(out)

    def draw(self) -> None:
        frame = self.render()
        self.editor.terminal.write(frame)
        logging.debug("DrawScreen: wrote frame of %d bytes", len(frame))

    def clear_screen(self) -> None:
        self.editor.terminal.write(CLEAR_SCREEN + CURSOR_HOME)

    # ---------------------- Text area ----------------------
    def _draw_rows(self, out: bytearray) -> None:
        editor = self.editor
        view = editor.view
        buffer = editor.buffer
        highlight = editor.search.highlight

        for y in range(view.screenrows):
            filerow = view.rowoff + y
            out += CLEAR_LINE
            if filerow < buffer.count:
                hl = highlight if highlight is not None and highlight.row == filerow else None
                self._draw_line(out, buffer.line(filerow).chars, hl)
            out += CRLF

    def _draw_line(self, out: bytearray, chars: bytearray, highlight: Optional["Highlight"]) -> None:
        """Appends the visible slice of one row, splitting around a highlight span."""
        view = self.editor.view
        left = view.coloff
        maxw = view.screencols
        length = min(max(len(chars) - left, 0), maxw)
        if length == 0:
            return

        visible = chars[left:left + length]
        if highlight is None or highlight.length <= 0 or highlight.col < 0:
            out += visible
            return

        hstart = highlight.col - left
        hend = highlight.col + highlight.length - left
        if hend <= 0 or hstart >= maxw:
            out += visible
            return
        hstart = max(hstart, 0)
        hend = min(hend, length)

        if hstart > 0:
            out += visible[:hstart]
        if hend > hstart:
            out += INVERSE + visible[hstart:hend] + RESET_ATTRS
        if hend < length:
            out += visible[hend:]

    # ---------------------- Status / message ----------------------
    def status_parts(self) -> tuple[bytes, bytes]:
        """Left and right halves of the status bar, before width clamping."""
        editor = self.editor
        view = editor.view
        name = editor.filename.encode("utf-8", "surrogateescape")[:FILENAME_DISPLAY_MAX]
        left = b" " + name + b" " + (b"(modified)" if editor.buffer.dirty else b"")
        pct = view.percent_through(editor.buffer.count)
        right = f" {view.cy + 1}:{view.cx + 1} {pct:3d}% v{VERSION} ".encode("ascii")
        return left, right

    def _draw_status_bar(self, out: bytearray) -> None:
        cols = self.editor.view.screencols
        left, right = self.status_parts()

        # Narrow terminals: the position half is kept, the file name gives way.
        right = right[:cols]
        left = left[:max(0, cols - len(right))]
        pad = cols - len(left) - len(right)

        out += INVERSE + left + b" " * pad + right + RESET_ATTRS + CRLF

    def _draw_message_line(self, out: bytearray, now: float) -> None:
        editor = self.editor
        out += CLEAR_LINE
        msg = editor.status_msg
        if msg and (now - editor.status_time) < editor.status_message_seconds:
            out += msg[:editor.view.screencols]

    # ---------------------- Cursor ----------------------
    def _position_cursor(self, out: bytearray) -> None:
        view = self.editor.view
        scr_y = min(max(view.cy - view.rowoff, 0), view.screenrows - 1)
        scr_x = min(max(view.cx - view.coloff, 0), view.screencols - 1)
        out += f"\x1b[{scr_y + 1};{scr_x + 1}H".encode("ascii")
        out += SHOW_CURSOR
