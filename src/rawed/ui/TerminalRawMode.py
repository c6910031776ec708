# src/rawed/ui/TerminalRawMode.py
from __future__ import annotations

import errno
import logging
import os
import sys
from typing import Any, Optional

if sys.platform != "win32":
    import termios


class TerminalError(OSError):
    """Fatal terminal failure: attributes could not be read/set, or a read failed."""


class TerminalRawMode:
    """
    Put the controlling terminal into raw mode and give byte-level access to it:

    - no line buffering, no echo, no signal keys (Ctrl+C/Ctrl+Z reach us as bytes),
      no output post-processing (we emit "\\r\\n" ourselves), 8-bit chars.
    - VMIN=0 / VTIME=<read_timeout_ds>: a read returns after a short bounded wait
      even when nothing was typed, so the main loop keeps polling between keys.

    Always pair `enter()` with `exit()` (try/finally, or use it as a context manager).
    """

    def __init__(self, fd_in: Optional[int] = None, fd_out: Optional[int] = None, read_timeout_ds: int = 1) -> None:
        self.fd_in: int = sys.stdin.fileno() if fd_in is None else fd_in
        self.fd_out: int = sys.stdout.fileno() if fd_out is None else fd_out
        self.read_timeout_ds: int = max(0, min(255, read_timeout_ds))
        self._entered: bool = False
        self._orig_attrs: Optional[list[Any]] = None

    def __enter__(self) -> "TerminalRawMode":
        self.enter()
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:
        self.exit()

    @property
    def entered(self) -> bool:
        return self._entered

    def enter(self) -> None:
        try:
            self._orig_attrs = termios.tcgetattr(self.fd_in)
        except (termios.error, OSError) as e:
            raise TerminalError(f"tcgetattr: {e}") from e

        raw = termios.tcgetattr(self.fd_in)
        raw[0] &= ~(termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON)
        raw[1] &= ~termios.OPOST
        raw[2] |= termios.CS8
        raw[3] &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)
        raw[6][termios.VMIN] = 0
        raw[6][termios.VTIME] = self.read_timeout_ds

        try:
            termios.tcsetattr(self.fd_in, termios.TCSAFLUSH, raw)
        except (termios.error, OSError) as e:
            raise TerminalError(f"tcsetattr: {e}") from e

        self._entered = True
        logging.debug("TerminalRawMode: entered (VTIME=%d ds).", self.read_timeout_ds)

    def exit(self) -> None:
        if not self._entered:
            return
        self._entered = False
        try:
            termios.tcsetattr(self.fd_in, termios.TCSAFLUSH, self._orig_attrs)
        except (termios.error, OSError) as e:
            # Nothing else can be done from here; the caller is already shutting down.
            logging.error("TerminalRawMode: could not restore terminal attributes: %r", e)
            return
        logging.debug("TerminalRawMode: exited (restored terminal attributes).")

    # ── I/O ───────────────────────────────────────────────────────────────────

    def read_byte(self) -> Optional[int]:
        """One bounded-wait read. None means the wait elapsed with no input."""
        try:
            data = os.read(self.fd_in, 1)
        except OSError as e:
            if e.errno in (errno.EAGAIN, errno.EINTR):
                return None
            raise TerminalError(f"read: {e}") from e
        if not data:
            return None
        return data[0]

    def write(self, data: bytes) -> None:
        view = memoryview(data)
        while view:
            try:
                written = os.write(self.fd_out, view)
            except InterruptedError:
                continue
            view = view[written:]

    def get_window_size(self) -> Optional[tuple[int, int]]:
        """(rows, cols) of the terminal, or None if it cannot be determined."""
        try:
            size = os.get_terminal_size(self.fd_out)
        except OSError as e:
            logging.debug("get_window_size failed: %r", e)
            return None
        if size.lines == 0 or size.columns == 0:
            return None
        return size.lines, size.columns
