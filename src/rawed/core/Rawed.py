# rawed/core/Rawed.py
"""rawed.core.Rawed.py
============================
Rawed: main module of the rawed raw-mode terminal text editor.

This module defines the `Rawed` class, the single editor context. It owns
the line buffer, the view, the search engine, the status message and the
quit-confirmation counter, and it runs the input loop:

- read one key (a short bounded wait, never a hard block),
- dispatch it through the `KeyBinder` to one of the action methods below,
- re-query the terminal size so a resize is noticed even without input,
- redraw the whole screen when the action or a resize asked for it.

All state is mutated from this one loop; there are no background threads.
Fatal terminal errors (`TerminalError`) propagate out of `run()` and are
handled by the entry point, which restores the terminal.
"""

import logging
import time
from typing import Any, Optional, Union

from rawed.core import FileIO
from rawed.core.LineBuffer import LineBuffer
from rawed.core.Search import SearchEngine
from rawed.core.View import View
from rawed.ui.DrawScreen import DrawScreen
from rawed.ui.KeyBinder import KeyBinder
from rawed.ui.KeyDecoder import KeyDecoder, KeyKind
from rawed.utils.logging_config import logger


HELP_MESSAGE = "HELP: type | Enter | Backspace | Ctrl-S save | Ctrl-F find | Ctrl-N next | Ctrl-Q quit"
QUIT_WARNING = "Unsaved changes - press Ctrl-Q again to quit"
PROMPT_MAX = 255


## ==================== Rawed Class ====================
class Rawed:
    """Class Rawed
    =========================
    The editor context and its action methods.

    Attributes:
        config (dict): Merged configuration (see `rawed.utils.utils.DEFAULT_CONFIG`).
        terminal: Object providing `read_byte()`, `write(data)` and
            `get_window_size()`; normally a `TerminalRawMode`.
        filename (str): Target of Ctrl-S; also shown in the status bar.
        buffer (LineBuffer): Document content and dirty flag.
        view (View): Cursor, scroll offsets and screen size.
        search (SearchEngine): Last query, last match and highlight span.
        status_msg (bytes): Message shown on the bottom line.
        status_time (float): When `status_msg` was set (epoch seconds).
        quit_counter (int): Remaining confirmations needed to quit while dirty.
        running (bool): Cleared by `exit_editor()` to stop `run()`.

    Every action method returns True when the screen should be redrawn.
    """

    def __init__(self, config: dict[str, Any], terminal: Any, filename: Optional[str] = None) -> None:
        self.config: dict[str, Any] = config
        self.terminal = terminal

        editor_cfg = config.get("editor", {})
        self.filename: str = filename or editor_cfg.get("default_new_filename", "untitled.txt")
        self.status_message_seconds: float = float(editor_cfg.get("status_message_seconds", 5))
        self.quit_times: int = int(editor_cfg.get("quit_times", 1))

        self.buffer = LineBuffer()
        self.view = View()
        self.search = SearchEngine()

        self.status_msg: bytes = b""
        self.status_time: float = 0.0
        self.quit_counter: int = self.quit_times
        self.running: bool = False

        self.decoder = KeyDecoder(
            terminal.read_byte,
            max_sequence=int(editor_cfg.get("escape_sequence_max", KeyDecoder.MAX_SEQUENCE)),
            idle=self._idle_while_waiting,
        )
        self.drawer = DrawScreen(self)
        self.keybinder = KeyBinder(self)
        self.handle_input = self.keybinder.handle_input

        logging.debug("Rawed initialized for '%s'", self.filename)

    # --- Status message ---
    def _set_status_message(self, message: Union[str, bytes]) -> None:
        if isinstance(message, str):
            message = message.encode("utf-8", "replace")
        self.status_msg = bytes(message)
        self.status_time = time.time()
        logging.debug("Status message set to: %r", self.status_msg)

    @property
    def status_message(self) -> str:
        return self.status_msg.decode("utf-8", "replace")

    def reset_quit_counter(self) -> None:
        self.quit_counter = self.quit_times

    # --- File operations ---
    def open_file(self, path: str) -> bool:
        """Loads `path` into the buffer. A missing file keeps an empty buffer."""
        self.filename = path
        try:
            result = FileIO.load(path, self.buffer)
        except OSError as e:
            logger.warning("Could not open '%s': %s", path, e)
            self._set_status_message(f"Could not open: {e.strerror or e}")
            return False
        self.view.move_to(0, 0)
        self.view.rowoff = self.view.coloff = 0
        return result.existed

    def save_file(self) -> bool:
        try:
            FileIO.save_atomic(self.filename, self.buffer)
        except FileIO.SaveError as e:
            self._set_status_message(f"Save failed: {e.reason}")
            return True
        self._set_status_message(f"Saved: {self.filename}")
        return True

    def exit_editor(self) -> bool:
        """Quits, unless the buffer is dirty and a confirmation is still owed."""
        if self.buffer.dirty and self.quit_counter > 0:
            self._set_status_message(QUIT_WARNING)
            self.quit_counter -= 1
            logging.info("Quit refused: unsaved changes (%d confirmation(s) left)", self.quit_counter)
            return True

        self.running = False
        self.drawer.clear_screen()
        logger.info("Main loop stop signaled.")
        return False

    # --- Editing ---
    def insert_char(self, byte: int) -> bool:
        view = self.view
        self.buffer.insert_char(view.cy, view.cx, byte)
        view.cx += 1
        view.pref_cx = view.cx
        self.search.clear_highlight()
        return True

    def handle_enter(self) -> bool:
        view = self.view
        self.buffer.split_line(view.cy, view.cx)
        view.move_to(view.cy + 1, 0)
        self.search.clear_highlight()
        return True

    def handle_backspace(self) -> bool:
        """Deletes the byte left of the cursor, or joins the line onto the previous one."""
        view = self.view
        if view.cx > 0:
            self.buffer.delete_char(view.cy, view.cx)
            view.cx -= 1
        elif view.cy > 0:
            prev_len = self.buffer.length(view.cy - 1)
            self.buffer.join_with_previous(view.cy)
            view.cy -= 1
            view.cx = prev_len
        else:
            logging.debug("handle_backspace: At beginning of file. No action.")
        view.pref_cx = view.cx
        self.search.clear_highlight()
        return True

    def handle_delete(self) -> bool:
        """Deletes the byte under the cursor, or joins the next line onto this one."""
        view = self.view
        if view.cx < self.buffer.length(view.cy):
            self.buffer.delete_char(view.cy, view.cx + 1)
        elif view.cy + 1 < self.buffer.count:
            self.buffer.join_with_previous(view.cy + 1)
        else:
            logging.debug("handle_delete: At end of file. No action.")
        view.pref_cx = view.cx
        self.search.clear_highlight()
        return True

    # --- Motion ---
    def _motion(self, move) -> bool:
        move(self.buffer)
        self.search.clear_highlight()
        return True

    def handle_up(self) -> bool:
        return self._motion(self.view.move_up)

    def handle_down(self) -> bool:
        return self._motion(self.view.move_down)

    def handle_left(self) -> bool:
        return self._motion(self.view.move_left)

    def handle_right(self) -> bool:
        return self._motion(self.view.move_right)

    def handle_home(self) -> bool:
        return self._motion(self.view.move_home)

    def handle_end(self) -> bool:
        return self._motion(self.view.move_end)

    def handle_page_up(self) -> bool:
        return self._motion(self.view.page_up)

    def handle_page_down(self) -> bool:
        return self._motion(self.view.page_down)

    # --- Prompt & search ---
    def prompt(self, label: str) -> Optional[bytes]:
        """Reads a line on the message bar, redrawing after every keystroke.

        Returns the entered bytes, or None when the user pressed Escape.
        Enter only confirms a non-empty input.
        """
        label_bytes = label.encode("utf-8")
        out = bytearray()
        while True:
            self._set_status_message(label_bytes + bytes(out))
            self.drawer.draw()
            event = self.decoder.read_key()

            if event.kind is KeyKind.ESCAPE:
                self._set_status_message("Canceled")
                return None
            if event.kind is KeyKind.ENTER:
                if out:
                    self._set_status_message("")
                    return bytes(out)
            elif event.kind is KeyKind.BACKSPACE:
                if out:
                    del out[-1]
            elif event.kind is KeyKind.CHAR and event.byte is not None:
                if len(out) < PROMPT_MAX:
                    out.append(event.byte)

    def find_prompt(self) -> bool:
        logging.debug("find_prompt called")
        query = self.prompt("/")
        if query is None:
            self.search.cancel()
            return True

        if self.search.find(query, self.buffer, self.view):
            self._set_status_message(b"Found: " + query + b"  (Ctrl-N for next)")
        else:
            self._set_status_message(b"Not found: " + query)
        return True

    def find_next(self) -> bool:
        if not self.search.find_next(self.buffer, self.view):
            self._set_status_message(b"No more matches for: " + self.search.last_query)
        return True

    # --- Main loop ---
    def _idle_while_waiting(self) -> None:
        """Called between empty reads while a prompt waits for a key."""
        if self.view.update_dimensions(self.terminal.get_window_size()):
            self.drawer.draw()

    def run(self) -> None:
        """The main event loop of the editor.

        Runs until `exit_editor()` clears `running`. Each iteration performs
        one bounded-wait read: a decoded key is dispatched, then the window
        size is re-queried and the screen redrawn if either asked for it.
        `TerminalError` from a failed read is not caught here.
        """
        logger.info("Editor main loop started.")
        self.running = True
        self.view.update_dimensions(self.terminal.get_window_size())
        self._set_status_message(HELP_MESSAGE)
        self.drawer.draw()

        while self.running:
            redraw_needed = False
            event = self.decoder.poll_key()
            if event is not None:
                redraw_needed = self.handle_input(event)
                if not self.running:
                    break

            if self.view.update_dimensions(self.terminal.get_window_size()):
                redraw_needed = True
            if redraw_needed:
                self.drawer.draw()

        logger.info("Editor main loop finished.")
