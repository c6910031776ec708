# rawed/ui/KeyDecoder.py
"""KeyDecoder.py
==================
Description:
-----------------------
Turns the raw byte stream coming from the terminal into logical key events.

Each call produces exactly one `KeyEvent`. A byte other than ESC (0x1B) maps
directly to a printable, control, Enter or Backspace event. An ESC starts a
tentative escape sequence: up to `max_sequence` further bytes are collected,
stopping early on a final byte (`A`-`Z` or `~`) or as soon as no byte arrives
within the bounded wait. Sequences that arrive split across several reads
(slow links, WSL) are therefore still assembled.

Recognised sequences (leading ESC omitted):
    [A [B [C [D          Up / Down / Right / Left
    [H [1~ [7~           Home
    [F [4~ [8~           End
    [3~                  Delete
    [5~ [6~              Page Up / Page Down
    OA OB OC OD OH OF    same as the bracket forms

A lone ESC, or any unknown or incomplete sequence, becomes an ESCAPE event.
Malformed input never raises.

Delete policy: Delete is reported as its own `KeyKind.DELETE`; the dispatcher
binds it to forward deletion, separate from Backspace.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from rawed.utils.logging_config import KEY_LOGGER


ESC = 0x1B
DEL = 0x7F
BS = 0x08
CR = 0x0D
LF = 0x0A


class KeyKind(enum.Enum):
    CHAR = "char"
    CTRL = "ctrl"
    ESCAPE = "escape"
    ENTER = "enter"
    BACKSPACE = "backspace"
    DELETE = "delete"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    HOME = "home"
    END = "end"
    PAGE_UP = "pageup"
    PAGE_DOWN = "pagedown"


@dataclass(frozen=True)
class KeyEvent:
    """One logical key. `byte` is set for CHAR, CTRL, ENTER and BACKSPACE."""

    kind: KeyKind
    byte: Optional[int] = None

    @classmethod
    def ctrl(cls, letter: str) -> "KeyEvent":
        """Event produced by Ctrl+<letter>, e.g. ``KeyEvent.ctrl("q")``."""
        return cls(KeyKind.CTRL, ord(letter) & 0x1F)

    @classmethod
    def char(cls, ch: str) -> "KeyEvent":
        return cls(KeyKind.CHAR, ord(ch))

    def __str__(self) -> str:
        if self.kind is KeyKind.CHAR and self.byte is not None:
            return repr(chr(self.byte))
        if self.kind is KeyKind.CTRL and self.byte is not None:
            return f"ctrl+{chr(self.byte + 0x60)}" if 1 <= self.byte <= 26 else f"ctrl(0x{self.byte:02x})"
        return self.kind.value


# Normalized escape sequences. Keys do NOT include the leading ESC.
ESCAPE_SEQUENCE_MAP: dict[bytes, KeyKind] = {
    b"[A": KeyKind.UP, b"[B": KeyKind.DOWN, b"[C": KeyKind.RIGHT, b"[D": KeyKind.LEFT,
    b"OA": KeyKind.UP, b"OB": KeyKind.DOWN, b"OC": KeyKind.RIGHT, b"OD": KeyKind.LEFT,
    b"[H": KeyKind.HOME, b"[F": KeyKind.END, b"OH": KeyKind.HOME, b"OF": KeyKind.END,
}

# ESC [ <n> ~
TILDE_SEQUENCE_MAP: dict[int, KeyKind] = {
    1: KeyKind.HOME, 7: KeyKind.HOME,
    4: KeyKind.END, 8: KeyKind.END,
    3: KeyKind.DELETE,
    5: KeyKind.PAGE_UP, 6: KeyKind.PAGE_DOWN,
}


def classify_byte(byte: int) -> KeyEvent:
    """Maps a single non-ESC byte to its event."""
    if byte in (CR, LF):
        return KeyEvent(KeyKind.ENTER, byte)
    if byte in (DEL, BS):
        return KeyEvent(KeyKind.BACKSPACE, byte)
    if 0x20 <= byte < 0x7F:
        return KeyEvent(KeyKind.CHAR, byte)
    return KeyEvent(KeyKind.CTRL, byte)


def decode_sequence(seq: bytes) -> KeyKind:
    """Maps the bytes following an ESC to a key kind, ESCAPE if unrecognised."""
    mapped = ESCAPE_SEQUENCE_MAP.get(seq)
    if mapped is not None:
        return mapped
    if len(seq) >= 3 and seq[:1] == b"[" and seq[-1:] == b"~" and seq[1:2].isdigit():
        digits = seq[1:-1]
        if digits.isdigit():
            return TILDE_SEQUENCE_MAP.get(int(digits), KeyKind.ESCAPE)
    return KeyKind.ESCAPE


class KeyDecoder:
    """Reads bytes through `read_byte` and assembles `KeyEvent`s.

    Args:
        read_byte: Callable performing one bounded-wait read. Returns the byte
            value, or None if the wait elapsed without input.
        max_sequence: Maximum number of bytes collected after an ESC.
        idle: Optional callable invoked after every empty wait while
            `read_key()` blocks for a key.
    """

    MAX_SEQUENCE = 16

    def __init__(
        self,
        read_byte: Callable[[], Optional[int]],
        max_sequence: int = MAX_SEQUENCE,
        idle: Optional[Callable[[], None]] = None,
    ) -> None:
        self._read_byte = read_byte
        self.max_sequence = max_sequence
        self.idle = idle

    def read_key(self) -> KeyEvent:
        """Blocks, one bounded wait at a time, until a key is decoded."""
        while True:
            event = self.poll_key()
            if event is not None:
                return event
            if self.idle is not None:
                self.idle()

    def poll_key(self) -> Optional[KeyEvent]:
        """Decodes one key if a byte arrives within a single bounded wait."""
        first = self._read_byte()
        if first is None:
            return None
        if first != ESC:
            event = classify_byte(first)
        else:
            event = self._read_escape()
        KEY_LOGGER.debug("key %s (first byte 0x%02x)", event, first)
        return event

    def _read_escape(self) -> KeyEvent:
        seq = bytearray()
        while len(seq) < self.max_sequence:
            nxt = self._read_byte()
            if nxt is None:
                break
            seq.append(nxt)
            # 'A'..'Z' or '~' ends a sequence; the introducer itself ('O') does not.
            if len(seq) > 1 and (0x41 <= nxt <= 0x5A or nxt == 0x7E):
                break

        if not seq:
            return KeyEvent(KeyKind.ESCAPE)

        kind = decode_sequence(bytes(seq))
        if kind is KeyKind.ESCAPE:
            logging.debug("KeyDecoder: unknown escape sequence ESC + %r", bytes(seq))
        return KeyEvent(kind)
