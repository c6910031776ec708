# rawed/core/FileIO.py
"""rawed.core.FileIO
===================

Loading a file into a `LineBuffer` and saving it back atomically.

Load:
    The file is read in binary mode and split into physical lines; trailing
    CR/LF bytes are stripped from each line. A missing file is not an error:
    the buffer is left as it is and the caller keeps the requested name, so
    opening doubles as creating. The encoding is detected with `chardet` for
    information only; content stays raw bytes.

Save:
    Every line plus a single LF is written to ``<name>.tmp`` next to the
    target, the data is fsync'ed, the file closed, and only then renamed over
    the target. Any failure removes the temporary file and leaves both the
    target and the buffer's dirty flag untouched.
"""

import logging
import os
from typing import NamedTuple, Optional

import chardet

from rawed.core.LineBuffer import LineBuffer


logger = logging.getLogger("rawed.fileio")

TMP_SUFFIX = ".tmp"
CHARDET_SAMPLE_SIZE = 1024 * 20


class SaveError(OSError):
    """Recoverable save failure; the target file was not modified."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(reason)
        self.path = path
        self.reason = reason

    def __str__(self) -> str:
        return self.reason


class LoadResult(NamedTuple):
    existed: bool
    line_count: int


def split_lines(data: bytes) -> list[bytes]:
    """Splits raw file content into lines without their CR/LF terminators."""
    lines = []
    for raw in data.split(b"\n"):
        lines.append(raw.rstrip(b"\r\n"))
    # A terminating newline does not start another line.
    if data.endswith(b"\n"):
        lines.pop()
    return lines


def detect_encoding(data: bytes) -> Optional[str]:
    if not data:
        return None
    result = chardet.detect(data[:CHARDET_SAMPLE_SIZE])
    encoding = result.get("encoding")
    logger.debug("chardet: %s (confidence %.2f)", encoding, result.get("confidence") or 0.0)
    return encoding


def load(path: str, buffer: LineBuffer) -> LoadResult:
    """Replaces the buffer's content with the file at `path`.

    Returns `LoadResult(existed=False, ...)` without touching the buffer when
    the file does not exist. Other OS errors (permissions, directories)
    propagate to the caller.
    """
    try:
        with open(path, "rb") as f:
            data = f.read()
    except FileNotFoundError:
        logger.info("'%s' does not exist yet; starting with an empty buffer.", path)
        return LoadResult(False, buffer.count)

    encoding = detect_encoding(data)
    buffer.replace_all(split_lines(data))
    buffer.mark_clean()
    logger.info("Opened %s (%d lines, enc: %s)", path, buffer.count, encoding or "n/a")
    return LoadResult(True, buffer.count)


def tmp_path_for(path: str) -> str:
    return path + TMP_SUFFIX


def save_atomic(path: str, buffer: LineBuffer) -> int:
    """Writes the buffer to `path` via ``<path>.tmp``; returns bytes written.

    Raises:
        SaveError: if opening, writing, syncing, closing or renaming failed.
    """
    tmpname = tmp_path_for(path)
    written = 0
    try:
        fd = os.open(tmpname, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o644)
    except OSError as e:
        logger.warning("Save of '%s' failed opening temp file: %s", path, e)
        raise SaveError(path, e.strerror or str(e)) from e

    try:
        try:
            for line in buffer.lines():
                chunk = bytes(line) + b"\n"
                view = memoryview(chunk)
                while view:
                    n = os.write(fd, view)
                    view = view[n:]
                written += len(chunk)
            os.fsync(fd)
        finally:
            os.close(fd)
        os.replace(tmpname, path)
    except OSError as e:
        logger.warning("Save of '%s' failed: %s", path, e)
        _remove_quietly(tmpname)
        raise SaveError(path, e.strerror or str(e)) from e

    buffer.mark_clean()
    logger.info("Saved %d bytes to '%s'", written, path)
    return written


def _remove_quietly(path: str) -> None:
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("Could not remove temporary file '%s': %s", path, e)
