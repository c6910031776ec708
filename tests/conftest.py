# tests/conftest.py
"""Pytest configuration with shared fixtures for the rawed editor tests.

Fixtures build real editor objects around a `StubTerminal`, so no test needs
a controlling tty, and keep logging handlers from leaking between tests.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Callable, Generator

import pytest

from rawed.core.LineBuffer import LineBuffer
from rawed.core.Rawed import Rawed
from rawed.core.View import View
from rawed.utils.utils import DEFAULT_CONFIG
from tests.stubs import StubTerminal


@pytest.fixture(autouse=True)
def restore_root_logging() -> Generator[None, None, None]:
    """Undo handler changes made by `setup_logging` inside a test."""
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    yield
    for handler in root.handlers:
        if handler not in saved_handlers:
            handler.close()
    root.handlers = saved_handlers
    root.setLevel(saved_level)


# --- Base fixtures for configuration and terminal ---
@pytest.fixture
def mock_config() -> dict[str, Any]:
    """Provide a private copy of the embedded default configuration.

    Returns:
        dict[str, Any]: Configuration safe to mutate inside a test.
    """
    return copy.deepcopy(DEFAULT_CONFIG)


@pytest.fixture
def terminal() -> StubTerminal:
    """A scripted terminal reporting a 24x80 window."""
    return StubTerminal(size=(24, 80))


# --- Buffer / view fixtures ---
@pytest.fixture
def make_buffer() -> Callable[..., LineBuffer]:
    """Factory building a clean `LineBuffer` from a list of byte strings."""

    def _make(lines: list[bytes]) -> LineBuffer:
        buf = LineBuffer()
        buf.replace_all(lines)
        buf.mark_clean()
        return buf

    return _make


@pytest.fixture
def view() -> View:
    return View(screenrows=22, screencols=80)


# --- Rawed fixtures ---
@pytest.fixture
def editor(mock_config: dict[str, Any], terminal: StubTerminal) -> Rawed:
    """Create a real `Rawed` instance driven by a `StubTerminal`.

    Args:
        mock_config: Configuration fixture.
        terminal: Stub terminal fixture.

    Returns:
        Rawed: Editor with an empty buffer named ``untitled.txt``.
    """
    ed = Rawed(mock_config, terminal)
    ed.view.update_dimensions(terminal.get_window_size())
    return ed


@pytest.fixture
def load_lines() -> Callable[[Rawed, list[bytes]], None]:
    """Replace an editor's content without marking it dirty."""

    def _load(ed: Rawed, lines: list[bytes]) -> None:
        ed.buffer.replace_all(lines)
        ed.buffer.mark_clean()
        ed.view.move_to(0, 0)

    return _load
