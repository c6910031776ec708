# tests/test_core/test_view.py
"""Unit tests for `View`: scrolling, resizing and cursor motion."""

from typing import Callable

import pytest

from rawed.core.LineBuffer import LineBuffer
from rawed.core.View import View


class TestAdjustScroll:
    def test_scrolls_down_to_cursor(self) -> None:
        v = View(screenrows=5, screencols=10)
        v.cy = 7
        v.adjust_scroll()
        assert v.rowoff == 3

    def test_scrolls_up_to_cursor(self) -> None:
        v = View(screenrows=5, screencols=10)
        v.rowoff = 10
        v.cy = 4
        v.adjust_scroll()
        assert v.rowoff == 4

    def test_horizontal_scroll(self) -> None:
        v = View(screenrows=5, screencols=10)
        v.cx = 15
        v.adjust_scroll()
        assert v.coloff == 6
        v.cx = 2
        v.adjust_scroll()
        assert v.coloff == 2

    def test_is_idempotent_and_keeps_cursor(self) -> None:
        v = View(screenrows=5, screencols=10)
        v.cy, v.cx = 12, 31
        v.adjust_scroll()
        first = (v.rowoff, v.coloff)
        v.adjust_scroll()
        assert (v.rowoff, v.coloff) == first
        assert (v.cy, v.cx) == (12, 31)
        assert v.rowoff <= v.cy < v.rowoff + v.screenrows
        assert v.coloff <= v.cx < v.coloff + v.screencols


class TestDimensions:
    def test_reserves_two_rows(self) -> None:
        v = View()
        assert v.update_dimensions((30, 100)) is True
        assert (v.screenrows, v.screencols) == (28, 100)
        assert v.update_dimensions((30, 100)) is False

    def test_tiny_terminal_keeps_one_text_row(self) -> None:
        v = View()
        v.update_dimensions((2, 10))
        assert v.screenrows == 1

    def test_failed_query_keeps_previous_size(self) -> None:
        v = View()
        v.update_dimensions((40, 120))
        assert v.update_dimensions(None) is False
        assert (v.screenrows, v.screencols) == (38, 120)

    def test_initial_fallback_is_24x80(self) -> None:
        v = View()
        v.update_dimensions(None)
        assert (v.screenrows, v.screencols) == (22, 80)

    @pytest.mark.parametrize(
        "cy,count,expected",
        [(0, 1, 100), (0, 200, 1), (0, 4, 25), (3, 4, 100), (49, 100, 50)],
    )
    def test_percent_through(self, cy: int, count: int, expected: int) -> None:
        v = View()
        v.cy = cy
        assert v.percent_through(count) == expected


class TestMotion:
    """Cursor motions against real buffers."""

    def test_right_wraps_to_next_line(self, make_buffer: Callable[..., LineBuffer], view: View) -> None:
        buf = make_buffer([b"ab", b"c"])
        view.move_to(0, 2)
        view.move_right(buf)
        assert (view.cy, view.cx) == (1, 0)

    def test_right_at_end_of_document_stays(self, make_buffer: Callable[..., LineBuffer], view: View) -> None:
        buf = make_buffer([b"ab"])
        view.move_to(0, 2)
        view.move_right(buf)
        assert (view.cy, view.cx) == (0, 2)

    def test_left_wraps_to_previous_line_end(self, make_buffer: Callable[..., LineBuffer], view: View) -> None:
        buf = make_buffer([b"abc", b"d"])
        view.move_to(1, 0)
        view.move_left(buf)
        assert (view.cy, view.cx) == (0, 3)
        assert view.pref_cx == 3

    def test_left_at_origin_stays(self, make_buffer: Callable[..., LineBuffer], view: View) -> None:
        buf = make_buffer([b"abc"])
        view.move_left(buf)
        assert (view.cy, view.cx) == (0, 0)

    def test_vertical_motion_restores_preferred_column(self, make_buffer: Callable[..., LineBuffer], view: View) -> None:
        buf = make_buffer([b"long line here", b"ab", b"another long line"])
        view.move_to(0, 10)
        view.move_down(buf)
        assert (view.cy, view.cx) == (1, 2)
        view.move_down(buf)
        assert (view.cy, view.cx) == (2, 10)
        view.move_up(buf)
        view.move_up(buf)
        assert (view.cy, view.cx) == (0, 10)

    def test_up_at_top_clamps_column(self, make_buffer: Callable[..., LineBuffer], view: View) -> None:
        buf = make_buffer([b"abc"])
        view.move_to(0, 2)
        view.move_up(buf)
        assert (view.cy, view.cx) == (0, 2)

    def test_down_on_last_line_appends_empty_line(self, make_buffer: Callable[..., LineBuffer], view: View) -> None:
        buf = make_buffer([b"abc"])
        view.move_to(0, 3)
        view.move_down(buf)
        assert buf.count == 2
        assert (view.cy, view.cx) == (1, 0)
        assert buf.dirty is False

    def test_home_and_end(self, make_buffer: Callable[..., LineBuffer], view: View) -> None:
        buf = make_buffer([b"abcdef"])
        view.move_to(0, 3)
        view.move_end(buf)
        assert view.cx == 6 and view.pref_cx == 6
        view.move_home(buf)
        assert view.cx == 0 and view.pref_cx == 0

    def test_page_down_and_up(self, make_buffer: Callable[..., LineBuffer]) -> None:
        buf = make_buffer([b"x" * 5 for _ in range(50)])
        v = View(screenrows=10, screencols=80)
        assert v.page_size() == 8
        v.move_to(0, 4)
        v.page_down(buf)
        assert (v.cy, v.cx) == (8, 4)
        v.page_up(buf)
        assert v.cy == 0
        v.move_to(45, 0)
        v.page_down(buf)
        assert v.cy == 49

    def test_page_size_minimum_is_one(self) -> None:
        v = View(screenrows=1, screencols=80)
        assert v.page_size() == 1

    def test_page_down_clamps_preferred_column(self, make_buffer: Callable[..., LineBuffer]) -> None:
        buf = make_buffer([b"long line"] + [b""] * 20)
        v = View(screenrows=5, screencols=80)
        v.move_to(0, 7)
        v.page_down(buf)
        assert (v.cy, v.cx) == (3, 0)
        assert v.pref_cx == 7

    def test_clamp_to(self, make_buffer: Callable[..., LineBuffer], view: View) -> None:
        buf = make_buffer([b"ab"])
        view.cy, view.cx = 5, 9
        view.clamp_to(buf)
        assert (view.cy, view.cx) == (0, 2)
