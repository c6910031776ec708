# rawed/core/Search.py
"""rawed.core.Search
===================

Incremental forward substring search with wraparound and a single
highlight span.

`find()` searches from the cursor; `find_next()` resumes one byte past the
previous match. Both scan at most two rounds: from the start position to the
end of the document, then from the top of the document. Empty lines are
skipped, and only the first occurrence at or after the start column of each
candidate line is considered. A miss leaves cursor and highlight as they were.
"""

import logging
from typing import NamedTuple, Optional

from rawed.core.LineBuffer import LineBuffer
from rawed.core.View import View


logger = logging.getLogger("rawed.search")


class Highlight(NamedTuple):
    row: int
    col: int
    length: int


class SearchEngine:
    """Search state: last query, last match position and the highlight span."""

    def __init__(self) -> None:
        self.last_query: bytes = b""
        self.last_match_row: int = -1
        self.last_match_col: int = -1
        self.highlight: Optional[Highlight] = None

    def clear_highlight(self) -> None:
        self.highlight = None

    def cancel(self) -> None:
        """Prompt was dismissed: drop the highlight, keep the last query."""
        self.highlight = None

    def find(self, query: bytes, buffer: LineBuffer, view: View) -> bool:
        """Stores `query` and searches for it starting at the cursor."""
        self.last_query = bytes(query)
        return self._search(buffer, view, view.cy, view.cx)

    def find_next(self, buffer: LineBuffer, view: View) -> bool:
        """Searches for the stored query just past the previous match."""
        if not self.last_query:
            return False
        if self.last_match_row < 0:
            return self._search(buffer, view, view.cy, view.cx)
        return self._search(buffer, view, self.last_match_row, self.last_match_col + 1)

    def _search(self, buffer: LineBuffer, view: View, row: int, col: int) -> bool:
        query = self.last_query
        if not query:
            return False

        for _round in range(2):
            while row < buffer.count:
                length = buffer.length(row)
                if length:
                    start = min(max(col, 0), length)
                    found = buffer.line(row).chars.find(query, start)
                    if found != -1:
                        self.last_match_row = row
                        self.last_match_col = found
                        self.highlight = Highlight(row, found, len(query))
                        view.move_to(row, found)
                        logger.debug("match for %r at (%d,%d)", query, row, found)
                        return True
                row += 1
                col = 0
            row, col = 0, 0

        logger.debug("no match for %r", query)
        return False
