# src/rawed/core/__init__.py
"""Public facade for rawed.core: re-export main classes from CamelCase modules.

Keeps the CamelCase file names (LineBuffer.py, View.py, ...),
but provides flat imports for convenience and stability.
"""

# Order matters: Rawed imports the modules above it.
from .LineBuffer import Line, LineBuffer  # noqa: F401
from .View import View  # noqa: F401
from .Search import Highlight, SearchEngine  # noqa: F401
from .FileIO import LoadResult, SaveError  # noqa: F401
from .Rawed import Rawed  # noqa: F401


__all__ = [
    "Line",
    "LineBuffer",
    "View",
    "Highlight",
    "SearchEngine",
    "LoadResult",
    "SaveError",
    "Rawed",
]
