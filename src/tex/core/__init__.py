# src/tex/core/__init__.py
"""Public facade for tex.core: re-export main classes from CamelCase modules.

Keeps Java-like file names (RowStore.py, Viewport.py, ...),
but provides flat imports for convenience and stability.
"""

# Re-export classes/symbols from CamelCase modules
from .RowStore import Row, RowStore  # noqa: F401
from .Tex import Tex  # noqa: F401
from .Viewport import Viewport  # noqa: F401


__all__ = [
    "Row",
    "RowStore",
    "Tex",
    "Viewport",
]
