# tex/core/RowStore.py
"""
tex.core.RowStore
=================

The document buffer: an ordered list of `Row` objects, one per line.

Every mutation of a row's raw bytes immediately regenerates its render form,
so `chars` and `render` are never observed out of step. Every mutating
operation bumps the `modified` counter, which the session controller reads as
its dirty flag and resets after a load or a successful save.
"""

import logging
from typing import Iterator, List

from tex.core.Coordinates import render_row

logger = logging.getLogger("tex")


class Row:
    """
    One line of text without its terminator.

    Attributes:
        chars (bytearray): Raw bytes of the line.
        render (bytes): `chars` with tabs expanded, as drawn on screen.
    """

    __slots__ = ("chars", "render")

    def __init__(self, chars: bytes = b"") -> None:
        self.chars = bytearray(chars)
        self.render = b""
        self.update()

    @property
    def size(self) -> int:
        return len(self.chars)

    @property
    def ren_sz(self) -> int:
        return len(self.render)

    def update(self) -> None:
        """Regenerates the render form from `chars`."""
        self.render = render_row(bytes(self.chars))

    def __repr__(self) -> str:
        return f"Row({bytes(self.chars)!r})"


class RowStore:
    """
    Class RowStore
    ==============
    Ordered, index-addressable collection of rows.

    Out-of-range indices are never an error: row positions are clamped on
    insert and ignored on delete, and column positions are clamped to the row.

    Attributes:
        rows (List[Row]): Rows in document order.
        modified (int): Count of mutations since the last load or save.
    """

    def __init__(self) -> None:
        self.rows: List[Row] = []
        self.modified = 0

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self.rows)

    def __getitem__(self, index: int) -> Row:
        return self.rows[index]

    @property
    def dirty(self) -> bool:
        return self.modified != 0

    def lines(self) -> List[bytes]:
        """Returns a snapshot of every row's raw bytes."""
        return [bytes(row.chars) for row in self.rows]

    def load(self, lines: List[bytes]) -> None:
        """Replaces the whole document with `lines` and clears `modified`."""
        self.rows = [Row(line) for line in lines]
        self.modified = 0
        logger.debug(f"RowStore: loaded {len(self.rows)} rows.")

    # --- Row operations ---

    def insert_row(self, at: int, chars: bytes = b"") -> None:
        at = max(0, min(at, len(self.rows)))
        self.rows.insert(at, Row(chars))
        self.modified += 1

    def delete_row(self, at: int) -> None:
        if not 0 <= at < len(self.rows):
            return
        del self.rows[at]
        self.modified += 1

    # --- Character operations ---

    def insert_char(self, row: int, col: int, byte: int) -> None:
        """Inserts one byte at `col` (clamped to `[0, size]`) of row `row`."""
        target = self.rows[row]
        col = max(0, min(col, target.size))
        target.chars.insert(col, byte)
        target.update()
        self.modified += 1

    def delete_char(self, row: int, col: int) -> None:
        """Removes the byte at `col` of row `row`; no-op when `col` is out of range."""
        target = self.rows[row]
        if not 0 <= col < target.size:
            return
        del target.chars[col]
        target.update()
        self.modified += 1

    def append_bytes(self, row: int, data: bytes) -> None:
        """Concatenates `data` onto the end of row `row`."""
        target = self.rows[row]
        target.chars.extend(data)
        target.update()
        self.modified += 1

    def split_at(self, row: int, col: int) -> None:
        """
        Splits row `row` at `col`: the tail becomes a new row directly below,
        the source row keeps the head.
        """
        target = self.rows[row]
        col = max(0, min(col, target.size))
        tail = bytes(target.chars[col:])
        self.insert_row(row + 1, tail)
        del target.chars[col:]
        target.update()
