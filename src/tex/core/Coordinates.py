# tex/core/Coordinates.py
"""
tex.core.Coordinates
====================

Mapping between raw character columns and render columns.

A row is stored as raw bytes; tabs are expanded to the next multiple of
`TAB_STOP` when the row is drawn. The cursor lives in raw columns, the
viewport and terminal cursor in render columns.
"""

TAB_STOP = 8
TAB = 0x09


def render_row(chars: bytes) -> bytes:
    """Returns `chars` with every tab expanded to spaces up to the next tab stop."""
    out = bytearray()
    for byte in chars:
        if byte == TAB:
            out.append(0x20)
            while len(out) % TAB_STOP != 0:
                out.append(0x20)
        else:
            out.append(byte)
    return bytes(out)


def to_render_column(chars: bytes, cur_x: int) -> int:
    """
    Converts raw column `cur_x` of `chars` to a render column.

    Only the first `cur_x` bytes are walked; `cur_x` past the end of the row
    is treated as the end of the row.
    """
    ren_x = 0
    for byte in chars[:cur_x]:
        if byte == TAB:
            ren_x += (TAB_STOP - 1) - (ren_x % TAB_STOP)
        ren_x += 1
    return ren_x
