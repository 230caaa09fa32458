# tex/core/Viewport.py
"""
tex.core.Viewport
=================

Scroll offsets of the visible window over the document.
"""


class Viewport:
    """
    Top-left corner of the visible region and the size of the text area.

    `disp_rows` excludes the two lines reserved for the status and message bars.
    After `scroll()` the cursor always lies inside the visible rectangle:
    ``off_row <= cur_y < off_row + disp_rows`` and
    ``off_col <= ren_x < off_col + disp_cols``.
    """

    def __init__(self, disp_rows: int, disp_cols: int) -> None:
        self.disp_rows = max(1, disp_rows)
        self.disp_cols = max(1, disp_cols)
        self.off_row = 0
        self.off_col = 0

    def scroll(self, cur_y: int, ren_x: int) -> None:
        if cur_y < self.off_row:
            self.off_row = cur_y
        if cur_y >= self.off_row + self.disp_rows:
            self.off_row = cur_y - self.disp_rows + 1
        if ren_x < self.off_col:
            self.off_col = ren_x
        if ren_x >= self.off_col + self.disp_cols:
            self.off_col = ren_x - self.disp_cols + 1

    def __repr__(self) -> str:
        return (
            f"Viewport(off_row={self.off_row}, off_col={self.off_col}, "
            f"disp_rows={self.disp_rows}, disp_cols={self.disp_cols})"
        )
