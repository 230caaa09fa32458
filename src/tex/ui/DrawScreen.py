# tex/ui/DrawScreen.py
"""DrawScreen.py
========================
DrawScreen builds one complete terminal frame from the editor state.

It is responsible for:
- the text area (visible slice of every row's render form, or `~` filler),
- the welcome banner shown over an empty document,
- the inverse-video status bar and the transient message bar,
- placing the terminal cursor over the editing position.

A frame is assembled into a single byte buffer and handed to the terminal in
one write, so the screen never shows a half-drawn state.
"""

import logging
import os
import time
from typing import TYPE_CHECKING

from tex.utils.utils import TEX_VERSION

if TYPE_CHECKING:
    from tex.core.Tex import Tex


# VT100 control sequences used by the compositor.
HIDE_CURSOR = b"\x1b[?25l"
SHOW_CURSOR = b"\x1b[?25h"
CURSOR_HOME = b"\x1b[H"
ERASE_LINE = b"\x1b[K"
CLEAR_SCREEN = b"\x1b[2J"
INVERSE_ON = b"\x1b[7m"
INVERSE_OFF = b"\x1b[m"
NEWLINE = b"\r\n"

FILENAME_WIDTH = 20


def cursor_to(row: int, col: int) -> bytes:
    """Cursor-position sequence for the 1-based screen cell `(row, col)`."""
    return b"\x1b[%d;%dH" % (row, col)


## ================= class DrawScreen ==============================
class DrawScreen:
    """DrawScreen Class
    =========================
    Renders the editor into a byte stream of VT100 escape sequences.

    `compose()` is pure: it only reads the editor's row store, cursor,
    viewport and status message. The viewport must already have been
    scrolled for the current cursor before a frame is composed.

    Attributes:
        editor (Tex): Reference to the main editor instance.

    Methods:
        compose(): Returns the full frame as bytes.
        draw(): Composes a frame and writes it to the terminal in one call.
        _draw_rows(buf): Text area, banner and filler lines.
        _draw_status_bar(buf): File name, line count, dirty marker and position.
        _draw_message_bar(buf): The status message while it is still fresh.
    """

    def __init__(self, editor: "Tex") -> None:
        self.editor = editor

    def compose(self) -> bytes:
        buf = bytearray()
        buf += HIDE_CURSOR
        buf += CURSOR_HOME

        self._draw_rows(buf)
        self._draw_status_bar(buf)
        self._draw_message_bar(buf)

        viewport = self.editor.viewport
        buf += cursor_to(
            self.editor.cy - viewport.off_row + 1,
            self.editor.ren_x - viewport.off_col + 1,
        )
        buf += SHOW_CURSOR
        return bytes(buf)

    def draw(self) -> None:
        frame = self.compose()
        self.editor.terminal.write_raw(frame)
        logging.debug(f"DrawScreen: wrote frame of {len(frame)} bytes")

    # --- sections ---

    def _draw_rows(self, buf: bytearray) -> None:
        rows = self.editor.rows
        viewport = self.editor.viewport
        disp_cols = viewport.disp_cols

        for y in range(viewport.disp_rows):
            file_row = y + viewport.off_row
            if file_row >= len(rows):
                if len(rows) == 0 and y == viewport.disp_rows // 3:
                    buf += self._welcome_line(disp_cols)
                else:
                    buf += b"~"
            else:
                render = rows[file_row].render
                buf += render[viewport.off_col:viewport.off_col + disp_cols]
            buf += ERASE_LINE
            buf += NEWLINE

    @staticmethod
    def _welcome_line(disp_cols: int) -> bytes:
        welcome = (b"Tex editor -- version %s" % TEX_VERSION.encode("ascii"))[:disp_cols]
        padding = (disp_cols - len(welcome)) // 2
        line = bytearray()
        if padding:
            line += b"~"
            padding -= 1
        line += b" " * padding
        line += welcome
        return bytes(line)

    def _draw_status_bar(self, buf: bytearray) -> None:
        editor = self.editor
        disp_cols = editor.viewport.disp_cols
        num_rows = len(editor.rows)

        name = os.fsencode(editor.filename)[:FILENAME_WIDTH] if editor.filename else b"[No Name]"
        status = b"%s - %d lines %s" % (
            name,
            num_rows,
            b"(modified)" if editor.rows.dirty else b"",
        )
        rstatus = b"%d/%d" % (editor.cy + 1, num_rows)

        buf += INVERSE_ON
        length = min(len(status), disp_cols)
        buf += status[:length]
        while length < disp_cols:
            if disp_cols - length == len(rstatus):
                buf += rstatus
                break
            buf += b" "
            length += 1
        buf += INVERSE_OFF
        buf += NEWLINE

    def _draw_message_bar(self, buf: bytearray) -> None:
        buf += ERASE_LINE
        editor = self.editor
        message = editor.status_message
        if message and time.time() - editor.status_time < editor.message_timeout:
            buf += message.encode("utf-8", "replace")[:editor.viewport.disp_cols]
