# tex/core/Tex.py
"""tex.core.Tex.py
============================
Tex: the session controller of the tex terminal text editor.

The Tex class owns all mutable editor state (row store, cursor, viewport,
file name, status message and quit confirmation counter) and reacts to one
decoded key at a time:

- navigation (arrows, Home/End, Page Up/Down) with the cursor kept inside
  the document,
- editing (insert, Enter, Backspace, Delete) through the row store,
- saving, with a "Save as" prompt when the buffer has no file name yet,
- incremental plain-text search,
- quitting, with a confirmation countdown while there are unsaved changes.

Rendering is delegated to DrawScreen, key decoding and dispatch to KeyBinder,
and all terminal I/O to the terminal object handed in by the caller.
"""

import logging
import time
from typing import Any, Callable, Optional

from tex.core.Coordinates import to_render_column
from tex.core.Persistence import load_rows, serialize, write_file
from tex.core.RowStore import RowStore
from tex.core.Viewport import Viewport
from tex.ui.DrawScreen import DrawScreen
from tex.ui.KeyBinder import (
    ARROW_DOWN,
    ARROW_LEFT,
    ARROW_RIGHT,
    ARROW_UP,
    BACKSPACE,
    CTRL_H,
    DEL_KEY,
    ENTER,
    ESC,
    PAGE_UP,
    KeyBinder,
)
from tex.utils.logging_config import logger
from tex.utils.utils import get_int_setting

# Lines of the terminal reserved for the status bar and the message bar.
RESERVED_ROWS = 2
STATUS_MESSAGE_CAPACITY = 80

SAVE_AS_PROMPT = "Save as: %s (ESC to cancel)"
SEARCH_PROMPT = "Search: %s (Use ESC/Arrows/Enter)"


class Tex:
    """
    Class Tex
    =========
    Session controller for one editing session over one file.

    Attributes:
        terminal: Terminal driver (`read_byte`, `get_size`, `write_raw`).
        config (dict): Merged editor configuration.
        rows (RowStore): The document.
        cx (int): Cursor column in raw characters.
        cy (int): Cursor row; equal to ``len(rows)`` on the virtual append row.
        viewport (Viewport): Scroll offsets and text area size.
        filename (str | None): Target file, None until the first save of a new buffer.
        status_message (str): Transient message shown in the message bar.
        status_time (float): When `status_message` was set.
        quit_times (int): Quit keystrokes still needed to discard unsaved changes.
        running (bool): Main loop flag, cleared by `exit_editor`.
    """

    def __init__(self, terminal: Any, config: dict[str, Any]) -> None:
        self.terminal = terminal
        self.config = config
        self._initialize_state()
        self._initialize_components()

    # --- Initialization ---
    def _initialize_state(self) -> None:
        """Initializes all editor state attributes to their default values."""
        self.rows = RowStore()
        self.cx: int = 0
        self.cy: int = 0
        self.filename: Optional[str] = None
        self.status_message: str = ""
        self.status_time: float = 0.0
        self.message_timeout = get_int_setting(self.config, "editor", "message_timeout", 5)
        self.initial_quit_times = get_int_setting(self.config, "editor", "quit_times", 2)
        self.quit_times: int = self.initial_quit_times
        self.running: bool = False
        self._find_last_match: int = -1
        self._find_direction: int = 1

    def _initialize_components(self) -> None:
        """Sizes the viewport from the terminal and creates the drawer and key binder."""
        screen_rows, screen_cols = self.terminal.get_size()
        self.viewport = Viewport(screen_rows - RESERVED_ROWS, screen_cols)
        logging.debug(f"Terminal size {screen_rows}x{screen_cols}; {self.viewport!r}")
        self.drawer = DrawScreen(self)
        self.keybinder = KeyBinder(self)

    # --- Derived state ---
    @property
    def ren_x(self) -> int:
        """Cursor column in render space."""
        if self.cy < len(self.rows):
            return to_render_column(self.rows[self.cy].chars, self.cx)
        return 0

    # --- Status message ---
    def _set_status_message(self, fmt: str, *args: Any) -> None:
        """Formats `fmt % args` into the message slot and stamps it with the current time."""
        message = fmt % args if args else fmt
        self.status_message = message[:STATUS_MESSAGE_CAPACITY - 1]
        self.status_time = time.time()
        logging.debug(f"Status message set to: '{self.status_message}'")

    def set_help_message(self) -> None:
        label = self.keybinder.label
        self._set_status_message(
            "HELP: %s = save | %s = quit | %s = find",
            label("save_file"),
            label("quit"),
            label("find"),
        )

    # --- File operations ---
    def open_file(self, path: str) -> None:
        """Loads `path` into the row store.

        Raises:
            OSError: If the file cannot be read. Fatal at startup.
        """
        lines = load_rows(path)
        self.rows.load(lines)
        self.filename = path
        self.cx = self.cy = 0
        logger.info(f"Opened '{path}' ({len(lines)} lines)")

    def save_file(self) -> None:
        """Writes the document to `filename`, prompting for a name if there is none.

        Failures are reported in the message bar; the dirty state is only
        cleared after the whole buffer reached the disk.
        """
        if self.filename is None:
            name = self.prompt(SAVE_AS_PROMPT)
            if name is None:
                self._set_status_message("Save cancelled")
                logging.debug("save_file: cancelled at the file name prompt.")
                return
            self.filename = name

        data = serialize(self.rows.lines())
        try:
            written = write_file(self.filename, data)
        except OSError as e:
            logger.error(f"Failed to save '{self.filename}': {e}", exc_info=True)
            self._set_status_message("Can't save! I/O error: %s", e.strerror or str(e))
            return

        self.rows.modified = 0
        logger.info(f"Saved {written} bytes to '{self.filename}'")
        self._set_status_message("%d bytes written to disk", written)

    # --- Prompt ---
    def prompt(
        self,
        template: str,
        callback: Optional[Callable[[str, int], None]] = None,
    ) -> Optional[str]:
        """Reads a line of input in the message bar.

        `template` is shown with the current input substituted for ``%s``; the
        screen is redrawn after every key. `callback`, if given, is called
        with ``(buffer, key)`` after every key.

        Returns:
            The entered text on Enter, or None if the prompt was cancelled with ESC.
        """
        logging.debug(f"Prompt called. Template: '{template}'")
        buf = ""
        while True:
            self._set_status_message(template, buf)
            self.refresh_screen()

            key = self.keybinder.get_key_input()
            if key in (DEL_KEY, CTRL_H, BACKSPACE):
                buf = buf[:-1]
            elif key == ESC:
                self._set_status_message("")
                if callback:
                    callback(buf, key)
                return None
            elif key == ENTER:
                if buf:
                    self._set_status_message("")
                    if callback:
                        callback(buf, key)
                    return buf
            elif 32 <= key < 127:
                buf += chr(key)

            if callback:
                callback(buf, key)

    # --- Search ---
    def find(self) -> None:
        """Incremental search; ESC puts the cursor and viewport back where they were."""
        saved = (self.cx, self.cy, self.viewport.off_col, self.viewport.off_row)
        self._find_last_match = -1
        self._find_direction = 1

        query = self.prompt(SEARCH_PROMPT, self._find_callback)
        if query is None:
            self.cx, self.cy, self.viewport.off_col, self.viewport.off_row = saved
            logging.debug("find: cancelled, cursor restored.")

    def _find_callback(self, query: str, key: int) -> None:
        if key in (ENTER, ESC):
            self._find_last_match = -1
            self._find_direction = 1
            return
        if key in (ARROW_RIGHT, ARROW_DOWN):
            self._find_direction = 1
        elif key in (ARROW_LEFT, ARROW_UP):
            self._find_direction = -1
        else:
            self._find_last_match = -1
            self._find_direction = 1

        if self._find_last_match == -1:
            self._find_direction = 1
        if not query:
            return

        needle = query.encode("latin-1")
        num_rows = len(self.rows)
        current = self._find_last_match
        for _ in range(num_rows):
            current += self._find_direction
            if current == -1:
                current = num_rows - 1
            elif current == num_rows:
                current = 0

            pos = self.rows[current].chars.find(needle)
            if pos != -1:
                self._find_last_match = current
                self.cy = current
                self.cx = pos
                # Pushes the viewport past the end so scrolling puts the match on top.
                self.viewport.off_row = num_rows
                logging.debug(f"find: '{query}' at row {current}, col {pos}")
                return

    # --- Key handling ---
    def process_keypress(self) -> None:
        """Reads one key from the terminal and dispatches it."""
        key = self.keybinder.get_key_input()
        self.keybinder.handle_input(key)

    def exit_editor(self) -> None:
        """Quits, or counts down a confirmation while there are unsaved changes."""
        if self.rows.dirty and self.quit_times > 1:
            self.quit_times -= 1
            self._set_status_message(
                "WARNING!!! File has unsaved changes. Press %s %d more times to quit.",
                self.keybinder.label("quit"),
                self.quit_times,
            )
            logging.debug(f"exit_editor: unsaved changes, {self.quit_times} more needed.")
            return
        logger.info("--- EXIT SEQUENCE INITIATED ---")
        self.running = False

    def reset_quit_counter(self) -> None:
        self.quit_times = self.initial_quit_times

    def noop(self) -> None:
        pass

    # --- Navigation ---
    def move_cursor(self, key: int) -> None:
        num_rows = len(self.rows)
        row = self.rows[self.cy] if self.cy < num_rows else None

        if key == ARROW_LEFT:
            if self.cx > 0:
                self.cx -= 1
            elif self.cy > 0:
                self.cy -= 1
                self.cx = self.rows[self.cy].size
        elif key == ARROW_RIGHT:
            if row is not None and self.cx < row.size:
                self.cx += 1
            elif row is not None and self.cx == row.size:
                self.cy += 1
                self.cx = 0
        elif key == ARROW_UP:
            if self.cy > 0:
                self.cy -= 1
        elif key == ARROW_DOWN:
            if self.cy < num_rows:
                self.cy += 1

        self._snap_cursor()

    def _snap_cursor(self) -> None:
        """Clamps `cx` to the length of the row the cursor is on."""
        row_len = self.rows[self.cy].size if self.cy < len(self.rows) else 0
        if self.cx > row_len:
            self.cx = row_len

    def handle_home(self) -> None:
        self.cx = 0

    def handle_end(self) -> None:
        if self.cy < len(self.rows):
            self.cx = self.rows[self.cy].size

    def handle_page(self, key: int) -> None:
        """Jumps to the top or bottom edge of the viewport, then moves one screen further."""
        if key == PAGE_UP:
            self.cy = self.viewport.off_row
        else:
            self.cy = min(self.viewport.off_row + self.viewport.disp_rows - 1, len(self.rows))
        self._snap_cursor()

        step = ARROW_UP if key == PAGE_UP else ARROW_DOWN
        for _ in range(self.viewport.disp_rows - 1):
            self.move_cursor(step)

    # --- Editing ---
    def insert_char(self, byte: int) -> None:
        if self.cy == len(self.rows):
            self.rows.insert_row(len(self.rows), b"")
        self.rows.insert_char(self.cy, self.cx, byte)
        self.cx += 1

    def insert_newline(self) -> None:
        if self.cx == 0:
            self.rows.insert_row(self.cy, b"")
        else:
            self.rows.split_at(self.cy, self.cx)
        self.cy += 1
        self.cx = 0

    def handle_backspace(self) -> None:
        """Deletes the byte left of the cursor, joining with the previous row at column 0."""
        if self.cy == len(self.rows):
            return
        if self.cx == 0 and self.cy == 0:
            return

        if self.cx > 0:
            self.rows.delete_char(self.cy, self.cx - 1)
            self.cx -= 1
        else:
            prev = self.cy - 1
            self.cx = self.rows[prev].size
            self.rows.append_bytes(prev, bytes(self.rows[self.cy].chars))
            self.rows.delete_row(self.cy)
            self.cy = prev

    def handle_delete(self) -> None:
        self.move_cursor(ARROW_RIGHT)
        self.handle_backspace()

    # --- Screen ---
    def refresh_screen(self) -> None:
        self.viewport.scroll(self.cy, self.ren_x)
        self.drawer.draw()

    def run(self) -> None:
        """The main event loop: draw a frame, then handle one key, until `running` is cleared."""
        logger.info("Editor main loop started.")
        self.running = True
        while self.running:
            self.refresh_screen()
            self.process_keypress()
        logger.info("Editor main loop finished.")
