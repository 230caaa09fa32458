# tests/ui/test_draw_screen.py
"""Unit tests for the `DrawScreen` compositor.
===============================================

This module validates the byte-exact frame built from editor state:

- Frame structure: cursor hide/home, one erased line per text row, status
  bar, message bar, cursor placement and cursor show.
- Welcome banner and `~` filler for rows past the end of the document.
- Horizontal scrolling of row content.
- Status bar layout, file name truncation and the modified marker.
- Message bar expiry, with `time.time` frozen via `unittest.mock.patch`.
"""

from unittest.mock import patch

from tex.ui.DrawScreen import (
    CURSOR_HOME,
    ERASE_LINE,
    HIDE_CURSOR,
    INVERSE_OFF,
    INVERSE_ON,
    SHOW_CURSOR,
    cursor_to,
)

LINE_END = ERASE_LINE + b"\r\n"


def compose_at(editor, now: float = 0.0) -> bytes:
    editor.viewport.scroll(editor.cy, editor.ren_x)
    with patch("time.time", return_value=now):
        return editor.drawer.compose()


def test_full_frame_layout(make_editor) -> None:
    editor = make_editor([b"ab", b"\tx"], size=(6, 30))
    editor.filename = "f.txt"

    frame = compose_at(editor)

    expected = (
        HIDE_CURSOR
        + CURSOR_HOME
        + b"ab" + LINE_END
        + b"        x" + LINE_END
        + b"~" + LINE_END
        + b"~" + LINE_END
        + INVERSE_ON + b"f.txt - 2 lines " + b" " * 11 + b"1/2" + INVERSE_OFF + b"\r\n"
        + ERASE_LINE
        + cursor_to(1, 1)
        + SHOW_CURSOR
    )
    assert frame == expected


def test_welcome_banner_on_empty_document(make_editor) -> None:
    editor = make_editor(size=(8, 40))
    frame = compose_at(editor)
    lines = frame.split(b"\r\n")
    # disp_rows is 6, so the banner sits on display row 2.
    assert lines[2] == b"~" + b" " * 5 + b"Tex editor -- version 0.1.0" + ERASE_LINE
    assert lines[0].endswith(b"~" + ERASE_LINE)
    assert lines[1] == b"~" + ERASE_LINE
    assert b"[No Name] - 0 lines" in frame
    assert b"1/0" in frame


def test_banner_is_truncated_to_width(make_editor) -> None:
    editor = make_editor(size=(8, 10))
    frame = compose_at(editor)
    assert frame.split(b"\r\n")[2] == b"Tex editor" + ERASE_LINE


def test_no_banner_when_document_has_rows(make_editor) -> None:
    editor = make_editor([b"only"], size=(8, 40))
    assert b"Tex editor" not in compose_at(editor)


def test_horizontal_scroll_slices_render(make_editor) -> None:
    editor = make_editor([b"0123456789abcdef"], size=(4, 5))
    editor.cx = 12
    frame = compose_at(editor)
    # ren_x 12 with 5 columns scrolls to off_col 8.
    assert editor.viewport.off_col == 8
    assert frame.split(b"\r\n")[0] == HIDE_CURSOR + CURSOR_HOME + b"89abc" + ERASE_LINE
    assert frame.endswith(cursor_to(1, 5) + SHOW_CURSOR)


def test_cursor_after_tab_uses_render_column(make_editor) -> None:
    editor = make_editor([b"ab", b"\tx"], size=(6, 30))
    editor.cy, editor.cx = 1, 1
    assert compose_at(editor).endswith(cursor_to(2, 9) + SHOW_CURSOR)


def test_vertical_scroll_moves_cursor_row(make_editor) -> None:
    editor = make_editor([b"r%d" % i for i in range(20)], size=(6, 30))
    editor.cy = 10
    frame = compose_at(editor)
    assert editor.viewport.off_row == 7
    assert frame.split(b"\r\n")[0].endswith(b"r7" + ERASE_LINE)
    assert frame.endswith(cursor_to(4, 1) + SHOW_CURSOR)


def test_status_bar_modified_and_truncated_name(make_editor) -> None:
    editor = make_editor([b"x"], size=(6, 60))
    editor.filename = "a" * 30
    editor.insert_char(ord("y"))
    frame = compose_at(editor)
    assert INVERSE_ON + b"a" * 20 + b" - 1 lines (modified)" in frame


def test_status_bar_clipped_to_narrow_terminal(make_editor) -> None:
    editor = make_editor([b"x"], size=(6, 8))
    editor.filename = "file.txt"
    frame = compose_at(editor)
    assert INVERSE_ON + b"file.txt" + INVERSE_OFF in frame


def test_message_shown_while_fresh(make_editor) -> None:
    editor = make_editor([b"x"], size=(6, 30))
    with patch("time.time", return_value=100.0):
        editor._set_status_message("hello %s", "there")

    assert ERASE_LINE + b"hello there" + cursor_to(1, 1) in compose_at(editor, now=104.0)
    assert b"hello" not in compose_at(editor, now=105.0)


def test_message_clipped_to_width(make_editor) -> None:
    editor = make_editor([b"x"], size=(6, 10))
    with patch("time.time", return_value=0.0):
        editor._set_status_message("0123456789ABCDEF")
    assert ERASE_LINE + b"0123456789" + cursor_to(1, 1) in compose_at(editor)


def test_draw_writes_one_frame(make_editor) -> None:
    editor = make_editor([b"x"])
    editor.refresh_screen()
    assert len(editor.terminal.frames) == 1
    assert editor.terminal.last_frame.startswith(HIDE_CURSOR + CURSOR_HOME)
