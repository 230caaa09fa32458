# tests/ui/test_key_decoder.py
"""Unit tests for `decode_key`.
===============================

Feeds byte sequences through the decoder one key at a time and checks the
logical key produced, including the degradation of truncated and unknown
escape sequences to a plain ESC.
"""

from collections import deque
from typing import Callable, Optional

import pytest

from tex.ui.KeyBinder import (
    ARROW_DOWN,
    ARROW_LEFT,
    ARROW_RIGHT,
    ARROW_UP,
    DEL_KEY,
    END_KEY,
    ESC,
    HOME_KEY,
    PAGE_DOWN,
    PAGE_UP,
    decode_key,
)
from tex.ui.TerminalAppMode import TerminalError


def reader(data: bytes) -> Callable[[], Optional[int]]:
    queue = deque(data)
    return lambda: queue.popleft() if queue else None


@pytest.mark.parametrize(
    "data, expected",
    [
        (b"\x1b[A", ARROW_UP),
        (b"\x1b[B", ARROW_DOWN),
        (b"\x1b[C", ARROW_RIGHT),
        (b"\x1b[D", ARROW_LEFT),
        (b"\x1b[H", HOME_KEY),
        (b"\x1bOH", HOME_KEY),
        (b"\x1b[F", END_KEY),
        (b"\x1bOF", END_KEY),
        (b"\x1b[1~", HOME_KEY),
        (b"\x1b[7~", HOME_KEY),
        (b"\x1b[4~", END_KEY),
        (b"\x1b[8~", END_KEY),
        (b"\x1b[3~", DEL_KEY),
        (b"\x1b[5~", PAGE_UP),
        (b"\x1b[6~", PAGE_DOWN),
    ],
)
def test_recognised_sequences(data: bytes, expected: int) -> None:
    assert decode_key(reader(data)) == expected


@pytest.mark.parametrize(
    "data",
    [
        b"\x1b",  # lone ESC
        b"\x1b[",  # truncated after the introducer
        b"\x1b[2~",  # Insert is not mapped
        b"\x1b[9~",
        b"\x1b[5",  # missing tilde
        b"\x1b[5x",
        b"\x1bOA",  # SS3 arrows are not mapped
        b"\x1bxy",
    ],
)
def test_unknown_or_truncated_sequences_are_escape(data: bytes) -> None:
    assert decode_key(reader(data)) == ESC


@pytest.mark.parametrize("byte", [0x01, 0x09, 0x0D, ord("a"), ord("~"), 0x7F, 0xE9])
def test_plain_bytes_pass_through(byte: int) -> None:
    assert decode_key(reader(bytes([byte]))) == byte


def test_navigation_codes_are_outside_byte_range() -> None:
    codes = {ARROW_UP, ARROW_DOWN, ARROW_LEFT, ARROW_RIGHT, DEL_KEY, HOME_KEY, END_KEY, PAGE_UP, PAGE_DOWN}
    assert len(codes) == 9
    assert min(codes) > 255


def test_consecutive_keys_from_one_stream() -> None:
    read = reader(b"x\x1b[Cy")
    assert [decode_key(read) for _ in range(3)] == [ord("x"), ARROW_RIGHT, ord("y")]


def test_end_of_input_raises() -> None:
    with pytest.raises(TerminalError):
        decode_key(reader(b""))
