# tex/core/Persistence.py
"""
tex.core.Persistence
====================

Reading a file into row bytes and writing rows back to disk.

The on-disk format is plain bytes, one row per line, every row terminated by
``\\n`` (including the last one). Trailing ``\\n``/``\\r`` bytes are stripped
on read; no other line-ending normalization is done. Errors are not handled
here: they propagate as `OSError` so the caller decides whether a failure is
fatal (open at startup) or recoverable (save).
"""

import logging
import os
from typing import Iterable, List

logger = logging.getLogger("tex")

FILE_MODE = 0o644


def load_rows(path: str) -> List[bytes]:
    """
    Reads `path` and returns its lines with trailing CR/LF bytes removed.

    Raises:
        OSError: If the file cannot be opened or read.
    """
    logger.debug(f"load_rows: reading '{path}'")
    rows: List[bytes] = []
    with open(path, "rb") as f:
        for line in f:
            rows.append(line.rstrip(b"\r\n"))
    logger.info(f"Loaded {len(rows)} lines from '{path}'")
    return rows


def serialize(rows: Iterable[bytes]) -> bytes:
    """Joins rows into one buffer, each row followed by a newline."""
    return b"".join(bytes(row) + b"\n" for row in rows)


def write_file(path: str, data: bytes) -> int:
    """
    Writes `data` to `path`, creating the file if needed and truncating it to
    exactly ``len(data)`` bytes. Returns the number of bytes written.

    Raises:
        OSError: If the file cannot be opened, truncated, or written.
    """
    logger.debug(f"write_file: writing {len(data)} bytes to '{path}'")
    fd = os.open(path, os.O_RDWR | os.O_CREAT, FILE_MODE)
    with os.fdopen(fd, "r+b") as f:
        f.truncate(len(data))
        written = f.write(data)
        f.flush()
    if written != len(data):
        raise OSError(f"short write: {written} of {len(data)} bytes")
    return written
