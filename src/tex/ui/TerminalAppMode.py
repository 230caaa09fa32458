# tex/ui/TerminalAppMode.py
from __future__ import annotations

import fcntl
import logging
import os
import struct
import sys
import termios
from typing import Any, Optional


class TerminalError(RuntimeError):
    """Unrecoverable failure of the controlling terminal."""


class TerminalAppMode:
    """
    Put the terminal into raw mode and talk to it in bytes:

    - No echo, no canonical line buffering, no signal-generating control
      characters (^C, ^Z), no flow control (^S, ^Q), no CR-to-NL translation
      and no output post-processing.
    - Reads block until one byte is available (VMIN=1, VTIME=0).
    - All output goes straight to the stdout file descriptor.

    Always pair `enter()` with `exit()` (try/finally).
    """

    def __init__(self, stdin_fd: Optional[int] = None, stdout_fd: Optional[int] = None) -> None:
        # None means sys.stdin / sys.stdout, looked up on first use.
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._entered: bool = False
        self._orig_attrs: Optional[list] = None

    @staticmethod
    def _stream_fd(stream: Any, name: str) -> int:
        try:
            return stream.fileno()
        except (AttributeError, ValueError, OSError) as e:
            raise TerminalError(f"{name} has no file descriptor: {e}") from e

    def enter(self) -> None:
        if self.stdin_fd is None:
            self.stdin_fd = self._stream_fd(sys.stdin, "stdin")
        if self.stdout_fd is None:
            self.stdout_fd = self._stream_fd(sys.stdout, "stdout")
        if not os.isatty(self.stdin_fd):
            raise TerminalError("stdin is not a terminal")
        try:
            self._orig_attrs = termios.tcgetattr(self.stdin_fd)
            raw = termios.tcgetattr(self.stdin_fd)
            raw[0] &= ~(termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON)
            raw[1] &= ~termios.OPOST
            raw[2] |= termios.CS8
            raw[3] &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)
            raw[6][termios.VMIN] = 1
            raw[6][termios.VTIME] = 0
            termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, raw)
        except termios.error as e:
            raise TerminalError(f"cannot enable raw mode: {e}") from e

        self._entered = True
        logging.debug("TerminalAppMode: entered raw mode.")

    def exit(self) -> None:
        if not self._entered:
            return
        try:
            termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._orig_attrs)
        except termios.error as e:
            raise TerminalError(f"cannot restore terminal mode: {e}") from e
        finally:
            self._entered = False
        logging.debug("TerminalAppMode: exited (restored terminal modes).")

    # ── I/O ───────────────────────────────────────────────────────────────────

    def read_byte(self) -> Optional[int]:
        """Blocks until one byte arrives; returns None at end of input."""
        while True:
            try:
                data = os.read(self.stdin_fd, 1)
            except InterruptedError:
                continue
            return data[0] if data else None

    def write_raw(self, data: bytes) -> None:
        if self.stdout_fd is None:
            self.stdout_fd = self._stream_fd(sys.stdout, "stdout")
        view = memoryview(data)
        while view:
            written = os.write(self.stdout_fd, view)
            view = view[written:]

    def get_size(self) -> tuple[int, int]:
        """Returns the terminal size as ``(rows, cols)``."""
        try:
            packed = fcntl.ioctl(self.stdout_fd, termios.TIOCGWINSZ, b"\0" * 8)
            rows, cols = struct.unpack("HHHH", packed)[:2]
            if cols > 0 and rows > 0:
                return rows, cols
            logging.debug("TIOCGWINSZ reported a zero size; asking the terminal.")
        except OSError as e:
            logging.debug("TIOCGWINSZ failed: %r; asking the terminal.", e)

        self.write_raw(b"\x1b[999C\x1b[999B")
        return self._cursor_position()

    # ── helpers ───────────────────────────────────────────────────────────────

    def _cursor_position(self) -> tuple[int, int]:
        """Asks the terminal where the cursor is and parses the ``ESC[r;cR`` reply."""
        self.write_raw(b"\x1b[6n")
        reply = bytearray()
        while len(reply) < 32:
            byte = self.read_byte()
            if byte is None or byte == ord("R"):
                break
            reply.append(byte)

        if not reply.startswith(b"\x1b["):
            raise TerminalError("cannot determine window size")
        try:
            rows, cols = (int(part) for part in bytes(reply[2:]).split(b";"))
        except ValueError as e:
            raise TerminalError(f"cannot determine window size: {bytes(reply)!r}") from e
        if rows <= 0 or cols <= 0:
            raise TerminalError("cannot determine window size")
        return rows, cols
