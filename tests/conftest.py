# tests/conftest.py
"""Pytest configuration with shared fixtures for the tex editor tests."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Callable, Generator

import pytest

from tex.core.Tex import Tex
from tex.utils.utils import DEFAULT_CONFIG
from tests.stubs import FakeTerminal


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Path, None, None]:
    """Point HOME and the tex environment variables at a temporary directory.

    Keeps tests from reading or creating `~/.config/tex` or `~/.cache/tex`
    of the user running them.
    """
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("TEX_KEYTRACE", raising=False)
    monkeypatch.delenv("TEX_LOG_DIR", raising=False)
    yield home


@pytest.fixture
def config() -> dict[str, Any]:
    """Provide a fresh copy of the built-in configuration.

    Returns:
        dict[str, Any]: Editor configuration dictionary.
    """
    return copy.deepcopy(DEFAULT_CONFIG)


@pytest.fixture
def terminal() -> FakeTerminal:
    """A 24x80 scripted terminal with no pending input."""
    return FakeTerminal()


@pytest.fixture
def make_editor(config: dict[str, Any]) -> Callable[..., Tex]:
    """Factory for a `Tex` instance preloaded with rows.

    Args (of the returned factory):
        lines: Row contents; the document is left unmodified after loading.
        size: Terminal size as (rows, cols).

    Returns:
        Callable[..., Tex]: The factory.
    """

    def _make(lines: list[bytes] | None = None, size: tuple[int, int] = (24, 80)) -> Tex:
        editor = Tex(FakeTerminal(size=size), config)
        if lines is not None:
            editor.rows.load(lines)
        return editor

    return _make


@pytest.fixture
def sample_file(tmp_path: Path) -> Path:
    """A three-line file `ab`, `cd` and an empty last line."""
    path = tmp_path / "sample.txt"
    path.write_bytes(b"ab\ncd\n\n")
    return path
