# tests/test_utils.py
"""Unit tests for utility functions in the `tex.utils.utils` module."""

import logging
from pathlib import Path

import pytest

from tex.utils import utils


def test_deep_merge() -> None:
    """Verify that `deep_merge` correctly merges nested dictionaries.

    This test ensures:
    - Existing values are preserved if not overridden.
    - Nested dictionaries are merged recursively.
    - Conflicting keys are overridden by values from the second dictionary.
    """
    base = {"a": 1, "b": {"x": 10, "y": 20}}
    override = {"b": {"y": 99, "z": 100}, "c": 3}
    result = utils.deep_merge(base, override)
    expected = {"a": 1, "b": {"x": 10, "y": 99, "z": 100}, "c": 3}
    assert result == expected
    assert base == {"a": 1, "b": {"x": 10, "y": 20}}


def test_load_config_creates_templates(isolated_home: Path) -> None:
    """First run writes config.toml and .env and returns the defaults."""
    config = utils.load_config()

    config_dir = isolated_home / ".config" / "tex"
    assert (config_dir / "config.toml").is_file()
    assert (config_dir / ".env").is_file()
    assert config == utils.DEFAULT_CONFIG


def test_load_config_merges_user_file(isolated_home: Path) -> None:
    config_dir = isolated_home / ".config" / "tex"
    config_dir.mkdir(parents=True)
    (config_dir / "config.toml").write_text(
        '[editor]\nquit_times = 4\n\n[keybindings]\nquit = "ctrl+x"\n', encoding="utf-8"
    )

    config = utils.load_config()

    assert config["editor"] == {"quit_times": 4, "message_timeout": 5}
    assert config["keybindings"]["quit"] == "ctrl+x"
    assert config["keybindings"]["save_file"] == "ctrl+s"


def test_load_config_survives_broken_file(
    isolated_home: Path, caplog: pytest.LogCaptureFixture
) -> None:
    config_dir = isolated_home / ".config" / "tex"
    config_dir.mkdir(parents=True)
    (config_dir / "config.toml").write_text("[editor\nquit_times = ", encoding="utf-8")

    with caplog.at_level(logging.ERROR, logger="tex"):
        config = utils.load_config()

    assert config == utils.DEFAULT_CONFIG
    assert "Could not parse user config" in caplog.text


def test_load_config_does_not_share_defaults(isolated_home: Path) -> None:
    config = utils.load_config()
    config["editor"]["quit_times"] = 99
    assert utils.DEFAULT_CONFIG["editor"]["quit_times"] == 2


@pytest.mark.parametrize(
    "value, expected",
    [(3, 3), ("7", 7), (0, 2), (-1, 2), ("many", 2), (None, 2)],
)
def test_get_int_setting(value, expected: int) -> None:
    config = {"editor": {"quit_times": value}}
    assert utils.get_int_setting(config, "editor", "quit_times", 2) == expected


def test_get_int_setting_missing_section() -> None:
    assert utils.get_int_setting({}, "editor", "message_timeout", 5) == 5
