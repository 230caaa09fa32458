# tex/utils/utils.py
"""
tex.utils.utils.py
==================

Core utility functions for the tex editor.

Key functionalities include:
- Automatic User Configuration: Manages the creation and loading of user-specific
  configuration files (`config.toml`, `.env`) in `~/.config/tex`, ensuring a
  seamless first-run experience.
- Robust Configuration Loading: Loads a hardcoded, built-in default configuration,
  then recursively merges it with user-defined settings from
  `~/.config/tex/config.toml`.
- Helper Utilities: deep-merging of dictionaries and typed accessors for the
  settings the editor reads on every frame.

The editor is always runnable, even if user configuration files are missing or
corrupted, because it falls back to the embedded defaults.
"""

import copy
import logging
from pathlib import Path
from typing import Any, Dict

import toml

logger = logging.getLogger("tex")

# --- Constants ---
TEX_VERSION = "0.1.0"

ENV_TEMPLATE = """# Environment overrides for tex
# Set to 1 to record every decoded key in keytrace.log
TEX_KEYTRACE=
# Directory for tex.log / error.log / keytrace.log
TEX_LOG_DIR=
"""

CONFIG_TEMPLATE = """# tex user configuration
# Values here are merged over the built-in defaults.

[editor]
# Consecutive quit keystrokes needed to discard unsaved changes.
quit_times = 2
# Seconds a status message stays in the message bar.
message_timeout = 5

[keybindings]
quit = "ctrl+q"
save_file = "ctrl+s"
find = "ctrl+f"
refresh = "ctrl+l"

[logging]
file_level = "DEBUG"
log_to_console = false
separate_error_log = false
"""

# This dictionary is the ultimate fallback, ensuring the editor can ALWAYS start.
DEFAULT_CONFIG: Dict[str, Any] = {
    "editor": {"quit_times": 2, "message_timeout": 5},
    "keybindings": {
        "quit": "ctrl+q",
        "save_file": "ctrl+s",
        "find": "ctrl+f",
        "refresh": "ctrl+l",
    },
    "logging": {
        "file_level": "DEBUG",
        "console_level": "WARNING",
        "log_to_console": False,
        "separate_error_log": False,
        "log_dir": "~/.cache/tex",
    },
}


# --- Helper Functions ---

def get_config_dir() -> Path:
    """Returns the per-user configuration directory (`~/.config/tex`)."""
    return Path.home() / ".config" / "tex"


def ensure_user_config_exists() -> None:
    """Checks for user config files in `~/.config/tex` and creates them if missing."""
    try:
        config_dir = get_config_dir()
        user_config_path = config_dir / "config.toml"
        user_env_path = config_dir / ".env"

        config_dir.mkdir(parents=True, exist_ok=True)

        if not user_config_path.exists():
            user_config_path.write_text(CONFIG_TEMPLATE, encoding="utf-8")
            logger.info(f"Created user config template at: {user_config_path}")

        if not user_env_path.exists():
            user_env_path.write_text(ENV_TEMPLATE, encoding="utf-8")
            logger.info(f"Created user .env template at: {user_env_path}")

    except Exception as e:
        logger.critical(f"Could not create user configuration files: {e}", exc_info=True)


def load_config() -> Dict[str, Any]:
    """
    Loads and merges configurations, ensuring the editor can always run.
    """
    final_config = copy.deepcopy(DEFAULT_CONFIG)
    logger.debug("Loaded embedded default configuration.")

    ensure_user_config_exists()

    user_config_path = get_config_dir() / "config.toml"
    if user_config_path.is_file():
        try:
            user_config = toml.load(user_config_path)
            final_config = deep_merge(final_config, user_config)
            logger.info(f"Successfully loaded and merged user config from {user_config_path}")
        except Exception as e:
            logger.error(f"Could not parse user config '{user_config_path}': {e}. Using defaults.")

    return final_config


def deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Recursively merges the `override` dictionary into the `base` dictionary.
    """
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def get_int_setting(config: Dict[str, Any], section: str, key: str, default: int) -> int:
    """
    Reads a positive integer setting, falling back to `default` on bad values.
    """
    raw = config.get(section, {}).get(key, default)
    try:
        value = int(raw)
    except (TypeError, ValueError):
        logger.warning(f"Invalid value {raw!r} for [{section}] {key}; using {default}.")
        return default
    if value <= 0:
        logger.warning(f"Non-positive value {value} for [{section}] {key}; using {default}.")
        return default
    return value
