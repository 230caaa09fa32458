# tex/app.py
"""
tex Application Entry Point
===========================

Startup sequence of the editor:
1) Environment Loading: reads ~/.config/tex/.env early.
2) Configuration & Logging: loads config and initializes logging before anything else runs.
3) Argument Check: zero arguments open an unnamed buffer, one argument names the file.
4) Terminal Setup: raw mode on, window size queried by the editor.
5) Application Run: opens the file, shows the help line and runs the main loop.

Exit status is 0 after a confirmed quit and 1 after any fatal error; in both
cases the screen is cleared and the terminal is back in cooked mode first.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from tex.core.Tex import Tex
from tex.ui.DrawScreen import CLEAR_SCREEN, CURSOR_HOME
from tex.ui.TerminalAppMode import TerminalAppMode, TerminalError

USAGE = "Usage: tex [file]"

logger = logging.getLogger("tex")


def _load_environment() -> None:
    """Loads ~/.config/tex/.env without overriding variables already set."""
    try:
        dotenv_path = Path.home() / ".config" / "tex" / ".env"
        load_dotenv(dotenv_path=dotenv_path)
    except Exception as e:
        # Logging is not configured yet.
        print(f"tex: could not read .env: {e}", file=sys.stderr)


def _describe(error: BaseException) -> str:
    if isinstance(error, OSError) and error.filename is not None and error.strerror:
        return f"{error.filename}: {error.strerror}"
    return str(error) or type(error).__name__


def _restore_terminal(terminal: Any) -> None:
    """Clears the screen and puts the terminal back into its original mode."""
    try:
        terminal.write_raw(CLEAR_SCREEN + CURSOR_HOME)
    except OSError as e:
        logger.debug("Could not clear the screen on exit: %r", e)
    terminal.exit()


def run_editor(terminal: Any, config: dict[str, Any], filename: Optional[str]) -> int:
    """Runs one editing session on `terminal` and returns the process exit status."""
    try:
        terminal.enter()
        editor = Tex(terminal, config)
        if filename:
            editor.open_file(filename)
        editor.set_help_message()
        editor.run()
    except Exception as e:
        logger.critical("Unhandled exception at the top level: %s", e, exc_info=True)
        try:
            _restore_terminal(terminal)
        except TerminalError as e_restore:
            logger.critical("Could not restore the terminal: %s", e_restore)
        print(f"tex: {_describe(e)}", file=sys.stderr)
        return 1

    try:
        _restore_terminal(terminal)
    except TerminalError as e:
        logger.critical("Could not restore the terminal: %s", e, exc_info=True)
        print(f"tex: {_describe(e)}", file=sys.stderr)
        return 1

    logger.info("tex editor shut down gracefully.")
    return 0


def start(argv: Optional[list[str]] = None) -> None:
    """Console-script entry point; never returns."""
    argv = sys.argv if argv is None else argv

    # --- Step 1: Load Environment Variables from the User's Config Directory ---
    _load_environment()

    # --- Step 2: Immediate Logging and Configuration Setup ---
    try:
        from tex.utils.logging_config import setup_logging
        from tex.utils.utils import load_config

        config: dict[str, Any] = load_config()
        setup_logging(config)
    except Exception as e:
        print(f"FATAL: Could not initialize configuration or logging system: {e}", file=sys.stderr)
        sys.exit(1)

    # --- Step 3: Arguments ---
    if len(argv) > 2:
        print(USAGE, file=sys.stderr)
        sys.exit(1)
    filename = argv[1] if len(argv) == 2 else None

    # --- Step 4 and 5: Terminal and main loop ---
    logger.info("tex editor starting up...")
    sys.exit(run_editor(TerminalAppMode(), config, filename))
