# tex/utils/logging_config.py
"""tex.utils.logging_config
==========================

Logging configuration for the tex editor. The editor owns the terminal while
it runs, so nothing may be printed to stdout; all diagnostics go to rotating
log files instead.

Features:
    - Rotating file logging for general application events (tex.log).
    - Optional console logging to stderr with configurable log level.
    - Optional separate error log file (error.log) for ERROR and CRITICAL events.
    - Optional key event tracing (keytrace.log) enabled via the TEX_KEYTRACE
      environment variable.
    - Log directory taken from ``TEX_LOG_DIR`` or ``[logging] log_dir``, with
      fallback to the system temp directory on failure.
    - Safe reconfiguration: clears existing handlers to avoid duplicate logs.
    - Never raises; setup errors are reported to stderr.

Globals:
    logger: Main application logger ("tex").
    KEY_LOGGER: Logger for decoded key trace events ("tex.keyevents").
"""

import logging
import logging.handlers
import os
import sys
import tempfile
from typing import Any, Optional


# ======================== Global loggers ========================
logger = logging.getLogger("tex")
KEY_LOGGER = logging.getLogger("tex.keyevents")


def _resolve_log_dir(logging_config: dict[str, Any]) -> str:
    """Returns an existing, writable directory for the log files."""
    log_dir = os.environ.get("TEX_LOG_DIR") or logging_config.get("log_dir", "~/.cache/tex")
    log_dir = os.path.expanduser(str(log_dir))
    try:
        os.makedirs(log_dir, exist_ok=True)
        return log_dir
    except OSError as e_mkdir:
        print(f"Error creating log directory '{log_dir}': {e_mkdir}", file=sys.stderr)
        fallback = tempfile.gettempdir()
        print(f"Logging to temporary directory: '{fallback}'", file=sys.stderr)
        return fallback


def setup_logging(config: Optional[dict[str, Any]] = None) -> None:
    """Configures application-wide logging handlers and log levels.

    Up to four independent handlers are installed:

    1. File handler: rotating tex.log capturing everything from the
       configured `file_level` (default DEBUG) upward.
    2. Console handler: optional `stderr` output whose threshold is
       `console_level` (default WARNING). Off by default, because stderr
       shares the terminal with the editor screen.
    3. Error-file handler: optional rotating error.log that stores
       only ERROR and CRITICAL events.
    4. Key-event handler: rotating keytrace.log enabled when the
       environment variable ``TEX_KEYTRACE`` is ``1/true/yes``; attached
       to the ``tex.keyevents`` logger.

    Args:
        config (dict | None): Application configuration. Only the
            ``["logging"]`` sub-section is consulted; recognised keys are
            ``file_level``, ``console_level``, ``log_to_console``,
            ``separate_error_log`` and ``log_dir``.
    """
    if config is None:
        config = {}
    logging_config = config.get("logging", {})
    log_file_level_str = str(logging_config.get("file_level", "DEBUG")).upper()
    log_file_level = getattr(logging, log_file_level_str, logging.DEBUG)

    log_dir = _resolve_log_dir(logging_config)
    log_filename = os.path.join(log_dir, "tex.log")

    file_formatter = logging.Formatter(
        "%(asctime)s - %(levelname)-8s - %(name)-15s - %(message)s (%(filename)s:%(lineno)d)"
    )
    file_handler = None
    try:
        file_handler = logging.handlers.RotatingFileHandler(
            log_filename, maxBytes=2 * 1024 * 1024, backupCount=5, encoding="utf-8"
        )
        file_handler.setFormatter(file_formatter)
        file_handler.setLevel(log_file_level)
    except Exception as e_fh:
        print(
            f"Error setting up file logger for '{log_filename}': {e_fh}. File logging may be impaired.",
            file=sys.stderr,
        )

    # Console Handler
    console_handler = None
    if logging_config.get("log_to_console", False):
        console_level_str = str(logging_config.get("console_level", "WARNING")).upper()
        console_log_level = getattr(logging, console_level_str, logging.WARNING)

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(
            logging.Formatter("%(levelname)-8s - %(name)-12s - %(message)s")
        )
        console_handler.setLevel(console_log_level)

    # Optional Separate Error Log File
    error_file_handler = None
    error_log_filename = os.path.join(log_dir, "error.log")
    if logging_config.get("separate_error_log", False):
        try:
            error_file_handler = logging.handlers.RotatingFileHandler(
                error_log_filename,
                maxBytes=1 * 1024 * 1024,
                backupCount=3,
                encoding="utf-8",
            )
            error_file_handler.setFormatter(file_formatter)
            error_file_handler.setLevel(logging.ERROR)
        except Exception as e_efh:
            print(
                f"Error setting up separate error log '{error_log_filename}': {e_efh}.",
                file=sys.stderr,
            )

    root_logger = logging.getLogger()
    root_logger.handlers = []  # Clear existing root handlers to avoid duplicates

    if file_handler:
        root_logger.addHandler(file_handler)
    if console_handler:
        root_logger.addHandler(console_handler)
    if error_file_handler:
        root_logger.addHandler(error_file_handler)

    root_logger.setLevel(log_file_level)

    # Key Event Logger
    KEY_LOGGER.propagate = False
    KEY_LOGGER.setLevel(logging.DEBUG)
    KEY_LOGGER.handlers = []

    if os.environ.get("TEX_KEYTRACE", "").lower() in {"1", "true", "yes"}:
        key_trace_filename = os.path.join(log_dir, "keytrace.log")
        try:
            key_trace_handler = logging.handlers.RotatingFileHandler(
                key_trace_filename,
                maxBytes=1 * 1024 * 1024,
                backupCount=3,
                encoding="utf-8",
            )
            key_trace_handler.setFormatter(logging.Formatter("%(asctime)s - %(message)s"))
            KEY_LOGGER.addHandler(key_trace_handler)
            KEY_LOGGER.disabled = False
            logging.info("Key event tracing enabled, logging to '%s'.", key_trace_filename)
        except Exception as e_keytrace:
            logging.error(f"Failed to set up key trace logging: {e_keytrace}", exc_info=True)
            KEY_LOGGER.disabled = True
    else:
        KEY_LOGGER.addHandler(logging.NullHandler())
        KEY_LOGGER.disabled = True
        logging.debug("Key event tracing is disabled.")

    logging.info(
        "Logging setup complete. Root logger level: %s.",
        logging.getLevelName(root_logger.level),
    )
    if file_handler:
        logging.info(
            f"File logging to '{log_filename}' at level: {logging.getLevelName(file_handler.level)}."
        )
    if console_handler:
        logging.info(
            f"Console logging to stderr at level: {logging.getLevelName(console_handler.level)}."
        )
    if error_file_handler:
        logging.info(f"Error logging to '{error_log_filename}' at level: ERROR.")
