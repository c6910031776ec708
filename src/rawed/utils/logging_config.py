# rawed/utils/logging_config.py
"""rawed.utils.logging_config
============================

Logging setup for rawed. The editor owns the terminal while it runs, so
by default nothing is written to the console; everything goes to a rotating
``editor.log`` in the configured log directory.

Features:
    - Rotating file logging for general events (editor.log).
    - Optional console logging to stderr (off by default, since stdout/stderr
      share the raw-mode terminal).
    - Optional separate error log (error.log) for ERROR and CRITICAL.
    - Optional key event tracing (keytrace.log) enabled via the
      ``RAWED_KEYTRACE`` environment variable.
    - Log directory is created on demand, with a fallback to the system temp
      directory when that fails.
    - Safe to call repeatedly: existing root handlers are replaced.

Globals:
    logger: Main application logger ("rawed").
    KEY_LOGGER: Logger for decoded key events ("rawed.keyevents").
"""

import logging
import logging.handlers
import os
import sys
import tempfile
from typing import Any, Optional


logger = logging.getLogger("rawed")
KEY_LOGGER = logging.getLogger("rawed.keyevents")

KEYTRACE_ENV = "RAWED_KEYTRACE"


def _resolve_log_dir(log_dir: str) -> str:
    """Returns a usable log directory, falling back to the temp directory."""
    if not log_dir:
        return ""
    log_dir = os.path.expanduser(log_dir)
    if os.path.isdir(log_dir):
        return log_dir
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

    Up to four independent handlers are set up:

    1. File handler - rotating editor.log from `file_level` (default DEBUG).
    2. Console handler - optional stderr output at `console_level`
       (default WARNING); only when `log_to_console` is true.
    3. Error-file handler - optional rotating error.log, ERROR and above.
    4. Key-event handler - rotating keytrace.log on the ``rawed.keyevents``
       logger when ``RAWED_KEYTRACE`` is ``1/true/yes``.

    Args:
        config (dict | None): Application configuration. Only the
            ``["logging"]`` section is consulted; recognised keys are
            ``log_dir``, ``file_level``, ``console_level``,
            ``log_to_console`` and ``separate_error_log``.

    Notes:
        Never raises; I/O or permission problems are reported to stderr and
        logging continues with whatever handlers could be created.
    """
    if config is None:
        config = {}
    logging_config = config.get("logging", {})

    log_dir = _resolve_log_dir(logging_config.get("log_dir", ""))
    log_filename = os.path.join(log_dir, "editor.log")
    log_file_level_str = str(logging_config.get("file_level", "DEBUG")).upper()
    log_file_level = getattr(logging, log_file_level_str, logging.DEBUG)

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
    except OSError as e_fh:
        print(
            f"Error setting up file logger for '{log_filename}': {e_fh}. File logging may be impaired.",
            file=sys.stderr,
        )

    console_handler = None
    if logging_config.get("log_to_console", False):
        console_level_str = str(logging_config.get("console_level", "WARNING")).upper()
        console_log_level = getattr(logging, console_level_str, logging.WARNING)
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter("%(levelname)-8s - %(name)-12s - %(message)s"))
        console_handler.setLevel(console_log_level)

    error_file_handler = None
    if logging_config.get("separate_error_log", False):
        error_log_filename = os.path.join(log_dir, "error.log")
        try:
            error_file_handler = logging.handlers.RotatingFileHandler(
                error_log_filename, maxBytes=1 * 1024 * 1024, backupCount=3, encoding="utf-8"
            )
            error_file_handler.setFormatter(file_formatter)
            error_file_handler.setLevel(logging.ERROR)
        except OSError as e_efh:
            print(f"Error setting up separate error log '{error_log_filename}': {e_efh}.", file=sys.stderr)

    root_logger = logging.getLogger()
    root_logger.handlers = []  # avoid duplicates on repeated setup
    for handler in (file_handler, console_handler, error_file_handler):
        if handler:
            root_logger.addHandler(handler)
    root_logger.setLevel(log_file_level)

    # Key events go to their own file only, never into editor.log.
    KEY_LOGGER.propagate = False
    KEY_LOGGER.setLevel(logging.DEBUG)
    KEY_LOGGER.handlers = []

    if os.environ.get(KEYTRACE_ENV, "").lower() in {"1", "true", "yes"}:
        key_trace_filename = os.path.join(log_dir, "keytrace.log")
        try:
            key_trace_handler = logging.handlers.RotatingFileHandler(
                key_trace_filename, maxBytes=1 * 1024 * 1024, backupCount=3, encoding="utf-8"
            )
            key_trace_handler.setFormatter(logging.Formatter("%(asctime)s - %(message)s"))
            KEY_LOGGER.addHandler(key_trace_handler)
            KEY_LOGGER.disabled = False
            logging.info("Key event tracing enabled, logging to '%s'.", key_trace_filename)
        except OSError as e_keytrace:
            logging.error("Failed to set up key trace logging: %s", e_keytrace, exc_info=True)
            KEY_LOGGER.disabled = True
    else:
        KEY_LOGGER.addHandler(logging.NullHandler())
        KEY_LOGGER.disabled = True
        logging.debug("Key event tracing is disabled.")

    logging.info("Logging setup complete. Root logger level: %s.", logging.getLevelName(root_logger.level))
    if file_handler:
        logging.info("File logging to '%s' at level: %s.", log_filename, logging.getLevelName(file_handler.level))
    if console_handler:
        logging.info("Console logging to stderr at level: %s.", logging.getLevelName(console_handler.level))
    if error_file_handler:
        logging.info("Error logging to 'error.log' at level: ERROR.")
