#!/usr/bin/env python3
# /rawed/main.py
"""
rawed Main Entry Point
======================

This script launches the rawed editor. It performs:
1) Environment Loading: reads ~/.config/rawed/.env early (e.g. RAWED_KEYTRACE).
2) Path Setup: ensures the rawed package under src/ is importable.
3) Configuration & Logging: loads config and initializes logging ASAP.
4) Core Import: imports the Rawed class after logging is ready.
5) Raw Mode: puts the terminal into raw mode and always restores it.
6) Application Run: opens the file named on the command line and runs the loop.

Exit status is 0 after a normal quit and 1 when the terminal could not be
put into raw mode or reading from it failed.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

# --- Step 1: Load Environment Variables from the User's Config Directory ---
user_config_dir = Path.home() / ".config" / "rawed"
load_dotenv(dotenv_path=user_config_dir / ".env")

# --- Step 2: Set up the Python Path ---
project_src = os.path.join(os.path.dirname(os.path.abspath(__file__)), "src")
if project_src not in sys.path:
    sys.path.insert(0, project_src)

# --- Step 3: Immediate Logging and Configuration Setup ---
try:
    from rawed.utils.logging_config import setup_logging
    from rawed.utils.utils import load_config

    config: dict[str, Any] = load_config()
    setup_logging(config)
    logger = logging.getLogger("rawed")
except Exception as e:
    # Logging is not ready; print to stderr and exit.
    print(f"FATAL: Could not initialize configuration or logging system: {e}", file=sys.stderr)
    import traceback
    traceback.print_exc()
    sys.exit(1)

# --- Step 4: Import the Core Application ---
try:
    from rawed.core.Rawed import Rawed
    from rawed.ui.DrawScreen import CLEAR_SCREEN, CURSOR_HOME
    from rawed.ui.TerminalRawMode import TerminalError, TerminalRawMode
except ImportError as e:
    logger.critical("Failed to import a critical application component: %s", e, exc_info=True)
    sys.exit(1)


def _resolve_cli_path(argv: list[str]) -> Optional[str]:
    """
    Returns the file named in argv[1], expanded to a user path, or None.
    The file does NOT need to exist; it becomes the save target either way.
    """
    if len(argv) <= 1:
        return None
    raw = argv[1].strip()
    if not raw:
        return None
    return str(Path(raw).expanduser())


def _fatal(term: Optional[TerminalRawMode], err: BaseException) -> int:
    """Restores the terminal, clears the screen and reports `err` on stderr."""
    if term is not None:
        term.exit()
    try:
        os.write(sys.stdout.fileno(), CLEAR_SCREEN + CURSOR_HOME)
    except OSError:
        logger.debug("Could not clear the screen during fatal shutdown.", exc_info=True)
    print(f"rawed: {err}", file=sys.stderr)
    logger.critical("Fatal terminal error: %s", err, exc_info=True)
    return 1


def run_editor(config: dict[str, Any], argv: list[str]) -> int:
    """Runs one editing session; returns the process exit status."""
    editor_cfg = config.get("editor", {})
    file_to_open = _resolve_cli_path(argv)
    term: Optional[TerminalRawMode] = None
    try:
        term = TerminalRawMode(read_timeout_ds=int(editor_cfg.get("read_timeout_ds", 1)))
        with term:
            editor = Rawed(config, term, filename=file_to_open)
            if file_to_open:
                editor.open_file(file_to_open)
            editor.run()
    except TerminalError as e:
        return _fatal(term, e)
    return 0


def start() -> None:
    logger.info("rawed editor starting up...")
    status = run_editor(config, sys.argv)
    if status == 0:
        logger.info("rawed editor shut down gracefully.")
    sys.exit(status)


if __name__ == "__main__":
    start()
