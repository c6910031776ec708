# rawed/utils/utils.py
"""
rawed.utils.utils.py
====================

Configuration helpers for the rawed editor.

- Automatic user configuration: creates `~/.config/rawed/` with a
  `config.toml` (rendered from the embedded defaults) and an `.env`
  template on first run.
- Layered loading: the embedded `DEFAULT_CONFIG` is the base, and the user's
  `config.toml` is deep-merged over it. A missing or broken user file never
  prevents the editor from starting.
"""

import copy
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import toml

logger = logging.getLogger("rawed")

APP_NAME = "rawed"

ENV_TEMPLATE = """# Environment for rawed
# Set to 1 to trace every decoded key into keytrace.log
RAWED_KEYTRACE=0
"""

# Embedded defaults; always present even when no user file exists.
DEFAULT_CONFIG: Dict[str, Any] = {
    "editor": {
        "default_new_filename": "untitled.txt",
        "status_message_seconds": 5,
        "quit_times": 1,
        "read_timeout_ds": 1,
        "escape_sequence_max": 16,
    },
    "keybindings": {
        "quit": "ctrl+q",
        "save_file": "ctrl+s",
        "find": "ctrl+f",
        "find_next": "ctrl+n",
    },
    "logging": {
        "log_dir": "~/.config/rawed/logs",
        "file_level": "DEBUG",
        "console_level": "WARNING",
        "log_to_console": False,
        "separate_error_log": False,
    },
}


def get_config_dir() -> Path:
    return Path.home() / ".config" / APP_NAME


def ensure_user_config_exists() -> None:
    """Checks for user config files in `~/.config/rawed` and creates them if missing."""
    try:
        config_dir = get_config_dir()
        user_config_path = config_dir / "config.toml"
        user_env_path = config_dir / ".env"

        config_dir.mkdir(parents=True, exist_ok=True)

        if not user_config_path.exists():
            with open(user_config_path, "w", encoding="utf-8") as f:
                toml.dump(DEFAULT_CONFIG, f)
            logger.info("Created user config template at: %s", user_config_path)

        if not user_env_path.exists():
            user_env_path.write_text(ENV_TEMPLATE, encoding="utf-8")
            logger.info("Created user .env template at: %s", user_env_path)

    except OSError as e:
        logger.critical("Could not create user configuration files: %s", e, exc_info=True)


def load_config(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Loads the embedded defaults and merges a user `config.toml` over them.

    With `path` given only that file is consulted and nothing is created;
    otherwise the user file in `~/.config/rawed` is used (and created on
    first run).
    """
    final_config = copy.deepcopy(DEFAULT_CONFIG)
    logger.debug("Loaded embedded default configuration.")

    if path is None:
        ensure_user_config_exists()
        user_config_path = get_config_dir() / "config.toml"
    else:
        user_config_path = Path(path)

    if user_config_path.is_file():
        try:
            user_config = toml.load(user_config_path)
            final_config = deep_merge(final_config, user_config)
            logger.info("Successfully loaded and merged user config from %s", user_config_path)
        except (toml.TomlDecodeError, OSError) as e:
            logger.error("Could not parse user config '%s': %s. Using defaults.", user_config_path, e)

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
