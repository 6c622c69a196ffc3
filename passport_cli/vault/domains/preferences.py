"""Persisted user preferences.

Preferences live in ~/.config/passport/preferences.json. The store file
location chosen with 'passport config set-path' is kept there.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .errors import ConfigError

logger = logging.getLogger(__name__)

PREFERENCES_DIR = Path.home() / ".config" / "passport"
PREFERENCES_FILE = PREFERENCES_DIR / "preferences.json"

STORE_PATH_KEY = "store_path"


def _read() -> Dict[str, Any]:
    """Return the saved preferences; a missing or unreadable file counts as none."""
    if not PREFERENCES_FILE.exists():
        return {}

    try:
        with open(PREFERENCES_FILE, 'r') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Ignoring preferences file {PREFERENCES_FILE}: {e}")
        return {}

    if not isinstance(data, dict):
        logger.error(f"Ignoring preferences file {PREFERENCES_FILE}: expected a JSON object")
        return {}
    return data


def _write(data: Dict[str, Any]) -> None:
    PREFERENCES_DIR.mkdir(parents=True, exist_ok=True)
    with open(PREFERENCES_FILE, 'w') as f:
        json.dump(data, f, indent=2)


def get_store_path() -> Optional[Path]:
    """Return the preferred store file, or None when no preference is saved."""
    value = _read().get(STORE_PATH_KEY)
    if not value or not isinstance(value, str):
        return None
    return Path(value)


def set_store_path(path: Union[str, Path]) -> Path:
    """
    Save path as the preferred store file.

    The path is made absolute before it is saved.

    Returns:
        The absolute path that was saved

    Raises:
        ConfigError: If path does not exist or is not a file
    """
    store_path = Path(path).resolve()

    if not store_path.exists():
        raise ConfigError(f"Store file does not exist: {store_path}")

    if not store_path.is_file():
        raise ConfigError(f"Path is not a file: {store_path}")

    data = _read()
    data[STORE_PATH_KEY] = str(store_path)
    _write(data)

    logger.info(f"Store path preference set to: {store_path}")
    return store_path


def clear_store_path() -> bool:
    """Forget the preferred store file. Returns False if none was saved."""
    data = _read()
    if STORE_PATH_KEY not in data:
        logger.debug("No store path preference to clear")
        return False

    del data[STORE_PATH_KEY]
    _write(data)
    logger.info("Store path preference cleared")
    return True
