"""Locate, load and save the passport store file."""
import os
import logging
from pathlib import Path
from typing import Optional, Tuple

import yaml

from . import filesys
from .errors import ConfigError
from .models import Store
from .preferences import get_store_path

logger = logging.getLogger(__name__)

STORE_FILENAME = "config.yaml"
STORE_ENV_VAR = "PASSPORT_STORE"


def default_store_path() -> Path:
    """Default store location: ~/.config/passport/config.yaml"""
    return Path.home() / ".config" / "passport" / STORE_FILENAME


def resolve_store_path() -> Tuple[Path, str]:
    """
    Work out which store file to use.

    Priority order:
    1. PASSPORT_STORE environment variable
    2. User preference 'store_path' (stored in ~/.config/passport/preferences.json)
    3. Default location: ~/.config/passport/config.yaml

    Returns:
        Tuple of (store path, source) where source is "env", "preference" or "default"
    """
    env_path = os.getenv(STORE_ENV_VAR)
    if env_path:
        logger.info(f"Using store from {STORE_ENV_VAR}: {env_path}")
        return Path(env_path), "env"

    store_path = get_store_path()
    if store_path is not None:
        if store_path.exists():
            logger.info(f"Using store from preference: {store_path}")
            return store_path, "preference"
        logger.warning(f"Store path from preference doesn't exist: {store_path}")

    return default_store_path(), "default"


def ensure_store_file(path: Path) -> None:
    """Create an empty store at path, and its directory, if no file exists there."""
    if filesys.file_exists(path):
        return

    filesys.ensure_directory(path.parent)
    save_store(Store(), path)
    logger.info(f"Created empty store at {path}")


def load_store(path: Path) -> Store:
    """
    Load the store from a YAML file.

    Raises:
        ConfigError: If the file is missing, unreadable or malformed
    """
    try:
        data = filesys.read(path)
    except FileNotFoundError:
        raise ConfigError(f"Store file not found at: {path}")
    except OSError as e:
        raise ConfigError(f"Failed to read store file at {path}: {e}")

    try:
        document = yaml.safe_load(data)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML store at {path}: {e}")

    store = Store.from_dict(document)
    logger.info(f"Loaded store from {path}")
    logger.debug(f"{len(store.secrets)} secrets, {len(store.workspaces)} workspaces")
    return store


def save_store(store: Store, path: Path) -> None:
    """Write the whole store to path, replacing the previous contents."""
    data = yaml.safe_dump(store.to_dict(), sort_keys=False, allow_unicode=True)
    filesys.write(path, data.encode("utf-8"))
    logger.info(f"Saved store to {path}")


def open_store(path: Optional[Path] = None) -> Tuple[Store, Path]:
    """
    Resolve, create if needed and load the store.

    Args:
        path: Explicit store path, resolved with resolve_store_path() if not given

    Returns:
        Tuple of (store, path it was loaded from)
    """
    if path is None:
        path, _ = resolve_store_path()
    ensure_store_file(path)
    return load_store(path), path
