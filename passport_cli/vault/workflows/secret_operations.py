"""Workflow for secret operations: load the store, apply one change, save."""
import logging
from pathlib import Path
from typing import List, Optional

from ..domains.config_loader import open_store, save_store
from ..domains.crypto import HostCryptoProvider
from ..domains.models import SecretEntry

logger = logging.getLogger(__name__)


def add_secret(name: str, value: str, encrypt: bool = True,
               store_path: Optional[Path] = None, crypto=None) -> SecretEntry:
    """
    Add a secret to the store and save it.

    Args:
        name: Secret name
        value: Plain text value
        encrypt: Encrypt the value with the host-bound key before storing it
        store_path: Store file, resolved from env/preferences/default if not given
        crypto: Crypto provider, HostCryptoProvider() if not given

    Returns:
        The stored SecretEntry
    """
    crypto = crypto or HostCryptoProvider()
    store, path = open_store(store_path)

    secret = store.add_secret(name, value, encrypt, crypto)
    save_store(store, path)

    logger.info(f"Added secret '{name}' (secure={encrypt})")
    return secret


def get_secret(name: str, store_path: Optional[Path] = None) -> SecretEntry:
    store, _ = open_store(store_path)
    return store.get_secret(name)


def list_secrets(store_path: Optional[Path] = None) -> List[SecretEntry]:
    store, _ = open_store(store_path)
    return list(store.secrets)


def remove_secret(name: str, store_path: Optional[Path] = None) -> None:
    store, path = open_store(store_path)

    store.remove_secret(name)
    save_store(store, path)

    logger.info(f"Removed secret '{name}'")
