"""Host-bound encryption for secret values.

Values are encrypted with AES-256-GCM. The key is the SHA-256 digest of the
host machine's unique identifier, so ciphertext written on one machine cannot
be decrypted on another.
"""
import base64
import binascii
import hashlib
import logging
import os
import re
import subprocess
import sys
from typing import Callable, Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .errors import CryptoError, DecryptError

logger = logging.getLogger(__name__)

NONCE_SIZE = 12

LINUX_MACHINE_ID_FILES = ("/etc/machine-id", "/var/lib/dbus/machine-id")


def _read_linux_machine_id() -> str:
    for path in LINUX_MACHINE_ID_FILES:
        try:
            with open(path, "r") as f:
                value = f.read().strip()
        except OSError as e:
            logger.debug(f"Could not read machine id from {path}: {e}")
            continue
        if value:
            return value
    raise CryptoError("crypto: no machine id found in " + ", ".join(LINUX_MACHINE_ID_FILES))


def _read_darwin_machine_id() -> str:
    try:
        result = subprocess.run(
            ["ioreg", "-rd1", "-c", "IOPlatformExpertDevice"],
            capture_output=True, text=True, check=True
        )
    except (OSError, subprocess.CalledProcessError) as e:
        raise CryptoError(f"crypto: failed to query ioreg: {e}") from e

    match = re.search(r'"IOPlatformUUID"\s*=\s*"([^"]+)"', result.stdout)
    if not match:
        raise CryptoError("crypto: IOPlatformUUID not found in ioreg output")
    return match.group(1)


def _read_windows_machine_id() -> str:
    import winreg

    try:
        key = winreg.OpenKey(
            winreg.HKEY_LOCAL_MACHINE,
            r"SOFTWARE\Microsoft\Cryptography",
            0,
            winreg.KEY_QUERY_VALUE | winreg.KEY_WOW64_64KEY,
        )
        with key:
            value, _ = winreg.QueryValueEx(key, "MachineGuid")
    except OSError as e:
        raise CryptoError(f"crypto: failed to read MachineGuid: {e}") from e
    return str(value)


def get_machine_id() -> str:
    """
    Return a stable identifier for the host machine.

    Raises:
        CryptoError: If the platform's identifier cannot be read
    """
    if sys.platform.startswith("win"):
        return _read_windows_machine_id()
    if sys.platform == "darwin":
        return _read_darwin_machine_id()
    return _read_linux_machine_id()


class HostCryptoProvider:
    """Encrypts and decrypts strings with a key bound to the host machine."""

    def __init__(self, machine_id_reader: Optional[Callable[[], str]] = None):
        self._read_machine_id = machine_id_reader or get_machine_id
        self._key: Optional[bytes] = None

    def _encryption_key(self) -> bytes:
        if self._key is None:
            machine_id = self._read_machine_id()
            if not machine_id:
                raise CryptoError("crypto: machine id is empty")
            self._key = hashlib.sha256(machine_id.encode("utf-8")).digest()
        return self._key

    def encrypt_string(self, value: str) -> str:
        """
        Encrypt value and return base64(nonce + ciphertext).

        Raises:
            CryptoError: If the encryption key cannot be derived
        """
        key = self._encryption_key()
        nonce = os.urandom(NONCE_SIZE)
        data = AESGCM(key).encrypt(nonce, value.encode("utf-8"), None)
        return base64.b64encode(nonce + data).decode("ascii")

    def decrypt_string(self, value: str) -> str:
        """
        Decrypt a value produced by encrypt_string.

        Raises:
            CryptoError: If the encryption key cannot be derived
            DecryptError: If value is malformed, truncated or fails authentication
        """
        key = self._encryption_key()

        try:
            raw = base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError):
            raise DecryptError() from None

        if len(raw) <= NONCE_SIZE:
            raise DecryptError()

        nonce, cipher_text = raw[:NONCE_SIZE], raw[NONCE_SIZE:]
        try:
            plain_text = AESGCM(key).decrypt(nonce, cipher_text, None)
            return plain_text.decode("utf-8")
        except (InvalidTag, UnicodeDecodeError):
            raise DecryptError() from None
