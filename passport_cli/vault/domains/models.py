"""Domain models for the secret store and workspace registry."""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from .errors import (
    CommandEmptyError,
    ConfigError,
    CryptoError,
    NameEmptyError,
    NameExistsError,
    NotFoundError,
    PathEmptyError,
    PathExistsError,
    ValueEmptyError,
)

logger = logging.getLogger(__name__)


@dataclass
class SecretEntry:
    """A named secret. value holds ciphertext when secure is True."""
    name: str
    value: str
    secure: bool = False

    def resolve_value(self, crypto) -> str:
        """
        Return the secret's plain text value.

        Secure values are decrypted with crypto. A value that cannot be
        decrypted on this machine resolves to an empty string rather than
        raising; call crypto.decrypt_string directly to detect the failure.
        """
        if not self.secure:
            return self.value

        try:
            return crypto.decrypt_string(self.value)
        except CryptoError as e:
            logger.debug(f"Secret '{self.name}' could not be decrypted: {e}")
            return ""

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "value": self.value, "secure": self.secure}


@dataclass
class ScriptEntry:
    """A named command template belonging to a workspace."""
    name: str
    command: str

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "command": self.command}


@dataclass
class Workspace:
    """A directory-scoped collection of scripts."""
    name: str
    path: str
    scripts: List[ScriptEntry] = field(default_factory=list)

    def add_script(self, name: str, command: str) -> ScriptEntry:
        """
        Add a new script to the workspace.

        Raises:
            NameEmptyError: If name is empty
            CommandEmptyError: If command is empty
            NameExistsError: If a script with this name already exists
        """
        if not name:
            raise NameEmptyError("script: name is empty")

        if not command:
            raise CommandEmptyError("script: command is empty")

        for script in self.scripts:
            if script.name == name:
                raise NameExistsError("script: name already exists")

        script = ScriptEntry(name=name, command=command)
        self.scripts.append(script)
        return script

    def get_script(self, name: str) -> ScriptEntry:
        if not name:
            raise NameEmptyError("script: name is empty")

        for script in self.scripts:
            if script.name == name:
                return script

        raise NotFoundError("script: not found")

    def remove_script(self, name: str) -> None:
        if not name:
            raise NameEmptyError("script: name is empty")

        for i, script in enumerate(self.scripts):
            if script.name == name:
                del self.scripts[i]
                return

        raise NotFoundError("script: not found")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "path": self.path,
            "scripts": [s.to_dict() for s in self.scripts],
        }


@dataclass
class Store:
    """
    Root of the persisted document.

    Secrets and workspaces are kept in insertion order. Names are unique
    within their collection, compared case-sensitively.
    """
    secrets: List[SecretEntry] = field(default_factory=list)
    workspaces: List[Workspace] = field(default_factory=list)

    def add_secret(self, name: str, value: str, encrypt: bool, crypto) -> SecretEntry:
        """
        Add a new secret.

        Args:
            name: Unique secret name
            value: Plain text value
            encrypt: If True, value is encrypted with crypto before it is stored
            crypto: Provider with encrypt_string/decrypt_string

        Raises:
            NameEmptyError: If name is empty
            ValueEmptyError: If value is empty
            NameExistsError: If a secret with this name already exists
            CryptoError: If encryption fails
        """
        if not name:
            raise NameEmptyError("secret: name cannot be empty")

        if not value:
            raise ValueEmptyError("secret: value cannot be empty")

        if self._find_secret(name) is not None:
            raise NameExistsError("secret: already exists")

        if encrypt:
            value = crypto.encrypt_string(value)

        secret = SecretEntry(name=name, value=value, secure=encrypt)
        self.secrets.append(secret)
        return secret

    def get_secret(self, name: str) -> SecretEntry:
        if not name:
            raise NameEmptyError("secret: name cannot be empty")

        secret = self._find_secret(name)
        if secret is None:
            raise NotFoundError("secret: not found")
        return secret

    def remove_secret(self, name: str) -> None:
        if not name:
            raise NameEmptyError("secret: name cannot be empty")

        for i, secret in enumerate(self.secrets):
            if secret.name == name:
                del self.secrets[i]
                return

        raise NotFoundError("secret: not found")

    def _find_secret(self, name: str):
        for secret in self.secrets:
            if secret.name == name:
                return secret
        return None

    def add_workspace(self, name: str, path: str) -> Workspace:
        """
        Register a workspace for a directory.

        Raises:
            NameEmptyError: If name is empty
            PathEmptyError: If path is empty
            NameExistsError: If another workspace uses name
            PathExistsError: If another workspace uses path
        """
        if not name:
            raise NameEmptyError("workspace: name is empty")

        if not path:
            raise PathEmptyError("workspace: path is empty")

        for workspace in self.workspaces:
            if workspace.name == name:
                raise NameExistsError("workspace: name already exists")
            if workspace.path == path:
                raise PathExistsError("workspace: path already exists")

        workspace = Workspace(name=name, path=path)
        self.workspaces.append(workspace)
        return workspace

    def get_workspace(self, path: str) -> Workspace:
        """Return the workspace registered for path (exact string match)."""
        if not path:
            raise PathEmptyError("workspace: path is empty")

        for workspace in self.workspaces:
            if workspace.path == path:
                return workspace

        raise NotFoundError("workspace: not found")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "secrets": [s.to_dict() for s in self.secrets],
            "workspaces": [w.to_dict() for w in self.workspaces],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Store":
        """
        Build a Store from a parsed YAML document.

        Raises:
            ConfigError: If the document does not have the expected shape
        """
        if data is None:
            return cls()

        if not isinstance(data, dict):
            raise ConfigError("Store document must be a mapping with 'secrets' and 'workspaces'")

        secrets = [_secret_from_dict(item) for item in _sequence(data, "secrets")]
        workspaces = [_workspace_from_dict(item) for item in _sequence(data, "workspaces")]
        return cls(secrets=secrets, workspaces=workspaces)


def _sequence(data: Dict[str, Any], key: str) -> list:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigError(f"'{key}' must be a sequence")
    return value


def _record(item: Any, kind: str) -> Dict[str, Any]:
    if not isinstance(item, dict):
        raise ConfigError(f"Each {kind} must be a mapping, got: {item!r}")
    if not item.get("name"):
        raise ConfigError(f"Missing '{kind}.name' in store")
    return item


def _secret_from_dict(item: Any) -> SecretEntry:
    item = _record(item, "secret")

    secure = item.get("secure", False)
    if secure is None:
        secure = False
    if not isinstance(secure, bool):
        raise ConfigError(f"'secret.secure' must be true or false for secret '{item['name']}', got: {secure!r}")

    return SecretEntry(
        name=str(item["name"]),
        value="" if item.get("value") is None else str(item["value"]),
        secure=secure,
    )


def _workspace_from_dict(item: Any) -> Workspace:
    item = _record(item, "workspace")
    if not item.get("path"):
        raise ConfigError(f"Missing 'workspace.path' for workspace '{item['name']}'")

    scripts = []
    for script in _sequence(item, "scripts"):
        script = _record(script, "script")
        scripts.append(ScriptEntry(
            name=str(script["name"]),
            command="" if script.get("command") is None else str(script["command"]),
        ))

    return Workspace(name=str(item["name"]), path=str(item["path"]), scripts=scripts)
