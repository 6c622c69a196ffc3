"""Small helpers around the local filesystem."""
from pathlib import Path
from typing import Union

from .errors import PathEmptyError

PathLike = Union[str, Path]


def _check(path: PathLike) -> Path:
    if not str(path).strip():
        raise PathEmptyError("filesys: path can not be empty")
    return Path(path)


def ensure_directory(path: PathLike) -> None:
    """Create path, and any missing parents, if it does not exist."""
    _check(path).mkdir(parents=True, exist_ok=True)


def write(path: PathLike, data: bytes) -> None:
    """Write data to path, creating or truncating the file."""
    with open(_check(path), "wb") as f:
        f.write(data)


def read(path: PathLike) -> bytes:
    with open(_check(path), "rb") as f:
        return f.read()


def file_exists(path: PathLike) -> bool:
    """Return True if a file exists at path. Errors other than not-found propagate."""
    try:
        _check(path).stat()
    except FileNotFoundError:
        return False
    return True
