"""Workflow for workspace scripts: manage them and run them."""
import os
import logging
from pathlib import Path
from typing import BinaryIO, Optional

from ..domains import runner
from ..domains.config_loader import open_store, save_store
from ..domains.crypto import HostCryptoProvider
from ..domains.errors import NotFoundError
from ..domains.interpolation import interpolate, split_command
from ..domains.models import ScriptEntry, Workspace

logger = logging.getLogger(__name__)


def _workspace_path(cwd: Optional[str]) -> str:
    return cwd if cwd is not None else os.getcwd()


def get_workspace(cwd: Optional[str] = None, store_path: Optional[Path] = None) -> Workspace:
    """Return the workspace registered for cwd (the current directory by default)."""
    store, _ = open_store(store_path)
    return store.get_workspace(_workspace_path(cwd))


def add_script(name: str, command: str, cwd: Optional[str] = None,
               store_path: Optional[Path] = None) -> ScriptEntry:
    """
    Add a script to the workspace for cwd and save the store.

    A workspace named after its path is registered first if the directory
    has none yet.
    """
    path = _workspace_path(cwd)
    store, store_file = open_store(store_path)

    try:
        workspace = store.get_workspace(path)
    except NotFoundError:
        workspace = store.add_workspace(path, path)
        logger.info(f"Registered workspace for {path}")

    script = workspace.add_script(name, command)
    save_store(store, store_file)

    logger.info(f"Added script '{name}' to workspace '{workspace.name}'")
    return script


def get_script(name: str, cwd: Optional[str] = None, store_path: Optional[Path] = None) -> ScriptEntry:
    return get_workspace(cwd, store_path).get_script(name)


def remove_script(name: str, cwd: Optional[str] = None, store_path: Optional[Path] = None) -> None:
    store, store_file = open_store(store_path)
    workspace = store.get_workspace(_workspace_path(cwd))

    workspace.remove_script(name)
    save_store(store, store_file)

    logger.info(f"Removed script '{name}' from workspace '{workspace.name}'")


def run_script(name: str, cwd: Optional[str] = None, store_path: Optional[Path] = None,
               crypto=None, output: Optional[BinaryIO] = None) -> int:
    """
    Run a workspace script.

    The command template has its secret markers replaced, is split into
    arguments and is run with output streamed to output (stdout by default).
    When cwd is given the process runs in that directory, otherwise it
    inherits the current working directory.

    Returns:
        The script's exit code

    Raises:
        NotFoundError: If the workspace or script does not exist
        TokenizeError: If the interpolated command cannot be split
        RunError: If the process cannot be started or is killed
    """
    crypto = crypto or HostCryptoProvider()
    store, _ = open_store(store_path)

    workspace = store.get_workspace(_workspace_path(cwd))
    script = workspace.get_script(name)

    args = split_command(interpolate(script.command, store, crypto))

    logger.info(f"Running script '{name}' in workspace '{workspace.name}'")
    return runner.run(args, output=output, cwd=cwd)
