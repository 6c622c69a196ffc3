"""Shared fixtures for the passport test suite."""
from pathlib import Path

import pytest

from passport_cli.vault.domains import crypto as crypto_module
from passport_cli.vault.domains import preferences
from passport_cli.vault.domains.crypto import HostCryptoProvider

TEST_MACHINE_ID = "3f1c2a9e0b7d4c6e8a5f1b2c3d4e5f60"


@pytest.fixture(autouse=True)
def fixed_machine_id(monkeypatch):
    """Pin the host machine id so encryption does not depend on the test host."""
    monkeypatch.setattr(crypto_module, "get_machine_id", lambda: TEST_MACHINE_ID)
    return TEST_MACHINE_ID


@pytest.fixture
def temp_home(tmp_path, monkeypatch):
    """Fixture to create a temporary home directory for testing."""
    fake_home = tmp_path / "home"
    fake_home.mkdir()
    monkeypatch.setenv("HOME", str(fake_home))
    monkeypatch.setattr(Path, "home", lambda: fake_home)
    monkeypatch.delenv("PASSPORT_STORE", raising=False)

    # Mock the preferences module paths
    fake_config_dir = fake_home / ".config" / "passport"
    fake_preferences_file = fake_config_dir / "preferences.json"
    monkeypatch.setattr(preferences, "PREFERENCES_DIR", fake_config_dir)
    monkeypatch.setattr(preferences, "PREFERENCES_FILE", fake_preferences_file)

    return fake_home


@pytest.fixture
def default_store(temp_home):
    """Path of the default store file inside the temporary home."""
    return temp_home / ".config" / "passport" / "config.yaml"


@pytest.fixture
def store_file(tmp_path):
    """Path for a store file that does not exist yet."""
    return tmp_path / "store" / "config.yaml"


@pytest.fixture
def crypto():
    """Crypto provider with a fixed machine id."""
    return HostCryptoProvider(machine_id_reader=lambda: TEST_MACHINE_ID)


@pytest.fixture
def project_dir(tmp_path, monkeypatch, temp_home):
    """A project directory used as the current working directory."""
    project = tmp_path / "project"
    project.mkdir()
    monkeypatch.chdir(project)
    return project
