"""Test suite for store configuration management.

This test suite validates:
- Store path preference (set, get, clear)
- Store path resolution (env var, preference, default)
- Store file creation, loading and saving
- Filesystem helpers
- CLI commands for config management
"""
import json
from argparse import Namespace

import pytest
import yaml

from passport_cli.vault.domains import config_loader, filesys, preferences
from passport_cli.vault.domains.errors import ConfigError, PathEmptyError
from passport_cli.vault.domains.models import Store


@pytest.fixture
def temp_preferences_file(temp_home):
    """Fixture that returns the path to temporary preferences file."""
    return temp_home / ".config" / "passport" / "preferences.json"


@pytest.fixture
def existing_store(tmp_path):
    """A store file with one plain secret."""
    path = tmp_path / "custom.yaml"
    path.write_text(yaml.safe_dump({
        "secrets": [{"name": "token", "value": "abc", "secure": False}],
        "workspaces": [],
    }))
    return path


class TestPreferencesModule:
    """Test suite for the store path preference."""

    def test_get_store_path_returns_none_when_not_set(self, temp_home):
        assert preferences.get_store_path() is None

    def test_set_then_get_store_path(self, temp_home, existing_store):
        saved = preferences.set_store_path(existing_store)

        assert saved == existing_store.resolve()
        assert preferences.get_store_path() == existing_store.resolve()

    def test_set_store_path_makes_path_absolute(self, temp_home, existing_store, monkeypatch):
        monkeypatch.chdir(existing_store.parent)

        saved = preferences.set_store_path(existing_store.name)

        assert saved.is_absolute()
        assert saved == existing_store.resolve()

    def test_set_store_path_rejects_missing_file(self, temp_home, tmp_path):
        with pytest.raises(ConfigError) as exc_info:
            preferences.set_store_path(tmp_path / "nonexistent.yaml")

        assert "does not exist" in str(exc_info.value)
        assert preferences.get_store_path() is None

    def test_set_store_path_rejects_directory(self, temp_home, tmp_path):
        with pytest.raises(ConfigError) as exc_info:
            preferences.set_store_path(tmp_path)

        assert "not a file" in str(exc_info.value)
        assert preferences.get_store_path() is None

    def test_clear_store_path_removes_value(self, temp_home, existing_store):
        preferences.set_store_path(existing_store)

        assert preferences.clear_store_path() is True
        assert preferences.get_store_path() is None

    def test_clear_store_path_when_not_set(self, temp_home):
        """Test clearing without a saved preference reports it and does not raise."""
        assert preferences.clear_store_path() is False

    def test_store_path_persisted_to_json_file(self, temp_home, temp_preferences_file, existing_store):
        preferences.set_store_path(existing_store)

        with open(temp_preferences_file, 'r') as f:
            data = json.load(f)

        assert data == {"store_path": str(existing_store.resolve())}

    def test_clear_keeps_other_saved_keys(self, temp_home, temp_preferences_file, existing_store):
        temp_preferences_file.parent.mkdir(parents=True, exist_ok=True)
        temp_preferences_file.write_text(json.dumps({"other": 1}))
        preferences.set_store_path(existing_store)

        preferences.clear_store_path()

        assert json.loads(temp_preferences_file.read_text()) == {"other": 1}

    def test_corrupt_preferences_file_treated_as_empty(self, temp_home, temp_preferences_file):
        temp_preferences_file.parent.mkdir(parents=True, exist_ok=True)
        temp_preferences_file.write_text("{not json")

        assert preferences.get_store_path() is None

    def test_non_object_preferences_file_treated_as_empty(self, temp_home, temp_preferences_file):
        temp_preferences_file.parent.mkdir(parents=True, exist_ok=True)
        temp_preferences_file.write_text("[1, 2]")

        assert preferences.get_store_path() is None

    def test_non_string_store_path_ignored(self, temp_home, temp_preferences_file):
        temp_preferences_file.parent.mkdir(parents=True, exist_ok=True)
        temp_preferences_file.write_text(json.dumps({"store_path": 42}))

        assert preferences.get_store_path() is None


class TestStorePathResolution:
    """Test suite for resolve_store_path()."""

    def test_default_location(self, temp_home, default_store):
        path, source = config_loader.resolve_store_path()

        assert path == default_store
        assert source == "default"

    def test_preference_used_when_file_exists(self, temp_home, existing_store):
        preferences.set_store_path(existing_store)

        path, source = config_loader.resolve_store_path()

        assert path == existing_store.resolve()
        assert source == "preference"

    def test_preference_with_nonexistent_path_falls_back(self, temp_home, existing_store, default_store):
        """Test a preferred store that was deleted after it was set falls back to the default."""
        preferences.set_store_path(existing_store)
        existing_store.unlink()

        path, source = config_loader.resolve_store_path()

        assert path == default_store
        assert source == "default"

    def test_env_var_overrides_preference(self, temp_home, existing_store, tmp_path, monkeypatch):
        preferences.set_store_path(existing_store)
        env_store = tmp_path / "env.yaml"
        monkeypatch.setenv("PASSPORT_STORE", str(env_store))

        path, source = config_loader.resolve_store_path()

        assert path == env_store
        assert source == "env"

    def test_preference_change_reflected_immediately(self, temp_home, existing_store, default_store):
        """Test the path is resolved on every call, not cached."""
        preferences.set_store_path(existing_store)
        assert config_loader.resolve_store_path()[0] == existing_store.resolve()

        preferences.clear_store_path()
        assert config_loader.resolve_store_path()[0] == default_store


class TestStoreFile:
    """Test suite for creating, loading and saving the store."""

    def test_ensure_creates_empty_store(self, store_file):
        config_loader.ensure_store_file(store_file)

        assert yaml.safe_load(store_file.read_text()) == {"secrets": [], "workspaces": []}

    def test_ensure_leaves_existing_store_alone(self, existing_store):
        before = existing_store.read_text()

        config_loader.ensure_store_file(existing_store)

        assert existing_store.read_text() == before

    def test_load_existing_store(self, existing_store):
        store = config_loader.load_store(existing_store)

        assert store.get_secret("token").value == "abc"

    def test_save_then_load(self, store_file, crypto):
        store = Store()
        store.add_secret("token", "abc", True, crypto)
        store.add_workspace("api", "/srv/api").add_script("up", "docker compose up")
        store_file.parent.mkdir(parents=True)

        config_loader.save_store(store, store_file)

        assert config_loader.load_store(store_file) == store

    def test_save_preserves_insertion_order(self, store_file, crypto):
        store = Store()
        for name in ("zeta", "alpha", "mid"):
            store.add_secret(name, "v", False, crypto)
        store_file.parent.mkdir(parents=True)

        config_loader.save_store(store, store_file)

        data = yaml.safe_load(store_file.read_text())
        assert [s["name"] for s in data["secrets"]] == ["zeta", "alpha", "mid"]

    def test_save_drops_unknown_fields(self, tmp_path):
        path = tmp_path / "store.yaml"
        path.write_text("secrets:\n- name: a\n  value: b\n  secure: false\n  note: x\nextra: 1\n")

        config_loader.save_store(config_loader.load_store(path), path)

        data = yaml.safe_load(path.read_text())
        assert data == {"secrets": [{"name": "a", "value": "b", "secure": False}], "workspaces": []}

    def test_empty_store_file(self, tmp_path):
        path = tmp_path / "store.yaml"
        path.write_text("")

        assert config_loader.load_store(path) == Store()

    def test_invalid_yaml_store(self, tmp_path):
        path = tmp_path / "store.yaml"
        path.write_text("invalid: yaml: content: [")

        with pytest.raises(ConfigError) as exc_info:
            config_loader.load_store(path)

        assert "parse" in str(exc_info.value).lower()

    def test_missing_store_file(self, tmp_path):
        with pytest.raises(ConfigError) as exc_info:
            config_loader.load_store(tmp_path / "missing.yaml")

        assert "not found" in str(exc_info.value)

    def test_open_store_uses_resolved_path(self, temp_home, default_store):
        store, path = config_loader.open_store()

        assert path == default_store
        assert default_store.exists()
        assert store == Store()


class TestFilesys:
    """Test suite for filesystem helpers."""

    def test_write_read_and_exists(self, tmp_path):
        path = tmp_path / "data.bin"
        assert filesys.file_exists(path) is False

        filesys.write(path, b"one")
        filesys.write(path, b"two")

        assert filesys.file_exists(path) is True
        assert filesys.read(path) == b"two"

    def test_ensure_directory_creates_parents(self, tmp_path):
        target = tmp_path / "a" / "b" / "c"

        filesys.ensure_directory(target)
        filesys.ensure_directory(target)

        assert target.is_dir()

    @pytest.mark.parametrize("func, args", [
        (filesys.ensure_directory, ()),
        (filesys.write, (b"data",)),
        (filesys.read, ()),
        (filesys.file_exists, ()),
    ])
    def test_empty_path_rejected(self, func, args):
        with pytest.raises(PathEmptyError):
            func("  ", *args)


class TestCLICommands:
    """Test suite for config CLI commands."""

    def test_config_set_path_validates_file_exists(self, temp_home, tmp_path):
        from passport_cli.cli.main import cmd_config_set_path

        args = Namespace(path=str(tmp_path / "nonexistent.yaml"))

        with pytest.raises(SystemExit) as exc_info:
            cmd_config_set_path(args)

        assert exc_info.value.code == 1

    def test_config_set_path_rejects_directory(self, temp_home, tmp_path):
        from passport_cli.cli.main import cmd_config_set_path

        with pytest.raises(SystemExit) as exc_info:
            cmd_config_set_path(Namespace(path=str(tmp_path)))

        assert exc_info.value.code == 1

    def test_config_set_path_stores_absolute_path(self, temp_home, existing_store, capsys):
        from passport_cli.cli.main import cmd_config_set_path

        cmd_config_set_path(Namespace(path=str(existing_store)))

        assert preferences.get_store_path() == existing_store.resolve()
        assert str(existing_store.resolve()) in capsys.readouterr().out

    def test_config_set_path_failure_keeps_previous_preference(self, temp_home, existing_store, tmp_path):
        from passport_cli.cli.main import cmd_config_set_path

        preferences.set_store_path(existing_store)

        with pytest.raises(SystemExit):
            cmd_config_set_path(Namespace(path=str(tmp_path / "nonexistent.yaml")))

        assert preferences.get_store_path() == existing_store.resolve()

    def test_config_show_with_preference(self, temp_home, existing_store, capsys):
        from passport_cli.cli.main import cmd_config_show

        preferences.set_store_path(existing_store)

        cmd_config_show(Namespace())

        captured = capsys.readouterr()
        assert str(existing_store.resolve()) in captured.out
        assert "preference" in captured.out.lower()

    def test_config_show_without_preference(self, temp_home, default_store, capsys):
        from passport_cli.cli.main import cmd_config_show

        cmd_config_show(Namespace())

        captured = capsys.readouterr()
        assert str(default_store) in captured.out
        assert "default" in captured.out.lower()

    def test_config_clear_removes_preference(self, temp_home, existing_store, capsys):
        from passport_cli.cli.main import cmd_config_clear

        preferences.set_store_path(existing_store)

        cmd_config_clear(Namespace())

        assert preferences.get_store_path() is None
        assert "cleared" in capsys.readouterr().out.lower()

    def test_config_clear_without_preference(self, temp_home, default_store, capsys):
        from passport_cli.cli.main import cmd_config_clear

        cmd_config_clear(Namespace())

        out = capsys.readouterr().out
        assert "No store path preference set" in out
        assert str(default_store) in out
