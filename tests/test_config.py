"""Tests for the Config system."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from backup_lifecycle.config import Config, ConfigError, get_config, reset_config


@pytest.fixture(autouse=True)
def _clean_config():
    reset_config()
    yield
    reset_config()


def _write(path: Path, data: dict) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestDefaults:
    def test_default_values(self) -> None:
        config = Config(environ={})
        assert config.backup_dir == Path("/backups")
        assert config.retention_days == 8
        assert config.rename_after_days == 6
        assert config.copy_to_s3_days == 1
        assert config.remote.bucket == "pacemisbackups"
        assert config.remote.profile == "miss3backup"
        assert config.remote.storage_class == "INTELLIGENT_TIERING"

    def test_settings_layout(self) -> None:
        settings = Config(environ={}).settings()
        assert settings.weekly_full_dir == Path("/backups/WEEKLYFULL")
        assert settings.staging_dir == Path("/backups/uploadtoaws")
        assert settings.copy_window_minutes == 1440

    def test_settings_are_frozen(self) -> None:
        settings = Config(environ={}).settings()
        with pytest.raises(AttributeError):
            settings.retention_days = 1  # type: ignore[misc]


class TestFileAndEnvironment:
    def test_file_merged_over_defaults(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "c.json", {"retention_days": 15, "remote": {"bucket": "other"}})
        config = Config(path, environ={})
        assert config.retention_days == 15
        assert config.remote.bucket == "other"
        assert config.remote.profile == "miss3backup"

    def test_environment_wins_over_file(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "c.json", {"backup_dir": "/from/file"})
        env = {"BACKUP_DIR": "/from/env", "RENAME_AFTER_DAYS": "3", "BACKUP_AWS_PROFILE": "ops"}
        config = Config(path, environ=env)
        assert config.backup_dir == Path("/from/env")
        assert config.rename_after_days == 3
        assert config.remote.profile == "ops"

    def test_malformed_file_uses_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "c.json"
        path.write_text("{not json", encoding="utf-8")
        assert Config(path, environ={}).retention_days == 8

    def test_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        assert Config(tmp_path / "absent.json", environ={}).copy_to_s3_days == 1

    def test_dot_path_get(self) -> None:
        config = Config(environ={})
        assert config.get("remote.kind") == "s3"
        assert config.get("remote.missing", "x") == "x"

    def test_get_config_reads_env_path(self, tmp_path: Path, monkeypatch) -> None:
        path = _write(tmp_path / "c.json", {"retention_days": 30})
        monkeypatch.setenv("BACKUP_LIFECYCLE_CONFIG", str(path))
        monkeypatch.delenv("BACKUP_RETENTION_DAYS", raising=False)
        assert get_config().retention_days == 30


class TestValidation:
    def test_non_integer_days(self) -> None:
        config = Config(environ={"BACKUP_RETENTION_DAYS": "eight"})
        with pytest.raises(ConfigError):
            config.settings()

    def test_negative_days(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "c.json", {"copy_to_s3_days": -1})
        with pytest.raises(ConfigError):
            Config(path, environ={}).settings()

    def test_unknown_store_kind(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "c.json", {"remote": {"kind": "ftp"}})
        with pytest.raises(ConfigError):
            Config(path, environ={}).settings()

    def test_directory_store_needs_target(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "c.json", {"remote": {"kind": "directory"}})
        with pytest.raises(ConfigError):
            Config(path, environ={}).settings()

    def test_directory_store(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "c.json", {"remote": {"kind": "directory", "target_dir": "/mnt/nas"}})
        remote = Config(path, environ={}).settings().remote
        assert remote.kind == "directory"
        assert remote.target_dir == Path("/mnt/nas")

    def test_unknown_log_level(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "c.json", {"log_level": "verbose"})
        with pytest.raises(ConfigError):
            Config(path, environ={}).log_level

    def test_log_level_case_insensitive(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "c.json", {"log_level": "debug"})
        assert Config(path, environ={}).log_level == "DEBUG"

    def test_remote_must_be_object(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "c.json", {"remote": None})
        with pytest.raises(ConfigError):
            Config(path, environ={}).settings()
