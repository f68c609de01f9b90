"""Shared fixtures: a temporary backup tree and settings pointing at it."""

from __future__ import annotations

import os
import time
from pathlib import Path
from typing import Callable

import pytest

from backup_lifecycle.config import LifecycleSettings, RemoteSettings

DAY = 24 * 60 * 60


@pytest.fixture
def backup_root(tmp_path: Path) -> Path:
    root = tmp_path / "backups"
    root.mkdir()
    return root


@pytest.fixture
def make_settings(backup_root: Path, tmp_path: Path) -> Callable[..., LifecycleSettings]:
    def _make(**overrides) -> LifecycleSettings:
        values = {
            "backup_dir": backup_root,
            "retention_days": 8,
            "rename_after_days": 6,
            "copy_to_s3_days": 1,
            "remote": RemoteSettings(
                kind="directory",
                bucket="",
                profile="",
                region="",
                prefix="",
                storage_class="INTELLIGENT_TIERING",
                target_dir=tmp_path / "remote",
            ),
            "dry_run": False,
        }
        values.update(overrides)
        return LifecycleSettings(**values)

    return _make


@pytest.fixture
def settings(make_settings) -> LifecycleSettings:
    return make_settings()


@pytest.fixture
def make_backup() -> Callable[..., Path]:
    """Create a file whose mtime is ``days_ago`` days in the past."""

    def _make(path: Path, days_ago: float = 0.0, content: bytes | None = None) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content if content is not None else f"backup {path.name}".encode())
        ts = time.time() - days_ago * DAY
        os.utime(path, (ts, ts))
        return path

    return _make
