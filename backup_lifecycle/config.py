"""Lifecycle configuration — JSON file over built-in defaults, then environment overrides."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from loguru import logger

_instance: "Config | None" = None

WEEKLY_FULL_DIRNAME = "WEEKLYFULL"
STAGING_DIRNAME = "uploadtoaws"

CONFIG_ENV_VAR = "BACKUP_LIFECYCLE_CONFIG"

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")

# Environment variable → dot-separated config key
_ENV_OVERRIDES: dict[str, str] = {
    "BACKUP_DIR": "backup_dir",
    "BACKUP_RETENTION_DAYS": "retention_days",
    "RENAME_AFTER_DAYS": "rename_after_days",
    "COPY_TO_S3_DAYS": "copy_to_s3_days",
    "BACKUP_S3_BUCKET": "remote.bucket",
    "BACKUP_AWS_PROFILE": "remote.profile",
    "BACKUP_AWS_REGION": "remote.region",
    "BACKUP_LOG_DIR": "log_dir",
}


class ConfigError(Exception):
    """Raised when required configuration is missing or invalid."""


def get_config(config_path: Path | None = None) -> Config:
    """Module-level factory — single global Config instance."""
    global _instance
    if _instance is None:
        if config_path is None and os.environ.get(CONFIG_ENV_VAR):
            config_path = Path(os.environ[CONFIG_ENV_VAR])
        _instance = Config(config_path)
    return _instance


def reset_config() -> None:
    """Reset the global config instance (for testing)."""
    global _instance
    _instance = None


@dataclass(frozen=True)
class RemoteSettings:
    kind: str
    bucket: str
    profile: str
    region: str
    prefix: str
    storage_class: str
    target_dir: Path | None


@dataclass(frozen=True)
class LifecycleSettings:
    """Immutable snapshot of everything a transition needs."""

    backup_dir: Path
    retention_days: int
    rename_after_days: int
    copy_to_s3_days: int
    remote: RemoteSettings
    dry_run: bool = False

    @property
    def main_dir(self) -> Path:
        return self.backup_dir

    @property
    def weekly_full_dir(self) -> Path:
        return self.backup_dir / WEEKLY_FULL_DIRNAME

    @property
    def staging_dir(self) -> Path:
        return self.backup_dir / STAGING_DIRNAME

    @property
    def copy_window_minutes(self) -> int:
        return self.copy_to_s3_days * 24 * 60


class Config:
    """JSON-based lifecycle configuration with environment overrides."""

    _DEFAULTS: dict[str, Any] = {
        "backup_dir": "/backups",
        "retention_days": 8,
        "rename_after_days": 6,
        "copy_to_s3_days": 1,
        "dry_run": False,
        "log_dir": "",
        "log_level": "INFO",
        # Remote store
        "remote": {
            "kind": "s3",
            "bucket": "pacemisbackups",
            "profile": "miss3backup",
            "region": "",
            "prefix": "",
            "storage_class": "INTELLIGENT_TIERING",
            "target_dir": "",
        },
    }

    def __init__(
        self,
        config_path: Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._data: dict[str, Any] = {}
        self._path = config_path
        self._environ = os.environ if environ is None else environ
        self._load()

    def _load(self) -> None:
        """Load config from disk, merging with defaults, then apply the environment."""
        self._data = json.loads(json.dumps(self._DEFAULTS))  # deep copy defaults
        if self._path is not None and self._path.exists():
            try:
                with open(self._path, encoding="utf-8") as f:
                    user_data = json.load(f)
                self._deep_merge(self._data, user_data)
            except (json.JSONDecodeError, OSError) as e:
                logger.warning(f"Failed to load config {self._path}, using defaults: {e}")
        elif self._path is not None:
            logger.warning(f"Config file {self._path} not found, using defaults")

        for env_name, key in _ENV_OVERRIDES.items():
            value = self._environ.get(env_name)
            if value:
                self.set(key, value)

    def _deep_merge(self, base: dict, override: dict) -> None:
        """Recursively merge override into base."""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    # ── Generic access ──

    def get(self, key: str, default: Any = None) -> Any:
        """Get a config value by dot-separated key path."""
        parts = key.split(".")
        node = self._data
        for part in parts:
            if isinstance(node, dict) and part in node:
                node = node[part]
            else:
                return default
        return node

    def set(self, key: str, value: Any) -> None:
        """Set a config value by dot-separated key path (in memory only)."""
        parts = key.split(".")
        node = self._data
        for part in parts[:-1]:
            if part not in node or not isinstance(node[part], dict):
                node[part] = {}
            node = node[part]
        node[parts[-1]] = value

    def _days(self, key: str) -> int:
        raw = self.get(key)
        try:
            days = int(raw)
        except (TypeError, ValueError):
            raise ConfigError(f"{key} must be an integer number of days, got {raw!r}") from None
        if days < 0:
            raise ConfigError(f"{key} must not be negative, got {days}")
        return days

    # ── Typed properties ──

    @property
    def backup_dir(self) -> Path:
        raw = self.get("backup_dir", "")
        if not raw:
            raise ConfigError("backup_dir is not configured")
        return Path(raw)

    @property
    def retention_days(self) -> int:
        return self._days("retention_days")

    @property
    def rename_after_days(self) -> int:
        return self._days("rename_after_days")

    @property
    def copy_to_s3_days(self) -> int:
        return self._days("copy_to_s3_days")

    @property
    def dry_run(self) -> bool:
        return bool(self.get("dry_run", False))

    @property
    def log_dir(self) -> Path | None:
        raw = self.get("log_dir", "")
        return Path(raw) if raw else None

    @property
    def log_level(self) -> str:
        level = str(self.get("log_level", "INFO")).upper()
        if level not in LOG_LEVELS:
            raise ConfigError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {level!r}")
        return level

    @property
    def remote(self) -> RemoteSettings:
        raw = self.get("remote", {})
        if not isinstance(raw, dict):
            raise ConfigError(f"remote must be a JSON object, got {raw!r}")
        kind = str(raw.get("kind", "s3")).lower()
        target_dir = raw.get("target_dir", "")
        if kind not in ("s3", "directory"):
            raise ConfigError(f"remote.kind must be 's3' or 'directory', got {kind!r}")
        if kind == "s3" and not raw.get("bucket"):
            raise ConfigError("remote.bucket is required for the s3 store")
        if kind == "directory" and not target_dir:
            raise ConfigError("remote.target_dir is required for the directory store")
        return RemoteSettings(
            kind=kind,
            bucket=raw.get("bucket", ""),
            profile=raw.get("profile", ""),
            region=raw.get("region", ""),
            prefix=raw.get("prefix", ""),
            storage_class=raw.get("storage_class", "") or "INTELLIGENT_TIERING",
            target_dir=Path(target_dir) if target_dir else None,
        )

    def settings(self) -> LifecycleSettings:
        """Freeze the current values into the settings threaded through a run."""
        return LifecycleSettings(
            backup_dir=self.backup_dir,
            retention_days=self.retention_days,
            rename_after_days=self.rename_after_days,
            copy_to_s3_days=self.copy_to_s3_days,
            remote=self.remote,
            dry_run=self.dry_run,
        )
