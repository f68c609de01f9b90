"""Remote store factory."""

from __future__ import annotations

from typing import TYPE_CHECKING

from backup_lifecycle.config import ConfigError
from backup_lifecycle.storage.base import RemoteStore

if TYPE_CHECKING:
    from backup_lifecycle.config import RemoteSettings


def create_store(remote: RemoteSettings) -> RemoteStore:
    """Build the store selected by ``remote.kind``."""
    if remote.kind == "directory":
        from backup_lifecycle.storage.directory import DirectoryStore

        if remote.target_dir is None:
            raise ConfigError("remote.target_dir is required for the directory store")
        return DirectoryStore(remote.target_dir, prefix=remote.prefix)

    from backup_lifecycle.storage.s3 import S3Store

    return S3Store(
        bucket=remote.bucket,
        profile=remote.profile,
        region=remote.region,
        prefix=remote.prefix,
    )


__all__ = ["RemoteStore", "create_store"]
