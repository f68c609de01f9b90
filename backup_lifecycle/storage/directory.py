"""Directory store — mirrors the remote key layout under a mounted folder."""

from __future__ import annotations

import hashlib
import shutil
from pathlib import Path

from loguru import logger

from backup_lifecycle.storage.base import RemoteStore


class DirectoryStore(RemoteStore):
    """
    Store backups under ``{root}/<category>/<date>/<filename>``.

    Meant for NAS or cloud-sync folders. Storage classes do not apply and
    are ignored. A copy only counts as persisted when its hash matches.
    """

    def __init__(self, root: Path, prefix: str = "") -> None:
        super().__init__(prefix)
        self._root = root

    @property
    def name(self) -> str:
        return "directory"

    @property
    def root(self) -> Path:
        return self._root

    def describe(self, key: str) -> str:
        return str(self._root / key)

    @staticmethod
    def _file_hash(path: Path) -> str:
        """Compute SHA-256 hash of a file."""
        h = hashlib.sha256()
        with open(path, "rb") as f:
            for chunk in iter(lambda: f.read(8192), b""):
                h.update(chunk)
        return h.hexdigest()

    def _put(self, local_path: Path, key: str, storage_class: str) -> bool:
        target = self._root / key
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(local_path, target)
            if self._file_hash(local_path) != self._file_hash(target):
                logger.error(f"Copy of {local_path.name} to {target} does not match the source")
                return False
        except OSError as e:
            logger.error(f"Copy of {local_path.name} to {target} failed: {e}")
            return False
        return True
