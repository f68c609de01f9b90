"""Abstract base class for remote backup stores."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from loguru import logger

from backup_lifecycle.models.backup_file import RemoteCategory


class RemoteStore(ABC):
    """A destination that takes ownership of staged backup files."""

    def __init__(self, prefix: str = "") -> None:
        self._prefix = prefix.strip("/")

    @property
    @abstractmethod
    def name(self) -> str:
        """Short identifier used in log lines (e.g. 's3', 'directory')."""
        ...

    def key_for(self, category: RemoteCategory, date: str, filename: str) -> str:
        """``[prefix/]<category>/<date>/<filename>``"""
        key = f"{category}/{date}/{filename}"
        return f"{self._prefix}/{key}" if self._prefix else key

    def describe(self, key: str) -> str:
        """Human-readable location of ``key``."""
        return key

    def move(
        self,
        local_path: Path,
        category: RemoteCategory,
        date: str,
        filename: str,
        storage_class: str,
    ) -> bool:
        """
        Persist ``local_path`` remotely and remove the local copy.

        Returns False on any transfer failure; the local file is then left
        alone. Once the object is stored the result is True even if the
        local copy cannot be removed; the caller sees it still on disk.
        """
        key = self.key_for(category, date, filename)
        if not self._put(local_path, key, storage_class):
            return False
        try:
            local_path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Stored {filename} at {self.describe(key)}, staged copy not removed: {e}")
        return True

    @abstractmethod
    def _put(self, local_path: Path, key: str, storage_class: str) -> bool:
        """Copy ``local_path`` to ``key``. Must not raise for transfer failures."""
        ...
