"""Upload transition — drains the staging area into the remote store."""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from backup_lifecycle.core.classifier import classify, leading_date
from backup_lifecycle.models.backup_file import FileKind, RemoteCategory, TransitionResult
from backup_lifecycle.utils import list_files, mtime_date

if TYPE_CHECKING:
    from pathlib import Path

    from backup_lifecycle.config import LifecycleSettings
    from backup_lifecycle.storage.base import RemoteStore


class UploadTransition:
    """
    Move every staged file to ``<category>/<date>/<filename>`` remotely.

    A failed move leaves the staged file where it is; the next scheduled
    run picks it up again. There is no retry within a run.
    """

    name = "upload"

    def __init__(self, settings: LifecycleSettings, store: RemoteStore) -> None:
        self._settings = settings
        self._store = store

    def run(self) -> TransitionResult:
        result = TransitionResult(self.name)

        for path in list_files(self._settings.staging_dir):
            parsed = classify(path.name)
            if not parsed.is_valid:
                logger.debug(f"Ignoring {path.name} in staging area")
                continue

            try:
                file_date = leading_date(path.name) or mtime_date(path).isoformat()
            except OSError as e:
                msg = f"Cannot stat {path}: {e}"
                logger.error(msg)
                result.errors.append(msg)
                continue
            category = (
                RemoteCategory.WEEKLY_FULL
                if parsed.kind is FileKind.DATED_FULL
                else RemoteCategory.DAILY
            )
            self._upload(path, category, file_date, result)

        return result

    def _upload(
        self, path: Path, category: RemoteCategory, file_date: str, result: TransitionResult
    ) -> None:
        storage_class = self._settings.remote.storage_class
        location = self._store.describe(self._store.key_for(category, file_date, path.name))

        if self._settings.dry_run:
            logger.info(f"[dry-run] Would move {path} → {location} ({storage_class})")
            result.done.append(path.name)
            return

        try:
            ok = self._store.move(path, category, file_date, path.name, storage_class)
        except OSError as e:
            logger.error(f"Moving {path.name} raised: {e}")
            ok = False

        if not ok:
            msg = f"Failed to upload {path} to {location}"
            logger.error(msg)
            result.errors.append(msg)
            return

        # Stores with copy semantics leave the local file behind
        if path.exists():
            try:
                path.unlink()
            except OSError as e:
                msg = f"Uploaded {path.name} but could not remove the staged copy: {e}"
                logger.error(msg)
                result.errors.append(msg)
                return

        logger.info(f"Uploaded {path.name} → {location}")
        result.done.append(path.name)
