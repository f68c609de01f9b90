"""Retention transition — deletes aged backups from the main area."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from loguru import logger

from backup_lifecycle.core.classifier import classify, is_protected
from backup_lifecycle.models.backup_file import TransitionResult
from backup_lifecycle.utils import SECONDS_PER_DAY, age_seconds, format_size, list_files

if TYPE_CHECKING:
    from backup_lifecycle.config import LifecycleSettings


class RetentionTransition:
    """
    Delete main-area backups older than ``retention_days``.

    Age is counted in whole days, truncated, so with the default of 8 a
    file goes once it is 9 full days old. ``-eom`` files are kept forever.
    Deletion is immediate; there is no trash.
    """

    name = "retention"

    def __init__(self, settings: LifecycleSettings) -> None:
        self._settings = settings

    def run(self, now: datetime | None = None) -> TransitionResult:
        result = TransitionResult(self.name)
        now = now or datetime.now()

        for path in list_files(self._settings.main_dir):
            if is_protected(path.name):
                continue
            try:
                age_days = int(age_seconds(path, now) // SECONDS_PER_DAY)
            except OSError as e:
                msg = f"Cannot stat {path}: {e}"
                logger.error(msg)
                result.errors.append(msg)
                continue
            if age_days <= self._settings.retention_days:
                continue
            if not classify(path.name).is_valid:
                logger.debug(f"Not deleting {path.name}: not a backup file name")
                continue

            if self._settings.dry_run:
                logger.info(f"[dry-run] Would delete {path} ({age_days} days old)")
                result.done.append(path.name)
                continue

            try:
                size = path.stat().st_size
                path.unlink()
            except OSError as e:
                msg = f"Failed to delete {path}: {e}"
                logger.error(msg)
                result.errors.append(msg)
                continue

            logger.info(f"Deleted {path} ({age_days} days old, {format_size(size)})")
            result.done.append(path.name)

        return result
