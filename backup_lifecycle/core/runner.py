"""Lifecycle runner — executes the four transitions in their fixed order."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Iterable

from loguru import logger

from backup_lifecycle.core.rename import RenameTransition
from backup_lifecycle.core.retention import RetentionTransition
from backup_lifecycle.core.staging import StagingTransition
from backup_lifecycle.core.upload import UploadTransition
from backup_lifecycle.models.backup_file import RunReport

if TYPE_CHECKING:
    from backup_lifecycle.config import LifecycleSettings
    from backup_lifecycle.storage.base import RemoteStore

# Execution order; rename must see slots before staging copies them, and
# retention must run last so nothing still queued is deleted first.
PHASES: tuple[str, ...] = ("rename", "staging", "upload", "retention")


class LifecycleRunner:
    """One invocation: Rename → Staging → Upload → Retention."""

    def __init__(self, settings: LifecycleSettings, store: RemoteStore) -> None:
        self._settings = settings
        self._store = store
        self._rename = RenameTransition(settings)
        self._staging = StagingTransition(settings)
        self._upload = UploadTransition(settings, store)
        self._retention = RetentionTransition(settings)

    def _banner(self, text: str) -> None:
        stamp = datetime.now().strftime("%m/%d/%y @ %H:%M:%S")
        logger.info(f"---=== {stamp} - {text} ===---")

    def run(self, phases: Iterable[str] | None = None) -> RunReport:
        """
        Run the selected phases (all by default), always in ``PHASES`` order.

        Per-file failures are collected in the report; only a missing
        backup directory stops the run.
        """
        selected = set(PHASES if phases is None else phases)
        unknown = selected - set(PHASES)
        if unknown:
            raise ValueError(f"Unknown phase(s): {', '.join(sorted(unknown))}")

        report = RunReport()
        settings = self._settings

        if not settings.main_dir.is_dir():
            report.aborted = f"Backup directory {settings.main_dir} does not exist"
            logger.error(report.aborted)
            return report

        if not settings.dry_run:
            try:
                settings.staging_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                logger.error(f"Cannot create staging directory {settings.staging_dir}: {e}")

        if "rename" in selected:
            self._banner(f"Renaming backups older than {settings.rename_after_days} days...")
            report.results.append(self._rename.run())

        if "staging" in selected:
            self._banner("Copying recent backups for upload...")
            report.results.append(self._staging.run())

        if "upload" in selected:
            self._banner(f"Uploading backups to {self._store.name} storage...")
            report.results.append(self._upload.run())

        if "retention" in selected:
            self._banner(f"Deleting backups older than {settings.retention_days} days...")
            report.results.append(self._retention.run())

        for result in report.results:
            logger.info(result.summary())

        return report
