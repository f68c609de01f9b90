"""Staging transition — copies recent backups into the upload queue under dated names."""

from __future__ import annotations

import shutil
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from backup_lifecycle.core.classifier import classify
from backup_lifecycle.core.date_resolver import resolve_slot_date
from backup_lifecycle.models.backup_file import FileKind, TransitionResult
from backup_lifecycle.utils import age_seconds, format_size, list_files

if TYPE_CHECKING:
    from backup_lifecycle.config import LifecycleSettings


class StagingTransition:
    """
    Copy files modified within the last ``copy_to_s3_days`` into the staging area.

    Main area: weekday files become ``<slot-date><tail>``, dated daily
    files keep their name. Weekly-full area: ``fullbackupN[-M]`` becomes
    ``<slot-date>-fullbackupN[-M]``. Originals are only read.
    """

    name = "staging"

    def __init__(self, settings: LifecycleSettings) -> None:
        self._settings = settings

    def run(self, now: datetime | None = None) -> TransitionResult:
        result = TransitionResult(self.name)
        now = now or datetime.now()
        window = self._settings.copy_window_minutes * 60

        for path in self._recent(self._settings.main_dir, now, window):
            new_name = self._main_area_name(path)
            if new_name:
                self._stage(path, new_name, result)

        weekly_dir = self._settings.weekly_full_dir
        if weekly_dir.is_dir():
            for path in self._recent(weekly_dir, now, window):
                new_name = self._weekly_area_name(path)
                if new_name:
                    self._stage(path, new_name, result)

        return result

    @staticmethod
    def _recent(directory: Path, now: datetime, window: float) -> list[Path]:
        recent: list[Path] = []
        for path in list_files(directory):
            try:
                if age_seconds(path, now) < window:
                    recent.append(path)
            except OSError as e:
                logger.warning(f"Cannot stat {path}: {e}")
        return recent

    @staticmethod
    def _main_area_name(path: Path) -> str | None:
        parsed = classify(path.name)
        if parsed.kind is FileKind.ROTATING_WEEKDAY:
            slot_date = resolve_slot_date(path.parent, parsed.slot)
            if slot_date is None:
                logger.debug(f"{path.name}: no {parsed.slot} file to date it from, skipping")
                return None
            return f"{slot_date.isoformat()}{parsed.tail}"
        if parsed.kind is FileKind.DATED_DAILY:
            return path.name
        logger.debug(f"Ignoring {path.name} ({parsed.kind}) in main area")
        return None

    @staticmethod
    def _weekly_area_name(path: Path) -> str | None:
        parsed = classify(path.name)
        if parsed.kind is not FileKind.ROTATING_FULL:
            logger.debug(f"Ignoring {path.name} ({parsed.kind}) in weekly full area")
            return None
        slot_date = resolve_slot_date(path.parent, parsed.slot)
        if slot_date is None:
            logger.debug(f"{path.name}: no {parsed.slot} file to date it from, skipping")
            return None
        return f"{slot_date.isoformat()}-{path.name}"

    def _stage(self, source: Path, new_name: str, result: TransitionResult) -> None:
        staging_dir = self._settings.staging_dir
        target = staging_dir / new_name
        if target.exists():
            msg = f"{new_name} already exists in {staging_dir}, skipping"
            logger.info(msg)
            result.skipped.append(msg)
            return

        if self._settings.dry_run:
            logger.info(f"[dry-run] Would copy {source} → {target}")
            result.done.append(new_name)
            return

        # Copy under a name no grammar matches, so a crash never leaves a
        # truncated file that upload would pick up.
        partial = staging_dir / f".{new_name}.part"
        try:
            staging_dir.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source, partial)
            partial.rename(target)
        except OSError as e:
            partial.unlink(missing_ok=True)
            msg = f"Failed to copy {source} → {target}: {e}"
            logger.error(msg)
            result.errors.append(msg)
            return

        logger.info(f"Copied {source} → {target} ({format_size(target.stat().st_size)})")
        result.done.append(new_name)
