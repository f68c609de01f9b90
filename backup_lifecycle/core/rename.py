"""Rename transition — turns aged weekday backups into permanent dated names."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from loguru import logger

from backup_lifecycle.core.classifier import classify
from backup_lifecycle.core.date_resolver import resolve_slot_date
from backup_lifecycle.models.backup_file import FileKind, TransitionResult, Weekday
from backup_lifecycle.utils import list_files, start_of_day

if TYPE_CHECKING:
    from backup_lifecycle.config import LifecycleSettings


class RenameTransition:
    """
    Rename ``<weekday>[-N]`` files in the main area to ``<date>[-N]``.

    A slot is renamed as a whole once the date of its unsuffixed file is
    older than ``rename_after_days``. ``Path.rename`` keeps the mtime, so
    later retention still sees the original age.
    """

    name = "rename"

    def __init__(self, settings: LifecycleSettings) -> None:
        self._settings = settings

    def run(self, now: datetime | None = None) -> TransitionResult:
        result = TransitionResult(self.name)
        now = now or datetime.now()
        cutoff = now - timedelta(days=self._settings.rename_after_days)
        main_dir = self._settings.main_dir

        files = list_files(main_dir)
        for weekday in Weekday:
            slot_date = resolve_slot_date(main_dir, weekday.value)
            if slot_date is None:
                continue
            if not start_of_day(slot_date) < cutoff:
                logger.debug(f"{weekday}: slot date {slot_date} is newer than the cutoff")
                continue

            for path in files:
                parsed = classify(path.name)
                if parsed.kind is not FileKind.ROTATING_WEEKDAY or parsed.slot != weekday:
                    continue

                new_name = f"{slot_date.isoformat()}{parsed.tail}"
                target = main_dir / new_name
                if target.exists():
                    msg = f"{path.name}: {new_name} already exists, leaving it in place"
                    logger.warning(msg)
                    result.skipped.append(msg)
                    continue

                if self._settings.dry_run:
                    logger.info(f"[dry-run] Would rename {path} → {new_name}")
                    result.done.append(new_name)
                    continue

                try:
                    path.rename(target)
                except OSError as e:
                    msg = f"Failed to rename {path} → {new_name}: {e}"
                    logger.error(msg)
                    result.errors.append(msg)
                    continue

                logger.info(f"Renamed {path} → {new_name}")
                result.done.append(new_name)

        return result
