"""Date resolver — canonical calendar date of a backup file."""

from __future__ import annotations

from datetime import date
from pathlib import Path

from loguru import logger

from backup_lifecycle.core.classifier import classify
from backup_lifecycle.models.backup_file import BackupName
from backup_lifecycle.utils import mtime_date


def resolve_slot_date(directory: Path, slot: str) -> date | None:
    """
    Date of a rotation slot: the mtime date of its unsuffixed file.

    Every file sharing the slot (``monday``, ``monday-1``, ``monday-eom``)
    takes this date, whatever its own timestamp. Returns None when the
    unsuffixed file is missing or unreadable; callers skip such files
    until a later run.
    """
    base = directory / slot
    try:
        if not base.is_file():
            return None
        return mtime_date(base)
    except OSError as e:
        logger.warning(f"Cannot read slot file {base}: {e}")
        return None


def resolve(path: Path, parsed: BackupName | None = None) -> date | None:
    """Canonical date of ``path``; None if it cannot be resolved (yet)."""
    parsed = parsed or classify(path.name)

    if parsed.kind.is_dated:
        try:
            return date.fromisoformat(parsed.date)
        except ValueError:
            logger.warning(f"{path.name}: embedded date {parsed.date} is not a calendar date")
            return None

    if parsed.kind.is_rotating:
        return resolve_slot_date(path.parent, parsed.slot)

    return None
