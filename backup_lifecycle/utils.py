"""Shared filesystem helpers."""

from __future__ import annotations

from datetime import date, datetime
from pathlib import Path

SECONDS_PER_DAY = 24 * 60 * 60


def format_size(size_bytes: int) -> str:
    """Format byte count to human-readable string."""
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / (1024 * 1024):.1f} MB"
    else:
        return f"{size_bytes / (1024 * 1024 * 1024):.2f} GB"


def list_files(directory: Path) -> list[Path]:
    """Regular files directly inside ``directory``, sorted by name. Missing dir → []."""
    if not directory.is_dir():
        return []
    return sorted(p for p in directory.iterdir() if p.is_file() and not p.is_symlink())


def mtime_date(path: Path) -> date:
    """Local calendar date of the file's modification time."""
    return datetime.fromtimestamp(path.stat().st_mtime).date()


def age_seconds(path: Path, now: datetime) -> float:
    return now.timestamp() - path.stat().st_mtime


def start_of_day(day: date) -> datetime:
    """Local midnight of ``day`` as a naive datetime."""
    return datetime.combine(day, datetime.min.time())
