"""Filename classifier — maps a backup filename to its lifecycle kind."""

from __future__ import annotations

import re

from backup_lifecycle.models.backup_file import BackupName, FileKind

EOM_MARKER = "-eom"

# Filename grammars; \Z rather than $, which also matches before a trailing newline
_WEEKDAY_PATTERN = re.compile(
    r"^(monday|tuesday|wednesday|thursday|friday|saturday|sunday)(-[0-9]+)?\Z"
)
_DATED_DAILY_PATTERN = re.compile(r"^([0-9]{4}-[0-9]{2}-[0-9]{2})(-[0-9]+)?\Z")
_ROTATING_FULL_PATTERN = re.compile(r"^(fullbackup([0-9]+))(-[0-9]+)?\Z")
_DATED_FULL_PATTERN = re.compile(
    r"^([0-9]{4}-[0-9]{2}-[0-9]{2})-fullbackup([0-9]+)(-[0-9]+)?\Z"
)
DATE_PREFIX_PATTERN = re.compile(r"^([0-9]{4}-[0-9]{2}-[0-9]{2})")


def is_protected(filename: str) -> bool:
    """End-of-month files are never removed by retention."""
    return filename.endswith(EOM_MARKER)


def classify(filename: str) -> BackupName:
    """
    Classify a base filename.

    A trailing ``-eom`` marker is set aside before matching, so
    ``monday-eom`` is a protected RotatingWeekday and ``notes-eom`` is
    still Invalid. The four grammars are mutually exclusive.
    """
    protected = is_protected(filename)
    stem = filename[: -len(EOM_MARKER)] if protected else filename

    m = _WEEKDAY_PATTERN.match(stem)
    if m:
        return BackupName(
            name=filename,
            kind=FileKind.ROTATING_WEEKDAY,
            slot=m.group(1),
            suffix=m.group(2) or "",
            protected=protected,
        )

    m = _DATED_DAILY_PATTERN.match(stem)
    if m:
        return BackupName(
            name=filename,
            kind=FileKind.DATED_DAILY,
            date=m.group(1),
            suffix=m.group(2) or "",
            protected=protected,
        )

    m = _ROTATING_FULL_PATTERN.match(stem)
    if m:
        return BackupName(
            name=filename,
            kind=FileKind.ROTATING_FULL,
            slot=m.group(1),
            full_index=int(m.group(2)),
            suffix=m.group(3) or "",
            protected=protected,
        )

    m = _DATED_FULL_PATTERN.match(stem)
    if m:
        return BackupName(
            name=filename,
            kind=FileKind.DATED_FULL,
            date=m.group(1),
            full_index=int(m.group(2)),
            suffix=m.group(3) or "",
            protected=protected,
        )

    return BackupName(name=filename, kind=FileKind.INVALID, protected=protected)


def is_valid(filename: str) -> bool:
    return classify(filename).is_valid


def leading_date(filename: str) -> str:
    """Return the ``YYYY-MM-DD`` prefix of a filename, or ``""``."""
    m = DATE_PREFIX_PATTERN.match(filename)
    return m.group(1) if m else ""
