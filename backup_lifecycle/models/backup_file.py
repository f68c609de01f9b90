"""Backup file models — name classification results and per-run reports."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class FileKind(StrEnum):
    """Lifecycle kind derived from a backup filename."""

    ROTATING_WEEKDAY = "RotatingWeekday"
    DATED_DAILY = "DatedDaily"
    ROTATING_FULL = "RotatingFull"
    DATED_FULL = "DatedFull"
    INVALID = "Invalid"

    @property
    def is_rotating(self) -> bool:
        return self in (FileKind.ROTATING_WEEKDAY, FileKind.ROTATING_FULL)

    @property
    def is_dated(self) -> bool:
        return self in (FileKind.DATED_DAILY, FileKind.DATED_FULL)


class Weekday(StrEnum):
    """The seven rotation slots of the daily backup ring, Monday first."""

    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"


class RemoteCategory(StrEnum):
    """Top-level key prefix in the remote store."""

    DAILY = "Daily"
    WEEKLY_FULL = "WeeklyFull"


@dataclass(frozen=True)
class BackupName:
    """Parsed form of a backup filename."""

    name: str
    kind: FileKind
    slot: str = ""  # "monday" / "fullbackup2" for rotating kinds
    date: str = ""  # Embedded YYYY-MM-DD for dated kinds
    full_index: int | None = None  # N of fullbackupN
    suffix: str = ""  # "-3" disambiguator, "" if none
    protected: bool = False  # Name ends with the end-of-month marker

    @property
    def is_valid(self) -> bool:
        return self.kind is not FileKind.INVALID

    @property
    def tail(self) -> str:
        """Everything after the slot word, e.g. ``"-2"`` for ``monday-2``."""
        if not self.slot:
            return ""
        return self.name[len(self.slot):]


@dataclass
class TransitionResult:
    """Outcome of one transition over one directory scan."""

    transition: str
    done: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def summary(self) -> str:
        return (
            f"{self.transition}: {len(self.done)} done, "
            f"{len(self.skipped)} skipped, {len(self.errors)} failed"
        )


@dataclass
class RunReport:
    """Ordered transition results of a single invocation."""

    results: list[TransitionResult] = field(default_factory=list)
    aborted: str = ""

    @property
    def errors(self) -> list[str]:
        return [e for r in self.results for e in r.errors]

    def get(self, transition: str) -> TransitionResult | None:
        for result in self.results:
            if result.transition == transition:
                return result
        return None
