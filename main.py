"""Command-line entry point — wires services and runs one lifecycle pass.

Usage:
    backup-lifecycle [--config PATH] [--backup-dir DIR] [--dry-run]
                     [--phase {rename,staging,upload,retention}] ...

Meant to be started by a scheduler (systemd timer, cron) once per period.
Exit status is 0 whenever the run completes, even if single files failed;
1 if the backup directory is missing; 2 on configuration errors.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from loguru import logger

from backup_lifecycle.config import LOG_LEVELS, Config, ConfigError, get_config
from backup_lifecycle.context import LifecycleContext
from backup_lifecycle.core.runner import PHASES, LifecycleRunner
from backup_lifecycle.logger import setup_logger
from backup_lifecycle.storage import create_store


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="backup-lifecycle",
        description=(
            "Rename, stage, upload and expire backup files "
            "written by the nightly backup job."
        ),
    )
    parser.add_argument("-c", "--config", type=Path, help="JSON config file")
    parser.add_argument("--backup-dir", type=Path, help="Backup root (main area)")
    parser.add_argument(
        "--phase",
        dest="phases",
        action="append",
        choices=PHASES,
        help="Run only this phase; repeat for several (order is always fixed)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Log planned actions without touching files or remote storage",
    )
    parser.add_argument("--log-dir", type=Path, help="Directory for the rotating log file")
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        help="Console log level (default: INFO)",
    )
    return parser.parse_args(argv)


def apply_overrides(config: Config, args: argparse.Namespace) -> None:
    """Command-line options win over the config file and environment."""
    if args.backup_dir:
        config.set("backup_dir", str(args.backup_dir))
    if args.dry_run:
        config.set("dry_run", True)
    if args.log_dir:
        config.set("log_dir", str(args.log_dir))
    if args.log_level:
        config.set("log_level", args.log_level)


def create_context(config: Config) -> LifecycleContext:
    """Wire all services and return a LifecycleContext."""
    settings = config.settings()
    store = create_store(settings.remote)
    runner = LifecycleRunner(settings, store)
    return LifecycleContext(config=config, settings=settings, store=store, runner=runner)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    config = get_config(args.config)
    apply_overrides(config, args)
    try:
        setup_logger(config.log_dir, config.log_level)
        ctx = create_context(config)
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return 2

    if ctx.settings.dry_run:
        logger.info("Dry run: no files will be changed")

    report = ctx.runner.run(args.phases)
    if report.aborted:
        return 1
    if report.errors:
        logger.warning(f"Run finished with {len(report.errors)} per-file failure(s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
