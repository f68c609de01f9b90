"""Run context — service container for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from backup_lifecycle.config import Config, LifecycleSettings
    from backup_lifecycle.core.runner import LifecycleRunner
    from backup_lifecycle.storage.base import RemoteStore


@dataclass
class LifecycleContext:
    """
    Everything one invocation needs, wired once by ``main.create_context``.

    ``settings`` is the frozen snapshot every transition receives;
    ``config`` is kept only for logging setup and diagnostics.
    """

    config: Config
    settings: LifecycleSettings
    store: RemoteStore
    runner: LifecycleRunner
