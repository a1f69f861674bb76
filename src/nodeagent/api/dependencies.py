# src/nodeagent/api/dependencies.py
"""
FastAPI dependency injection functions.

The running agent registers its scheduler and configuration here so route
handlers can read them through Depends(); tests override these functions.
"""

from typing import Optional

from ..core.config import WatcherConfig
from ..core.scheduler import Scheduler

_scheduler: Optional[Scheduler] = None
_watcher_config: Optional[WatcherConfig] = None


def register(scheduler: Scheduler, watcher_config: WatcherConfig) -> None:
    global _scheduler, _watcher_config
    _scheduler = scheduler
    _watcher_config = watcher_config


async def get_scheduler() -> Optional[Scheduler]:
    return _scheduler


async def get_watcher_config() -> Optional[WatcherConfig]:
    return _watcher_config
