"""Synchronization: the per-dependency driver and the watch scheduler."""

from linkdeps.sync.driver import SyncDriver
from linkdeps.sync.models import DependencyResult, SyncReport, SyncStatus
from linkdeps.sync.watcher import DebouncedTrigger, LinkWatcher

__all__ = [
    "DebouncedTrigger",
    "DependencyResult",
    "LinkWatcher",
    "SyncDriver",
    "SyncReport",
    "SyncStatus",
]
