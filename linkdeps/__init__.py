"""link-deps - keep locally developed dependencies installed in a consumer project."""

from linkdeps.config import LinkDepsConfig, load_config
from linkdeps.errors import (
    ArchiveError,
    ConfigurationError,
    FingerprintError,
    LinkDepsError,
    PackageManagerError,
    StoreError,
)
from linkdeps.pkgmanager import PackageManager, detect_package_manager
from linkdeps.sync import LinkWatcher, SyncDriver, SyncReport, SyncStatus

__version__ = "0.1.0"

__all__ = [
    "ArchiveError",
    "ConfigurationError",
    "FingerprintError",
    "LinkDepsConfig",
    "LinkDepsError",
    "LinkWatcher",
    "PackageManager",
    "PackageManagerError",
    "StoreError",
    "SyncDriver",
    "SyncReport",
    "SyncStatus",
    "detect_package_manager",
    "load_config",
]
