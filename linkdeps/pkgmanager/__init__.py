"""Package-manager abstraction layer."""

from linkdeps.pkgmanager.base import PackageManager
from linkdeps.pkgmanager.detect import detect_package_manager
from linkdeps.pkgmanager.subprocess_pm import (
    NpmPackageManager,
    PnpmPackageManager,
    SubprocessPackageManager,
    YarnPackageManager,
)

__all__ = [
    "NpmPackageManager",
    "PackageManager",
    "PnpmPackageManager",
    "SubprocessPackageManager",
    "YarnPackageManager",
    "detect_package_manager",
]
