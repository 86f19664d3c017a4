"""Pick the package manager for a consumer project."""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from linkdeps.pkgmanager.base import PackageManager
from linkdeps.pkgmanager.subprocess_pm import (
    NpmPackageManager,
    PnpmPackageManager,
    YarnPackageManager,
)

logger = logging.getLogger(__name__)

_MANAGER_MAP: dict[str, type[PackageManager]] = {
    "npm": NpmPackageManager,
    "yarn": YarnPackageManager,
    "pnpm": PnpmPackageManager,
}

# Checked in order; the first lockfile present wins
_LOCKFILES: list[tuple[str, str]] = [
    ("yarn.lock", "yarn"),
    ("pnpm-lock.yaml", "pnpm"),
    ("package-lock.json", "npm"),
]


def detect_package_manager(root: Path, preferred: str = "auto") -> PackageManager:
    """Resolve the package manager once per process.

    Order: explicit *preferred* > ``npm_config_user_agent`` (set when run from
    a lifecycle script) > lockfile in *root* > yarn on PATH > npm.
    """
    if preferred != "auto":
        cls = _MANAGER_MAP.get(preferred)
        if cls is None:
            raise ValueError(
                f"Unsupported package manager: {preferred!r}. "
                f"Supported: {', '.join(_MANAGER_MAP)}"
            )
        return cls()

    agent = os.environ.get("npm_config_user_agent", "")
    for name, cls in _MANAGER_MAP.items():
        if agent.startswith(name + "/"):
            logger.debug("Using %s from npm_config_user_agent", name)
            return cls()

    for lockfile, name in _LOCKFILES:
        if (Path(root) / lockfile).is_file():
            logger.debug("Using %s from %s", name, lockfile)
            return _MANAGER_MAP[name]()

    if shutil.which("yarn"):
        return YarnPackageManager()
    return NpmPackageManager()
