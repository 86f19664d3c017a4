"""Make a linked dependency buildable and run its build step."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from linkdeps.errors import ConfigurationError
from linkdeps.pkgmanager.base import PackageManager

logger = logging.getLogger(__name__)

BUILD_SCRIPT = "build"


class BuildOrchestrator:
    """Installs a dependency's own prerequisites and runs its build script."""

    def __init__(
        self,
        package_manager: PackageManager,
        manifest_file: str = "package.json",
        package_cache_dir: str = "node_modules",
    ) -> None:
        self.package_manager = package_manager
        self.manifest_file = manifest_file
        self.package_cache_dir = package_cache_dir

    def build(self, name: str, source_dir: Path) -> bool:
        """Prepare and build *source_dir*, linked under *name*.

        Returns True when a build script ran. Raises ConfigurationError if the
        library's declared name differs from *name*.
        """
        source_dir = Path(source_dir)
        if not (source_dir / self.package_cache_dir).exists():
            logger.info("Running 'install' in %s", source_dir)
            self.package_manager.install(source_dir)

        manifest = self._read_manifest(source_dir)
        declared = manifest.get("name")
        if declared != name:
            raise ConfigurationError(
                f"Mismatch in package name: found '{declared}', expected '{name}'"
            )

        scripts = manifest.get("scripts") or {}
        if BUILD_SCRIPT not in scripts:
            return False
        logger.info("Building %s in %s", name, source_dir)
        self.package_manager.run_script(BUILD_SCRIPT, source_dir)
        return True

    def _read_manifest(self, source_dir: Path) -> dict:
        path = source_dir / self.manifest_file
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigurationError(f"Failed to read {path}: {exc}") from exc
