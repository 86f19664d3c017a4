"""npm / yarn / pnpm adapters that shell out to the real tool."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path

from linkdeps.errors import PackageManagerError
from linkdeps.pkgmanager.base import PackageManager

logger = logging.getLogger(__name__)


class SubprocessPackageManager(PackageManager):
    """Runs the package-manager executable with inherited stdio."""

    executable: str = ""

    def _run(self, args: Sequence[str], cwd: Path | None = None, quiet: bool = False) -> None:
        cmd = [self.executable, *args]
        logger.debug("Running %s in %s", " ".join(cmd), cwd or ".")
        stream = subprocess.DEVNULL if quiet else None
        try:
            result = subprocess.run(
                cmd,
                cwd=str(cwd) if cwd is not None else None,
                stdout=stream,
                stderr=stream,
                check=False,
            )
        except OSError as exc:
            raise PackageManagerError(self.executable, args, None, exc) from exc
        if result.returncode != 0:
            raise PackageManagerError(self.executable, args, result.returncode)

    def _add_args(self, name: str, dev: bool) -> list[str]:
        return ["add", *(["-D"] if dev else []), name]

    def install(self, cwd: Path) -> None:
        self._run(["install"], cwd)

    def run_script(self, script: str, cwd: Path) -> None:
        self._run(["run", script], cwd)

    def pack(self, cwd: Path) -> None:
        self._run(["pack"], cwd)

    def add(self, name: str, *, dev: bool = False, cwd: Path | None = None, quiet: bool = False) -> None:
        self._run(self._add_args(name, dev), cwd, quiet=quiet)


class NpmPackageManager(SubprocessPackageManager):
    name = "npm"
    executable = "npm"

    def _add_args(self, name: str, dev: bool) -> list[str]:
        return ["install", *(["--save-dev"] if dev else []), name]


class YarnPackageManager(SubprocessPackageManager):
    name = "yarn"
    executable = "yarn"


class PnpmPackageManager(SubprocessPackageManager):
    name = "pnpm"
    executable = "pnpm"
