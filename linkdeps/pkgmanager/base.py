"""Abstract package-manager interface for link-deps."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path


class PackageManager(ABC):
    """The four package-manager operations the sync pipeline relies on.

    All calls are synchronous, inherit the console streams unless asked to
    be quiet, and raise PackageManagerError on a non-zero exit.
    """

    name: str = ""

    @abstractmethod
    def install(self, cwd: Path) -> None:
        """Populate *cwd*'s own dependency tree."""
        ...

    @abstractmethod
    def run_script(self, script: str, cwd: Path) -> None:
        """Run a named script from *cwd*'s manifest."""
        ...

    @abstractmethod
    def pack(self, cwd: Path) -> None:
        """Write a distributable .tgz archive of *cwd* into *cwd*."""
        ...

    @abstractmethod
    def add(self, name: str, *, dev: bool = False, cwd: Path | None = None, quiet: bool = False) -> None:
        """Register and fetch *name* as a normal (or dev) dependency."""
        ...
