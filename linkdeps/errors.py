"""Error taxonomy for link-deps.

Every failure the engine can surface derives from ``LinkDepsError`` so the
CLI can map it to a non-zero exit without catching unrelated exceptions.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class LinkDepsError(Exception):
    """Base class for all link-deps failures."""


class ConfigurationError(LinkDepsError):
    """The consumer manifest or a link declaration is unusable.

    Always halts the synchronization pass.
    """


class PackageManagerError(LinkDepsError):
    """A package-manager subprocess failed or could not be started."""

    def __init__(
        self, tool: str, args: Sequence[str], returncode: int | None, cause: Exception | None = None
    ) -> None:
        self.tool = tool
        self.command = (tool, *args)
        self.returncode = returncode
        command = " ".join(self.command)
        if returncode is None:
            msg = f"'{command}' could not be started: {cause}"
        else:
            msg = f"'{command}' exited with code {returncode}"
        super().__init__(msg)
        if cause is not None:
            self.__cause__ = cause


class FingerprintError(LinkDepsError):
    """A file under a dependency's source tree could not be read."""

    def __init__(self, path: Path, cause: Exception) -> None:
        self.path = path
        super().__init__(f"Failed to fingerprint {path}: {cause}")
        self.__cause__ = cause


class ArchiveError(LinkDepsError):
    """Packing produced no usable archive, or extracting it failed."""


class StoreError(LinkDepsError):
    """The fingerprint record could not be persisted."""
