"""Persist the last-synced fingerprint next to each installed copy."""

from __future__ import annotations

import logging
from pathlib import Path

from linkdeps.errors import StoreError
from linkdeps.fingerprint.models import CompositeFingerprint

logger = logging.getLogger(__name__)


class FingerprintStore:
    """Reads and writes ``<install_dir>/<name>/<marker_file>`` under a consumer root.

    The record is always the whole composite text; there is no partial update.
    """

    def __init__(
        self,
        consumer_root: Path,
        install_dir: str = "node_modules",
        marker_file: str = ".link-deps-hash",
    ) -> None:
        self.consumer_root = Path(consumer_root)
        self.install_dir = install_dir
        self.marker_file = marker_file

    def installed_copy(self, name: str) -> Path:
        """Directory holding the installed copy of *name* (scoped names nest)."""
        return self.consumer_root / self.install_dir / Path(*name.split("/"))

    def record_path(self, name: str) -> Path:
        return self.installed_copy(name) / self.marker_file

    def load(self, name: str) -> CompositeFingerprint | None:
        """Return the stored composite, or None before the first sync."""
        path = self.record_path(name)
        if not path.is_file():
            return None
        try:
            return CompositeFingerprint.from_text(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable fingerprint record %s: %s", path, exc)
            return None

    def save(self, name: str, fingerprint: CompositeFingerprint) -> Path:
        path = self.record_path(name)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(fingerprint.text, encoding="utf-8")
        except OSError as exc:
            raise StoreError(f"Failed to write fingerprint record {path}: {exc}") from exc
        return path
