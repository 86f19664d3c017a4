"""Pack a built dependency and replace the consumer's installed copy with it."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from linkdeps.errors import ArchiveError
from linkdeps.install.archive import extract_archive, find_archive
from linkdeps.pkgmanager.base import PackageManager

logger = logging.getLogger(__name__)


class PackageInstallPipeline:
    """Pack → remove old installed copy → extract → delete archive.

    The installed copy is never merged: whatever was there before is removed
    in full, so after a successful run it holds exactly the archive contents.
    The temporary archive is deleted whether or not extraction succeeds.
    """

    def __init__(self, package_manager: PackageManager) -> None:
        self.package_manager = package_manager

    def install(self, name: str, source_dir: Path, destination: Path) -> list[Path]:
        """Materialize *source_dir* (linked as *name*) at *destination*."""
        source_dir = Path(source_dir)
        destination = Path(destination)
        archive: Path | None = None
        try:
            logger.info("Copying %s to %s", name, destination.parent)
            self.package_manager.pack(source_dir)
            archive = find_archive(source_dir, name)

            _replace_destination(destination)

            logger.info("Extracting %s to %s", archive, destination)
            return extract_archive(archive, destination, strip_components=1)
        finally:
            if archive is not None:
                archive.unlink(missing_ok=True)


def _replace_destination(destination: Path) -> None:
    """Remove whatever sits at *destination* and leave an empty directory."""
    try:
        # pnpm and `npm link` leave a symlink here; drop the link, not its target.
        if destination.is_symlink() or destination.is_file():
            destination.unlink()
        elif destination.exists():
            shutil.rmtree(destination)
        destination.mkdir(parents=True)
    except OSError as exc:
        raise ArchiveError(f"Cannot replace installed copy at {destination}: {exc}") from exc
