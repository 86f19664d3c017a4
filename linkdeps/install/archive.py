"""Locating packed archives and extracting them without their wrapper directory."""

from __future__ import annotations

import logging
import re
import shutil
import tarfile
from pathlib import Path, PurePosixPath

from linkdeps.errors import ArchiveError

logger = logging.getLogger(__name__)

# Yarn 2+ always writes this name regardless of package name/version
_BERRY_ARCHIVE = "package.tgz"


def archive_pattern(name: str) -> re.Pattern[str]:
    """Regex matching the archive names package managers produce for *name*.

    npm turns ``@scope/pkg`` into ``scope-pkg-1.0.0.tgz`` (older releases
    ``at-scope-...``); yarn 1 writes ``scope-pkg-v1.0.0.tgz``.
    """
    stem = re.sub(r"[\s/]", "-", name).replace("@", "")
    return re.compile(rf"^(at-)?{re.escape(stem)}(.*)\.tgz$")


def find_archive(directory: Path, name: str) -> Path:
    """Return the archive ``pack`` wrote for *name* inside *directory*."""
    pattern = archive_pattern(name)
    matches = sorted(p for p in Path(directory).iterdir() if p.is_file() and pattern.match(p.name))
    if not matches:
        berry = Path(directory) / _BERRY_ARCHIVE
        if berry.is_file():
            return berry
        raise ArchiveError(f"No packed archive for '{name}' found in {directory}")
    if len(matches) > 1:
        # Leftovers from an interrupted run; the newest is the one just packed
        matches.sort(key=lambda p: p.stat().st_mtime)
    return matches[-1]


def _stripped_member_path(member_name: str, strip: int) -> Path | None:
    """Validate a member path and drop its leading *strip* components.

    Returns None for the wrapper entries themselves.
    """
    relative = PurePosixPath(member_name.replace("\\", "/"))
    if relative.is_absolute():
        raise ArchiveError(f"Unsafe absolute path detected in archive: {member_name}")
    if any(part in {"", ".."} for part in relative.parts):
        raise ArchiveError(f"Unsafe path detected in archive: {member_name}")
    parts = relative.parts[strip:]
    if not parts:
        return None
    return Path(*parts)


def extract_archive(archive_path: Path, destination: Path, strip_components: int = 1) -> list[Path]:
    """Extract a gzip tarball into *destination*, dropping leading path components.

    Links and special files are refused. Returns the extracted file paths.
    """
    extracted: list[Path] = []
    try:
        with tarfile.open(archive_path, mode="r:gz") as archive:
            for member in archive.getmembers():
                rel = _stripped_member_path(member.name, strip_components)
                if rel is None:
                    continue
                target = destination / rel
                if member.isdir():
                    target.mkdir(parents=True, exist_ok=True)
                    continue
                if member.islnk() or member.issym():
                    raise ArchiveError(f"Unsafe link detected in archive: {member.name}")
                if not member.isfile():
                    raise ArchiveError(f"Unsupported tar member type encountered: {member.name}")
                target.parent.mkdir(parents=True, exist_ok=True)
                source = archive.extractfile(member)
                if source is None:
                    raise ArchiveError(f"Failed to extract member: {member.name}")
                with source, target.open("wb") as out:
                    shutil.copyfileobj(source, out)
                target.chmod(member.mode & 0o777 | 0o600)
                extracted.append(target)
    except (tarfile.TarError, OSError, EOFError) as exc:
        raise ArchiveError(f"Failed to extract {archive_path}: {exc}") from exc
    logger.debug("Extracted %d files from %s", len(extracted), archive_path)
    return extracted
