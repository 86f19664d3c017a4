"""Enumerate a dependency's eligible files and fingerprint their contents."""

from __future__ import annotations

import hashlib
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pathspec

from linkdeps.config.models import FingerprintConfig
from linkdeps.errors import FingerprintError
from linkdeps.fingerprint.models import CompositeFingerprint, FileFingerprint

logger = logging.getLogger(__name__)

IGNORE_FILE = ".gitignore"


def compute_hash(content: bytes, algorithm: str = "sha1") -> str:
    """Hex digest of *content* using a hashlib algorithm."""
    return hashlib.new(algorithm, content).hexdigest()


def compute_file_hash(path: Path, algorithm: str = "sha1") -> str:
    """Read a file from disk and return its full hex digest."""
    return compute_hash(path.read_bytes(), algorithm)


class _IgnoreRules:
    """Stack of .gitignore specs, one per directory that declares one.

    Each spec matches paths relative to the directory holding its file, so a
    rule in ``lib/.gitignore`` only ever applies below ``lib/``.
    """

    def __init__(self) -> None:
        self._specs: list[tuple[str, pathspec.PathSpec]] = []

    def load(self, rel_dir: str, directory: Path) -> None:
        ignore_file = directory / IGNORE_FILE
        if not ignore_file.is_file():
            return
        lines = ignore_file.read_text(encoding="utf-8", errors="replace").splitlines()
        self._specs.append((rel_dir, pathspec.GitIgnoreSpec.from_lines(lines)))

    def ignored(self, rel_path: str, is_dir: bool = False) -> bool:
        # Deepest file with a matching rule decides, so nested negations re-include.
        for base, spec in reversed(self._specs):
            if base:
                if not rel_path.startswith(base + "/"):
                    continue
                local = rel_path[len(base) + 1:]
            else:
                local = rel_path
            result = spec.check_file(local + "/" if is_dir else local)
            if result.include is not None:
                return result.include
        return False


def _raise_walk_error(exc: OSError) -> None:
    raise FingerprintError(Path(exc.filename or "."), exc) from exc


def _nested_consumer_segment(source_dir: Path, consumer_root: Path) -> str | None:
    """Top-level segment of *source_dir* that leads to a nested consumer root."""
    if consumer_root == source_dir or not consumer_root.is_relative_to(source_dir):
        return None
    return consumer_root.relative_to(source_dir).parts[0]


def find_files(
    source_dir: Path,
    consumer_root: Path,
    config: FingerprintConfig | None = None,
) -> list[str]:
    """List eligible files under *source_dir* as sorted POSIX relative paths.

    Skips version-control metadata, the dependency's own package cache, any
    path matched by the tree's .gitignore files, and the top-level segment
    leading to *consumer_root* when the consumer lives inside the dependency.
    """
    config = config or FingerprintConfig()
    source_dir = source_dir.resolve()
    consumer_root = consumer_root.resolve()

    root_excludes = {config.package_cache_dir}
    segment = _nested_consumer_segment(source_dir, consumer_root)
    if segment is not None:
        root_excludes.add(segment)
    always = set(config.always_exclude)

    rules = _IgnoreRules()
    files: list[str] = []

    for dirpath, dirnames, filenames in os.walk(source_dir, onerror=_raise_walk_error):
        current = Path(dirpath)
        rel_dir = current.relative_to(source_dir).as_posix()
        if rel_dir == ".":
            rel_dir = ""
        try:
            rules.load(rel_dir, current)
        except OSError as exc:
            raise FingerprintError(current / IGNORE_FILE, exc) from exc

        kept = []
        for name in sorted(dirnames):
            rel = f"{rel_dir}/{name}" if rel_dir else name
            if name in always or (not rel_dir and name in root_excludes):
                continue
            if rules.ignored(rel, is_dir=True):
                continue
            kept.append(name)
        dirnames[:] = kept

        for name in filenames:
            rel = f"{rel_dir}/{name}" if rel_dir else name
            if name in always or (not rel_dir and name in root_excludes):
                continue
            if rules.ignored(rel):
                continue
            files.append(rel)

    return sorted(files)


def compute_fingerprint(
    source_dir: Path,
    consumer_root: Path,
    config: FingerprintConfig | None = None,
) -> CompositeFingerprint:
    """Fingerprint every eligible file under *source_dir*.

    Files are read concurrently; ordering is fixed by the sorted path list,
    never by completion order. Raises FingerprintError on the first
    unreadable file.
    """
    config = config or FingerprintConfig()
    source_dir = source_dir.resolve()
    rel_paths = find_files(source_dir, consumer_root, config)

    def _hash(rel: str) -> str:
        path = source_dir / rel
        try:
            return compute_file_hash(path, config.algorithm)
        except OSError as exc:
            raise FingerprintError(path, exc) from exc

    with ThreadPoolExecutor(max_workers=config.workers) as executor:
        hashes = list(executor.map(_hash, rel_paths))

    logger.debug("Fingerprinted %d files under %s", len(rel_paths), source_dir)
    return CompositeFingerprint(
        files=tuple(
            FileFingerprint(relative_path=rel, content_hash=h)
            for rel, h in zip(rel_paths, hashes)
        )
    )
