"""Reading, editing, and interpreting the consumer manifest (package.json)."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from linkdeps.errors import ConfigurationError
from linkdeps.manifest.models import DependencyLink

logger = logging.getLogger(__name__)

MANIFEST_FILE = "package.json"
LINK_KEY = "linkDependencies"
NORMAL_KEYS = ("dependencies", "devDependencies")


def find_manifest(start: Path | None = None, filename: str = MANIFEST_FILE) -> Path:
    """Walk upward from *start* to the nearest manifest file."""
    current = Path(start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / filename
        if candidate.is_file():
            return candidate
    raise ConfigurationError(f"No {filename} found in {current} or any parent directory")


def load_manifest(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Failed to read manifest {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Manifest {path} is not a JSON object")
    return data


def save_manifest(path: Path, data: dict[str, Any]) -> None:
    Path(path).write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")


@contextmanager
def edit_manifest(path: Path) -> Iterator[dict[str, Any]]:
    """Load the manifest, yield it for mutation, and save it on clean exit.

    Nothing is written if the block raises.
    """
    data = load_manifest(path)
    yield data
    save_manifest(path, data)


def read_links(
    manifest: dict[str, Any], root: Path, link_key: str = LINK_KEY
) -> list[DependencyLink]:
    """Resolve the link section into DependencyLinks, in declaration order."""
    section = manifest.get(link_key)
    if not section:
        raise ConfigurationError(f"No '{link_key}' specified in {MANIFEST_FILE}")
    if not isinstance(section, dict):
        raise ConfigurationError(f"'{link_key}' must map dependency names to paths")
    root = Path(root).resolve()
    return [
        DependencyLink(name=name, source_path=(root / rel).resolve(), declared_path=rel)
        for name, rel in section.items()
    ]


def regular_version(manifest: dict[str, Any], name: str) -> str | None:
    """Version range of *name* in the normal or dev dependency maps, if any."""
    for key in NORMAL_KEYS:
        deps = manifest.get(key) or {}
        if name in deps:
            return deps[name]
    return None
