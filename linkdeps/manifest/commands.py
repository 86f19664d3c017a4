"""Manifest-editing commands: ``init`` and ``add``."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from linkdeps.errors import ConfigurationError, PackageManagerError
from linkdeps.manifest.manifest import LINK_KEY, MANIFEST_FILE, edit_manifest, load_manifest
from linkdeps.manifest.models import LibraryInfo
from linkdeps.pkgmanager.base import PackageManager

logger = logging.getLogger(__name__)

TOOL_COMMAND = "link-deps"
DEFAULT_SCRIPT = "prepare"


def init_project(
    manifest_path: Path, script: str = DEFAULT_SCRIPT, link_key: str = LINK_KEY
) -> None:
    """Ensure an empty link section and a lifecycle script that runs link-deps."""
    with edit_manifest(manifest_path) as pkg:
        if link_key not in pkg:
            logger.info("Setting up %s section in %s", link_key, MANIFEST_FILE)
            pkg[link_key] = {}

        scripts = pkg.setdefault("scripts", {})
        existing = scripts.get(script)
        if not existing:
            logger.info("Adding %s to %s script in %s", TOOL_COMMAND, script, MANIFEST_FILE)
            scripts[script] = TOOL_COMMAND
        elif TOOL_COMMAND not in existing:
            logger.info("Adding %s to %s script in %s", TOOL_COMMAND, script, MANIFEST_FILE)
            scripts[script] = f"{existing} && {TOOL_COMMAND}"


def read_library(root: Path, rel_path: str) -> LibraryInfo:
    """Read name and version from the manifest of the library at *rel_path*."""
    lib_manifest = (Path(root) / rel_path / MANIFEST_FILE).resolve()
    if not lib_manifest.is_file():
        raise ConfigurationError(f"Failed to resolve dependency {rel_path}")
    try:
        data = json.loads(lib_manifest.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Failed to read {lib_manifest}: {exc}") from exc
    name = data.get("name")
    if not name:
        raise ConfigurationError(f"{lib_manifest} does not declare a package name")
    return LibraryInfo(rel_path=rel_path, name=name, version=data.get("version"))


def add_links(
    manifest_path: Path,
    paths: list[str],
    package_manager: PackageManager,
    *,
    dev: bool = False,
    script: str = DEFAULT_SCRIPT,
    link_key: str = LINK_KEY,
) -> list[LibraryInfo]:
    """Declare each library in *paths* as a link dependency.

    Returns the libraries linked; an empty list means nothing was added and
    the lifecycle script was run instead. Every path is validated before any
    registry fetch or link is recorded.
    """
    root = Path(manifest_path).parent
    init_project(manifest_path, script, link_key)

    if not paths:
        logger.warning("No paths provided, running %s", script)
        package_manager.run_script(script, root)
        return []

    libraries = [read_library(root, rel) for rel in paths]
    deps_key = "devDependencies" if dev else "dependencies"

    deps = load_manifest(manifest_path).get(deps_key) or {}
    for library in libraries:
        if library.name in deps:
            continue
        try:
            package_manager.add(library.name, dev=dev, cwd=root, quiet=True)
        except PackageManagerError:
            logger.warning(
                "Unable to fetch %s from registry. Installing as a relative dependency only.",
                library.name,
            )

    # The registry add rewrites the manifest itself, so reload before linking
    with edit_manifest(manifest_path) as pkg:
        links = pkg.setdefault(link_key, {})
        for library in libraries:
            links[library.name] = library.rel_path

    return libraries
