"""Consumer manifest access and the manifest-editing commands."""

from linkdeps.manifest.commands import add_links, init_project, read_library
from linkdeps.manifest.manifest import (
    edit_manifest,
    find_manifest,
    load_manifest,
    read_links,
    regular_version,
    save_manifest,
)
from linkdeps.manifest.models import DependencyLink, LibraryInfo

__all__ = [
    "DependencyLink",
    "LibraryInfo",
    "add_links",
    "edit_manifest",
    "find_manifest",
    "init_project",
    "load_manifest",
    "read_library",
    "read_links",
    "regular_version",
    "save_manifest",
]
