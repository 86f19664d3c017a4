"""Packing and installing linked dependencies into the consumer."""

from linkdeps.install.archive import archive_pattern, extract_archive, find_archive
from linkdeps.install.pipeline import PackageInstallPipeline

__all__ = [
    "PackageInstallPipeline",
    "archive_pattern",
    "extract_archive",
    "find_archive",
]
