"""Synchronization driver that keeps installed copies in step with their sources."""

from __future__ import annotations

import logging
from pathlib import Path

from linkdeps.build.orchestrator import BuildOrchestrator
from linkdeps.config.models import LinkDepsConfig
from linkdeps.errors import ConfigurationError, LinkDepsError
from linkdeps.fingerprint.engine import compute_fingerprint
from linkdeps.fingerprint.store import FingerprintStore
from linkdeps.install.pipeline import PackageInstallPipeline
from linkdeps.manifest.manifest import load_manifest, read_links, regular_version
from linkdeps.manifest.models import DependencyLink
from linkdeps.pkgmanager.base import PackageManager
from linkdeps.sync.models import DependencyResult, SyncReport, SyncStatus

logger = logging.getLogger(__name__)


class SyncDriver:
    """Runs one synchronization pass over every declared link.

    Dependencies are processed one at a time. Per dependency the flow is
    resolve → fingerprint → compare, and only on change build → pack/install
    → record. The record is written last, so an interrupted pipeline always
    re-triggers on the next pass.

    Errors never leave ``run``: they are captured in the SyncReport and the
    caller decides what to do with a failed pass.
    """

    def __init__(
        self,
        consumer_root: Path,
        package_manager: PackageManager,
        config: LinkDepsConfig | None = None,
    ) -> None:
        self.config = config or LinkDepsConfig()
        self.consumer_root = Path(consumer_root).resolve()
        self.package_manager = package_manager
        self.store = FingerprintStore(
            self.consumer_root,
            install_dir=self.config.sync.install_dir,
            marker_file=self.config.fingerprint.marker_file,
        )
        self.builder = BuildOrchestrator(
            package_manager,
            manifest_file=self.config.sync.manifest_file,
            package_cache_dir=self.config.fingerprint.package_cache_dir,
        )
        self.pipeline = PackageInstallPipeline(package_manager)

    @property
    def manifest_path(self) -> Path:
        return self.consumer_root / self.config.sync.manifest_file

    def run(self) -> SyncReport:
        """Synchronize every declared dependency. Never raises LinkDepsError."""
        report = SyncReport()
        try:
            manifest = load_manifest(self.manifest_path)
            links = read_links(manifest, self.consumer_root, self.config.sync.link_key)
        except ConfigurationError as exc:
            logger.error("%s", exc)
            report.halted = True
            return report

        for index, link in enumerate(links):
            try:
                result = self.sync_dependency(link, manifest)
            except LinkDepsError as exc:
                logger.error("Failed to sync %s: %s", link.name, exc)
                report.results.append(
                    DependencyResult(name=link.name, status=SyncStatus.failed, detail=str(exc))
                )
                fatal = isinstance(exc, ConfigurationError) or not self.config.sync.continue_on_error
                if fatal:
                    if index < len(links) - 1:
                        report.halted = True
                    break
                continue
            report.results.append(result)

        return report

    def sync_dependency(self, link: DependencyLink, manifest: dict) -> DependencyResult:
        """Bring the installed copy of one link up to date with its source."""
        logger.info("Checking '%s' in '%s'", link.name, link.source_path)

        regular = regular_version(manifest, link.name)
        if regular is None:
            logger.warning(
                "The relative dependency '%s' should also be added as normal- or dev-dependency",
                link.name,
            )

        if not link.source_path.exists():
            if regular is not None:
                logger.warning(
                    "Could not find target directory '%s', using normally installed version ('%s') instead",
                    link.source_path,
                    regular,
                )
                return DependencyResult(
                    name=link.name,
                    status=SyncStatus.skipped,
                    detail=f"source missing, using {regular}",
                )
            raise ConfigurationError(
                f"Failed to resolve dependency {link.name}: failed to find target directory "
                f"'{link.source_path}', and the library is not present as normal dependency either"
            )

        current = compute_fingerprint(link.source_path, self.consumer_root, self.config.fingerprint)
        previous = self.store.load(link.name)
        if previous == current:
            logger.info("No changes")
            return DependencyResult(name=link.name, status=SyncStatus.unchanged)

        changed = current.first_changed_path(previous)
        if changed is not None:
            logger.info("Changed file: %s", changed)

        built = self.builder.build(link.name, link.source_path)
        self.pipeline.install(link.name, link.source_path, self.store.installed_copy(link.name))
        self.store.save(link.name, current)
        logger.info("Re-installing %s... DONE", link.name)
        return DependencyResult(
            name=link.name, status=SyncStatus.synced, changed_file=changed, built=built
        )
