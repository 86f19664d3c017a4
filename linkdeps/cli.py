"""CLI entry point for link-deps."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from linkdeps.config import LinkDepsConfig, load_config
from linkdeps.config.loader import CONFIG_FILENAME, DEFAULT_CONFIG_TEMPLATE
from linkdeps.errors import LinkDepsError
from linkdeps.log import configure_logging
from linkdeps.manifest import add_links, find_manifest, init_project, load_manifest, read_links
from linkdeps.manifest.commands import DEFAULT_SCRIPT
from linkdeps.pkgmanager import PackageManager, detect_package_manager
from linkdeps.sync import LinkWatcher, SyncDriver, SyncReport, SyncStatus

logger = logging.getLogger("linkdeps.cli")

app = typer.Typer(
    name="link-deps",
    help="Keep locally developed dependencies built and installed without symlinks.",
)

config_app = typer.Typer(help="Manage link-deps configuration.")
app.add_typer(config_app, name="config")

# Global state
_config: LinkDepsConfig | None = None


def _get_config() -> LinkDepsConfig:
    if _config is None:
        return load_config()
    return _config


def _manifest_path() -> Path:
    return find_manifest(Path.cwd(), _get_config().sync.manifest_file)


def _package_manager(root: Path) -> PackageManager:
    try:
        return detect_package_manager(root, _get_config().package_manager.name)
    except ValueError as e:
        logger.error("%s", e)
        raise typer.Exit(1)


_STATUS_STYLE = {
    SyncStatus.synced: "[green]synced[/green]",
    SyncStatus.unchanged: "[dim]unchanged[/dim]",
    SyncStatus.skipped: "[yellow]skipped[/yellow]",
    SyncStatus.failed: "[red]failed[/red]",
}


def _display_report(report: SyncReport) -> None:
    """Display per-dependency outcomes of a pass as a Rich table."""
    if not report.results:
        return
    table = Table(title="link-deps")
    table.add_column("Dependency", style="cyan")
    table.add_column("Status", justify="center")
    table.add_column("Detail", style="dim")
    for r in report.results:
        detail = r.detail or (f"changed: {r.changed_file}" if r.changed_file else "-")
        table.add_row(escape(r.name), _STATUS_STYLE[r.status], escape(detail))
    rprint(table)
    if report.halted:
        rprint("[red]Sync halted before all dependencies were processed.[/red]")


def _sync_once(root: Path, package_manager: PackageManager) -> SyncReport:
    driver = SyncDriver(root, package_manager, _get_config())
    report = driver.run()
    _display_report(report)
    return report


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config: Annotated[
        str | None, typer.Option("--config", "-c", help=f"Path to {CONFIG_FILENAME}")
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
) -> None:
    """Install linked deps (default when no command is given)."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    configure_logging("debug" if verbose else _config.log_level, _config.log_format)

    if ctx.invoked_subcommand is None:
        try:
            root = _manifest_path().parent
            report = _sync_once(root, _package_manager(root))
        except LinkDepsError as e:
            logger.error("%s", e)
            raise typer.Exit(1)
        if not report.ok:
            raise typer.Exit(1)


@app.command()
def watch() -> None:
    """Watch linked deps and install on change."""
    cfg = _get_config()
    try:
        manifest_path = _manifest_path()
        links = read_links(load_manifest(manifest_path), manifest_path.parent, cfg.sync.link_key)
    except LinkDepsError as e:
        logger.error("%s", e)
        raise typer.Exit(1)

    root = manifest_path.parent
    package_manager = _package_manager(root)
    watcher = LinkWatcher(
        [link.source_path for link in links],
        callback=lambda: _sync_once(root, package_manager),
        debounce_seconds=cfg.watch.debounce_seconds,
        ignore_parts=cfg.watch.ignore_parts,
    )
    watcher.run_forever()


@app.command()
def init(
    script: Annotated[
        str, typer.Option("--script", "-S", help="Lifecycle script that runs link-deps")
    ] = DEFAULT_SCRIPT,
) -> None:
    """Initialize link-deps in the current project."""
    try:
        init_project(_manifest_path(), script, _get_config().sync.link_key)
    except LinkDepsError as e:
        logger.error("%s", e)
        raise typer.Exit(1)


@app.command()
def add(
    paths: Annotated[list[str] | None, typer.Argument(help="Relative paths to libraries")] = None,
    dev: Annotated[
        bool, typer.Option("--dev", "-D", "--save-dev", help="Save as dev dependency")
    ] = False,
    script: Annotated[
        str, typer.Option("--script", "-S", help="Lifecycle script that runs link-deps")
    ] = DEFAULT_SCRIPT,
) -> None:
    """Add paths as linked dependencies and install them."""
    cfg = _get_config()
    try:
        manifest_path = _manifest_path()
        root = manifest_path.parent
        package_manager = _package_manager(root)
        linked = add_links(
            manifest_path,
            paths or [],
            package_manager,
            dev=dev,
            script=script,
            link_key=cfg.sync.link_key,
        )
        if not linked:
            return
        report = _sync_once(root, package_manager)
    except LinkDepsError as e:
        logger.error("%s", e)
        raise typer.Exit(1)
    if not report.ok:
        raise typer.Exit(1)


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default link-deps.yaml in current directory."""
    target = Path(CONFIG_FILENAME)
    if target.exists() and not force:
        rprint(f"[yellow]{CONFIG_FILENAME} already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")
