"""Shared test fixtures for link-deps."""

from __future__ import annotations

import io
import json
import logging
import tarfile
from pathlib import Path

import pytest

from linkdeps.config.models import LinkDepsConfig
from linkdeps.errors import PackageManagerError
from linkdeps.pkgmanager.base import PackageManager

_PACK_SKIP = {"node_modules", ".git"}


def write_json(path: Path, data: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2))


def make_tarball(path: Path, files: dict[str, bytes], wrapper: str = "package") -> Path:
    """Write a gzip tarball whose entries all live under *wrapper*/."""
    with tarfile.open(path, "w:gz") as tar:
        for rel, content in sorted(files.items()):
            info = tarfile.TarInfo(f"{wrapper}/{rel}")
            info.size = len(content)
            info.mode = 0o644
            tar.addfile(info, io.BytesIO(content))
    return path


class FakePackageManager(PackageManager):
    """In-process package manager that records calls and packs real archives."""

    name = "fake"

    def __init__(self) -> None:
        self.calls: list[tuple] = []
        self.fail_on: set[str] = set()
        self.add_fails = False

    def _check(self, op: str, *args: str) -> None:
        self.calls.append((op, *args))
        if op in self.fail_on:
            raise PackageManagerError("fake", [op, *args], 1)

    def count(self, op: str) -> int:
        return sum(1 for c in self.calls if c[0] == op)

    def install(self, cwd: Path) -> None:
        self._check("install", str(cwd))
        (Path(cwd) / "node_modules").mkdir(exist_ok=True)

    def run_script(self, script: str, cwd: Path) -> None:
        self._check("run", script, str(cwd))
        if script == "build":
            dist = Path(cwd) / "dist"
            dist.mkdir(exist_ok=True)
            (dist / "index.js").write_text("// built\n")

    def pack(self, cwd: Path) -> None:
        self._check("pack", str(cwd))
        cwd = Path(cwd)
        manifest = json.loads((cwd / "package.json").read_text())
        stem = manifest["name"].replace("/", "-").replace("@", "")
        files = {
            p.relative_to(cwd).as_posix(): p.read_bytes()
            for p in sorted(cwd.rglob("*"))
            if p.is_file()
            and not _PACK_SKIP.intersection(p.relative_to(cwd).parts)
            and p.suffix != ".tgz"
        }
        make_tarball(cwd / f"{stem}-{manifest.get('version', '0.0.0')}.tgz", files)

    def add(self, name: str, *, dev: bool = False, cwd: Path | None = None, quiet: bool = False) -> None:
        self.calls.append(("add", name, dev))
        if self.add_fails:
            raise PackageManagerError("fake", ["add", name], 1)


@pytest.fixture
def fake_pm():
    return FakePackageManager()


@pytest.fixture
def sample_config():
    return LinkDepsConfig()


@pytest.fixture
def library_dir(tmp_path):
    """A buildable library 'mylib' with two source files."""
    lib = tmp_path / "mylib"
    write_json(
        lib / "package.json",
        {"name": "mylib", "version": "1.0.0", "scripts": {"build": "tsc"}},
    )
    (lib / "a.js").write_text("export const a = 1;\n")
    (lib / "b.js").write_text("export const b = 2;\n")
    (lib / ".gitignore").write_text("dist/\n")
    return lib


@pytest.fixture
def consumer_root(tmp_path, library_dir):
    """A consumer app linking ../mylib and also declaring it normally."""
    app = tmp_path / "app"
    write_json(
        app / "package.json",
        {
            "name": "app",
            "version": "0.0.1",
            "dependencies": {"mylib": "^1.0.0"},
            "linkDependencies": {"mylib": "../mylib"},
        },
    )
    return app


@pytest.fixture(autouse=True)
def _reset_linkdeps_logger():
    """Drop console handlers the CLI attaches so they never outlive a test's streams."""
    yield
    logger = logging.getLogger("linkdeps")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
