"""Tests for archive handling and the pack/install pipeline."""

from __future__ import annotations

import io
import tarfile
from pathlib import Path

import pytest

from conftest import make_tarball
from linkdeps.errors import ArchiveError, PackageManagerError
from linkdeps.install import PackageInstallPipeline, archive_pattern, extract_archive, find_archive


# ── Archive location ─────────────────────────────────────────────────


@pytest.mark.parametrize(
    "name, filename",
    [
        ("mylib", "mylib-1.0.0.tgz"),
        ("mylib", "mylib-v1.0.0.tgz"),
        ("@acme/widgets", "acme-widgets-2.1.0.tgz"),
        ("@acme/widgets", "at-acme-widgets-2.1.0.tgz"),
    ],
)
def test_archive_pattern_matches_manager_variants(name: str, filename: str):
    assert archive_pattern(name).match(filename)


def test_archive_pattern_rejects_other_packages():
    assert not archive_pattern("mylib").match("yourlib-1.0.0.tgz")
    assert not archive_pattern("mylib").match("mylib-1.0.0.tar")


def test_find_archive_falls_back_to_berry_name(tmp_path: Path):
    (tmp_path / "package.tgz").write_bytes(b"")
    assert find_archive(tmp_path, "mylib") == tmp_path / "package.tgz"


def test_find_archive_missing_raises(tmp_path: Path):
    with pytest.raises(ArchiveError, match="No packed archive"):
        find_archive(tmp_path, "mylib")


# ── Extraction ───────────────────────────────────────────────────────


def test_extract_strips_wrapper_directory(tmp_path: Path):
    archive = make_tarball(
        tmp_path / "a.tgz", {"package.json": b"{}", "lib/index.js": b"x"}
    )
    dest = tmp_path / "out"
    dest.mkdir()
    extract_archive(archive, dest)
    assert (dest / "package.json").read_bytes() == b"{}"
    assert (dest / "lib" / "index.js").read_bytes() == b"x"
    assert not (dest / "package").exists()


def test_extract_rejects_traversal(tmp_path: Path):
    archive = tmp_path / "evil.tgz"
    with tarfile.open(archive, "w:gz") as tar:
        info = tarfile.TarInfo("package/../../escape.txt")
        info.size = 1
        tar.addfile(info, io.BytesIO(b"x"))
    dest = tmp_path / "out"
    dest.mkdir()
    with pytest.raises(ArchiveError, match="Unsafe path"):
        extract_archive(archive, dest)
    assert not (tmp_path / "escape.txt").exists()


def test_extract_rejects_symlinks(tmp_path: Path):
    archive = tmp_path / "link.tgz"
    with tarfile.open(archive, "w:gz") as tar:
        info = tarfile.TarInfo("package/link")
        info.type = tarfile.SYMTYPE
        info.linkname = "/etc/passwd"
        tar.addfile(info)
    dest = tmp_path / "out"
    dest.mkdir()
    with pytest.raises(ArchiveError, match="Unsafe link"):
        extract_archive(archive, dest)


def test_extract_corrupt_archive_raises(tmp_path: Path):
    archive = tmp_path / "corrupt.tgz"
    archive.write_bytes(b"not a tarball at all")
    with pytest.raises(ArchiveError):
        extract_archive(archive, tmp_path)


# ── Pipeline ─────────────────────────────────────────────────────────


def test_install_replaces_previous_copy_entirely(library_dir: Path, tmp_path: Path, fake_pm):
    dest = tmp_path / "app" / "node_modules" / "mylib"
    dest.mkdir(parents=True)
    (dest / "stale.js").write_text("old version")
    (dest / "a.js").write_text("old a")

    PackageInstallPipeline(fake_pm).install("mylib", library_dir, dest)

    assert not (dest / "stale.js").exists()
    assert (dest / "a.js").read_text() == "export const a = 1;\n"
    assert sorted(p.name for p in dest.iterdir()) == [".gitignore", "a.js", "b.js", "package.json"]


def test_install_deletes_archive_after_success(library_dir: Path, tmp_path: Path, fake_pm):
    PackageInstallPipeline(fake_pm).install("mylib", library_dir, tmp_path / "dest")
    assert list(library_dir.glob("*.tgz")) == []


def test_install_deletes_archive_after_extraction_failure(
    library_dir: Path, tmp_path: Path, fake_pm, monkeypatch
):
    def _corrupt_pack(cwd: Path) -> None:
        fake_pm.calls.append(("pack", str(cwd)))
        (Path(cwd) / "mylib-1.0.0.tgz").write_bytes(b"garbage")

    monkeypatch.setattr(fake_pm, "pack", _corrupt_pack)
    with pytest.raises(ArchiveError):
        PackageInstallPipeline(fake_pm).install("mylib", library_dir, tmp_path / "dest")
    assert not (library_dir / "mylib-1.0.0.tgz").exists()


def test_missing_archive_leaves_installed_copy(library_dir: Path, tmp_path: Path, fake_pm, monkeypatch):
    dest = tmp_path / "dest"
    dest.mkdir()
    (dest / "index.js").write_text("current")
    monkeypatch.setattr(fake_pm, "pack", lambda cwd: None)

    with pytest.raises(ArchiveError):
        PackageInstallPipeline(fake_pm).install("mylib", library_dir, dest)
    assert (dest / "index.js").read_text() == "current"


def test_pack_failure_propagates(library_dir: Path, tmp_path: Path, fake_pm):
    fake_pm.fail_on.add("pack")
    with pytest.raises(PackageManagerError):
        PackageInstallPipeline(fake_pm).install("mylib", library_dir, tmp_path / "dest")


def test_install_replaces_symlinked_copy_without_touching_target(
    library_dir: Path, tmp_path: Path, fake_pm
):
    store = tmp_path / "store" / "mylib"
    store.mkdir(parents=True)
    (store / "index.js").write_text("linked")
    dest = tmp_path / "app" / "node_modules" / "mylib"
    dest.parent.mkdir(parents=True)
    dest.symlink_to(store, target_is_directory=True)

    PackageInstallPipeline(fake_pm).install("mylib", library_dir, dest)

    assert not dest.is_symlink()
    assert (dest / "a.js").is_file()
    assert (store / "index.js").read_text() == "linked"


def test_unremovable_destination_raises_archive_error(
    library_dir: Path, tmp_path: Path, fake_pm, monkeypatch
):
    dest = tmp_path / "dest"
    dest.mkdir()

    def _refuse(path, *args, **kwargs):
        raise PermissionError(13, "Permission denied", str(path))

    monkeypatch.setattr("linkdeps.install.pipeline.shutil.rmtree", _refuse)
    with pytest.raises(ArchiveError, match="Cannot replace installed copy"):
        PackageInstallPipeline(fake_pm).install("mylib", library_dir, dest)
    assert list(library_dir.glob("*.tgz")) == []
