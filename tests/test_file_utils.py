"""Tests for release_deploy.utils.file_utils."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from release_deploy.api.exceptions import DistDirError
from release_deploy.utils.file_utils import copy_release_files, format_size, is_excluded


def _files(root: Path) -> set:
    return {p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file()}


@pytest.mark.asyncio
async def test_full_copy_applies_exclusions(repo: Path, tmp_path: Path) -> None:
    dest = tmp_path / "release"

    count = await copy_release_files(repo, dest)

    assert _files(dest) == {"README.md", "src/app.py"}
    assert count == 2
    assert (dest / "src" / "app.py").read_text() == "print('hi')\n"


@pytest.mark.asyncio
async def test_subdir_copy_has_no_exclusions(repo: Path, tmp_path: Path) -> None:
    (repo / "dist" / "node_modules").mkdir()
    (repo / "dist" / "node_modules" / "dep.js").write_text("x")
    dest = tmp_path / "release"

    count = await copy_release_files(repo, dest, "dist")

    assert _files(dest) == {"index.html", "node_modules/dep.js"}
    assert count == 2


@pytest.mark.asyncio
async def test_missing_subdir(repo: Path, tmp_path: Path) -> None:
    with pytest.raises(DistDirError) as exc_info:
        await copy_release_files(repo, tmp_path / "release", "build-output")
    assert exc_info.value.error_code == "RD007"


@pytest.mark.asyncio
async def test_subdir_that_is_a_file(repo: Path, tmp_path: Path) -> None:
    with pytest.raises(DistDirError):
        await copy_release_files(repo, tmp_path / "release", "README.md")


@pytest.mark.asyncio
async def test_empty_directories_are_kept(repo: Path, tmp_path: Path) -> None:
    (repo / "var" / "cache").mkdir(parents=True)
    dest = tmp_path / "release"

    await copy_release_files(repo, dest)

    assert (dest / "var" / "cache").is_dir()


@pytest.mark.skipif(os.name == "nt", reason="POSIX symlink semantics")
@pytest.mark.asyncio
async def test_symlinks_are_skipped(repo: Path, tmp_path: Path) -> None:
    outside = tmp_path / "outside"
    outside.mkdir()
    (outside / "secret.txt").write_text("s")
    os.symlink(outside, repo / "linked-dir", target_is_directory=True)
    os.symlink(repo / "README.md", repo / "linked-file")
    dest = tmp_path / "release"

    await copy_release_files(repo, dest)

    assert not os.path.lexists(dest / "linked-dir")
    assert not os.path.lexists(dest / "linked-file")


@pytest.mark.asyncio
async def test_large_file_is_copied_in_chunks(tmp_path: Path) -> None:
    source = tmp_path / "src"
    source.mkdir()
    payload = os.urandom(3 * 1024 * 1024 + 17)
    (source / "blob.bin").write_bytes(payload)

    await copy_release_files(source, tmp_path / "dest")

    assert (tmp_path / "dest" / "blob.bin").read_bytes() == payload


def test_is_excluded_checks_every_component() -> None:
    assert is_excluded(Path("node_modules/pkg/index.js"))
    assert is_excluded(Path("src/__pycache__/app.pyc"))
    assert not is_excluded(Path("src/app.py"))


def test_format_size() -> None:
    assert format_size(512) == "512.00 B"
    assert format_size(2048) == "2.00 KB"


@pytest.mark.asyncio
async def test_destination_inside_source_is_not_copied_into_itself(repo: Path) -> None:
    dest = repo / "deploy" / "releases" / "r1"

    await copy_release_files(repo, dest)

    assert (dest / "README.md").exists()
    assert not (dest / "deploy" / "releases" / "r1").exists()


@pytest.mark.asyncio
async def test_skipped_directory_keeps_older_releases_out(repo: Path) -> None:
    deploy = repo / "deploy"
    (deploy / "releases" / "r1").mkdir(parents=True)
    (deploy / "releases" / "r1" / "old.txt").write_text("old\n")
    dest = deploy / "releases" / "r2"

    await copy_release_files(repo, dest, skip=deploy)

    assert (dest / "README.md").exists()
    assert not (dest / "deploy").exists()
