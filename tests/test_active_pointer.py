"""Tests for release_deploy.core.active_pointer."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from release_deploy.api.exceptions import UnsafePointerStateError
from release_deploy.core.active_pointer import ActivePointer

pytestmark = pytest.mark.skipif(os.name == "nt", reason="POSIX symlink semantics")


def _release(root: Path, name: str) -> Path:
    path = root / "releases" / name
    path.mkdir(parents=True)
    (path / "marker.txt").write_text(name)
    return path


def test_swap_creates_missing_link(tmp_path: Path) -> None:
    release = _release(tmp_path, "r1")
    pointer = ActivePointer(tmp_path / "current")

    assert not pointer.exists()
    link = pointer.swap(release)

    assert link == tmp_path / "current"
    assert link.is_symlink()
    assert os.readlink(link) == str(release)
    assert (link / "marker.txt").read_text() == "r1"


def test_swap_replaces_existing_link_and_keeps_old_release(tmp_path: Path) -> None:
    first = _release(tmp_path, "r1")
    second = _release(tmp_path, "r2")
    pointer = ActivePointer(tmp_path / "current")

    pointer.swap(first)
    pointer.swap(second)

    assert pointer.target() == second
    assert (first / "marker.txt").read_text() == "r1"
    assert not (tmp_path / "current.tmp").exists()


def test_swap_refuses_real_directory(tmp_path: Path) -> None:
    release = _release(tmp_path, "r1")
    current = tmp_path / "current"
    current.mkdir()
    (current / "live.txt").write_text("keep me")

    with pytest.raises(UnsafePointerStateError) as exc_info:
        ActivePointer(current).swap(release)

    assert "Safety check failed" in str(exc_info.value)
    assert exc_info.value.error_code == "RD008"
    assert (current / "live.txt").read_text() == "keep me"
    assert not current.is_symlink()


def test_swap_refuses_regular_file(tmp_path: Path) -> None:
    release = _release(tmp_path, "r1")
    current = tmp_path / "current"
    current.write_text("not a link")

    with pytest.raises(UnsafePointerStateError):
        ActivePointer(current).swap(release)

    assert current.read_text() == "not a link"


def test_dangling_link_counts_as_present_and_is_replaced(tmp_path: Path) -> None:
    release = _release(tmp_path, "r2")
    current = tmp_path / "current"
    os.symlink(tmp_path / "releases" / "gone", current, target_is_directory=True)
    pointer = ActivePointer(current)

    assert pointer.exists()
    assert pointer.is_redirect()

    pointer.swap(release)
    assert pointer.target() == release


def test_stale_temp_link_is_cleared(tmp_path: Path) -> None:
    first = _release(tmp_path, "r1")
    second = _release(tmp_path, "r2")
    pointer = ActivePointer(tmp_path / "current")
    pointer.swap(first)
    os.symlink(first, tmp_path / "current.tmp", target_is_directory=True)

    pointer.swap(second)

    assert pointer.target() == second
    assert not os.path.lexists(tmp_path / "current.tmp")


def test_target_of_missing_link_is_none(tmp_path: Path) -> None:
    assert ActivePointer(tmp_path / "current").target() is None


def test_target_of_directory_raises(tmp_path: Path) -> None:
    (tmp_path / "current").mkdir()
    with pytest.raises(OSError):
        ActivePointer(tmp_path / "current").target()


def test_remove_unlinks_without_touching_target(tmp_path: Path) -> None:
    release = _release(tmp_path, "r1")
    pointer = ActivePointer(tmp_path / "current")
    pointer.swap(release)

    pointer.remove()

    assert not pointer.exists()
    assert (release / "marker.txt").read_text() == "r1"


def test_remove_missing_link_is_noop(tmp_path: Path) -> None:
    ActivePointer(tmp_path / "current").remove()


def test_remove_refuses_real_directory(tmp_path: Path) -> None:
    (tmp_path / "current").mkdir()
    with pytest.raises(UnsafePointerStateError):
        ActivePointer(tmp_path / "current").remove()
    assert (tmp_path / "current").is_dir()
