from __future__ import annotations

import os

import pytest

from cache.folders import FolderState, RotationFolder
from cache.rotator import CacheRotator, NoSuitableFolderError


def _fill(folder, name: str = "old.mp4") -> None:
    folder.mkdir(parents=True, exist_ok=True)
    (folder / name).write_bytes(b"x")


def test_select_folder_creates_first_missing_folder(make_settings, tmp_path) -> None:
    local = tmp_path / "local"
    settings = make_settings(content_subfolders=("F1", "F2", "F3"))
    _fill(local / "F1")

    selected = CacheRotator(settings).select_folder()

    assert selected == str(local / "F2")
    assert os.path.isdir(selected)
    assert not (local / "F3").exists()


def test_select_folder_prefers_missing_over_earlier_empty(make_settings, tmp_path) -> None:
    local = tmp_path / "local"
    settings = make_settings(content_subfolders=("F1", "F2"))
    (local / "F1").mkdir()

    selected = CacheRotator(settings).select_folder()

    assert selected == str(local / "F2")
    assert os.path.isdir(selected)
    assert os.listdir(local / "F1") == []


def test_select_folder_returns_first_empty_existing_folder(make_settings, tmp_path) -> None:
    local = tmp_path / "local"
    settings = make_settings(content_subfolders=("F1", "F2", "F3"))
    _fill(local / "F1")
    (local / "F2").mkdir()
    (local / "F3").mkdir()

    assert CacheRotator(settings).select_folder() == str(local / "F2")


def test_select_folder_ignores_subdirectories_when_checking_empty(make_settings, tmp_path) -> None:
    local = tmp_path / "local"
    settings = make_settings(content_subfolders=("F1", "F2"))
    (local / "F1" / "nested").mkdir(parents=True)
    _fill(local / "F2")

    assert CacheRotator(settings).select_folder() == str(local / "F1")


def test_select_folder_falls_back_to_marked_folder(make_settings, tmp_path) -> None:
    local = tmp_path / "local"
    settings = make_settings(content_subfolders=("F1", "F2", "F3"))
    _fill(local / "F1")
    _fill(local / "F2")
    _fill(local / "F3")
    (local / "F3" / settings.incomplete_task_marker).touch()

    assert CacheRotator(settings).select_folder() == str(local / "F3")


def test_select_folder_raises_when_all_full_and_committed(make_settings, tmp_path, caplog) -> None:
    local = tmp_path / "local"
    settings = make_settings(content_subfolders=("F1", "F2"))
    _fill(local / "F1")
    _fill(local / "F2")

    with pytest.raises(NoSuitableFolderError):
        CacheRotator(settings).select_folder()
    assert "No suitable folders found" in caplog.text


def test_rotation_folder_state_tracks_marker(tmp_path) -> None:
    folder = RotationFolder(str(tmp_path / "F1"), ".incomplete")
    folder.ensure()

    assert folder.state is FolderState.COMPLETE
    assert folder.is_empty() is True

    folder.mark_in_progress()
    assert folder.state is FolderState.IN_PROGRESS
    assert folder.is_empty() is False
    assert folder.list_content_files() == []

    folder.mark_complete()
    folder.mark_complete()
    assert folder.state is FolderState.COMPLETE
