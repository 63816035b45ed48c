from __future__ import annotations

import os

import pytest

from engine.lock import RotationLockedError, rotation_lock


def test_rotation_lock_writes_pid_and_releases(tmp_path) -> None:
    lock_path = str(tmp_path / ".rotation.lock")

    with rotation_lock(lock_path):
        with open(lock_path, "r", encoding="utf-8") as handle:
            assert handle.read() == str(os.getpid())

    assert not os.path.exists(lock_path)


def test_rotation_lock_rejects_second_holder(tmp_path) -> None:
    lock_path = str(tmp_path / ".rotation.lock")

    with rotation_lock(lock_path):
        with pytest.raises(RotationLockedError):
            with rotation_lock(lock_path):
                pass
        assert os.path.exists(lock_path)


def test_rotation_lock_released_when_block_raises(tmp_path) -> None:
    lock_path = str(tmp_path / ".rotation.lock")

    with pytest.raises(OSError):
        with rotation_lock(lock_path):
            raise OSError("copy failed")

    assert not os.path.exists(lock_path)


def test_rotation_lock_replaces_stale_lock(tmp_path, monkeypatch) -> None:
    lock_path = tmp_path / ".rotation.lock"
    lock_path.write_text("999999", encoding="utf-8")
    monkeypatch.setattr("engine.lock.psutil.pid_exists", lambda pid: False)

    with rotation_lock(str(lock_path)):
        assert lock_path.read_text(encoding="utf-8") == str(os.getpid())
