from __future__ import annotations

import json

import pytest

import kiosk
from playlist.export import read_playlist


@pytest.fixture(autouse=True)
def _no_log_files(monkeypatch):
    monkeypatch.setattr("kiosk.setup_logging", lambda *_args, **_kwargs: None)
    monkeypatch.delenv("KIOSK_LOCK_FILE", raising=False)


def _write_config(tmp_path, **overrides) -> str:
    remote = tmp_path / "remote"
    local = tmp_path / "local"
    remote.mkdir(exist_ok=True)
    local.mkdir(exist_ok=True)
    config = {
        "player_executable": "mpv",
        "control_endpoint": str(tmp_path / "ctl.sock"),
        "remote_content_folder": str(remote),
        "local_content_folder": str(local),
        "content_subfolders": ["F1", "F2"],
        "allowed_extensions": [".mp4"],
        "send_timeout_ms": 50,
    }
    config.update(overrides)
    path = tmp_path / "config.json"
    path.write_text(json.dumps(config), encoding="utf-8")
    return str(path)


def test_main_returns_config_exit_code_for_missing_config(tmp_path) -> None:
    assert kiosk.main(["--config", str(tmp_path / "missing.json"), "rotate"]) == kiosk.EXIT_CONFIG


def test_main_returns_config_exit_code_for_missing_folders(tmp_path) -> None:
    config_path = _write_config(tmp_path, remote_content_folder=str(tmp_path / "gone"))

    assert kiosk.main(["--config", config_path, "rotate"]) == kiosk.EXIT_CONFIG


def test_rotate_command_builds_cache_even_without_player(tmp_path) -> None:
    config_path = _write_config(tmp_path)
    (tmp_path / "remote" / "a.mp4").write_bytes(b"a")

    assert kiosk.main(["--config", config_path, "rotate"]) == kiosk.EXIT_OK

    playlist = tmp_path / "local" / "F1" / "playlist.txt"
    assert read_playlist(playlist) == [str(tmp_path / "local" / "F1" / "a.mp4")]
    assert not (tmp_path / "local" / ".rotation.lock").exists()


def test_rotate_command_fails_when_locked(tmp_path, monkeypatch) -> None:
    config_path = _write_config(tmp_path)
    (tmp_path / "local" / ".rotation.lock").write_text("1", encoding="utf-8")
    monkeypatch.setattr("engine.lock.psutil.pid_exists", lambda pid: True)

    assert kiosk.main(["--config", config_path, "rotate"]) == kiosk.EXIT_FAILED
    assert not (tmp_path / "local" / "F1").exists()


def test_rotate_command_fails_when_no_folder_is_suitable(tmp_path) -> None:
    config_path = _write_config(tmp_path)
    for name in ("F1", "F2"):
        (tmp_path / "local" / name).mkdir()
        (tmp_path / "local" / name / "current.mp4").write_bytes(b"x")

    assert kiosk.main(["--config", config_path, "rotate", "--no-cleanup"]) == kiosk.EXIT_FAILED


def test_send_command_reports_unreachable_player(tmp_path) -> None:
    config_path = _write_config(tmp_path)

    assert kiosk.main(["--config", config_path, "send", "playlist-clear"]) == kiosk.EXIT_FAILED


def test_watchdog_command_runs_supervisor_until_stopped(tmp_path, monkeypatch) -> None:
    config_path = _write_config(tmp_path)
    runs = []

    class _Supervisor:
        def __init__(self, settings):
            self.settings = settings

        def run(self, stop_event):
            runs.append(self.settings.player_executable)

    monkeypatch.setattr("kiosk.PlayerSupervisor", _Supervisor)
    monkeypatch.setattr("kiosk.signal.signal", lambda *_args: None)

    assert kiosk.main(["--config", config_path, "watchdog"]) == kiosk.EXIT_OK
    assert runs == ["mpv"]


def test_watchdog_command_starts_when_remote_folder_is_missing(tmp_path, monkeypatch) -> None:
    config_path = _write_config(tmp_path, remote_content_folder=str(tmp_path / "unmounted"))
    runs = []

    class _Supervisor:
        def __init__(self, settings):
            self.settings = settings

        def run(self, stop_event):
            runs.append(self.settings.remote_content_folder)

    monkeypatch.setattr("kiosk.PlayerSupervisor", _Supervisor)
    monkeypatch.setattr("kiosk.signal.signal", lambda *_args: None)

    assert kiosk.main(["--config", config_path, "watchdog"]) == kiosk.EXIT_OK
    assert runs == [str(tmp_path / "unmounted")]
