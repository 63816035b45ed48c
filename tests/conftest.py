import sys
from pathlib import Path

import pytest


# Ensure tests can import project packages regardless of how pytest is invoked.
ROOT = Path(__file__).resolve().parents[1]
ROOT_STR = str(ROOT)
if ROOT_STR not in sys.path:
    sys.path.insert(0, ROOT_STR)

from config.settings import KioskSettings  # noqa: E402


@pytest.fixture
def make_settings(tmp_path):
    """Build settings rooted in ``tmp_path`` with ``remote/`` and ``local/`` created."""

    def _make(**overrides):
        remote = tmp_path / "remote"
        local = tmp_path / "local"
        remote.mkdir(exist_ok=True)
        local.mkdir(exist_ok=True)
        values = {
            "player_executable": "mpv",
            "control_endpoint": str(tmp_path / "ctl.sock"),
            "remote_content_folder": str(remote),
            "local_content_folder": str(local),
            "content_subfolders": ("F1", "F2"),
            "allowed_extensions": frozenset({".mp4", ".jpg"}),
            "check_interval_ms": 10,
        }
        values.update(overrides)
        return KioskSettings(**values)

    return _make
