from .lock import RotationLockedError, rotation_lock
from .logs import setup_logging
from .rotation import RotationResult, loadlist_command, playlist_clear_command, run_rotation

__all__ = [
    "RotationLockedError",
    "RotationResult",
    "loadlist_command",
    "playlist_clear_command",
    "rotation_lock",
    "run_rotation",
    "setup_logging",
]
