"""One rotation cycle: refresh the cache, switch the player over, sweep old folders."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from cache.cleanup import CleanupReport, cleanup_stale_folders
from cache.rotator import CacheRotator
from config.settings import KioskSettings
from player.channel import CommandChannel, ConnectResult

logger = logging.getLogger(__name__)

PLAYLIST_CLEAR = "playlist-clear"


def playlist_clear_command() -> str:
    return PLAYLIST_CLEAR


def loadlist_command(playlist_path: str, mode: str = "insert-next") -> str:
    return f"loadlist {playlist_path} {mode}"


@dataclass(frozen=True)
class RotationResult:
    playlist_path: str
    clear_result: ConnectResult
    load_result: ConnectResult
    cleanup: Optional[CleanupReport] = None

    @property
    def player_notified(self) -> bool:
        return self.clear_result.ok and self.load_result.ok


def run_rotation(
    settings: KioskSettings,
    rotator: Optional[CacheRotator] = None,
    channel: Optional[CommandChannel] = None,
    cleanup: bool = True,
) -> RotationResult:
    """Rotate the cache, point the player at the new playlist, then clean up.

    ``NoSuitableFolderError`` and copy failures propagate before anything is
    sent, so the player never receives a stale or partial playlist. Commands
    are best-effort: a player that is down picks the startup playlist up on
    its next launch.
    """
    rotator = rotator or CacheRotator(settings)
    channel = channel or CommandChannel(settings.control_endpoint, timeout=settings.send_timeout_seconds)

    playlist_path = rotator.rotate()

    clear_result = channel.send(playlist_clear_command())
    load_result = channel.send(loadlist_command(playlist_path))
    if not (clear_result.ok and load_result.ok):
        logger.warning("Player was not notified of %s; it will load the startup playlist on restart", playlist_path)

    report = None
    if cleanup:
        report = cleanup_stale_folders(
            current_folder=os.path.dirname(playlist_path),
            folders=settings.rotation_folders,
            marker_name=settings.incomplete_task_marker,
        )
    return RotationResult(
        playlist_path=playlist_path,
        clear_result=clear_result,
        load_result=load_result,
        cleanup=report,
    )
