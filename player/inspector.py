"""Process-table lookups for the media player."""

from __future__ import annotations

import logging
import os
from typing import Optional, Protocol

import psutil

logger = logging.getLogger(__name__)

_EXITED_STATUSES = {psutil.STATUS_ZOMBIE, psutil.STATUS_DEAD}


class PlayerProcess(Protocol):
    pid: int

    def is_running(self) -> bool:
        """Return whether the process still runs."""

    def kill(self) -> None:
        """Send the kill signal."""

    def wait(self, timeout: float | None = None) -> object:
        """Block until exit or ``timeout`` seconds."""


class ProcessInspector(Protocol):
    def find(self, name: str) -> Optional[PlayerProcess]:
        """Return a running process called ``name``, or ``None``."""


def player_process_name(executable: str) -> str:
    """Process name of the configured player binary (``C:\\mpv\\mpv.exe`` -> ``mpv``)."""
    base = os.path.basename(executable.replace("\\", "/"))
    stem, ext = os.path.splitext(base)
    return stem if ext.lower() == ".exe" else base


def _matches(process_name: str | None, wanted: str) -> bool:
    if not process_name:
        return False
    candidate = process_name.lower()
    if candidate.endswith(".exe"):
        candidate = candidate[:-4]
    return candidate == wanted.lower()


class PsutilProcessInspector:
    """Looks the player up in the OS process table by case-insensitive name."""

    def find(self, name: str) -> Optional[psutil.Process]:
        for proc in psutil.process_iter(["name"]):
            try:
                if not _matches(proc.info.get("name"), name):
                    continue
                if not proc.is_running() or proc.status() in _EXITED_STATUSES:
                    continue
                return proc
            except (psutil.NoSuchProcess, psutil.AccessDenied):
                continue
        return None
