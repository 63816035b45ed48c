"""Single-run lock for cache rotations."""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from typing import Iterator

import psutil

logger = logging.getLogger(__name__)


class RotationLockedError(RuntimeError):
    """Another rotation holds the lock file."""


def _read_holder_pid(lock_path: str) -> int | None:
    try:
        with open(lock_path, "r", encoding="utf-8") as handle:
            text = handle.read().strip()
    except OSError:
        return None
    return int(text) if text.isdigit() else None


def _acquire(lock_path: str) -> int:
    try:
        return os.open(lock_path, os.O_CREAT | os.O_EXCL | os.O_WRONLY)
    except FileExistsError:
        holder = _read_holder_pid(lock_path)
        if holder is None or psutil.pid_exists(holder):
            raise
    logger.warning("Removing stale lockfile %s left by pid %s", lock_path, holder)
    os.remove(lock_path)
    return os.open(lock_path, os.O_CREAT | os.O_EXCL | os.O_WRONLY)


@contextmanager
def rotation_lock(lock_path: str) -> Iterator[str]:
    """Hold ``lock_path`` for the duration of the block.

    The file is created exclusively and carries the holder's pid. A lock whose
    pid no longer exists is treated as stale and replaced.

    Raises:
        RotationLockedError: If a live process holds the lock.
    """
    try:
        fd = _acquire(lock_path)
    except FileExistsError as exc:
        logger.warning("Lockfile present (%s) - skipping run", lock_path)
        raise RotationLockedError(f"Rotation already running: {lock_path}") from exc
    try:
        with os.fdopen(fd, "w") as handle:
            handle.write(str(os.getpid()))
        yield lock_path
    finally:
        try:
            os.remove(lock_path)
        except FileNotFoundError:
            pass
