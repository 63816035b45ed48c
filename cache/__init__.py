"""Rotating local media cache."""

from cache.cleanup import CleanupReport, cleanup_stale_folders
from cache.folders import FolderState, RotationFolder
from cache.rotator import CacheRotator, NoSuitableFolderError

__all__ = [
    "CacheRotator",
    "CleanupReport",
    "FolderState",
    "NoSuitableFolderError",
    "RotationFolder",
    "cleanup_stale_folders",
]
