"""Rotating local media cache fed from the remote content folder."""

from __future__ import annotations

import logging
import os
import shutil

from cache.folders import RotationFolder, rotation_folders
from config.settings import KioskSettings
from playlist.export import write_playlist

logger = logging.getLogger(__name__)


class NoSuitableFolderError(RuntimeError):
    """No rotation folder is missing, empty or marked incomplete."""


class CacheRotator:
    """Copies remote media into the next free rotation folder and writes its playlists.

    Precondition: at most one rotation runs at a time. Concurrent rotations
    would race on the incomplete-task markers; callers serialize runs with
    :func:`engine.lock.rotation_lock`.
    """

    def __init__(self, settings: KioskSettings) -> None:
        settings.check_folders()
        self._settings = settings
        self._folders = rotation_folders(settings.rotation_folders, settings.incomplete_task_marker)

    @property
    def folders(self) -> list[RotationFolder]:
        return list(self._folders)

    def folder_for(self, path: str) -> RotationFolder:
        return RotationFolder(path, self._settings.incomplete_task_marker)

    def select_folder(self) -> str:
        """Pick the rotation folder to populate next.

        Order: first folder that does not exist yet (created), then first
        existing folder without files, then first folder still carrying the
        incomplete-task marker. A folder whose copy committed and that
        carries no marker is never picked.

        Raises:
            NoSuitableFolderError: If no folder matches.
        """
        for folder in self._folders:
            if not folder.exists:
                folder.ensure()
                logger.info("Created new media folder: %s", folder.path)
                return folder.path

        for folder in self._folders:
            if folder.is_empty():
                return folder.path

        for folder in self._folders:
            if folder.has_marker:
                logger.info("Reusing folder with incomplete copy task: %s", folder.path)
                return folder.path

        message = f"No suitable folders found in {self._settings.local_content_folder}."
        logger.error(message)
        raise NoSuitableFolderError(message)

    def rotate(self) -> str:
        """Refresh the next rotation folder from the remote source.

        Returns:
            Path of the per-folder playlist just written.

        Raises:
            NoSuitableFolderError: If no folder can be selected.
            OSError: If the remote folder cannot be listed or the marker cannot
                be created. The marker stays in place.
        """
        folder = self.folder_for(self.select_folder())
        playlist_path = os.path.join(folder.path, self._settings.playlist_name)

        self._clear_folder(folder)
        folder.mark_in_progress()

        media_files = self._copy_allowed_files(folder)

        write_playlist(playlist_path, media_files)
        write_playlist(self._settings.startup_playlist_path, media_files)

        folder.mark_complete()
        logger.info(
            "Rotated %d media file(s) into %s; playlist=%s",
            len(media_files),
            folder.path,
            playlist_path,
        )
        return playlist_path

    def _clear_folder(self, folder: RotationFolder) -> None:
        for file_path in folder.list_content_files():
            try:
                os.remove(file_path)
            except OSError as exc:
                logger.error("Failed to delete file %s: %s", file_path, exc)

    def list_remote_files(self) -> list[str]:
        """Regular files directly inside the remote folder, sorted by name."""
        with os.scandir(self._settings.remote_content_folder) as entries:
            return sorted(entry.path for entry in entries if entry.is_file())

    def _copy_allowed_files(self, folder: RotationFolder) -> list[str]:
        copied: list[str] = []
        for source_path in self.list_remote_files():
            if not self._settings.is_allowed(source_path):
                logger.debug("Skipping non-media file %s", source_path)
                continue
            dest_path = os.path.join(folder.path, os.path.basename(source_path))
            try:
                shutil.copy2(source_path, dest_path)
            except OSError as exc:
                logger.error("Failed to copy file %s: %s", source_path, exc)
                continue
            copied.append(dest_path)
        return copied
