"""Rotation folder model and the incomplete-task marker state."""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass
from pathlib import Path


class FolderState(enum.Enum):
    """Commit state of a rotation folder.

    ``IN_PROGRESS`` while the incomplete-task marker is present, ``COMPLETE``
    otherwise. A complete folder's content set (possibly empty) is trustworthy.
    """

    COMPLETE = "complete"
    IN_PROGRESS = "in_progress"


@dataclass(frozen=True)
class RotationFolder:
    path: str
    marker_name: str

    @property
    def exists(self) -> bool:
        return os.path.isdir(self.path)

    @property
    def marker_path(self) -> str:
        return os.path.join(self.path, self.marker_name)

    @property
    def has_marker(self) -> bool:
        return os.path.isfile(self.marker_path)

    @property
    def state(self) -> FolderState:
        return FolderState.IN_PROGRESS if self.has_marker else FolderState.COMPLETE

    def list_files(self) -> list[str]:
        """Regular files directly inside the folder (marker included), sorted by name."""
        with os.scandir(self.path) as entries:
            return sorted(entry.path for entry in entries if entry.is_file(follow_symlinks=False))

    def list_content_files(self) -> list[str]:
        marker = os.path.normcase(self.marker_path)
        return [path for path in self.list_files() if os.path.normcase(path) != marker]

    def is_empty(self) -> bool:
        with os.scandir(self.path) as entries:
            return not any(entry.is_file(follow_symlinks=False) for entry in entries)

    def ensure(self) -> None:
        os.makedirs(self.path, exist_ok=True)

    def mark_in_progress(self) -> None:
        """Create the zero-byte marker. Errors propagate."""
        Path(self.marker_path).touch()

    def mark_complete(self) -> None:
        """Remove the marker. This is the commit point of a copy into the folder."""
        try:
            os.remove(self.marker_path)
        except FileNotFoundError:
            pass

    def same_as(self, other_path: str | Path) -> bool:
        return _normalize(self.path) == _normalize(other_path)


def _normalize(path: str | Path) -> str:
    return os.path.normcase(os.path.abspath(str(path)))


def rotation_folders(paths, marker_name: str) -> list[RotationFolder]:
    return [RotationFolder(str(path), marker_name) for path in paths]
