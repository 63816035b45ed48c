"""Best-effort sweep of rotation folders not currently in use."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Iterable

from cache.folders import RotationFolder

logger = logging.getLogger(__name__)


@dataclass
class CleanupReport:
    cleaned: list[str] = field(default_factory=list)
    dirty: list[str] = field(default_factory=list)
    failed_files: list[str] = field(default_factory=list)


def cleanup_stale_folders(
    current_folder: str,
    folders: Iterable[str],
    marker_name: str,
) -> CleanupReport:
    """Empty every existing rotation folder except ``current_folder``.

    Each swept folder is marked incomplete first. Per-file delete failures are
    logged and skipped; a folder keeps its marker unless every non-marker
    file in it was deleted, so the rotator will reuse it rather than trust it.
    """
    report = CleanupReport()
    for path in folders:
        folder = RotationFolder(str(path), marker_name)
        if folder.same_as(current_folder) or not folder.exists:
            continue
        try:
            folder.mark_in_progress()
        except OSError as exc:
            logger.error("Failed to mark folder %s for cleanup: %s", folder.path, exc)
            report.dirty.append(folder.path)
            continue

        all_deleted = True
        for file_path in folder.list_content_files():
            try:
                os.remove(file_path)
            except OSError as exc:
                all_deleted = False
                report.failed_files.append(file_path)
                logger.error("Failed to delete stale file %s: %s", file_path, exc)

        if all_deleted:
            folder.mark_complete()
            report.cleaned.append(folder.path)
            logger.info("Cleaned stale folder %s", folder.path)
        else:
            report.dirty.append(folder.path)
            logger.warning("Stale folder %s left marked incomplete", folder.path)
    return report
