"""Plain-text playlist helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable


def write_playlist(playlist_path: str | Path, entries: Iterable[str | Path]) -> Path:
    """Create or overwrite a plain-text playlist.

    Rules:
    - One path per line, UTF-8, platform line terminators, no header.
    - Entries are written in the order given.
    - Writes are atomic (temp file then replace).
    """
    target_path = Path(playlist_path)
    target_path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = target_path.with_name(f".{target_path.name}.tmp")

    lines = [str(entry) for entry in entries]
    content = "".join(line + os.linesep for line in lines)
    # newline="" keeps os.linesep as-is instead of translating "\n" twice on Windows.
    with open(temp_path, "w", encoding="utf-8", newline="") as handle:
        handle.write(content)
    temp_path.replace(target_path)
    return target_path


def read_playlist(playlist_path: str | Path) -> list[str]:
    """Return the non-blank entries of a playlist, in file order."""
    text = Path(playlist_path).read_text(encoding="utf-8")
    return [line.strip() for line in text.splitlines() if line.strip()]


def ensure_playlist(playlist_path: str | Path) -> Path:
    """Create an empty playlist at ``playlist_path`` when none exists yet."""
    target_path = Path(playlist_path)
    if not target_path.exists():
        target_path.parent.mkdir(parents=True, exist_ok=True)
        target_path.touch()
    return target_path
