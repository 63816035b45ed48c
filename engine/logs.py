"""Root logger setup shared by the kiosk commands."""

from __future__ import annotations

import logging
import os
import sys

from engine.paths import ensure_dir

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def setup_logging(log_path: str | None, level: int = logging.INFO) -> logging.Logger:
    """Attach a file handler for ``log_path`` and a console handler to the root logger.

    Calling this twice with the same path does not duplicate handlers.
    """
    root = logging.getLogger("")
    root.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT)

    if log_path:
        ensure_dir(os.path.dirname(os.path.abspath(log_path)))
        has_file = False
        for handler in root.handlers:
            if isinstance(handler, logging.FileHandler):
                if os.path.abspath(getattr(handler, "baseFilename", "")) == os.path.abspath(log_path):
                    has_file = True
                    break
        if not has_file:
            file_handler = logging.FileHandler(log_path, encoding="utf-8")
            file_handler.setFormatter(formatter)
            file_handler.setLevel(level)
            root.addHandler(file_handler)

    has_console = any(getattr(handler, "_kiosk_console", False) for handler in root.handlers)
    if not has_console:
        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(formatter)
        console.setLevel(level)
        console._kiosk_console = True
        root.addHandler(console)
    return root
