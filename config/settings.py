"""Kiosk settings: JSON loading, validation and the immutable settings model."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

PLAYLIST_FILENAME = "playlist.txt"
DEFAULT_PLAYLIST_NAME = "default.txt"
DEFAULT_INCOMPLETE_TASK_MARKER = ".incomplete"

# Supervisor poll interval between liveness checks.
DEFAULT_CHECK_INTERVAL_MS = 5000

# Connect timeout for fire-and-forget player commands.
DEFAULT_SEND_TIMEOUT_MS = 500

# Connect timeout for the control-channel liveness probe.
DEFAULT_PROBE_TIMEOUT_MS = 10

# Bounded wait for the player to exit after a kill during restart.
DEFAULT_KILL_WAIT_MS = 3000

_REQUIRED_STRING_KEYS = (
    "player_executable",
    "control_endpoint",
    "remote_content_folder",
    "local_content_folder",
)
_OPTIONAL_STRING_KEYS = (
    "incomplete_task_marker",
    "startup_playlist_path",
    "default_playlist_name",
    "player_log_path",
    "watchdog_log_path",
    "rotator_log_path",
)
_OPTIONAL_POSITIVE_INT_KEYS = (
    "check_interval_ms",
    "send_timeout_ms",
    "probe_timeout_ms",
    "kill_wait_ms",
)


class ConfigError(ValueError):
    """Raised when configuration is missing, malformed or points at missing folders."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = list(errors or [])


def normalize_extension(value: str) -> str:
    """Return ``value`` as a lower-cased, dot-prefixed extension (``"MP4"`` -> ``".mp4"``)."""
    text = str(value or "").strip().lower()
    if not text:
        return ""
    if not text.startswith("."):
        text = "." + text
    return text


@dataclass(frozen=True)
class KioskSettings:
    player_executable: str
    control_endpoint: str
    remote_content_folder: str
    local_content_folder: str
    content_subfolders: tuple[str, ...]
    allowed_extensions: frozenset[str]
    incomplete_task_marker: str = DEFAULT_INCOMPLETE_TASK_MARKER
    startup_playlist_path: str = ""
    check_interval_ms: int = DEFAULT_CHECK_INTERVAL_MS
    send_timeout_ms: int = DEFAULT_SEND_TIMEOUT_MS
    probe_timeout_ms: int = DEFAULT_PROBE_TIMEOUT_MS
    kill_wait_ms: int = DEFAULT_KILL_WAIT_MS
    player_log_path: str | None = None
    watchdog_log_path: str | None = None
    rotator_log_path: str | None = None
    playlist_name: str = PLAYLIST_FILENAME

    def __post_init__(self) -> None:
        normalized = frozenset(
            ext for ext in (normalize_extension(item) for item in self.allowed_extensions) if ext
        )
        object.__setattr__(self, "allowed_extensions", normalized)
        object.__setattr__(self, "content_subfolders", tuple(self.content_subfolders))
        if not self.startup_playlist_path:
            object.__setattr__(
                self,
                "startup_playlist_path",
                os.path.join(self.local_content_folder, DEFAULT_PLAYLIST_NAME),
            )

    @property
    def rotation_folders(self) -> list[str]:
        """Ordered rotation folder paths under the local content root."""
        return [os.path.join(self.local_content_folder, name) for name in self.content_subfolders]

    @property
    def check_interval_seconds(self) -> float:
        return self.check_interval_ms / 1000.0

    @property
    def send_timeout_seconds(self) -> float:
        return self.send_timeout_ms / 1000.0

    @property
    def probe_timeout_seconds(self) -> float:
        return self.probe_timeout_ms / 1000.0

    @property
    def kill_wait_seconds(self) -> float:
        return self.kill_wait_ms / 1000.0

    def is_allowed(self, file_path: str | Path) -> bool:
        """Return whether ``file_path`` carries an allow-listed extension.

        Matching is case-insensitive on every platform, so ``CLIP.MP4`` is
        accepted when ``.mp4`` is allowed.
        """
        return normalize_extension(Path(file_path).suffix) in self.allowed_extensions

    def check_folders(self) -> None:
        """Verify the content folders exist.

        Raises:
            ConfigError: If a content folder is blank or does not exist.
        """
        for key in ("local_content_folder", "remote_content_folder"):
            value = getattr(self, key)
            if not str(value or "").strip():
                raise ConfigError(f"Folder path cannot be null or whitespace. {key}")
            if not os.path.isdir(value):
                raise ConfigError(f"Folder does not exist: {value}")


def load_config(path):
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def validate_config(config: Any) -> list[str]:
    """Return a list of human-readable problems with a raw config mapping."""
    errors: list[str] = []
    if not isinstance(config, dict):
        return ["config must be a JSON object"]

    for key in _REQUIRED_STRING_KEYS:
        value = config.get(key)
        if value is None:
            errors.append(f"{key} is required")
        elif not isinstance(value, str) or not value.strip():
            errors.append(f"{key} must be a non-empty string")

    for key in _OPTIONAL_STRING_KEYS:
        value = config.get(key)
        if value is not None and not isinstance(value, str):
            errors.append(f"{key} must be a string")

    subfolders = config.get("content_subfolders")
    if subfolders is None:
        errors.append("content_subfolders is required")
    elif not isinstance(subfolders, list) or not subfolders:
        errors.append("content_subfolders must be a non-empty list")
    else:
        for idx, name in enumerate(subfolders):
            if not isinstance(name, str) or not name.strip():
                errors.append(f"content_subfolders[{idx}] must be a non-empty string")
        names = [name for name in subfolders if isinstance(name, str)]
        if len(set(names)) != len(names):
            errors.append("content_subfolders must not contain duplicates")

    extensions = config.get("allowed_extensions")
    if extensions is None:
        errors.append("allowed_extensions is required")
    elif not isinstance(extensions, list):
        errors.append("allowed_extensions must be a list")
    else:
        for idx, ext in enumerate(extensions):
            if not isinstance(ext, str) or not normalize_extension(ext):
                errors.append(f"allowed_extensions[{idx}] must be a non-empty string")

    for key in _OPTIONAL_POSITIVE_INT_KEYS:
        value = config.get(key)
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, int):
            errors.append(f"{key} must be an integer")
        elif value <= 0:
            errors.append(f"{key} must be greater than zero")

    return errors


def settings_from_config(config: dict[str, Any]) -> KioskSettings:
    """Build :class:`KioskSettings` from a raw mapping, raising :class:`ConfigError` on problems."""
    errors = validate_config(config)
    if errors:
        raise ConfigError("Invalid configuration: " + "; ".join(errors), errors)

    local_root = config["local_content_folder"]
    startup_playlist = config.get("startup_playlist_path") or os.path.join(
        local_root,
        config.get("default_playlist_name") or DEFAULT_PLAYLIST_NAME,
    )
    return KioskSettings(
        player_executable=config["player_executable"],
        control_endpoint=config["control_endpoint"],
        remote_content_folder=config["remote_content_folder"],
        local_content_folder=local_root,
        content_subfolders=tuple(config["content_subfolders"]),
        allowed_extensions=frozenset(config["allowed_extensions"]),
        incomplete_task_marker=config.get("incomplete_task_marker") or DEFAULT_INCOMPLETE_TASK_MARKER,
        startup_playlist_path=startup_playlist,
        check_interval_ms=config.get("check_interval_ms", DEFAULT_CHECK_INTERVAL_MS),
        send_timeout_ms=config.get("send_timeout_ms", DEFAULT_SEND_TIMEOUT_MS),
        probe_timeout_ms=config.get("probe_timeout_ms", DEFAULT_PROBE_TIMEOUT_MS),
        kill_wait_ms=config.get("kill_wait_ms", DEFAULT_KILL_WAIT_MS),
        player_log_path=config.get("player_log_path"),
        watchdog_log_path=config.get("watchdog_log_path"),
        rotator_log_path=config.get("rotator_log_path"),
    )


def load_settings(path: str | Path) -> KioskSettings:
    """Load and validate settings from a JSON file.

    Raises:
        ConfigError: If the file is missing, is not valid JSON, or fails validation.
    """
    if not os.path.exists(path):
        raise ConfigError(f"Config file not found: {path}")
    try:
        config = load_config(path)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Config file is not valid JSON: {path}: {exc}") from exc
    return settings_from_config(config)
