"""Watchdog loop that keeps the media player and its control endpoint alive."""

from __future__ import annotations

import enum
import logging
import os
import subprocess
import threading
from typing import Any, Callable, Optional

import psutil

from config.settings import KioskSettings
from player.channel import ConnectResult, probe_endpoint
from player.inspector import PlayerProcess, ProcessInspector, PsutilProcessInspector, player_process_name
from playlist.export import ensure_playlist

logger = logging.getLogger(__name__)

PLAYER_FLAGS = (
    "--audio=no",
    "--border=no",
    "--title-bar=no",
    "--loop-playlist=inf",
    "--fullscreen",
    "--terminal=no",
    "--msg-level=all=warn",
)


class SupervisorAction(enum.Enum):
    IDLE = "idle"
    STARTED = "started"
    RESTARTED = "restarted"
    START_FAILED = "start_failed"


def build_player_args(settings: KioskSettings) -> list[str]:
    """Full argv for the player: executable, fixed playback flags, configured paths."""
    args = [settings.player_executable, *PLAYER_FLAGS]
    if settings.player_log_path:
        args.append(f"--log-file={settings.player_log_path}")
    args.append(f"--playlist={settings.startup_playlist_path}")
    args.append(f"--input-ipc-server={settings.control_endpoint}")
    return args


class PlayerSupervisor:
    """Polls player liveness and restarts it when the process or endpoint is gone.

    One liveness check and at most one stop/start per iteration. Leaving
    :meth:`run` never stops the player.
    """

    def __init__(
        self,
        settings: KioskSettings,
        inspector: Optional[ProcessInspector] = None,
        probe: Callable[[str, float], ConnectResult] = probe_endpoint,
        launcher: Callable[..., Any] = subprocess.Popen,
    ) -> None:
        self._settings = settings
        self._inspector = inspector or PsutilProcessInspector()
        self._probe = probe
        self._launcher = launcher
        self._process_name = player_process_name(settings.player_executable)
        self.process: Any = None

    @property
    def process_name(self) -> str:
        return self._process_name

    def log_banner(self) -> None:
        settings = self._settings
        logger.info("Player watchdog started.")
        logger.info("Executable: %s", settings.player_executable)
        logger.info("Startup playlist path: %s", settings.startup_playlist_path)
        logger.info("Checking every %d ms.", settings.check_interval_ms)
        logger.info("Control endpoint to check: %s", settings.control_endpoint)
        logger.info("Player log file: %s", settings.player_log_path or "(none)")

    def run(self, stop_event: threading.Event) -> None:
        """Loop until ``stop_event`` is set. The wait between iterations is interruptible."""
        self.log_banner()
        while not stop_event.is_set():
            self.run_once()
            if stop_event.wait(self._settings.check_interval_seconds):
                break
        logger.info("Stopping watchdog; player left running.")

    def run_once(self) -> SupervisorAction:
        """Perform one liveness check and the start/restart it calls for."""
        self._reap_child()
        found = self._find_player()
        if found is None:
            logger.info("Player not running. Starting player...")
            return self._start(SupervisorAction.STARTED)

        if self._channel_present():
            self.process = found
            return SupervisorAction.IDLE

        logger.warning("Player running (pid %s) but control endpoint is absent. Restarting player...", found.pid)
        self._stop(found)
        return self._start(SupervisorAction.RESTARTED)

    def _find_player(self) -> Optional[PlayerProcess]:
        try:
            return self._inspector.find(self._process_name)
        except (OSError, psutil.Error) as exc:
            logger.error("Process lookup for %s failed: %s", self._process_name, exc)
            return None

    def _channel_present(self) -> bool:
        try:
            result = self._probe(self._settings.control_endpoint, self._settings.probe_timeout_seconds)
        except Exception:
            # Only a timeout or refused connect counts as absent.
            logger.exception("Control endpoint probe raised unexpectedly; treating as present")
            return True
        return result not in (ConnectResult.TIMED_OUT, ConnectResult.FAILED)

    def _stop(self, proc: PlayerProcess) -> None:
        try:
            if proc.is_running():
                proc.kill()
                proc.wait(timeout=self._settings.kill_wait_seconds)
        except (OSError, psutil.Error, subprocess.SubprocessError) as exc:
            logger.error("Failed to kill player process %s: %s", proc.pid, exc)
        finally:
            self.process = None

    def _start(self, action: SupervisorAction) -> SupervisorAction:
        args = build_player_args(self._settings)
        logger.info("Launching player: %s", " ".join(args))
        try:
            ensure_playlist(self._settings.startup_playlist_path)
            proc = self._launcher(args, **_launch_options())
        except (OSError, ValueError, subprocess.SubprocessError) as exc:
            logger.error("Failed to start player: %s", exc)
            self.process = None
            return SupervisorAction.START_FAILED
        self.process = proc
        logger.info("Player started with PID: %s", proc.pid)
        return action

    def _reap_child(self) -> None:
        proc = self.process
        poll = getattr(proc, "poll", None)
        if callable(poll) and poll() is not None:
            logger.info("Player process %s exited with code %s", proc.pid, proc.returncode)
            self.process = None


def _launch_options() -> dict[str, Any]:
    if os.name == "nt":
        return {"creationflags": getattr(subprocess, "CREATE_NO_WINDOW", 0)}
    return {}
