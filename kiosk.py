#!/usr/bin/env python3
"""
Signage kiosk runner.
- watchdog: keep the media player and its control endpoint alive.
- rotate:   refresh the local media cache from the remote folder and switch the player to it.
- send:     push a single command to the running player.
"""

import argparse
import logging
import signal
import sys
import threading

from cache.rotator import NoSuitableFolderError
from config.settings import ConfigError, load_settings
from engine.lock import RotationLockedError, rotation_lock
from engine.logs import setup_logging
from engine.paths import default_config_path, resolve_lock_path, resolve_log_path
from engine.rotation import run_rotation
from player.channel import CommandChannel
from player.supervisor import PlayerSupervisor

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG = 2


# ─────────────────────────────────────────────────────────────────────────────
# Commands
# ─────────────────────────────────────────────────────────────────────────────
def cmd_watchdog(settings, args):
    setup_logging(resolve_log_path(settings.watchdog_log_path, "watchdog.log"))
    stop_event = threading.Event()

    def _stop(signum, _frame):
        logging.info("Received signal %s; stopping watchdog...", signum)
        stop_event.set()

    signal.signal(signal.SIGINT, _stop)
    if hasattr(signal, "SIGTERM"):
        signal.signal(signal.SIGTERM, _stop)

    PlayerSupervisor(settings).run(stop_event)
    return EXIT_OK


def cmd_rotate(settings, args):
    setup_logging(resolve_log_path(settings.rotator_log_path, "rotator.log"))
    try:
        settings.check_folders()
    except ConfigError as exc:
        logging.error("%s", exc)
        return EXIT_CONFIG
    try:
        with rotation_lock(resolve_lock_path(settings)):
            result = run_rotation(settings, cleanup=not args.no_cleanup)
    except RotationLockedError:
        return EXIT_FAILED
    except NoSuitableFolderError:
        logging.error("Rotation aborted: no suitable cache folder")
        return EXIT_FAILED
    except OSError:
        logging.exception("Rotation failed")
        return EXIT_FAILED

    logging.info("Rotation complete: %s", result.playlist_path)
    if result.cleanup is not None and result.cleanup.dirty:
        logging.warning("Folders left for the next cleanup: %s", ", ".join(result.cleanup.dirty))
    return EXIT_OK


def cmd_send(settings, args):
    setup_logging(None)
    command = " ".join(args.command)
    channel = CommandChannel(settings.control_endpoint, timeout=settings.send_timeout_seconds)
    return EXIT_OK if channel.send(command).ok else EXIT_FAILED


# ─────────────────────────────────────────────────────────────────────────────
# Entry
# ─────────────────────────────────────────────────────────────────────────────
def build_parser():
    parser = argparse.ArgumentParser(description="Signage kiosk content rotator and player watchdog.")
    parser.add_argument("--config", default=None, help="Path to config JSON (default: $KIOSK_CONFIG or config/config.json).")
    sub = parser.add_subparsers(dest="command_name", required=True)

    watchdog = sub.add_parser("watchdog", help="Keep the media player running.")
    watchdog.set_defaults(handler=cmd_watchdog)

    rotate = sub.add_parser("rotate", help="Refresh the local cache and switch the player to it.")
    rotate.add_argument("--no-cleanup", action="store_true", help="Skip sweeping the other cache folders.")
    rotate.set_defaults(handler=cmd_rotate)

    send = sub.add_parser("send", help="Send one command to the running player.")
    send.add_argument("command", nargs="+", help="Command text, e.g. playlist-clear")
    send.set_defaults(handler=cmd_send)
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    config_path = args.config or default_config_path()
    try:
        settings = load_settings(config_path)
    except ConfigError as exc:
        setup_logging(None)
        logging.error("%s", exc)
        return EXIT_CONFIG
    return args.handler(settings, args)


if __name__ == "__main__":
    sys.exit(main())
