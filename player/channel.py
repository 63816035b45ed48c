"""Fire-and-forget commands over the player's local control endpoint.

On POSIX the endpoint is a Unix domain socket path; on Windows it is a
named pipe (``\\\\.\\pipe\\<name>``). Every call opens its own short-lived
connection and never reads a response.
"""

from __future__ import annotations

import enum
import logging
import os
import socket
import time

logger = logging.getLogger(__name__)

WINDOWS_PIPE_PREFIX = "\\\\.\\pipe\\"
_ERROR_PIPE_BUSY = 231
_PIPE_RETRY_SECONDS = 0.01


class ConnectResult(enum.Enum):
    CONNECTED = "connected"
    TIMED_OUT = "timed_out"
    FAILED = "failed"

    @property
    def ok(self) -> bool:
        return self is ConnectResult.CONNECTED


def _is_windows() -> bool:
    return os.name == "nt"


def pipe_short_name(endpoint: str) -> str:
    """Strip a leading ``\\\\.\\pipe\\`` prefix (case-insensitive)."""
    if endpoint.lower().startswith(WINDOWS_PIPE_PREFIX.lower()):
        return endpoint[len(WINDOWS_PIPE_PREFIX):]
    return endpoint


def endpoint_address(endpoint: str) -> str:
    """Resolve a configured endpoint name to the address the platform connects to."""
    if _is_windows():
        return WINDOWS_PIPE_PREFIX + pipe_short_name(endpoint)
    return os.path.expanduser(endpoint)


def _open_pipe(address: str, timeout: float):
    # Named pipes have no connect timeout when opened as files; retry while busy.
    deadline = time.monotonic() + timeout
    while True:
        try:
            return open(address, "wb", buffering=0)
        except OSError as exc:
            if getattr(exc, "winerror", None) != _ERROR_PIPE_BUSY:
                raise
            if time.monotonic() >= deadline:
                raise TimeoutError(f"named pipe busy: {address}") from exc
            time.sleep(_PIPE_RETRY_SECONDS)


def _connect_socket(address: str, timeout: float) -> socket.socket:
    sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    sock.settimeout(timeout)
    try:
        sock.connect(address)
    except BaseException:
        sock.close()
        raise
    return sock


def _deliver(address: str, payload: bytes | None, timeout: float) -> None:
    if _is_windows():
        with _open_pipe(address, timeout) as pipe:
            if payload:
                pipe.write(payload)
        return
    with _connect_socket(address, timeout) as sock:
        if payload:
            sock.sendall(payload)


def probe_endpoint(endpoint: str, timeout: float) -> ConnectResult:
    """Check whether something is accepting connections on ``endpoint``.

    Connects and closes without writing. ``TIMED_OUT`` and ``FAILED`` both
    mean nobody is listening within ``timeout`` seconds.
    """
    address = endpoint_address(endpoint)
    try:
        _deliver(address, None, timeout)
    except (TimeoutError, socket.timeout):
        logger.debug("Probe of %s timed out after %.3fs", address, timeout)
        return ConnectResult.TIMED_OUT
    except OSError as exc:
        logger.debug("Probe of %s failed: %s", address, exc)
        return ConnectResult.FAILED
    return ConnectResult.CONNECTED


class CommandChannel:
    """Send single-line text commands to the player's control endpoint."""

    def __init__(self, endpoint: str, timeout: float = 0.5) -> None:
        if not endpoint:
            raise ValueError("endpoint is required")
        self._endpoint = endpoint
        self._timeout = timeout

    @property
    def address(self) -> str:
        return endpoint_address(self._endpoint)

    def send(self, command: str) -> ConnectResult:
        """Write ``command`` plus a newline over a fresh connection.

        Never raises for an unreachable endpoint: the result is logged and
        returned so callers can carry on while the player is down.
        """
        address = self.address
        payload = (command.rstrip("\r\n") + "\n").encode("utf-8")
        try:
            _deliver(address, payload, self._timeout)
        except (TimeoutError, socket.timeout):
            logger.warning("Timeout while connecting to control endpoint: %s", address)
            return ConnectResult.TIMED_OUT
        except OSError as exc:
            logger.warning("I/O error while sending to control endpoint %s: %s", address, exc)
            return ConnectResult.FAILED
        logger.info("Sent command to control endpoint %s - %s", address, command)
        return ConnectResult.CONNECTED
