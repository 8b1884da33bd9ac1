"""Container and image counts from the local docker daemon."""

from __future__ import annotations

import http.client
import json
import os
import socket
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

DEFAULT_INTERVAL = 5
DEFAULT_SOCKET_PATH = "/var/run/docker.sock"
REQUEST_TIMEOUT = 10.0

_FIELDS = {
    "total": "Containers",
    "running": "ContainersRunning",
    "stopped": "ContainersStopped",
    "paused": "ContainersPaused",
    "images": "Images",
}


@dataclass(frozen=True)
class DockerStatus:
    """Counts reported by the daemon's ``/info`` endpoint."""

    total: int
    running: int
    stopped: int
    paused: int
    images: int


def parse_status(payload: bytes | str | Mapping[str, Any]) -> DockerStatus:
    """Build a status from the JSON returned by ``/info``."""
    if isinstance(payload, Mapping):
        data: Any = payload
    else:
        try:
            data = json.loads(payload)
        except ValueError as exc:
            raise ValueError("Failed to deserialize JSON") from exc
    if not isinstance(data, Mapping):
        raise ValueError("Failed to deserialize JSON")
    values = {}
    for name, key in _FIELDS.items():
        value = data.get(key)
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError("Failed to deserialize JSON")
        values[name] = value
    return DockerStatus(**values)


class _UnixHTTPConnection(http.client.HTTPConnection):
    def __init__(self, socket_path: str, timeout: float) -> None:
        super().__init__("localhost", timeout=timeout)
        self._socket_path = socket_path

    def connect(self) -> None:
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        sock.settimeout(self.timeout)
        try:
            sock.connect(self._socket_path)
        except OSError:
            sock.close()
            raise
        self.sock = sock


def fetch_status(socket_path: str | os.PathLike[str] = DEFAULT_SOCKET_PATH) -> DockerStatus:
    """Query the daemon listening on ``socket_path``; ``~`` and variables are expanded."""
    path = os.path.expandvars(os.path.expanduser(os.fspath(socket_path)))
    conn = _UnixHTTPConnection(path, REQUEST_TIMEOUT)
    try:
        try:
            conn.connect()
        except OSError as exc:
            raise RuntimeError("Failed to connect to socket") from exc
        try:
            conn.request("GET", "/info", headers={"Host": "localhost"})
            body = conn.getresponse().read()
        except (OSError, http.client.HTTPException) as exc:
            raise RuntimeError("Failed to get response") from exc
    finally:
        conn.close()
    return parse_status(body)