import json
import os
import socketserver
import tempfile
import threading

import pytest

from barblocks.docker import DockerStatus, fetch_status, parse_status

INFO = {
    "Containers": 7,
    "ContainersRunning": 4,
    "ContainersStopped": 2,
    "ContainersPaused": 1,
    "Images": 12,
    "ServerVersion": "unused",
}


def test_parse_status_from_bytes():
    status = parse_status(json.dumps(INFO).encode())
    assert status == DockerStatus(
        total=INFO["Containers"],
        running=INFO["ContainersRunning"],
        stopped=INFO["ContainersStopped"],
        paused=INFO["ContainersPaused"],
        images=INFO["Images"],
    )


def test_parse_status_from_mapping_and_text_agree():
    assert parse_status(INFO) == parse_status(json.dumps(INFO))


def test_parse_status_missing_field():
    data = dict(INFO)
    del data["Images"]
    with pytest.raises(ValueError, match="Failed to deserialize JSON"):
        parse_status(data)


@pytest.mark.parametrize("bad", [b"not json", b"[]", json.dumps({**INFO, "Containers": "7"})])
def test_parse_status_rejects_bad_payloads(bad):
    with pytest.raises(ValueError, match="Failed to deserialize JSON"):
        parse_status(bad)


def test_parse_status_rejects_booleans():
    with pytest.raises(ValueError):
        parse_status({**INFO, "Images": True})


@pytest.fixture
def docker_socket():
    requests_seen = []
    body = json.dumps(INFO).encode()

    class Handler(socketserver.StreamRequestHandler):
        def handle(self):
            lines = []
            while True:
                line = self.rfile.readline()
                if not line or line in (b"\r\n", b"\n"):
                    break
                lines.append(line.decode().rstrip("\r\n"))
            requests_seen.append(lines)
            self.wfile.write(
                b"HTTP/1.1 200 OK\r\nContent-Type: application/json\r\n"
                + f"Content-Length: {len(body)}\r\nConnection: close\r\n\r\n".encode()
                + body
            )

    with tempfile.TemporaryDirectory() as d:
        path = os.path.join(d, "d.sock")
        server = socketserver.UnixStreamServer(path, Handler)
        thread = threading.Thread(target=server.handle_request, daemon=True)
        thread.start()
        try:
            yield path, requests_seen
        finally:
            thread.join(timeout=5)
            server.server_close()


def test_fetch_status_over_unix_socket(docker_socket):
    path, seen = docker_socket
    status = fetch_status(path)
    assert status == parse_status(INFO)
    assert seen[0][0].startswith("GET /info ")
    assert "Host: localhost" in seen[0]


def test_fetch_status_missing_socket(tmp_path):
    with pytest.raises(RuntimeError, match="Failed to connect to socket"):
        fetch_status(tmp_path / "missing.sock")