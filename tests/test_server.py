import socket

import pytest

from httpfromtcp.response import StatusCode, default_headers
from httpfromtcp.server import serve


def _ok_handler(writer, req):
    body = req.request_line.request_target.encode()
    writer.write_status_line(StatusCode.SUCCESS)
    writer.write_headers(default_headers(len(body)))
    writer.write_body(body)


def _exchange(port, payload):
    with socket.create_connection(("127.0.0.1", port), timeout=5) as client:
        client.sendall(payload)
        client.shutdown(socket.SHUT_WR)
        received = bytearray()
        while True:
            chunk = client.recv(4096)
            if not chunk:
                break
            received += chunk
    return bytes(received)


@pytest.fixture
def server():
    srv = serve(0, _ok_handler)
    yield srv
    srv.close()


def test_handler_answers_request(server):
    raw = _exchange(server.port, b"GET /coffee HTTP/1.1\r\nHost: localhost:42069\r\n\r\n")
    assert raw.startswith(b"HTTP/1.1 200 OK\r\n")
    head, _, body = raw.partition(b"\r\n\r\n")
    assert body == b"/coffee"
    assert b"content-length: 7" in head.split(b"\r\n")


def test_malformed_request_gets_bad_request(server):
    raw = _exchange(server.port, b"GET / HTTP/1.0\r\n\r\n")
    assert raw.startswith(b"HTTP/1.1 400 Bad Request\r\n")
    _, _, body = raw.partition(b"\r\n\r\n")
    assert body.startswith(b"Error parsing request: ")
    assert b"1.0" in body


def test_incomplete_request_gets_bad_request(server):
    raw = _exchange(server.port, b"GET / HTTP/1.1\r\nHost: localhost:42069\r\n")
    assert raw.startswith(b"HTTP/1.1 400 Bad Request\r\n")
    _, _, body = raw.partition(b"\r\n\r\n")
    assert b"incomplete request" in body


def test_serves_several_connections(server):
    first = _exchange(server.port, b"GET /a HTTP/1.1\r\n\r\n")
    second = _exchange(server.port, b"GET /b HTTP/1.1\r\n\r\n")
    assert first.endswith(b"\r\n\r\n/a")
    assert second.endswith(b"\r\n\r\n/b")


def test_close_stops_listening():
    srv = serve(0, _ok_handler)
    port = srv.port
    srv.close()
    with pytest.raises(OSError):
        socket.create_connection(("127.0.0.1", port), timeout=2)


def test_context_manager_closes():
    with serve(0, _ok_handler) as srv:
        port = srv.port
        raw = _exchange(port, b"GET /x HTTP/1.1\r\n\r\n")
        assert raw.endswith(b"/x")
    with pytest.raises(OSError):
        socket.create_connection(("127.0.0.1", port), timeout=2)


def test_close_twice_is_harmless():
    srv = serve(0, _ok_handler)
    srv.close()
    srv.close()
    with pytest.raises(OSError):
        socket.create_connection(("127.0.0.1", srv.port), timeout=2)