"""A threaded HTTP/1.1 server that hands each parsed request to a handler."""

from __future__ import annotations

import logging
import socket
import threading
from typing import Callable

from httpfromtcp.request import Request, request_from_reader
from httpfromtcp.response import StatusCode, Writer, default_headers

Handler = Callable[[Writer, Request], None]

_ACCEPT_POLL_SECONDS = 0.5

log = logging.getLogger(__name__)


class Server:
    """A listening HTTP/1.1 server; use :func:`serve` to start one."""

    def __init__(self, listener: socket.socket, handler: Handler) -> None:
        self._listener = listener
        self._handler = handler
        self._closed = threading.Event()
        self.port: int = listener.getsockname()[1]
        self._thread = threading.Thread(target=self._listen, daemon=True)
        self._thread.start()

    def close(self) -> None:
        """Stop accepting connections and release the listening socket."""
        if self._closed.is_set():
            return
        self._closed.set()
        self._listener.close()
        if self._thread is not threading.current_thread():
            self._thread.join(timeout=5 * _ACCEPT_POLL_SECONDS)

    def __enter__(self) -> Server:
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def _listen(self) -> None:
        while not self._closed.is_set():
            try:
                conn, _ = self._listener.accept()
            except socket.timeout:
                continue
            except OSError as exc:
                if self._closed.is_set():
                    return
                log.error("Error accepting connection: %s", exc)
                continue
            threading.Thread(target=self._handle, args=(conn,), daemon=True).start()

    def _handle(self, conn: socket.socket) -> None:
        try:
            with conn, conn.makefile("rb") as reader, conn.makefile("wb") as stream:
                writer = Writer(stream)
                try:
                    request = request_from_reader(reader)
                except (ValueError, OSError) as exc:
                    body = f"Error parsing request: {exc}".encode("utf-8")
                    writer.write_status_line(StatusCode.BAD_REQUEST)
                    writer.write_headers(default_headers(len(body)))
                    writer.write_body(body)
                    return
                try:
                    self._handler(writer, request)
                except OSError:
                    raise
                except Exception:
                    log.exception("Handler failed")
        except OSError as exc:
            log.error("Connection error: %s", exc)


def serve(port: int, handler: Handler) -> Server:
    """Listen on *port* on all interfaces and serve requests with *handler*.

    Port 0 picks a free port; the chosen one is in ``Server.port``.
    """
    listener = socket.create_server(("", port))
    listener.settimeout(_ACCEPT_POLL_SECONDS)
    return Server(listener, handler)