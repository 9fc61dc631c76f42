"""The demo HTTP server: fixed pages, a proxy to httpbin and a video file."""

from __future__ import annotations

import argparse
import functools
import hashlib
import logging
import signal
import sys
import threading
from pathlib import Path
from urllib.error import HTTPError, URLError
from urllib.request import urlopen

from httpfromtcp.headers import Headers
from httpfromtcp.request import Request
from httpfromtcp.response import StatusCode, Writer, default_headers
from httpfromtcp.server import serve

PORT = 42069
HTTPBIN_URL = "https://httpbin.org/"
VIDEO_PATH = Path("assets/vim.mp4")
MAX_CHUNK_SIZE = 1024

log = logging.getLogger(__name__)

_BODY_400 = b"""<html>
<head>
<title>400 Bad Request</title>
</head>
<body>
<h1>Bad Request</h1>
<p>Your request honestly kinda sucked.</p>
</body>
</html>
"""

_BODY_500 = b"""<html>
<head>
<title>500 Internal Server Error</title>
</head>
<body>
<h1>Internal Server Error</h1>
<p>Okay, you know what? This one is on me.</p>
</body>
</html>
"""

_BODY_200 = b"""<html>
<head>
<title>200 OK</title>
</head>
<body>
<h1>Success!</h1>
<p>Your request was an absolute banger.</p>
</body>
</html>
"""


def _write_page(writer: Writer, status: StatusCode, body: bytes, content_type: str) -> None:
    writer.write_status_line(status)
    headers = default_headers(len(body))
    headers.override("Content-Type", content_type)
    writer.write_headers(headers)
    writer.write_body(body)


def handler(writer: Writer, req: Request) -> None:
    """Route a request to the handler for its target."""
    target = req.request_line.request_target
    if target.startswith("/httpbin"):
        proxy_handler(writer, req)
    elif target == "/video":
        video_handler(writer, req)
    elif target == "/myproblem":
        handler500(writer, req)
    else:
        handler200(writer, req)


def handler400(writer: Writer, req: Request | None) -> None:
    """Answer with the 400 page."""
    _write_page(writer, StatusCode.BAD_REQUEST, _BODY_400, "text/html")


def handler500(writer: Writer, req: Request | None) -> None:
    """Answer with the 500 page."""
    _write_page(writer, StatusCode.INTERNAL_SERVER_ERROR, _BODY_500, "text/html")


def handler200(writer: Writer, req: Request | None) -> None:
    """Answer with the 200 page."""
    _write_page(writer, StatusCode.SUCCESS, _BODY_200, "text/html")


def proxy_handler(writer: Writer, req: Request) -> None:
    """Relay an httpbin resource as a chunked body with digest trailers."""
    target = req.request_line.request_target.removeprefix("/httpbin/")
    url = HTTPBIN_URL + target
    log.info("Proxying to %s", url)
    try:
        upstream = urlopen(url)
    except HTTPError as exc:
        upstream = exc
    except (URLError, OSError, ValueError) as exc:
        log.error("Proxy request failed: %s", exc)
        handler500(writer, req)
        return

    with upstream:
        writer.write_status_line(StatusCode.SUCCESS)
        headers = default_headers(0)
        headers.override("Transfer-Encoding", "chunked")
        headers.remove("Content-Length")
        writer.write_headers(headers)

        digest = hashlib.sha256()
        length = 0
        try:
            for chunk in iter(functools.partial(upstream.read, MAX_CHUNK_SIZE), b""):
                log.debug("Read %d bytes", len(chunk))
                writer.write_chunked_body(chunk)
                digest.update(chunk)
                length += len(chunk)
        except OSError as exc:
            log.error("Error relaying body: %s", exc)

    try:
        writer.write_chunked_body_done()
        trailers = Headers()
        trailers.override("X-Content-SHA256", digest.hexdigest())
        trailers.override("X-Content-Length", str(length))
        writer.write_trailers(trailers)
    except OSError as exc:
        log.error("Error writing trailers: %s", exc)


def video_handler(writer: Writer, req: Request | None) -> None:
    """Serve the video file, or the 500 page when it cannot be read."""
    try:
        video = VIDEO_PATH.read_bytes()
    except OSError as exc:
        log.error("Cannot read %s: %s", VIDEO_PATH, exc)
        handler500(writer, None)
        return
    _write_page(writer, StatusCode.SUCCESS, video, "video/mp4")


def main(argv: list[str] | None = None) -> int:
    """Run the server until SIGINT or SIGTERM."""
    parser = argparse.ArgumentParser(prog="httpserver", description="Serve the demo HTTP pages.")
    parser.add_argument("--port", type=int, default=PORT, help="port to listen on")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)

    try:
        server = serve(args.port, handler)
    except OSError as exc:
        log.error("Error starting server: %s", exc)
        return 1

    stop = threading.Event()

    def _on_signal(signum, frame):
        stop.set()

    previous = {sig: signal.signal(sig, _on_signal) for sig in (signal.SIGINT, signal.SIGTERM)}
    try:
        with server:
            log.info("Server started on port %d", server.port)
            while not stop.wait(1.0):
                pass
    finally:
        for sig, old in previous.items():
            signal.signal(sig, old)
    log.info("Server gracefully stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())