"""Writing HTTP/1.1 responses: status line, headers, bodies and trailers."""

from __future__ import annotations

import enum
from typing import BinaryIO

from httpfromtcp.headers import Headers

CRLF = b"\r\n"


class StatusCode(enum.IntEnum):
    """The status codes this server answers with."""

    SUCCESS = 200
    BAD_REQUEST = 400
    INTERNAL_SERVER_ERROR = 500


_REASON_PHRASES = {
    StatusCode.SUCCESS: "OK",
    StatusCode.BAD_REQUEST: "Bad Request",
    StatusCode.INTERNAL_SERVER_ERROR: "Internal Server Error",
}


def status_line(status_code: int) -> bytes:
    """Return the encoded status line for *status_code*."""
    code = int(status_code)
    reason = _REASON_PHRASES.get(code, "")
    return f"HTTP/1.1 {code} {reason}\r\n".encode("ascii")


def default_headers(content_length: int) -> Headers:
    """Return the headers sent with every plain response."""
    headers = Headers()
    headers.set("Content-Length", str(content_length))
    headers.set("Connection", "close")
    headers.set("Content-Type", "text/plain")
    return headers


class WriterStateError(RuntimeError):
    """Raised when a response part is written out of order."""


class _WriterState(enum.Enum):
    STATUS_LINE = enum.auto()
    HEADERS = enum.auto()
    BODY = enum.auto()
    TRAILERS = enum.auto()


def _encode_fields(headers: Headers) -> bytes:
    lines = (f"{name}: {value}\r\n" for name, value in headers.items())
    return "".join(lines).encode("utf-8", "surrogateescape")


class Writer:
    """Writes the parts of one response to a binary stream, in order."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self._state = _WriterState.STATUS_LINE

    def _require(self, state: _WriterState, part: str) -> None:
        if self._state is not state:
            raise WriterStateError(
                f"cannot write {part} in state {self._state.name.lower()}"
            )

    def write_status_line(self, status_code: int) -> None:
        """Write the status line."""
        self._require(_WriterState.STATUS_LINE, "status line")
        try:
            self._stream.write(status_line(status_code))
        finally:
            self._state = _WriterState.HEADERS

    def write_headers(self, headers: Headers) -> None:
        """Write the header fields and the blank line that ends them."""
        self._require(_WriterState.HEADERS, "headers")
        try:
            self._stream.write(_encode_fields(headers))
            self._stream.write(CRLF)
        finally:
            self._state = _WriterState.BODY

    def write_body(self, data: bytes) -> int:
        """Write raw body bytes and return how many were written."""
        self._require(_WriterState.BODY, "body")
        self._stream.write(data)
        return len(data)

    def write_chunked_body(self, data: bytes) -> int:
        """Write *data* as one chunk and return the bytes put on the wire."""
        self._require(_WriterState.BODY, "body")
        frame = f"{len(data):x}\r\n".encode("ascii") + bytes(data) + CRLF
        self._stream.write(frame)
        return len(frame)

    def write_chunked_body_done(self) -> int:
        """Write the last, empty chunk; trailers may follow."""
        self._require(_WriterState.BODY, "body")
        terminator = b"0" + CRLF
        self._stream.write(terminator)
        self._state = _WriterState.TRAILERS
        return len(terminator)

    def write_trailers(self, headers: Headers) -> None:
        """Write trailer fields and the blank line that ends the message."""
        self._require(_WriterState.TRAILERS, "trailers")
        try:
            self._stream.write(_encode_fields(headers))
            self._stream.write(CRLF)
        finally:
            self._state = _WriterState.BODY