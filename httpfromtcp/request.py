"""Incremental parsing of HTTP/1.1 requests from a byte stream."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field

from httpfromtcp.headers import Headers

CRLF = b"\r\n"

_READ_SIZE = 4096
_INTEGER = re.compile(r"[+-]?[0-9]+")


class RequestError(ValueError):
    """Raised when a request is malformed or incomplete."""


class _State(enum.Enum):
    INITIALIZED = enum.auto()
    PARSING_HEADERS = enum.auto()
    PARSING_BODY = enum.auto()
    DONE = enum.auto()


@dataclass
class RequestLine:
    """The method, target and version from the first line of a request."""

    method: str = ""
    request_target: str = ""
    http_version: str = ""

    @classmethod
    def from_string(cls, text: str) -> RequestLine:
        """Parse a request line such as ``GET / HTTP/1.1``."""
        parts = text.split(" ")
        if len(parts) != 3:
            raise RequestError(f"poorly formatted request-line: {text}")
        method, target, version_text = parts

        if not all("A" <= char <= "Z" for char in method):
            raise RequestError(f"invalid method: {method}")

        version_parts = version_text.split("/")
        if len(version_parts) != 2:
            raise RequestError(f"malformed start-line: {text}")
        protocol, version = version_parts
        if protocol != "HTTP":
            raise RequestError(f"unrecognized HTTP-version: {protocol}")
        if version != "1.1":
            raise RequestError(f"unrecognized HTTP-version: {version}")

        return cls(method=method, request_target=target, http_version=version)


def parse_request_line(data: bytes) -> tuple[RequestLine | None, int]:
    """Parse a request line from *data*.

    Returns the line and the bytes consumed, or ``(None, 0)`` while no
    complete line is available.
    """
    end = bytes(data).find(CRLF)
    if end == -1:
        return None, 0
    text = bytes(data[:end]).decode("utf-8", "surrogateescape")
    return RequestLine.from_string(text), end + len(CRLF)


@dataclass
class Request:
    """An HTTP request built up as its bytes arrive."""

    request_line: RequestLine = field(default_factory=RequestLine)
    headers: Headers = field(default_factory=Headers)
    body: bytes = b""
    _state: _State = field(default=_State.INITIALIZED, repr=False, compare=False)

    def parse(self, data: bytes) -> int:
        """Feed *data* to the parser and return how many bytes it consumed."""
        data = bytes(data)
        total = 0
        while self._state is not _State.DONE:
            consumed = self._parse_single(data[total:])
            total += consumed
            if consumed == 0:
                break
        return total

    def _parse_single(self, data: bytes) -> int:
        if self._state is _State.INITIALIZED:
            request_line, consumed = parse_request_line(data)
            if request_line is None:
                return 0
            self.request_line = request_line
            self._state = _State.PARSING_HEADERS
            return consumed

        if self._state is _State.PARSING_HEADERS:
            consumed, done = self.headers.parse(data)
            if done:
                self._state = _State.PARSING_BODY
            return consumed

        if self._state is _State.PARSING_BODY:
            length_text = self.headers.get("Content-Length")
            if length_text is None:
                self._state = _State.DONE
                return len(data)
            if not _INTEGER.fullmatch(length_text):
                raise RequestError(f"malformed Content-Length: {length_text!r}")
            content_length = int(length_text)
            self.body += data
            if len(self.body) > content_length:
                raise RequestError("Content-Length too large")
            if len(self.body) == content_length:
                self._state = _State.DONE
            return len(data)

        raise RequestError("trying to read data in a done state")


def request_from_reader(reader) -> Request:
    """Read and parse one request from a binary stream.

    *reader* needs a ``read`` method; ``read1`` is used instead when the
    stream offers it, so that reads return whatever data is available.
    """
    read = getattr(reader, "read1", None) or reader.read
    request = Request()
    buffer = bytearray()
    while request._state is not _State.DONE:
        chunk = read(_READ_SIZE)
        if not chunk:
            raise RequestError(
                "incomplete request, in state: "
                f"{request._state.name.lower()}, {len(buffer)} bytes unparsed at end of stream"
            )
        buffer += chunk
        consumed = request.parse(buffer)
        del buffer[:consumed]
    return request