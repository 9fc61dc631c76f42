import io

import pytest

from httpfromtcp.headers import Headers
from httpfromtcp.response import (
    StatusCode,
    Writer,
    WriterStateError,
    default_headers,
    status_line,
)


@pytest.fixture
def stream():
    return io.BytesIO()


def _writer_in_body_state(stream):
    writer = Writer(stream)
    writer.write_status_line(StatusCode.SUCCESS)
    writer.write_headers(Headers())
    return writer


def test_status_line_success():
    assert status_line(StatusCode.SUCCESS) == b"HTTP/1.1 200 OK\r\n"


@pytest.mark.parametrize(
    "code, reason",
    [
        (StatusCode.BAD_REQUEST, b"Bad Request"),
        (StatusCode.INTERNAL_SERVER_ERROR, b"Internal Server Error"),
    ],
)
def test_status_line_reasons(code, reason):
    line = status_line(code)
    assert line.startswith(b"HTTP/1.1 " + str(int(code)).encode() + b" ")
    assert line.endswith(reason + b"\r\n")


def test_status_line_unknown_code_has_empty_reason():
    line = status_line(404)
    assert line.startswith(b"HTTP/1.1 404")
    assert line.rstrip(b"\r\n").split(b" ")[-1] == b""


def test_default_headers():
    headers = default_headers(42)
    assert headers.get("Content-Length") == "42"
    assert headers.get("Connection") == "close"
    assert headers.get("Content-Type") == "text/plain"
    assert len(headers) == 3


def test_full_response_on_the_wire(stream):
    writer = Writer(stream)
    writer.write_status_line(StatusCode.SUCCESS)
    headers = Headers()
    headers.set("Content-Type", "text/html")
    writer.write_headers(headers)
    assert writer.write_body(b"hi") == 2
    assert stream.getvalue() == b"HTTP/1.1 200 OK\r\ncontent-type: text/html\r\n\r\nhi"


def test_headers_block_ends_with_blank_line(stream):
    writer = Writer(stream)
    writer.write_status_line(StatusCode.BAD_REQUEST)
    writer.write_headers(default_headers(0))
    lines = stream.getvalue().split(b"\r\n")
    assert lines[0] == status_line(StatusCode.BAD_REQUEST).rstrip(b"\r\n")
    assert b"connection: close" in lines
    assert lines[-2:] == [b"", b""]


def test_chunked_body_and_trailers(stream):
    writer = _writer_in_body_state(stream)
    start = len(stream.getvalue())
    written = writer.write_chunked_body(b"hello")
    assert written == len(stream.getvalue()) - start
    assert stream.getvalue()[start:] == b"5\r\nhello\r\n"

    done = writer.write_chunked_body_done()
    assert stream.getvalue().endswith(b"0\r\n")
    assert done == 3

    trailers = Headers()
    trailers.override("X-Content-Length", "5")
    writer.write_trailers(trailers)
    assert stream.getvalue().endswith(b"0\r\nx-content-length: 5\r\n\r\n")


def test_chunk_size_is_hexadecimal(stream):
    writer = _writer_in_body_state(stream)
    start = len(stream.getvalue())
    data = b"x" * 1024
    writer.write_chunked_body(data)
    size_line, _, rest = stream.getvalue()[start:].partition(b"\r\n")
    assert int(size_line, 16) == len(data)
    assert rest == data + b"\r\n"


def test_status_line_only_once(stream):
    writer = Writer(stream)
    writer.write_status_line(StatusCode.SUCCESS)
    with pytest.raises(WriterStateError):
        writer.write_status_line(StatusCode.SUCCESS)


def test_headers_before_status_line_rejected(stream):
    writer = Writer(stream)
    with pytest.raises(WriterStateError):
        writer.write_headers(Headers())
    assert stream.getvalue() == b""


def test_body_before_headers_rejected(stream):
    writer = Writer(stream)
    writer.write_status_line(StatusCode.SUCCESS)
    with pytest.raises(WriterStateError):
        writer.write_body(b"data")
    with pytest.raises(WriterStateError):
        writer.write_chunked_body(b"data")
    with pytest.raises(WriterStateError):
        writer.write_chunked_body_done()


def test_trailers_require_chunked_done(stream):
    writer = _writer_in_body_state(stream)
    with pytest.raises(WriterStateError):
        writer.write_trailers(Headers())


def test_body_cannot_follow_chunked_done_until_trailers(stream):
    writer = _writer_in_body_state(stream)
    writer.write_chunked_body_done()
    with pytest.raises(WriterStateError):
        writer.write_body(b"late")
    writer.write_trailers(Headers())
    assert writer.write_body(b"ok") == 2