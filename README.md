# httpfromtcp

A small HTTP/1.1 server built straight on TCP sockets. It uses only the
standard library.

## Modules

- `httpfromtcp.headers`: `Headers`, a `dict` keyed by lower-cased field name.
  `Headers.parse(data)` parses one header line and returns
  `(bytes_consumed, done)`. It consumes nothing until a full `\r\n`-terminated
  line is present. It raises `HeaderError` for a line without a colon, a
  space before the colon, or a name with characters other than ASCII letters,
  digits and `-`. `set` joins repeated values with `", "`. `override`
  replaces a value and `remove` deletes one. `get` looks names up
  case-insensitively and returns `None` when the name is absent.
  `is_valid_token(name)` checks a field name.
- `httpfromtcp.request`: `request_from_reader(reader)` reads from a binary
  stream until a whole request has arrived. It uses `read1` when the stream
  has it and `read` otherwise. It returns a `Request` with `request_line`
  (a `RequestLine` with `method`, `request_target`, `http_version`), `headers`
  and `body`. Only `HTTP/1.1` request lines with an upper-case method are
  accepted. The body is read to the length given by `Content-Length`. Without
  that header, any bytes after the headers are ignored. `RequestError` is
  raised for malformed input, a body longer than `Content-Length`, or a
  stream that ends early. `parse_request_line` and `RequestLine.from_string`
  parse the first line alone. `Request.parse(data)` feeds bytes to the
  parser incrementally.
- `httpfromtcp.response`: `StatusCode` (200, 400, 500), `status_line(code)`
  and `default_headers(content_length)`. The default headers are
  `Content-Length`, `Connection: close` and `Content-Type: text/plain`.
  `Writer(stream)` writes the status line, then the headers, then the body.
  Writing a part out of order raises `WriterStateError`. For chunked bodies,
  call `write_chunked_body` for each chunk, then `write_chunked_body_done`,
  then `write_trailers`.
- `httpfromtcp.server`: `serve(port, handler)` listens on all interfaces and
  calls `handler(writer, request)` for each connection in its own thread. It
  returns a `Server`. Port 0 picks a free port, and `Server.port` holds the
  port in use. `Server.close()` stops it, and a `Server` also works as a
  context manager. When a request cannot be parsed, the server replies
  `400 Bad Request` with the parser's error message as the body. Exceptions
  raised by the handler are logged.

## Installation

```
pip install .
```

## Commands

Start the demo HTTP server (default port 42069, change it with `--port`). It
runs until SIGINT or SIGTERM:

```
httpfromtcp-server
```

The server answers these routes:

- `/myproblem`: a 500 HTML page.
- `/video`: `assets/vim.mp4` from the current directory, as `video/mp4`. If
  the file cannot be read, it returns the 500 page.
- any target starting with `/httpbin`: the rest of the path is fetched from
  `https://httpbin.org/`. The body is relayed as a chunked response with the
  trailers `X-Content-SHA256` and `X-Content-Length`. The status line is
  always 200 once the upstream answers. If the upstream cannot be reached,
  the reply is the 500 page.
- everything else, `/yourproblem` included: a 200 HTML page.

Print the request line and headers of each TCP connection (default port
42069, `--port` to change it). The command stops at the first request it
cannot parse:

```
httpfromtcp-tcplistener
```

Send each line typed on standard input as a UDP datagram. The default target
is `localhost:42069`; use `--host` and `--port` to change it:

```
httpfromtcp-udpsender
```

## Library use

```python
from httpfromtcp.response import StatusCode, default_headers
from httpfromtcp.server import serve


def hello(writer, req):
    body = f"You asked for {req.request_line.request_target}\n".encode()
    writer.write_status_line(StatusCode.SUCCESS)
    writer.write_headers(default_headers(len(body)))
    writer.write_body(body)


with serve(8080, hello):
    input("Serving on port 8080, press Enter to stop\n")
```

## Limitations

- Each connection carries exactly one request. The connection is closed
  after the response, so there is no keep-alive or pipelining.
- Request bodies are read only by `Content-Length`. Chunked request bodies
  are not decoded.
- Only the status codes 200, 400 and 500 have reason phrases.
- There is no TLS and no routing framework. Handlers are plain functions.

## Tests

```
pip install ".[test]"
pytest
```