"""Accept TCP connections and print each HTTP request they carry."""

from __future__ import annotations

import argparse
import socket
import sys

from httpfromtcp.request import Request, request_from_reader

PORT = 42069


def describe_request(req: Request) -> str:
    """Return a readable listing of the request line and headers."""
    lines = [
        "Request line:",
        f"- Method: {req.request_line.method}",
        f"- Target: {req.request_line.request_target}",
        f"- Version: {req.request_line.http_version}",
        "Headers:",
    ]
    lines.extend(f"- {name}: {value}" for name, value in req.headers.items())
    return "\n".join(lines) + "\n"


def main(argv: list[str] | None = None) -> int:
    """Listen for connections and print the request each one sends."""
    parser = argparse.ArgumentParser(prog="tcplistener", description="Print incoming HTTP requests.")
    parser.add_argument("--port", type=int, default=PORT, help="port to listen on")
    args = parser.parse_args(argv)

    try:
        listener = socket.create_server(("", args.port))
    except OSError as exc:
        raise SystemExit(f"error listening for TCP traffic: {exc}") from exc

    with listener:
        print("Listening for TCP traffic on", f":{args.port}")
        try:
            while True:
                try:
                    conn, address = listener.accept()
                except OSError as exc:
                    raise SystemExit(f"error: {exc}") from exc
                print("Accepted connection from", f"{address[0]}:{address[1]}")
                with conn, conn.makefile("rb") as reader:
                    try:
                        req = request_from_reader(reader)
                    except (ValueError, OSError) as exc:
                        raise SystemExit(f"error parsing request: {exc}") from exc
                print(describe_request(req), end="")
        except KeyboardInterrupt:
            return 0


if __name__ == "__main__":
    sys.exit(main())