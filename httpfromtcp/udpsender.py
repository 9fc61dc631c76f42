"""Send lines typed on standard input as UDP datagrams."""

from __future__ import annotations

import argparse
import socket
import sys
from typing import Iterable, TextIO

HOST = "localhost"
PORT = 42069


def send_lines(sock: socket.socket, lines: Iterable[str], out: TextIO) -> int:
    """Prompt on *out*, send each line over *sock* and report it.

    Returns the number of lines sent once *lines* runs out.
    """
    sent = 0
    source = iter(lines)
    while True:
        out.write("> ")
        out.flush()
        message = next(source, None)
        if message is None:
            return sent
        sock.send(message.encode("utf-8"))
        out.write(f"Message sent: {message}")
        sent += 1


def main(argv: list[str] | None = None) -> int:
    """Read lines from standard input and send each as a datagram."""
    parser = argparse.ArgumentParser(prog="udpsender", description="Send typed lines over UDP.")
    parser.add_argument("--host", default=HOST, help="destination host")
    parser.add_argument("--port", type=int, default=PORT, help="destination port")
    args = parser.parse_args(argv)
    address = f"{args.host}:{args.port}"

    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    except OSError as exc:
        print(f"Error creating UDP socket: {exc}", file=sys.stderr)
        return 1
    with sock:
        try:
            sock.connect((args.host, args.port))
        except OSError as exc:
            print(f"Error dialing UDP: {exc}", file=sys.stderr)
            return 1
        print(
            f"Sending to {address}. Type your message and press Enter to send. "
            "Press Ctrl+c to exit."
        )
        try:
            send_lines(sock, sys.stdin, sys.stdout)
        except KeyboardInterrupt:
            return 0
        except OSError as exc:
            print(f"Error sending message: {exc}", file=sys.stderr)
            return 1
    print("Error reading input: end of input", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())