"""A small HTTP/1.1 server on raw TCP sockets, with demo commands."""

__version__ = "0.1.0"
__all__ = ["headers", "request", "response", "server"]