"""Case-insensitive HTTP header fields and their wire-format parsing."""

from __future__ import annotations

import string

CRLF = b"\r\n"

_TOKEN_CHARS = frozenset(string.ascii_letters + string.digits + "-")


class HeaderError(ValueError):
    """Raised when a header line cannot be parsed."""


def _decode(raw: bytes) -> str:
    return raw.decode("utf-8", "surrogateescape")


def is_valid_token(name: str) -> bool:
    """Return True if *name* holds only ASCII letters, digits and hyphens."""
    return all(char in _TOKEN_CHARS for char in name)


class Headers(dict):
    """Header fields keyed by their lower-cased name."""

    def parse(self, data: bytes) -> tuple[int, bool]:
        """Parse one header line from *data*.

        Returns the number of bytes consumed and whether the blank line
        ending the header block was reached. Nothing is consumed while
        *data* holds no complete line.
        """
        data = bytes(data)
        end = data.find(CRLF)
        if end == -1:
            return 0, False
        if end == 0:
            return len(CRLF), True

        line = data[:end]
        raw_name, separator, raw_value = line.partition(b":")
        if not separator:
            raise HeaderError(f"malformed header line: {_decode(line)}")

        name = _decode(raw_name)
        if name != name.rstrip(" "):
            raise HeaderError(f"invalid header name: {name}")

        name = name.strip()
        if not is_valid_token(name):
            raise HeaderError(f"invalid header token found: {name}")

        self.set(name, _decode(raw_value.strip()))
        return end + len(CRLF), False

    def get(self, key: str) -> str | None:
        """Return the value stored under *key*, ignoring case, or None."""
        return super().get(key.lower())

    def set(self, key: str, value: str) -> None:
        """Store *value*, appending it to any existing value with ", "."""
        key = key.lower()
        if key in self:
            value = f"{self[key]}, {value}"
        self[key] = value

    def override(self, key: str, value: str) -> None:
        """Store *value*, replacing any existing value."""
        self[key.lower()] = value

    def remove(self, key: str) -> None:
        """Delete *key* if present."""
        self.pop(key.lower(), None)