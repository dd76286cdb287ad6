"""A single HTTP header line."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import HTTPParseError


@dataclass(frozen=True)
class HTTPHeader:
    """An HTTP header as a key and a value."""

    key: str
    value: str

    @classmethod
    def from_line(cls, line: str) -> HTTPHeader:
        """Parse a ``key: value`` line; leading spaces of the value are dropped."""
        key, colon, raw_value = line.partition(":")
        if not colon:
            raise HTTPParseError(f"HTTPHeader: buffer does not contain colon: {line!r}")

        stripped = raw_value.lstrip(" ")
        value = stripped if stripped else raw_value
        return cls(key, value)

    def __str__(self) -> str:
        return f"{self.key}: {self.value}"