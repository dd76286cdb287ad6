"""Parsers that find the end of HTTP message bodies of unknown length."""

from __future__ import annotations

import enum
import re
from abc import ABC, abstractmethod

from .errors import HTTPParseError

_CRLF = "\r\n"
_HEX = re.compile(r"[0-9A-Fa-f]+")


class BodyParser(ABC):
    """Decides how much of the incoming data belongs to a message body."""

    @abstractmethod
    def read(self, data: str) -> int | None:
        """Consume ``data``.

        Return ``None`` when all of it belongs to the body and the body is
        not yet complete; otherwise return how many characters of ``data``
        complete the body.
        """

    @abstractmethod
    def eof(self) -> bool:
        """Whether the message becomes complete when the stream ends in the body."""


class Rule5BodyParser(BodyParser):
    """Body terminated only by the end of the stream."""

    def read(self, data: str) -> int | None:
        return None

    def eof(self) -> bool:
        return True


class _ChunkState(enum.Enum):
    CHUNK_HDR = enum.auto()
    CHUNK = enum.auto()
    TRAILER = enum.auto()


def _chunk_size(chunk_header: str) -> int:
    """Parse a chunk header line (ending in CRLF) into the chunk size."""
    if not chunk_header.endswith(_CRLF):
        raise HTTPParseError("ChunkedBodyParser: chunk header does not end with CRLF")

    end = chunk_header.find(";")
    if end == -1:
        end = chunk_header.find(_CRLF)

    hex_string = chunk_header[:end]
    space = hex_string.find(" ")
    if space != -1:
        hex_string = hex_string[:space]

    if not _HEX.fullmatch(hex_string):
        raise HTTPParseError(f"ChunkedBodyParser: invalid chunk size {hex_string!r}")
    return int(hex_string, 16)


class ChunkedBodyParser(BodyParser):
    """Body sent with chunked transfer coding."""

    def __init__(self, trailers_enabled: bool) -> None:
        self._trailers_enabled = trailers_enabled
        self._buffer = ""
        self._chunk_size = 0
        self._acked_so_far = 0
        self._parsed_so_far = 0
        self._state = _ChunkState.CHUNK_HDR

    def read(self, data: str) -> int | None:
        self._buffer += data

        while self._buffer:
            if self._state is _ChunkState.CHUNK_HDR:
                end = self._buffer.find(_CRLF)
                if end == -1:
                    self._acked_so_far += len(data)
                    return None
                consumed = end + len(_CRLF)
                self._chunk_size = _chunk_size(self._buffer[:consumed])
                self._state = (
                    _ChunkState.TRAILER if self._chunk_size == 0 else _ChunkState.CHUNK
                )
                self._parsed_so_far += consumed
                self._buffer = self._buffer[consumed:]

            elif self._state is _ChunkState.CHUNK:
                consumed = self._chunk_size + len(_CRLF)
                if len(self._buffer) < consumed:
                    self._acked_so_far += len(data)
                    return None
                if self._buffer[self._chunk_size:consumed] != _CRLF:
                    raise HTTPParseError("ChunkedBodyParser: chunk data not followed by CRLF")
                self._state = _ChunkState.CHUNK_HDR
                self._parsed_so_far += consumed
                self._buffer = self._buffer[consumed:]

            else:
                terminator = _CRLF + _CRLF if self._trailers_enabled else _CRLF
                return self._ack_size(terminator, len(data))

        self._acked_so_far += len(data)
        return None

    def _ack_size(self, terminator: str, input_size: int) -> int | None:
        """Report how much of the latest input completes the body, if any."""
        location = self._buffer.find(terminator)
        if location == -1:
            self._acked_so_far += input_size
            return None
        self._parsed_so_far += location + len(terminator)
        return self._parsed_so_far - self._acked_so_far

    def eof(self) -> bool:
        return True