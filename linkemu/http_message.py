"""HTTP requests and responses, built up incrementally by a parser."""

from __future__ import annotations

import enum
import re
from abc import ABC, abstractmethod

from .body_parser import BodyParser, ChunkedBodyParser, Rule5BodyParser
from .errors import HTTPParseError, UnsupportedMessageError
from .http_header import HTTPHeader
from .tokenize import MIMEType, split

CRLF = "\r\n"

_ASCII_LOWER = str.maketrans(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz"
)
_DECIMAL = re.compile(r"\d+")


class MessageState(enum.IntEnum):
    """Progress of a message through parsing, in order."""

    FIRST_LINE_PENDING = 0
    HEADERS_PENDING = 1
    BODY_PENDING = 2
    COMPLETE = 3


def equivalent_strings(a: str, b: str) -> bool:
    """Compare two strings ASCII case-insensitively, ignoring leading spaces."""
    return a.lstrip(" ").translate(_ASCII_LOWER) == b.lstrip(" ").translate(_ASCII_LOWER)


def _parse_length(text: str) -> int:
    """Parse a decimal length such as a Content-Length value."""
    stripped = text.strip()
    if not _DECIMAL.fullmatch(stripped):
        raise HTTPParseError(f"invalid length: {text!r}")
    return int(stripped)


class HTTPMessage(ABC):
    """Common state and behaviour of HTTP requests and responses."""

    def __init__(self) -> None:
        self._first_line = ""
        self._headers: list[HTTPHeader] = []
        self._body = ""
        self._state = MessageState.FIRST_LINE_PENDING
        self._body_size_known = False
        self._expected_body_size: int | None = None

    # hooks for requests and responses

    @abstractmethod
    def _calculate_expected_body_size(self) -> None:
        """Decide how the body length is determined once headers are known."""

    @abstractmethod
    def _read_in_complex_body(self, data: str) -> int:
        """Consume body data whose length is not known in advance."""

    @abstractmethod
    def _eof_in_body(self) -> bool:
        """Whether the end of the stream completes the body."""

    def _require_state(self, state: MessageState, action: str) -> None:
        if self._state is not state:
            raise HTTPParseError(f"{action} in state {self._state.name}")

    def _set_expected_body_size(self, is_known: bool, value: int | None = None) -> None:
        self._require_state(MessageState.BODY_PENDING, "setting expected body size")
        self._body_size_known = is_known
        self._expected_body_size = value

    # read-only views

    @property
    def state(self) -> MessageState:
        return self._state

    @property
    def first_line(self) -> str:
        return self._first_line

    @property
    def headers(self) -> tuple[HTTPHeader, ...]:
        return tuple(self._headers)

    @property
    def body(self) -> str:
        return self._body

    # methods called by a parser

    def set_first_line(self, line: str) -> None:
        """Record the request or status line."""
        self._require_state(MessageState.FIRST_LINE_PENDING, "setting first line")
        self._first_line = line
        self._state = MessageState.HEADERS_PENDING

    def add_header(self, line: str) -> None:
        """Parse and record one header line."""
        self._require_state(MessageState.HEADERS_PENDING, "adding header")
        self._headers.append(HTTPHeader.from_line(line))

    def done_with_headers(self) -> None:
        """Mark the end of the headers and work out how the body ends."""
        self._require_state(MessageState.HEADERS_PENDING, "ending headers")
        self._state = MessageState.BODY_PENDING
        self._calculate_expected_body_size()

    def read_in_body(self, data: str) -> int:
        """Consume body data; return how many characters of ``data`` were used."""
        self._require_state(MessageState.BODY_PENDING, "reading body")

        if not self.body_size_is_known():
            return self._read_in_complex_body(data)

        expected = self.expected_body_size()
        amount = min(expected - len(self._body), len(data))
        self._body += data[:amount]
        if len(self._body) == expected:
            self._state = MessageState.COMPLETE
        return amount

    def eof(self) -> None:
        """Handle the end of the stream."""
        if self._state is MessageState.FIRST_LINE_PENDING:
            return
        if self._state is MessageState.HEADERS_PENDING:
            raise HTTPParseError("HTTPMessage: EOF received in middle of headers")
        if self._state is MessageState.BODY_PENDING:
            if self._eof_in_body():
                self._state = MessageState.COMPLETE
            return
        raise HTTPParseError("HTTPMessage: EOF received for a complete message")

    def body_size_is_known(self) -> bool:
        """Whether the body length was known when the headers ended."""
        if self._state <= MessageState.HEADERS_PENDING:
            raise HTTPParseError("body size is not determined before headers end")
        return self._body_size_known

    def expected_body_size(self) -> int:
        """The body length announced by the headers."""
        if not self.body_size_is_known() or self._expected_body_size is None:
            raise HTTPParseError("body size is not known in advance")
        return self._expected_body_size

    # header lookup

    def has_header(self, name: str) -> bool:
        """Whether a header with this name (case-insensitive) is present."""
        return any(equivalent_strings(header.key, name) for header in self._headers)

    def get_header_value(self, name: str) -> str:
        """The value of the first header with this name (case-insensitive)."""
        for header in self._headers:
            if equivalent_strings(header.key, name):
                return header.value
        raise KeyError(f"HTTPMessage header not found: {name}")

    def serialize(self) -> str:
        """The complete message as it appears on the wire."""
        self._require_state(MessageState.COMPLETE, "serializing")
        parts = [self._first_line + CRLF]
        parts.extend(str(header) + CRLF for header in self._headers)
        parts.append(CRLF)
        parts.append(self._body)
        return "".join(parts)


class HTTPRequest(HTTPMessage):
    """An HTTP request; its body length is always known in advance."""

    def _calculate_expected_body_size(self) -> None:
        line = self._first_line
        if line.startswith("GET ") or line.startswith("HEAD "):
            self._set_expected_body_size(True, 0)
        elif line.startswith("POST "):
            if not self.has_header("Content-Length"):
                raise UnsupportedMessageError("HTTPRequest: does not support chunked requests")
            self._set_expected_body_size(
                True, _parse_length(self.get_header_value("Content-Length"))
            )
        elif line.startswith("OPTIONS "):
            if (
                self.has_header("Transfer-Encoding")
                and self.get_header_value("Transfer-Encoding") == "chunked"
            ):
                raise UnsupportedMessageError("HTTPRequest: does not support chunked requests")
            content_length = 0
            if self.has_header("Content-Length"):
                content_length = _parse_length(self.get_header_value("Content-Length"))
            self._set_expected_body_size(True, content_length)
        else:
            raise UnsupportedMessageError(f"Cannot handle HTTP method: {line}")

    def _read_in_complex_body(self, data: str) -> int:
        raise UnsupportedMessageError("HTTPRequest: does not support chunked requests")

    def _eof_in_body(self) -> bool:
        raise HTTPParseError("HTTPRequest: got EOF in middle of body")

    def is_head(self) -> bool:
        """Whether this is a HEAD request (methods are case-sensitive)."""
        if self._state <= MessageState.FIRST_LINE_PENDING:
            raise HTTPParseError("HTTPRequest: request line not yet known")
        return self._first_line.startswith("HEAD ")


class HTTPResponse(HTTPMessage):
    """An HTTP response, paired with the request it answers."""

    def __init__(self) -> None:
        super().__init__()
        self._request = HTTPRequest()
        self._body_parser: BodyParser | None = None

    @property
    def request(self) -> HTTPRequest:
        return self._request

    def set_request(self, request: HTTPRequest) -> None:
        """Pair this response with its request before parsing begins."""
        self._require_state(MessageState.FIRST_LINE_PENDING, "setting request")
        self._request = request

    def status_code(self) -> str:
        """The status code from the status line."""
        if self._state <= MessageState.FIRST_LINE_PENDING:
            raise HTTPParseError("HTTPResponse: status line not yet known")
        tokens = split(self._first_line, " ")
        if len(tokens) < 3:
            raise HTTPParseError(f"HTTPResponse: Invalid status line: {self._first_line}")
        return tokens[1]

    def _calculate_expected_body_size(self) -> None:
        code = self.status_code()
        if code.startswith("1") or code in ("204", "304") or self._request.is_head():
            self._set_expected_body_size(True, 0)
        elif self.has_header("Transfer-Encoding") and equivalent_strings(
            split(self.get_header_value("Transfer-Encoding"), ",")[-1], "chunked"
        ):
            self._set_expected_body_size(False)
            self._body_parser = ChunkedBodyParser(self.has_header("Trailer"))
        elif not self.has_header("Transfer-Encoding") and self.has_header("Content-Length"):
            self._set_expected_body_size(
                True, _parse_length(self.get_header_value("Content-Length"))
            )
        elif self.has_header("Content-Type") and equivalent_strings(
            MIMEType(self.get_header_value("Content-Type")).type, "multipart/byteranges"
        ):
            self._set_expected_body_size(False)
            raise UnsupportedMessageError(
                "HTTPResponse: unsupported multipart/byteranges without Content-Length"
            )
        else:
            self._set_expected_body_size(False)
            self._body_parser = Rule5BodyParser()

    def _read_in_complex_body(self, data: str) -> int:
        if self._body_parser is None:
            raise HTTPParseError("HTTPResponse: no body parser for body of unknown size")
        amount = self._body_parser.read(data)
        if amount is None:
            self._body += data
            return len(data)
        self._body += data[:amount]
        self._state = MessageState.COMPLETE
        return amount

    def _eof_in_body(self) -> bool:
        if self._body_parser is None:
            raise HTTPParseError("HTTPResponse: got EOF in middle of body")
        return self._body_parser.eof()