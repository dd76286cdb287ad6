"""String splitting and MIME media-type helpers used by the HTTP parser."""

from __future__ import annotations

from .errors import HTTPParseError


def _occurrences(text: str, separator: str):
    """Yield every position of ``separator`` in ``text``, overlapping ones included."""
    position = text.find(separator)
    while position != -1:
        yield position
        position = text.find(separator, position + 1)


def split(text: str, separator: str) -> list[str]:
    """Split ``text`` at every occurrence of ``separator``.

    Empty tokens are kept, so the result always has one more element than
    there are separators. Occurrences may overlap; a token whose end lies
    before its start runs to the end of the string.
    """
    indices = list(_occurrences(text, separator))
    if not indices:
        return [text]

    starts = [0] + [index + len(separator) for index in indices]
    ends: list[int | None] = [*indices, None]

    tokens = []
    for start, end in zip(starts, ends):
        if end is None or end < start:
            tokens.append(text[start:])
        else:
            tokens.append(text[start:end])
    return tokens


class MIMEType:
    """The media type of a Content-Type header value; parameters are ignored."""

    def __init__(self, content_type: str) -> None:
        type_and_parameters = split(content_type, ";")
        if not type_and_parameters or not type_and_parameters[0]:
            raise HTTPParseError("MIMEType: invalid MIME media-type string")
        self._type = type_and_parameters[0]

    @property
    def type(self) -> str:
        """The media type, e.g. ``text/html``."""
        return self._type

    def __repr__(self) -> str:
        return f"MIMEType({self._type!r})"