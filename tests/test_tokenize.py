import pytest

from linkemu.errors import HTTPParseError
from linkemu.tokenize import MIMEType, split


def test_no_separator_returns_whole_string():
    assert split("abc", ",") == ["abc"]


def test_empty_string_gives_one_empty_token():
    assert split("", ",") == [""]


def test_empty_tokens_are_kept():
    assert split(",,", ",") == ["", "", ""]


@pytest.mark.parametrize(
    ("text", "separator"),
    [
        ("a,b,c", ","),
        ("GET / HTTP/1.1", " "),
        ("line1\r\nline2\r\n", "\r\n"),
        ("gzip, chunked", ","),
        ("x;;y;", ";"),
    ],
)
def test_join_round_trip(text, separator):
    tokens = split(text, separator)
    assert separator.join(tokens) == text
    assert len(tokens) == text.count(separator) + 1


def test_status_code_token():
    assert split("HTTP/1.1 200 OK", " ")[1] == "200"


def test_multicharacter_separator():
    assert split("a\r\nb", "\r\n") == ["a", "b"]


def test_overlapping_separator_occurrences():
    assert split("aaa", "aa") == ["", "a", ""]


def test_last_transfer_encoding_token():
    assert split("gzip, chunked", ",")[-1] == " chunked"


def test_mime_type_ignores_parameters():
    assert MIMEType("text/html; charset=utf-8").type == "text/html"


def test_mime_type_without_parameters():
    assert MIMEType("multipart/byteranges").type == "multipart/byteranges"


@pytest.mark.parametrize("content_type", ["", ";charset=utf-8"])
def test_mime_type_rejects_empty_type(content_type):
    with pytest.raises(HTTPParseError):
        MIMEType(content_type)