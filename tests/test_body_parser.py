import pytest

from linkemu.body_parser import BodyParser, ChunkedBodyParser, Rule5BodyParser
from linkemu.errors import HTTPParseError

BODY = "5\r\nhello\r\n0\r\n\r\n"


def test_rule5_takes_everything():
    parser = Rule5BodyParser()
    assert parser.read("anything at all") is None
    assert parser.read("") is None
    assert parser.eof() is True


def test_body_parser_is_abstract():
    with pytest.raises(TypeError):
        BodyParser()


def test_chunked_whole_body_in_one_read():
    parser = ChunkedBodyParser(False)
    assert parser.read(BODY) == len(BODY)


def test_chunked_stops_at_end_of_body():
    parser = ChunkedBodyParser(False)
    assert parser.read(BODY + "GET / HTTP/1.1\r\n") == len(BODY)


def test_chunked_split_across_reads():
    parser = ChunkedBodyParser(False)
    first, second = BODY[:6], BODY[6:]
    assert parser.read(first) is None
    assert parser.read(second + "extra") == len(second)


@pytest.mark.parametrize("cut", range(1, len(BODY)))
def test_chunked_any_split_point(cut):
    parser = ChunkedBodyParser(False)
    first, second = BODY[:cut], BODY[cut:]
    assert parser.read(first) is None
    assert parser.read(second) == len(second)


def test_chunked_byte_by_byte():
    parser = ChunkedBodyParser(False)
    results = [parser.read(ch) for ch in BODY]
    assert results[:-1] == [None] * (len(BODY) - 1)
    assert results[-1] == 1


def test_chunked_multiple_chunks_and_hex_sizes():
    body = "a\r\n0123456789\r\n3\r\nabc\r\n0\r\n\r\n"
    parser = ChunkedBodyParser(False)
    assert parser.read(body) == len(body)


def test_chunked_extension_and_trailing_space():
    body = "5;name=value\r\nhello\r\n3 \r\nabc\r\n0\r\n\r\n"
    parser = ChunkedBodyParser(False)
    assert parser.read(body) == len(body)


def test_chunked_with_trailers():
    body = "5\r\nhello\r\n0\r\nExpires: never\r\n\r\n"
    parser = ChunkedBodyParser(True)
    assert parser.read(body + "rest") == len(body)


def test_chunked_trailers_wait_for_blank_line():
    parser = ChunkedBodyParser(True)
    head = "5\r\nhello\r\n0\r\nExpires: never\r\n"
    assert parser.read(head) is None
    assert parser.read("\r\n") == 2


def test_chunked_invalid_size_raises():
    parser = ChunkedBodyParser(False)
    with pytest.raises(HTTPParseError):
        parser.read("zz\r\n")


def test_chunked_missing_crlf_after_data_raises():
    parser = ChunkedBodyParser(False)
    with pytest.raises(HTTPParseError):
        parser.read("5\r\nhelloXY0\r\n\r\n")


def test_chunked_eof_completes():
    assert ChunkedBodyParser(False).eof() is True