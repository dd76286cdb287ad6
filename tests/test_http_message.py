import pytest

from linkemu.errors import HTTPParseError, UnsupportedMessageError
from linkemu.http_message import (
    HTTPRequest,
    HTTPResponse,
    MessageState,
    equivalent_strings,
)


def make_request(first_line, *headers):
    request = HTTPRequest()
    request.set_first_line(first_line)
    for header in headers:
        request.add_header(header)
    request.done_with_headers()
    return request


def complete_request(first_line, *headers):
    request = make_request(first_line, *headers)
    request.read_in_body("")
    return request


def make_response(request, first_line, *headers):
    response = HTTPResponse()
    response.set_request(request)
    response.set_first_line(first_line)
    for header in headers:
        response.add_header(header)
    response.done_with_headers()
    return response


@pytest.mark.parametrize(
    "a, b, expected",
    [
        ("Content-Length", "content-length", True),
        ("  Host", "HOST", True),
        ("Host", "Hosts", False),
        ("\u00c9", "\u00e9", False),
    ],
)
def test_equivalent_strings(a, b, expected):
    assert equivalent_strings(a, b) is expected


def test_get_request_has_empty_body():
    request = make_request("GET / HTTP/1.1", "Host: example.com")
    assert request.body_size_is_known() is True
    assert request.expected_body_size() == 0
    assert request.read_in_body("extra") == 0
    assert request.state is MessageState.COMPLETE


def test_post_request_reads_content_length():
    request = make_request("POST /form HTTP/1.1", "Content-Length: 5")
    assert request.read_in_body("hello world") == 5
    assert request.body == "hello"
    assert request.state is MessageState.COMPLETE


def test_post_request_partial_body_stays_pending():
    request = make_request("POST /form HTTP/1.1", "Content-Length: 5")
    assert request.read_in_body("hel") == 3
    assert request.state is MessageState.BODY_PENDING
    assert request.read_in_body("lo") == 2
    assert request.state is MessageState.COMPLETE


def test_post_without_content_length_is_unsupported():
    with pytest.raises(UnsupportedMessageError):
        make_request("POST /form HTTP/1.1", "Host: example.com")


def test_unknown_method_is_unsupported():
    with pytest.raises(UnsupportedMessageError):
        make_request("PUT /x HTTP/1.1")


def test_options_chunked_is_unsupported():
    with pytest.raises(UnsupportedMessageError):
        make_request("OPTIONS * HTTP/1.1", "Transfer-Encoding: chunked")


def test_options_without_length_has_empty_body():
    request = make_request("OPTIONS * HTTP/1.1")
    assert request.expected_body_size() == 0


def test_invalid_content_length_rejected():
    with pytest.raises(HTTPParseError):
        make_request("POST / HTTP/1.1", "Content-Length: abc")


def test_header_lookup_is_case_insensitive():
    request = complete_request("GET / HTTP/1.1", "Host: example.com")
    assert request.has_header("host")
    assert request.get_header_value("HOST") == "example.com"
    assert not request.has_header("Range")
    with pytest.raises(KeyError):
        request.get_header_value("Range")


def test_serialize_round_trip():
    wire = "GET /index.html HTTP/1.1\r\nHost: example.com\r\nAccept: */*\r\n\r\n"
    request = complete_request("GET /index.html HTTP/1.1", "Host: example.com", "Accept: */*")
    assert request.serialize() == wire


def test_serialize_incomplete_raises():
    request = make_request("POST / HTTP/1.1", "Content-Length: 3")
    with pytest.raises(HTTPParseError):
        request.serialize()


def test_header_before_first_line_raises():
    with pytest.raises(HTTPParseError):
        HTTPRequest().add_header("Host: example.com")


def test_body_size_before_headers_done_raises():
    request = HTTPRequest()
    request.set_first_line("GET / HTTP/1.1")
    with pytest.raises(HTTPParseError):
        request.body_size_is_known()


def test_eof_before_first_line_is_ignored():
    request = HTTPRequest()
    request.eof()
    assert request.state is MessageState.FIRST_LINE_PENDING


def test_eof_in_headers_raises():
    request = HTTPRequest()
    request.set_first_line("GET / HTTP/1.1")
    with pytest.raises(HTTPParseError):
        request.eof()


def test_request_eof_in_body_raises():
    request = make_request("POST / HTTP/1.1", "Content-Length: 4")
    with pytest.raises(HTTPParseError):
        request.eof()


def test_is_head():
    assert complete_request("HEAD / HTTP/1.1").is_head() is True
    assert complete_request("GET / HTTP/1.1").is_head() is False
    with pytest.raises(HTTPParseError):
        HTTPRequest().is_head()


def test_response_content_length():
    request = complete_request("GET / HTTP/1.1")
    response = make_response(request, "HTTP/1.1 200 OK", "Content-Length: 2")
    assert response.status_code() == "200"
    assert response.read_in_body("okmore") == 2
    assert response.body == "ok"
    assert response.state is MessageState.COMPLETE
    assert response.request is request


@pytest.mark.parametrize("status", ["HTTP/1.1 204 No Content", "HTTP/1.1 304 Not Modified", "HTTP/1.1 100 Continue"])
def test_response_without_body(status):
    request = complete_request("GET / HTTP/1.1")
    response = make_response(request, status, "Content-Length: 10")
    assert response.expected_body_size() == 0


def test_response_to_head_has_no_body():
    request = complete_request("HEAD / HTTP/1.1")
    response = make_response(request, "HTTP/1.1 200 OK", "Content-Length: 10")
    assert response.expected_body_size() == 0


def test_response_invalid_status_line():
    response = HTTPResponse()
    response.set_first_line("HTTP/1.1")
    with pytest.raises(HTTPParseError):
        response.status_code()


def test_response_chunked_body():
    request = complete_request("GET / HTTP/1.1")
    response = make_response(request, "HTTP/1.1 200 OK", "Transfer-Encoding: chunked")
    assert response.body_size_is_known() is False
    chunked = "5\r\nhello\r\n0\r\n\r\n"
    assert response.read_in_body(chunked + "next") == len(chunked)
    assert response.body == chunked
    assert response.state is MessageState.COMPLETE


def test_response_rule5_completed_by_eof():
    request = complete_request("GET / HTTP/1.1")
    response = make_response(request, "HTTP/1.1 200 OK")
    assert response.read_in_body("some data") == len("some data")
    assert response.state is MessageState.BODY_PENDING
    response.eof()
    assert response.state is MessageState.COMPLETE
    assert response.body == "some data"


def test_response_multipart_byteranges_unsupported():
    request = complete_request("GET / HTTP/1.1")
    with pytest.raises(UnsupportedMessageError):
        make_response(
            request, "HTTP/1.1 206 Partial Content", "Content-Type: multipart/byteranges; boundary=x"
        )


def test_set_request_after_first_line_raises():
    response = HTTPResponse()
    response.set_first_line("HTTP/1.1 200 OK")
    with pytest.raises(HTTPParseError):
        response.set_request(complete_request("GET / HTTP/1.1"))