# linkemu

`linkemu` provides the building blocks for handling HTTP/1.1 messages
incrementally and parses the command lines of network link emulation tools.
It has no dependencies beyond the standard library.

## HTTP messages

`linkemu.http_message` holds `HTTPRequest` and `HTTPResponse`. A message is
built up step by step, the way a stream parser would feed it:

```python
from linkemu.http_message import HTTPRequest, HTTPResponse, MessageState

request = HTTPRequest()
request.set_first_line("GET / HTTP/1.1")
request.add_header("Host: example.com")
request.done_with_headers()
request.read_in_body("")              # 0; a GET has no body
request.state                         # MessageState.COMPLETE
request.serialize()                   # 'GET / HTTP/1.1\r\nHost: example.com\r\n\r\n'

response = HTTPResponse()
response.set_request(request)
response.set_first_line("HTTP/1.1 200 OK")
response.add_header("Content-Length: 5")
response.done_with_headers()
response.read_in_body("helloextra")   # 5; the rest belongs to what follows
response.body                         # 'hello'
```

`read_in_body(data)` returns how many characters of `data` the body used.
`eof()` tells a message that the stream has ended. Each message moves through
the `MessageState` values `FIRST_LINE_PENDING`, `HEADERS_PENDING`,
`BODY_PENDING` and `COMPLETE`; calling a method in the wrong state raises
`HTTPParseError`.

Header names are compared case-insensitively with `has_header(name)` and
`get_header_value(name)` (which raises `KeyError` when the header is
missing); `equivalent_strings(a, b)` is the comparison they use.
`body_size_is_known()` and `expected_body_size()` report what the headers
said about the body length.

Request bodies are framed by method: `GET` and `HEAD` have none, `POST` needs
`Content-Length`, `OPTIONS` may carry one. Other methods, and chunked
requests, raise `UnsupportedMessageError`.

Response bodies follow the HTTP/1.1 message-length rules: no body for `1xx`,
`204`, `304` and answers to `HEAD` requests (`HTTPRequest.is_head()`); chunked
transfer coding; `Content-Length`; otherwise the body runs to the end of the
stream. `multipart/byteranges` without a length raises
`UnsupportedMessageError`. `status_code()` returns the code from the status
line.

## Body parsers and helpers

`linkemu.body_parser` finds where a body of unknown length ends.
`ChunkedBodyParser(trailers_enabled)` decodes chunked framing;
`Rule5BodyParser` accepts everything until end of stream. `read(data)`
returns `None` while the body goes on, or the number of characters of `data`
that complete it:

```python
from linkemu.body_parser import ChunkedBodyParser

ChunkedBodyParser(False).read("5\r\nhello\r\n0\r\n\r\n")   # 15
```

`linkemu.http_header.HTTPHeader.from_line("Key: value")` parses one header
line; `str()` of a header gives it back as `Key: value`.

`linkemu.tokenize` has `split(text, separator)`, which keeps empty tokens,
and `MIMEType`, whose `type` property is the media type of a Content-Type
value:

```python
from linkemu.tokenize import split, MIMEType

split("a,b,,c", ",")                          # ['a', 'b', '', 'c']
MIMEType("text/html; charset=utf-8").type     # 'text/html'
```

Malformed input raises `linkemu.errors.HTTPParseError`; well-formed messages
that cannot be handled raise its subclass `UnsupportedMessageError`.

## Command-line parsing

`linkemu.commands` turns argument lists (with the program name first) into
settings objects, raising `UsageError` with a usage message on bad input:

- `parse_delay_args(argv)` → `DelayOptions` (`PROGRAM delay-milliseconds [command...]`)
- `parse_loss_args(argv)` → `LossOptions` (`PROGRAM uplink|downlink RATE [COMMAND...]`, rate between 0 and 1)
- `parse_onoff_args(argv)` → `OnOffOptions` (`PROGRAM uplink|downlink MEAN-ON-TIME MEAN-OFF-TIME [COMMAND...]`)
- `parse_meter_args(argv)` → `MeterOptions` (`[--meter-uplink] [--meter-downlink] [COMMAND...]`)
- `parse_link_args(argv)` → `LinkOptions` (`UPLINK-TRACE DOWNLINK-TRACE [OPTION]... [COMMAND]`, with
  `--once`, `--uplink-log`, `--downlink-log`, the `--meter-*` switches and the
  queue options; queue types are listed in `QUEUE_TYPES`)

When no command is given, the command is the user's login shell. Each options
object has a `shell_prefix` for a prompt. `shell_quote(arg)` quotes an
argument for a POSIX shell: `shell_quote("it's")` gives `'it'\''s'`.

## What this package does not do

`linkemu` does not move packets. It has no delay, loss, on/off, metering or
trace-driven link queues, and it starts no shells or other programs: the
`commands` module only parses arguments. It also has no stream parser that
splits a byte stream into a sequence of messages; callers drive
`HTTPRequest` and `HTTPResponse` themselves, line by line.

## Running the tests

```
pip install -e ".[test]"
pytest
```