"""Exceptions raised while parsing HTTP traffic."""


class HTTPParseError(ValueError):
    """Raised when HTTP data is malformed or arrives in an invalid order."""


class UnsupportedMessageError(HTTPParseError):
    """Raised for well-formed HTTP messages that this package cannot handle."""