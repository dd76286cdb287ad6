"""Incremental HTTP/1.1 message handling and command-line parsing for link emulation tools."""

__version__ = "0.1.0"