"""
Exceptions raised while decoding Bencoded data.
"""
from typing import Optional

__all__ = [
    "DecodeError",
    "BencodeDecodeError",
    "UnexpectedEof",
    "InvalidUtf8",
    "MalformedInteger",
    "MalformedLength",
    "NonStringKey",
    "UnrecognizedMarker",
    "NestingTooDeep",
    "TrailingData",
]


class DecodeError(Exception):
    """Base class for Bencode decoding errors."""

    def __init__(self, message: str, offset: Optional[int] = None):
        self.message = message
        self.offset = offset
        super().__init__(message if offset is None else f"{message} (at offset {offset})")


# older name, kept for callers that catch it
BencodeDecodeError = DecodeError


class UnexpectedEof(DecodeError):
    """The cursor ran past the end of the buffer."""


class InvalidUtf8(DecodeError):
    """Bytes that must be text (digits, dictionary keys) are not valid UTF-8."""


class MalformedInteger(DecodeError):
    """Integer body is not a signed base-10 literal or is out of range."""


class MalformedLength(DecodeError):
    """Byte string length prefix is not a non-negative base-10 literal."""


class NonStringKey(DecodeError):
    """A dictionary key decoded to something other than a byte string."""


class UnrecognizedMarker(DecodeError):
    def __init__(self, marker: int, offset: Optional[int] = None):
        self.marker = marker
        super().__init__(f"Unrecognized marker byte {marker:#04x} ({bytes([marker])!r})", offset)


class NestingTooDeep(DecodeError):
    def __init__(self, max_depth: int, offset: Optional[int] = None):
        self.max_depth = max_depth
        super().__init__(f"Nesting exceeds maximum depth of {max_depth}", offset)


class TrailingData(DecodeError):
    """Bytes remain after a complete top-level value."""
