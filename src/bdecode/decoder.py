"""
Bencode decoder for BitTorrent metainfo and tracker responses.
"""
import logging
import re
import sys

from .errors import (
    DecodeError,
    InvalidUtf8,
    MalformedInteger,
    MalformedLength,
    NestingTooDeep,
    NonStringKey,
    TrailingData,
    UnexpectedEof,
    UnrecognizedMarker,
)
from .structure import BencodeDict, BencodeInt, BencodeList, BencodeString

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 256

# platform signed word
INT_MIN = -sys.maxsize - 1
INT_MAX = sys.maxsize
MAX_DIGITS = len(str(INT_MAX))

_INT_RE = re.compile(r"[+-]?[0-9]+")
_LEN_RE = re.compile(r"[0-9]+")


def _too_many_digits(text: str) -> bool:
    # checked before int() so huge spans never reach the conversion,
    # zero padding counts towards the limit
    return len(text.lstrip("+-")) > MAX_DIGITS


class BencodeDecoder:
    """
    Decodes Bencoded byte strings into Bencode value trees.

    A decoder owns one buffer and one cursor. It is not thread-safe; use one
    instance per buffer.
    """
    def __init__(self, data: bytes, offset: int = 0, max_depth: int = DEFAULT_MAX_DEPTH):
        self.data = bytes(data)
        if not 0 <= offset <= len(self.data):
            raise ValueError(f"offset {offset} outside buffer of length {len(self.data)}")
        self.i = offset  # cursor index
        self.max_depth = max_depth
        self._depth = 0

    @property
    def position(self) -> int:
        return self.i

    def parse(self):
        """Decodes one value starting at the cursor and leaves the cursor after it."""
        start = self.i
        self._depth = 0
        try:
            return self._parse_value()
        except DecodeError as exc:
            logger.debug("Decode failed for value starting at %d: %s", start, exc)
            raise

    # --------------------------
    # Low-level utilities
    # --------------------------

    def _peek(self) -> int:
        if self.i >= len(self.data):
            raise UnexpectedEof("Unexpected end of input", self.i)
        return self.data[self.i]

    def _consume(self, n=1) -> bytes:
        """Moves cursor forward by n bytes and returns the consumed chunk."""
        if self.i + n > len(self.data):
            raise UnexpectedEof(
                f"Wanted {n} bytes but only {len(self.data) - self.i} remain", self.i
            )
        chunk = self.data[self.i:self.i + n]
        self.i += n
        return chunk

    def _consume_until(self, delim: bytes) -> bytes:
        """Returns bytes up to delim and moves the cursor past delim."""
        end = self.data.find(delim, self.i)
        if end == -1:
            raise UnexpectedEof(f"Missing {delim!r} delimiter", len(self.data))
        span = self.data[self.i:end]
        self.i = end + 1
        return span

    def _text(self, span: bytes, offset: int) -> str:
        try:
            return span.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidUtf8(f"Invalid UTF-8 in {span!r}", offset) from exc

    def _enter(self):
        self._depth += 1
        if self._depth > self.max_depth:
            raise NestingTooDeep(self.max_depth, self.i)

    # --------------------------
    # Parsing functions
    # --------------------------

    def _parse_value(self):
        ch = self._peek()

        if ch == 0x69:  # 'i'
            return self._parse_int()

        if 0x30 <= ch <= 0x39:  # strings start with their length
            return self._parse_string()

        if ch == 0x6C:  # 'l'
            return self._parse_list()

        if ch == 0x64:  # 'd'
            return self._parse_dict()

        raise UnrecognizedMarker(ch, self.i)

    def _parse_int(self):
        """Parses an integer from the Bencoded data."""
        self._consume(1)  # skip 'i'
        start = self.i
        text = self._text(self._consume_until(b"e"), start)

        if not _INT_RE.fullmatch(text):
            raise MalformedInteger(f"Invalid integer format {text!r}", start)

        if _too_many_digits(text):
            raise MalformedInteger(f"Integer of {len(text)} characters out of range", start)

        num = int(text)
        if not INT_MIN <= num <= INT_MAX:
            raise MalformedInteger(f"Integer {text} out of range", start)

        return BencodeInt(num)

    def _parse_string(self):
        """Parses a byte string from the Bencoded data."""
        start = self.i
        text = self._text(self._consume_until(b":"), start)

        if not _LEN_RE.fullmatch(text):
            raise MalformedLength(f"Invalid string length {text!r}", start)

        if _too_many_digits(text):
            raise MalformedLength(f"String length of {len(text)} digits out of range", start)

        length = int(text)
        if length > INT_MAX:
            raise MalformedLength(f"String length {text} out of range", start)

        return BencodeString(self._consume(length))

    def _parse_list(self):
        """Parses a list from the Bencoded data."""
        self._enter()
        self._consume(1)  # skip 'l'
        items = []

        while self._peek() != 0x65:
            items.append(self._parse_value())

        self._consume(1)  # skip 'e'
        self._depth -= 1
        return BencodeList(items)

    def _parse_dict(self):
        """Parses a dictionary from the Bencoded data."""
        self._enter()
        self._consume(1)  # skip 'd'
        obj = {}

        while self._peek() != 0x65:
            key_offset = self.i
            key = self._parse_value()
            # keys MUST be strings
            if not isinstance(key, BencodeString):
                raise NonStringKey(f"Dictionary key is not a string: {key!r}", key_offset)
            name = self._text(key.value, key_offset)
            # duplicate keys: last one wins
            obj[name] = self._parse_value()

        self._consume(1)  # skip 'e'
        self._depth -= 1
        return BencodeDict(obj)


Decoder = BencodeDecoder


def decode(data: bytes, max_depth: int = DEFAULT_MAX_DEPTH):
    """
    Convenience function to decode a buffer holding exactly one Bencoded value.
    """
    decoder = BencodeDecoder(data, max_depth=max_depth)
    result = decoder.parse()
    if decoder.position != len(decoder.data):
        exc = TrailingData(
            f"{len(decoder.data) - decoder.position} bytes after top-level value",
            decoder.position,
        )
        logger.debug("Decode failed: %s", exc)
        raise exc
    return result
