"""
Data structures for representing decoded Bencode values.

Every variant wraps its payload in a read-only ``value`` attribute. Once a
tree has been built by the decoder nothing in it can be reassigned.
"""
from types import MappingProxyType

__all__ = [
    "BencodeType",
    "BencodeInt",
    "BencodeString",
    "BencodeList",
    "BencodeDict",
    "to_python",
]


class BencodeType:
    """Base class for all Bencode data types."""
    __slots__ = ("_value",)

    def __init__(self, value):
        object.__setattr__(self, "_value", value)

    @property
    def value(self):
        return self._value

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._value == other._value

    def __repr__(self):
        return f"{type(self).__name__}({self._value!r})"


class BencodeInt(BencodeType):
    """Represents a Bencoded integer."""
    __slots__ = ()

    def __init__(self, value: int):
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError("BencodeInt requires an integer.")
        super().__init__(value)

    def __hash__(self):
        return hash((BencodeInt, self._value))


class BencodeString(BencodeType):
    """Represents a Bencoded byte string. The payload is raw bytes, not text."""
    __slots__ = ()

    def __init__(self, value: bytes):
        if not isinstance(value, (bytes, bytearray)):
            raise TypeError("BencodeString requires bytes.")
        super().__init__(bytes(value))

    def text(self, encoding: str = "utf-8") -> str:
        """Decodes the payload; raises UnicodeDecodeError on invalid text."""
        return self._value.decode(encoding)

    def __len__(self):
        return len(self._value)

    def __hash__(self):
        return hash((BencodeString, self._value))


class BencodeList(BencodeType):
    """Represents a Bencoded list."""
    __slots__ = ()

    def __init__(self, value):
        if not isinstance(value, (list, tuple)):
            raise TypeError("BencodeList requires a list.")
        items = tuple(value)
        for item in items:
            if not isinstance(item, BencodeType):
                raise TypeError("BencodeList items must be Bencode values.")
        super().__init__(items)

    def __getitem__(self, index):
        return self._value[index]

    def __len__(self):
        return len(self._value)

    def __iter__(self):
        return iter(self._value)

    __hash__ = None


class BencodeDict(BencodeType):
    """Represents a Bencoded dictionary keyed by text."""
    __slots__ = ()

    def __init__(self, value):
        if not isinstance(value, (dict, MappingProxyType)):
            raise TypeError("BencodeDict requires a dict.")
        # keys were validated as UTF-8 by the decoder
        for k, v in value.items():
            if not isinstance(k, str):
                raise TypeError("BencodeDict keys must be str.")
            if not isinstance(v, BencodeType):
                raise TypeError("BencodeDict values must be Bencode values.")
        super().__init__(MappingProxyType(dict(value)))

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return dict(self._value) == dict(other._value)

    def __getitem__(self, key):
        return self._value[key]

    def __contains__(self, key):
        return key in self._value

    def __len__(self):
        return len(self._value)

    def __iter__(self):
        return iter(self._value)

    def get(self, key, default=None):
        return self._value.get(key, default)

    def __repr__(self):
        return f"BencodeDict({dict(self._value)!r})"

    __hash__ = None


def to_python(obj):
    """Unwraps a decoded tree into plain dict/list/int/bytes values."""
    if isinstance(obj, BencodeDict):
        return {k: to_python(v) for k, v in obj.value.items()}
    if isinstance(obj, BencodeList):
        return [to_python(v) for v in obj.value]
    if isinstance(obj, (BencodeInt, BencodeString)):
        return obj.value
    raise TypeError(f"Cannot unwrap object of type {type(obj)}")
