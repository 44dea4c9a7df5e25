"""
Human-readable rendering of decoded trees.
"""
from .structure import BencodeDict, BencodeInt, BencodeList, BencodeString

INDENT = "    "


def format_bytes(b: bytes) -> str:
    """Shows printable UTF-8 payloads as text and anything else as hex."""
    try:
        text = b.decode("utf-8")
    except UnicodeDecodeError:
        return f"<{len(b)} bytes: {b.hex()}>"
    if not text.isprintable():
        return f"<{len(b)} bytes: {b.hex()}>"
    return repr(text)


def format_value(obj, indent: int = 0, max_bytes: int = 64) -> str:
    pad = INDENT * indent

    if isinstance(obj, BencodeInt):
        return str(obj.value)

    if isinstance(obj, BencodeString):
        if len(obj.value) > max_bytes:
            return f"<{len(obj.value)} bytes>"
        return format_bytes(obj.value)

    if isinstance(obj, BencodeList):
        if not obj.value:
            return "[]"
        lines = ["["]
        for item in obj.value:
            lines.append(f"{pad}{INDENT}{format_value(item, indent + 1, max_bytes)},")
        lines.append(f"{pad}]")
        return "\n".join(lines)

    if isinstance(obj, BencodeDict):
        if not obj.value:
            return "{}"
        lines = ["{"]
        for key in sorted(obj.value):
            rendered = format_value(obj.value[key], indent + 1, max_bytes)
            lines.append(f"{pad}{INDENT}{key!r}: {rendered},")
        lines.append(f"{pad}}}")
        return "\n".join(lines)

    raise TypeError(f"Cannot format object of type {type(obj)}")
