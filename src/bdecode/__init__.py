"""
Bencode package for decoding BitTorrent data.
"""
from .decoder import DEFAULT_MAX_DEPTH, BencodeDecoder, Decoder, decode
from .display import format_value
from .errors import (
    BencodeDecodeError,
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
from .structure import BencodeDict, BencodeInt, BencodeList, BencodeString, BencodeType, to_python

__all__ = [
    'decode', 'Decoder', 'BencodeDecoder', 'DEFAULT_MAX_DEPTH', 'format_value', 'to_python',
    'BencodeType', 'BencodeInt', 'BencodeString', 'BencodeList', 'BencodeDict',
    'DecodeError', 'BencodeDecodeError', 'UnexpectedEof', 'InvalidUtf8', 'MalformedInteger',
    'MalformedLength', 'NonStringKey', 'UnrecognizedMarker', 'NestingTooDeep', 'TrailingData',
]
