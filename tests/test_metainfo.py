import hashlib

import pytest

from bdecode.errors import DecodeError, NestingTooDeep, UnexpectedEof
from torrent.metainfo import MetainfoError, TorrentMeta, extract_info_bytes

PIECES = b"a" * 20 + b"b" * 20

SINGLE_INFO = b"d6:lengthi100e4:name8:file.bin12:piece lengthi64e6:pieces40:" + PIECES + b"e"
SINGLE = b"d8:announce20:http://tracker/annce4:info" + SINGLE_INFO + b"e"

MULTI_INFO = (
    b"d5:filesl"
    b"d6:lengthi10e4:pathl1:a5:b.txtee"
    b"d6:lengthi5e4:pathl1:cee"
    b"e4:name3:dir12:piece lengthi16e6:pieces20:" + b"x" * 20 + b"e"
)
MULTI = b"d13:announce-listll5:udp:1el6:http:2ee4:info" + MULTI_INFO + b"e"


def test_metainfo_load(tmp_path):
    path = tmp_path / "sample.torrent"
    path.write_bytes(SINGLE)
    print("Loading torrent:", path)

    meta = TorrentMeta(path)
    print("Parsed TorrentMeta:", meta)

    assert meta.name == "file.bin"
    assert meta.announce == "http://tracker/annce"
    assert meta.announce_list is None
    assert meta.piece_length == 64
    assert meta.pieces == [b"a" * 20, b"b" * 20]
    assert meta.num_pieces == 2
    assert meta.total_length == 100
    assert meta.last_piece_length == 36
    assert meta.is_single
    assert meta.files == [{"length": 100, "path": "file.bin", "abs_path": "file.bin"}]

    print("Info hash:", meta.info_hash.hex())
    assert meta.info_bytes == SINGLE_INFO
    assert meta.info_hash == hashlib.sha1(SINGLE_INFO).digest()


def test_metainfo_multi_file():
    meta = TorrentMeta.from_bytes(MULTI)

    assert meta.is_multi
    assert meta.announce is None
    assert meta.announce_list == [["udp:1"], ["http:2"]]
    assert meta.total_length == 15
    assert [f["path"] for f in meta.files] == ["a/b.txt", "c"]
    assert [f["abs_path"] for f in meta.files] == ["dir/a/b.txt", "dir/c"]
    assert meta.last_piece_length == 15
    assert meta.info_hash == hashlib.sha1(MULTI_INFO).digest()


def test_extract_info_bytes():
    assert extract_info_bytes(SINGLE) == SINGLE_INFO
    with pytest.raises(MetainfoError):
        extract_info_bytes(b"d3:fooi1ee")
    with pytest.raises(MetainfoError):
        extract_info_bytes(b"le")


@pytest.mark.parametrize("raw", [
    b"li1ee",
    b"de",
    b"d4:infoi1ee",
    b"d4:infod4:name1:a12:piece lengthi16e6:pieces19:" + b"x" * 19 + b"ee",
    b"d4:infod4:name1:a12:piece lengthi0e6:pieces0:6:lengthi1eee",
    b"d4:infod4:name1:a6:pieces0:6:lengthi1eee",
])
def test_metainfo_rejects_bad_torrents(raw):
    with pytest.raises(MetainfoError):
        TorrentMeta.from_bytes(raw)


def test_metainfo_propagates_decode_errors():
    with pytest.raises(DecodeError):
        TorrentMeta.from_bytes(b"d4:info")


def test_duplicate_info_uses_last_one():
    other_info = SINGLE_INFO.replace(b"8:file.bin", b"8:last.bin")
    raw = b"d4:info" + SINGLE_INFO + b"4:info" + other_info + b"e"

    meta = TorrentMeta.from_bytes(raw)

    assert meta.name == "last.bin"
    assert meta.info_bytes == other_info
    assert meta.info_hash == hashlib.sha1(other_info).digest()


def test_extract_info_bytes_truncated():
    with pytest.raises(UnexpectedEof):
        extract_info_bytes(b"d3:fooi1e")
    with pytest.raises(UnexpectedEof):
        extract_info_bytes(b"d4:info" + SINGLE_INFO)


def test_metainfo_max_depth():
    with pytest.raises(NestingTooDeep):
        TorrentMeta.from_bytes(MULTI, max_depth=4)
    assert TorrentMeta.from_bytes(MULTI, max_depth=5).total_length == 15
