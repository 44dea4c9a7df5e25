import hashlib
import logging
from pathlib import Path

from bdecode import DEFAULT_MAX_DEPTH, BencodeDict, BencodeInt, BencodeList, BencodeString, Decoder, decode

logger = logging.getLogger(__name__)

PIECE_HASH_LEN = 20


class MetainfoError(ValueError):
    """The buffer decoded fine but is not a usable torrent."""


def extract_info_bytes(raw: bytes, max_depth: int = DEFAULT_MAX_DEPTH) -> bytes:
    """
    Extract the exact bencoded 'info' dictionary byte slice.
    The SHA-1 infohash is computed over these bytes, not over a re-encoding.
    A repeated 'info' key resolves to the last one, as in the decoded tree.
    Truncated input raises UnexpectedEof.
    """
    if raw[:1] != b"d":
        raise MetainfoError("Invalid torrent: root must be a dictionary")

    decoder = Decoder(raw, offset=1, max_depth=max_depth)
    info = None
    # past the end the slice is empty, so parse() reports the EOF
    while raw[decoder.position:decoder.position + 1] != b"e":
        key = decoder.parse()
        start = decoder.position
        decoder.parse()
        if isinstance(key, BencodeString) and key.value == b"info":
            info = raw[start:decoder.position]

    if info is not None:
        return info
    raise MetainfoError("Torrent missing 'info' dictionary")


def _require(d: BencodeDict, key: str, kind, where: str = "info"):
    item = d.get(key)
    if not isinstance(item, kind):
        raise MetainfoError(f"Torrent {where} missing or invalid {key!r}")
    return item.value


def _text(item) -> str:
    return item.value.decode("utf-8", errors="replace")


class TorrentMeta:
    def __init__(self, path: Path, max_depth: int = DEFAULT_MAX_DEPTH):
        self.path = Path(path)
        self._load(self.path.read_bytes(), max_depth)

    @classmethod
    def from_bytes(cls, raw: bytes, max_depth: int = DEFAULT_MAX_DEPTH) -> "TorrentMeta":
        meta = cls.__new__(cls)
        meta.path = None
        meta._load(raw, max_depth)
        return meta

    def _load(self, raw: bytes, max_depth: int):
        # Decode full torrent structure first so malformed input fails early
        root = decode(raw, max_depth=max_depth)
        if not isinstance(root, BencodeDict):
            raise MetainfoError("Invalid torrent: root must be a dictionary")

        self.data = root

        # ------------------ INFO ------------------
        if not isinstance(root.get("info"), BencodeDict):
            raise MetainfoError("Torrent missing 'info' dictionary")

        self.info = root["info"]
        self.info_bytes = extract_info_bytes(raw, max_depth)
        self.info_hash = hashlib.sha1(self.info_bytes).digest()

        # ------------------ NAME ------------------
        self.name = _text(self.info["name"]) if isinstance(self.info.get("name"), BencodeString) else None

        # ------------------ ANNOUNCE URL ------------------
        ann_b = root.get("announce")
        self.announce = _text(ann_b) if isinstance(ann_b, BencodeString) else None

        # ------------------ ANNOUNCE-LIST ------------------
        self.announce_list = None
        ann_list_b = root.get("announce-list")

        if isinstance(ann_list_b, BencodeList):
            tiers = []
            for tier in ann_list_b:
                if not isinstance(tier, BencodeList):
                    continue
                urls = [_text(u) for u in tier if isinstance(u, BencodeString)]
                if urls:
                    tiers.append(urls)
            if tiers:
                self.announce_list = tiers

        # ------------------ PIECE LENGTH ------------------
        self.piece_length = _require(self.info, "piece length", BencodeInt)
        if self.piece_length <= 0:
            raise MetainfoError("Torrent 'piece length' must be positive")

        # ------------------ PIECES ------------------
        raw_pieces = _require(self.info, "pieces", BencodeString)
        if len(raw_pieces) % PIECE_HASH_LEN:
            raise MetainfoError("Torrent 'pieces' length is not a multiple of 20")
        self.pieces = [raw_pieces[i:i + PIECE_HASH_LEN] for i in range(0, len(raw_pieces), PIECE_HASH_LEN)]

        # ------------------ FILES ------------------
        self.is_multi = "files" in self.info
        self.is_single = not self.is_multi

        if self.is_multi:
            self.files = []
            for f_entry in _require(self.info, "files", BencodeList):
                if not isinstance(f_entry, BencodeDict):
                    raise MetainfoError("Torrent file entry is not a dictionary")
                length = _require(f_entry, "length", BencodeInt, "file entry")
                path_b = _require(f_entry, "path", BencodeList, "file entry")
                if not all(isinstance(p, BencodeString) for p in path_b):
                    raise MetainfoError("Torrent file entry has a non-string path component")
                parts = [_text(p) for p in path_b]
                self.files.append({"length": length, "path": "/".join(parts)})
        else:
            if self.name is None:
                raise MetainfoError("Torrent info missing or invalid 'name'")
            length = _require(self.info, "length", BencodeInt)
            self.files = [{"length": length, "path": self.name}]

        self.total_length = sum(f["length"] for f in self.files)
        self.num_pieces = len(self.pieces)
        self.last_piece_length = (self.total_length % self.piece_length) or self.piece_length

        for f in self.files:
            f["abs_path"] = f"{self.name}/{f['path']}" if self.is_multi else self.name

        logger.debug("Loaded torrent %r (%d files, %d pieces)", self.name, len(self.files), self.num_pieces)

    def __repr__(self):
        return (
            f"TorrentMeta(name={self.name!r}, files={len(self.files)}, pieces={self.num_pieces}, "
            f"multi={self.is_multi}, announce={self.announce!r})"
        )
