"""
Command line entry point: decode a file and print the result.
"""
import argparse
import logging
import sys
from pathlib import Path

from .decoder import DEFAULT_MAX_DEPTH, decode
from .display import format_value
from .errors import DecodeError

logger = logging.getLogger(__name__)


def depth_limit(text: str) -> int:
    """argparse type for --max-depth; stays well inside the interpreter recursion limit."""
    value = int(text)
    ceiling = sys.getrecursionlimit() // 2 - 1
    if not 1 <= value <= ceiling:
        raise argparse.ArgumentTypeError(f"must be between 1 and {ceiling}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bdecode", description="Decode a Bencoded file (e.g. a .torrent).")
    parser.add_argument("file", type=Path, help="path to the Bencoded file")
    parser.add_argument("--meta", action="store_true", help="print a torrent metadata summary instead of the tree")
    parser.add_argument("--max-depth", type=depth_limit, default=DEFAULT_MAX_DEPTH, help="maximum container nesting")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser


def print_meta(meta):
    print("name:", meta.name)
    print("announce:", meta.announce)
    if meta.announce_list:
        print("announce_list:", meta.announce_list)
    print("info_hash:", meta.info_hash.hex())
    print("piece_length:", meta.piece_length)
    print("pieces:", meta.num_pieces)
    print("total_length:", meta.total_length)
    for f in meta.files:
        print(f"  {f['abs_path']} ({f['length']} bytes)")


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    try:
        raw = args.file.read_bytes()
    except OSError as exc:
        print(f"error: cannot read {args.file}: {exc}", file=sys.stderr)
        return 2

    logger.debug("Read %d bytes from %s", len(raw), args.file)

    try:
        if args.meta:
            from torrent.metainfo import MetainfoError, TorrentMeta
            try:
                meta = TorrentMeta.from_bytes(raw, max_depth=args.max_depth)
            except MetainfoError as exc:
                print(f"error: {exc}", file=sys.stderr)
                return 1
            print_meta(meta)
        else:
            print(format_value(decode(raw, max_depth=args.max_depth)))
    except DecodeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
