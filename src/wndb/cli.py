"""
Command-line interface for wndb.

Usage:
    wndb lookup test
    wndb -d /path/to/dict lookup "hot dog" --json
    wndb list
    wndb iterate --pos s --limit 10
    wndb snapshot index.snapshot
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from dataclasses import asdict

from . import __version__
from ._errors import WordNetError
from ._logging import configure_logging
from ._types import Synset
from ._wordnet import WordNet

# Pointers always worth showing: entailment and attribute.
_ALWAYS_SHOWN = ("*", "=")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def format_synset(synset: Synset, word: str | None = None) -> list[str]:
    """Type, words and gloss of ``synset``; with ``word``, related synsets too."""
    words = " ".join(w.word for w in synset.meta.words)
    lines = [
        f"  type: {synset.meta.synset_type}",
        f"  words: {words}",
        f"  {synset.glossary}",
        "",
    ]
    if word is None:
        return lines

    for pointer in synset.meta.pointers:
        target = pointer.data
        if target is None:
            continue
        found = any(w.word.startswith(word) for w in target.meta.words)
        if found or pointer.symbol in _ALWAYS_SHOWN:
            lines.extend(format_synset(target))
    return lines


def format_json(synsets: list[Synset]) -> str:
    return json.dumps([asdict(s) for s in synsets], ensure_ascii=False, indent=2)


async def _lookup(wn: WordNet, args: argparse.Namespace) -> int:
    synsets = await wn.lookup(args.word, skip_pointers=args.skip_pointers)
    if args.json:
        print(format_json(synsets))
        return 0
    print(f"\n  {args.word}\n")
    for synset in synsets:
        print("\n".join(format_synset(synset, args.word)))
    return 0


async def _list(wn: WordNet, args: argparse.Namespace) -> int:
    for word in wn.list_words():
        print(word)
    return 0


async def _iterate(wn: WordNet, args: argparse.Namespace) -> int:
    count = 0
    async for synset in wn.iterate_synsets(args.pos, skip_pointers=True):
        if args.limit is not None and count >= args.limit:
            break
        meta = synset.meta
        print(f"{meta.synset_offset:08d}\t{meta.synset_type}\t{synset.glossary}")
        count += 1
    return 0


async def _snapshot(wn: WordNet, args: argparse.Namespace) -> int:
    await wn.save_snapshot(args.output)
    print(f"Wrote {args.output}")
    return 0


_COMMANDS = {
    "lookup": _lookup,
    "list": _list,
    "iterate": _iterate,
    "snapshot": _snapshot,
}


async def run(args: argparse.Namespace) -> int:
    wn = await WordNet().init(args.database, snapshot=args.snapshot)
    return await _COMMANDS[args.command](wn, args)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wndb",
        description="Query a WordNet-format lexical database",
    )
    parser.add_argument(
        "--database", "-d",
        help="Database directory (default: WNDB_DATABASE_DIR or bundled db)",
    )
    parser.add_argument(
        "--snapshot",
        help="Load the index from a snapshot instead of the index files",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Log level (default: WNDB_LOG_LEVEL or WARNING)",
    )
    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"wndb {__version__}",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_lookup = sub.add_parser("lookup", help="Show the synsets of a word")
    p_lookup.add_argument("word")
    p_lookup.add_argument(
        "--skip-pointers", action="store_true",
        help="Do not resolve related synsets",
    )
    p_lookup.add_argument("--json", "-j", action="store_true", help="Output as JSON")

    sub.add_parser("list", help="List every indexed word")

    p_iter = sub.add_parser("iterate", help="Stream synsets from the data files")
    p_iter.add_argument("--pos", choices=["n", "v", "a", "s", "r"])
    p_iter.add_argument("--limit", type=int)

    p_snap = sub.add_parser("snapshot", help="Write an index snapshot")
    p_snap.add_argument("output")

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    try:
        return asyncio.run(run(args))
    except WordNetError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
