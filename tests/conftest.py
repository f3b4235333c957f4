"""Shared fixtures for wndb tests.

The database is generated rather than checked in: record offsets are byte
positions, so they are computed while the files are written. Offsets are
always rendered as 8 digits, which makes every line's length independent of
the offsets it mentions, so a first pass can lay the files out and a second
pass renders them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import pytest
import pytest_asyncio

import wndb

LICENSE = (
    "  1 This software and database is being provided to you, the LICENSEE, by  ",
    "  2 Princeton University under the following license.  By obtaining, using  ",
    "  3 and/or copying this software and database, you agree that you have  ",
)

SUFFIX = {"n": "noun", "v": "verb", "a": "adj", "s": "adj", "r": "adv"}
INDEX_POS = {"noun": "n", "verb": "v", "adj": "a", "adv": "r"}
SUFFIXES = ("noun", "verb", "adj", "adv")

DANGLING_OFFSET = 99999990


@dataclass
class FixtureSynset:
    key: str
    ss_type: str
    lex_filenum: int
    words: list[tuple[str, int]]
    gloss: str
    # (symbol, target key, source/target hex)
    pointers: list[tuple[str, str, str]] = field(default_factory=list)
    # raw (symbol, offset, pos, source/target hex), for targets not in the files
    dangling: list[tuple[str, int, str, str]] = field(default_factory=list)
    frames: list[tuple[int, int]] = field(default_factory=list)


SYNSETS = [
    FixtureSynset(
        "test_trial", "n", 4, [("test", 0), ("trial", 0)],
        'trying something to find out about it; "a sample for ten days free trial"',
        pointers=[("@", "exam", "0000")],
    ),
    FixtureSynset(
        "test_shell", "n", 20, [("test", 1)],
        "a hard outer covering as of some amoebas and sea urchins",
        pointers=[("@", "covering", "0000")],
    ),
    FixtureSynset(
        "exam", "n", 4, [("examination", 0), ("exam", 0)],
        "a set of questions or exercises evaluating skill or knowledge",
        pointers=[("~", "test_trial", "0000")],
    ),
    FixtureSynset(
        "covering", "n", 20, [("covering", 0)],
        "a natural object that covers or envelops",
        pointers=[("~", "test_shell", "0000")],
    ),
    FixtureSynset(
        "hot_dog", "n", 13, [("hot_dog", 0), ("frank", 0)],
        "a smooth-textured sausage of minced beef or pork usually smoked",
        dangling=[("@", DANGLING_OFFSET, "n", "0000")],
    ),
    FixtureSynset(
        "good_n", "n", 7, [("good", 0)],
        'benefit; "for your own good"',
        pointers=[("+", "good_adj", "0101")],
    ),
    FixtureSynset(
        "test_verb", "v", 31, [("test", 0), ("prove", 0)],
        'put to the test, as for its quality; "This approach has been tried"',
        pointers=[("+", "test_trial", "0101")],
        frames=[(8, 0), (11, 1)],
    ),
    FixtureSynset(
        "good_adj", "a", 0, [("good", 0)],
        "having desirable or positive qualities",
        pointers=[
            ("!", "bad", "0101"),
            ("&", "fine", "0000"),
            ("+", "good_n", "0101"),
        ],
    ),
    FixtureSynset(
        "fine", "s", 0, [("fine", 0)],
        "superior to the average",
        pointers=[("&", "good_adj", "0000")],
    ),
    FixtureSynset(
        "bad", "a", 0, [("bad", 0)],
        "having undesirable or negative qualities",
        pointers=[("!", "good_adj", "0101")],
    ),
    FixtureSynset(
        "well", "r", 2, [("well", 0)],
        "in a good or proper or satisfactory manner",
        pointers=[("\\", "good_adj", "0101")],
    ),
]


@dataclass
class FixtureDatabase:
    directory: Path
    synsets: dict[str, FixtureSynset]
    offsets: dict[str, int]
    lines: dict[str, str]   # rendered data line per synset, without newline

    def path(self, name: str) -> Path:
        return self.directory / name


def _data_line(
    s: FixtureSynset,
    offsets: dict[str, int],
    by_key: dict[str, FixtureSynset],
) -> str:
    tokens = [
        f"{offsets[s.key]:08d}", f"{s.lex_filenum:02d}", s.ss_type,
        f"{len(s.words):02x}",
    ]
    for word, lex_id in s.words:
        tokens += [word, f"{lex_id:x}"]
    pointers = [
        (symbol, offsets[target], by_key[target].ss_type, hexcode)
        for symbol, target, hexcode in s.pointers
    ] + list(s.dangling)
    tokens.append(f"{len(pointers):03d}")
    for symbol, offset, pos, hexcode in pointers:
        tokens += [symbol, f"{offset:08d}", pos, hexcode]
    if s.frames:
        tokens.append(f"{len(s.frames):02d}")
        for f_num, w_num in s.frames:
            tokens += ["+", f"{f_num:02d}", f"{w_num:02x}"]
    return " ".join(tokens) + f" | {s.gloss}  "


def _index_lines(synsets: list[FixtureSynset], suffix: str, offsets) -> list[str]:
    by_lemma: dict[str, list[FixtureSynset]] = {}
    for s in synsets:
        for word, _ in s.words:
            by_lemma.setdefault(word.lower(), []).append(s)

    lines = []
    for lemma in sorted(by_lemma):
        members = by_lemma[lemma]
        symbols = sorted({
            p[0] for s in members for p in list(s.pointers) + list(s.dangling)
        })
        tokens = [
            lemma, INDEX_POS[suffix], str(len(members)), str(len(symbols)),
            *symbols, str(len(members)), "1",
            *(f"{offsets[s.key]:08d}" for s in members),
        ]
        lines.append(" ".join(tokens) + " ")
    return lines


def write_database(
    directory: Path, synsets: list[FixtureSynset] | None = None
) -> FixtureDatabase:
    synsets = SYNSETS if synsets is None else synsets
    directory.mkdir(parents=True, exist_ok=True)
    by_key = {s.key: s for s in synsets}
    header = "".join(line + "\n" for line in LICENSE)

    offsets = {s.key: 0 for s in synsets}
    for suffix in SUFFIXES:
        position = len(header.encode("utf-8"))
        for s in synsets:
            if SUFFIX[s.ss_type] != suffix:
                continue
            offsets[s.key] = position
            position += len((_data_line(s, offsets, by_key) + "\n").encode("utf-8"))

    lines = {s.key: _data_line(s, offsets, by_key) for s in synsets}
    for suffix in SUFFIXES:
        members = [s for s in synsets if SUFFIX[s.ss_type] == suffix]
        data = header + "".join(lines[s.key] + "\n" for s in members)
        (directory / f"data.{suffix}").write_bytes(data.encode("utf-8"))
        index = header + "".join(
            line + "\n" for line in _index_lines(members, suffix, offsets)
        )
        (directory / f"index.{suffix}").write_bytes(index.encode("utf-8"))

    return FixtureDatabase(directory, by_key, offsets, lines)


@pytest.fixture(scope="session")
def database(tmp_path_factory) -> FixtureDatabase:
    """The standard fixture database, written once per session. Read only."""
    return write_database(tmp_path_factory.mktemp("wordnet") / "dict")


@pytest.fixture
def make_database(tmp_path):
    """Write a private database (optionally with custom synsets) for tests that modify it."""
    def _make(name: str = "dict", synsets: list[FixtureSynset] | None = None):
        return write_database(tmp_path / name, synsets)
    return _make


@pytest_asyncio.fixture
async def wordnet(database) -> wndb.WordNet:
    """A WordNet handle initialized on the fixture database."""
    return await wndb.init(database.directory)
