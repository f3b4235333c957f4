"""Index-line and data-line grammars.

Index line (one per lemma and part of speech)::

    lemma pos synset_cnt p_cnt [ptr_symbol...] sense_cnt tagsense_cnt synset_offset [synset_offset...]

Data line (one synset, addressed by its byte offset)::

    synset_offset lex_filenum ss_type w_cnt word lex_id [word lex_id...] p_cnt [ptr...] [frames...] | gloss

``w_cnt`` and ``lex_id`` are hexadecimal, everything else numeric is decimal.
Each ``ptr`` is four tokens: symbol, target offset, target pos, source/target hex.
"""

from __future__ import annotations

import re

from ._errors import MalformedRecordError
from ._types import (
    IndexEntry,
    PartOfSpeech,
    Pointer,
    Synset,
    SynsetMeta,
    VerbFrame,
    WordSense,
)

COMMENT_CHAR = " "
GLOSS_SEPARATOR = "|"

# Data files open with license lines; real records start with an 8-digit offset.
RECORD_SIGNATURE = re.compile(r"^[0-9]{8}\s")


class _TokenCursor:
    """Bounds-checked reader over the tokens of one line."""

    __slots__ = ("_tokens", "_pos", "_line")

    def __init__(self, tokens: list[str], line: str) -> None:
        self._tokens = tokens
        self._pos = 0
        self._line = line

    @property
    def remaining(self) -> int:
        return len(self._tokens) - self._pos

    def take(self, field: str, index: int | None = None) -> str:
        if self._pos >= len(self._tokens):
            where = field if index is None else f"{field} at index {index}"
            raise MalformedRecordError(
                f"missing {where}", line=self._line, field=field, index=index,
            )
        token = self._tokens[self._pos]
        self._pos += 1
        return token

    def take_int(self, field: str, index: int | None = None, base: int = 10) -> int:
        token = self.take(field, index)
        try:
            return int(token, base)
        except ValueError:
            raise MalformedRecordError(
                f"invalid {field} {token!r}",
                line=self._line, field=field, index=index,
            ) from None

    def rest(self) -> list[str]:
        tokens = self._tokens[self._pos:]
        self._pos = len(self._tokens)
        return tokens


def _parse_pos(code: str, field: str, line: str) -> PartOfSpeech:
    try:
        return PartOfSpeech(code)
    except ValueError:
        raise MalformedRecordError(
            f"unknown {field} {code!r}", line=line, field=field,
        ) from None


def parse_index_line(line: str) -> IndexEntry | None:
    """Parse one index-file line.

    Returns None for comment (license) lines, which start with a space.
    """
    if line.startswith(COMMENT_CHAR):
        return None

    cur = _TokenCursor(line.split(), line)
    lemma = cur.take("lemma")
    pos = _parse_pos(cur.take("pos"), "pos", line)
    synset_count = cur.take_int("synset_cnt")
    pointer_count = cur.take_int("p_cnt")
    pointers = tuple(cur.take("ptr_symbol", i) for i in range(pointer_count))
    sense_count = cur.take_int("sense_cnt")
    tag_sense_count = cur.take_int("tagsense_cnt")

    offsets: list[int] = []
    for i, token in enumerate(cur.rest()):
        try:
            offsets.append(int(token))
        except ValueError:
            raise MalformedRecordError(
                f"invalid synset_offset {token!r}",
                line=line, field="synset_offset", index=i,
            ) from None

    return IndexEntry(
        lemma=lemma,
        pos=pos,
        synset_count=synset_count,
        pointer_count=pointer_count,
        pointers=pointers,
        sense_count=sense_count,
        tag_sense_count=tag_sense_count,
        synset_offsets=tuple(offsets),
    )


def parse_data_line(line: str) -> Synset:
    """Parse one data-file line into a Synset with unresolved pointers."""
    meta_text, sep, gloss_text = line.partition(GLOSS_SEPARATOR)
    glossary = gloss_text.strip() if sep else ""

    cur = _TokenCursor(meta_text.split(), line)
    synset_offset = cur.take_int("synset_offset")
    lex_filenum = cur.take_int("lex_filenum")
    pos = _parse_pos(cur.take("ss_type"), "ss_type", line)

    word_count = cur.take_int("w_cnt", base=16)
    words: list[WordSense] = []
    for i in range(word_count):
        word = cur.take("word", i)
        lex_id = cur.take_int("lex_id", i, base=16)
        words.append(WordSense(word=word, lex_id=lex_id))

    pointer_count = cur.take_int("p_cnt")
    pointers: list[Pointer] = []
    for i in range(pointer_count):
        pointers.append(Pointer(
            symbol=cur.take("pointer_symbol", i),
            synset_offset=cur.take_int("pointer_offset", i),
            pos=cur.take("pointer_pos", i),
            source_target=cur.take("source_target", i),
        ))

    # Only data.verb carries the frame list; anything else left over is ignored.
    frames: list[VerbFrame] = []
    if pos is PartOfSpeech.VERB and cur.remaining:
        frame_count = cur.take_int("f_cnt")
        for i in range(frame_count):
            marker = cur.take("frame_marker", i)
            if marker != "+":
                raise MalformedRecordError(
                    f"invalid frame_marker {marker!r}",
                    line=line, field="frame_marker", index=i,
                )
            frames.append(VerbFrame(
                frame_number=cur.take_int("f_num", i),
                word_number=cur.take_int("w_num", i, base=16),
            ))

    return Synset(
        glossary=glossary,
        meta=SynsetMeta(
            pos=pos,
            synset_offset=synset_offset,
            lex_filenum=lex_filenum,
            synset_type=pos.type_name,
            word_count=word_count,
            words=tuple(words),
            pointer_count=pointer_count,
            pointers=tuple(pointers),
            frames=tuple(frames),
        ),
    )
