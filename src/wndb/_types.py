"""Data structures for wndb."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class StoragePos(str, Enum):
    """The four parts of speech that own a physical index/data file pair."""

    NOUN = "n"
    VERB = "v"
    ADJECTIVE = "a"
    ADVERB = "r"

    @property
    def suffix(self) -> str:
        """File name suffix: index.<suffix> / data.<suffix>."""
        return _STORAGE_SUFFIX[self]


class PartOfSpeech(str, Enum):
    NOUN = "n"
    VERB = "v"
    ADJECTIVE = "a"
    ADJECTIVE_SATELLITE = "s"
    ADVERB = "r"

    @property
    def storage(self) -> StoragePos:
        # Satellites live in the adjective files.
        if self is PartOfSpeech.ADJECTIVE_SATELLITE:
            return StoragePos.ADJECTIVE
        return StoragePos(self.value)

    @property
    def type_name(self) -> str:
        return _TYPE_NAMES[self]

    @classmethod
    def parse(cls, value: PartOfSpeech | str) -> PartOfSpeech:
        """Accept a member or its one-letter code."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unknown part of speech: {value!r}") from None


_STORAGE_SUFFIX = {
    StoragePos.NOUN: "noun",
    StoragePos.VERB: "verb",
    StoragePos.ADJECTIVE: "adj",
    StoragePos.ADVERB: "adv",
}

_TYPE_NAMES = {
    PartOfSpeech.NOUN: "noun",
    PartOfSpeech.VERB: "verb",
    PartOfSpeech.ADJECTIVE: "adjective",
    PartOfSpeech.ADJECTIVE_SATELLITE: "adjective satellite",
    PartOfSpeech.ADVERB: "adverb",
}


@dataclass(slots=True, frozen=True)
class IndexEntry:
    lemma: str                   # underscore-joined for multi-word terms
    pos: PartOfSpeech
    synset_count: int
    pointer_count: int
    pointers: tuple[str, ...]    # pointer symbols used by any sense
    sense_count: int
    tag_sense_count: int
    synset_offsets: tuple[int, ...]  # byte offsets into data.<pos>


@dataclass(slots=True, frozen=True)
class WordSense:
    word: str
    lex_id: int


@dataclass(slots=True, frozen=True)
class Pointer:
    symbol: str
    synset_offset: int
    pos: str              # raw target code, may be "s"
    source_target: str    # 4 hex digits: source word no. | target word no.
    data: Synset | None = None

    @property
    def source(self) -> int:
        """Source word number; 0 means the whole synset."""
        return int(self.source_target[:2], 16)

    @property
    def target(self) -> int:
        return int(self.source_target[2:], 16)


@dataclass(slots=True, frozen=True)
class VerbFrame:
    frame_number: int
    word_number: int      # 0 = applies to all words in the synset


@dataclass(slots=True, frozen=True)
class SynsetMeta:
    pos: PartOfSpeech
    synset_offset: int
    lex_filenum: int
    synset_type: str
    word_count: int
    words: tuple[WordSense, ...]
    pointer_count: int
    pointers: tuple[Pointer, ...]
    frames: tuple[VerbFrame, ...] = ()


@dataclass(slots=True, frozen=True)
class Synset:
    glossary: str
    meta: SynsetMeta

    @property
    def lemmas(self) -> list[str]:
        return [w.word for w in self.meta.words]
