"""wndb: async reader for WordNet-format lexical databases (index.* / data.* files)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ._errors import (
    DatabaseUnavailableError,
    MalformedRecordError,
    MissingDataFileError,
    NotInitializedError,
    SnapshotChecksumError,
    SnapshotError,
    SnapshotVersionError,
    WordNetError,
    WordNotFoundError,
)
from ._grammar import parse_data_line, parse_index_line
from ._normalize import normalize_word
from ._types import (
    IndexEntry,
    PartOfSpeech,
    Pointer,
    StoragePos,
    Synset,
    SynsetMeta,
    VerbFrame,
    WordSense,
)
from ._wordnet import WordNet

if TYPE_CHECKING:
    from pathlib import Path

    from ._config import Settings

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "init",
    "DatabaseUnavailableError",
    "IndexEntry",
    "MalformedRecordError",
    "MissingDataFileError",
    "NotInitializedError",
    "PartOfSpeech",
    "Pointer",
    "SnapshotChecksumError",
    "SnapshotError",
    "SnapshotVersionError",
    "StoragePos",
    "Synset",
    "SynsetMeta",
    "VerbFrame",
    "WordNet",
    "WordNetError",
    "WordNotFoundError",
    "WordSense",
    "normalize_word",
    "parse_data_line",
    "parse_index_line",
]


async def init(
    directory: Path | str | None = None,
    *,
    snapshot: Path | str | None = None,
    settings: Settings | None = None,
) -> WordNet:
    """Load a database and return a ready-to-use WordNet handle.

    Args:
        directory: Database directory. If None, uses WNDB_DATABASE_DIR or the
            bundled ``db`` directory.
        snapshot: Optional index snapshot to load instead of the index files.
        settings: Settings overriding the environment-derived defaults.
    """
    return await WordNet(settings).init(directory, snapshot=snapshot)
