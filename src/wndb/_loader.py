"""Index loading: lemma -> IndexEntry mapping and data-file registration."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path

import aiofiles.os
import structlog

from ._errors import DatabaseUnavailableError, MissingDataFileError
from ._grammar import parse_index_line
from ._normalize import WORD_SEPARATOR
from ._reader import iter_lines
from ._types import IndexEntry, PartOfSpeech, StoragePos

logger = structlog.get_logger()

# Index files are read one after another in this order so that word and
# entry listings come out the same on every load.
INDEX_ORDER = (
    StoragePos.ADJECTIVE,
    StoragePos.ADVERB,
    StoragePos.NOUN,
    StoragePos.VERB,
)


def _default_database_dir() -> Path:
    return Path(str(resources.files("wndb") / "db"))


def index_path(directory: Path, pos: StoragePos) -> Path:
    return directory / f"index.{pos.suffix}"


def data_path(directory: Path, pos: StoragePos) -> Path:
    return directory / f"data.{pos.suffix}"


def display_word(key: str) -> str:
    return key.replace(WORD_SEPARATOR, " ")


@dataclass(slots=True)
class IndexStore:
    """One loaded generation of the index. Not modified once built."""

    directory: Path
    entries: dict[str, list[IndexEntry]] = field(default_factory=dict)
    data_files: dict[StoragePos, Path] = field(default_factory=dict)
    generation: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.entries

    def add(self, entry: IndexEntry) -> None:
        self.entries.setdefault(entry.lemma, []).append(entry)

    def data_file(self, pos: PartOfSpeech | str) -> Path:
        """Data file backing ``pos``; satellites resolve to the adjective file."""
        try:
            storage = PartOfSpeech.parse(pos).storage
        except ValueError:
            raise MissingDataFileError(str(pos)) from None
        path = self.data_files.get(storage)
        if path is None:
            raise MissingDataFileError(storage.value)
        return path


async def _read_index_file(
    store: IndexStore, path: Path, chunk_size: int | None
) -> int:
    count = 0
    try:
        async for line in iter_lines(path, chunk_size):
            if not line.strip():
                continue
            entry = parse_index_line(line.rstrip("\r"))
            if entry is None:
                continue
            store.add(entry)
            count += 1
    except OSError as exc:
        raise DatabaseUnavailableError(
            f"Cannot read index file {path}: {exc}", path=path,
        ) from exc
    logger.debug("index_file_loaded", path=str(path), entries=count)
    return count


async def _register_data_file(store: IndexStore, pos: StoragePos) -> None:
    path = data_path(store.directory, pos)
    if not await aiofiles.os.path.isfile(path):
        raise DatabaseUnavailableError(f"Missing data file: {path}", path=path)
    store.data_files[pos] = path


async def register_data_files(store: IndexStore) -> None:
    """Record the four data-file paths, failing if any is missing."""
    # Each registration writes its own key, so order does not matter here.
    await asyncio.gather(*(
        _register_data_file(store, pos) for pos in INDEX_ORDER
    ))


async def build_index(
    directory: Path | str,
    generation: int = 0,
    chunk_size: int | None = None,
) -> IndexStore:
    """Read all four index files and register the data files."""
    directory = Path(directory)
    if not await aiofiles.os.path.isdir(directory):
        raise DatabaseUnavailableError(
            f"Database directory not found: {directory}", path=directory,
        )

    store = IndexStore(directory=directory, generation=generation)
    total = 0
    for pos in INDEX_ORDER:
        total += await _read_index_file(
            store, index_path(directory, pos), chunk_size,
        )

    await register_data_files(store)

    logger.info(
        "index_loaded", directory=str(directory), lemmas=len(store.entries),
        entries=total, generation=generation,
    )
    return store
