"""WordNet: session handle holding one loaded index and exposing the public API."""

from __future__ import annotations

import asyncio
from dataclasses import replace
from pathlib import Path
from typing import TYPE_CHECKING, AsyncIterator

import structlog

from ._config import settings as default_settings
from ._errors import (
    DatabaseUnavailableError,
    MalformedRecordError,
    MissingDataFileError,
    NotInitializedError,
    WordNotFoundError,
)
from ._grammar import RECORD_SIGNATURE, parse_data_line
from ._loader import _default_database_dir, build_index, display_word
from ._normalize import normalize_word
from ._reader import iter_lines, read_record
from ._snapshot import read_snapshot, write_snapshot
from ._types import IndexEntry, PartOfSpeech, Pointer, StoragePos, Synset

if TYPE_CHECKING:
    from ._config import Settings
    from ._loader import IndexStore

logger = structlog.get_logger()

# Pointers are followed at most this many hops from the requested synset.
MAX_POINTER_DEPTH = 1

SCAN_ORDER = (
    StoragePos.NOUN,
    StoragePos.VERB,
    StoragePos.ADJECTIVE,
    StoragePos.ADVERB,
)


class WordNet:
    """Lemma index plus lazy, offset-based access to the data files.

    Nothing but the index stays in memory; synsets are parsed from disk on
    every call. ``init`` builds a new index store and swaps it in, so calls
    already running keep reading the store they started with.
    """

    __slots__ = ("_settings", "_store", "_generation")

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or default_settings
        self._store: IndexStore | None = None
        self._generation = 0

    # -- Lifecycle --

    async def init(
        self,
        directory: Path | str | None = None,
        *,
        snapshot: Path | str | None = None,
    ) -> WordNet:
        """Load the index, discarding whatever was loaded before.

        Args:
            directory: Database directory holding index.* and data.* files.
                Defaults to WNDB_DATABASE_DIR, then the bundled ``db``.
            snapshot: Optional index snapshot written by ``save_snapshot``;
                used instead of parsing the index files.
        """
        if directory is None:
            directory = self._settings.DATABASE_DIR or _default_database_dir()

        self._store = None
        self._generation += 1
        generation = self._generation

        if snapshot is not None:
            store = await read_snapshot(snapshot, directory, generation)
        else:
            store = await build_index(
                directory, generation, self._settings.STREAM_CHUNK_SIZE,
            )

        # An init that started later has already replaced this one.
        if generation == self._generation:
            self._store = store
        return self

    @property
    def is_initialized(self) -> bool:
        return self._store is not None and not self._store.is_empty

    @property
    def directory(self) -> Path | None:
        return self._store.directory if self._store is not None else None

    @property
    def generation(self) -> int:
        return self._generation

    def _require_store(self) -> IndexStore:
        store = self._store
        if store is None or store.is_empty:
            raise NotInitializedError(
                "WordNet database is not initialized. Call init() first."
            )
        return store

    async def save_snapshot(self, path: Path | str) -> None:
        """Write the loaded index to ``path`` for a faster later init()."""
        await write_snapshot(self._require_store(), path)

    # -- Index API --

    def list_words(self) -> list[str]:
        """Every distinct lemma, underscores shown as spaces, in load order.

        Empty until ``init`` has loaded an index.
        """
        store = self._store
        if store is None:
            return []
        return [display_word(key) for key in store.entries]

    def list_index_entries(self) -> list[IndexEntry]:
        return [
            entry
            for entries in self._require_store().entries.values()
            for entry in entries
        ]

    # -- Synset API --

    async def lookup(self, word: str, skip_pointers: bool = False) -> list[Synset]:
        """All synsets for ``word``, in index-entry then offset order.

        Raises:
            WordNotFoundError: If ``word`` is not indexed.
        """
        store = self._require_store()
        entries = store.entries.get(normalize_word(word))
        if not entries:
            logger.debug("lookup_miss", word=word)
            raise WordNotFoundError(word)

        depth = 0 if skip_pointers else MAX_POINTER_DEPTH
        results = await asyncio.gather(*(
            self._read_synset(store, entry.pos, offset, depth)
            for entry in entries
            for offset in entry.synset_offsets
        ))
        return [synset for synset in results if synset is not None]

    async def get_synset(
        self,
        pos: PartOfSpeech | str,
        offset: int,
        skip_pointers: bool = False,
    ) -> Synset | None:
        """The synset at byte ``offset`` of the data file for ``pos``."""
        store = self._require_store()
        depth = 0 if skip_pointers else MAX_POINTER_DEPTH
        return await self._read_synset(store, pos, offset, depth)

    def iterate_synsets(
        self,
        pos: PartOfSpeech | str | None = None,
        *,
        skip_pointers: bool = False,
    ) -> AsyncIterator[Synset]:
        """Stream every synset of ``pos`` (all data files when None).

        With ``pos`` given only synsets of exactly that type are yielded, so
        "s" returns satellites but not head adjectives. Each call starts a
        fresh scan.
        """
        store = self._require_store()
        wanted = PartOfSpeech.parse(pos) if pos is not None else None
        depth = 0 if skip_pointers else MAX_POINTER_DEPTH
        return self._scan(store, wanted, depth)

    # -- Internals --

    async def _scan(
        self, store: IndexStore, wanted: PartOfSpeech | None, depth: int
    ) -> AsyncIterator[Synset]:
        targets = (wanted.storage,) if wanted is not None else SCAN_ORDER
        for storage in targets:
            path = store.data_files.get(storage)
            if path is None:
                raise MissingDataFileError(storage.value)
            try:
                async for raw in iter_lines(path, self._settings.STREAM_CHUNK_SIZE):
                    line = raw.rstrip("\r").lstrip()
                    if not RECORD_SIGNATURE.match(line):
                        continue
                    synset = parse_data_line(line)
                    if wanted is not None and synset.meta.pos is not wanted:
                        continue
                    yield await self._resolve_pointers(store, synset, depth)
            except OSError as exc:
                raise DatabaseUnavailableError(
                    f"Cannot read data file {path}: {exc}", path=path,
                ) from exc

    async def _fetch_line(self, path: Path, offset: int) -> str | None:
        return await read_record(
            path, offset,
            self._settings.READ_WINDOW, self._settings.MAX_READ_WINDOW,
        )

    async def _read_synset(
        self,
        store: IndexStore,
        pos: PartOfSpeech | str,
        offset: int,
        depth: int,
    ) -> Synset | None:
        path = store.data_file(pos)
        try:
            line = await self._fetch_line(path, offset)
        except OSError as exc:
            raise DatabaseUnavailableError(
                f"Cannot read synset {offset} from {path}: {exc}", path=path,
            ) from exc
        if not line:
            return None
        return await self._resolve_pointers(store, parse_data_line(line), depth)

    async def _resolve_target(
        self, store: IndexStore, pointer: Pointer, depth: int
    ) -> Synset | None:
        # An unknown target part of speech is fatal, a failed read is not.
        path = store.data_file(pointer.pos)
        try:
            line = await self._fetch_line(path, pointer.synset_offset)
        except (OSError, MalformedRecordError) as exc:
            logger.warning(
                "pointer_target_missing", pos=pointer.pos,
                offset=pointer.synset_offset, error=str(exc),
            )
            return None
        if not line:
            logger.debug(
                "pointer_target_missing", pos=pointer.pos,
                offset=pointer.synset_offset,
            )
            return None
        return await self._resolve_pointers(store, parse_data_line(line), depth)

    async def _resolve_pointers(
        self, store: IndexStore, synset: Synset, depth: int
    ) -> Synset:
        """Attach pointer targets ``depth`` hops deep; 0 returns ``synset`` as is."""
        pointers = synset.meta.pointers
        if depth <= 0 or not pointers:
            return synset

        targets = await asyncio.gather(*(
            self._resolve_target(store, pointer, depth - 1)
            for pointer in pointers
        ))
        resolved = tuple(
            replace(pointer, data=target) if target is not None else pointer
            for pointer, target in zip(pointers, targets)
        )
        return replace(synset, meta=replace(synset.meta, pointers=resolved))
