"""Index snapshots: the loaded lemma index packed with msgpack.

A snapshot records the SHA-256 of every index file it was built from and
is refused once any of them changes.
"""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Any

import aiofiles
import aiofiles.os
import msgpack
import structlog

from ._errors import (
    DatabaseUnavailableError,
    SnapshotChecksumError,
    SnapshotError,
    SnapshotVersionError,
)
from ._loader import INDEX_ORDER, IndexStore, index_path, register_data_files
from ._types import IndexEntry, PartOfSpeech

logger = structlog.get_logger()

SNAPSHOT_VERSION = "1.0"


async def _sha256(path: Path) -> str:
    h = hashlib.sha256()
    async with aiofiles.open(path, "rb") as f:
        while chunk := await f.read(65536):
            h.update(chunk)
    return h.hexdigest()


async def _index_checksums(directory: Path) -> dict[str, str]:
    checksums: dict[str, str] = {}
    for pos in INDEX_ORDER:
        path = index_path(directory, pos)
        try:
            checksums[path.name] = await _sha256(path)
        except OSError as exc:
            raise DatabaseUnavailableError(
                f"Cannot read index file {path}: {exc}", path=path,
            ) from exc
    return checksums


def _pack_entry(entry: IndexEntry) -> list[Any]:
    return [
        entry.lemma,
        entry.pos.value,
        entry.synset_count,
        list(entry.pointers),
        entry.sense_count,
        entry.tag_sense_count,
        list(entry.synset_offsets),
    ]


def _unpack_entry(raw: list[Any]) -> IndexEntry:
    lemma, pos, synset_count, pointers, sense_count, tag_sense_count, offsets = raw
    return IndexEntry(
        lemma=lemma,
        pos=PartOfSpeech(pos),
        synset_count=synset_count,
        pointer_count=len(pointers),
        pointers=tuple(pointers),
        sense_count=sense_count,
        tag_sense_count=tag_sense_count,
        synset_offsets=tuple(offsets),
    )


async def write_snapshot(store: IndexStore, path: Path | str) -> None:
    """Pack ``store`` into ``path``."""
    path = Path(path)
    payload = {
        "version": SNAPSHOT_VERSION,
        "files": await _index_checksums(store.directory),
        "entries": [
            _pack_entry(entry)
            for entries in store.entries.values()
            for entry in entries
        ],
    }
    async with aiofiles.open(path, "wb") as f:
        await f.write(msgpack.packb(payload, use_bin_type=True))
    logger.info("snapshot_written", path=str(path), entries=len(payload["entries"]))


def _validate_manifest(manifest: dict[str, Any], checksums: dict[str, str]) -> None:
    version = manifest.get("version")
    if version != SNAPSHOT_VERSION:
        raise SnapshotVersionError(
            f"Expected snapshot version {SNAPSHOT_VERSION!r}, got {version!r}"
        )
    recorded = manifest.get("files", {})
    for filename, actual in checksums.items():
        expected = recorded.get(filename)
        if expected is None:
            raise SnapshotError(f"No checksum in snapshot for {filename}")
        if actual != expected:
            raise SnapshotChecksumError(
                f"Checksum mismatch for {filename}: "
                f"expected {expected[:16]}..., got {actual[:16]}..."
            )


async def read_snapshot(
    path: Path | str, directory: Path | str, generation: int = 0
) -> IndexStore:
    """Rebuild an IndexStore for ``directory`` from the snapshot at ``path``."""
    path = Path(path)
    directory = Path(directory)
    if not await aiofiles.os.path.isfile(path):
        raise SnapshotError(f"Snapshot not found: {path}")

    async with aiofiles.open(path, "rb") as f:
        raw_snapshot = await f.read()
    try:
        manifest = msgpack.unpackb(raw_snapshot, raw=False)
    except ValueError as exc:
        raise SnapshotError(f"Unreadable snapshot {path}: {exc}") from exc
    if not isinstance(manifest, dict):
        raise SnapshotError(f"Unreadable snapshot {path}: not a mapping")
    _validate_manifest(manifest, await _index_checksums(directory))

    store = IndexStore(directory=directory, generation=generation)
    try:
        for raw in manifest["entries"]:
            store.add(_unpack_entry(raw))
    except (KeyError, TypeError, ValueError) as exc:
        raise SnapshotError(f"Corrupt entries in snapshot {path}: {exc!r}") from exc
    await register_data_files(store)

    logger.info(
        "snapshot_loaded", path=str(path), lemmas=len(store.entries),
        generation=generation,
    )
    return store
