"""Random-access record reads and sequential line streaming over aiofiles."""

from __future__ import annotations

import codecs
from pathlib import Path
from typing import AsyncIterator

import aiofiles
import structlog

from ._config import settings
from ._errors import MalformedRecordError

logger = structlog.get_logger()

_NEWLINE = b"\n"


def _decode(raw: bytes, path: Path | str, offset: int) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedRecordError(
            f"record at offset {offset} in {path} is not valid UTF-8: {exc.reason}"
        ) from exc


async def read_record(
    path: Path | str,
    offset: int,
    window: int | None = None,
    max_window: int | None = None,
) -> str | None:
    """Return the line starting at byte ``offset``, or None past end of file.

    Reads a bounded window instead of the whole file. If the window fills up
    without reaching a newline the read is repeated with a doubled window,
    up to ``max_window``.
    """
    window = window or settings.READ_WINDOW
    max_window = max_window or settings.MAX_READ_WINDOW
    if offset < 0:
        return None

    async with aiofiles.open(path, "rb") as f:
        while True:
            await f.seek(offset)
            chunk = await f.read(window)
            if not chunk:
                return None
            end = chunk.find(_NEWLINE)
            if end >= 0:
                return _decode(chunk[:end], path, offset)
            if len(chunk) < window:
                # Last record of a file without a trailing newline.
                return _decode(chunk, path, offset)
            if window >= max_window:
                raise MalformedRecordError(
                    f"record at offset {offset} in {path} exceeds "
                    f"{max_window} bytes"
                )
            window = min(window * 2, max_window)
            logger.debug(
                "record_window_grown", path=str(path), offset=offset,
                window=window,
            )


async def iter_lines(
    path: Path | str, chunk_size: int | None = None
) -> AsyncIterator[str]:
    """Yield the lines of ``path`` without their newline, lazily.

    A trailing unterminated line is yielded too. Lines are not otherwise
    trimmed.
    """
    chunk_size = chunk_size or settings.STREAM_CHUNK_SIZE
    decoder = codecs.getincrementaldecoder("utf-8")()
    buffer = ""
    position = 0

    async with aiofiles.open(path, "rb") as f:
        while True:
            chunk = await f.read(chunk_size)
            try:
                buffer += decoder.decode(chunk, final=not chunk)
            except UnicodeDecodeError as exc:
                raise MalformedRecordError(
                    f"invalid UTF-8 near byte {position + exc.start} in {path}: "
                    f"{exc.reason}"
                ) from exc
            if not chunk:
                break
            position += len(chunk)
            start = 0
            newline = buffer.find("\n")
            while newline >= 0:
                yield buffer[start:newline]
                start = newline + 1
                newline = buffer.find("\n", start)
            buffer = buffer[start:]

    if buffer:
        yield buffer
