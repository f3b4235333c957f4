"""wndb error types."""

from __future__ import annotations


class WordNetError(Exception):
    """Base error for all wndb failures."""


class NotInitializedError(WordNetError):
    """The database was accessed before a successful init()."""


class MalformedRecordError(WordNetError):
    """An index or data line does not follow the database grammar."""

    def __init__(
        self,
        message: str,
        line: str | None = None,
        field: str | None = None,
        index: int | None = None,
    ) -> None:
        self.line = line
        self.field = field
        self.index = index
        if line is not None:
            message = f"{message} in line {line!r}"
        super().__init__(message)


class WordNotFoundError(WordNetError, LookupError):
    """No index entry exists for the queried word."""

    def __init__(self, word: str) -> None:
        self.word = word
        super().__init__(f'No definition(s) found for "{word}".')


class MissingDataFileError(WordNetError):
    """A part of speech has no registered data file."""

    def __init__(self, pos: str) -> None:
        self.pos = pos
        super().__init__(f"No data file registered for part of speech {pos!r}")


class DatabaseUnavailableError(WordNetError):
    """An index or data file is absent or unreadable."""

    def __init__(self, message: str, path: object = None) -> None:
        self.path = path
        super().__init__(message)


class SnapshotError(WordNetError):
    """Index snapshot missing or unusable."""


class SnapshotVersionError(SnapshotError):
    """Snapshot format version mismatch."""


class SnapshotChecksumError(SnapshotError):
    """Index file changed since the snapshot was written."""
