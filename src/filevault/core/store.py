"""In-memory file store: records keyed by (name, extension).

A store lives for a single command invocation. It is loaded from the
container, mutated in place, and written back whole when changed.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from .errors import DuplicateKeyError, RecordNotFoundError

__all__ = [
    "FileRecord",
    "FileStore",
    "RecordKey",
]

RecordKey = tuple[str, str]


@dataclass(frozen=True)
class FileRecord:
    """One stored file.

    Attributes
    ----------
    name : str
        File stem, e.g. ``report`` for ``report.pdf``
    extension : str
        Suffix without the leading dot, e.g. ``pdf``
    content : bytes
        Raw file bytes
    """

    name: str
    extension: str
    content: bytes

    @property
    def key(self) -> RecordKey:
        return (self.name, self.extension)

    @property
    def filename(self) -> str:
        return f"{self.name}.{self.extension}"

    @property
    def size(self) -> int:
        return len(self.content)

    def matches(self, name: str, extension: str) -> bool:
        """Return True if both name and extension equal the given key."""
        return self.name == name and self.extension == extension

    def describe(self) -> str:
        """Human-readable summary: ``name.ext [N bytes]``."""
        return f"{self.filename} [{self.size} bytes]"

    def text(self) -> str:
        """Content decoded as UTF-8, invalid sequences replaced."""
        return self.content.decode("utf-8", errors="replace")


class FileStore:
    """Insertion-ordered collection of records with unique keys.

    Lookups are linear scans; vaults hold small personal file sets.

    Example:
        >>> store = FileStore()
        >>> store.add(FileRecord("a", "txt", b"hi"))
        >>> store.get("a", "txt").describe()
        'a.txt [2 bytes]'
    """

    def __init__(self, records: list[FileRecord] | None = None) -> None:
        self._records: list[FileRecord] = []
        for record in records or []:
            self.add(record)

    @classmethod
    def create_empty(cls) -> FileStore:
        return cls()

    def contains(self, name: str, extension: str) -> bool:
        """Check whether a record with exactly this key exists."""
        return any(record.matches(name, extension) for record in self._records)

    def add(self, record: FileRecord, *, overwrite: bool = False) -> None:
        """Add a record to the store.

        Parameters
        ----------
        record
            Record to add
        overwrite
            Replace an existing record with the same key. The replacement
            is appended at the end; the old position is not kept.

        Raises
        ------
        DuplicateKeyError
            If the key exists and ``overwrite`` is False
        """
        if self.contains(record.name, record.extension):
            if not overwrite:
                raise DuplicateKeyError(record.name, record.extension)
            self.delete(record.name, record.extension)

        self._records.append(record)

    def get(self, name: str, extension: str) -> FileRecord:
        """Return the record stored under ``(name, extension)``.

        Raises
        ------
        RecordNotFoundError
            If no record has this key
        """
        for record in self._records:
            if record.matches(name, extension):
                return record

        raise RecordNotFoundError(name, extension)

    def delete(self, name: str, extension: str) -> None:
        """Remove the record stored under ``(name, extension)``.

        Only records whose name AND extension both match are removed;
        ``a.md`` survives deleting ``a.txt``.

        Raises
        ------
        RecordNotFoundError
            If no record has this key
        """
        if not self.contains(name, extension):
            raise RecordNotFoundError(name, extension)

        self._records = [record for record in self._records if not record.matches(name, extension)]

    def list(self) -> list[FileRecord]:
        """Snapshot of all records in insertion order."""
        return list(self._records)

    def keys(self) -> list[RecordKey]:
        return [record.key for record in self._records]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[FileRecord]:
        return iter(list(self._records))

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, tuple) or len(key) != 2:
            return False
        return self.contains(key[0], key[1])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FileStore):
            return NotImplemented
        return self._records == other._records

    def __repr__(self) -> str:
        return f"FileStore({[record.filename for record in self._records]!r})"
