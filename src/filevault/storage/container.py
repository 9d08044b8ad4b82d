"""Container persistence: one MessagePack file holding one whole store.

Every save rewrites the whole file. Writes go through a temporary file in
the same directory followed by fsync and rename, so a reader sees either the
old container or the new one. There is no locking; concurrent invocations
race and the last writer wins.

Layout::

    {"version": 1, "files": [[name, extension, content], ...]}
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any

import msgpack

from ..core.errors import ContainerCorruptError, ContainerMissingError, ContainerReadError, ContainerWriteError
from ..core.store import FileRecord, FileStore
from ..observability.loguru_config import get_logger, timing_context

__all__ = [
    "CONTAINER_FILENAME",
    "FORMAT_VERSION",
    "container_exists",
    "dumps",
    "load_store",
    "loads",
    "save_store",
]

CONTAINER_FILENAME = "vault.vault"
FORMAT_VERSION = 1

log = get_logger("storage")


def dumps(store: FileStore) -> bytes:
    """Serialize a store to container bytes."""
    payload = {
        "version": FORMAT_VERSION,
        "files": [[record.name, record.extension, record.content] for record in store],
    }
    return msgpack.packb(payload, use_bin_type=True)


def loads(data: bytes) -> FileStore:
    """Deserialize container bytes into a store.

    Raises
    ------
    ContainerCorruptError
        If the bytes are not a valid container
    """
    try:
        payload = msgpack.unpackb(data, raw=False)
    except (msgpack.UnpackException, ValueError, TypeError) as exc:
        raise ContainerCorruptError(f"vault is invalid: {exc}") from exc

    if not isinstance(payload, dict):
        raise ContainerCorruptError("vault is invalid: top-level value is not a map")

    version = payload.get("version")
    if version != FORMAT_VERSION:
        raise ContainerCorruptError(f"vault is invalid: unsupported format version {version!r}")

    files = payload.get("files")
    if not isinstance(files, list):
        raise ContainerCorruptError("vault is invalid: missing file list")

    store = FileStore()
    for index, entry in enumerate(files):
        record = _decode_record(index, entry)
        if store.contains(record.name, record.extension):
            raise ContainerCorruptError(f"vault is invalid: duplicate entry {record.filename}")
        store.add(record)

    return store


def _decode_record(index: int, entry: Any) -> FileRecord:
    if not isinstance(entry, list) or len(entry) != 3:
        raise ContainerCorruptError(f"vault is invalid: entry {index} is malformed")

    name, extension, content = entry
    if not isinstance(name, str) or not isinstance(extension, str) or not isinstance(content, bytes):
        raise ContainerCorruptError(f"vault is invalid: entry {index} has wrong field types")

    return FileRecord(name=name, extension=extension, content=content)


def container_exists(path: Path | str = CONTAINER_FILENAME) -> bool:
    return Path(path).exists()


def load_store(path: Path | str = CONTAINER_FILENAME) -> FileStore:
    """Read and decode the container at ``path``.

    Parameters
    ----------
    path
        Container file (default: ./vault.vault)

    Returns
    -------
    FileStore
        Store exactly as persisted, insertion order included

    Raises
    ------
    ContainerMissingError
        If there is no container file
    ContainerCorruptError
        If the file cannot be decoded into a store
    ContainerReadError
        If reading the file fails for any other OS-level reason
    """
    path = Path(path)

    with timing_context("container.load", component="storage", path=str(path)) as ctx:
        try:
            data = path.read_bytes()
        except FileNotFoundError as exc:
            raise ContainerMissingError("no vault in current directory") from exc
        except IsADirectoryError as exc:
            raise ContainerCorruptError(f"vault path is a directory: {path}") from exc
        except OSError as exc:
            raise ContainerReadError(f"error reading vault {path}: {exc}") from exc

        store = loads(data)
        ctx["records"] = len(store)
        ctx["bytes"] = len(data)

    log.debug("Loaded {} record(s) from {}", len(store), path)
    return store


def save_store(store: FileStore, path: Path | str = CONTAINER_FILENAME) -> None:
    """Serialize ``store`` and replace the container at ``path``.

    Raises
    ------
    ContainerWriteError
        If the file cannot be written
    """
    path = Path(path)
    data = dumps(store)

    with timing_context("container.save", component="storage", path=str(path), bytes=len(data)):
        _atomic_write_bytes(path, data)

    log.debug("Saved {} record(s) to {}", len(store), path)


def _atomic_write_bytes(file_path: Path, data: bytes) -> None:
    """Write via temp file + fsync + rename in the target directory."""
    parent = file_path.parent if str(file_path.parent) else Path(".")
    tmp_path: Path | None = None

    try:
        with tempfile.NamedTemporaryFile(
            mode="wb",
            dir=parent,
            prefix=f".{file_path.name}.tmp",
            delete=False,
        ) as tmp_file:
            tmp_path = Path(tmp_file.name)
            tmp_file.write(data)
            tmp_file.flush()
            os.fsync(tmp_file.fileno())

        tmp_path.replace(file_path)
        tmp_path = None

        # Persist the rename itself
        if hasattr(os, "O_DIRECTORY"):
            dir_fd = os.open(parent, os.O_RDONLY | os.O_DIRECTORY)
            try:
                os.fsync(dir_fd)
            finally:
                os.close(dir_fd)

    except OSError as exc:
        raise ContainerWriteError(f"error writing vault {file_path}: {exc}") from exc
    finally:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
