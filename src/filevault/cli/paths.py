"""Path handling for the command layer.

Turns filesystem paths into record keys and expands directories for bulk
imports. The store itself never touches paths.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from pathlib import Path

from ..core.errors import InvalidFileNameError

__all__ = ["export_filename", "iter_source_files", "split_filename"]


def split_filename(path: str | Path) -> tuple[str, str]:
    """Split a path into ``(stem, extension)``.

    ``docs/report.pdf`` gives ``("report", "pdf")`` and ``archive.tar.gz``
    gives ``("archive.tar", "gz")``.

    Raises
    ------
    InvalidFileNameError
        If the path has no stem or no extension (``README``, ``.bashrc``)
    """
    path = Path(path)
    extension = path.suffix[1:]
    name = path.stem

    if not name or not extension:
        raise InvalidFileNameError(f"invalid file: {path} (expected <name>.<extension>)")

    return name, extension


def iter_source_files(paths: Iterable[str | Path], *, exclude: Path | None = None) -> Iterator[Path]:
    """Yield files to import, walking directories recursively.

    Files inside a directory come in sorted order. Paths that are not
    directories are yielded unchanged, so missing files surface as read
    errors for the caller to report. A file resolving to ``exclude`` (the
    active container) is never yielded.
    """
    skip = exclude.resolve() if exclude is not None else None

    for raw in paths:
        path = Path(raw)
        candidates = sorted(child for child in path.rglob("*") if child.is_file()) if path.is_dir() else [path]
        for candidate in candidates:
            if skip is not None and candidate.resolve() == skip:
                continue
            yield candidate


def export_filename(name: str, extension: str) -> str:
    """Default export target, ``vault-<name>.<extension>``."""
    return f"vault-{name}.{extension}"
