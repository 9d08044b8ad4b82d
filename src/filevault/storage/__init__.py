"""Storage layer: whole-file container persistence."""

from .container import CONTAINER_FILENAME, container_exists, dumps, load_store, loads, save_store

__all__ = [
    "CONTAINER_FILENAME",
    "container_exists",
    "dumps",
    "load_store",
    "loads",
    "save_store",
]
