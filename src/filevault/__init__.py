"""filevault - a single-file local vault for arbitrary files."""

__version__ = "0.1.0"
