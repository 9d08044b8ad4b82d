"""Shared pytest configuration for the test suite."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest


def ensure_src_on_path() -> None:
    """Ensure the project source directory is importable before tests run."""
    src = Path(__file__).resolve().parent.parent / "src"
    if src.exists() and str(src) not in sys.path:
        sys.path.insert(0, str(src))


ensure_src_on_path()


@pytest.fixture
def clean_env(monkeypatch):
    """Remove FILEVAULT_* variables so tests see default configuration."""
    import os

    for var in [k for k in os.environ if k.startswith("FILEVAULT_")]:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def vault_dir(tmp_path: Path, monkeypatch, clean_env) -> Path:
    """Empty working directory for CLI invocations."""
    monkeypatch.chdir(tmp_path)
    return tmp_path
