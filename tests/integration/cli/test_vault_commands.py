"""Integration tests driving the vault CLI end to end.

Each test runs in an empty working directory, so the container is
./vault.vault exactly as a user would see it.
"""

import json
from pathlib import Path

import pytest

from filevault.cli.__main__ import main
from filevault.cli.cli_common import ExitCode
from filevault.cli.vault_files import WELCOME_MESSAGE
from filevault.storage.container import load_store

pytestmark = pytest.mark.integration


def run_json(capsys, *args: str) -> tuple[int, dict]:
    capsys.readouterr()
    exit_code = main([*args, "--json"])
    return exit_code, json.loads(capsys.readouterr().out)


class TestEndToEnd:
    """init → add → ls → export → rm → ls → cat."""

    def test_full_scenario(self, vault_dir: Path, capsys):
        assert main(["init"]) == ExitCode.SUCCESS
        assert "created a new vault in current directory" in capsys.readouterr().out
        assert load_store(vault_dir / "vault.vault").keys() == [("hello", "txt")]

        (vault_dir / "report.pdf").write_bytes(b"abc")
        assert main(["add", "report.pdf"]) == ExitCode.SUCCESS
        assert "added report.pdf to the vault" in capsys.readouterr().out

        assert main(["ls"]) == ExitCode.SUCCESS
        out = capsys.readouterr().out
        assert out.splitlines()[0] == "2 files:"
        assert "report.pdf [3 bytes]" in out

        assert main(["export", "report.pdf"]) == ExitCode.SUCCESS
        assert "exported to ./vault-report.pdf" in capsys.readouterr().out
        assert (vault_dir / "vault-report.pdf").read_bytes() == b"abc"

        assert main(["rm", "hello.txt"]) == ExitCode.SUCCESS
        assert "deleted file" in capsys.readouterr().out

        assert main(["ls"]) == ExitCode.SUCCESS
        out = capsys.readouterr().out
        assert out.splitlines() == ["1 file:", "report.pdf [3 bytes]"]

        assert main(["cat", "report.pdf"]) == ExitCode.SUCCESS
        assert capsys.readouterr().out == "report.pdf:\nabc\n"


class TestInit:
    """Test vault creation."""

    def test_init_creates_welcome_file(self, vault_dir: Path, capsys):
        main(["init"])
        capsys.readouterr()

        main(["cat", "hello.txt"])
        assert WELCOME_MESSAGE in capsys.readouterr().out

    def test_init_twice_keeps_existing_vault(self, vault_dir: Path, capsys):
        main(["init"])
        (vault_dir / "a.txt").write_text("a")
        main(["add", "a.txt"])
        capsys.readouterr()

        assert main(["init"]) == ExitCode.SUCCESS
        assert "vault already exists in current directory" in capsys.readouterr().out
        assert len(load_store(vault_dir / "vault.vault")) == 2

    def test_init_json(self, vault_dir: Path, capsys):
        exit_code, result = run_json(capsys, "init")

        assert exit_code == ExitCode.SUCCESS
        assert result["status"] == "success"
        assert result["data"]["created"] is True
        assert result["data"]["files"] == [{"name": "hello", "extension": "txt", "size": len(WELCOME_MESSAGE)}]


class TestAdd:
    """Test single and bulk add."""

    @pytest.fixture(autouse=True)
    def initialized(self, vault_dir: Path, capsys):
        main(["init"])
        capsys.readouterr()

    def test_duplicate_add_fails_without_overwrite(self, vault_dir: Path, capsys):
        (vault_dir / "hello.txt").write_text("replacement")

        assert main(["add", "hello.txt"]) == ExitCode.DUPLICATE_KEY
        assert "already exists" in capsys.readouterr().err
        assert load_store(vault_dir / "vault.vault").get("hello", "txt").text() == WELCOME_MESSAGE

    def test_overwrite_replaces_and_moves_to_end(self, vault_dir: Path, capsys):
        (vault_dir / "notes.md").write_text("notes")
        main(["add", "notes.md"])
        (vault_dir / "hello.txt").write_text("replacement")

        assert main(["add", "hello.txt", "--overwrite"]) == ExitCode.SUCCESS

        store = load_store(vault_dir / "vault.vault")
        assert store.keys() == [("notes", "md"), ("hello", "txt")]
        assert store.get("hello", "txt").content == b"replacement"

    def test_add_directory_recursively(self, vault_dir: Path, capsys):
        docs = vault_dir / "docs"
        (docs / "sub").mkdir(parents=True)
        (docs / "b.txt").write_text("b")
        (docs / "a.md").write_text("a")
        (docs / "sub" / "c.csv").write_text("c")

        assert main(["add", "docs"]) == ExitCode.SUCCESS

        store = load_store(vault_dir / "vault.vault")
        assert store.keys() == [("hello", "txt"), ("a", "md"), ("b", "txt"), ("c", "csv")]

    def test_add_working_directory_skips_container(self, vault_dir: Path, capsys):
        (vault_dir / "a.txt").write_text("a")

        assert main(["add", "."]) == ExitCode.SUCCESS
        assert capsys.readouterr().out == "added a.txt to the vault\n"

        store = load_store(vault_dir / "vault.vault")
        assert store.keys() == [("hello", "txt"), ("a", "txt")]

    def test_batch_continues_after_failure(self, vault_dir: Path, capsys):
        docs = vault_dir / "docs"
        docs.mkdir()
        (docs / "Makefile").write_text("all:")
        (docs / "hello.txt").write_text("dup")
        (docs / "ok.txt").write_text("ok")

        exit_code = main(["add", "docs", "missing.pdf"])
        captured = capsys.readouterr()

        assert exit_code == ExitCode.INVALID_INPUT
        assert "added ok.txt to the vault" in captured.out
        assert "Makefile" in captured.err
        assert "missing.pdf" in captured.err
        assert "3 files could not be added" in captured.err

        store = load_store(vault_dir / "vault.vault")
        assert store.keys() == [("hello", "txt"), ("ok", "txt")]
        assert store.get("hello", "txt").text() == WELCOME_MESSAGE

    def test_batch_failures_in_json(self, vault_dir: Path, capsys):
        (vault_dir / "ok.txt").write_text("ok")

        exit_code, result = run_json(capsys, "add", "ok.txt", "missing.pdf")

        assert exit_code == ExitCode.IO_ERROR
        assert result["status"] == "error"
        assert [f["name"] for f in result["data"]["added"]] == ["ok"]
        assert result["data"]["failed"][0]["source"] == "missing.pdf"
        assert result["meta"]["exit_code"] == ExitCode.IO_ERROR

    def test_nothing_saved_when_every_file_fails(self, vault_dir: Path, capsys):
        container = vault_dir / "vault.vault"
        before = container.read_bytes()

        assert main(["add", "missing.pdf"]) == ExitCode.IO_ERROR
        assert container.read_bytes() == before


class TestReadCommands:
    """Test ls, cat and export."""

    @pytest.fixture(autouse=True)
    def initialized(self, vault_dir: Path, capsys):
        main(["init"])
        capsys.readouterr()

    def test_ls_json(self, vault_dir: Path, capsys):
        exit_code, result = run_json(capsys, "ls")

        assert exit_code == ExitCode.SUCCESS
        assert [f["name"] for f in result["data"]["files"]] == ["hello"]

    def test_ls_empty_vault(self, vault_dir: Path, capsys):
        main(["rm", "hello.txt"])
        capsys.readouterr()

        main(["ls"])
        assert capsys.readouterr().out.splitlines() == ["0 files:"]

    def test_cat_binary_content_is_lossy(self, vault_dir: Path, capsys):
        (vault_dir / "blob.bin").write_bytes(b"ab\xffcd")
        main(["add", "blob.bin"])
        capsys.readouterr()

        main(["cat", "blob.bin"])
        assert capsys.readouterr().out == "blob.bin:\nab�cd\n"

    def test_cat_missing_file(self, vault_dir: Path, capsys):
        assert main(["cat", "nope.txt"]) == ExitCode.NOT_FOUND
        assert "does not exist inside vault" in capsys.readouterr().err

    def test_export_to_custom_path(self, vault_dir: Path, capsys):
        target = vault_dir / "out" / "copy.txt"
        target.parent.mkdir()

        assert main(["export", "hello.txt", "--output", str(target)]) == ExitCode.SUCCESS
        assert target.read_text(encoding="utf-8") == WELCOME_MESSAGE

    def test_export_into_missing_directory(self, vault_dir: Path, capsys):
        target = vault_dir / "missing" / "copy.txt"

        assert main(["export", "hello.txt", "-o", str(target)]) == ExitCode.IO_ERROR

    def test_export_accepts_path_like_argument(self, vault_dir: Path, capsys):
        assert main(["export", "some/dir/hello.txt"]) == ExitCode.SUCCESS
        assert (vault_dir / "vault-hello.txt").exists()


class TestRemove:
    """Test rm precision."""

    @pytest.fixture(autouse=True)
    def initialized(self, vault_dir: Path, capsys):
        main(["init"])
        (vault_dir / "hello.md").write_text("markdown")
        (vault_dir / "other.txt").write_text("other")
        main(["add", "hello.md", "other.txt"])
        capsys.readouterr()

    def test_rm_removes_only_exact_key(self, vault_dir: Path, capsys):
        assert main(["rm", "hello.txt"]) == ExitCode.SUCCESS

        store = load_store(vault_dir / "vault.vault")
        assert store.keys() == [("hello", "md"), ("other", "txt")]

    def test_rm_missing_file_leaves_vault_unchanged(self, vault_dir: Path, capsys):
        assert main(["rm", "hello.csv"]) == ExitCode.NOT_FOUND
        assert len(load_store(vault_dir / "vault.vault")) == 3


class TestHelp:
    """Test help output."""

    def test_help_command(self, vault_dir: Path, capsys):
        assert main(["help"]) == ExitCode.SUCCESS
        out = capsys.readouterr().out
        for command in ("add", "cat", "export", "init", "ls", "rm"):
            assert command in out

    def test_help_flag(self, vault_dir: Path, capsys):
        assert main(["--help"]) == ExitCode.SUCCESS
        assert "Usage" in capsys.readouterr().out

    def test_version(self, vault_dir: Path, capsys):
        assert main(["--version"]) == ExitCode.SUCCESS
        assert "0.1.0" in capsys.readouterr().out
