"""CLI commands for storing files in the vault container."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click

from ..core.errors import VaultError
from ..core.store import FileRecord, FileStore
from ..observability.loguru_config import get_logger
from ..storage.container import container_exists, load_store, save_store
from .cli_common import CLIContext, cli_command, exit_code_for, handle_cli_error, handle_cli_success
from .paths import export_filename, iter_source_files, split_filename

log = get_logger("cli")

WELCOME_MESSAGE = (
    "welcome to vault! vault is your private place to store sensitive documents, files, "
    "photos, and much more. get started by running `vault help` to see the available commands!"
)


def pluralize(count: int) -> str:
    return "" if count == 1 else "s"


def welcome_record() -> FileRecord:
    return FileRecord(name="hello", extension="txt", content=WELCOME_MESSAGE.encode("utf-8"))


def record_summary(record: FileRecord) -> dict[str, Any]:
    return {"name": record.name, "extension": record.extension, "size": record.size}


@click.command("init")
@cli_command
def init_command(ctx: CLIContext) -> int:
    """Create a vault in the current directory."""
    container = ctx.container_path

    if container_exists(container):
        return handle_cli_success(
            ctx,
            {"created": False, "container": str(container)},
            "vault already exists in current directory",
        )

    try:
        store = FileStore.create_empty()
        store.add(welcome_record())
        save_store(store, container)
    except VaultError as exc:
        return handle_cli_error(ctx, exc, "init")

    log.info("Created vault at {}", container)
    return handle_cli_success(
        ctx,
        {"created": True, "container": str(container), "files": [record_summary(r) for r in store]},
        "created a new vault in current directory",
    )


@click.command("add")
@click.argument("paths", nargs=-1, required=True, type=click.Path(path_type=Path))
@click.option("--overwrite", "-o", is_flag=True, help="Replace files that already exist in the vault")
@cli_command
def add_command(ctx: CLIContext, paths: tuple[Path, ...], overwrite: bool) -> int:
    """Add files (or every file under a directory) to the vault.

    A file that cannot be added is reported and the rest of the batch
    continues.
    """
    try:
        store = load_store(ctx.container_path)
    except VaultError as exc:
        return handle_cli_error(ctx, exc, "add")

    added: list[dict[str, Any]] = []
    failed: list[tuple[Path, Exception]] = []

    for source in iter_source_files(paths, exclude=ctx.container_path):
        try:
            name, extension = split_filename(source)
            content = source.read_bytes()
            store.add(FileRecord(name=name, extension=extension, content=content), overwrite=overwrite)
        except (VaultError, OSError) as exc:
            log.warning("Skipping {}: {}", source, exc)
            failed.append((source, exc))
            if not ctx.json_output:
                click.echo(f"error: {source}: {_describe_failure(exc)}", err=True)
            continue

        added.append({"name": name, "extension": extension, "size": len(content), "source": str(source)})
        ctx.echo(f"added {name}.{extension} to the vault")

    if added:
        try:
            save_store(store, ctx.container_path)
        except VaultError as exc:
            return handle_cli_error(ctx, exc, "add")

    data = {
        "added": added,
        "failed": [{"source": str(source), "error": _describe_failure(exc)} for source, exc in failed],
    }

    if failed:
        exit_code = exit_code_for(failed[0][1])
        ctx.output(
            data,
            status="error",
            error=f"{len(failed)} file{pluralize(len(failed))} could not be added",
            meta={"exit_code": int(exit_code)},
        )
        return int(exit_code)

    return handle_cli_success(ctx, data, None if added else "no files to add")


def _describe_failure(exc: Exception) -> str:
    if isinstance(exc, OSError) and exc.strerror:
        return f"error reading file ({exc.strerror})"
    return str(exc)


@click.command("ls")
@cli_command
def list_command(ctx: CLIContext) -> int:
    """List all files in the vault."""
    try:
        store = load_store(ctx.container_path)
    except VaultError as exc:
        return handle_cli_error(ctx, exc, "ls")

    records = store.list()
    lines = [f"{len(records)} file{pluralize(len(records))}:"]
    lines.extend(record.describe() for record in records)

    return handle_cli_success(ctx, {"files": [record_summary(r) for r in records]}, "\n".join(lines))


@click.command("cat")
@click.argument("filename")
@cli_command
def cat_command(ctx: CLIContext, filename: str) -> int:
    """Print the contents of a file in the vault."""
    try:
        name, extension = split_filename(filename)
        store = load_store(ctx.container_path)
        record = store.get(name, extension)
    except VaultError as exc:
        return handle_cli_error(ctx, exc, "cat")

    text = record.text()
    return handle_cli_success(
        ctx,
        {**record_summary(record), "content": text},
        f"{record.filename}:\n{text}",
    )


@click.command("export")
@click.argument("filename")
@click.option(
    "--output",
    "-o",
    "output_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Destination file (default: ./vault-<name>.<ext>)",
)
@cli_command
def export_command(ctx: CLIContext, filename: str, output_path: Path | None) -> int:
    """Write a file from the vault to disk."""
    try:
        name, extension = split_filename(filename)
        store = load_store(ctx.container_path)
        record = store.get(name, extension)
    except VaultError as exc:
        return handle_cli_error(ctx, exc, "export")

    target = output_path or Path(export_filename(record.name, record.extension))

    try:
        target.write_bytes(record.content)
    except OSError as exc:
        return handle_cli_error(ctx, exc, "export")

    display = str(target) if target.is_absolute() or target.parent != Path(".") else f"./{target}"
    return handle_cli_success(
        ctx,
        {**record_summary(record), "path": str(target)},
        f"exported to {display}",
    )


@click.command("rm")
@click.argument("filename")
@cli_command
def remove_command(ctx: CLIContext, filename: str) -> int:
    """Delete a file from the vault."""
    try:
        name, extension = split_filename(filename)
        store = load_store(ctx.container_path)
        store.delete(name, extension)
        save_store(store, ctx.container_path)
    except VaultError as exc:
        return handle_cli_error(ctx, exc, "rm")

    return handle_cli_success(ctx, {"deleted": f"{name}.{extension}", "remaining": len(store)}, "deleted file")
