#!/usr/bin/env python3
"""Main CLI module for filevault."""

import sys

import click

from .. import __version__
from .vault_files import add_command, cat_command, export_command, init_command, list_command, remove_command

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
EPILOG = """
Examples:
  vault init                   # create ./vault.vault with hello.txt
  vault add report.pdf         # store a file
  vault add docs/ --overwrite  # store every file under docs/, replacing existing ones
  vault ls                     # list stored files
  vault cat hello.txt          # print a stored file
  vault export report.pdf      # write ./vault-report.pdf
  vault rm hello.txt           # delete a stored file
""".strip()


@click.group(
    context_settings=CONTEXT_SETTINGS,
    help="vault - keep files inside a single container file in the current directory",
    epilog=EPILOG,
)
@click.version_option(__version__, prog_name="vault")
def cli() -> None:
    """Root command."""


@cli.command("help")
@click.pass_context
def help_command(ctx: click.Context) -> int:
    """Print available commands."""
    click.echo((ctx.parent or ctx).get_help())
    return 0


cli.add_command(init_command, "init")
cli.add_command(add_command, "add")
cli.add_command(list_command, "ls")
cli.add_command(cat_command, "cat")
cli.add_command(export_command, "export")
cli.add_command(remove_command, "rm")


def main(args: list[str] | None = None) -> int:
    """CLI entry point; returns the process exit code."""

    try:
        normalized_args = list(args) if args is not None else None
        result = cli.main(args=normalized_args, prog_name="vault", standalone_mode=False)
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.exceptions.Abort:
        click.echo("Aborted!", err=True)
        return 1
    except SystemExit as exc:  # pragma: no cover - click normalizes exit codes
        return int(exc.code) if exc.code is not None else 0

    return int(result) if isinstance(result, int) else 0


if __name__ == "__main__":  # pragma: no cover - executable module
    sys.exit(main())
