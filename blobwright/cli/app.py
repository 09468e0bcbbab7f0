"""Main Typer application — imports and registers all CLI commands.

Entry point: ``blobwright`` (configured via pyproject.toml scripts).
"""

from __future__ import annotations

import typer

from blobwright.cli.commands.resolve import resolve_cmd
from blobwright.cli.commands.status import status_cmd
from blobwright.cli.commands.upgrade import upgrade_cmd

app = typer.Typer(
    name="blobwright",
    help="Blobwright: keep a release's bundled blobs in step with upstream.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Register subcommands
app.command(name="upgrade", help="Upgrade bundled blobs to their latest upstream versions.")(upgrade_cmd)
app.command(name="status", help="List tracked dependencies and their markers.")(status_cmd)
app.command(name="resolve", help="Print the latest upstream version of one dependency.")(resolve_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
