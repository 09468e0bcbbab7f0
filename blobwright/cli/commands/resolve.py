"""``blobwright resolve RELEASE_DIR PACKAGE`` — print the latest upstream version.

Runs only the dependency's version check; nothing is downloaded or changed.
The version is printed plainly for scripting.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from blobwright.cli.log_setup import configure_logging
from blobwright.config import load_settings
from blobwright.core.errors import BlobUpgradeError
from blobwright.core.orchestrator import BlobUpgrader
from blobwright.report.renderer import ReportRenderer

console = Console()


def resolve_cmd(
    release_dir: Path = typer.Argument(
        ...,
        help="Release directory containing config/blobs.yml.",
    ),
    package: str = typer.Argument(
        ...,
        help="Package name (directory under config/blobs/).",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Log level (default: BLOBWRIGHT_LOG_LEVEL or INFO).",
    ),
) -> None:
    """Resolve the latest upstream version of one dependency."""
    try:
        settings = load_settings()
        configure_logging(log_level or settings.log_level)
        version = BlobUpgrader(release_dir, settings).resolve_package(package)
    except BlobUpgradeError as exc:
        ReportRenderer(console=console).print_error(exc)
        raise typer.Exit(code=1)
    console.print(str(version), highlight=False)
