"""``blobwright upgrade [RELEASE_DIR]`` — bring every tracked blob up to date.

Runs the full pipeline for each dependency and uploads once at the end if
the manifest changed. A run that changes nothing exits with the no-op exit
code (0 unless configured).
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


def upgrade_cmd(
    release_dir: Path = typer.Argument(
        Path("."),
        help="Release directory containing config/blobs.yml.",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "-n",
        help="Fetch and classify, but do not touch the manifest, markers or blob store.",
    ),
    upload: bool = typer.Option(
        True,
        "--upload/--no-upload",
        help="Upload changed blobs at the end of the run.",
    ),
    noop_exit_code: Optional[int] = typer.Option(
        None,
        "--noop-exit-code",
        help="Exit code when nothing changed (default: BLOBWRIGHT_NOOP_EXIT_CODE or 0).",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Log level (default: BLOBWRIGHT_LOG_LEVEL or INFO).",
    ),
) -> None:
    """Upgrade the bundled blobs of a release to their latest upstream versions."""
    renderer = ReportRenderer(console=console)

    try:
        settings = load_settings()
        configure_logging(log_level or settings.log_level)
        upgrader = BlobUpgrader(release_dir, settings)
        report = upgrader.run(dry_run=dry_run, upload=upload and settings.upload)
    except BlobUpgradeError as exc:
        renderer.print_error(exc)
        raise typer.Exit(code=1)

    renderer.print_report(report)
    if report.is_noop:
        raise typer.Exit(code=settings.noop_exit_code if noop_exit_code is None else noop_exit_code)
