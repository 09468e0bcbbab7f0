"""``blobwright status [RELEASE_DIR]`` — list tracked dependencies.

Read-only: shows each dependency's recorded version, its version marker and
the blobs it owns in the manifest, then any bundled packages that have no
``resource.yml``. Runs no scripts and needs no ``bosh``.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from blobwright.config import load_settings
from blobwright.core.errors import BlobUpgradeError
from blobwright.core.orchestrator import BlobUpgrader
from blobwright.report.renderer import ReportRenderer

console = Console()


def status_cmd(
    release_dir: Path = typer.Argument(
        Path("."),
        help="Release directory containing config/blobs.yml.",
    ),
) -> None:
    """Show tracked dependencies, their markers and bundled blobs."""
    renderer = ReportRenderer(console=console)
    try:
        upgrader = BlobUpgrader(release_dir, load_settings())
        descriptors = upgrader.descriptors()
        manifest = upgrader.manifest()
        markers = {d.package_name: upgrader.markers.read(d) for d in descriptors}
    except BlobUpgradeError as exc:
        renderer.print_error(exc)
        raise typer.Exit(code=1)

    if descriptors:
        console.print(renderer.render_status(descriptors, manifest, markers))
    else:
        console.print(f"[dim]No dependencies under {upgrader.layout.resources_dir}.[/dim]")

    untracked = sorted(manifest.package_names - {d.package_name for d in descriptors})
    if untracked:
        console.print(f"[yellow]Bundled but not tracked:[/yellow] {escape(', '.join(untracked))}")
