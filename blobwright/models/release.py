"""Release directory layout and blob-store client configuration."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict


class ReleaseLayout(BaseModel):
    """Well-known paths inside a release directory."""

    model_config = ConfigDict(frozen=True)

    root: Path

    @property
    def config_dir(self) -> Path:
        return self.root / "config"

    @property
    def blobs_manifest(self) -> Path:
        return self.config_dir / "blobs.yml"

    @property
    def resources_dir(self) -> Path:
        return self.config_dir / "blobs"

    @property
    def private_config(self) -> Path:
        """Blob-store credentials, required before uploading."""
        return self.config_dir / "private.yml"

    def resource_files(self) -> list[Path]:
        return sorted(self.resources_dir.glob("*/resource.yml"))

    def relative(self, path: Path) -> str:
        return path.relative_to(self.root).as_posix()


class BlobStoreConfig(BaseModel):
    """Explicit configuration handed to the blob-store client.

    Replaces ambient environment variables such as ``BOSH_NON_INTERACTIVE``.
    """

    model_config = ConfigDict(frozen=True)

    binary: Path
    non_interactive: bool = True
    timeout_seconds: float = 1800.0
