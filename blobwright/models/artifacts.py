"""Metalink-style artifact descriptions and fetched-artifact metadata."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict


class ArtifactUrl(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    priority: int | None = None
    location: str | None = None


class ArtifactHash(BaseModel):
    """A declared content hash, e.g. ``type="sha-256"``."""

    model_config = ConfigDict(frozen=True)

    type: str
    hash: str

    @property
    def algorithm(self) -> str:
        """Hash type in :mod:`hashlib` spelling (``sha-256`` -> ``sha256``)."""
        return self.type.replace("-", "").lower()


class ArtifactFile(BaseModel):
    """One ``<file>`` entry of a metalink."""

    model_config = ConfigDict(frozen=True)

    name: str
    urls: list[ArtifactUrl] = []
    size: int | None = None
    version: str | None = None
    hashes: list[ArtifactHash] = []

    @property
    def url(self) -> str:
        """The single download URL. Only valid once the shape was checked."""
        return self.urls[0].url

    def declared_hash(self, algorithm: str) -> str | None:
        for declared in self.hashes:
            if declared.algorithm == algorithm:
                return declared.hash.lower()
        return None


class ArtifactDescriptor(BaseModel):
    """A parsed metalink. Locators only hand out single-file, single-URL ones."""

    model_config = ConfigDict(frozen=True)

    files: list[ArtifactFile] = []

    @property
    def file(self) -> ArtifactFile:
        return self.files[0]


class FetchedArtifact(BaseModel):
    """An artifact persisted on local disk, with the digest of the written bytes."""

    model_config = ConfigDict(frozen=True)

    local_path: Path
    url: str
    digest: str  # "<algorithm>:<hex>"
    size: int

    @property
    def file_name(self) -> str:
        return self.local_path.name
