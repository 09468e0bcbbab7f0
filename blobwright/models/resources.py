"""Per-dependency resource descriptors loaded from ``resource.yml``."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class ResourceSource(BaseModel):
    """The ``source:`` block of a ``resource.yml`` file."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    version_check: str = Field(min_length=1)
    metalink_get: str = Field(min_length=1)
    version: str | None = None


class ResourceVersion(BaseModel):
    """The optional top-level ``version:`` block (older layout)."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    version: str | None = None


class ResourceConfig(BaseModel):
    """Raw shape of a ``resource.yml`` file."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    source: ResourceSource
    version: ResourceVersion = ResourceVersion()


class ResourceDescriptor(BaseModel):
    """One tracked dependency, immutable for the lifetime of a run.

    ``package_name`` is the name of the dependency's directory under
    ``config/blobs/``; it matches the first path segment of the manifest
    entries the dependency owns.
    """

    model_config = ConfigDict(frozen=True)

    package_name: str
    resource_dir: Path
    version_check_command: str
    artifact_locate_command: str
    recorded_version: str | None = None

    @classmethod
    def from_config(cls, resource_dir: Path, config: ResourceConfig) -> ResourceDescriptor:
        return cls(
            package_name=resource_dir.name,
            resource_dir=resource_dir,
            version_check_command=config.source.version_check,
            artifact_locate_command=config.source.metalink_get,
            recorded_version=config.source.version or config.version.version,
        )
