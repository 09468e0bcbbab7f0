"""Blob manifest models — one BlobRecord per ``config/blobs.yml`` entry."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def package_name_of(path: str) -> str:
    """Return the first path segment of a manifest key."""
    return path.strip().split("/", 1)[0]


class BlobRecord(BaseModel):
    """A blob registered in the release manifest.

    ``digest`` is algorithm-prefixed (``sha256:<hex>``). Legacy manifests
    store a bare sha1 hex digest; see :func:`blobwright.core.hasher.split_digest`.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    path: str
    digest: str = Field(alias="sha")
    object_id: str | None = None
    size: int = 0

    @property
    def package_name(self) -> str:
        return package_name_of(self.path)

    @property
    def file_name(self) -> str:
        return self.path.rsplit("/", 1)[-1]


class BlobManifest(BaseModel):
    """All BlobRecords of a release, keyed by manifest path."""

    model_config = ConfigDict(frozen=True)

    records: dict[str, BlobRecord] = {}

    @classmethod
    def from_mapping(cls, data: Mapping[str, Mapping[str, Any]]) -> BlobManifest:
        records: dict[str, BlobRecord] = {}
        for key, entry in data.items():
            path = str(key).strip()
            records[path] = BlobRecord(path=path, **dict(entry))
        return cls(records=records)

    def for_package(self, package_name: str) -> list[BlobRecord]:
        """Every record whose first path segment is ``package_name``."""
        return [
            record
            for path, record in sorted(self.records.items())
            if record.package_name == package_name
        ]

    @property
    def package_names(self) -> set[str]:
        return {record.package_name for record in self.records.values()}
