"""Blobwright data models — all Pydantic v2, all frozen (immutable)."""

from blobwright.models.artifacts import (
    ArtifactDescriptor,
    ArtifactFile,
    ArtifactHash,
    ArtifactUrl,
    FetchedArtifact,
)
from blobwright.models.blobs import BlobManifest, BlobRecord, package_name_of
from blobwright.models.outcomes import (
    BlobChange,
    ChangeKind,
    Detection,
    DependencyOutcome,
    RunReport,
    RunStatus,
)
from blobwright.models.release import BlobStoreConfig, ReleaseLayout
from blobwright.models.resources import ResourceConfig, ResourceDescriptor, ResourceSource
from blobwright.models.versioning import InvalidVersionError, ResolvedVersion

__all__ = [
    # versioning
    "ResolvedVersion",
    "InvalidVersionError",
    # resources
    "ResourceConfig",
    "ResourceSource",
    "ResourceDescriptor",
    # blobs
    "BlobRecord",
    "BlobManifest",
    "package_name_of",
    # artifacts
    "ArtifactUrl",
    "ArtifactHash",
    "ArtifactFile",
    "ArtifactDescriptor",
    "FetchedArtifact",
    # outcomes
    "ChangeKind",
    "BlobChange",
    "Detection",
    "DependencyOutcome",
    "RunStatus",
    "RunReport",
    # release
    "ReleaseLayout",
    "BlobStoreConfig",
]
