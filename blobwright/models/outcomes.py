"""Classification and run-report models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from blobwright.models.artifacts import FetchedArtifact
from blobwright.models.blobs import BlobRecord


class ChangeKind(str, Enum):
    UNCHANGED = "unchanged"
    CHANGED = "changed"


class RunStatus(str, Enum):
    """Overall outcome of an upgrade run.

    ``NOOP`` is a successful run that left the manifest untouched; it is not
    a failure.
    """

    UPDATED = "updated"
    NOOP = "noop"


class BlobChange(BaseModel):
    """Classification of one existing BlobRecord against a fetched artifact.

    ``new`` is only set for ``CHANGED`` pairings.
    """

    model_config = ConfigDict(frozen=True)

    old: BlobRecord
    kind: ChangeKind
    new: BlobRecord | None = None

    @property
    def changed(self) -> bool:
        return self.kind is ChangeKind.CHANGED


class DependencyOutcome(BaseModel):
    """What happened to one dependency during a run."""

    model_config = ConfigDict(frozen=True)

    package_name: str
    resolved_version: str
    previous_marker: str | None = None
    fast_path: bool = False
    changes: list[BlobChange] = []
    mutated: bool = False
    marker_written: bool = False

    @property
    def kind(self) -> ChangeKind:
        if any(change.changed for change in self.changes):
            return ChangeKind.CHANGED
        return ChangeKind.UNCHANGED

    @property
    def changed_records(self) -> list[BlobChange]:
        return [change for change in self.changes if change.changed]


class RunReport(BaseModel):
    """Summary of a whole run, consumed by the CLI."""

    model_config = ConfigDict(frozen=True)

    status: RunStatus
    outcomes: list[DependencyOutcome] = []
    uploaded: bool = False
    dry_run: bool = False

    @property
    def is_noop(self) -> bool:
        return self.status is RunStatus.NOOP

    @property
    def mutation_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.mutated)


class Detection(BaseModel):
    """Change Detector verdict for one dependency.

    ``fetched`` is None on the marker fast path and for packages with no
    bundled blobs, since nothing was downloaded.
    """

    model_config = ConfigDict(frozen=True)

    package_name: str
    version: str
    fast_path: bool = False
    fetched: FetchedArtifact | None = None
    changes: list[BlobChange] = []

    @property
    def changed(self) -> list[BlobChange]:
        return [change for change in self.changes if change.changed]
