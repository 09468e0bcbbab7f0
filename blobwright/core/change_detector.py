"""Change Detector — decides, per dependency, whether blobs must be replaced.

Fast path: the dependency's version marker already equals the resolved
version, so nothing is located or downloaded at all.

Slow path: the artifact is located and fetched once, then every BlobRecord
of the package is compared against the freshly computed digest. A record
with the same content is unchanged; any other record is paired with the new
``<package>/<file name>`` record as changed. Digests recorded in the manifest
are never trusted on their own.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from blobwright.core.artifact_locator import ArtifactLocator
from blobwright.core.hasher import digest_matches
from blobwright.core.version_marker import VersionMarkerStore
from blobwright.models.artifacts import ArtifactFile, FetchedArtifact
from blobwright.models.blobs import BlobRecord
from blobwright.models.outcomes import BlobChange, ChangeKind, Detection
from blobwright.models.resources import ResourceDescriptor

logger = logging.getLogger(__name__)


class ArtifactFetcher(Protocol):
    def fetch_file(self, file: ArtifactFile, directory: Path) -> FetchedArtifact: ...


class ChangeDetector:
    """Classifies a dependency's bundled blobs as unchanged or changed.

    Parameters
    ----------
    fetcher:
        Downloads located artifacts; only used on the slow path.
    markers:
        Version marker storage consulted for the fast path.
    """

    def __init__(self, fetcher: ArtifactFetcher, markers: VersionMarkerStore) -> None:
        self._fetcher = fetcher
        self._markers = markers

    def fast_path(self, descriptor: ResourceDescriptor, version: str) -> Detection | None:
        """Return an unchanged verdict if the marker already equals ``version``."""
        if not self._markers.matches(descriptor, version):
            return None
        logger.info(
            "%s: version %s already processed, skipping",
            descriptor.package_name,
            version,
        )
        return Detection(package_name=descriptor.package_name, version=version, fast_path=True)

    def classify(
        self,
        descriptor: ResourceDescriptor,
        version: str,
        file: ArtifactFile,
        records: list[BlobRecord],
    ) -> Detection:
        """Fetch ``file`` and compare it against each of ``records``."""
        package = descriptor.package_name
        if not records:
            logger.warning("%s: no bundled blobs in the manifest, nothing to replace", package)
            return Detection(package_name=package, version=version)

        fetched = self._fetcher.fetch_file(file, descriptor.resource_dir)
        new_record = BlobRecord(
            path=f"{package}/{fetched.file_name}",
            digest=fetched.digest,
            size=fetched.size,
        )

        changes: list[BlobChange] = []
        for record in records:
            logger.debug("%s: comparing %s (%s)", package, record.path, record.digest)
            if digest_matches(record.digest, fetched.local_path, fetched.digest):
                changes.append(BlobChange(old=record, kind=ChangeKind.UNCHANGED))
            else:
                logger.info(
                    "%s: %s (%s) --> %s (%s)",
                    package,
                    record.path,
                    record.digest,
                    new_record.path,
                    new_record.digest,
                )
                changes.append(BlobChange(old=record, kind=ChangeKind.CHANGED, new=new_record))

        return Detection(package_name=package, version=version, fetched=fetched, changes=changes)

    def detect(
        self,
        descriptor: ResourceDescriptor,
        version: str,
        locator: ArtifactLocator,
        records: list[BlobRecord],
    ) -> Detection:
        """Fast path if possible, otherwise locate, fetch and classify."""
        detection = self.fast_path(descriptor, version)
        if detection is not None:
            return detection
        return self.classify(descriptor, version, locator.locate(version), records)
