"""Blob upgrade orchestrator — the central coordinator for one upgrade run.

For every dependency, strictly one after another:

1. Version Resolver picks the latest upstream version.
2. Change Detector takes the marker fast path, or has the Artifact Locator
   find the download and the Content Fetcher fetch it, then classifies
   every bundled blob of the package.
3. Manifest Mutator replaces changed blobs; the version marker is written
   once that has succeeded.

After all dependencies, a single upload commits the blob changes, but only
if the manifest actually shows a modification. Any error aborts the run.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from blobwright.config import UpgraderSettings, load_settings
from blobwright.core.artifact_locator import ArtifactLocator
from blobwright.core.blob_store import BlobStore, BoshBlobStore
from blobwright.core.change_detector import ArtifactFetcher, ChangeDetector
from blobwright.core.fetcher import ContentFetcher
from blobwright.core.manifest_mutator import ManifestMutator
from blobwright.core.release_config import find_resource, load_blob_manifest, load_resources
from blobwright.core.sources import (
    ArtifactSource,
    ScriptArtifactSource,
    ScriptRunner,
    ScriptVersionSource,
    VersionSource,
)
from blobwright.core.vcs import GitWorkingTree, WorkingTree
from blobwright.core.version_marker import VersionMarkerStore
from blobwright.core.version_resolver import resolve_latest
from blobwright.models.blobs import BlobManifest
from blobwright.models.outcomes import DependencyOutcome, RunReport, RunStatus
from blobwright.models.release import ReleaseLayout
from blobwright.models.resources import ResourceDescriptor
from blobwright.models.versioning import ResolvedVersion

logger = logging.getLogger(__name__)

VersionSourceFactory = Callable[[ResourceDescriptor], VersionSource]
ArtifactSourceFactory = Callable[[ResourceDescriptor], ArtifactSource]


class BlobUpgrader:
    """Upgrades the bundled blobs of one release directory.

    Every collaborator can be injected. By default the dependency scripts
    run through ``bash`` and blobs are managed with the ``bosh`` CLI.

    Parameters
    ----------
    release_dir:
        Root of the release (contains ``config/blobs.yml``).
    settings:
        Runtime settings. Loaded from the environment if not provided.
    """

    def __init__(
        self,
        release_dir: Path,
        settings: UpgraderSettings | None = None,
        *,
        version_sources: VersionSourceFactory | None = None,
        artifact_sources: ArtifactSourceFactory | None = None,
        fetcher: ArtifactFetcher | None = None,
        blob_store: BlobStore | None = None,
        working_tree: WorkingTree | None = None,
        markers: VersionMarkerStore | None = None,
    ) -> None:
        self.settings = settings or load_settings()
        self.layout = ReleaseLayout(root=Path(release_dir))

        runner = ScriptRunner(
            shell=self.settings.shell,
            timeout_seconds=self.settings.script_timeout_seconds,
        )
        self._version_sources = version_sources or (lambda d: ScriptVersionSource(d, runner))
        self._artifact_sources = artifact_sources or (lambda d: ScriptArtifactSource(d, runner))

        self.markers = markers or VersionMarkerStore(self.settings.marker_filename)
        self.detector = ChangeDetector(
            fetcher
            or ContentFetcher(
                timeout_seconds=self.settings.download_timeout_seconds,
                algorithm=self.settings.digest_algorithm,
                chunk_size=self.settings.chunk_size,
            ),
            self.markers,
        )
        self._blob_store = blob_store
        self._working_tree = working_tree or GitWorkingTree(
            self.layout.root, timeout_seconds=self.settings.tool_timeout_seconds
        )
        self._mutator: ManifestMutator | None = None

    # ------------------------------------------------------------------
    # Collaborators
    # ------------------------------------------------------------------

    @property
    def mutator(self) -> ManifestMutator:
        """The manifest mutator, created on first use.

        Building it resolves the ``bosh`` binary, which read-only commands
        never need.
        """
        if self._mutator is None:
            store = self._blob_store or BoshBlobStore(
                self.settings.blob_store_config(), self.layout.root
            )
            self._mutator = ManifestMutator(store, self.layout, self._working_tree)
        return self._mutator

    def descriptors(self) -> list[ResourceDescriptor]:
        return load_resources(self.layout)

    def manifest(self) -> BlobManifest:
        return load_blob_manifest(self.layout)

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def resolve(self, descriptor: ResourceDescriptor) -> ResolvedVersion:
        """Run the version check for ``descriptor`` and pick the latest version."""
        candidates = self._version_sources(descriptor).check()
        latest = resolve_latest(candidates)
        logger.info("%s: latest upstream version is %s", descriptor.package_name, latest)
        return latest

    def resolve_package(self, package_name: str) -> ResolvedVersion:
        return self.resolve(find_resource(self.layout, package_name))

    def process(
        self,
        descriptor: ResourceDescriptor,
        manifest: BlobManifest,
        *,
        dry_run: bool = False,
    ) -> DependencyOutcome:
        """Run the full pipeline for one dependency."""
        version = str(self.resolve(descriptor))
        previous_marker = self.markers.read(descriptor)

        locator = ArtifactLocator(self._artifact_sources(descriptor))
        detection = self.detector.detect(
            descriptor,
            version,
            locator,
            manifest.for_package(descriptor.package_name),
        )
        if detection.fast_path:
            return DependencyOutcome(
                package_name=descriptor.package_name,
                resolved_version=version,
                previous_marker=previous_marker,
                fast_path=True,
            )

        mutated = False
        marker_written = False
        if dry_run:
            logger.info(
                "%s: dry run, %d blob(s) would be replaced",
                descriptor.package_name,
                len(detection.changed),
            )
        else:
            mutated = self.mutator.apply(detection)
            self.markers.write(descriptor, version)
            marker_written = True

        return DependencyOutcome(
            package_name=descriptor.package_name,
            resolved_version=version,
            previous_marker=previous_marker,
            changes=detection.changes,
            mutated=mutated,
            marker_written=marker_written,
        )

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def run(self, *, dry_run: bool = False, upload: bool | None = None) -> RunReport:
        """Process every dependency, then upload if the manifest changed.

        ``upload`` defaults to the ``upload`` setting.
        """
        upload = self.settings.upload if upload is None else upload
        manifest = self.manifest()
        descriptors = self.descriptors()
        logger.info(
            "Checking %d dependencies against %d bundled blobs",
            len(descriptors),
            len(manifest.records),
        )

        outcomes = [self.process(d, manifest, dry_run=dry_run) for d in descriptors]

        if dry_run:
            would_change = any(o.changed_records for o in outcomes)
            return RunReport(
                status=RunStatus.UPDATED if would_change else RunStatus.NOOP,
                outcomes=outcomes,
                dry_run=True,
            )

        if not any(o.mutated for o in outcomes) or not self.mutator.manifest_changed():
            logger.info("Nothing changed, no upload needed")
            return RunReport(status=RunStatus.NOOP, outcomes=outcomes)

        uploaded = False
        if upload:
            self.mutator.upload()
            uploaded = True
        else:
            logger.info("Upload disabled, blob changes are staged only")
        return RunReport(status=RunStatus.UPDATED, outcomes=outcomes, uploaded=uploaded)
