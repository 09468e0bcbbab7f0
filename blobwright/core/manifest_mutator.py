"""Manifest Mutator — applies changed pairings and commits them with one upload.

For each changed pairing the old blob is removed and the fetched file is
added under ``<package>/<file name>``, as two sequential blob-store calls. A
failed add after a successful remove leaves the release partially mutated;
that is surfaced as ``PartialMutationError`` and never retried.
"""

from __future__ import annotations

import logging

from blobwright.core.blob_store import BlobStore
from blobwright.core.errors import ExternalToolError, PartialMutationError, PreconditionError
from blobwright.core.vcs import WorkingTree
from blobwright.models.outcomes import Detection
from blobwright.models.release import ReleaseLayout

logger = logging.getLogger(__name__)


class ManifestMutator:
    """Issues remove/add/upload calls against the blob store.

    Parameters
    ----------
    store:
        Blob-store client for the release.
    layout:
        Release layout, used for the manifest and credentials paths.
    working_tree:
        Reports whether the manifest file actually changed.
    """

    def __init__(self, store: BlobStore, layout: ReleaseLayout, working_tree: WorkingTree) -> None:
        self._store = store
        self._layout = layout
        self._working_tree = working_tree

    def apply(self, detection: Detection) -> bool:
        """Replace every changed blob of ``detection``. Returns True if anything changed."""
        changed = detection.changed
        if not changed:
            return False
        if detection.fetched is None:
            raise ValueError(f"{detection.package_name}: changed blobs without a fetched artifact")

        added: set[str] = set()
        for change in changed:
            if change.new is None:
                raise ValueError(f"{change.old.path}: changed blob without a replacement")
            if change.old.path in added:
                # Already overwritten by an earlier add of this run.
                continue
            logger.info(
                "Upgrading blob: %s (%s) --> %s (%s)",
                change.old.path,
                change.old.digest,
                change.new.path,
                change.new.digest,
            )
            self._store.remove(change.old.path)
            if change.new.path in added:
                continue
            try:
                self._store.add(detection.fetched.local_path, change.new.path)
            except ExternalToolError as exc:
                raise PartialMutationError(
                    f"{change.old.path} was removed but adding {change.new.path} failed; "
                    "the release is partially mutated"
                ) from exc
            added.add(change.new.path)
        return True

    def manifest_changed(self) -> bool:
        return self._working_tree.has_changes(self._layout.relative(self._layout.blobs_manifest))

    def upload(self) -> None:
        """Commit the accumulated blob changes with a single upload."""
        if not self._layout.private_config.is_file():
            raise PreconditionError(
                f"blob-store credentials {self._layout.private_config} are missing; "
                "cannot upload blobs"
            )
        logger.info("Uploading blobs")
        self._store.upload()
