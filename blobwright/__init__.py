"""Blobwright: keeps a release's bundled third-party blobs up to date.

For each dependency under ``config/blobs/<package>/resource.yml``:
  - resolve the latest upstream version from its version-check script
  - skip it outright when its version marker already matches
  - locate a single-file, single-URL metalink for that version
  - download it and compare digests against ``config/blobs.yml``
  - replace changed blobs through the ``bosh`` CLI, then upload once
"""

__version__ = "0.2.0"
__description__ = "Keeps a release's bundled third-party blobs in step with their upstream sources"

from blobwright.core.orchestrator import BlobUpgrader
from blobwright.cli.app import app as cli

__all__ = ["BlobUpgrader", "cli", "__version__"]
