"""Loading a release's blob manifest and per-dependency resource configs."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from blobwright.core.errors import ConfigurationError
from blobwright.models.blobs import BlobManifest
from blobwright.models.release import ReleaseLayout
from blobwright.models.resources import ResourceConfig, ResourceDescriptor

logger = logging.getLogger(__name__)


def _read_yaml(path: Path) -> Any:
    try:
        with path.open("r", encoding="utf-8") as fh:
            return yaml.safe_load(fh)
    except FileNotFoundError as exc:
        raise ConfigurationError(f"{path} does not exist") from exc
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"cannot read {path}: {exc}") from exc


def load_blob_manifest(layout: ReleaseLayout) -> BlobManifest:
    """Load ``config/blobs.yml``. An empty file is an empty manifest."""
    data = _read_yaml(layout.blobs_manifest)
    if data is None:
        return BlobManifest()
    if not isinstance(data, dict) or not all(isinstance(v, dict) for v in data.values()):
        raise ConfigurationError(
            f"{layout.blobs_manifest} must map blob paths to {{object_id, size, sha}}"
        )
    try:
        return BlobManifest.from_mapping(data)
    except ValidationError as exc:
        raise ConfigurationError(f"malformed entry in {layout.blobs_manifest}: {exc}") from exc


def load_resource(path: Path) -> ResourceDescriptor:
    """Load one ``config/blobs/<package>/resource.yml``."""
    data = _read_yaml(path)
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must be a mapping with a 'source' block")
    try:
        config = ResourceConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(f"malformed dependency descriptor {path}: {exc}") from exc
    return ResourceDescriptor.from_config(path.parent, config)


def load_resources(layout: ReleaseLayout) -> list[ResourceDescriptor]:
    """Load every dependency descriptor, ordered by package name."""
    descriptors = [load_resource(path) for path in layout.resource_files()]
    logger.debug("Loaded %d dependency descriptors", len(descriptors))
    return descriptors


def find_resource(layout: ReleaseLayout, package_name: str) -> ResourceDescriptor:
    path = layout.resources_dir / package_name / "resource.yml"
    if not path.is_file():
        raise ConfigurationError(f"no resource.yml for package {package_name!r} at {path}")
    return load_resource(path)
