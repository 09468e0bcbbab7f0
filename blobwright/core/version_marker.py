"""Version markers — the last fully processed version of each dependency.

One plain text file per dependency, holding the version string verbatim
(no trailing newline, no trimming on read). Writes go through a temp file
and an atomic rename so an interrupted write never leaves half a marker.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from blobwright.core.errors import ConfigurationError, LocalWriteError
from blobwright.models.resources import ResourceDescriptor

logger = logging.getLogger(__name__)


class VersionMarkerStore:
    """Reads and writes per-dependency version markers.

    Parameters
    ----------
    filename:
        Marker file name inside each dependency's config directory.
    """

    def __init__(self, filename: str = "last_version") -> None:
        self._filename = filename

    def path_for(self, descriptor: ResourceDescriptor) -> Path:
        return descriptor.resource_dir / self._filename

    def read(self, descriptor: ResourceDescriptor) -> str | None:
        """Return the stored marker, or None if the dependency has none yet."""
        path = self.path_for(descriptor)
        try:
            with path.open("r", encoding="utf-8", newline="") as fh:
                return fh.read()
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as exc:
            raise ConfigurationError(f"version marker {path} is not UTF-8 text") from exc
        except OSError as exc:
            raise LocalWriteError(f"cannot read version marker {path}: {exc}") from exc

    def write(self, descriptor: ResourceDescriptor, version: str) -> None:
        path = self.path_for(descriptor)
        tmp = path.with_name(f".{path.name}.tmp")
        try:
            with tmp.open("w", encoding="utf-8", newline="") as fh:
                fh.write(version)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp, path)
        except OSError as exc:
            raise LocalWriteError(f"cannot write version marker {path}: {exc}") from exc
        logger.debug("Marker for %s set to %s", descriptor.package_name, version)

    def matches(self, descriptor: ResourceDescriptor, version: str) -> bool:
        return self.read(descriptor) == version
