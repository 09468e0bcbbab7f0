"""Artifact Locator — turns a resolved version into exactly one download.

Metalink output is accepted as Metalink 4 XML (RFC 5854) or as JSON of the
same shape. Multi-file and multi-URL metalinks are rejected outright: they
are unsupported configurations, not something to fall back from.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET

from pydantic import ValidationError

from blobwright.core.errors import (
    ArtifactDescriptorParseError,
    UnsupportedArtifactShapeError,
)
from blobwright.core.sources import ArtifactSource
from blobwright.models.artifacts import (
    ArtifactDescriptor,
    ArtifactFile,
    ArtifactHash,
    ArtifactUrl,
)

logger = logging.getLogger(__name__)


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _children(element: ET.Element, name: str) -> list[ET.Element]:
    return [child for child in element if _local_name(child.tag) == name]


def _child_text(element: ET.Element, name: str) -> str | None:
    found = _children(element, name)
    if not found or found[0].text is None:
        return None
    return found[0].text.strip()


def _parse_xml(text: str) -> ArtifactDescriptor:
    try:
        root = ET.fromstring(text)
    except ET.ParseError as exc:
        raise ArtifactDescriptorParseError(f"invalid metalink XML: {exc}") from exc
    if _local_name(root.tag) != "metalink":
        raise ArtifactDescriptorParseError(
            f"expected a <metalink> document, got <{_local_name(root.tag)}>"
        )

    files: list[ArtifactFile] = []
    try:
        for file_el in _children(root, "file"):
            size = _child_text(file_el, "size")
            files.append(
                ArtifactFile(
                    name=file_el.get("name", ""),
                    urls=[
                        ArtifactUrl(
                            url=(url_el.text or "").strip(),
                            priority=url_el.get("priority"),
                            location=url_el.get("location"),
                        )
                        for url_el in _children(file_el, "url")
                    ],
                    size=int(size) if size else None,
                    version=_child_text(file_el, "version"),
                    hashes=[
                        ArtifactHash(type=hash_el.get("type", ""), hash=(hash_el.text or "").strip())
                        for hash_el in _children(file_el, "hash")
                    ],
                )
            )
    except (ValueError, ValidationError) as exc:
        raise ArtifactDescriptorParseError(f"malformed metalink <file> entry: {exc}") from exc
    return ArtifactDescriptor(files=files)


def _parse_json(text: str) -> ArtifactDescriptor:
    try:
        return ArtifactDescriptor.model_validate_json(text)
    except ValidationError as exc:
        raise ArtifactDescriptorParseError(f"invalid metalink JSON: {exc}") from exc


def parse_metalink(text: str) -> ArtifactDescriptor:
    """Parse metalink output (XML or JSON) into an ArtifactDescriptor.

    Raises ``ArtifactDescriptorParseError`` for anything unrecognizable.
    """
    stripped = text.strip()
    if not stripped:
        raise ArtifactDescriptorParseError("metalink output is empty")
    if stripped.startswith("<"):
        return _parse_xml(stripped)
    return _parse_json(stripped)


def require_single_file(descriptor: ArtifactDescriptor) -> ArtifactFile:
    """Enforce the one-file, one-URL shape and return that file."""
    if len(descriptor.files) > 1:
        raise UnsupportedArtifactShapeError(
            f"multiple files: metalink lists {len(descriptor.files)} files, exactly one is supported"
        )
    if not descriptor.files:
        raise UnsupportedArtifactShapeError("metalink lists no files, exactly one is supported")

    file = descriptor.file
    if file.name in ("", ".", "..") or "/" in file.name:
        raise UnsupportedArtifactShapeError(f"metalink file name {file.name!r} is not a plain file name")
    if len(file.urls) > 1:
        raise UnsupportedArtifactShapeError(
            f"multiple urls: {file.name} lists {len(file.urls)} URLs, exactly one is supported"
        )
    if not file.urls or not file.urls[0].url:
        raise UnsupportedArtifactShapeError(f"{file.name} lists no URL, exactly one is supported")
    return file


class ArtifactLocator:
    """Runs the locate operation for a version and validates its answer.

    Errors from the underlying source propagate unchanged.
    """

    def __init__(self, source: ArtifactSource) -> None:
        self._source = source

    def locate(self, version: str) -> ArtifactFile:
        output = self._source.locate(version)
        file = require_single_file(parse_metalink(output))
        logger.debug("Located %s for version %s at %s", file.name, version, file.url)
        return file
