"""Content digests for fetched artifacts and manifest records.

Digest strings are ``"<algorithm>:<hex>"``. Manifests written by older blob
stores carry a bare 40-character sha1 hex digest, treated as ``sha1:<hex>``.
"""

from __future__ import annotations

import hashlib
from pathlib import Path

from blobwright.core.errors import ConfigurationError

_CHUNK_SIZE = 1024 * 1024
_LEGACY_ALGORITHM = "sha1"


def format_digest(algorithm: str, hex_digest: str) -> str:
    return f"{algorithm}:{hex_digest.lower()}"


def split_digest(digest: str) -> tuple[str, str]:
    """Split a digest string into ``(algorithm, hex)``."""
    algorithm, sep, hex_digest = digest.strip().partition(":")
    if not sep:
        return _LEGACY_ALGORITHM, algorithm.lower()
    return algorithm.lower(), hex_digest.lower()


def require_algorithm(algorithm: str) -> str:
    """Return ``algorithm`` if hashlib provides it, else raise ``ConfigurationError``."""
    if algorithm.lower() not in hashlib.algorithms_available:
        raise ConfigurationError(f"unsupported digest algorithm {algorithm!r}")
    return algorithm.lower()


def file_digest(path: Path, algorithm: str = "sha256", chunk_size: int = _CHUNK_SIZE) -> str:
    """Stream a file from disk through ``algorithm`` and return the digest string.

    Raises ``OSError`` if the file cannot be read and ``ConfigurationError``
    for an algorithm hashlib does not provide.
    """
    try:
        h = hashlib.new(algorithm)
    except ValueError as exc:
        raise ConfigurationError(f"unsupported digest algorithm {algorithm!r}") from exc
    with Path(path).open("rb") as fh:
        for chunk in iter(lambda: fh.read(chunk_size), b""):
            h.update(chunk)
    return format_digest(algorithm, h.hexdigest())


def digest_matches(recorded: str, local_path: Path, local_digest: str) -> bool:
    """Whether the file at ``local_path`` has the content ``recorded`` describes.

    ``local_digest`` is the already-computed digest of ``local_path``; the file
    is only re-hashed when ``recorded`` uses another algorithm.
    """
    recorded_algorithm, recorded_hex = split_digest(recorded)
    local_algorithm, local_hex = split_digest(local_digest)
    if recorded_algorithm == local_algorithm:
        return recorded_hex == local_hex
    return split_digest(file_digest(local_path, recorded_algorithm))[1] == recorded_hex
