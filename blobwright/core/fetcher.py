"""Content Fetcher — downloads an artifact and digests the bytes on disk.

The digest is computed by re-reading the written file, not from the network
buffer, so a bad write shows up in the digest. A download that fails part
way is deleted and reported as an error, never as a truncated artifact.
"""

from __future__ import annotations

import logging
from pathlib import Path

import requests

from blobwright.core.errors import DownloadError, LocalWriteError
from blobwright.core.hasher import file_digest, require_algorithm, split_digest
from blobwright.models.artifacts import ArtifactFile, FetchedArtifact

logger = logging.getLogger(__name__)


class ContentFetcher:
    """Streams HTTP(S) downloads to local files.

    Parameters
    ----------
    session:
        ``requests.Session`` to download with. A fresh one by default.
    timeout_seconds:
        Connect and read timeout for each request.
    algorithm:
        :mod:`hashlib` algorithm used for the returned digest.
    """

    def __init__(
        self,
        session: requests.Session | None = None,
        *,
        timeout_seconds: float = 300.0,
        algorithm: str = "sha256",
        chunk_size: int = 1024 * 1024,
    ) -> None:
        self._session = session or requests.Session()
        self._timeout = timeout_seconds
        self._algorithm = require_algorithm(algorithm)
        self._chunk_size = chunk_size

    @property
    def algorithm(self) -> str:
        return self._algorithm

    def fetch(self, url: str, destination: Path) -> FetchedArtifact:
        """Download ``url`` to ``destination``, overwriting any existing file."""
        destination = Path(destination)
        logger.info("Downloading %s from %s", destination.name, url)
        written = 0
        try:
            with self._session.get(url, stream=True, timeout=self._timeout) as response:
                response.raise_for_status()
                expected = response.headers.get("Content-Length")
                if response.headers.get("Content-Encoding", "identity") != "identity":
                    # iter_content decodes, so the body length no longer matches.
                    expected = None
                try:
                    destination.parent.mkdir(parents=True, exist_ok=True)
                    fh = destination.open("wb")
                except OSError as exc:
                    raise LocalWriteError(f"cannot write {destination}: {exc}") from exc
                with fh:
                    for chunk in response.iter_content(chunk_size=self._chunk_size):
                        if not chunk:
                            continue
                        try:
                            fh.write(chunk)
                        except OSError as exc:
                            raise LocalWriteError(f"cannot write {destination}: {exc}") from exc
                        written += len(chunk)
        except requests.RequestException as exc:
            self._discard(destination)
            raise DownloadError(f"downloading {url} failed: {exc}") from exc
        except LocalWriteError:
            self._discard(destination)
            raise

        if expected is not None and expected.isdigit() and int(expected) != written:
            self._discard(destination)
            raise DownloadError(
                f"downloading {url} was truncated: got {written} of {expected} bytes"
            )

        try:
            digest = file_digest(destination, self._algorithm, self._chunk_size)
            size = destination.stat().st_size
        except OSError as exc:
            raise LocalWriteError(f"cannot read back {destination}: {exc}") from exc

        return FetchedArtifact(local_path=destination, url=url, digest=digest, size=size)

    def fetch_file(self, file: ArtifactFile, directory: Path) -> FetchedArtifact:
        """Fetch a located artifact into ``directory`` under its own name.

        Verifies the declared hash for the fetcher's algorithm, if any.
        """
        fetched = self.fetch(file.url, Path(directory) / file.name)
        declared = file.declared_hash(self._algorithm)
        if declared is not None and split_digest(fetched.digest)[1] != declared:
            self._discard(fetched.local_path)
            raise DownloadError(
                f"{file.name} does not match its declared {self._algorithm} "
                f"{declared} (got {fetched.digest})"
            )
        return fetched

    @staticmethod
    def _discard(path: Path) -> None:
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as exc:
            logger.warning("Could not remove partial download %s: %s", path, exc)
