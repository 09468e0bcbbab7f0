"""Shared test fixtures for Blobwright."""

from __future__ import annotations

import hashlib
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import requests
import yaml

from blobwright.config import UpgraderSettings
from blobwright.core.errors import ExternalToolError
from blobwright.core.hasher import file_digest
from blobwright.core.version_marker import VersionMarkerStore
from blobwright.models.artifacts import ArtifactFile, FetchedArtifact
from blobwright.models.resources import ResourceDescriptor


# ---------------------------------------------------------------------------
# Test doubles for the external collaborators
# ---------------------------------------------------------------------------


class FakeVersionSource:
    """Returns a fixed version listing and counts calls."""

    def __init__(self, versions: list[str]) -> None:
        self.versions = versions
        self.calls = 0

    def check(self) -> list[str]:
        self.calls += 1
        return list(self.versions)


class FakeArtifactSource:
    """Returns canned metalink text per version and records requested versions."""

    def __init__(self, metalinks: dict[str, str]) -> None:
        self.metalinks = metalinks
        self.requested: list[str] = []

    def locate(self, version: str) -> str:
        self.requested.append(version)
        return self.metalinks[version]


class FakeFetcher:
    """Serves in-memory bodies by URL, writing them to disk like the real fetcher."""

    def __init__(self, bodies: dict[str, bytes]) -> None:
        self.bodies = bodies
        self.fetched: list[str] = []

    @property
    def fetch_count(self) -> int:
        return len(self.fetched)

    def fetch_file(self, file: ArtifactFile, directory: Path) -> FetchedArtifact:
        self.fetched.append(file.url)
        path = Path(directory) / file.name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.bodies[file.url])
        return FetchedArtifact(
            local_path=path,
            url=file.url,
            digest=file_digest(path),
            size=path.stat().st_size,
        )


class RecordingBlobStore:
    """Records remove/add/upload calls; can be told to fail a given operation."""

    def __init__(self, fail_on: str | None = None) -> None:
        self.calls: list[tuple[str, ...]] = []
        self.fail_on = fail_on

    def _record(self, *call: str) -> None:
        self.calls.append(call)
        if self.fail_on == call[0]:
            raise ExternalToolError(f"bosh {call[0]} exited with status 1: boom")

    def remove(self, path: str) -> None:
        self._record("remove", path)

    def add(self, local_file: Path, new_path: str) -> None:
        self._record("add", str(local_file), new_path)

    def upload(self) -> None:
        self._record("upload")

    @property
    def removed(self) -> list[str]:
        return [c[1] for c in self.calls if c[0] == "remove"]

    @property
    def added(self) -> list[str]:
        return [c[2] for c in self.calls if c[0] == "add"]

    @property
    def uploads(self) -> int:
        return sum(1 for c in self.calls if c[0] == "upload")


class FakeResponse:
    """Streaming stand-in for ``requests.Response``."""

    def __init__(
        self,
        chunks: list[bytes],
        *,
        status_code: int = 200,
        headers: dict[str, str] | None = None,
        fail_after: int | None = None,
    ) -> None:
        self.chunks = chunks
        self.status_code = status_code
        self.headers = headers if headers is not None else {
            "Content-Length": str(sum(len(c) for c in chunks))
        }
        self.fail_after = fail_after
        self.closed = False

    def __enter__(self) -> FakeResponse:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.closed = True

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error")

    def iter_content(self, chunk_size: int = 1):
        for index, chunk in enumerate(self.chunks):
            if self.fail_after is not None and index >= self.fail_after:
                raise requests.ConnectionError("connection reset by peer")
            yield chunk


class FakeSession:
    """Maps URLs to FakeResponses and records every request."""

    def __init__(self, responses: dict[str, FakeResponse]) -> None:
        self.responses = responses
        self.requests: list[tuple[str, dict[str, Any]]] = []

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        self.requests.append((url, kwargs))
        if url not in self.responses:
            raise requests.ConnectionError(f"no route to {url}")
        return self.responses[url]


class FakeWorkingTree:
    """Reports a fixed answer for ``has_changes`` and records the asked paths."""

    def __init__(self, changed: bool = True) -> None:
        self.changed = changed
        self.asked: list[str] = []

    def has_changes(self, relative_path: str) -> bool:
        self.asked.append(relative_path)
        return self.changed


# ---------------------------------------------------------------------------
# Content helpers
# ---------------------------------------------------------------------------


def sha256_of(data: bytes) -> str:
    return f"sha256:{hashlib.sha256(data).hexdigest()}"


def metalink_xml(name: str, urls: list[str], *, extra_files: int = 0, sha256: str | None = None) -> str:
    hash_el = f'<hash type="sha-256">{sha256}</hash>' if sha256 else ""
    url_els = "".join(f"<url>{u}</url>" for u in urls)
    files = [f'<file name="{name}">{hash_el}{url_els}</file>']
    files.extend(
        f'<file name="extra-{i}"><url>https://example.org/extra-{i}</url></file>'
        for i in range(extra_files)
    )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<metalink xmlns="urn:ietf:params:xml:ns:metalink">' + "".join(files) + "</metalink>"
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def settings() -> UpgraderSettings:
    """Settings independent of the developer's environment."""
    return UpgraderSettings(
        _env_file=None,
        bosh_binary=Path("/usr/local/bin/bosh"),
        log_level="DEBUG",
    )


@pytest.fixture
def markers() -> VersionMarkerStore:
    return VersionMarkerStore()


@pytest.fixture
def make_release(tmp_path: Path) -> Callable[..., Path]:
    """Factory fixture: lay out a release directory.

    ``blobs`` maps manifest paths to ``{object_id, size, sha}``; ``resources``
    maps package names to ``resource.yml`` content.
    """

    def _factory(
        blobs: dict[str, dict[str, Any]] | None = None,
        resources: dict[str, dict[str, Any]] | None = None,
        *,
        private_config: bool = True,
    ) -> Path:
        root = tmp_path / "release"
        config = root / "config"
        config.mkdir(parents=True, exist_ok=True)
        (config / "blobs.yml").write_text(yaml.safe_dump(blobs or {}), encoding="utf-8")
        for package, resource in (resources or {}).items():
            resource_dir = config / "blobs" / package
            resource_dir.mkdir(parents=True, exist_ok=True)
            (resource_dir / "resource.yml").write_text(yaml.safe_dump(resource), encoding="utf-8")
        if private_config:
            (config / "private.yml").write_text("blobstore: {}\n", encoding="utf-8")
        return root

    return _factory


@pytest.fixture
def curl_descriptor(tmp_path: Path) -> ResourceDescriptor:
    resource_dir = tmp_path / "release" / "config" / "blobs" / "curl"
    resource_dir.mkdir(parents=True, exist_ok=True)
    return ResourceDescriptor(
        package_name="curl",
        resource_dir=resource_dir,
        version_check_command="echo 7.0",
        artifact_locate_command="cat metalink.meta4",
    )


@pytest.fixture
def curl_resource() -> dict[str, Any]:
    """``resource.yml`` content for a ``curl`` dependency."""
    return {
        "source": {
            "version_check": "curl -s https://curl.se/download/ | grep -o 'curl-[0-9.]*'",
            "metalink_get": "echo \"<metalink/>\"",
        }
    }
