"""Tests for loading config/blobs.yml and per-dependency resource.yml files."""

from __future__ import annotations

from pathlib import Path

import pytest

from blobwright.core.errors import ConfigurationError
from blobwright.core.release_config import (
    find_resource,
    load_blob_manifest,
    load_resource,
    load_resources,
)
from blobwright.models.release import ReleaseLayout

BLOBS = {
    "curl/curl-7.0.tar.gz": {"object_id": "abc-123", "size": 4096, "sha": "sha256:aaa"},
    "curl/curl-extras.tgz": {"object_id": "abc-124", "size": 12, "sha": "sha256:bbb"},
    "openssl/openssl-3.0.tar.gz": {"object_id": "def-456", "size": 8192, "sha": "0" * 40},
}


class TestLoadBlobManifest:
    def test_records_by_path(self, make_release):
        layout = ReleaseLayout(root=make_release(BLOBS))
        manifest = load_blob_manifest(layout)
        assert set(manifest.records) == set(BLOBS)
        curl = manifest.records["curl/curl-7.0.tar.gz"]
        assert curl.digest == "sha256:aaa"
        assert curl.object_id == "abc-123"
        assert curl.size == 4096
        assert curl.package_name == "curl"
        assert curl.file_name == "curl-7.0.tar.gz"

    def test_for_package_is_sorted_and_filtered(self, make_release):
        manifest = load_blob_manifest(ReleaseLayout(root=make_release(BLOBS)))
        assert [r.path for r in manifest.for_package("curl")] == [
            "curl/curl-7.0.tar.gz",
            "curl/curl-extras.tgz",
        ]
        assert manifest.for_package("zlib") == []
        assert manifest.package_names == {"curl", "openssl"}

    def test_empty_file_is_empty_manifest(self, make_release):
        root = make_release()
        (root / "config" / "blobs.yml").write_text("")
        assert load_blob_manifest(ReleaseLayout(root=root)).records == {}

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigurationError, match="does not exist"):
            load_blob_manifest(ReleaseLayout(root=tmp_path))

    def test_not_a_mapping(self, make_release):
        root = make_release()
        (root / "config" / "blobs.yml").write_text("- curl/curl-7.0.tar.gz\n")
        with pytest.raises(ConfigurationError, match="must map blob paths"):
            load_blob_manifest(ReleaseLayout(root=root))

    def test_entry_without_sha(self, make_release):
        root = make_release({"curl/curl-7.0.tar.gz": {"object_id": "x", "size": 1}})
        with pytest.raises(ConfigurationError, match="malformed entry"):
            load_blob_manifest(ReleaseLayout(root=root))

    def test_invalid_yaml(self, make_release):
        root = make_release()
        (root / "config" / "blobs.yml").write_text("curl: [unclosed\n")
        with pytest.raises(ConfigurationError, match="cannot read"):
            load_blob_manifest(ReleaseLayout(root=root))


class TestLoadResources:
    def test_descriptor_from_resource_yml(self, make_release, curl_resource):
        root = make_release(resources={"curl": curl_resource})
        (descriptor,) = load_resources(ReleaseLayout(root=root))
        assert descriptor.package_name == "curl"
        assert descriptor.resource_dir == root / "config" / "blobs" / "curl"
        assert descriptor.version_check_command == curl_resource["source"]["version_check"]
        assert descriptor.artifact_locate_command == curl_resource["source"]["metalink_get"]
        assert descriptor.recorded_version is None

    def test_ordered_by_package_name(self, make_release, curl_resource):
        root = make_release(resources={"zlib": curl_resource, "curl": curl_resource, "nginx": curl_resource})
        names = [d.package_name for d in load_resources(ReleaseLayout(root=root))]
        assert names == ["curl", "nginx", "zlib"]

    def test_no_resources_dir(self, make_release):
        assert load_resources(ReleaseLayout(root=make_release())) == []

    def test_recorded_version_from_source(self, make_release, curl_resource):
        curl_resource["source"]["version"] = "7.0"
        root = make_release(resources={"curl": curl_resource})
        assert load_resources(ReleaseLayout(root=root))[0].recorded_version == "7.0"

    def test_recorded_version_from_version_block(self, make_release, curl_resource):
        curl_resource["version"] = {"version": "6.9"}
        root = make_release(resources={"curl": curl_resource})
        assert load_resources(ReleaseLayout(root=root))[0].recorded_version == "6.9"

    def test_unknown_keys_ignored(self, make_release, curl_resource):
        curl_resource["type"] = "metalink-repository"
        curl_resource["source"]["include_files"] = ["*.tar.gz"]
        root = make_release(resources={"curl": curl_resource})
        assert load_resources(ReleaseLayout(root=root))[0].package_name == "curl"

    def test_missing_metalink_get(self, make_release):
        root = make_release(resources={"curl": {"source": {"version_check": "echo 1.0"}}})
        with pytest.raises(ConfigurationError, match="malformed dependency descriptor"):
            load_resources(ReleaseLayout(root=root))

    def test_empty_command(self, make_release):
        root = make_release(resources={"curl": {"source": {"version_check": "", "metalink_get": "x"}}})
        with pytest.raises(ConfigurationError):
            load_resources(ReleaseLayout(root=root))

    def test_not_a_mapping(self, tmp_path: Path):
        path = tmp_path / "curl" / "resource.yml"
        path.parent.mkdir()
        path.write_text("just a string\n")
        with pytest.raises(ConfigurationError, match="must be a mapping"):
            load_resource(path)


class TestFindResource:
    def test_found(self, make_release, curl_resource):
        root = make_release(resources={"curl": curl_resource})
        assert find_resource(ReleaseLayout(root=root), "curl").package_name == "curl"

    def test_unknown_package(self, make_release):
        with pytest.raises(ConfigurationError, match="no resource.yml for package 'zlib'"):
            find_resource(ReleaseLayout(root=make_release()), "zlib")
