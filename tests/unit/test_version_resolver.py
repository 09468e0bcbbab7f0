"""Tests for the Version Resolver — latest-version selection from a listing."""

from __future__ import annotations

import itertools

import pytest

from blobwright.core.errors import NoVersionsFoundError
from blobwright.core.version_resolver import (
    resolve_latest,
    resolve_listing,
    split_version_listing,
)


class TestSplitVersionListing:
    def test_strips_and_drops_blank_lines(self):
        text = "7.0\n\n  7.1  \r\n\t\n7.2"
        assert split_version_listing(text) == ["7.0", "7.1", "7.2"]

    def test_empty(self):
        assert split_version_listing("") == []


class TestResolveLatest:
    def test_picks_maximum(self):
        assert str(resolve_latest(["7.0", "7.10.1", "7.9"])) == "7.10.1"

    def test_skips_unparsable_entries(self):
        latest = resolve_latest(["garbage", "7.0", "curl-8.0", "7.1", ""])
        assert str(latest) == "7.1"

    def test_release_beats_its_prerelease(self):
        assert str(resolve_latest(["2.0.0-rc1", "2.0.0", "1.9"])) == "2.0.0"

    def test_order_independent(self):
        candidates = ["1.2.0", "1.10.0", "1.9.9", "1.10.0-rc.2", "junk"]
        results = {str(resolve_latest(list(p))) for p in itertools.permutations(candidates)}
        assert results == {"1.10.0"}

    def test_equal_precedence_is_order_independent(self):
        candidates = ["7.1", "v7.1", "7.1.0", "7.1+b"]
        results = {str(resolve_latest(list(p))) for p in itertools.permutations(candidates)}
        assert len(results) == 1

    def test_equal_precedence_never_beats_a_higher_version(self):
        assert str(resolve_latest(["v7.1", "7.2", "7.1.0"])) == "7.2"

    def test_single_candidate(self):
        assert str(resolve_latest(["0.1"])) == "0.1"

    def test_empty_raises(self):
        with pytest.raises(NoVersionsFoundError):
            resolve_latest([])

    def test_all_unparsable_raises(self):
        with pytest.raises(NoVersionsFoundError, match="2 unparsable"):
            resolve_latest(["latest", "stable"])

    def test_accepts_any_iterable(self):
        assert str(resolve_latest(iter(["1.0", "2.0"]))) == "2.0"


class TestResolveListing:
    def test_from_text(self):
        assert str(resolve_listing("7.0\n7.1\nnot-a-version\n")) == "7.1"

    def test_blank_text_raises(self):
        with pytest.raises(NoVersionsFoundError):
            resolve_listing("\n\n")
