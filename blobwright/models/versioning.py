"""Upstream version model — parses and orders heterogeneous version strings."""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict

# Optional "v", numeric segments, optional pre-release, optional build metadata.
_VERSION_RE = re.compile(
    r"^v?(?P<segments>[0-9]+(?:\.[0-9]+)*?)"
    r"(?:-(?P<pre_numeric>[0-9]+[0-9A-Za-z\-~]*(?:\.[0-9A-Za-z\-~]+)*)"
    r"|-?(?P<pre_alpha>[A-Za-z\-~]+[0-9A-Za-z\-~]*(?:\.[0-9A-Za-z\-~]+)*))?"
    r"(?:\+(?P<metadata>[0-9A-Za-z\-~]+(?:\.[0-9A-Za-z\-~]+)*))?$"
)

_MIN_SEGMENTS = 3


class InvalidVersionError(ValueError):
    """Raised when a string cannot be parsed as a version."""


def _compare_ints(a: int, b: int) -> int:
    return (a > b) - (a < b)


def _compare_identifier(a: str, b: str) -> int:
    if a == b:
        return 0
    a_numeric, b_numeric = a.isdigit(), b.isdigit()
    if a_numeric and b_numeric:
        return _compare_ints(int(a), int(b))
    if a_numeric:
        return -1
    if b_numeric:
        return 1
    return -1 if a < b else 1


def _compare_strings(a: str, b: str) -> int:
    return (a > b) - (a < b)


def _compare_prereleases(a: str, b: str) -> int:
    if a == b:
        return 0
    # A release sorts after all of its pre-releases.
    if not a:
        return 1
    if not b:
        return -1
    a_parts, b_parts = a.split("."), b.split(".")
    for a_part, b_part in zip(a_parts, b_parts):
        result = _compare_identifier(a_part, b_part)
        if result:
            return result
    return _compare_ints(len(a_parts), len(b_parts))


class ResolvedVersion(BaseModel):
    """A parsed upstream version.

    ``raw`` is kept verbatim: it is what gets handed to the locate script and
    written to the version marker. Precedence ignores build metadata and
    segment padding; versions of equal precedence are ordered by ``raw`` so
    only identical strings compare equal.
    """

    model_config = ConfigDict(frozen=True)

    raw: str
    segments: tuple[int, ...]
    prerelease: str = ""
    metadata: str = ""

    @classmethod
    def parse(cls, raw: str) -> ResolvedVersion:
        raw = raw.strip()
        match = _VERSION_RE.match(raw)
        if match is None:
            raise InvalidVersionError(f"Malformed version: {raw!r}")
        segments = [int(s) for s in match.group("segments").split(".")]
        segments.extend([0] * (_MIN_SEGMENTS - len(segments)))
        return cls(
            raw=raw,
            segments=tuple(segments),
            prerelease=match.group("pre_numeric") or match.group("pre_alpha") or "",
            metadata=match.group("metadata") or "",
        )

    def precedence(self, other: ResolvedVersion) -> int:
        """Compare by version semantics alone, like ``1.0 == 1.0.0+build``."""
        width = max(len(self.segments), len(other.segments))
        mine = self.segments + (0,) * (width - len(self.segments))
        theirs = other.segments + (0,) * (width - len(other.segments))
        for a, b in zip(mine, theirs):
            result = _compare_ints(a, b)
            if result:
                return result
        return _compare_prereleases(self.prerelease, other.prerelease)

    def compare(self, other: ResolvedVersion) -> int:
        """Return -1, 0 or 1 as ``self`` sorts before, with, or after ``other``."""
        return self.precedence(other) or _compare_strings(self.raw, other.raw)

    def __lt__(self, other: ResolvedVersion) -> bool:
        return self.compare(other) < 0

    def __gt__(self, other: ResolvedVersion) -> bool:
        return self.compare(other) > 0

    def __le__(self, other: ResolvedVersion) -> bool:
        return self.compare(other) <= 0

    def __ge__(self, other: ResolvedVersion) -> bool:
        return self.compare(other) >= 0

    @property
    def is_prerelease(self) -> bool:
        return bool(self.prerelease)

    def __str__(self) -> str:
        return self.raw
