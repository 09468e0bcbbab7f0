"""Version Resolver — picks the latest version out of a version-check listing.

Unparsable entries are skipped, never fatal on their own. Versions of equal
precedence are ordered by their raw text, so the result does not depend on
the listing order.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from blobwright.core.errors import NoVersionsFoundError
from blobwright.models.versioning import InvalidVersionError, ResolvedVersion

logger = logging.getLogger(__name__)


def split_version_listing(text: str) -> list[str]:
    """Split raw version-check output into stripped, non-empty lines."""
    return [line.strip() for line in text.splitlines() if line.strip()]


def resolve_latest(candidates: Iterable[str]) -> ResolvedVersion:
    """Return the highest parsable version among ``candidates``.

    Raises
    ------
    NoVersionsFoundError
        If ``candidates`` is empty or no entry parses.
    """
    latest: ResolvedVersion | None = None
    skipped = 0
    for raw in candidates:
        raw = raw.strip()
        if not raw:
            continue
        try:
            version = ResolvedVersion.parse(raw)
        except InvalidVersionError:
            skipped += 1
            continue
        if latest is None or latest < version:
            latest = version

    if latest is None:
        raise NoVersionsFoundError(
            f"no parsable version in version-check output ({skipped} unparsable entries)"
        )
    if skipped:
        logger.debug("Skipped %d unparsable version entries", skipped)
    return latest


def resolve_listing(text: str) -> ResolvedVersion:
    """Resolve the latest version straight from newline-delimited text."""
    return resolve_latest(split_version_listing(text))
