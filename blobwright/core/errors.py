"""Error taxonomy for blob upgrade runs.

Every error is fatal to the whole run. Errors are raised where they are
detected and chained with ``raise ... from``; the CLI reports them once.
"""

from __future__ import annotations


class BlobUpgradeError(RuntimeError):
    """Base class for every failure that aborts an upgrade run."""


class ConfigurationError(BlobUpgradeError):
    """A dependency descriptor, manifest or setting is malformed or missing."""


class NoVersionsFoundError(BlobUpgradeError):
    """The version check produced no parsable version."""


class UnsupportedArtifactShapeError(BlobUpgradeError):
    """The located artifact is not exactly one file with exactly one URL."""


class ArtifactDescriptorParseError(BlobUpgradeError):
    """The locate operation's output is not a recognized artifact description."""


class DownloadError(BlobUpgradeError):
    """Transport failure while fetching an artifact."""


class LocalWriteError(BlobUpgradeError):
    """Filesystem failure while persisting a fetched artifact or a marker."""


class ExternalToolError(BlobUpgradeError):
    """An external tool failed or did not finish in time."""


class ScriptExecutionError(ExternalToolError):
    """A per-dependency version-check or locate script failed."""


class PartialMutationError(ExternalToolError):
    """A blob was removed from the manifest but its replacement was not added.

    The release directory is left in a partially mutated state that needs
    manual attention.
    """


class PreconditionError(BlobUpgradeError):
    """A requirement for the next step is not met (e.g. missing credentials)."""


def causal_chain(exc: BaseException) -> list[BaseException]:
    """Return ``exc`` followed by its ``__cause__``/``__context__`` ancestors."""
    chain: list[BaseException] = []
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        chain.append(current)
        seen.add(id(current))
        current = current.__cause__ or current.__context__
    return chain
