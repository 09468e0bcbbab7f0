"""Version and artifact sources — the per-dependency external scripts.

The orchestrator only talks to the ``VersionSource`` / ``ArtifactSource``
protocols. The script-backed implementations run a dependency's
``version_check`` and ``metalink_get`` snippets through ``bash -c`` inside
the dependency's config directory; parameters are passed as environment
variables (``version=<resolved version>``).
"""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from typing import Protocol, runtime_checkable

from blobwright.core.errors import ScriptExecutionError
from blobwright.core.version_resolver import split_version_listing
from blobwright.models.resources import ResourceDescriptor

logger = logging.getLogger(__name__)


@runtime_checkable
class VersionSource(Protocol):
    """Lists the versions available upstream."""

    def check(self) -> list[str]: ...


@runtime_checkable
class ArtifactSource(Protocol):
    """Describes the download for one upstream version, as raw metalink text."""

    def locate(self, version: str) -> str: ...


class ScriptRunner:
    """Runs shell snippets with an explicit timeout.

    Parameters
    ----------
    shell:
        Interpreter used as ``<shell> -c <script>``.
    timeout_seconds:
        Hard limit for one script invocation.
    """

    def __init__(self, shell: str = "/bin/bash", timeout_seconds: float = 600.0) -> None:
        self._shell = shell
        self._timeout = timeout_seconds

    def run(
        self,
        script: str,
        *,
        cwd: Path,
        params: dict[str, str] | None = None,
        label: str = "script",
    ) -> str:
        """Run ``script`` and return its stdout.

        Raises ``ScriptExecutionError`` if the script fails or times out.
        """
        env = dict(os.environ)
        env.update(params or {})
        try:
            result = subprocess.run(
                [self._shell, "-c", script],
                cwd=str(cwd),
                env=env,
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired as exc:
            raise ScriptExecutionError(
                f"{label} timed out after {self._timeout:g}s"
            ) from exc
        except OSError as exc:
            raise ScriptExecutionError(f"{label} could not be started: {exc}") from exc

        if result.stderr:
            logger.debug("%s stderr: %s", label, result.stderr.strip())
        if result.returncode != 0:
            raise ScriptExecutionError(
                f"{label} exited with status {result.returncode}: "
                f"{result.stderr.strip() or '(no stderr)'}"
            )
        return result.stdout


class ScriptVersionSource:
    """Runs a dependency's ``version_check`` script."""

    def __init__(self, descriptor: ResourceDescriptor, runner: ScriptRunner) -> None:
        self._descriptor = descriptor
        self._runner = runner

    def check(self) -> list[str]:
        stdout = self._runner.run(
            self._descriptor.version_check_command,
            cwd=self._descriptor.resource_dir,
            label=f"{self._descriptor.package_name} version_check",
        )
        return split_version_listing(stdout)


class ScriptArtifactSource:
    """Runs a dependency's ``metalink_get`` script for one version."""

    def __init__(self, descriptor: ResourceDescriptor, runner: ScriptRunner) -> None:
        self._descriptor = descriptor
        self._runner = runner

    def locate(self, version: str) -> str:
        return self._runner.run(
            self._descriptor.artifact_locate_command,
            cwd=self._descriptor.resource_dir,
            params={"version": version},
            label=f"{self._descriptor.package_name} metalink_get",
        )
