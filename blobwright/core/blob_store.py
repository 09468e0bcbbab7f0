"""Blob-store client — thin wrapper around the ``bosh`` CLI.

Each call is one blocking subprocess with an explicit timeout. Any failure
raises ``ExternalToolError``; nothing is retried.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Protocol

from blobwright.core.errors import ExternalToolError
from blobwright.models.release import BlobStoreConfig

logger = logging.getLogger(__name__)


class BlobStore(Protocol):
    def remove(self, path: str) -> None: ...

    def add(self, local_file: Path, new_path: str) -> None: ...

    def upload(self) -> None: ...


class BoshBlobStore:
    """Runs ``bosh remove-blob`` / ``add-blob`` / ``upload-blobs`` for a release.

    Parameters
    ----------
    config:
        Binary path, interactivity and timeout.
    release_dir:
        Passed as ``--dir`` to every command.
    """

    def __init__(self, config: BlobStoreConfig, release_dir: Path) -> None:
        self._config = config
        self._release_dir = Path(release_dir)

    def _command(self, subcommand: str, *args: str) -> list[str]:
        cmd = [str(self._config.binary)]
        if self._config.non_interactive:
            cmd.append("--non-interactive")
        cmd.extend([subcommand, f"--dir={self._release_dir}", *args])
        return cmd

    def _run(self, subcommand: str, *args: str) -> None:
        cmd = self._command(subcommand, *args)
        logger.debug("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self._config.timeout_seconds,
            )
        except subprocess.TimeoutExpired as exc:
            raise ExternalToolError(
                f"bosh {subcommand} timed out after {self._config.timeout_seconds:g}s"
            ) from exc
        except OSError as exc:
            raise ExternalToolError(f"cannot run {self._config.binary}: {exc}") from exc

        if result.returncode != 0:
            detail = result.stderr.strip() or result.stdout.strip() or "(no output)"
            raise ExternalToolError(
                f"bosh {subcommand} exited with status {result.returncode}: {detail}"
            )

    def remove(self, path: str) -> None:
        self._run("remove-blob", path)

    def add(self, local_file: Path, new_path: str) -> None:
        self._run("add-blob", str(local_file), new_path)

    def upload(self) -> None:
        self._run("upload-blobs")
