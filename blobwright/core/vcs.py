"""Version-control status of the release — used to tell a real change from a no-op."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Protocol

from blobwright.core.errors import ExternalToolError

logger = logging.getLogger(__name__)


class WorkingTree(Protocol):
    def has_changes(self, relative_path: str) -> bool: ...


class GitWorkingTree:
    """Asks ``git status --porcelain`` about one path of the release."""

    def __init__(self, root: Path, *, git: str = "git", timeout_seconds: float = 60.0) -> None:
        self._root = Path(root)
        self._git = git
        self._timeout = timeout_seconds

    def has_changes(self, relative_path: str) -> bool:
        cmd = [self._git, "-C", str(self._root), "status", "--porcelain", "--", relative_path]
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, timeout=self._timeout)
        except subprocess.TimeoutExpired as exc:
            raise ExternalToolError(f"git status timed out after {self._timeout:g}s") from exc
        except OSError as exc:
            raise ExternalToolError(f"cannot run {self._git}: {exc}") from exc
        if result.returncode != 0:
            raise ExternalToolError(
                f"git status exited with status {result.returncode}: {result.stderr.strip()}"
            )
        changed = bool(result.stdout.strip())
        logger.debug("git reports %s as %s", relative_path, "modified" if changed else "clean")
        return changed
