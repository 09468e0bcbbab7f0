"""Runtime configuration — env-driven via pydantic-settings.

Reads from a .env file and BLOBWRIGHT_* environment variables. Every external
call gets an explicit timeout from here; nothing relies on transport defaults.
"""

from __future__ import annotations

import hashlib
import logging
import shutil
from pathlib import Path

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from blobwright.core.errors import ConfigurationError
from blobwright.models.release import BlobStoreConfig


class UpgraderSettings(BaseSettings):
    """Upgrader settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export BLOBWRIGHT_BOSH_BINARY=/usr/local/bin/bosh
        export BLOBWRIGHT_DOWNLOAD_TIMEOUT_SECONDS=120
        export BLOBWRIGHT_NOOP_EXIT_CODE=3
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="BLOBWRIGHT_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"

    # Blob-store client
    bosh_binary: Path | None = None
    non_interactive: bool = True
    tool_timeout_seconds: float = 1800.0
    upload: bool = True

    # Per-dependency scripts
    shell: str = "/bin/bash"
    script_timeout_seconds: float = 600.0

    # Downloads
    download_timeout_seconds: float = 300.0
    chunk_size: int = 1024 * 1024
    digest_algorithm: str = "sha256"

    # Version markers
    marker_filename: str = "last_version"

    # Exit code for a successful run that changed nothing
    noop_exit_code: int = 0

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate that the level is one stdlib logging knows."""
        if not isinstance(logging.getLevelName(v.upper()), int):
            msg = f"Unknown log level: {v}"
            raise ValueError(msg)
        return v.upper()

    @field_validator("digest_algorithm")
    @classmethod
    def validate_digest_algorithm(cls, v: str) -> str:
        """Validate that hashlib provides the algorithm."""
        if v.lower() not in hashlib.algorithms_available:
            msg = f"Unsupported digest algorithm: {v}"
            raise ValueError(msg)
        return v.lower()

    def resolve_bosh_binary(self) -> Path:
        """Return the configured ``bosh`` binary, falling back to PATH lookup."""
        if self.bosh_binary is not None:
            return self.bosh_binary
        found = shutil.which("bosh")
        if found is None:
            raise ConfigurationError(
                "bosh binary not found on PATH; set BLOBWRIGHT_BOSH_BINARY"
            )
        return Path(found)

    def blob_store_config(self) -> BlobStoreConfig:
        return BlobStoreConfig(
            binary=self.resolve_bosh_binary(),
            non_interactive=self.non_interactive,
            timeout_seconds=self.tool_timeout_seconds,
        )


def load_settings() -> UpgraderSettings:
    """Load settings from the environment, reporting bad values as ``ConfigurationError``."""
    try:
        return UpgraderSettings()
    except ValidationError as exc:
        raise ConfigurationError(f"invalid BLOBWRIGHT_* settings: {exc}") from exc
