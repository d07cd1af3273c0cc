"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Every tunable of the server in one dataclass.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── tinyhttpd --directory /tmp/data                            │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── TINYHTTPD_PORT=8080 tinyhttpd                              │
    │                                                                      │
    │   3. Default values (in this dataclass)                             │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The CLI starts from ServerConfig.from_env() and overrides only the flags
that were given.

=============================================================================
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from .errors import SetupError


logger = logging.getLogger(__name__)

LOG_FORMATS = ("text", "json")


@dataclass
class ServerConfig:
    """
    Configuration for the HTTP server.

    Development:
        ServerConfig(
            host="127.0.0.1",
            port=0,              # Ephemeral port, read back from server.address
            directory="/tmp/x",
            log_level="DEBUG",
        )

    Default (what `tinyhttpd` with no flags runs):
        ServerConfig(host="0.0.0.0", port=4221, directory=".")
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "0.0.0.0"
    """Address to bind. "0.0.0.0" listens on every interface."""

    port: int = 4221
    """Port to listen on. 0 lets the OS pick a free one."""

    backlog: int = 128
    """Maximum number of queued, not yet accepted connections."""

    buffer_size: int = 8192
    """Bytes requested per recv() call."""

    # ─────────────────────────────────────────────────────────────────────
    # FILE STORE
    # ─────────────────────────────────────────────────────────────────────

    directory: str = "."
    """
    Base directory of the file store behind /files/.
    Created at startup if it does not exist.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""

    log_format: str = "text"
    """
    Access log format: 'text' or 'json'.
    text - one Apache-style line per request
    json - one JSON object per request
    """

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        TINYHTTPD_HOST        Bind address (default: 0.0.0.0)
        TINYHTTPD_PORT        Port (default: 4221)
        TINYHTTPD_DIRECTORY   File store directory (default: .)
        TINYHTTPD_LOG_LEVEL   Logging level (default: INFO)
        TINYHTTPD_LOG_FORMAT  Access log format (default: text)

        =====================================================================
        """
        return cls(
            host=os.getenv("TINYHTTPD_HOST", "0.0.0.0"),
            port=int(os.getenv("TINYHTTPD_PORT", "4221")),
            directory=os.getenv("TINYHTTPD_DIRECTORY", "."),
            log_level=os.getenv("TINYHTTPD_LOG_LEVEL", "INFO"),
            log_format=os.getenv("TINYHTTPD_LOG_FORMAT", "text"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ValueError: On the first invalid value.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.buffer_size < 1024:
            raise ValueError("buffer_size must be >= 1024")

        if self.log_format not in LOG_FORMATS:
            raise ValueError(
                f"Invalid log_format: {self.log_format!r}. "
                f"Must be one of {', '.join(LOG_FORMATS)}."
            )

        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"Invalid log_level: {self.log_level!r}")

    def prepare_directory(self) -> Path:
        """
        Create the file store directory (and parents) if missing.

        An existing directory is fine.

        Returns:
            The directory as a Path.

        Raises:
            SetupError: It could not be created, or a non-directory is
                        in its place.
        """
        path = Path(self.directory)
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise SetupError(f"Cannot create directory {path}: {e}") from e

        logger.debug(f"File store directory: {path.resolve()}")
        return path
