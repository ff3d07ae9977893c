"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Centralized configuration for the HTTP server.

=============================================================================
ONE CONFIG, MANY WORKERS
=============================================================================

Every connection is handled by its own thread, and all of them read the
same ServerConfig. It is built once at startup and then never changes:

    ┌──────────────┐
    │ ServerConfig │ ◄── frozen dataclass, default_headers is read-only
    └──────┬───────┘
           │ (shared by reference, no copies, no locks)
    ┌──────┼──────────────┬──────────────┐
    ▼      ▼              ▼              ▼
  worker  worker        worker        worker

A worker that wants to add a header copies default_headers into its own
response first.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    Priority (highest to lowest):

    1. Command-line arguments
       └── python -m simplehttp --port 3000 --root ./public

    2. Environment variables
       └── HTTP_PORT=3000 python -m simplehttp

    3. Defaults below

=============================================================================
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional


SERVER_NAME = "SimpleHttp/0.1"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _default_headers() -> Mapping[str, str]:
    return {"Server": SERVER_NAME}


@dataclass(frozen=True)
class ServerConfig:
    """
    Configuration for the HTTP server.

    Development:
        ServerConfig(port=8080, root=Path("./public"), log_level="DEBUG")

    Tests:
        ServerConfig(port=0, root=tmp_path)   # port 0 = OS picks a free port
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    """
    The IP address to bind to.
    - "127.0.0.1" - Localhost only (default)
    - "0.0.0.0" - All network interfaces
    """

    port: int = 8080
    """The port number to listen on. 0 lets the OS pick one."""

    backlog: int = 128
    """Maximum number of queued connections."""

    timeout: Optional[float] = None
    """
    Socket timeout in seconds for each client connection.
    None = blocking (a stalled client holds its worker forever).
    """

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT
    # ─────────────────────────────────────────────────────────────────────

    root: Path = Path(".")
    """Directory files are served from."""

    default_headers: Mapping[str, str] = field(default_factory=_default_headers)
    """Headers added to every successful response."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""

    def __post_init__(self):
        # Frozen dataclass: object.__setattr__ is the only way in
        object.__setattr__(self, "root", Path(self.root))
        object.__setattr__(
            self, "default_headers", MappingProxyType(dict(self.default_headers))
        )

    @property
    def level(self) -> int:
        """The log level as a `logging` constant."""
        return getattr(logging, self.log_level.upper(), logging.INFO)

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        HTTP_HOST       Server host (default: 127.0.0.1)
        HTTP_PORT       Server port (default: 8080)
        HTTP_ROOT       Served directory (default: .)
        HTTP_TIMEOUT    Client socket timeout in seconds (default: none)
        HTTP_LOG_LEVEL  Logging level (default: INFO)
        """
        timeout = os.getenv("HTTP_TIMEOUT")
        return cls(
            host=os.getenv("HTTP_HOST", "127.0.0.1"),
            port=int(os.getenv("HTTP_PORT", "8080")),
            root=Path(os.getenv("HTTP_ROOT", ".")),
            timeout=float(timeout) if timeout else None,
            log_level=os.getenv("HTTP_LOG_LEVEL", "INFO"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Called at startup so a bad port or a missing root directory fails
        immediately rather than on the first request.

        Raises:
            ValueError: Describing the first invalid value.
        """
        if not 0 <= self.port <= 65535:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if not self.root.is_dir():
            raise ValueError(f"Root directory does not exist: {self.root}")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {self.log_level}")
