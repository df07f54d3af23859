"""Configuration for import runs and the database store.

Both configs read environment variables (optionally loaded from a .env file
by the entry points) and can also be built directly in code and tests.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import urlparse

from ccss_import.hierarchy.ancestors import DEFAULT_MAX_FETCHES, AncestorFailurePolicy
from ccss_import.models.constants import DEFAULT_SOURCES, SYSTEM_CONTEXT_ID
from ccss_import.utils.paths import STANDARDS_DATA_DIR, get_standards_file

_TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass
class StandardsSource:
    """One standards document; each becomes one framework."""

    name: str
    path: Path


def default_sources(data_dir: Path | None = None) -> list[StandardsSource]:
    """The Math and ELA-Literacy documents under `data_dir`."""
    return [
        StandardsSource(name=name, path=get_standards_file(filename, data_dir))
        for name, filename in DEFAULT_SOURCES.items()
    ]


# -----------------------------------------------------------------------------
# Import configuration
# -----------------------------------------------------------------------------


@dataclass
class ImportConfig:
    """Configuration for a full import run."""

    sources: list[StandardsSource] = field(default_factory=default_sources)
    # Stop at the first failed file instead of moving on to the next one
    stop_on_file_failure: bool = False
    ancestor_failure_policy: AncestorFailurePolicy = AncestorFailurePolicy.ABORT
    max_ancestor_fetches: int = DEFAULT_MAX_FETCHES
    fetch_timeout: float = 15
    context_id: int = SYSTEM_CONTEXT_ID

    @classmethod
    def from_env(cls) -> "ImportConfig":
        """Create config from CCSS_* environment variables.

        Raises:
            ValueError: If a variable holds an invalid value.
        """
        data_dir = os.getenv("CCSS_DATA_DIR")
        policy = os.getenv("CCSS_ANCESTOR_POLICY", AncestorFailurePolicy.ABORT.value)
        try:
            ancestor_policy = AncestorFailurePolicy(policy.lower())
        except ValueError as e:
            msg = f"CCSS_ANCESTOR_POLICY must be 'abort' or 'skip', got '{policy}'"
            raise ValueError(msg) from e

        return cls(
            sources=default_sources(Path(data_dir) if data_dir else STANDARDS_DATA_DIR),
            stop_on_file_failure=(
                os.getenv("CCSS_STOP_ON_FILE_FAILURE", "").lower() in _TRUE_VALUES
            ),
            ancestor_failure_policy=ancestor_policy,
            max_ancestor_fetches=int(
                os.getenv("CCSS_MAX_ANCESTOR_FETCHES", str(DEFAULT_MAX_FETCHES))
            ),
            fetch_timeout=float(os.getenv("CCSS_FETCH_TIMEOUT", "15")),
            context_id=int(os.getenv("CCSS_CONTEXT_ID", str(SYSTEM_CONTEXT_ID))),
        )


# -----------------------------------------------------------------------------
# Database configuration
# -----------------------------------------------------------------------------


@dataclass
class DBConfig:
    """Database configuration for connecting to Postgres."""

    host: str
    port: int
    database: str
    user: str
    password: str
    # Store original connection string if provided (for SSL params, etc.)
    _connection_string: str | None = None

    @classmethod
    def from_env(cls) -> "DBConfig":
        """Create config from DATABASE_URL, or HOST/PORT/DB_* variables."""
        url = os.getenv("DATABASE_URL")
        if url:
            return cls.from_connection_string(url)

        host = os.getenv("HOST")
        if not host:
            msg = "DATABASE_URL or HOST environment variable is required"
            raise ValueError(msg)

        return cls(
            host=host,
            port=int(os.getenv("PORT", "5432")),
            database=os.getenv("DB_NAME", ""),
            user=os.getenv("DB_USER", ""),
            password=os.getenv("DB_PASSWORD", ""),
        )

    @classmethod
    def from_connection_string(cls, url: str) -> "DBConfig":
        """Create config from a postgresql:// connection URL."""
        parsed = urlparse(url)
        return cls(
            host=parsed.hostname or "localhost",
            port=parsed.port or 5432,
            database=parsed.path.lstrip("/") if parsed.path else "",
            user=parsed.username or "",
            password=parsed.password or "",
            _connection_string=url,
        )

    @classmethod
    def is_configured(cls) -> bool:
        """Check whether the environment names a database."""
        return bool(os.getenv("DATABASE_URL") or os.getenv("HOST"))

    @property
    def connection_string(self) -> str:
        """Generate psycopg connection string with timeout."""
        if self._connection_string:
            sep = "&" if "?" in self._connection_string else "?"
            return f"{self._connection_string}{sep}connect_timeout=5"
        return (
            f"postgresql://{self.user}:{self.password}"
            f"@{self.host}:{self.port}/{self.database}?connect_timeout=5"
        )
