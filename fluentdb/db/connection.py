"""Database connection factories.

Each function returns a standard DB-API 2.0 connection whose rows can be
read by column name.  SQLite uses the built-in ``sqlite3`` module;
PostgreSQL uses ``psycopg2`` (optional dependency).  Both are reached from a
:class:`~fluentdb.config.DatabaseConfig` through :func:`connect`.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from fluentdb.config import DatabaseConfig

logger = logging.getLogger(__name__)

BACKENDS = ("sqlite", "postgresql")
MEMORY = ":memory:"
DEFAULT_PG_PORT = 5432


def connect_sqlite(
    path: str | Path,
    *,
    wal_mode: bool = True,
    foreign_keys: bool = True,
) -> sqlite3.Connection:
    """Open (or create) a SQLite database with ``sqlite3.Row`` rows.

    Args:
        path: File path, ``~`` expanded (``":memory:"`` for in-memory).
        wal_mode: Use WAL journaling for file databases.
        foreign_keys: Enforce foreign key constraints.
    """
    in_memory = str(path) == MEMORY
    if in_memory:
        target = MEMORY
    else:
        file = Path(path).expanduser()
        file.parent.mkdir(parents=True, exist_ok=True)
        target = str(file)

    conn = sqlite3.connect(target, check_same_thread=False)
    conn.row_factory = sqlite3.Row

    if wal_mode and not in_memory:
        conn.execute("PRAGMA journal_mode=WAL")
    if foreign_keys:
        conn.execute("PRAGMA foreign_keys=ON")

    logger.debug("SQLite connection opened: %s", target)
    return conn


def connect_postgresql(
    config: DatabaseConfig | None = None,
    *,
    dsn: str | None = None,
) -> Any:
    """Open a PostgreSQL connection via psycopg2.

    Pass either a :class:`~fluentdb.config.DatabaseConfig` or a full *dsn*
    string; the DSN wins when both are given.

    Returns:
        A ``psycopg2`` connection with ``RealDictCursor`` as the default
        cursor factory.
    """
    if config is None and not dsn:
        raise ValueError("connect_postgresql() needs a DatabaseConfig or a dsn")

    try:
        import psycopg2
        import psycopg2.extras
    except ImportError:
        raise ImportError(
            "psycopg2 not installed. Install with: pip install fluentdb[postgresql]"
        )

    cursor_factory = psycopg2.extras.RealDictCursor
    if dsn:
        conn = psycopg2.connect(dsn, cursor_factory=cursor_factory)
        logger.debug("PostgreSQL connection opened from DSN")
        return conn

    host, database, user, password = config
    port = config.port or DEFAULT_PG_PORT
    conn = psycopg2.connect(
        host=host,
        port=port,
        dbname=database,
        user=user,
        password=password,
        cursor_factory=cursor_factory,
    )
    logger.debug("PostgreSQL connection opened: %s@%s:%s/%s", user, host, port, database)
    return conn


def connect(config: DatabaseConfig, backend: str = "postgresql") -> Any:
    """Open a connection described by *config*.

    For ``backend="sqlite"`` only ``config.database`` is used, as the file
    path; host and credentials are ignored.
    """
    if backend == "sqlite":
        return connect_sqlite(config.database)
    if backend == "postgresql":
        return connect_postgresql(config)
    raise ValueError(f"Unknown backend {backend!r}. Available: {list(BACKENDS)}")
