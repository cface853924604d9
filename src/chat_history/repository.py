"""Chat History Repository

Session registration and transcript storage. The concrete store is picked
once from configuration:

  - PostgresSessionStore: pooled PostgreSQL connections (production)
  - SqliteSessionStore: single local file (development, tests)
  - NullSessionStore: no database configured; every call is a no-op

Related classes: ChatMessage (models.py)
"""

from __future__ import annotations

import logging
import sqlite3
import uuid
from abc import ABC, abstractmethod
from contextlib import closing
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional

import psycopg
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from src.workflow_relay.config import DatabaseConfig
from src.workflow_relay.exceptions import StorageError

from .models import ChatMessage, Role

logger = logging.getLogger(__name__)


def _iso(value: Any) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


class SessionStore(ABC):
    """Interface shared by every store variant."""

    @abstractmethod
    def ensure_session(self, session_id: Optional[str] = None) -> Optional[str]:
        """Register a session row if it does not exist yet

        Args:
            session_id: client supplied id; a UUID4 is generated when empty

        Returns:
            The resolved session id. Write failures are logged, not raised.
        """
        pass

    @abstractmethod
    def list_messages(self, session_id: Optional[str]) -> List[ChatMessage]:
        """Transcript of a session, oldest first

        Raises:
            StorageError: the query failed
        """
        pass

    @abstractmethod
    def append_message(self, session_id: str, role: Role, content: str) -> None:
        """Store one message. Write failures are logged, not raised."""
        pass

    def close(self) -> None:
        """Release connections held by the store."""


class NullSessionStore(SessionStore):
    """Store used when no database is configured."""

    def ensure_session(self, session_id: Optional[str] = None) -> Optional[str]:
        return session_id

    def list_messages(self, session_id: Optional[str]) -> List[ChatMessage]:
        return []

    def append_message(self, session_id: str, role: Role, content: str) -> None:
        return None


class SqliteSessionStore(SessionStore):
    """SQLite-backed store (local file, one connection per call)."""

    def __init__(self, db_path: Path, create_schema: bool = True):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        if create_schema:
            self._initialize()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _initialize(self) -> None:
        with closing(self._connect()) as conn, conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS chat_sessions (
                    id TEXT PRIMARY KEY,
                    created_at TEXT NOT NULL
                )
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS messages (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    session_id TEXT NOT NULL REFERENCES chat_sessions(id),
                    role TEXT NOT NULL,
                    content TEXT NOT NULL,
                    created_at TEXT NOT NULL
                )
                """
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_messages_session "
                "ON messages(session_id, created_at)"
            )
            conn.commit()

    @staticmethod
    def _now() -> str:
        return datetime.now(timezone.utc).isoformat(timespec="microseconds")

    def ensure_session(self, session_id: Optional[str] = None) -> Optional[str]:
        resolved = session_id or str(uuid.uuid4())
        try:
            with closing(self._connect()) as conn, conn:
                conn.execute(
                    "INSERT INTO chat_sessions (id, created_at) VALUES (?, ?) "
                    "ON CONFLICT (id) DO NOTHING",
                    (resolved, self._now()),
                )
                conn.commit()
        except sqlite3.Error as exc:
            logger.error("Database error in ensure_session: %s", exc)
        return resolved

    def list_messages(self, session_id: Optional[str]) -> List[ChatMessage]:
        if not session_id:
            return []
        try:
            with closing(self._connect()) as conn, conn:
                rows = conn.execute(
                    """
                    SELECT role, content, created_at
                    FROM messages
                    WHERE session_id = ?
                    ORDER BY created_at ASC, id ASC
                    """,
                    (session_id,),
                ).fetchall()
        except sqlite3.Error as exc:
            raise StorageError(f"Failed to read messages: {exc}") from exc
        return [
            ChatMessage(role=row["role"], content=row["content"], created_at=row["created_at"])
            for row in rows
        ]

    def append_message(self, session_id: str, role: Role, content: str) -> None:
        try:
            with closing(self._connect()) as conn, conn:
                conn.execute(
                    "INSERT INTO messages (session_id, role, content, created_at) "
                    "VALUES (?, ?, ?, ?)",
                    (session_id, role, content, self._now()),
                )
                conn.commit()
        except sqlite3.Error as exc:
            logger.error("Database error in append_message: %s", exc)


class PostgresSessionStore(SessionStore):
    """PostgreSQL store on a psycopg connection pool (safe across threads)."""

    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    @classmethod
    def from_config(cls, config: DatabaseConfig) -> "PostgresSessionStore":
        pool = ConnectionPool(
            conninfo=config.conninfo(),
            min_size=config.pool_min_size,
            max_size=config.pool_max_size,
            kwargs={"row_factory": dict_row},
            open=True,
        )
        store = cls(pool)
        if config.create_schema:
            store.initialize()
        return store

    def initialize(self) -> None:
        """Create the tables when they are missing."""
        try:
            with self._pool.connection() as conn:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS chat_sessions (
                        id TEXT PRIMARY KEY,
                        created_at TIMESTAMPTZ NOT NULL DEFAULT now()
                    )
                    """
                )
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS messages (
                        id BIGSERIAL PRIMARY KEY,
                        session_id TEXT NOT NULL REFERENCES chat_sessions(id),
                        role TEXT NOT NULL,
                        content TEXT NOT NULL,
                        created_at TIMESTAMPTZ NOT NULL DEFAULT clock_timestamp()
                    )
                    """
                )
                conn.execute(
                    "CREATE INDEX IF NOT EXISTS idx_messages_session "
                    "ON messages(session_id, created_at)"
                )
        except psycopg.Error as exc:
            logger.error("Failed to initialize chat schema: %s", exc)

    def ensure_session(self, session_id: Optional[str] = None) -> Optional[str]:
        resolved = session_id or str(uuid.uuid4())
        try:
            with self._pool.connection() as conn:
                conn.execute(
                    "INSERT INTO chat_sessions (id) VALUES (%s) ON CONFLICT (id) DO NOTHING",
                    (resolved,),
                )
        except psycopg.Error as exc:
            logger.error("Database error in ensure_session: %s", exc)
        return resolved

    def list_messages(self, session_id: Optional[str]) -> List[ChatMessage]:
        if not session_id:
            return []
        try:
            with self._pool.connection() as conn:
                rows = conn.execute(
                    """
                    SELECT role, content, created_at
                    FROM messages
                    WHERE session_id = %s
                    ORDER BY created_at ASC, id ASC
                    """,
                    (session_id,),
                ).fetchall()
        except psycopg.Error as exc:
            raise StorageError(f"Failed to read messages: {exc}") from exc
        return [
            ChatMessage(role=row["role"], content=row["content"], created_at=_iso(row["created_at"]))
            for row in rows
        ]

    def append_message(self, session_id: str, role: Role, content: str) -> None:
        try:
            with self._pool.connection() as conn:
                conn.execute(
                    "INSERT INTO messages (session_id, role, content) VALUES (%s, %s, %s)",
                    (session_id, role, content),
                )
        except psycopg.Error as exc:
            logger.error("Database error in append_message: %s", exc)

    def close(self) -> None:
        self._pool.close()


def create_session_store(config: DatabaseConfig) -> SessionStore:
    """Build the store matching the configured backend."""
    backend = config.backend
    if backend == "postgres":
        logger.info("Using PostgreSQL session store at %s:%s", config.host, config.port)
        return PostgresSessionStore.from_config(config)
    if backend == "sqlite":
        logger.info("Using SQLite session store at %s", config.sqlite_path)
        return SqliteSessionStore(Path(config.sqlite_path), create_schema=config.create_schema)
    logger.info("Database credentials not found, running without database support")
    return NullSessionStore()
