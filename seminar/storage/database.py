"""Connection holder for the seminar's SQLite file."""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

logger = logging.getLogger(__name__)

MEMORY = ":memory:"

# Tables holding committee data, in the order ``table_counts`` reports them.
DATA_TABLES = (
    "presenters",
    "evaluators",
    "sessions",
    "evaluations",
    "poster_boards",
    "awards",
)


class Database:
    """One lazily opened ``sqlite3`` connection shared by every caller.

    File databases run in WAL mode; ``":memory:"`` gives a private
    database that vanishes on ``close``. Foreign keys are always on.
    """

    def __init__(self, path: str | Path):
        self.path: Path | None = None if str(path) == MEMORY else Path(path).expanduser().resolve()
        self._conn: sqlite3.Connection | None = None

    @property
    def is_memory(self) -> bool:
        return self.path is None

    def connect(self) -> sqlite3.Connection:
        if self._conn is None:
            if self.path is not None:
                self.path.parent.mkdir(parents=True, exist_ok=True)
            # SqliteRepository serializes access with its own lock.
            conn = sqlite3.connect(str(self.path or MEMORY), check_same_thread=False)
            conn.row_factory = sqlite3.Row
            if self.path is not None:
                conn.execute("PRAGMA journal_mode = WAL")
            conn.execute("PRAGMA foreign_keys = ON")
            conn.execute("PRAGMA busy_timeout = 5000")
            self._conn = conn
            logger.debug("Opened seminar database %s", self)
        return self._conn

    @property
    def conn(self) -> sqlite3.Connection:
        return self.connect()

    def close(self) -> None:
        if self._conn is None:
            return
        self._conn.close()
        self._conn = None
        logger.debug("Closed seminar database %s", self)

    @contextmanager
    def transaction(self) -> Generator[sqlite3.Cursor, None, None]:
        """Commit the block's statements together, or roll all back."""
        conn = self.connect()
        cursor = conn.cursor()
        try:
            yield cursor
        except Exception:
            conn.rollback()
            raise
        conn.commit()

    def execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        return self.conn.execute(sql, params)

    def executescript(self, sql: str) -> None:
        self.conn.executescript(sql)

    def fetchone(self, sql: str, params: tuple = ()) -> sqlite3.Row | None:
        return self.execute(sql, params).fetchone()

    def fetchall(self, sql: str, params: tuple = ()) -> list[sqlite3.Row]:
        return self.execute(sql, params).fetchall()

    def schema_version(self) -> int:
        """Highest applied migration, 0 for a fresh file."""
        try:
            row = self.fetchone("SELECT MAX(version) AS v FROM _schema_version")
        except sqlite3.OperationalError:
            return 0
        return row["v"] or 0

    def table_counts(self) -> dict[str, int]:
        """Row count per committee table; missing tables count as 0."""
        counts = {}
        for table in DATA_TABLES:
            try:
                counts[table] = self.fetchone(f"SELECT COUNT(*) AS n FROM {table}")["n"]
            except sqlite3.OperationalError:
                counts[table] = 0
        return counts

    def __enter__(self) -> Database:
        self.connect()
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"Database({self.path or MEMORY})"
