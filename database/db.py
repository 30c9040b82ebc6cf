"""Database connection, schema initialization and the transaction primitive."""

import asyncio
import sqlite3
from contextlib import AsyncExitStack
from pathlib import Path
from typing import Callable, Iterable, Optional, TypeVar

from config.settings import settings
from constants import Tables
from core.logger import logger

T = TypeVar("T")

SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS jobs (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        title TEXT NOT NULL,
        slug TEXT NOT NULL UNIQUE,
        status TEXT NOT NULL DEFAULT 'active',
        tags TEXT NOT NULL DEFAULT '[]',
        "order" INTEGER NOT NULL
    )
    """,
    'CREATE INDEX IF NOT EXISTS idx_jobs_order ON jobs ("order")',
    "CREATE INDEX IF NOT EXISTS idx_jobs_status ON jobs (status)",
    """
    CREATE TABLE IF NOT EXISTS candidates (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        email TEXT NOT NULL,
        job_id INTEGER,
        stage TEXT NOT NULL DEFAULT 'applied'
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_candidates_job_id ON candidates (job_id)",
    "CREATE INDEX IF NOT EXISTS idx_candidates_stage ON candidates (stage)",
    "CREATE INDEX IF NOT EXISTS idx_candidates_email ON candidates (email)",
    """
    CREATE TABLE IF NOT EXISTS timeline (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        candidate_id INTEGER NOT NULL,
        timestamp TEXT NOT NULL,
        event TEXT NOT NULL,
        stage TEXT,
        notes TEXT
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_timeline_candidate ON timeline (candidate_id, timestamp)",
    """
    CREATE TABLE IF NOT EXISTS assessments (
        job_id INTEGER PRIMARY KEY,
        questions TEXT NOT NULL DEFAULT '[]'
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS assessment_responses (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        candidate_id INTEGER,
        assessment_id INTEGER NOT NULL,
        responses TEXT NOT NULL DEFAULT '{}',
        submitted_at TEXT NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_responses_candidate ON assessment_responses (candidate_id)",
    "CREATE INDEX IF NOT EXISTS idx_responses_assessment ON assessment_responses (assessment_id)",
)


class Transaction:
    """Handle passed to a unit of work; only declared tables may be touched."""

    def __init__(self, conn: sqlite3.Connection, tables: Iterable[str]):
        self._conn = conn
        self.tables = frozenset(tables)

    def require(self, *tables: str) -> None:
        """Fail loudly when a unit of work reaches outside its declared tables."""
        missing = [t for t in tables if t not in self.tables]
        if missing:
            raise RuntimeError(
                f"Table(s) {', '.join(missing)} not declared for this transaction "
                f"(declared: {', '.join(sorted(self.tables))})"
            )

    def execute(self, sql: str, params=()) -> sqlite3.Cursor:
        return self._conn.execute(sql, params)

    def fetchone(self, sql: str, params=()) -> Optional[sqlite3.Row]:
        return self._conn.execute(sql, params).fetchone()

    def fetchall(self, sql: str, params=()) -> list:
        return self._conn.execute(sql, params).fetchall()


class Store:
    """
    Durable record store backed by SQLite.

    One instance owns one connection. Writes happen only inside
    ``transaction``; each transaction declares the tables it touches and
    holds a lock per table, so transactions over overlapping tables are
    serialized while disjoint ones proceed independently.
    """

    def __init__(self, path: Optional[str] = None):
        self.path = path or settings.database_path
        self._conn: Optional[sqlite3.Connection] = None
        self._locks = {table: asyncio.Lock() for table in Tables.ALL}

    def open(self) -> "Store":
        """Open the connection and create tables if needed."""
        if self._conn is not None:
            return self
        if self.path != ":memory:":
            Path(self.path).parent.mkdir(parents=True, exist_ok=True)
        # Autocommit mode: BEGIN/COMMIT are issued explicitly by transaction().
        conn = sqlite3.connect(self.path, isolation_level=None)
        conn.row_factory = sqlite3.Row
        self._conn = conn
        self.init_db()
        return self

    def init_db(self) -> None:
        """Initialize database with tables."""
        for statement in SCHEMA:
            self._conn.execute(statement)
        logger.info(f"Database initialized at: {self.path}")

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    async def transaction(self, tables: Iterable[str], work: Callable[[Transaction], T]) -> T:
        """
        Run ``work`` atomically against the declared tables.

        Args:
            tables: Names of the tables the unit of work reads or writes
            work: Synchronous callable receiving a Transaction

        Returns:
            Whatever ``work`` returns

        Raises:
            Any exception raised by ``work``; in that case nothing is written.
        """
        if self._conn is None:
            raise RuntimeError("Store is not open")
        names = sorted(set(tables))
        unknown = [name for name in names if name not in self._locks]
        if unknown:
            raise ValueError(f"Unknown table(s): {', '.join(unknown)}")

        # Sorted acquisition order keeps overlapping transactions deadlock-free.
        async with AsyncExitStack() as stack:
            for name in names:
                await stack.enter_async_context(self._locks[name])
            return self._run(names, work)

    def _run(self, names, work):
        tx = Transaction(self._conn, names)
        self._conn.execute("BEGIN IMMEDIATE")
        try:
            result = work(tx)
        except BaseException:
            self._conn.execute("ROLLBACK")
            raise
        self._conn.execute("COMMIT")
        return result

    async def count(self, table: str) -> int:
        """Number of rows in a table."""
        if table not in self._locks:
            raise ValueError(f"Unknown table: {table}")
        row = await self.transaction([table], lambda tx: tx.fetchone(f"SELECT COUNT(*) FROM {table}"))
        return row[0]

    async def clear(self, reset_autoincrement: bool = True) -> None:
        """Clear all rows from all tables without dropping them."""

        def work(tx: Transaction):
            for table in Tables.ALL:
                tx.execute(f"DELETE FROM {table}")
            if reset_autoincrement:
                if tx.fetchone("SELECT name FROM sqlite_master WHERE type='table' AND name='sqlite_sequence'"):
                    for table in Tables.ALL:
                        tx.execute("DELETE FROM sqlite_sequence WHERE name = ?", (table,))

        await self.transaction(Tables.ALL, work)
        logger.info("Database cleared (tables kept).")
