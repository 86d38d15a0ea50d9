"""Database engine, sessions and schema initialization"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from ..config import StoreConfig
from ..errors import StoreNotFoundError
from ..models import Base

logger = logging.getLogger(__name__)


def _install_sqlite_hooks(engine: Engine):
    """Enforce foreign keys and take the write lock when a transaction begins.

    pysqlite's own transaction handling is disabled so that every session
    transaction starts with BEGIN IMMEDIATE; a read-then-write sequence can
    then not interleave with another writer.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


class Database:
    """One SQLite database: engine, session factory and transaction scope"""

    def __init__(self, url: str, echo: bool = False, busy_timeout: float = 5.0):
        self.url = url
        self.echo = echo
        self.busy_timeout = busy_timeout
        self._engine = None
        self._session_factory = None

    def get_engine(self) -> Engine:
        """Get database engine"""
        if self._engine is None:
            self._engine = create_engine(
                self.url,
                echo=self.echo,
                connect_args={
                    "check_same_thread": False,  # SQLite specific
                    "timeout": self.busy_timeout,
                },
            )
            _install_sqlite_hooks(self._engine)
        return self._engine

    def get_session_factory(self) -> sessionmaker:
        """Get session factory"""
        if self._session_factory is None:
            self._session_factory = sessionmaker(
                autoflush=False,
                expire_on_commit=False,
                bind=self.get_engine(),
            )
        return self._session_factory

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """One transaction: commit on success, roll back and re-raise on error"""
        session = self.get_session_factory()()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def create_schema(self):
        """Create any missing tables and indexes"""
        Base.metadata.create_all(bind=self.get_engine())

    def dispose(self):
        """Release pooled connections"""
        if self._engine is not None:
            self._engine.dispose()
        self._engine = None
        self._session_factory = None


def open_database(config: StoreConfig) -> Database:
    """Open the database described by ``config``, creating it when allowed"""
    db_path = Path(config.db_path)

    if not db_path.exists():
        if not config.create_if_missing:
            raise StoreNotFoundError(f"Database not found: {db_path}")
        db_path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Initializing new database at %s", db_path)

    database = Database(config.database_url, echo=config.echo, busy_timeout=config.busy_timeout)
    database.create_schema()
    return database
