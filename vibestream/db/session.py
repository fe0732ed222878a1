# ============================================================================
# FILE: vibestream/db/session.py
# ============================================================================
"""Engine setup and the store handle shared by all services.

``DatabaseSessionManager`` is the unit-of-work boundary: ``atomic()`` yields a
session whose work commits on clean exit and rolls back on any exception.
SQLAlchemy failures surface as ``StoreError``; domain errors raised inside the
scope propagate unchanged after the rollback.

On SQLite every transaction starts with ``BEGIN IMMEDIATE`` so that two
writers never read the same max position; on server databases the services
lock the playlist row with ``SELECT ... FOR UPDATE`` instead.
"""

import logging
from contextlib import contextmanager
from typing import Callable, Iterator, TypeVar

from sqlalchemy import Engine, create_engine, event, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from vibestream.core.errors import StoreError
from vibestream.db.base import Base

logger = logging.getLogger(__name__)

T = TypeVar("T")


def create_db_engine(
    database_url: str,
    pool_size: int = 10,
    max_overflow: int = 10,
    timeout_seconds: float = 15.0,
    echo: bool = False,
) -> Engine:
    """Create an engine; SQLite gets FK enforcement and immediate transactions"""
    url = make_url(database_url)

    if url.get_backend_name() == "sqlite":
        engine = create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False, "timeout": timeout_seconds},
        )
        _configure_sqlite(engine)
        return engine

    return create_engine(
        database_url,
        echo=echo,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_timeout=timeout_seconds,
        pool_pre_ping=True,
        pool_recycle=3600,
    )


def _configure_sqlite(engine: Engine) -> None:
    # pysqlite defers BEGIN until the first write, which would let a
    # max(position) read escape the transaction. Take control of BEGIN.
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


class DatabaseSessionManager:
    """Store handle: owns the engine and hands out transactional scopes"""

    def __init__(self, engine: Engine):
        self.engine = engine
        self._session_factory = sessionmaker(
            bind=engine,
            expire_on_commit=False,
        )

    @classmethod
    def from_url(cls, database_url: str, **kwargs) -> "DatabaseSessionManager":
        return cls(create_db_engine(database_url, **kwargs))

    @property
    def dialect_name(self) -> str:
        return self.engine.dialect.name

    def create_all(self) -> None:
        """Create tables if they don't exist"""
        # Register models on Base.metadata
        import vibestream.db.models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def dispose(self) -> None:
        self.engine.dispose()

    @contextmanager
    def atomic(self) -> Iterator[Session]:
        """Unit of work: commit on success, rollback on any exception"""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except IntegrityError as e:
            session.rollback()
            logger.error(f"DB integrity error: {e}")
            raise StoreError("Integrity constraint violated", "commit") from e
        except OperationalError as e:
            session.rollback()
            logger.error(f"DB operational error: {e}")
            raise StoreError("Connection or operational error", "execute") from e
        except DBAPIError as e:
            session.rollback()
            logger.error(f"DB driver error: {e}")
            raise StoreError("Database driver error", "query") from e
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"SQLAlchemy error: {e}")
            raise StoreError("Database operation failed") from e
        except BaseException:
            session.rollback()
            raise
        finally:
            session.close()

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Read scope; nothing is committed"""
        with self.atomic() as session:
            try:
                yield session
            finally:
                # Reads never persist; drop anything a caller left pending
                session.rollback()

    def run_atomic(self, fn: Callable[[Session], T]) -> T:
        """Run ``fn`` inside one unit of work and return its result"""
        with self.atomic() as session:
            return fn(session)

    def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)"""
        try:
            with self.session() as db:
                db.execute(text("SELECT 1"))
            return True
        except StoreError as e:
            logger.error(f"DB health check failed: {e}")
            return False
