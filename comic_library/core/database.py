"""
Database configuration and session management.

Provides SQLAlchemy engine setup, the session factory, the default Store
used by repositories, and the SQL trace hook used for diagnostics.
"""

import logging
import time
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import Engine, create_engine, event, text
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from comic_library.core.config import settings
from comic_library.core.unit_of_work import Store
from comic_library.models.base import Base

sql_logger = logging.getLogger("comic_library.sql")


def install_sql_trace(engine: Engine) -> None:
    """
    Log every statement the engine executes.

    Each statement is logged at DEBUG on the "comic_library.sql" logger with
    its parameters, duration and affected row count. Purely observational.

    Args:
        engine: Engine to instrument
    """

    @event.listens_for(engine, "before_cursor_execute")
    def _start_timer(conn, cursor, statement, parameters, context, executemany):  # noqa: ANN001
        conn.info.setdefault("query_start_time", []).append(time.perf_counter())

    @event.listens_for(engine, "after_cursor_execute")
    def _log_statement(conn, cursor, statement, parameters, context, executemany):  # noqa: ANN001
        started = conn.info["query_start_time"].pop()
        sql_logger.debug(
            statement,
            extra={
                "statement": statement,
                "parameters": parameters,
                "duration_ms": round((time.perf_counter() - started) * 1000, 3),
                "rowcount": cursor.rowcount,
            },
        )


def get_engine(database_url: Optional[str] = None, sql_trace: Optional[bool] = None) -> Engine:
    """
    Create and configure the SQLAlchemy engine.

    For SQLite:
    - Uses StaticPool (one connection shared by every session)
    - Enables check_same_thread=False so sessions may be opened from any thread
    - Enables foreign key enforcement on every connection
    - Sets WAL mode for file databases

    Args:
        database_url: Connection URL (defaults to settings.database_url)
        sql_trace: Install the SQL trace hook (defaults to settings.sql_trace)

    Returns:
        Configured Engine instance
    """
    url = database_url or settings.database_url
    trace = settings.sql_trace if sql_trace is None else sql_trace
    is_sqlite = url.startswith("sqlite")

    # SQLite-specific connection arguments (noop for other drivers)
    connect_args: dict = {"check_same_thread": False} if is_sqlite else {}

    engine_kwargs = {
        "echo": False,  # statement logging goes through install_sql_trace
        "connect_args": connect_args,
    }

    if is_sqlite:
        engine_kwargs["poolclass"] = StaticPool

    engine = create_engine(url, **engine_kwargs)

    # ON DELETE CASCADE on comic_book_artists depends on foreign_keys=ON
    if is_sqlite:
        in_memory = ":memory:" in url or url.rstrip("/") in ("sqlite:", "sqlite+pysqlite:")

        @event.listens_for(engine, "connect")
        def _set_sqlite_pragma(dbapi_connection, connection_record):  # noqa: ANN001
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            if not in_memory:
                cursor.execute("PRAGMA journal_mode=WAL")
            cursor.close()

    if trace:
        install_sql_trace(engine)

    return engine


# Global engine instance
# Created once at import and reused
engine = get_engine()


# Session factory
# Objects stay usable after commit so callers can read generated ids
session_maker = sessionmaker(
    engine,
    class_=Session,
    expire_on_commit=False,
    autoflush=False,
)


# Default store used by ComicBookRepository()
store = Store(session_maker)


def init_db(bind: Optional[Engine] = None) -> None:
    """
    Initialize the database schema.

    Schema migration is managed outside this package. To allow create_all
    for local development and tests, set ENABLE_DB_CREATE_ALL=1.

    Args:
        bind: Engine to create tables on (defaults to the global engine)
    """
    # Import models to ensure metadata is populated before create_all()
    from comic_library import models  # noqa: F401

    if settings.enable_db_create_all:
        Base.metadata.create_all(bind or engine)


def drop_db(bind: Optional[Engine] = None) -> None:
    """
    Drop every table known to the model metadata.

    Args:
        bind: Engine to drop tables on (defaults to the global engine)
    """
    from comic_library import models  # noqa: F401

    Base.metadata.drop_all(bind or engine)


def close_db() -> None:
    """
    Close the database connection pool.

    Should be called at shutdown to cleanly close all connections.
    """
    engine.dispose()


@contextmanager
def get_session() -> Iterator[Session]:
    """
    Session context manager for scripts and maintenance tasks.

    Commits on success, rolls back and re-raises on error, and always
    closes the session.

    Yields:
        Session instance for database operations

    Example:
        with get_session() as session:
            session.add(Series(title="Bone"))
    """
    session = session_maker()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


class DatabaseHealthCheck:
    """
    Database health check utilities.

    Provides methods to verify database connectivity and readiness.
    """

    @staticmethod
    def check_connection() -> bool:
        """
        Check if database connection is healthy.

        Unlike the repository, this never raises: any failure is logged
        as a warning and reported as False.

        Returns:
            True if database is reachable, False otherwise
        """
        try:
            with session_maker() as session:
                session.execute(text("SELECT 1"))
                return True
        except Exception:
            sql_logger.warning("Database health check failed", exc_info=True)
            return False

    @staticmethod
    def get_database_info() -> dict:
        """
        Get database information for monitoring.

        Returns:
            Dictionary with database metadata
        """
        return {
            "url": engine.url.render_as_string(hide_password=True),
            "dialect": engine.dialect.name,
            "sql_trace": settings.sql_trace,
        }
