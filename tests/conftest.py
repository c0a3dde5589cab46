"""
Pytest configuration and shared fixtures.

This module provides:
- Environment variable setup for tests
- An in-memory SQLite engine with the schema created per test
- A Store and ComicBookRepository bound to that engine
- Factories for small comic book graphs
"""

import os
from datetime import date

import pytest


# Set test environment variables BEFORE any imports
# This must happen first to ensure settings load with test values
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["ENABLE_DB_CREATE_ALL"] = "true"
os.environ["SQL_TRACE"] = "false"
os.environ["LOG_LEVEL"] = "DEBUG"


@pytest.fixture(scope="function")
def engine():
    """
    Provide a fresh in-memory engine with all tables created.

    Dropped and disposed after the test.
    """
    from comic_library.core.database import get_engine
    from comic_library.models.base import Base
    from comic_library import models  # noqa: F401 - Import to register models

    engine = get_engine("sqlite:///:memory:", sql_trace=False)
    Base.metadata.create_all(engine)

    yield engine

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    """sessionmaker bound to the test engine, configured like the library's."""
    from sqlalchemy.orm import sessionmaker

    return sessionmaker(engine, expire_on_commit=False, autoflush=False)


@pytest.fixture
def store(session_factory):
    """Store bound to the test engine."""
    from comic_library.core.unit_of_work import Store

    return Store(session_factory)


@pytest.fixture
def repo(store):
    """ComicBookRepository bound to the test engine."""
    from comic_library.repositories.comic_book import ComicBookRepository

    return ComicBookRepository(store)


@pytest.fixture
def executed_sql(engine):
    """
    Record every SQL statement the test engine executes.

    Yields:
        List of statement strings, in execution order
    """
    from sqlalchemy import event

    statements = []

    def _record(conn, cursor, statement, parameters, context, executemany):  # noqa: ANN001
        statements.append(statement.strip())

    event.listen(engine, "before_cursor_execute", _record)
    yield statements
    event.remove(engine, "before_cursor_execute", _record)


@pytest.fixture
def count_rows(session_factory):
    """
    Count rows of a model in the test database.

    Returns:
        Callable taking a model class and returning its row count
    """
    from sqlalchemy import func, select

    def _count(model) -> int:
        with session_factory() as session:
            return session.execute(select(func.count()).select_from(model)).scalar_one()

    return _count


@pytest.fixture
def library(session_factory):
    """
    Seed two series, two artists and two roles.

    Returns:
        Dict of the persisted (detached) instances keyed by name
    """
    from comic_library.models import Artist, Role, Series

    entities = {
        "alpha": Series(title="Alpha"),
        "beta": Series(title="Beta"),
        "lee": Artist(name="Stan Lee"),
        "ditko": Artist(name="Steve Ditko"),
        "writer": Role(name="Writer"),
        "penciller": Role(name="Penciller"),
    }
    with session_factory() as session:
        session.add_all(entities.values())
        session.commit()

    return entities


@pytest.fixture
def make_comic_book():
    """
    Build a transient ComicBook.

    Returns:
        Callable accepting series and optional scalar overrides
    """
    from comic_library.models import ComicBook

    def _make(series, issue_number=1, **overrides) -> ComicBook:
        fields = {
            "issue_number": issue_number,
            "description": f"Issue {issue_number}",
            "published_on": date(1991, 7, 1),
            "average_rating": 7.5,
        }
        fields.update(overrides)
        return ComicBook(series=series, **fields)

    return _make
