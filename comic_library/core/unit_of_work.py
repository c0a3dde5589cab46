"""
Unit of work and store.

A Store opens one UnitOfWork per repository call. The unit of work wraps a
SQLAlchemy Session: entities are tracked under an explicit persistence intent
and every tracked change is applied atomically on commit.

Intent to statement mapping:
- NEW: session.add(), the flush emits the INSERT
- UNCHANGED: attached as already persistent, no statement at all
- OVERWRITE: one UPDATE of every non-key column addressed by primary key
- DELETE_BY_KEY: one DELETE addressed by primary key
"""

from contextlib import contextmanager
from enum import Enum
from typing import Any, Iterator, List, Optional

from sqlalchemy import and_, delete, inspect, update
from sqlalchemy.orm import Session, make_transient_to_detached, sessionmaker
from sqlalchemy.sql import Executable

from comic_library.core.logging_config import get_logger, log_with_context

logger = get_logger(__name__)


class PersistenceIntent(str, Enum):
    """What the unit of work must do with a tracked entity on commit."""

    NEW = "new"
    UNCHANGED = "unchanged"
    OVERWRITE = "overwrite"
    DELETE_BY_KEY = "delete_by_key"


class UnitOfWork:
    """
    Session-scoped collection of tracked entities and their intents.

    Attributes:
        session: SQLAlchemy session owned by this unit of work
        rowcounts: Rows affected by each OVERWRITE / DELETE_BY_KEY statement
            of the last commit, in tracking order
    """

    def __init__(self, session: Session):
        self.session = session
        self.rowcounts: List[int] = []
        self._statements: List[Executable] = []

    def track(self, entity: Any, intent: PersistenceIntent) -> Any:
        """
        Register an entity for the next commit under the given intent.

        Args:
            entity: Mapped instance
            intent: Persistence intent

        Returns:
            The instance actually tracked. For UNCHANGED this is an instance
            already present in the session when one with the same identity
            was tracked earlier; callers should point references at it.

        Raises:
            ValueError: If the intent needs a primary key the entity lacks,
                or the intent is unknown
        """
        log_with_context(
            logger,
            "debug",
            "Tracking entity",
            entity=type(entity).__name__,
            intent=getattr(intent, "value", str(intent)),
        )

        if intent is PersistenceIntent.NEW:
            # An id of 0 means unassigned; the store assigns it on insert
            if getattr(entity, "id", None) == 0:
                entity.id = None
            self.session.add(entity)
            return entity

        if intent is PersistenceIntent.UNCHANGED:
            return self._attach_unchanged(entity)

        if intent is PersistenceIntent.OVERWRITE:
            self._statements.append(self._overwrite_statement(entity))
            return entity

        if intent is PersistenceIntent.DELETE_BY_KEY:
            self._statements.append(self._delete_statement(entity))
            return entity

        raise ValueError(f"Unknown persistence intent: {intent!r}")

    def query(self, statement: Executable) -> List[Any]:
        """
        Execute a select() and return every entity it yields.

        Args:
            statement: ORM select statement (filters, eager loads, ordering)

        Returns:
            List of entities, de-duplicated for joined eager loads
        """
        return list(self.session.execute(statement).unique().scalars().all())

    def first(self, statement: Executable) -> Optional[Any]:
        """
        Execute a select() expected to match at most one entity.

        Returns:
            The entity, or None when nothing matches
        """
        return self.session.execute(statement).unique().scalar_one_or_none()

    def scalar(self, statement: Executable) -> Any:
        """Execute an aggregate select() and return its single value."""
        return self.session.execute(statement).scalar_one()

    def commit(self) -> None:
        """
        Apply every tracked change atomically.

        Pending inserts are flushed first, then the OVERWRITE and
        DELETE_BY_KEY statements run in tracking order, all in one
        transaction.

        Raises:
            sqlalchemy.exc.SQLAlchemyError: Any store failure, re-raised
                after the transaction is rolled back
        """
        self.rowcounts = []
        try:
            self.session.flush()
            for statement in self._statements:
                result = self.session.execute(statement)
                self.rowcounts.append(result.rowcount)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        finally:
            self._statements = []

    def _attach_unchanged(self, entity: Any) -> Any:
        state = inspect(entity)
        if state.persistent and state.session is self.session:
            return entity

        # Save-update cascades from earlier tracked references can have
        # pulled the entity in as pending; it must never be inserted
        if state.pending:
            self.session.expunge(entity)

        key = self.session.identity_key(instance=entity)
        existing = self.session.identity_map.get(key)
        if existing is not None:
            return existing

        if state.key is None:
            # Resets attribute history so the flush sees nothing to write
            make_transient_to_detached(entity)
        self.session.add(entity)
        return entity

    def _primary_key_clause(self, entity: Any):
        mapper = inspect(type(entity))
        identity = mapper.primary_key_from_instance(entity)
        if any(value is None for value in identity):
            raise ValueError(
                f"{type(entity).__name__} needs a primary key, got {identity!r}"
            )
        return and_(*(column == value for column, value in zip(mapper.primary_key, identity)))

    def _overwrite_statement(self, entity: Any) -> Executable:
        mapper = inspect(type(entity))
        values = {
            prop.key: getattr(entity, prop.key)
            for prop in mapper.column_attrs
            if not any(column.primary_key for column in prop.columns)
        }
        return (
            update(type(entity))
            .where(self._primary_key_clause(entity))
            .values(**values)
            .execution_options(synchronize_session=False)
        )

    def _delete_statement(self, entity: Any) -> Executable:
        return (
            delete(type(entity))
            .where(self._primary_key_clause(entity))
            .execution_options(synchronize_session=False)
        )


class Store:
    """
    Opens session-scoped units of work.

    Attributes:
        session_factory: sessionmaker producing one Session per unit of work
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    @contextmanager
    def open_unit_of_work(self) -> Iterator[UnitOfWork]:
        """
        Open a unit of work and release it on every exit path.

        Yields:
            UnitOfWork bound to a fresh Session

        Example:
            with store.open_unit_of_work() as uow:
                uow.track(comic_book, PersistenceIntent.NEW)
                uow.commit()
        """
        session = self.session_factory()
        try:
            yield UnitOfWork(session)
        finally:
            session.close()
