"""
Comic book repository for library queries and comic book CRUD.

Every public method opens its own unit of work and releases it before
returning, so entities come back detached with only the relationships
each query eager-loads.
"""

from typing import List, Optional

from sqlalchemy import func, inspect, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import contains_eager, joinedload, selectinload
from sqlalchemy.orm.attributes import NO_VALUE

from comic_library.core.database import store as default_store
from comic_library.core.logging_config import get_logger, log_with_context
from comic_library.core.unit_of_work import Store, UnitOfWork
from comic_library.models.artist import Artist, Role
from comic_library.models.comic_book import ComicBook, ComicBookArtist
from comic_library.models.series import Series
from comic_library.repositories.graph import (
    plan_delete,
    plan_insert,
    plan_update,
    replace_reference,
)

logger = get_logger(__name__)


class ComicBookRepository:
    """
    Repository for comic book library data access.

    Provides read queries over series, artists, roles and comic books,
    and graph-aware writes for comic books.

    Attributes:
        store: Store that opens one unit of work per call
    """

    def __init__(self, store: Optional[Store] = None):
        """
        Initialize repository with a store.

        Args:
            store: Store to use (defaults to the store bound to the
                configured database)
        """
        self.store = store or default_store

    def count_comic_books(self) -> int:
        """
        Return the number of comic books.

        Example:
            >>> repo.count_comic_books()
            9
        """
        with self.store.open_unit_of_work() as uow:
            return uow.scalar(select(func.count()).select_from(ComicBook))

    def list_comic_books(self) -> List[ComicBook]:
        """
        Return every comic book with its series loaded.

        Ordered by series title, then issue number (numeric), then id.

        Returns:
            List of ComicBook instances; `artists` is not loaded
        """
        stmt = (
            select(ComicBook)
            .join(ComicBook.series)
            .options(contains_eager(ComicBook.series))
            .order_by(Series.title, ComicBook.issue_number, ComicBook.id)
        )
        with self.store.open_unit_of_work() as uow:
            return uow.query(stmt)

    def get_comic_book(self, comic_book_id: int) -> Optional[ComicBook]:
        """
        Retrieve a fully populated comic book.

        Loads the series and every artist assignment with its artist and role.

        Args:
            comic_book_id: Comic book id

        Returns:
            ComicBook instance if found, None otherwise
        """
        stmt = (
            select(ComicBook)
            .options(
                joinedload(ComicBook.series),
                selectinload(ComicBook.artists).joinedload(ComicBookArtist.artist),
                selectinload(ComicBook.artists).joinedload(ComicBookArtist.role),
            )
            .where(ComicBook.id == comic_book_id)
        )
        with self.store.open_unit_of_work() as uow:
            return uow.first(stmt)

    def list_series(self) -> List[Series]:
        """Return every series ordered by title."""
        with self.store.open_unit_of_work() as uow:
            return uow.query(select(Series).order_by(Series.title))

    def get_series(self, series_id: int) -> Optional[Series]:
        """
        Retrieve a series by id.

        Returns:
            Series instance if found, None otherwise
        """
        with self.store.open_unit_of_work() as uow:
            return uow.first(select(Series).where(Series.id == series_id))

    def list_artists(self) -> List[Artist]:
        """Return every artist ordered by name."""
        with self.store.open_unit_of_work() as uow:
            return uow.query(select(Artist).order_by(Artist.name))

    def list_roles(self) -> List[Role]:
        """Return every role ordered by name."""
        with self.store.open_unit_of_work() as uow:
            return uow.query(select(Role).order_by(Role.name))

    def add_comic_book(self, comic_book: ComicBook) -> ComicBook:
        """
        Insert a comic book together with the new entities in its graph.

        A series, artist or role that already has an id is referenced by
        that id and never inserted again; one without an id is inserted
        alongside the comic book. Everything commits in one transaction.

        Args:
            comic_book: Comic book graph to insert

        Returns:
            The same comic book, with `id` assigned by the store

        Raises:
            IntegrityError: If a referenced id does not exist or a required
                column is missing
            SQLAlchemyError: Any other store failure

        Example:
            >>> bone = repo.get_series(1)
            >>> comic = ComicBook(series=bone, issue_number=2)
            >>> comic.add_artist(Artist(id=1), Role(id=1))
            >>> repo.add_comic_book(comic).id
            10
        """
        plan = plan_insert(comic_book)
        with self.store.open_unit_of_work() as uow:
            for entity, intent in plan:
                tracked = uow.track(entity, intent)
                if tracked is not entity:
                    replace_reference(comic_book, entity, tracked)
            self._commit(uow, "add_comic_book", comic_book)

        log_with_context(
            logger,
            "info",
            "Comic book added",
            operation="add_comic_book",
            comic_book_id=comic_book.id,
        )
        return comic_book

    def update_comic_book(self, comic_book: ComicBook) -> None:
        """
        Overwrite every column of an existing comic book row.

        Issues a single UPDATE addressed by id without reading the row
        first. Every column is written from `comic_book`, changed or not;
        the last writer wins. `series_id` is written as supplied; a loaded
        series reference only fills it in when it is unset or was the only
        one of the two reassigned. Artist assignments are left untouched.

        Args:
            comic_book: Comic book carrying the id and the full new state

        Raises:
            ValueError: If the comic book has no positive id
            IntegrityError: If series_id does not reference a series
            SQLAlchemyError: Any other store failure
        """
        plan = plan_update(comic_book)
        self._sync_series_id(comic_book)
        with self.store.open_unit_of_work() as uow:
            for entity, intent in plan:
                uow.track(entity, intent)
            self._commit(uow, "update_comic_book", comic_book)
            rowcount = uow.rowcounts[0]

        if rowcount == 0:
            log_with_context(
                logger,
                "warning",
                "Comic book update matched no row",
                operation="update_comic_book",
                comic_book_id=comic_book.id,
            )
            return

        log_with_context(
            logger,
            "info",
            "Comic book updated",
            operation="update_comic_book",
            comic_book_id=comic_book.id,
        )

    def delete_comic_book(self, comic_book_id: int) -> None:
        """
        Delete a comic book by id without reading it first.

        Its artist assignments are removed by the database cascade.
        Deleting an id that does not exist is a no-op.

        Args:
            comic_book_id: Comic book id

        Raises:
            ValueError: If comic_book_id is not positive
            SQLAlchemyError: Any store failure
        """
        plan = plan_delete(comic_book_id)
        with self.store.open_unit_of_work() as uow:
            for entity, intent in plan:
                uow.track(entity, intent)
            self._commit(uow, "delete_comic_book", plan[0][0])
            rowcount = uow.rowcounts[0]

        log_with_context(
            logger,
            "info",
            "Comic book deleted" if rowcount else "Comic book delete matched no row",
            operation="delete_comic_book",
            comic_book_id=comic_book_id,
            rowcount=rowcount,
        )

    def _commit(self, uow: UnitOfWork, operation: str, comic_book: ComicBook) -> None:
        try:
            uow.commit()
        except SQLAlchemyError:
            logger.error(
                "Comic book write failed",
                extra={"operation": operation, "comic_book_id": comic_book.id},
                exc_info=True,
            )
            raise

    @staticmethod
    def _sync_series_id(comic_book: ComicBook) -> None:
        # An explicitly set series_id is written as supplied; the series
        # reference only fills it in when it is unset or the reference alone changed
        attrs = inspect(comic_book).attrs
        series = attrs.series.loaded_value
        if series is NO_VALUE or series is None or not series.is_persisted:
            return
        if comic_book.series_id is None or (
            attrs.series.history.has_changes() and not attrs.series_id.history.has_changes()
        ):
            comic_book.series_id = series.id
