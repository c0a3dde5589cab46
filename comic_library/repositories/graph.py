"""
Persistence planning for comic book graphs.

Each write operation classifies the entities it touches into a
PersistenceIntent before any statement is generated. The traversal is
fixed at two hops: comic book -> series, comic book -> assignment ->
artist and role.
"""

from typing import Any, List, Optional, Tuple

from comic_library.core.unit_of_work import PersistenceIntent
from comic_library.models.comic_book import ComicBook

PlannedEntity = Tuple[Any, PersistenceIntent]


def classify_reference(entity: Any) -> PersistenceIntent:
    """
    Classify a related entity referenced from a comic book.

    Returns:
        UNCHANGED when the reference already carries a store-assigned id,
        NEW otherwise
    """
    if entity.id is not None and entity.id > 0:
        return PersistenceIntent.UNCHANGED
    return PersistenceIntent.NEW


def plan_insert(comic_book: ComicBook) -> List[PlannedEntity]:
    """
    Plan the insert of a comic book and every new entity in its graph.

    The comic book and each of its assignments are NEW. The series, and
    the artist and role of each assignment, are classified independently
    with classify_reference(). UNCHANGED references come first so they are
    attached as persistent before any insert cascades reach them.

    Args:
        comic_book: Comic book graph to insert

    Returns:
        Ordered (entity, intent) pairs, each entity listed once
    """
    unchanged: List[PlannedEntity] = []
    new: List[PlannedEntity] = [(comic_book, PersistenceIntent.NEW)]
    seen = {id(comic_book)}

    def visit(entity: Optional[Any], intent: Optional[PersistenceIntent] = None) -> None:
        if entity is None or id(entity) in seen:
            return
        seen.add(id(entity))
        intent = intent or classify_reference(entity)
        if intent is PersistenceIntent.UNCHANGED:
            unchanged.append((entity, intent))
        else:
            new.append((entity, intent))

    visit(comic_book.series)
    for assignment in comic_book.artists:
        visit(assignment, PersistenceIntent.NEW)
        visit(assignment.artist)
        visit(assignment.role)

    return unchanged + new


def plan_update(comic_book: ComicBook) -> List[PlannedEntity]:
    """
    Plan a full overwrite of a comic book row.

    Raises:
        ValueError: If the comic book has no positive id
    """
    if not comic_book.is_persisted:
        raise ValueError(f"Cannot update a comic book without an id (got {comic_book.id!r})")
    return [(comic_book, PersistenceIntent.OVERWRITE)]


def plan_delete(comic_book_id: int) -> List[PlannedEntity]:
    """
    Plan the delete of a comic book from its id alone.

    A stand-in ComicBook carrying only the id is deleted by key.

    Raises:
        ValueError: If the id is not positive
    """
    stand_in = ComicBook(id=comic_book_id)
    if not stand_in.is_persisted:
        raise ValueError(f"Cannot delete a comic book without an id (got {comic_book_id!r})")
    return [(stand_in, PersistenceIntent.DELETE_BY_KEY)]


def replace_reference(comic_book: ComicBook, stale: Any, current: Any) -> None:
    """
    Point every reference to `stale` in the graph at `current` instead.

    Used when the unit of work already tracks another instance with the
    same identity as `stale`.
    """
    if comic_book.series is stale:
        comic_book.series = current
    for assignment in comic_book.artists:
        if assignment.artist is stale:
            assignment.artist = current
        if assignment.role is stale:
            assignment.role = current
