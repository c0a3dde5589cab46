"""
Seed a demo comic book library.

Creates series, artists and roles, then adds a handful of comic books
through ComicBookRepository so existing artists, roles and series are
referenced by id rather than inserted again. Skips seeding when comic
books already exist.

Usage:
    ENABLE_DB_CREATE_ALL=1 python scripts/seed_library.py
"""

import sys
import os
from datetime import date
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from sqlalchemy.engine import make_url

from comic_library.core.config import settings
from comic_library.core.database import init_db
from comic_library.core.logging_config import setup_logging
from comic_library.core.unit_of_work import PersistenceIntent
from comic_library.models import Artist, ComicBook, Role, Series
from comic_library.repositories import ComicBookRepository


SERIES = ["The Amazing Spider-Man", "Bone"]

ARTISTS = ["Stan Lee", "Steve Ditko", "Jack Kirby", "Jeff Smith"]

ROLES = ["Script", "Pencils", "Inks", "Cover Artist"]

# (series, issue, published_on, rating, description, [(artist, role), ...])
COMIC_BOOKS = [
    ("The Amazing Spider-Man", 1, date(1963, 3, 1), 7.1,
     "Spider-Man must save J. Jonah Jameson's son from a doomed spacecraft.",
     [("Stan Lee", "Script"), ("Steve Ditko", "Pencils"), ("Steve Ditko", "Inks"),
      ("Jack Kirby", "Cover Artist")]),
    ("The Amazing Spider-Man", 2, date(1963, 5, 1), 6.8,
     "Spider-Man faces the Vulture for the first time.",
     [("Stan Lee", "Script"), ("Steve Ditko", "Pencils"), ("Steve Ditko", "Inks")]),
    ("The Amazing Spider-Man", 3, date(1963, 7, 1), 6.9,
     "Doctor Octopus defeats Spider-Man in their first battle.",
     [("Stan Lee", "Script"), ("Steve Ditko", "Pencils"), ("Steve Ditko", "Inks")]),
    ("Bone", 1, date(1991, 7, 1), 7.1,
     "The Bone cousins are run out of Boneville.",
     [("Jeff Smith", "Script"), ("Jeff Smith", "Pencils"), ("Jeff Smith", "Inks")]),
    ("Bone", 2, date(1991, 9, 1), 6.9,
     "Fone Bone meets Thorn and Gran'ma Ben.",
     [("Jeff Smith", "Script"), ("Jeff Smith", "Pencils"), ("Jeff Smith", "Inks")]),
]


def seed_library(repo: ComicBookRepository) -> int:
    """
    Seed the demo library.

    Args:
        repo: Repository to write through

    Returns:
        Number of comic books added
    """
    if repo.count_comic_books() > 0:
        print("Comic books already exist. Skipping library seeding.")
        return 0

    reference_data = (
        [Series(title=title) for title in SERIES]
        + [Artist(name=name) for name in ARTISTS]
        + [Role(name=name) for name in ROLES]
    )
    with repo.store.open_unit_of_work() as uow:
        for entity in reference_data:
            uow.track(entity, PersistenceIntent.NEW)
        uow.commit()

    series = {s.title: s for s in repo.list_series()}
    artists = {a.name: a for a in repo.list_artists()}
    roles = {r.name: r for r in repo.list_roles()}

    added = 0
    for title, issue, published_on, rating, description, credits in COMIC_BOOKS:
        comic_book = ComicBook(
            series=series[title],
            issue_number=issue,
            published_on=published_on,
            average_rating=rating,
            description=description,
        )
        for artist_name, role_name in credits:
            comic_book.add_artist(artists[artist_name], roles[role_name])

        repo.add_comic_book(comic_book)
        added += 1
        print(f"  Added {title} #{issue} (id={comic_book.id})")

    return added


def main():
    """Main entry point."""
    setup_logging(level=settings.log_level, json_format=settings.log_json)

    print("=" * 60)
    print("Seeding Demo Comic Book Library")
    print("=" * 60)
    print()

    try:
        if settings.is_sqlite:
            db_path = make_url(settings.database_url).database
            if db_path and db_path != ":memory:":
                Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        init_db()
        added = seed_library(ComicBookRepository())
        print()
        print("=" * 60)
        print(f"Library seeded successfully! ({added} comic books)")
        print("=" * 60)
    except Exception as e:
        print(f"\nError seeding library: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
