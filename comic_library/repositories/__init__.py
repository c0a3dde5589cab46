"""
Repository layer for data access.

Provides data access abstractions following the Repository pattern,
isolating database access from the code that builds comic book graphs.
"""

from comic_library.repositories.comic_book import ComicBookRepository

__all__ = ["ComicBookRepository"]
