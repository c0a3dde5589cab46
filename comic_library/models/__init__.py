"""
SQLAlchemy ORM models for the comic book library.

This module exports all database models and the declarative base.
Import models from this module to ensure they're registered with SQLAlchemy.
"""

from comic_library.models.base import Base, IntegerIdMixin, ModelMixin
from comic_library.models.series import Series
from comic_library.models.artist import Artist, Role
from comic_library.models.comic_book import ComicBook, ComicBookArtist

# Export all models
__all__ = [
    # Base classes
    "Base",
    "IntegerIdMixin",
    "ModelMixin",
    # Models
    "Series",
    "Artist",
    "Role",
    "ComicBook",
    "ComicBookArtist",
]
