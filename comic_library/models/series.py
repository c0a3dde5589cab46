"""
Series model.

A series groups the issues of one comic book title.
"""

from sqlalchemy import Column, String, Index
from sqlalchemy.orm import relationship

from comic_library.models.base import Base, IntegerIdMixin, ModelMixin


class Series(Base, IntegerIdMixin, ModelMixin):
    """
    Series model representing a comic book title.

    Attributes:
        id: Integer primary key
        title: Series title (e.g. "The Amazing Spider-Man")
        comic_books: Issues published in this series
    """

    __tablename__ = "series"

    title = Column(
        String(200),
        nullable=False,
        doc="Series title"
    )

    # Relationships
    comic_books = relationship(
        "ComicBook",
        back_populates="series"
    )

    __table_args__ = (
        Index("idx_series_title", "title"),
    )
