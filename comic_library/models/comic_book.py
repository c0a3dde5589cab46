"""
Comic book models.

A comic book is one issue of a Series. The artists who worked on it are
recorded as ComicBookArtist rows, each naming an Artist and the Role they
performed on that issue.
"""

from sqlalchemy import (
    Column,
    Integer,
    Text,
    Date,
    Float,
    ForeignKey,
    Index,
    CheckConstraint,
)
from sqlalchemy.orm import relationship, validates

from comic_library.models.base import Base, IntegerIdMixin, ModelMixin


class ComicBook(Base, IntegerIdMixin, ModelMixin):
    """
    Comic book model representing a single issue.

    Attributes:
        id: Integer primary key
        series_id: Foreign key to Series
        issue_number: Issue number within the series
        description: Free-form description (HTML allowed)
        published_on: Publication date
        average_rating: Average reader rating
        series: The Series this issue belongs to
        artists: Artist/role assignments for this issue
    """

    __tablename__ = "comic_books"

    series_id = Column(
        Integer,
        ForeignKey("series.id"),
        nullable=False,
        doc="Foreign key to Series"
    )

    issue_number = Column(
        Integer,
        nullable=False,
        doc="Issue number within the series"
    )

    description = Column(
        Text,
        nullable=True,
        doc="Issue description"
    )

    published_on = Column(
        Date,
        nullable=True,
        doc="Publication date"
    )

    average_rating = Column(
        Float,
        nullable=True,
        doc="Average reader rating"
    )

    # Relationships
    series = relationship("Series", back_populates="comic_books")

    # Rows are removed by the database (ON DELETE CASCADE) when the
    # comic book is deleted by key, so the ORM never loads them for that.
    artists = relationship(
        "ComicBookArtist",
        back_populates="comic_book",
        cascade="all, delete-orphan",
        passive_deletes=True
    )

    __table_args__ = (
        Index("idx_comic_books_series", "series_id"),
        Index("idx_comic_books_issue", "issue_number"),
    )

    @validates("issue_number")
    def _coerce_issue_number(self, key, value):
        # Issue numbers typed into forms arrive as strings ("10")
        if isinstance(value, str):
            return int(value.strip())
        return value

    @property
    def display_text(self) -> str:
        """Series title and issue number, e.g. "Bone #7"."""
        title = self.series.title if self.series is not None else ""
        return f"{title} #{self.issue_number}"

    @property
    def artists_display_text(self) -> str:
        """Comma separated "<artist> - <role>" list."""
        return ", ".join(
            f"{assignment.artist.name} - {assignment.role.name}"
            for assignment in self.artists
        )

    def add_artist(self, artist, role) -> "ComicBookArtist":
        """
        Credit an artist with a role on this comic book.

        Args:
            artist: Artist instance (new or already persisted)
            role: Role instance (new or already persisted)

        Returns:
            The ComicBookArtist assignment appended to self.artists
        """
        assignment = ComicBookArtist(artist=artist, role=role)
        self.artists.append(assignment)
        return assignment


class ComicBookArtist(Base, ModelMixin):
    """
    Join entity crediting an Artist with a Role on a ComicBook.

    Attributes:
        comic_book_id: Foreign key to ComicBook (part of primary key)
        artist_id: Foreign key to Artist (part of primary key)
        role_id: Foreign key to Role (part of primary key)
    """

    __tablename__ = "comic_book_artists"

    comic_book_id = Column(
        Integer,
        ForeignKey("comic_books.id", ondelete="CASCADE"),
        primary_key=True,
        doc="Foreign key to ComicBook"
    )

    artist_id = Column(
        Integer,
        ForeignKey("artists.id"),
        primary_key=True,
        doc="Foreign key to Artist"
    )

    role_id = Column(
        Integer,
        ForeignKey("roles.id"),
        primary_key=True,
        doc="Foreign key to Role"
    )

    # Relationships
    comic_book = relationship("ComicBook", back_populates="artists")
    artist = relationship("Artist")
    role = relationship("Role")

    __table_args__ = (
        Index("idx_comic_book_artists_artist", "artist_id"),
        Index("idx_comic_book_artists_role", "role_id"),
    )

    def __repr__(self) -> str:
        return (
            f"ComicBookArtist(comic_book_id={self.comic_book_id!r}, "
            f"artist_id={self.artist_id!r}, "
            f"role_id={self.role_id!r})"
        )
