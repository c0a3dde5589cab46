"""
Artist and role models.

Artists are credited on comic books through ComicBookArtist rows,
each annotated with the Role the artist performed.
"""

from sqlalchemy import Column, String, Index

from comic_library.models.base import Base, IntegerIdMixin, ModelMixin


class Artist(Base, IntegerIdMixin, ModelMixin):
    """
    Artist model.

    Attributes:
        id: Integer primary key
        name: Artist's full name
    """

    __tablename__ = "artists"

    name = Column(
        String(100),
        nullable=False,
        doc="Artist's full name"
    )

    __table_args__ = (
        Index("idx_artists_name", "name"),
    )


class Role(Base, IntegerIdMixin, ModelMixin):
    """
    Role an artist can perform on a comic book.

    Attributes:
        id: Integer primary key
        name: Role name (e.g. "Writer", "Penciller")
    """

    __tablename__ = "roles"

    name = Column(
        String(100),
        nullable=False,
        doc="Role name"
    )

    __table_args__ = (
        Index("idx_roles_name", "name"),
    )
