"""
Unit tests for the library ORM models.

Tests follow AAA (Arrange, Act, Assert) pattern.
"""

from datetime import date

import pytest

from comic_library.models import Artist, ComicBook, ComicBookArtist, Role, Series


class TestComicBook:
    """Tests for the ComicBook model."""

    def test_issue_number_string_coerced_to_int(self):
        comic_book = ComicBook(issue_number="10")

        assert comic_book.issue_number == 10

    def test_issue_number_with_whitespace(self):
        comic_book = ComicBook()
        comic_book.issue_number = " 7 "

        assert comic_book.issue_number == 7

    def test_issue_number_not_numeric(self):
        with pytest.raises(ValueError):
            ComicBook(issue_number="seven")

    def test_display_text(self):
        comic_book = ComicBook(series=Series(title="Bone"), issue_number=1)

        assert comic_book.display_text == "Bone #1"

    def test_artists_display_text(self):
        # Arrange
        comic_book = ComicBook(issue_number=1)
        comic_book.add_artist(Artist(name="Stan Lee"), Role(name="Script"))
        comic_book.add_artist(Artist(name="Steve Ditko"), Role(name="Pencils"))

        # Act
        text = comic_book.artists_display_text

        # Assert
        assert text == "Stan Lee - Script, Steve Ditko - Pencils"

    def test_add_artist_links_assignment(self):
        # Arrange
        comic_book = ComicBook(issue_number=1)
        artist = Artist(name="Jeff Smith")
        role = Role(name="Inks")

        # Act
        assignment = comic_book.add_artist(artist, role)

        # Assert
        assert isinstance(assignment, ComicBookArtist)
        assert comic_book.artists == [assignment]
        assert assignment.comic_book is comic_book
        assert assignment.artist is artist
        assert assignment.role is role

    def test_to_dict_contains_columns_only(self):
        # Arrange
        comic_book = ComicBook(
            id=3,
            series_id=1,
            issue_number=2,
            description="Second issue",
            published_on=date(1991, 9, 1),
            average_rating=6.9,
        )

        # Act
        data = comic_book.to_dict()

        # Assert
        assert data == {
            "id": 3,
            "series_id": 1,
            "issue_number": 2,
            "description": "Second issue",
            "published_on": date(1991, 9, 1),
            "average_rating": 6.9,
        }


class TestIdentity:
    """Tests for the integer id mixin and representation."""

    @pytest.mark.parametrize("entity_id,expected", [(None, False), (0, False), (1, True)])
    def test_is_persisted(self, entity_id, expected):
        assert Series(id=entity_id, title="Bone").is_persisted is expected

    def test_repr_uses_identifying_fields(self):
        text = repr(Artist(id=2, name="Jeff Smith"))

        assert text.startswith("Artist(")
        assert "id=2" in text
        assert "name='Jeff Smith'" in text

    def test_assignment_repr(self):
        assignment = ComicBookArtist(comic_book_id=1, artist_id=2, role_id=3)

        assert repr(assignment) == "ComicBookArtist(comic_book_id=1, artist_id=2, role_id=3)"
