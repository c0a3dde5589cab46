"""
Tests for the demo library seed script.

Tests follow AAA (Arrange, Act, Assert) pattern.
"""

import importlib.util
from pathlib import Path

import pytest

from comic_library.models import Artist, ComicBook, ComicBookArtist, Role, Series

SCRIPT_PATH = Path(__file__).resolve().parents[2] / "scripts" / "seed_library.py"


@pytest.fixture(scope="module")
def seed_script():
    """Load scripts/seed_library.py as a module."""
    spec = importlib.util.spec_from_file_location("seed_library", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestSeedLibrary:
    """Tests for seed_library()."""

    def test_seeds_reference_data_once(self, seed_script, repo, count_rows):
        """
        Arrange: Empty database
        Act: Seed the library
        Assert: Each series, artist and role exists exactly once
        """
        # Act
        added = seed_script.seed_library(repo)

        # Assert
        assert added == len(seed_script.COMIC_BOOKS)
        assert count_rows(ComicBook) == len(seed_script.COMIC_BOOKS)
        assert count_rows(Series) == len(seed_script.SERIES)
        assert count_rows(Artist) == len(seed_script.ARTISTS)
        assert count_rows(Role) == len(seed_script.ROLES)

    def test_credits_recorded(self, seed_script, repo, count_rows):
        seed_script.seed_library(repo)

        expected = sum(len(credits) for *_, credits in seed_script.COMIC_BOOKS)
        assert count_rows(ComicBookArtist) == expected

    def test_skips_when_library_not_empty(self, seed_script, repo, count_rows):
        # Arrange
        seed_script.seed_library(repo)

        # Act
        added = seed_script.seed_library(repo)

        # Assert
        assert added == 0
        assert count_rows(ComicBook) == len(seed_script.COMIC_BOOKS)

    def test_issue_listing(self, seed_script, repo):
        seed_script.seed_library(repo)

        listing = [comic_book.display_text for comic_book in repo.list_comic_books()]

        assert listing[0] == "Bone #1"
        assert listing[-1] == "The Amazing Spider-Man #3"
