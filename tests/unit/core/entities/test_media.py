"""
Tests unitaires pour les entites du catalogue.
"""

import pytest

from mediashelf.core.entities.media import Book, BookKind, MediaItem, MediaKind


class TestBookKind:
    """Tests pour BookKind et ses noms de repertoire."""

    def test_directory_names(self) -> None:
        assert BookKind.AUDIOBOOK.directory_name == "audiobooks"
        assert BookKind.EBOOK.directory_name == "ebooks"

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("audiobooks", BookKind.AUDIOBOOK),
            ("Ebooks", BookKind.EBOOK),
            ("comics", None),
            ("ebook", None),
        ],
    )
    def test_from_directory_name(self, name: str, expected) -> None:
        assert BookKind.from_directory_name(name) == expected


class TestEntitiesDefaults:
    """Valeurs par defaut des dataclasses."""

    def test_media_item_defaults(self) -> None:
        item = MediaItem(kind=MediaKind.MOVIE, title="Heat", path="Heat (1995)")

        assert item.id is None
        assert item.metadata_json is None
        assert item.file_size is None

    def test_book_without_series(self) -> None:
        book = Book(author_id=1, title="Dune", kind=BookKind.EBOOK, path="ebooks/Frank Herbert/Dune")

        assert book.series_id is None
        assert book.file_size == 0
