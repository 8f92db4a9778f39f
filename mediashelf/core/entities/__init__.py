"""
Entités métier du catalogue.

Exports:
- MediaItem: Série TV ou film
- TVEpisode: Épisode d'une série
- Author, BookSeries, Book: Hiérarchie auteur -> série -> livre
- MediaKind, BookKind, MediaCategory: Énumérations de types
"""

from mediashelf.core.entities.media import (
    Author,
    Book,
    BookKind,
    BookSeries,
    MediaCategory,
    MediaItem,
    MediaKind,
    TVEpisode,
)

__all__ = [
    "Author",
    "Book",
    "BookKind",
    "BookSeries",
    "MediaCategory",
    "MediaItem",
    "MediaKind",
    "TVEpisode",
]
