"""
Interface port pour le catalogue.

Contrat CRUD consommé par le moteur de reconciliation. L'implémentation
concrète (SQLite via SQLModel) se trouve dans infrastructure/persistence.

Sémantique des upserts : recherche par clé de chemin unique ; si la ligne
existe elle est mise à jour en conservant son id, sinon elle est insérée.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from mediashelf.core.entities.media import (
    Author,
    Book,
    BookSeries,
    MediaCategory,
    MediaItem,
    MediaKind,
    TVEpisode,
)


class ICatalogRepository(ABC):
    """
    Interface de stockage du catalogue.

    Regroupe les séries/films, les épisodes, la hiérarchie des livres
    et les réglages d'exécution (interrupteurs d'enrichissement).
    """

    # Séries TV et films

    @abstractmethod
    def upsert_media_item(self, item: MediaItem) -> int:
        """Insère ou met à jour un MediaItem par (kind, path). Retourne son id."""
        ...

    @abstractmethod
    def get_media_item_by_path(self, kind: MediaKind, path: str) -> Optional[MediaItem]:
        """Récupère un MediaItem par sa clé de chemin."""
        ...

    @abstractmethod
    def list_media_items(self, kind: MediaKind) -> list[MediaItem]:
        """Liste les MediaItem d'un type, triés par titre."""
        ...

    @abstractmethod
    def delete_media_item(self, item_id: int) -> None:
        """Supprime un MediaItem et ses épisodes."""
        ...

    # Épisodes

    @abstractmethod
    def upsert_tv_episode(self, episode: TVEpisode) -> int:
        """Insère ou remplace un épisode par file_path. Retourne son id."""
        ...

    @abstractmethod
    def get_episode_by_path(self, file_path: str) -> Optional[TVEpisode]:
        """Récupère un épisode par son chemin relatif."""
        ...

    @abstractmethod
    def list_episodes(self, show_id: int) -> list[TVEpisode]:
        """Liste les épisodes d'une série, triés par saison puis épisode."""
        ...

    @abstractmethod
    def delete_episode(self, episode_id: int) -> None:
        """Supprime un épisode."""
        ...

    # Livres

    @abstractmethod
    def upsert_author(self, name: str, scanned_at: datetime) -> int:
        """Insère ou met à jour un auteur par nom. Retourne son id."""
        ...

    @abstractmethod
    def upsert_series(self, author_id: int, name: str, scanned_at: datetime) -> int:
        """Insère ou met à jour une série par (author_id, name). Retourne son id."""
        ...

    @abstractmethod
    def upsert_book(self, book: Book) -> int:
        """Insère ou met à jour un livre par path. Retourne son id."""
        ...

    @abstractmethod
    def get_book_by_path(self, path: str) -> Optional[Book]:
        """Récupère un livre par son chemin canonique."""
        ...

    @abstractmethod
    def get_all_books(self) -> list[Book]:
        """Liste tous les livres (audio et numériques)."""
        ...

    @abstractmethod
    def get_all_authors(self) -> list[Author]:
        """Liste tous les auteurs."""
        ...

    @abstractmethod
    def get_series_by_author(self, author_id: int) -> list[BookSeries]:
        """Liste les séries d'un auteur."""
        ...

    @abstractmethod
    def delete_book(self, book_id: int) -> None:
        """Supprime un livre."""
        ...

    @abstractmethod
    def delete_series(self, series_id: int) -> None:
        """Supprime une série de livres."""
        ...

    @abstractmethod
    def delete_author(self, author_id: int) -> None:
        """Supprime un auteur."""
        ...

    # Réglages et maintenance

    @abstractmethod
    def get_setting(self, key: str) -> Optional[str]:
        """Retourne la valeur brute d'un réglage, ou None."""
        ...

    @abstractmethod
    def set_setting(self, key: str, value: str) -> None:
        """Crée ou remplace un réglage."""
        ...

    @abstractmethod
    def clear_metadata(self, category: MediaCategory) -> int:
        """Efface les métadonnées d'une catégorie. Retourne le nombre de lignes touchées."""
        ...

    @abstractmethod
    def count_by_category(self) -> dict[MediaCategory, int]:
        """Compte les entrées du catalogue par catégorie."""
        ...
