"""
Entités du catalogue.

Représentent les lignes du catalogue telles que le moteur de reconciliation
les lit et les écrit : séries TV et films (MediaItem), épisodes, auteurs,
séries de livres et livres.

Le champ metadata_json contient le JSON brut renvoyé par l'enrichissement.
Une fois renseigné, il n'est jamais écrasé par un scan sauf effacement explicite.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class MediaKind(str, Enum):
    """Type d'un MediaItem."""

    TV_SHOW = "tv_show"
    MOVIE = "movie"


class BookKind(str, Enum):
    """Type d'un livre, fixé par le sous-répertoire qui le contient."""

    AUDIOBOOK = "audiobook"
    EBOOK = "ebook"

    @property
    def directory_name(self) -> str:
        """Nom du sous-répertoire de la bibliothèque (audiobooks / ebooks)."""
        return f"{self.value}s"

    @classmethod
    def from_directory_name(cls, name: str) -> Optional["BookKind"]:
        """Retourne le type correspondant à un nom de répertoire, ou None."""
        for kind in cls:
            if kind.directory_name == name.lower():
                return kind
        return None


class MediaCategory(str, Enum):
    """Catégorie de scan (une procédure de reconciliation par catégorie)."""

    TV = "tv"
    MOVIES = "movies"
    BOOKS = "books"


@dataclass
class MediaItem:
    """
    Série TV ou film du catalogue.

    Attributs :
        id : ID interne en base
        kind : tv_show ou movie
        title : Nom du dossier (séries, conteneurs) ou du fichier sans extension
        path : Chemin relatif à la racine du type, clé d'unicité
        file_size : Taille en octets (fichier représentatif pour un film)
        last_scanned_at : Date du dernier passage du scan
        metadata_json : Métadonnées fournisseur sérialisées
    """

    kind: MediaKind
    title: str
    path: str
    id: Optional[int] = None
    file_size: Optional[int] = None
    last_scanned_at: Optional[datetime] = None
    metadata_json: Optional[str] = None


@dataclass
class TVEpisode:
    """
    Épisode d'une série, rattaché à son MediaItem.

    file_path est le chemin relatif show/saison/fichier, clé d'unicité.
    """

    show_id: int
    season_number: int
    episode_number: int
    title: str
    file_path: str
    file_size: int = 0
    id: Optional[int] = None
    last_scanned_at: Optional[datetime] = None
    metadata_json: Optional[str] = None


@dataclass
class Author:
    """Auteur, identifié par son nom (nom du dossier)."""

    name: str
    id: Optional[int] = None
    metadata_json: Optional[str] = None
    created_at: Optional[datetime] = None
    last_scanned_at: Optional[datetime] = None


@dataclass
class BookSeries:
    """Série de livres, identifiée par (author_id, name)."""

    author_id: int
    name: str
    id: Optional[int] = None
    metadata_json: Optional[str] = None
    created_at: Optional[datetime] = None
    last_scanned_at: Optional[datetime] = None


@dataclass
class Book:
    """
    Livre audio ou numérique.

    Attributs :
        author_id : Auteur (toujours présent)
        series_id : Série, présente si et seulement si le livre est rangé
                    dans un dossier de série
        title : Nom du dossier du livre
        kind : audiobook ou ebook
        path : {audiobooks|ebooks}/Auteur/[Serie/]Titre, clé d'unicité
        file_size : Somme des tailles des fichiers du livre
    """

    author_id: int
    title: str
    kind: BookKind
    path: str
    series_id: Optional[int] = None
    file_size: int = 0
    id: Optional[int] = None
    last_scanned_at: Optional[datetime] = None
    metadata_json: Optional[str] = None
