"""
Interfaces ports pour les fournisseurs de métadonnées.

Interfaces abstraites (ports) définissant les contrats pour les APIs externes.
Les implémentations (adaptateurs) fournissent les clients concrets
(TMDB pour les films, TVDB pour les séries TV, Hardcover pour les livres).

Chaque client espace ses appels sortants d'un délai minimal fixe et convertit
les erreurs fournisseur en "aucune métadonnée" (None ou liste vide), à
l'exception de l'échec d'authentification TVDB qui est propagé.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional


class ProviderError(Exception):
    """Erreur générique d'un fournisseur de métadonnées."""


class ProviderAuthenticationError(ProviderError):
    """
    Échec d'authentification auprès d'un fournisseur.

    Levée par le client TVDB quand aucun token ne peut être obtenu
    (clé absente ou refusée). Le scan TV désactive alors l'enrichissement
    pour toutes les entrées restantes.
    """


@dataclass
class ConnectionTestResult:
    """Résultat d'un test de connexion à un fournisseur."""

    success: bool
    message: str


@dataclass
class MovieMetadata:
    """
    Métadonnées d'un film (TMDB), stockées dans metadata_json.

    Attributs :
        tmdb_id : ID TMDB
        title : Titre
        original_title : Titre en langue originale
        overview : Résumé
        release_year : Année de sortie (chaîne, "" si inconnue)
        poster_url : URL complète du poster, ou nom du fichier local
        backdrop_url : URL complète de l'image de fond
        rating : Note moyenne (0-10)
        vote_count : Nombre de votes
        genres : Noms des genres
        runtime : Durée en minutes
    """

    tmdb_id: int
    title: str
    original_title: Optional[str] = None
    overview: Optional[str] = None
    release_year: Optional[str] = None
    poster_url: Optional[str] = None
    backdrop_url: Optional[str] = None
    rating: Optional[float] = None
    vote_count: Optional[int] = None
    genres: list[str] = field(default_factory=list)
    runtime: Optional[int] = None
    tagline: Optional[str] = None
    status: Optional[str] = None
    original_language: Optional[str] = None


@dataclass
class TVShowMetadata:
    """Métadonnées d'une série TV (TVDB)."""

    tvdb_id: str
    title: str
    overview: Optional[str] = None
    first_air_year: Optional[str] = None
    poster_url: Optional[str] = None
    status: Optional[str] = None
    genres: list[str] = field(default_factory=list)
    runtime: Optional[int] = None
    network: Optional[str] = None
    original_language: Optional[str] = None
    num_seasons: int = 0


@dataclass
class EpisodeMetadata:
    """Métadonnées d'un épisode (TVDB)."""

    tvdb_id: str
    name: str
    season_number: int
    episode_number: int
    overview: Optional[str] = None
    aired: Optional[str] = None
    still_url: Optional[str] = None
    runtime: Optional[int] = None


@dataclass
class BookMetadata:
    """
    Candidat livre (Hardcover).

    Un appel de recherche renvoie plusieurs candidats dans l'ordre du
    fournisseur ; le candidat retenu est stocké tel quel dans metadata_json.
    Le champ series n'est qu'informatif : il ne déplace jamais un livre.
    """

    title: str
    authors: list[str] = field(default_factory=list)
    hardcover_id: Optional[int] = None
    subtitle: Optional[str] = None
    description: Optional[str] = None
    series: Optional[str] = None
    series_position: Optional[float] = None
    pages: Optional[int] = None
    isbn_10: Optional[str] = None
    isbn_13: Optional[str] = None
    release_date: Optional[str] = None
    cover_url: Optional[str] = None
    genres: list[str] = field(default_factory=list)


class IMetadataProvider(ABC):
    """Interface commune aux fournisseurs de métadonnées."""

    @property
    @abstractmethod
    def source(self) -> str:
        """Retourne l'identifiant de la source API (ex: 'tmdb', 'tvdb')."""
        ...

    @abstractmethod
    async def test_connection(self) -> ConnectionTestResult:
        """Vérifie que la clé API est configurée et acceptée."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Libère les ressources réseau."""
        ...


class IMovieMetadataProvider(IMetadataProvider):
    """Fournisseur de métadonnées de films."""

    @abstractmethod
    async def search_movie(
        self, title: str, year: Optional[str] = None
    ) -> Optional[MovieMetadata]:
        """Recherche un film par titre nettoyé et année optionnelle."""
        ...


class ITVMetadataProvider(IMetadataProvider):
    """Fournisseur de métadonnées de séries TV."""

    @abstractmethod
    async def search_show(
        self, title: str, year: Optional[str] = None
    ) -> Optional[TVShowMetadata]:
        """
        Recherche une série par titre.

        Raises:
            ProviderAuthenticationError: si aucun token n'est obtenable
        """
        ...

    @abstractmethod
    async def get_episode(
        self, series_id: str, season: int, episode: int
    ) -> Optional[EpisodeMetadata]:
        """
        Récupère les métadonnées d'un épisode.

        Raises:
            ProviderAuthenticationError: si aucun token n'est obtenable
        """
        ...


class IBookMetadataProvider(IMetadataProvider):
    """Fournisseur de métadonnées de livres."""

    @abstractmethod
    async def search_books(
        self, title: str, author_hint: Optional[str] = None
    ) -> list[BookMetadata]:
        """Recherche des candidats livres, dans l'ordre de pertinence du fournisseur."""
        ...
