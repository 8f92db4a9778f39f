"""
Ports (interfaces abstraites) définissant les contrats pour les adaptateurs.

Les ports sont les frontières de l'architecture hexagonale. Ils définissent
ce dont le moteur de reconciliation a besoin du monde extérieur sans spécifier
comment ces besoins sont satisfaits.

Port repository :
- ICatalogRepository : Catalogue (médias, épisodes, livres, réglages)

Ports fournisseurs :
- IMovieMetadataProvider, ITVMetadataProvider, IBookMetadataProvider
- MovieMetadata, TVShowMetadata, EpisodeMetadata, BookMetadata
"""

from mediashelf.core.ports.api_clients import (
    BookMetadata,
    ConnectionTestResult,
    EpisodeMetadata,
    IBookMetadataProvider,
    IMetadataProvider,
    IMovieMetadataProvider,
    ITVMetadataProvider,
    MovieMetadata,
    ProviderAuthenticationError,
    ProviderError,
    TVShowMetadata,
)
from mediashelf.core.ports.repositories import ICatalogRepository

__all__ = [
    # Repository
    "ICatalogRepository",
    # Fournisseurs
    "IMetadataProvider",
    "IMovieMetadataProvider",
    "ITVMetadataProvider",
    "IBookMetadataProvider",
    "MovieMetadata",
    "TVShowMetadata",
    "EpisodeMetadata",
    "BookMetadata",
    "ConnectionTestResult",
    # Erreurs
    "ProviderError",
    "ProviderAuthenticationError",
]
