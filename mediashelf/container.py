"""
Container d'injection de dependances via dependency-injector.

Centralise la construction des adaptateurs, des clients fournisseurs et
des services pour la CLI.
"""

from dependency_injector import containers, providers

from .adapters.api.cache import APICache
from .adapters.api.hardcover_client import HardcoverClient
from .adapters.api.tmdb_client import TMDBClient
from .adapters.api.tvdb_client import TVDBClient
from .adapters.file_system import FileSystemAdapter
from .adapters.images import ImageDownloader
from .config import Settings
from .infrastructure.persistence.database import get_session, init_db
from .infrastructure.persistence.repositories import SQLModelCatalogRepository
from .services.catalog_maintenance import CatalogMaintenanceService
from .services.reconciliation import (
    BookScanner,
    MovieScanner,
    ReconciliationService,
    TVScanner,
)


class Container(containers.DeclarativeContainer):
    """Container DI de l'application.

    Utilisation :
        container = Container()
        container.database.init()  # Initialise la DB une fois
        service = container.reconciliation_service()
    """

    # Configuration - singleton charge une seule fois
    config = providers.Singleton(Settings)

    # Database - Resource pour initialisation unique
    database = providers.Resource(init_db)

    # Session factory - nouvelle session a chaque appel
    session = providers.Factory(lambda: next(get_session()))

    # Repository - Factory : chaque scanner recoit sa propre session
    catalog_repository = providers.Factory(
        SQLModelCatalogRepository,
        session=session,
    )

    # Adapters
    file_system = providers.Singleton(FileSystemAdapter)
    image_downloader = providers.Singleton(ImageDownloader)

    # Cache API - Singleton
    api_cache = providers.Singleton(
        APICache,
        cache_dir=config.provided.cache_dir,
    )

    # Clients API - Singleton : un rate limiter par client pour tout le processus
    # Sans cle, le client existe mais ne trouve aucune metadonnee
    tmdb_client = providers.Singleton(
        TMDBClient,
        api_key=config.provided.tmdb_api_key,
    )

    tvdb_client = providers.Singleton(
        TVDBClient,
        api_key=config.provided.tvdb_api_key,
        cache=api_cache,
    )

    hardcover_client = providers.Singleton(
        HardcoverClient,
        api_key=config.provided.hardcover_api_key,
    )

    # Scanners - Factory car dependent d'un repository (session fraiche)
    tv_scanner = providers.Factory(
        TVScanner,
        repository=catalog_repository,
        file_system=file_system,
        tv_client=tvdb_client,
        settings=config,
        image_downloader=image_downloader,
    )

    movie_scanner = providers.Factory(
        MovieScanner,
        repository=catalog_repository,
        file_system=file_system,
        movie_client=tmdb_client,
        settings=config,
        image_downloader=image_downloader,
    )

    book_scanner = providers.Factory(
        BookScanner,
        repository=catalog_repository,
        file_system=file_system,
        book_client=hardcover_client,
        settings=config,
        image_downloader=image_downloader,
    )

    # Services
    reconciliation_service = providers.Factory(
        ReconciliationService,
        tv_scanner=tv_scanner,
        movie_scanner=movie_scanner,
        book_scanner=book_scanner,
        repository=catalog_repository,
    )

    maintenance_service = providers.Factory(
        CatalogMaintenanceService,
        repository=catalog_repository,
        tmdb_client=tmdb_client,
        tvdb_client=tvdb_client,
        hardcover_client=hardcover_client,
    )
