"""
Fixtures pytest partagees pour les tests MediaShelf.

Ce module contient les fixtures communes utilisees dans les tests:
- Settings de test avec racines de bibliotheque temporaires
- Base SQLite temporaire initialisee (tables + reglages par defaut)
- Repository du catalogue et fabrique de repositories (une session par scanner)
- Mocks des fournisseurs de metadonnees
"""

from pathlib import Path
from typing import Callable, Iterator
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy import Engine
from sqlmodel import Session

from mediashelf.adapters.file_system import FileSystemAdapter
from mediashelf.config import Settings
from mediashelf.core.ports.api_clients import (
    IBookMetadataProvider,
    IMovieMetadataProvider,
    ITVMetadataProvider,
)
from mediashelf.infrastructure.persistence.database import create_db_engine, init_db
from mediashelf.infrastructure.persistence.repositories import SQLModelCatalogRepository


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """
    Settings de test avec chemins temporaires.

    Les racines tv/, movies/ et books/ ne sont pas creees : chaque test
    construit l'arborescence dont il a besoin.
    """
    return Settings(
        tv_shows_dir=tmp_path / "tv",
        movies_dir=tmp_path / "movies",
        books_dir=tmp_path / "books",
        database_url=f"sqlite:///{tmp_path / 'db' / 'catalog.db'}",
        cache_dir=tmp_path / "cache",
        log_file=tmp_path / "logs" / "test.log",
        tmdb_api_key=None,
        tvdb_api_key=None,
        hardcover_api_key=None,
        provider_timeout_seconds=5.0,
        prune_missing_media=False,
    )


@pytest.fixture
def engine(settings: Settings) -> Iterator[Engine]:
    """Engine SQLite temporaire, tables creees et reglages inseres."""
    engine = create_db_engine(settings.database_url)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine: Engine) -> Iterator[Session]:
    with Session(engine) as session:
        yield session


@pytest.fixture
def repository(session: Session) -> SQLModelCatalogRepository:
    return SQLModelCatalogRepository(session)


@pytest.fixture
def make_repository(engine: Engine) -> Iterator[Callable[[], SQLModelCatalogRepository]]:
    """Fabrique de repositories, chacun avec sa propre session."""
    sessions: list[Session] = []

    def factory() -> SQLModelCatalogRepository:
        session = Session(engine)
        sessions.append(session)
        return SQLModelCatalogRepository(session)

    yield factory
    for session in sessions:
        session.close()


@pytest.fixture
def file_system() -> FileSystemAdapter:
    return FileSystemAdapter()


@pytest.fixture
def make_file() -> Callable[..., Path]:
    """Cree un fichier (et ses repertoires parents) de la taille donnee."""

    def _make(path: Path, size: int = 10) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"x" * size)
        return path

    return _make


@pytest.fixture
def mock_tv_client() -> MagicMock:
    """Mock de ITVMetadataProvider : aucune serie ni episode trouve par defaut."""
    mock = MagicMock(spec=ITVMetadataProvider)
    mock.source = "tvdb"
    mock.search_show = AsyncMock(return_value=None)
    mock.get_episode = AsyncMock(return_value=None)
    mock.close = AsyncMock()
    return mock


@pytest.fixture
def mock_movie_client() -> MagicMock:
    """Mock de IMovieMetadataProvider : aucun film trouve par defaut."""
    mock = MagicMock(spec=IMovieMetadataProvider)
    mock.source = "tmdb"
    mock.search_movie = AsyncMock(return_value=None)
    mock.close = AsyncMock()
    return mock


@pytest.fixture
def mock_book_client() -> MagicMock:
    """Mock de IBookMetadataProvider : aucun candidat par defaut."""
    mock = MagicMock(spec=IBookMetadataProvider)
    mock.source = "hardcover"
    mock.search_books = AsyncMock(return_value=[])
    mock.close = AsyncMock()
    return mock
