"""
Module de persistance SQLite pour MediaShelf.

- database.py : engine SQLite, session factory, initialisation
- models.py : modeles SQLModel representant les tables

Usage:
    from mediashelf.infrastructure.persistence import init_db, get_session

    init_db()  # Cree les tables et les reglages par defaut
    session = next(get_session())
"""

from mediashelf.infrastructure.persistence.database import (
    create_db_engine,
    get_engine,
    get_session,
    init_db,
)
from mediashelf.infrastructure.persistence.models import (
    AuthorModel,
    BookModel,
    BookSeriesModel,
    MediaItemModel,
    SettingModel,
    TVEpisodeModel,
)

__all__ = [
    "create_db_engine",
    "get_engine",
    "get_session",
    "init_db",
    "AuthorModel",
    "BookModel",
    "BookSeriesModel",
    "MediaItemModel",
    "SettingModel",
    "TVEpisodeModel",
]
