"""
Configuration de la base de donnees SQLite pour MediaShelf.

Ce module fournit :
- Engine SQLite configure pour un usage multi-thread
- Session factory
- Initialisation des tables et des reglages par defaut

La base de donnees est configuree via MEDIASHELF_DATABASE_URL (defaut: sqlite:///mediashelf.db).
"""

from collections.abc import Generator
from pathlib import Path
from typing import Optional

from sqlalchemy import Engine
from sqlmodel import Session, SQLModel, create_engine

from mediashelf.utils.constants import DEFAULT_SETTINGS

# Engine global - initialise lors du premier appel a get_engine()
_engine: Optional[Engine] = None


def create_db_engine(database_url: str) -> Engine:
    """
    Cree un engine pour l'URL donnee.

    Cree le repertoire parent si l'URL designe un fichier SQLite.
    """
    if database_url.startswith("sqlite:///") and not database_url.startswith("sqlite:///:memory:"):
        db_path = Path(database_url.replace("sqlite:///", ""))
        db_path.parent.mkdir(exist_ok=True, parents=True)

    return create_engine(
        database_url,
        echo=False,
        connect_args={"check_same_thread": False},
    )


def get_engine() -> Engine:
    """
    Retourne l'engine de l'application, en le creant si necessaire.

    Utilise la configuration de l'application pour l'URL de la BDD.
    """
    global _engine
    if _engine is None:
        from mediashelf.config import Settings

        _engine = create_db_engine(Settings().database_url)
    return _engine


def get_session() -> Generator[Session, None, None]:
    """
    Generateur de session SQLModel.

    Usage:
        session = next(get_session())

    Yields:
        Session SQLModel connectee a l'engine de l'application
    """
    with Session(get_engine()) as session:
        yield session


def seed_default_settings(session: Session) -> None:
    """Insere les reglages par defaut absents, sans ecraser l'existant."""
    from mediashelf.infrastructure.persistence.models import SettingModel

    for key, value in DEFAULT_SETTINGS.items():
        if session.get(SettingModel, key) is None:
            session.add(SettingModel(key=key, value=value))
    session.commit()


def init_db(engine: Optional[Engine] = None) -> None:
    """
    Cree les tables si necessaire et insere les reglages par defaut.

    Doit etre appelee une fois au demarrage de l'application.

    Args:
        engine: Engine a initialiser (engine de l'application par defaut)
    """
    # Import des modeles pour enregistrer leurs metadonnees
    from mediashelf.infrastructure.persistence import models  # noqa: F401

    engine = engine or get_engine()
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        seed_default_settings(session)
