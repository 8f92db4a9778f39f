"""
Modeles SQLModel pour la base de donnees MediaShelf.

Ces modeles representent les tables SQLite. Ils sont distincts des entites
de domaine (dataclass dans core/entities/) ; la conversion se fait dans
le repository.

Tables:
- media_items: series TV et films, unique (kind, path)
- tv_episodes: episodes, unique file_path
- authors: auteurs, unique name
- book_series: series de livres, unique (author_id, name)
- books: livres audio et numeriques, unique path
- settings: reglages d'execution (cle/valeur)
"""

from datetime import datetime

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel, UniqueConstraint


def timestamp_field():
    """Horodatage UTC ; les valeurs ecrites portent leur fuseau."""
    return Field(default=None, sa_type=DateTime(timezone=True))


class MediaItemModel(SQLModel, table=True):
    """Serie TV ou film."""

    __tablename__ = "media_items"
    __table_args__ = (
        UniqueConstraint("kind", "path", name="uq_media_items_kind_path"),
    )

    id: int | None = Field(default=None, primary_key=True)
    kind: str = Field(index=True)  # "tv_show" | "movie"
    title: str = Field(index=True)
    path: str
    file_size: int | None = None
    last_scanned_at: datetime | None = timestamp_field()
    metadata_json: str | None = None


class TVEpisodeModel(SQLModel, table=True):
    """Episode d'une serie ; supprime avec sa serie par le repository."""

    __tablename__ = "tv_episodes"

    id: int | None = Field(default=None, primary_key=True)
    show_id: int = Field(foreign_key="media_items.id", index=True)
    season_number: int
    episode_number: int
    title: str
    file_path: str = Field(unique=True)
    file_size: int = 0
    last_scanned_at: datetime | None = timestamp_field()
    metadata_json: str | None = None


class AuthorModel(SQLModel, table=True):
    """Auteur de livres."""

    __tablename__ = "authors"

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(unique=True)
    metadata_json: str | None = None
    created_at: datetime | None = timestamp_field()
    last_scanned_at: datetime | None = timestamp_field()


class BookSeriesModel(SQLModel, table=True):
    """Serie de livres d'un auteur."""

    __tablename__ = "book_series"
    __table_args__ = (
        UniqueConstraint("author_id", "name", name="uq_book_series_author_name"),
    )

    id: int | None = Field(default=None, primary_key=True)
    author_id: int = Field(foreign_key="authors.id", index=True)
    name: str
    metadata_json: str | None = None
    created_at: datetime | None = timestamp_field()
    last_scanned_at: datetime | None = timestamp_field()


class BookModel(SQLModel, table=True):
    """Livre audio ou numerique."""

    __tablename__ = "books"

    id: int | None = Field(default=None, primary_key=True)
    author_id: int = Field(foreign_key="authors.id", index=True)
    series_id: int | None = Field(default=None, foreign_key="book_series.id", index=True)
    title: str
    kind: str  # "audiobook" | "ebook"
    path: str = Field(unique=True)
    file_size: int = 0
    last_scanned_at: datetime | None = timestamp_field()
    metadata_json: str | None = None


class SettingModel(SQLModel, table=True):
    """Reglage d'execution, valeur stockee en chaine ("true"/"false")."""

    __tablename__ = "settings"

    key: str = Field(primary_key=True)
    value: str
