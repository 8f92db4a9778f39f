"""
Implementation SQLModel du catalogue.

Implemente ICatalogRepository pour la persistance SQLite via SQLModel.
Chaque upsert est une lecture-modification-ecriture dans la session,
validee par un seul commit.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func
from sqlmodel import Session, select

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
from mediashelf.core.ports.repositories import ICatalogRepository
from mediashelf.infrastructure.persistence.models import (
    AuthorModel,
    BookModel,
    BookSeriesModel,
    MediaItemModel,
    SettingModel,
    TVEpisodeModel,
)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite ne conserve pas le fuseau : les horodatages relus sont en UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SQLModelCatalogRepository(ICatalogRepository):
    """
    Repository SQLModel du catalogue.

    Les upserts ne remplacent metadata_json que si l'entite en porte ;
    les metadonnees en cache ne sont effacees que par clear_metadata.
    """

    def __init__(self, session: Session) -> None:
        """
        Initialise le repository avec une session SQLModel.

        Args :
            session : Session SQLModel active pour les operations DB
        """
        self._session = session

    # Conversions modele -> entite

    def _media_item_to_entity(self, model: MediaItemModel) -> MediaItem:
        return MediaItem(
            id=model.id,
            kind=MediaKind(model.kind),
            title=model.title,
            path=model.path,
            file_size=model.file_size,
            last_scanned_at=_as_utc(model.last_scanned_at),
            metadata_json=model.metadata_json,
        )

    def _episode_to_entity(self, model: TVEpisodeModel) -> TVEpisode:
        return TVEpisode(
            id=model.id,
            show_id=model.show_id,
            season_number=model.season_number,
            episode_number=model.episode_number,
            title=model.title,
            file_path=model.file_path,
            file_size=model.file_size,
            last_scanned_at=_as_utc(model.last_scanned_at),
            metadata_json=model.metadata_json,
        )

    def _author_to_entity(self, model: AuthorModel) -> Author:
        return Author(
            id=model.id,
            name=model.name,
            metadata_json=model.metadata_json,
            created_at=_as_utc(model.created_at),
            last_scanned_at=_as_utc(model.last_scanned_at),
        )

    def _series_to_entity(self, model: BookSeriesModel) -> BookSeries:
        return BookSeries(
            id=model.id,
            author_id=model.author_id,
            name=model.name,
            metadata_json=model.metadata_json,
            created_at=_as_utc(model.created_at),
            last_scanned_at=_as_utc(model.last_scanned_at),
        )

    def _book_to_entity(self, model: BookModel) -> Book:
        return Book(
            id=model.id,
            author_id=model.author_id,
            series_id=model.series_id,
            title=model.title,
            kind=BookKind(model.kind),
            path=model.path,
            file_size=model.file_size,
            last_scanned_at=_as_utc(model.last_scanned_at),
            metadata_json=model.metadata_json,
        )

    def _save(self, model) -> int:
        """Ajoute, valide et retourne l'id du modele."""
        self._session.add(model)
        self._session.commit()
        self._session.refresh(model)
        return model.id

    # Series TV et films

    def _find_media_item(self, kind: MediaKind, path: str) -> Optional[MediaItemModel]:
        statement = select(MediaItemModel).where(
            MediaItemModel.kind == kind.value,
            MediaItemModel.path == path,
        )
        return self._session.exec(statement).first()

    def upsert_media_item(self, item: MediaItem) -> int:
        """Insere ou met a jour par (kind, path), en conservant l'id existant."""
        model = self._find_media_item(item.kind, item.path)
        if model is None:
            model = MediaItemModel(kind=item.kind.value, path=item.path, title=item.title)
        model.title = item.title
        model.file_size = item.file_size
        model.last_scanned_at = item.last_scanned_at
        if item.metadata_json is not None:
            model.metadata_json = item.metadata_json
        return self._save(model)

    def get_media_item_by_path(self, kind: MediaKind, path: str) -> Optional[MediaItem]:
        model = self._find_media_item(kind, path)
        if model:
            return self._media_item_to_entity(model)
        return None

    def list_media_items(self, kind: MediaKind) -> list[MediaItem]:
        statement = (
            select(MediaItemModel)
            .where(MediaItemModel.kind == kind.value)
            .order_by(MediaItemModel.title)
        )
        return [self._media_item_to_entity(m) for m in self._session.exec(statement).all()]

    def delete_media_item(self, item_id: int) -> None:
        """Supprime l'element et, pour une serie, tous ses episodes."""
        episodes = self._session.exec(
            select(TVEpisodeModel).where(TVEpisodeModel.show_id == item_id)
        ).all()
        for episode in episodes:
            self._session.delete(episode)
        model = self._session.get(MediaItemModel, item_id)
        if model:
            self._session.delete(model)
        self._session.commit()

    # Episodes

    def _find_episode(self, file_path: str) -> Optional[TVEpisodeModel]:
        statement = select(TVEpisodeModel).where(TVEpisodeModel.file_path == file_path)
        return self._session.exec(statement).first()

    def upsert_tv_episode(self, episode: TVEpisode) -> int:
        model = self._find_episode(episode.file_path)
        if model is None:
            model = TVEpisodeModel(
                show_id=episode.show_id,
                season_number=episode.season_number,
                episode_number=episode.episode_number,
                title=episode.title,
                file_path=episode.file_path,
            )
        model.show_id = episode.show_id
        model.season_number = episode.season_number
        model.episode_number = episode.episode_number
        model.title = episode.title
        model.file_size = episode.file_size
        model.last_scanned_at = episode.last_scanned_at
        if episode.metadata_json is not None:
            model.metadata_json = episode.metadata_json
        return self._save(model)

    def get_episode_by_path(self, file_path: str) -> Optional[TVEpisode]:
        model = self._find_episode(file_path)
        if model:
            return self._episode_to_entity(model)
        return None

    def list_episodes(self, show_id: int) -> list[TVEpisode]:
        statement = (
            select(TVEpisodeModel)
            .where(TVEpisodeModel.show_id == show_id)
            .order_by(TVEpisodeModel.season_number, TVEpisodeModel.episode_number)
        )
        return [self._episode_to_entity(m) for m in self._session.exec(statement).all()]

    def delete_episode(self, episode_id: int) -> None:
        model = self._session.get(TVEpisodeModel, episode_id)
        if model:
            self._session.delete(model)
            self._session.commit()

    # Livres

    def upsert_author(self, name: str, scanned_at: datetime) -> int:
        model = self._session.exec(select(AuthorModel).where(AuthorModel.name == name)).first()
        if model is None:
            model = AuthorModel(name=name, created_at=scanned_at)
        model.last_scanned_at = scanned_at
        return self._save(model)

    def upsert_series(self, author_id: int, name: str, scanned_at: datetime) -> int:
        statement = select(BookSeriesModel).where(
            BookSeriesModel.author_id == author_id,
            BookSeriesModel.name == name,
        )
        model = self._session.exec(statement).first()
        if model is None:
            model = BookSeriesModel(author_id=author_id, name=name, created_at=scanned_at)
        model.last_scanned_at = scanned_at
        return self._save(model)

    def _find_book(self, path: str) -> Optional[BookModel]:
        return self._session.exec(select(BookModel).where(BookModel.path == path)).first()

    def upsert_book(self, book: Book) -> int:
        """
        Insere ou met a jour un livre par path.

        series_id est toujours ecrit tel quel : la hierarchie du disque prime.
        """
        model = self._find_book(book.path)
        if model is None:
            model = BookModel(
                author_id=book.author_id,
                title=book.title,
                kind=book.kind.value,
                path=book.path,
            )
        model.author_id = book.author_id
        model.series_id = book.series_id
        model.title = book.title
        model.kind = book.kind.value
        model.file_size = book.file_size
        model.last_scanned_at = book.last_scanned_at
        if book.metadata_json is not None:
            model.metadata_json = book.metadata_json
        return self._save(model)

    def get_book_by_path(self, path: str) -> Optional[Book]:
        model = self._find_book(path)
        if model:
            return self._book_to_entity(model)
        return None

    def get_all_books(self) -> list[Book]:
        statement = select(BookModel).order_by(BookModel.path)
        return [self._book_to_entity(m) for m in self._session.exec(statement).all()]

    def get_all_authors(self) -> list[Author]:
        statement = select(AuthorModel).order_by(AuthorModel.name)
        return [self._author_to_entity(m) for m in self._session.exec(statement).all()]

    def get_series_by_author(self, author_id: int) -> list[BookSeries]:
        statement = (
            select(BookSeriesModel)
            .where(BookSeriesModel.author_id == author_id)
            .order_by(BookSeriesModel.name)
        )
        return [self._series_to_entity(m) for m in self._session.exec(statement).all()]

    def _delete(self, model_class, row_id: int) -> None:
        model = self._session.get(model_class, row_id)
        if model:
            self._session.delete(model)
            self._session.commit()

    def delete_book(self, book_id: int) -> None:
        self._delete(BookModel, book_id)

    def delete_series(self, series_id: int) -> None:
        self._delete(BookSeriesModel, series_id)

    def delete_author(self, author_id: int) -> None:
        self._delete(AuthorModel, author_id)

    # Reglages et maintenance

    def get_setting(self, key: str) -> Optional[str]:
        model = self._session.get(SettingModel, key)
        return model.value if model else None

    def set_setting(self, key: str, value: str) -> None:
        model = self._session.get(SettingModel, key)
        if model is None:
            model = SettingModel(key=key, value=value)
        model.value = value
        self._session.add(model)
        self._session.commit()

    def clear_metadata(self, category: MediaCategory) -> int:
        """
        Remet metadata_json a NULL pour une categorie.

        TV efface aussi les episodes ; le total inclut les deux tables.
        """
        if category == MediaCategory.MOVIES:
            statements = [select(MediaItemModel).where(MediaItemModel.kind == MediaKind.MOVIE.value)]
        elif category == MediaCategory.TV:
            statements = [
                select(TVEpisodeModel),
                select(MediaItemModel).where(MediaItemModel.kind == MediaKind.TV_SHOW.value),
            ]
        else:
            statements = [select(BookModel)]

        cleared = 0
        for statement in statements:
            for model in self._session.exec(statement).all():
                model.metadata_json = None
                self._session.add(model)
                cleared += 1
        self._session.commit()
        return cleared

    def count_by_category(self) -> dict[MediaCategory, int]:
        def count(statement) -> int:
            return self._session.exec(statement).one()

        return {
            MediaCategory.TV: count(
                select(func.count()).select_from(MediaItemModel)
                .where(MediaItemModel.kind == MediaKind.TV_SHOW.value)
            ),
            MediaCategory.MOVIES: count(
                select(func.count()).select_from(MediaItemModel)
                .where(MediaItemModel.kind == MediaKind.MOVIE.value)
            ),
            MediaCategory.BOOKS: count(select(func.count()).select_from(BookModel)),
        }
