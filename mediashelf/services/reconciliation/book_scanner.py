"""
Reconciliation des livres audio et numeriques.

Arborescence attendue :

    books_dir/
        audiobooks/Auteur/Titre/fichiers
        audiobooks/Auteur/Serie/Titre/fichiers
        ebooks/Auteur/...

books_dir peut aussi pointer directement sur audiobooks/ ou ebooks/.
Le scan commence par supprimer les livres disparus du disque, puis les
series et auteurs devenus vides, avant de parcourir l'arborescence.
Un auteur ou une serie n'est cree qu'avec son premier livre, et aucun
auteur ni serie sans livre ne subsiste a la fin du scan.
"""

from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional

from loguru import logger

from mediashelf.adapters.file_system import (
    BOOK_EXTENSIONS,
    BookDirectoryKind,
    FileSystemAdapter,
)
from mediashelf.adapters.images import ImageDownloader
from mediashelf.config import Settings
from mediashelf.core.entities.media import Book, BookKind, MediaCategory
from mediashelf.core.ports.api_clients import IBookMetadataProvider
from mediashelf.core.ports.repositories import ICatalogRepository
from mediashelf.services.book_matcher import select_best_candidate
from mediashelf.services.enrichment import MetadataEnrichmentPolicy
from mediashelf.services.progress import ProgressEmitter
from mediashelf.services.reconciliation.base import BaseScanner
from mediashelf.services.reconciliation.dataclasses import ScanResult
from mediashelf.utils.constants import COVER_FILENAME

# Renvoie (author_id, series_id) en creant les lignes parentes au besoin
ParentResolver = Callable[[], tuple[int, Optional[int]]]


def resolve_book_roots(books_dir: Path) -> tuple[Path, list[tuple[Path, BookKind]]]:
    """
    Determine la racine de la bibliotheque et les repertoires par type.

    Returns:
        (racine des chemins relatifs, [(repertoire, type), ...])
    """
    kind = BookKind.from_directory_name(books_dir.name)
    if kind is not None:
        return books_dir.parent, [(books_dir, kind)]
    return books_dir, [(books_dir / kind.directory_name, kind) for kind in BookKind]


class BookScanner(BaseScanner):
    """
    Scanner des livres.

    La hierarchie du disque fait foi : un livre n'a de series_id que s'il
    est range dans un dossier de serie, quelle que soit la serie annoncee
    par les metadonnees.
    """

    category = MediaCategory.BOOKS

    def __init__(
        self,
        repository: ICatalogRepository,
        file_system: FileSystemAdapter,
        book_client: IBookMetadataProvider,
        settings: Settings,
        image_downloader: Optional[ImageDownloader] = None,
    ) -> None:
        super().__init__(repository, file_system, settings, image_downloader)
        self._book_client = book_client

    async def scan(
        self,
        emitter: Optional[ProgressEmitter] = None,
        skip_metadata: bool = False,
    ) -> ScanResult:
        """Reconcilie le catalogue avec books_dir."""
        emitter = emitter or ProgressEmitter()
        result = ScanResult()
        books_dir = self._settings.books_dir
        emitter.started(self.category)

        if not self._file_system.exists(books_dir):
            logger.info("Repertoire des livres absent, rien a scanner", path=str(books_dir))
            emitter.complete(self.category, result)
            return result

        library_root, kind_dirs = resolve_book_roots(books_dir)
        result.removed = self.collect_garbage(library_root)

        policy = self._new_policy(emitter, skip_metadata)
        enabled = self._metadata_enabled()
        now = datetime.now(timezone.utc)

        for kind_dir, kind in kind_dirs:
            if not self._file_system.exists(kind_dir):
                continue
            try:
                author_dirs = self._file_system.list_subdirectories(kind_dir)
            except OSError as e:
                logger.error("Lecture du repertoire des livres impossible", path=str(kind_dir), error=str(e))
                result.errors.append(f"Error scanning books directory {kind_dir.name}: {e}")
                break

            for author_dir in author_dirs:
                try:
                    await self._process_author(author_dir, kind, policy, enabled, now, result)
                except Exception as e:
                    logger.error("Erreur sur un auteur", author=author_dir.name, error=str(e))
                    result.errors.append(f"Error scanning author {author_dir.name}: {e}")

        # Un livre en echec peut laisser un auteur ou une serie sans livre
        result.removed += self.remove_empty_groups()

        logger.info(
            "Scan des livres termine",
            added=result.added,
            updated=result.updated,
            removed=result.removed,
            errors=len(result.errors),
        )
        emitter.complete(self.category, result)
        return result

    def collect_garbage(self, library_root: Path) -> int:
        """
        Supprime les livres absents du disque, puis les series et auteurs vides.

        L'ordre livres -> series -> auteurs permet de tout nettoyer en une passe.

        Returns:
            Nombre de lignes supprimees
        """
        removed = 0
        for book in self._repository.get_all_books():
            if not self._file_system.exists(library_root / book.path):
                logger.info("Livre disparu du disque, suppression", path=book.path)
                self._repository.delete_book(book.id)
                removed += 1

        return removed + self.remove_empty_groups()

    def remove_empty_groups(self) -> int:
        """Supprime les series puis les auteurs qui n'ont plus aucun livre."""
        books = self._repository.get_all_books()
        referenced_series = {book.series_id for book in books if book.series_id is not None}
        referenced_authors = {book.author_id for book in books}

        removed = 0
        authors = self._repository.get_all_authors()
        for author in authors:
            for series in self._repository.get_series_by_author(author.id):
                if series.id not in referenced_series:
                    logger.debug("Serie sans livre, suppression", series=series.name)
                    self._repository.delete_series(series.id)
                    removed += 1

        for author in authors:
            if author.id not in referenced_authors:
                logger.debug("Auteur sans livre, suppression", author=author.name)
                self._repository.delete_author(author.id)
                removed += 1

        return removed

    async def _process_author(
        self,
        author_dir: Path,
        kind: BookKind,
        policy: MetadataEnrichmentPolicy,
        enabled: bool,
        scanned_at: datetime,
        result: ScanResult,
    ) -> None:
        author_name = author_dir.name
        extensions = BOOK_EXTENSIONS[kind]
        # Auteur et series ne sont crees qu'au premier livre effectivement stocke
        author_ids: list[int] = []

        def author_id() -> int:
            if not author_ids:
                author_ids.append(self._repository.upsert_author(author_name, scanned_at))
            return author_ids[0]

        for child in self._file_system.list_subdirectories(author_dir):
            shape = self._file_system.classify_book_directory(child, extensions)
            if shape == BookDirectoryKind.STANDALONE:
                await self._process_book_safely(
                    child, kind, author_name, None,
                    lambda: (author_id(), None),
                    policy, enabled, scanned_at, result,
                )
            elif shape == BookDirectoryKind.SERIES:
                parents = self._series_resolver(author_id, child.name, scanned_at)
                for book_dir in self._file_system.list_subdirectories(child):
                    await self._process_book_safely(
                        book_dir, kind, author_name, child.name, parents,
                        policy, enabled, scanned_at, result,
                    )

    def _series_resolver(
        self,
        author_id: Callable[[], int],
        series_name: str,
        scanned_at: datetime,
    ) -> ParentResolver:
        series_ids: list[int] = []

        def resolve() -> tuple[int, Optional[int]]:
            owner = author_id()
            if not series_ids:
                series_ids.append(self._repository.upsert_series(owner, series_name, scanned_at))
            return owner, series_ids[0]

        return resolve

    async def _process_book_safely(
        self,
        book_dir: Path,
        kind: BookKind,
        author_name: str,
        series_name: Optional[str],
        resolve_parents: ParentResolver,
        policy: MetadataEnrichmentPolicy,
        enabled: bool,
        scanned_at: datetime,
        result: ScanResult,
    ) -> None:
        try:
            is_new = await self.process_book_directory(
                book_dir, kind, author_name, series_name, resolve_parents,
                policy, enabled, scanned_at,
            )
        except Exception as e:
            logger.error("Erreur sur un livre", book=str(book_dir), error=str(e))
            result.errors.append(f"Error scanning book {book_dir.name}: {e}")
            return
        if is_new is not None:
            result.record(is_new)

    async def process_book_directory(
        self,
        book_dir: Path,
        kind: BookKind,
        author_name: str,
        series_name: Optional[str],
        resolve_parents: ParentResolver,
        policy: MetadataEnrichmentPolicy,
        enabled: bool,
        scanned_at: datetime,
    ) -> Optional[bool]:
        """
        Upserte un livre a partir de son dossier.

        resolve_parents n'est appele que si le dossier contient des fichiers
        du type ; il cree au besoin l'auteur et la serie et renvoie
        (author_id, series_id).

        Returns:
            True si le livre est nouveau, False s'il existait,
            None si le dossier ne contient aucun fichier du type
        """
        files = self._file_system.list_files(book_dir, BOOK_EXTENSIONS[kind])
        if not files:
            return None

        file_size = sum(self._file_system.get_size(f) for f in files)
        parts = [kind.directory_name, author_name]
        if series_name is not None:
            parts.append(series_name)
        parts.append(book_dir.name)
        path = Path(*parts).as_posix()

        existing = self._repository.get_book_by_path(path)
        title = book_dir.name

        async def fetch() -> Optional[dict]:
            candidates = await self._book_client.search_books(title, author_name)
            best = select_best_candidate(candidates, title, author_name)
            if best is None:
                return None
            data = asdict(best)
            data["cover_url"] = await self._store_image(data["cover_url"], book_dir, COVER_FILENAME)
            return data

        outcome = await policy.resolve(
            title,
            existing.metadata_json if existing else None,
            enabled,
            fetch,
        )

        author_id, series_id = resolve_parents()
        self._repository.upsert_book(
            Book(
                author_id=author_id,
                series_id=series_id,
                title=title,
                kind=kind,
                path=path,
                file_size=file_size,
                last_scanned_at=scanned_at,
                metadata_json=outcome.metadata_json,
            )
        )
        return existing is None
